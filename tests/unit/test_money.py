"""Unit tests for Money and Balance value objects"""

from decimal import Decimal

import pytest

from akahu_client.domain.models import Balance
from akahu_client.domain.money import Money


def test_money_requires_decimal():
    with pytest.raises(TypeError):
        Money(12.5, "NZD")  # type: ignore[arg-type]


@pytest.mark.parametrize("currency", ["XXX1", "nzd", "", "KIWI"])
def test_money_rejects_unknown_currency(currency: str):
    with pytest.raises(ValueError):
        Money(Decimal("1"), currency)


@pytest.mark.parametrize("amount", [Decimal("NaN"), Decimal("Infinity")])
def test_money_rejects_non_finite(amount: Decimal):
    with pytest.raises(ValueError):
        Money(amount, "NZD")


def test_money_arithmetic_is_exact():
    total = Money(Decimal("0.1"), "NZD") + Money(Decimal("0.2"), "NZD")
    assert total == Money(Decimal("0.3"), "NZD")
    assert Money(Decimal("5"), "NZD") - Money(Decimal("7.25"), "NZD") == Money(Decimal("-2.25"), "NZD")
    assert -Money(Decimal("3"), "AUD") == Money(Decimal("-3"), "AUD")


def test_money_refuses_mixed_currencies():
    with pytest.raises(ValueError):
        Money(Decimal("1"), "NZD") + Money(Decimal("1"), "AUD")


def test_money_str():
    assert str(Money(Decimal("-19.99"), "NZD")) == "-19.99 NZD"


def test_balance_shares_one_currency():
    balance = Balance(
        current=Money(Decimal("100"), "NZD"),
        available=Money(Decimal("80"), "NZD"),
        limit=Money(Decimal("500"), "NZD"),
    )
    assert balance.currency == "NZD"


def test_balance_rejects_mixed_currencies():
    with pytest.raises(ValueError):
        Balance(current=Money(Decimal("100"), "NZD"), available=Money(Decimal("80"), "AUD"))
