"""Money value object - exact decimal amount paired with an ISO 4217 currency"""

from dataclasses import dataclass
from decimal import Decimal

from akahu_client.domain.currencies import is_currency_code


@dataclass(frozen=True)
class Money:
    """
    Signed monetary amount.

    Amounts are always Decimal; floats are refused so that no binary rounding
    ever enters an aggregation. A negative amount is money leaving an account
    (or owed on a credit card / loan balance).
    """

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise TypeError(f"Money amount must be Decimal, got {type(self.amount).__name__}")
        if not self.amount.is_finite():
            raise ValueError(f"Money amount must be finite, got {self.amount}")
        if not is_currency_code(self.currency):
            raise ValueError(f"Unknown ISO 4217 currency code: {self.currency!r}")

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def __neg__(self) -> "Money":
        return Money(-self.amount, self.currency)

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        if other.currency != self.currency:
            raise ValueError(f"Cannot add {other.currency} to {self.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return self + (-other)
