"""Unit tests for the OAuth scope model and NZFCC category lookup"""

import pytest

from akahu_client.domain.categories import NzfccCode, PersonalFinanceGroup
from akahu_client.domain.scopes import (
    ENDPOINT_SCOPES,
    ConsentFlow,
    Scope,
    format_scopes,
    missing_scopes,
    parse_scopes,
)


def test_scope_wire_literals():
    assert {scope.value for scope in Scope} == {
        "ENDURING_CONSENT", "AKAHU", "ACCOUNTS", "TRANSACTIONS", "TRANSFERS", "PAYMENTS",
        "IDENTITY_NAMES", "IDENTITY_DOBS", "IDENTITY_EMAILS", "IDENTITY_PHONES",
        "IDENTITY_TAX_NUMBERS", "ONEOFF", "HOLDER", "ADDRESS", "ACCOUNT", "STATEMENTS",
        "PDF_EXPORTS",
    }


def test_parse_and_format_scope_string():
    scopes = parse_scopes("ENDURING_CONSENT ACCOUNTS  TRANSACTIONS")
    assert scopes == (Scope.ENDURING_CONSENT, Scope.ACCOUNTS, Scope.TRANSACTIONS)
    assert format_scopes(scopes) == "ENDURING_CONSENT ACCOUNTS TRANSACTIONS"


def test_parse_unknown_scope_fails():
    with pytest.raises(ValueError):
        parse_scopes("ACCOUNTS accounts")


def test_consent_flows():
    assert Scope.TRANSACTIONS.flows == {ConsentFlow.ENDURING, ConsentFlow.ONE_OFF}
    assert Scope.STATEMENTS.flows == {ConsentFlow.ONE_OFF}
    assert Scope.PAYMENTS.flows == {ConsentFlow.ENDURING}
    assert Scope.ONEOFF.is_flow_marker
    assert not Scope.ACCOUNTS.is_flow_marker


def test_missing_scopes_for_operation():
    assert missing_scopes([Scope.ACCOUNTS], "get_transactions") == {Scope.TRANSACTIONS}
    assert missing_scopes([Scope.ACCOUNTS, Scope.TRANSACTIONS], "get_account_transactions") == set()
    assert missing_scopes([], "get_me") == set()


def test_missing_scopes_unknown_operation():
    with pytest.raises(ValueError):
        missing_scopes([], "delete_everything")


def test_every_client_operation_has_scopes():
    assert set(ENDPOINT_SCOPES) == {
        "get_accounts", "get_account", "get_transactions", "get_transaction_page",
        "get_account_transactions", "get_pending_transactions",
        "get_account_pending_transactions", "get_me", "get_connections", "get_connection",
        "refresh",
    }


def test_category_lookup_falls_back_to_unknown():
    assert NzfccCode.parse("Cafes and restaurants") is NzfccCode.CAFES_AND_RESTAURANTS
    assert NzfccCode.parse("Quantum tailoring") is NzfccCode.UNKNOWN
    assert PersonalFinanceGroup.parse("Food") is PersonalFinanceGroup.FOOD
    assert PersonalFinanceGroup.parse("Space travel") is PersonalFinanceGroup.UNKNOWN


def test_income_and_transfer_categories_are_known():
    assert NzfccCode.parse("Salary and wages") is NzfccCode.SALARY_AND_WAGES
    assert PersonalFinanceGroup.parse("Income") is PersonalFinanceGroup.INCOME
    assert PersonalFinanceGroup.parse("Transfers") is PersonalFinanceGroup.TRANSFERS
    assert NzfccCode.parse("Internal transfers") is NzfccCode.INTERNAL_TRANSFERS
