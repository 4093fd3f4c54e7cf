"""Akahu OAuth scopes

Scopes are advisory here: the client never requests or enforces them. They let
callers check the permissions a user granted (the space-separated `scope`
string returned by the token exchange) before calling an endpoint.
"""

from enum import Enum
from typing import Iterable


class ConsentFlow(str, Enum):
    ENDURING = "ENDURING"
    ONE_OFF = "ONE_OFF"


class Scope(str, Enum):
    # Enduring consent
    ENDURING_CONSENT = "ENDURING_CONSENT"
    AKAHU = "AKAHU"
    ACCOUNTS = "ACCOUNTS"
    TRANSACTIONS = "TRANSACTIONS"  # enduring and one-off
    TRANSFERS = "TRANSFERS"
    PAYMENTS = "PAYMENTS"
    IDENTITY_NAMES = "IDENTITY_NAMES"
    IDENTITY_DOBS = "IDENTITY_DOBS"
    IDENTITY_EMAILS = "IDENTITY_EMAILS"
    IDENTITY_PHONES = "IDENTITY_PHONES"
    IDENTITY_TAX_NUMBERS = "IDENTITY_TAX_NUMBERS"
    # One-off consent
    ONEOFF = "ONEOFF"
    HOLDER = "HOLDER"
    ADDRESS = "ADDRESS"
    ACCOUNT = "ACCOUNT"
    STATEMENTS = "STATEMENTS"
    PDF_EXPORTS = "PDF_EXPORTS"

    @property
    def flows(self) -> frozenset[ConsentFlow]:
        if self is Scope.TRANSACTIONS:
            return frozenset({ConsentFlow.ENDURING, ConsentFlow.ONE_OFF})
        if self in _ONE_OFF_SCOPES:
            return frozenset({ConsentFlow.ONE_OFF})
        return frozenset({ConsentFlow.ENDURING})

    @property
    def is_flow_marker(self) -> bool:
        """True for the scope that selects the consent flow itself"""
        return self in (Scope.ENDURING_CONSENT, Scope.ONEOFF)


_ONE_OFF_SCOPES = frozenset(
    {Scope.ONEOFF, Scope.HOLDER, Scope.ADDRESS, Scope.ACCOUNT, Scope.STATEMENTS, Scope.PDF_EXPORTS}
)

# Scopes each client operation needs on the user's consent.
ENDPOINT_SCOPES: dict[str, frozenset[Scope]] = {
    "get_accounts": frozenset({Scope.ACCOUNTS}),
    "get_account": frozenset({Scope.ACCOUNTS}),
    "get_transactions": frozenset({Scope.TRANSACTIONS}),
    "get_transaction_page": frozenset({Scope.TRANSACTIONS}),
    "get_account_transactions": frozenset({Scope.TRANSACTIONS}),
    "get_pending_transactions": frozenset({Scope.TRANSACTIONS}),
    "get_account_pending_transactions": frozenset({Scope.TRANSACTIONS}),
    "get_me": frozenset(),
    "get_connections": frozenset(),  # app-scoped
    "get_connection": frozenset(),
    "refresh": frozenset({Scope.ACCOUNTS}),
}


def parse_scopes(text: str) -> tuple[Scope, ...]:
    """
    Parse a space-separated scope string such as "ENDURING_CONSENT ACCOUNTS".

    Raises:
        ValueError: If a token is not a known scope literal
    """
    return tuple(Scope(token) for token in text.split())


def format_scopes(scopes: Iterable[Scope]) -> str:
    return " ".join(scope.value for scope in scopes)


def missing_scopes(granted: Iterable[Scope], operation: str) -> frozenset[Scope]:
    """Scopes an operation needs that are absent from `granted`"""
    try:
        required = ENDPOINT_SCOPES[operation]
    except KeyError:
        raise ValueError(f"Unknown client operation: {operation}") from None
    return required - frozenset(granted)
