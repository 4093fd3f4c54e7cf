"""Akahu credentials - distinct token and secret types that cannot be mixed"""

from dataclasses import dataclass, field

from akahu_client.domain.exceptions import InvalidCredentialError


def _require_value(kind: str, value: str) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{kind} value must be a str, got {type(value).__name__}")
    if not value.strip():
        raise InvalidCredentialError(f"{kind} must not be empty")


@dataclass(frozen=True)
class AppToken:
    """Identifies the calling application, sent as `X-Akahu-Id` on every call"""

    value: str = field(repr=False)

    def __post_init__(self) -> None:
        _require_value("AppToken", self.value)

    def __str__(self) -> str:
        return "AppToken(***)"


@dataclass(frozen=True)
class UserToken:
    """A user's OAuth access token, sent as a bearer token on user-scoped calls"""

    value: str = field(repr=False)

    def __post_init__(self) -> None:
        _require_value("UserToken", self.value)

    def __str__(self) -> str:
        return "UserToken(***)"

    @property
    def authorization(self) -> str:
        return f"Bearer {self.value}"


@dataclass(frozen=True)
class AppSecret:
    """The app's secret, only needed for app-scoped calls such as connections"""

    value: str = field(repr=False)

    def __post_init__(self) -> None:
        _require_value("AppSecret", self.value)

    def __str__(self) -> str:
        return "AppSecret(***)"
