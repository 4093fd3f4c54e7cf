"""Unit tests for AppToken, UserToken and AppSecret"""

import pytest

from akahu_client.domain.credentials import AppSecret, AppToken, UserToken
from akahu_client.domain.exceptions import AkahuError, InvalidCredentialError


@pytest.mark.parametrize("value", ["", "   ", "\n\t"])
def test_empty_tokens_rejected(value: str):
    with pytest.raises(InvalidCredentialError):
        AppToken(value)
    with pytest.raises(InvalidCredentialError):
        UserToken(value)
    with pytest.raises(InvalidCredentialError):
        AppSecret(value)


def test_invalid_credential_is_value_error():
    """Callers catching ValueError or AkahuError both see it"""
    with pytest.raises(ValueError):
        UserToken("")
    with pytest.raises(AkahuError):
        UserToken("")


def test_non_string_token_rejected():
    with pytest.raises(TypeError):
        AppToken(None)  # type: ignore[arg-type]


def test_token_value_never_in_repr_or_str():
    app = AppToken("app_token_secret123")
    user = UserToken("user_token_secret456")
    app_secret = AppSecret("app_secret_secret789")

    for text in (repr(app), str(app), repr(user), str(user), repr(app_secret), str(app_secret)):
        assert "secret" not in text


def test_user_token_authorization_header():
    assert UserToken("user_token_abc").authorization == "Bearer user_token_abc"


def test_token_kinds_are_distinct():
    """Same value, different types: never equal"""
    assert AppToken("token_x") != UserToken("token_x")
    assert AppToken("token_x") == AppToken("token_x")


def test_tokens_are_immutable():
    token = AppToken("app_token_abc")
    with pytest.raises(AttributeError):
        token.value = "other"  # type: ignore[misc]
