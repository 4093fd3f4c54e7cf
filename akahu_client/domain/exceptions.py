"""Client exception hierarchy"""

import json
from http import HTTPStatus
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from akahu_client.infrastructure.transport.base import Response


class AkahuError(Exception):
    """Base exception for every failure raised by the client"""

    pass


class InvalidCredentialError(AkahuError, ValueError):
    """A credential was constructed from an empty value"""

    pass


class MissingAppSecretError(AkahuError):
    """An app-scoped endpoint was called on a client built without an app secret"""

    pass


class TransportError(AkahuError):
    """The request never produced an HTTP response (DNS, reset, timeout...)"""

    pass


class HTTPStatusError(AkahuError):
    """Akahu answered with a non-success status"""

    def __init__(self, status_code: int, body: bytes, message: str):
        super().__init__(f"Akahu API error {status_code}: {message}")
        self.status_code = status_code
        self.body = body
        self.message = message


class BadRequestError(HTTPStatusError):
    """400 - invalid request parameters"""

    pass


class AuthError(HTTPStatusError):
    """401/403 - credential missing, revoked or lacking permission"""

    pass


class AuthenticationError(AuthError):
    """401 - invalid or revoked credentials"""

    pass


class PermissionDeniedError(AuthError):
    """403 - insufficient permissions or missing app header"""

    pass


class NotFoundError(HTTPStatusError):
    """404 - resource does not exist or is not visible to the app"""

    pass


class RateLimitedError(HTTPStatusError):
    """429 - too many requests"""

    pass


class ServerError(HTTPStatusError):
    """5xx - failure on Akahu's side"""

    pass


class DecodeError(AkahuError):
    """Response body is not a valid representation of the expected entity"""

    def __init__(self, path: str, reason: str, body: bytes | None = None):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
        self.body = body


_STATUS_ERRORS: dict[int, type[HTTPStatusError]] = {
    400: BadRequestError,
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    429: RateLimitedError,
}


def error_message(status_code: int, body: bytes) -> str:
    """Extract the `message` of an Akahu error body, falling back to the status phrase"""
    try:
        payload = json.loads(body)
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown error"


def status_error(status_code: int, body: bytes, message: str | None = None) -> HTTPStatusError:
    """Build the HTTPStatusError subclass matching a status code"""
    if message is None:
        message = error_message(status_code, body)
    if status_code in _STATUS_ERRORS:
        error_cls = _STATUS_ERRORS[status_code]
    elif status_code >= 500:
        error_cls = ServerError
    else:
        error_cls = HTTPStatusError
    return error_cls(status_code, body, message)


def raise_for_status(response: "Response") -> None:
    """Raise the matching HTTPStatusError for a non-2xx response"""
    if not response.is_success:
        raise status_error(response.status_code, response.body)
