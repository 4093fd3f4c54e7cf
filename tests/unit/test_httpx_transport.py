"""Unit tests for the httpx-backed default transport"""

import httpx
import pytest

from akahu_client.config import settings
from akahu_client.domain.exceptions import TransportError
from akahu_client.infrastructure.transport.base import Request
from akahu_client.infrastructure.transport.httpx_transport import HttpxTransport


def _transport(handler) -> HttpxTransport:
    return HttpxTransport(httpx.AsyncClient(transport=httpx.MockTransport(handler)))


async def test_request_is_forwarded_verbatim():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b'{"success": true, "items": []}')

    transport = _transport(handler)
    await transport.ready()
    response = await transport.call(
        Request(
            "GET",
            "https://api.akahu.test/v1/accounts?start=2025-01-01T00%3A00%3A00.000Z",
            {"X-Akahu-Id": "app_token_test", "Authorization": "Bearer user_token_test"},
        )
    )

    assert response.status_code == 200
    assert response.is_success
    assert response.body == b'{"success": true, "items": []}'
    assert seen[0].headers["x-akahu-id"] == "app_token_test"
    assert seen[0].headers["authorization"] == "Bearer user_token_test"
    assert seen[0].url.params["start"] == "2025-01-01T00:00:00.000Z"


async def test_error_statuses_are_returned_not_raised():
    transport = _transport(lambda request: httpx.Response(404, json={"success": False, "message": "Not found"}))

    response = await transport.call(Request("GET", "https://api.akahu.test/v1/accounts/acc_1"))

    assert response.status_code == 404
    assert not response.is_success


async def test_connect_error_becomes_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as exc_info:
        await _transport(handler).call(Request("GET", "https://api.akahu.test/v1/me"))

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


async def test_timeout_becomes_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(TransportError, match="Timed out"):
        await _transport(handler).call(Request("GET", "https://api.akahu.test/v1/me"))


async def test_closed_transport_is_not_ready():
    transport = HttpxTransport()
    await transport.ready()

    await transport.aclose()

    with pytest.raises(TransportError, match="closed"):
        await transport.ready()


async def test_caller_owned_client_is_left_open():
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))

    async with HttpxTransport(client):
        pass

    assert not client.is_closed
    await client.aclose()


async def test_default_client_has_configured_timeout():
    async with HttpxTransport() as transport:
        assert transport._client.timeout == httpx.Timeout(settings.http_timeout_seconds)


async def test_explicit_timeout_wins():
    async with HttpxTransport(timeout=2.5) as transport:
        assert transport._client.timeout.read == 2.5
