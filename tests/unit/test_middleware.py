"""Unit tests for transport middleware composition"""

import asyncio

import pytest
from prometheus_client import REGISTRY

from akahu_client.config import Settings
from akahu_client.domain.exceptions import TransportError
from akahu_client.infrastructure.clients.akahu import AkahuClient
from akahu_client.infrastructure.transport.base import Request, Response, Transport
from akahu_client.infrastructure.transport.httpx_transport import HttpxTransport
from akahu_client.infrastructure.transport.middleware import (
    ConcurrencyLimitTransport,
    MetricsTransport,
    RetryTransport,
    TimeoutTransport,
    build_transport,
)

REQUEST = Request("GET", "https://api.akahu.test/v1/accounts")


class SlowTransport:
    """Holds every call until released"""

    def __init__(self):
        self.release = asyncio.Event()
        self.in_flight = 0
        self.peak = 0

    async def ready(self) -> None:
        pass

    async def call(self, request: Request) -> Response:
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await self.release.wait()
            return Response(200, b"{}")
        finally:
            self.in_flight -= 1


async def _ready_then_call(transport: Transport) -> Response:
    await transport.ready()
    return await transport.call(REQUEST)


async def test_middleware_are_transports(recording_transport):
    inner = recording_transport()
    for transport in (
        ConcurrencyLimitTransport(inner, 1),
        TimeoutTransport(inner, 1.0),
        RetryTransport(inner),
        MetricsTransport(inner),
    ):
        assert isinstance(transport, Transport)


async def test_concurrency_limit_applies_backpressure():
    inner = SlowTransport()
    limited = ConcurrencyLimitTransport(inner, max_in_flight=2)

    tasks = [asyncio.create_task(_ready_then_call(limited)) for _ in range(5)]
    await asyncio.sleep(0.01)

    assert inner.in_flight == 2
    inner.release.set()
    responses = await asyncio.gather(*tasks)

    assert [r.status_code for r in responses] == [200] * 5
    assert inner.peak == 2


async def test_concurrency_limit_readiness_blocks_until_permit_returned():
    inner = SlowTransport()
    limited = ConcurrencyLimitTransport(inner, max_in_flight=1)

    first = asyncio.create_task(_ready_then_call(limited))
    await asyncio.sleep(0.01)
    second_ready = asyncio.create_task(limited.ready())
    await asyncio.sleep(0.01)

    assert not second_ready.done()
    inner.release.set()
    await first
    await asyncio.wait_for(second_ready, timeout=1.0)


async def test_concurrency_limit_releases_permit_on_failure(recording_transport):
    inner = recording_transport(TransportError("reset"), Response(200, b"{}"))
    limited = ConcurrencyLimitTransport(inner, max_in_flight=1)

    with pytest.raises(TransportError):
        await _ready_then_call(limited)

    response = await asyncio.wait_for(_ready_then_call(limited), timeout=1.0)
    assert response.status_code == 200


async def test_concurrency_limit_releases_permit_when_inner_not_ready():
    class Closed:
        async def ready(self):
            raise TransportError("closed")

        async def call(self, request):
            raise AssertionError

    limited = ConcurrencyLimitTransport(Closed(), max_in_flight=1)
    for _ in range(3):
        with pytest.raises(TransportError):
            await asyncio.wait_for(limited.ready(), timeout=1.0)


def test_concurrency_limit_validates_size(recording_transport):
    with pytest.raises(ValueError):
        ConcurrencyLimitTransport(recording_transport(), max_in_flight=0)


async def test_timeout_becomes_transport_error():
    inner = SlowTransport()

    with pytest.raises(TransportError, match="timed out"):
        await _ready_then_call(TimeoutTransport(inner, seconds=0.01))


async def test_retry_on_server_error_then_success(recording_transport):
    inner = recording_transport(Response(503), Response(200, b"{}"))
    transport = RetryTransport(inner, max_attempts=3, backoff_base=0)

    response = await _ready_then_call(transport)

    assert response.status_code == 200
    assert inner.events == ["ready", "call", "ready", "call"]


async def test_retry_gives_up_with_last_response(recording_transport):
    inner = recording_transport(Response(500), Response(502))
    transport = RetryTransport(inner, max_attempts=2, backoff_base=0)

    assert (await _ready_then_call(transport)).status_code == 502


async def test_retry_reraises_last_transport_error(recording_transport):
    inner = recording_transport(TransportError("first"), TransportError("second"))
    transport = RetryTransport(inner, max_attempts=2, backoff_base=0)

    with pytest.raises(TransportError, match="second"):
        await _ready_then_call(transport)


async def test_retry_leaves_client_errors_alone(recording_transport):
    inner = recording_transport(Response(404), Response(200))
    transport = RetryTransport(inner, max_attempts=3, backoff_base=0)

    assert (await _ready_then_call(transport)).status_code == 404
    assert len(inner.requests) == 1


def _sample(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


async def test_metrics_record_responses_and_failures(recording_transport):
    transport = MetricsTransport(recording_transport(Response(200, b"{}"), TransportError("reset")))
    ok_before = _sample("akahu_responses_total", {"method": "GET", "status_class": "2xx"})
    failed_before = _sample("akahu_transport_failures_total", {"method": "GET"})

    await _ready_then_call(transport)
    with pytest.raises(TransportError):
        await _ready_then_call(transport)

    assert _sample("akahu_responses_total", {"method": "GET", "status_class": "2xx"}) == ok_before + 1
    assert _sample("akahu_transport_failures_total", {"method": "GET"}) == failed_before + 1


async def test_client_over_composed_stack(recording_transport, respond, app_token, user_token):
    inner = recording_transport(Response(500), respond({"success": True, "items": []}))
    transport = MetricsTransport(
        RetryTransport(ConcurrencyLimitTransport(inner, max_in_flight=1), backoff_base=0)
    )
    client = AkahuClient(app_token, transport=transport)

    assert await client.get_accounts(user_token) == []
    assert inner.events == ["ready", "call", "ready", "call"]


async def test_build_transport_from_settings():
    transport = build_transport(Settings(max_in_flight=3, http_timeout_seconds=2.5))

    assert isinstance(transport, MetricsTransport)
    assert isinstance(transport.inner, ConcurrencyLimitTransport)
    assert transport.inner.max_in_flight == 3
    assert isinstance(transport.inner.inner, HttpxTransport)
    await transport.aclose()


async def test_build_transport_without_limit():
    transport = build_transport(Settings(max_in_flight=None))

    assert isinstance(transport.inner, HttpxTransport)
    await transport.aclose()
