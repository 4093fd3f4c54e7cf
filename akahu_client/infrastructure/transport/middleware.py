"""
Transport middleware.

Each middleware wraps another Transport and is itself a Transport, so they
compose by nesting:

    transport = MetricsTransport(
        RetryTransport(ConcurrencyLimitTransport(HttpxTransport(), max_in_flight=4))
    )

Client operations are unaware of them; `AkahuClient.from_settings` composes
the default stack with `build_transport`.
"""

import asyncio
import logging
import time

from akahu_client.config import Settings
from akahu_client.domain.exceptions import TransportError
from akahu_client.infrastructure.observability.metrics import (
    in_flight_gauge,
    record_response,
    record_transport_failure,
    retry_counter,
)
from akahu_client.infrastructure.transport.base import Request, Response, Transport
from akahu_client.infrastructure.transport.httpx_transport import HttpxTransport

logger = logging.getLogger(__name__)


class ConcurrencyLimitTransport:
    """
    Admits at most `max_in_flight` calls at once.

    `ready()` takes an admission permit, suspending while none is free; the
    permit is given back when the matching `call()` completes or fails.
    """

    def __init__(self, inner: Transport, max_in_flight: int):
        if max_in_flight < 1:
            raise ValueError(f"max_in_flight must be at least 1, got {max_in_flight}")
        self.inner = inner
        self.max_in_flight = max_in_flight
        self._permits = asyncio.Semaphore(max_in_flight)

    async def ready(self) -> None:
        await self._permits.acquire()
        try:
            await self.inner.ready()
        except BaseException:
            self._permits.release()
            raise
        in_flight_gauge.inc()

    async def call(self, request: Request) -> Response:
        try:
            return await self.inner.call(request)
        finally:
            in_flight_gauge.dec()
            self._permits.release()

    async def aclose(self) -> None:
        await _close(self.inner)


class TimeoutTransport:
    """Bounds each call; expiry raises TransportError"""

    def __init__(self, inner: Transport, seconds: float):
        self.inner = inner
        self.seconds = seconds

    async def ready(self) -> None:
        await self.inner.ready()

    async def call(self, request: Request) -> Response:
        try:
            return await asyncio.wait_for(self.inner.call(request), timeout=self.seconds)
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"{request.method} {request.url} timed out after {self.seconds}s"
            ) from e

    async def aclose(self) -> None:
        await _close(self.inner)


class RetryTransport:
    """
    Retries network failures and 5xx responses with exponential backoff.

    Retry strategy:
    - Backoff of backoff_base * 2^(attempt-1): 0.5s, 1s, 2s... by default
    - Each retry waits for the inner transport to be ready again
    - Exhausted retries return the last response or re-raise the last failure
    """

    def __init__(self, inner: Transport, max_attempts: int = 3, backoff_base: float = 0.5):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.inner = inner
        self.max_attempts = max_attempts
        self.backoff_base = backoff_base

    async def ready(self) -> None:
        await self.inner.ready()

    async def call(self, request: Request) -> Response:
        attempt = 1
        while True:
            try:
                response = await self.inner.call(request)
                if response.status_code < 500 or attempt >= self.max_attempts:
                    return response
                reason = f"status {response.status_code}"
            except TransportError as e:
                if attempt >= self.max_attempts:
                    raise
                reason = str(e)

            backoff = self.backoff_base * (2 ** (attempt - 1))
            logger.warning(
                "Retrying Akahu request",
                extra={
                    "method": request.method,
                    "attempt": attempt,
                    "backoff_seconds": backoff,
                    "reason": reason,
                },
            )
            retry_counter.inc()
            await asyncio.sleep(backoff)
            attempt += 1
            await self.inner.ready()

    async def aclose(self) -> None:
        await _close(self.inner)


class MetricsTransport:
    """Records latency per method and status, and calls that got no response"""

    def __init__(self, inner: Transport):
        self.inner = inner

    async def ready(self) -> None:
        await self.inner.ready()

    async def call(self, request: Request) -> Response:
        start = time.perf_counter()
        try:
            response = await self.inner.call(request)
        except TransportError:
            record_transport_failure(request.method)
            raise
        record_response(request.method, response.status_code, time.perf_counter() - start)
        return response

    async def aclose(self) -> None:
        await _close(self.inner)


async def _close(transport: Transport) -> None:
    aclose = getattr(transport, "aclose", None)
    if aclose is not None:
        await aclose()


def build_transport(settings: Settings) -> Transport:
    """Default stack from configuration: httpx, optional admission limit, metrics"""
    transport: Transport = HttpxTransport(timeout=settings.http_timeout_seconds)
    if settings.max_in_flight is not None:
        transport = ConcurrencyLimitTransport(transport, settings.max_in_flight)
    return MetricsTransport(transport)
