"""Default transport backed by httpx.AsyncClient"""

import httpx

from akahu_client.config import settings
from akahu_client.domain.exceptions import TransportError
from akahu_client.infrastructure.transport.base import Request, Response


class HttpxTransport:
    """Transport over a shared httpx.AsyncClient connection pool"""

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float | None = None):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout or settings.http_timeout_seconds)
        self._closed = False

    async def ready(self) -> None:
        if self._closed or self._client.is_closed:
            raise TransportError("Transport is closed")

    async def call(self, request: Request) -> Response:
        """
        Send one request.

        Raises:
            TransportError: On connect failures, timeouts or protocol errors
        """
        try:
            response = await self._client.request(
                request.method,
                request.url,
                headers=dict(request.headers),
                content=request.body,
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"Timed out calling {request.method} {request.url}") from e
        except httpx.RequestError as e:
            raise TransportError(f"{type(e).__name__} calling {request.method} {request.url}: {e}") from e
        return Response(
            status_code=response.status_code,
            body=response.content,
            headers=dict(response.headers),
        )

    async def aclose(self) -> None:
        self._closed = True
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
