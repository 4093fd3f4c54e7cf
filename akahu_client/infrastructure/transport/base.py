"""Transport seam - the only place HTTP I/O happens"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Protocol, runtime_checkable


def _frozen_headers(headers: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(headers))


@dataclass(frozen=True)
class Request:
    """Fully built HTTP request, ready to hand to a transport"""

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _frozen_headers(self.headers))

    def __repr__(self) -> str:
        # headers carry credentials
        return f"Request(method={self.method!r}, url={self.url!r})"


@dataclass(frozen=True)
class Response:
    status_code: int
    body: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _frozen_headers(self.headers))

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class Transport(Protocol):
    """
    Asynchronous request/response service.

    Callers must await `ready()` before each `call()`. `ready()` may suspend
    while the transport applies backpressure, and raises TransportError when
    the transport can no longer accept work. `call()` performs the I/O: it
    returns every HTTP response regardless of status and raises
    TransportError only when no response was obtained.
    """

    async def ready(self) -> None: ...

    async def call(self, request: Request) -> Response: ...
