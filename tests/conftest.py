"""Pytest fixtures for testing"""

from pathlib import Path
from typing import Any, Callable

import pytest

from akahu_client.domain.credentials import AppSecret, AppToken, UserToken
from akahu_client.infrastructure.clients.akahu import AkahuClient
from akahu_client.infrastructure.transport.base import Request, Response
from akahu_client.serialization.fields import dump_json, load_json

STUB_DIR = Path(__file__).resolve().parents[1] / "mock_server" / "akahu_stub"

BASE_URL = "https://api.akahu.test/v1"


class RecordingTransport:
    """Scripted transport: replays queued responses (or raises queued exceptions)"""

    def __init__(self, *responses: Response | BaseException):
        self.responses = list(responses)
        self.requests: list[Request] = []
        self.events: list[str] = []

    async def ready(self) -> None:
        self.events.append("ready")

    async def call(self, request: Request) -> Response:
        self.events.append("call")
        self.requests.append(request)
        outcome = self.responses.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def json_response(payload: Any, status_code: int = 200) -> Response:
    return Response(status_code=status_code, body=dump_json(payload))


@pytest.fixture
def app_token() -> AppToken:
    return AppToken("app_token_test")


@pytest.fixture
def user_token() -> UserToken:
    return UserToken("user_token_test")


@pytest.fixture
def stub() -> Callable[[str], Any]:
    """Load a mock server stub with Decimal-preserving JSON parsing"""

    def load(name: str) -> Any:
        return load_json((STUB_DIR / f"{name}.json").read_bytes())

    return load


@pytest.fixture
def stub_bytes() -> Callable[[str], bytes]:
    def load(name: str) -> bytes:
        return (STUB_DIR / f"{name}.json").read_bytes()

    return load


@pytest.fixture
def make_client(app_token: AppToken) -> Callable[..., tuple[AkahuClient, RecordingTransport]]:
    """Client wired to a RecordingTransport that replays the given responses"""

    def build(
        *responses: Response | BaseException, app_secret: AppSecret | None = None
    ) -> tuple[AkahuClient, RecordingTransport]:
        transport = RecordingTransport(*responses)
        client = AkahuClient(app_token, transport=transport, base_url=BASE_URL, app_secret=app_secret)
        return client, transport

    return build


@pytest.fixture
def respond() -> Callable[..., Response]:
    return json_response


@pytest.fixture
def recording_transport() -> Callable[..., RecordingTransport]:
    return RecordingTransport
