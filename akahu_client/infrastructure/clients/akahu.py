"""Akahu API client for accounts, transactions and the authorised user"""

import base64
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from akahu_client.config import Settings
from akahu_client.domain.credentials import AppSecret, AppToken, UserToken
from akahu_client.domain.exceptions import (
    DecodeError,
    MissingAppSecretError,
    TransportError,
    raise_for_status,
    status_error,
)
from akahu_client.domain.models import Account, Connection, Page, PendingTransaction, Transaction, User
from akahu_client.infrastructure.observability.logging import log_api_call
from akahu_client.infrastructure.transport.base import Request, Response, Transport
from akahu_client.infrastructure.transport.httpx_transport import HttpxTransport
from akahu_client.infrastructure.transport.middleware import build_transport
from akahu_client.serialization.codecs import (
    ACCOUNT,
    CONNECTION,
    PENDING_TRANSACTION,
    TRANSACTION,
    USER,
    decode_item,
    decode_items,
    decode_page,
)
from akahu_client.serialization.fields import load_json
from akahu_client.utils.date_utils import ensure_utc, format_timestamp
from akahu_client.utils.http_utils import (
    ACCEPT_HEADER,
    AKAHU_ID_HEADER,
    AUTHORIZATION_HEADER,
    DEFAULT_BASE_URL,
    JSON_MEDIA_TYPE,
    build_url,
    path_segment,
)

logger = logging.getLogger(__name__)

ACCOUNT_PREFIX = "acc_"
CONNECTION_PREFIX = "conn_"


@dataclass(frozen=True)
class TransactionQuery:
    """
    Time window and cursor for a transaction listing.

    `start` is exclusive and `end` inclusive. Both must be timezone-aware;
    they are stored in UTC and sent at millisecond resolution.
    """

    start: datetime | None = None
    end: datetime | None = None
    cursor: str | None = None

    def __post_init__(self) -> None:
        if self.start is not None:
            object.__setattr__(self, "start", ensure_utc(self.start))
        if self.end is not None:
            object.__setattr__(self, "end", ensure_utc(self.end))
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError(
                f"Query start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )

    def params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.start is not None:
            params["start"] = format_timestamp(self.start)
        if self.end is not None:
            params["end"] = format_timestamp(self.end)
        if self.cursor is not None:
            params["cursor"] = self.cursor
        return params


def _require_id(value: str, prefixes: tuple[str, ...], name: str) -> str:
    if not isinstance(value, str) or not value.startswith(prefixes):
        raise ValueError(f"{name} must start with {' or '.join(prefixes)}, got {value!r}")
    return value


class AkahuClient:
    """
    Typed client for the Akahu API.

    Every call follows the same sequence: build the request, wait for the
    transport to be ready, call it, map non-2xx statuses to HTTPStatusError
    subclasses and decode the body into domain models. The client keeps no
    mutable state, never retries and never caches.

    User-scoped calls take a UserToken. App-scoped calls (connections) use
    HTTP Basic auth with the app token and `app_secret`.
    """

    def __init__(
        self,
        app_token: AppToken,
        transport: Transport | None = None,
        base_url: str | None = None,
        app_secret: AppSecret | None = None,
    ):
        if not isinstance(app_token, AppToken):
            raise TypeError(f"app_token must be an AppToken, got {type(app_token).__name__}")
        if app_secret is not None and not isinstance(app_secret, AppSecret):
            raise TypeError(f"app_secret must be an AppSecret, got {type(app_secret).__name__}")
        self._app_token = app_token
        self._app_secret = app_secret
        self._transport = transport if transport is not None else HttpxTransport()
        self._base_url = base_url or DEFAULT_BASE_URL

    @classmethod
    def from_settings(cls, settings: Settings, transport: Transport | None = None) -> "AkahuClient":
        """
        Build a client from configuration.

        Without an explicit transport the stack from `build_transport` is
        used, so the timeout and max_in_flight settings apply.

        Raises:
            InvalidCredentialError: If no app token is configured
        """
        if transport is None:
            transport = build_transport(settings)
        app_secret = AppSecret(settings.app_secret) if settings.app_secret else None
        return cls(
            AppToken(settings.app_token or ""),
            transport=transport,
            base_url=settings.base_url,
            app_secret=app_secret,
        )

    @property
    def app_token(self) -> AppToken:
        return self._app_token

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def __repr__(self) -> str:
        return f"AkahuClient(base_url={self._base_url!r})"

    async def aclose(self) -> None:
        aclose = getattr(self._transport, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> "AkahuClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # -- Accounts -------------------------------------------------------------

    async def get_accounts(self, user_token: UserToken) -> list[Account]:
        """List every account the user has shared with the app"""
        payload = await self._get(user_token, "accounts")
        return list(self._decode(payload, decode_items, ACCOUNT))

    async def get_account(self, user_token: UserToken, account_id: str) -> Account:
        """
        Fetch one account by id.

        Raises:
            ValueError: If account_id is not an acc_ id
            NotFoundError: If the account does not exist or is not shared
        """
        _require_id(account_id, (ACCOUNT_PREFIX,), "account_id")
        payload = await self._get(user_token, f"accounts/{path_segment(account_id)}")
        return self._decode(payload, decode_item, ACCOUNT)

    # -- Transactions ---------------------------------------------------------

    async def get_transactions(
        self, user_token: UserToken, query: TransactionQuery | None = None
    ) -> list[Transaction]:
        """Settled transactions across all accounts, one page only"""
        page = await self.get_transaction_page(user_token, query)
        return list(page.items)

    async def get_transaction_page(
        self, user_token: UserToken, query: TransactionQuery | None = None
    ) -> Page[Transaction]:
        """
        One page of settled transactions with the cursor for the next page.

        Following `next_cursor` is left to the caller.
        """
        payload = await self._get(user_token, "transactions", _query_params(query))
        return self._decode(payload, decode_page, TRANSACTION)

    async def get_account_transactions(
        self,
        user_token: UserToken,
        account_id: str,
        query: TransactionQuery | None = None,
    ) -> list[Transaction]:
        """Settled transactions of one account, one page only"""
        _require_id(account_id, (ACCOUNT_PREFIX,), "account_id")
        payload = await self._get(
            user_token,
            f"accounts/{path_segment(account_id)}/transactions",
            _query_params(query),
        )
        return list(self._decode(payload, decode_page, TRANSACTION).items)

    async def get_pending_transactions(self, user_token: UserToken) -> list[PendingTransaction]:
        payload = await self._get(user_token, "transactions/pending")
        return list(self._decode(payload, decode_items, PENDING_TRANSACTION))

    async def get_account_pending_transactions(
        self, user_token: UserToken, account_id: str
    ) -> list[PendingTransaction]:
        """Pending transactions of one account"""
        _require_id(account_id, (ACCOUNT_PREFIX,), "account_id")
        payload = await self._get(user_token, f"accounts/{path_segment(account_id)}/transactions/pending")
        return list(self._decode(payload, decode_items, PENDING_TRANSACTION))

    # -- User -----------------------------------------------------------------

    async def get_me(self, user_token: UserToken) -> User:
        """Profile of the user who granted `user_token`"""
        payload = await self._get(user_token, "me")
        return self._decode(payload, decode_item, USER)

    # -- Connections ----------------------------------------------------------

    async def get_connections(self) -> list[Connection]:
        """
        Every financial institution the app can connect to.

        Raises:
            MissingAppSecretError: If the client has no app secret
        """
        payload = await self._app_get("connections")
        return list(self._decode(payload, decode_items, CONNECTION))

    async def get_connection(self, connection_id: str) -> Connection:
        """
        Fetch one connection by id.

        Raises:
            ValueError: If connection_id is not a conn_ id
            MissingAppSecretError: If the client has no app secret
            NotFoundError: If Akahu has no such connection
        """
        _require_id(connection_id, (CONNECTION_PREFIX,), "connection_id")
        payload = await self._app_get(f"connections/{path_segment(connection_id)}")
        return self._decode(payload, decode_item, CONNECTION)

    # -- Refresh --------------------------------------------------------------

    async def refresh(self, user_token: UserToken, target_id: str | None = None) -> None:
        """
        Ask Akahu to refresh data from the providers.

        With no target every connection of the user is refreshed; otherwise
        `target_id` names one account (acc_) or one connection (conn_).
        Refreshes run asynchronously on Akahu's side.
        """
        path = "refresh"
        if target_id is not None:
            _require_id(target_id, (ACCOUNT_PREFIX, CONNECTION_PREFIX), "target_id")
            path = f"refresh/{path_segment(target_id)}"
        response = await self._send("POST", path, self._headers(user_token))
        if response.body.strip():
            self._parse(response)

    # -- Internals ------------------------------------------------------------

    def _headers(self, user_token: UserToken) -> dict[str, str]:
        if not isinstance(user_token, UserToken):
            raise TypeError(f"user_token must be a UserToken, got {type(user_token).__name__}")
        return {
            AKAHU_ID_HEADER: self._app_token.value,
            AUTHORIZATION_HEADER: user_token.authorization,
            ACCEPT_HEADER: JSON_MEDIA_TYPE,
        }

    def _app_headers(self) -> dict[str, str]:
        if self._app_secret is None:
            raise MissingAppSecretError("Missing app secret, pass app_secret to AkahuClient")
        basic = base64.b64encode(f"{self._app_token.value}:{self._app_secret.value}".encode()).decode()
        return {
            AKAHU_ID_HEADER: self._app_token.value,
            AUTHORIZATION_HEADER: f"Basic {basic}",
            ACCEPT_HEADER: JSON_MEDIA_TYPE,
        }

    async def _send(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        params: dict[str, str] | None = None,
    ) -> Response:
        """
        Run one request through the transport and check its status.

        Raises:
            TransportError: If no response was obtained
            HTTPStatusError: On any non-2xx status (subclass per status)
        """
        request = Request(method, build_url(self._base_url, path, params), headers)
        start = time.perf_counter()
        try:
            await self._transport.ready()
            response = await self._transport.call(request)
        except OSError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e
        log_api_call(method, path, response.status_code, (time.perf_counter() - start) * 1000)

        raise_for_status(response)
        return response

    async def _get(
        self, user_token: UserToken, path: str, params: dict[str, str] | None = None
    ) -> Any:
        response = await self._send("GET", path, self._headers(user_token), params)
        return self._parse(response)

    async def _app_get(self, path: str) -> Any:
        response = await self._send("GET", path, self._app_headers())
        return self._parse(response)

    @staticmethod
    def _parse(response: Response) -> Any:
        payload = load_json(response.body)
        if isinstance(payload, dict) and payload.get("success") is False:
            raise status_error(response.status_code, response.body)
        return payload

    @staticmethod
    def _decode(payload: Any, envelope, codec) -> Any:
        try:
            return envelope(payload, codec)
        except DecodeError as e:
            logger.warning("Akahu response failed to decode", extra={"path": e.path, "reason": e.reason})
            raise


def _query_params(query: TransactionQuery | None) -> dict[str, str] | None:
    return query.params() if query is not None else None
