"""Mock Akahu API serving JSON stubs, for integration tests and local development"""

import base64
import json
import os
from datetime import datetime
from pathlib import Path

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse

app = FastAPI(title="Mock Akahu API", version="1.0.0")
DATA_DIR = Path(os.environ.get("AKAHU_STUB_DIR", Path(__file__).resolve().parent / "akahu_stub"))

APP_TOKEN = os.environ.get("MOCK_AKAHU_APP_TOKEN", "app_token_mock")
USER_TOKEN = os.environ.get("MOCK_AKAHU_USER_TOKEN", "user_token_mock")
APP_SECRET = os.environ.get("MOCK_AKAHU_APP_SECRET", "app_secret_mock")
PAGE_SIZE = 2


def _load(name: str):
    return json.loads((DATA_DIR / f"{name}.json").read_text())


@app.exception_handler(HTTPException)
async def akahu_error(request: Request, exc: HTTPException) -> JSONResponse:
    """Errors use Akahu's envelope rather than FastAPI's `detail` body"""
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.detail})


def authorise(app_id: str | None, authorization: str | None) -> None:
    if app_id is None:
        raise HTTPException(status_code=403, detail="Missing X-Akahu-Id header")
    if app_id != APP_TOKEN:
        raise HTTPException(status_code=401, detail="Unauthorized")
    if authorization != f"Bearer {USER_TOKEN}":
        raise HTTPException(status_code=401, detail="Unauthorized")


def authorise_app(app_id: str | None, authorization: str | None) -> None:
    """App-scoped endpoints take HTTP Basic auth of app token and app secret"""
    if app_id is None:
        raise HTTPException(status_code=403, detail="Missing X-Akahu-Id header")
    expected = base64.b64encode(f"{APP_TOKEN}:{APP_SECRET}".encode()).decode()
    if app_id != APP_TOKEN or authorization != f"Basic {expected}":
        raise HTTPException(status_code=401, detail="Unauthorized")


def _parse_time(name: str, value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {name} timestamp") from None


def _page(transactions: list[dict], start: str | None, end: str | None, cursor: str | None) -> dict:
    """Filter to (start, end], newest first, PAGE_SIZE items per page"""
    start_at, end_at = _parse_time("start", start), _parse_time("end", end)
    selected = [
        txn
        for txn in transactions
        if (start_at is None or datetime.fromisoformat(txn["date"]) > start_at)
        and (end_at is None or datetime.fromisoformat(txn["date"]) <= end_at)
    ]
    selected.sort(key=lambda txn: txn["date"], reverse=True)

    offset = 0
    if cursor is not None:
        if not cursor.startswith("cursor_") or not cursor[len("cursor_"):].isdigit():
            raise HTTPException(status_code=400, detail="Invalid cursor")
        offset = int(cursor[len("cursor_"):])
    next_offset = offset + PAGE_SIZE
    return {
        "success": True,
        "items": selected[offset:next_offset],
        "cursor": {"next": f"cursor_{next_offset}" if next_offset < len(selected) else None},
    }


def _account(account_id: str) -> dict:
    for account in _load("accounts"):
        if account["_id"] == account_id:
            return account
    raise HTTPException(status_code=404, detail="Account not found")


def _connection(connection_id: str) -> dict:
    for connection in _load("connections"):
        if connection["_id"] == connection_id:
            return connection
    raise HTTPException(status_code=404, detail="Connection not found")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/v1/accounts")
def get_accounts(
    x_akahu_id: str | None = Header(None),
    authorization: str | None = Header(None),
):
    authorise(x_akahu_id, authorization)
    return {"success": True, "items": _load("accounts")}


@app.get("/v1/accounts/{account_id}")
def get_account(
    account_id: str,
    x_akahu_id: str | None = Header(None),
    authorization: str | None = Header(None),
):
    authorise(x_akahu_id, authorization)
    return {"success": True, "item": _account(account_id)}


@app.get("/v1/accounts/{account_id}/transactions")
def get_account_transactions(
    account_id: str,
    start: str | None = None,
    end: str | None = None,
    cursor: str | None = None,
    x_akahu_id: str | None = Header(None),
    authorization: str | None = Header(None),
):
    authorise(x_akahu_id, authorization)
    _account(account_id)
    transactions = [txn for txn in _load("transactions") if txn["_account"] == account_id]
    return _page(transactions, start, end, cursor)


@app.get("/v1/accounts/{account_id}/transactions/pending")
def get_account_pending_transactions(
    account_id: str,
    x_akahu_id: str | None = Header(None),
    authorization: str | None = Header(None),
):
    authorise(x_akahu_id, authorization)
    _account(account_id)
    return {"success": True, "items": [txn for txn in _load("pending") if txn["_account"] == account_id]}


@app.get("/v1/transactions")
def get_transactions(
    start: str | None = None,
    end: str | None = None,
    cursor: str | None = None,
    x_akahu_id: str | None = Header(None),
    authorization: str | None = Header(None),
):
    authorise(x_akahu_id, authorization)
    return _page(_load("transactions"), start, end, cursor)


@app.get("/v1/transactions/pending")
def get_pending_transactions(
    x_akahu_id: str | None = Header(None),
    authorization: str | None = Header(None),
):
    authorise(x_akahu_id, authorization)
    return {"success": True, "items": _load("pending")}


@app.get("/v1/me")
def get_me(
    x_akahu_id: str | None = Header(None),
    authorization: str | None = Header(None),
):
    authorise(x_akahu_id, authorization)
    return {"success": True, "item": _load("me")}


@app.get("/v1/connections")
def get_connections(
    x_akahu_id: str | None = Header(None),
    authorization: str | None = Header(None),
):
    authorise_app(x_akahu_id, authorization)
    return {"success": True, "items": _load("connections")}


@app.get("/v1/connections/{connection_id}")
def get_connection(
    connection_id: str,
    x_akahu_id: str | None = Header(None),
    authorization: str | None = Header(None),
):
    authorise_app(x_akahu_id, authorization)
    return {"success": True, "item": _connection(connection_id)}


@app.post("/v1/refresh")
def refresh_all(
    x_akahu_id: str | None = Header(None),
    authorization: str | None = Header(None),
):
    authorise(x_akahu_id, authorization)
    return {"success": True}


@app.post("/v1/refresh/{target_id}")
def refresh_one(
    target_id: str,
    x_akahu_id: str | None = Header(None),
    authorization: str | None = Header(None),
):
    authorise(x_akahu_id, authorization)
    if target_id.startswith("acc_"):
        _account(target_id)
    else:
        _connection(target_id)
    return {"success": True}
