"""Unit tests for settings and JSON logging"""

import json
import logging

import pytest
from pydantic import ValidationError

from akahu_client.config import Settings
from akahu_client.infrastructure.observability.logging import (
    CustomJsonFormatter,
    log_api_call,
    setup_logging,
)
from akahu_client.utils.http_utils import DEFAULT_BASE_URL


def test_settings_defaults(monkeypatch):
    for name in ("AKAHU_BASE_URL", "AKAHU_APP_TOKEN", "AKAHU_MAX_IN_FLIGHT"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.app_token is None
    assert settings.max_in_flight is None
    assert settings.http_timeout_seconds == 10.0


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("AKAHU_APP_TOKEN", "app_token_env")
    monkeypatch.setenv("AKAHU_MAX_IN_FLIGHT", "4")
    monkeypatch.setenv("AKAHU_HTTP_TIMEOUT_SECONDS", "2.5")

    settings = Settings(_env_file=None)

    assert settings.app_token == "app_token_env"
    assert settings.max_in_flight == 4
    assert settings.http_timeout_seconds == 2.5


@pytest.mark.parametrize("field, value", [("max_in_flight", 0), ("http_timeout_seconds", 0)])
def test_settings_validation(field: str, value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})


def test_json_formatter_adds_service_fields():
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s", service_name="svc")
    record = logging.LogRecord("akahu_client", logging.INFO, __file__, 1, "hello", None, None)
    record.status = 200

    payload = json.loads(formatter.format(record))

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["service"] == "svc"
    assert payload["status"] == 200
    assert "timestamp" in payload


def test_setup_logging_installs_single_json_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("DEBUG", service_name="svc")

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, CustomJsonFormatter)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_api_call_log_has_no_credentials(caplog):
    with caplog.at_level(logging.DEBUG, logger="akahu_client"):
        log_api_call("GET", "accounts", 200, 12.5)

    record = caplog.records[-1]
    assert record.method == "GET"
    assert record.path == "accounts"
    assert record.status == 200
    assert record.duration_ms == 12.5
