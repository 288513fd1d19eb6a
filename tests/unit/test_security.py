"""Unit tests for log sanitization helpers."""

import logging

import pytest

from http_helper import Fetcher, load_settings
from http_helper.utils import security
from http_helper.utils.security import (
    SanitizingFormatter,
    sanitize_headers,
    sanitize_string,
    sanitize_url,
)


@pytest.mark.unit
def test_sanitize_string_redacts_tokens_in_place():
    text = "sent Authorization Bearer abc.def-123 to host"
    assert sanitize_string(text) == "sent Authorization <bearer_token:REDACTED> to host"


@pytest.mark.unit
def test_sanitize_string_redacts_basic_and_jwt():
    assert "dTpw" not in sanitize_string("Basic dTpw")
    jwt = "eyJhbGciOi.eyJzdWIiOi.c2lnbmF0dXJl"
    assert sanitize_string(f"token={jwt}") == "token=<jwt_token:REDACTED>"


@pytest.mark.unit
def test_sanitize_string_empty():
    assert sanitize_string("") == ""


@pytest.mark.unit
def test_sanitize_headers():
    headers = {
        "Authorization": "Bearer T",
        "Cookie": "session=abc",
        "Content-Type": "application/json",
    }
    sanitized = sanitize_headers(headers)

    assert sanitized["Authorization"] == "<REDACTED:length=8>"
    assert sanitized["Cookie"] == "<REDACTED:length=11>"
    assert sanitized["Content-Type"] == "application/json"
    assert headers["Authorization"] == "Bearer T"


@pytest.mark.unit
def test_sanitize_headers_empty():
    assert sanitize_headers(None) == {}


@pytest.mark.unit
def test_sanitize_url():
    url = "https://user:pw@example.test/a?access_token=xyz&page=2"
    assert (
        sanitize_url(url)
        == "https://<REDACTED>@example.test/a?access_token=<REDACTED>&page=2"
    )


@pytest.mark.unit
def test_formatter_sanitizes_output():
    formatter = SanitizingFormatter("%(message)s")
    record = logging.LogRecord(
        "http_helper", logging.INFO, __file__, 1, "auth %s", ("Bearer secret",), None
    )
    assert formatter.format(record) == "auth <bearer_token:REDACTED>"


@pytest.fixture
def restore_root_logging(monkeypatch):
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    httpx_level = logging.getLogger("httpx").level
    monkeypatch.setattr(security, "_LOGGING_CONFIGURED", False)
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("httpx").setLevel(httpx_level)


@pytest.mark.unit
def test_setup_logging_uses_configured_level(restore_root_logging):
    Fetcher(load_settings({"LOG_LEVEL": "warning"})).setup_logging()

    root = restore_root_logging
    assert root.level == logging.WARNING
    assert isinstance(root.handlers[0].formatter, SanitizingFormatter)
    assert logging.getLogger("httpx").level == logging.WARNING


@pytest.mark.unit
def test_setup_secure_logging_is_idempotent(restore_root_logging):
    security.setup_secure_logging("ERROR")
    security.setup_secure_logging("DEBUG")

    assert restore_root_logging.level == logging.ERROR
