import os
import sys
from pathlib import Path
from typing import Callable, List

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from http_helper.config.settings import load_settings  # noqa: E402
from http_helper.facade import Fetcher  # noqa: E402
from http_helper.utils.http import RequestInstance  # noqa: E402


def pytest_configure(config):
    # Register the asyncio marker so pytest doesn't warn when it's used.
    config.addinivalue_line(
        "markers", "asyncio: mark test to run in an asyncio event loop"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove HTTP_HELPER_* variables so settings start from defaults."""
    for key in list(os.environ):
        if key.upper().startswith("HTTP_HELPER_"):
            monkeypatch.delenv(key, raising=False)
    yield


class RecordingTransport(httpx.MockTransport):
    """Mock transport that keeps every request it handles."""

    def __init__(self, handler: Callable):
        self.requests: List[httpx.Request] = []

        def recording_handler(request: httpx.Request):
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


def echo_handler(request: httpx.Request) -> httpx.Response:
    """Respond 200 with a JSON description of the received request."""
    return httpx.Response(
        200,
        headers={"X-Echo": "yes"},
        json={
            "method": request.method,
            "url": str(request.url),
            "body": request.content.decode("utf-8", errors="replace"),
        },
    )


@pytest.fixture
def echo_transport():
    return RecordingTransport(echo_handler)


@pytest.fixture
def make_instance():
    """Build a RequestInstance whose client uses the given transport."""

    def _make(transport: httpx.MockTransport, **client_options) -> RequestInstance:
        return RequestInstance(transport=transport, **client_options)

    return _make


@pytest.fixture
def fetcher():
    return Fetcher(load_settings({"USER_AGENT": "Test App 1.0"}))


class CallbackRecorder:
    """Callable that records every ``(error, status, headers, data)`` call."""

    def __init__(self):
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)

    @property
    def once(self):
        assert len(self.calls) == 1, f"callback fired {len(self.calls)} times"
        return self.calls[0]


@pytest.fixture
def callback():
    return CallbackRecorder()


@pytest.fixture
def transport_from():
    """Build a RecordingTransport around a request handler."""
    return RecordingTransport
