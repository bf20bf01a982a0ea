"""Pytest configuration for the openai_rest test suite.

Every test runs with a scrubbed environment (no API key, no config file, no
.env file), fresh default credentials and an empty client pool. Network access
is replaced by ``httpx.MockTransport`` through the ``mock_api`` fixture.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Iterator, List

import httpx
import pytest

from openai_rest.base.credentials import Credentials, reset_default_credentials, set_credentials
from openai_rest.base.http import close_all_clients, set_transport
from openai_rest.config import reset_config_cache

_ENV_VARS = (
    "OPENAI_KEY",
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_REST_CONFIG_FILE",
    "OPENAI_REST_LOG_LEVEL",
    "OPENAI_CONNECT_TIMEOUT_SECONDS",
    "OPENAI_HTTP_TIMEOUT_SECONDS",
    "OPENAI_STREAM_TIMEOUT_SECONDS",
)

TEST_KEY = "sk-unit-0123456789abcdef"  # pragma: allowlist secret - fake key
TEST_BASE_URL = "https://api.unit.local/v1"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Clear client env vars and reset module caches around each test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    reset_config_cache()
    reset_default_credentials()
    set_transport()
    yield
    set_transport()
    close_all_clients()
    reset_default_credentials()
    reset_config_cache()


@pytest.fixture()
def creds() -> Credentials:
    """Install and return process-wide test credentials."""
    c = Credentials(api_key=TEST_KEY, base_url=TEST_BASE_URL)
    set_credentials(c)
    return c


class MockApi:
    """Route table plus request log behind an ``httpx.MockTransport``.

    Routes are keyed by ``(method, path)`` where ``path`` is relative to the
    ``/v1/`` prefix. A route value is either a response factory taking the
    request or a JSON-able object returned with status 200.
    """

    def __init__(self) -> None:
        self.routes: Dict[tuple, Any] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, response: Any) -> None:
        self.routes[(method.upper(), path)] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/v1/")
        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={"error": {"message": f"no route {path}", "type": "invalid_request_error"}})
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture()
def mock_api(creds: Credentials) -> MockApi:
    """Install a mock transport for sync and async clients."""
    api = MockApi()
    transport = httpx.MockTransport(api.handler)
    set_transport(transport, async_transport=transport)
    return api


def sse_response(*payloads: Any, done: bool = True) -> Callable[[httpx.Request], httpx.Response]:
    """Build a route returning ``payloads`` as a server-sent event stream."""
    lines = []
    for p in payloads:
        data = p if isinstance(p, str) else json.dumps(p)
        lines.append(f"data: {data}\n\n")
    if done:
        lines.append("data: [DONE]\n\n")
    body = "".join(lines).encode("utf-8")

    def route(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body, headers={"content-type": "text/event-stream"})

    return route


class _ListHandler(logging.Handler):
    """Capture log records into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())

    def events(self) -> List[Dict[str, Any]]:
        out = []
        for m in self.messages:
            try:
                parsed = json.loads(m)
            except ValueError:
                continue
            if isinstance(parsed, dict):
                out.append(parsed)
        return out


@pytest.fixture()
def log_capture() -> Iterator[_ListHandler]:
    """Attach a DEBUG list handler to the shared ``openai_rest`` logger."""
    base = logging.getLogger("openai_rest")
    previous = base.level
    handler = _ListHandler()
    base.addHandler(handler)
    base.setLevel(logging.DEBUG)
    yield handler
    base.removeHandler(handler)
    base.setLevel(previous)


@pytest.fixture()
def sse() -> Callable[..., Callable[[httpx.Request], httpx.Response]]:
    """Expose :func:`sse_response` to tests."""
    return sse_response
