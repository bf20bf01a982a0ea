"""Timeout configuration for the HTTP layer.

This module centralizes the timeout values used when the pooled ``httpx``
clients are created so that no ad-hoc numeric literals are sprinkled across
resource modules.

Key Components
--------------
TimeoutConfig
    Frozen dataclass capturing normalized timeout values in seconds.

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use and again only when the relevant variables change. Supported
    environment variables (all optional):
        OPENAI_CONNECT_TIMEOUT_SECONDS
        OPENAI_HTTP_TIMEOUT_SECONDS
        OPENAI_STREAM_TIMEOUT_SECONDS

Invalid, empty, or non-positive values fall back to the defaults in
:mod:`openai_rest.config.defaults`.
"""
from __future__ import annotations

from dataclasses import dataclass
import os

import httpx

from ..config.defaults import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_STREAM_TIMEOUT_SECONDS,
)

_ENV_NAMES = (
    "OPENAI_CONNECT_TIMEOUT_SECONDS",
    "OPENAI_HTTP_TIMEOUT_SECONDS",
    "OPENAI_STREAM_TIMEOUT_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Time allowed to establish a TCP/TLS connection.
        http_timeout_seconds: Read timeout for regular (non-streaming) calls.
        stream_timeout_seconds: Idle read timeout between two streamed events.
    """

    connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    stream_timeout_seconds: float = DEFAULT_STREAM_TIMEOUT_SECONDS

    def as_httpx(self, *, stream: bool = False) -> httpx.Timeout:
        """Return an ``httpx.Timeout`` for regular or streaming calls."""
        read = self.stream_timeout_seconds if stream else self.http_timeout_seconds
        return httpx.Timeout(read, connect=self.connect_timeout_seconds)


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Parse an environment variable as a positive float with a fallback default."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig` instance."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    cur_guard = "/".join(os.getenv(name, "") for name in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == cur_guard:
        return _CACHED

    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(
            "OPENAI_CONNECT_TIMEOUT_SECONDS", DEFAULT_CONNECT_TIMEOUT_SECONDS
        ),
        http_timeout_seconds=_parse_env_float(
            "OPENAI_HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS
        ),
        stream_timeout_seconds=_parse_env_float(
            "OPENAI_STREAM_TIMEOUT_SECONDS", DEFAULT_STREAM_TIMEOUT_SECONDS
        ),
    )
    _ENV_GUARD = cur_guard
    return _CACHED


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
]
