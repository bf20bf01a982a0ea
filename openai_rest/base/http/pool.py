"""Shared HTTP client pool.

Purpose:
    Provide a centralized, thread-safe pool of reusable ``httpx.Client``
    instances so that sync API calls reuse connections instead of allocating
    a client per request, plus a factory for per-call async clients.
    Timeouts derive exclusively from :func:`get_timeout_config`.

External dependencies:
    - ``httpx`` for the underlying sync and async HTTP clients.

Lifecycle & cleanup:
    - Sync clients are cached by ``(base_url, purpose)``. Purposes allow
      distinct pools (``"api"`` vs ``"stream"``) with different read timeouts.
    - Async clients are bound to the event loop that created them and a
      caller's loop may end at any time, so they are not pooled:
      :func:`open_async_httpx_client` returns a fresh client that the caller
      closes with ``async with``.
    - All sync clients are closed at interpreter exit via ``atexit``. Tests may
      call :func:`close_all_clients` explicitly.

Transports:
    :func:`set_transport` installs a custom ``httpx`` transport (for example
    ``httpx.MockTransport`` in tests, or a proxying transport) used by every
    client created afterwards. Installing one clears the pool.
"""

from __future__ import annotations

import atexit
import threading
from typing import Dict, Optional, Tuple

import httpx

from ..constants import PURPOSE_STREAM, USER_AGENT
from ..timeouts import get_timeout_config

_Key = Tuple[Optional[str], str]

_CLIENTS: Dict[_Key, httpx.Client] = {}
_LOCK = threading.RLock()

_TRANSPORT: Optional[httpx.BaseTransport] = None
_ASYNC_TRANSPORT: Optional[httpx.AsyncBaseTransport] = None


def _client_kwargs(base_url: Optional[str], purpose: str) -> dict:
    cfg = get_timeout_config()
    kwargs: dict = {
        "timeout": cfg.as_httpx(stream=purpose == PURPOSE_STREAM),
        "headers": {"User-Agent": USER_AGENT},
    }
    if base_url:
        kwargs["base_url"] = base_url
    return kwargs


def get_httpx_client(base_url: Optional[str], purpose: str) -> httpx.Client:
    """Return a pooled ``httpx.Client`` for the given base URL and purpose.

    The first request for a key creates a client configured with timeouts from
    :func:`get_timeout_config`. Subsequent requests reuse the same instance.

    Parameters:
        base_url: Optional API base URL set on the client so relative routes
            can be used. ``None`` groups clients under a shared key.
        purpose: A short string discriminating separate pools.

    Thread-safety:
        Safe for concurrent use; per-key creation is guarded by a re-entrant lock.
    """
    key = (base_url, purpose)
    client = _CLIENTS.get(key)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = _CLIENTS.get(key)
        if client is not None and not client.is_closed:
            return client
        kwargs = _client_kwargs(base_url, purpose)
        if _TRANSPORT is not None:
            kwargs["transport"] = _TRANSPORT
        client = httpx.Client(**kwargs)
        _CLIENTS[key] = client
        return client


def open_async_httpx_client(base_url: Optional[str], purpose: str) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient`` configured like the pooled sync ones.

    The caller owns the client and must close it, normally through
    ``async with open_async_httpx_client(...) as client``.
    """
    kwargs = _client_kwargs(base_url, purpose)
    if _ASYNC_TRANSPORT is not None:
        kwargs["transport"] = _ASYNC_TRANSPORT
    return httpx.AsyncClient(**kwargs)


def set_transport(
    transport: Optional[httpx.BaseTransport] = None,
    async_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> None:
    """Install transports for clients created from now on and clear the pool.

    Passing ``None`` for both restores the default network transports.
    """
    global _TRANSPORT, _ASYNC_TRANSPORT
    with _LOCK:
        _TRANSPORT = transport
        _ASYNC_TRANSPORT = async_transport
    close_all_clients()


def close_all_clients() -> None:
    """Close and clear all pooled clients."""
    with _LOCK:
        for c in _CLIENTS.values():
            c.close()
        _CLIENTS.clear()


def _cleanup_at_exit() -> None:
    """atexit hook to ensure clients are closed on interpreter exit."""
    close_all_clients()


atexit.register(_cleanup_at_exit)

__all__ = [
    "get_httpx_client",
    "open_async_httpx_client",
    "set_transport",
    "close_all_clients",
]
