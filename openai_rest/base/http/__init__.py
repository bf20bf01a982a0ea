"""HTTP layer: pooled ``httpx`` clients and the authenticated request helper."""

from .pool import (
    close_all_clients,
    get_httpx_client,
    open_async_httpx_client,
    set_transport,
)
from .api_client import ApiClient, decode_response

__all__ = [
    "ApiClient",
    "decode_response",
    "get_httpx_client",
    "open_async_httpx_client",
    "set_transport",
    "close_all_clients",
]
