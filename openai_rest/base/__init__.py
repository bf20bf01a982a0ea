"""
Shared plumbing for the resource modules.

- Credentials: API key and base URL resolution (explicit, process default, env)
- HTTP: pooled httpx clients and the :class:`ApiClient` request helper
- Streaming: server-sent event decoding
- DTOs: pydantic base models for request bodies and responses
- Errors and logging: the error taxonomy and structured JSON logs
"""

from .builder import RequestBuilder
from .credentials import (
    Credentials,
    default_credentials,
    reset_default_credentials,
    set_base_url,
    set_credentials,
    set_key,
)
from .dto import ApiModel, DeletedObject, ListPage, RequestModel, Usage
from .errors import (
    ClientError,
    DecodeError,
    ErrorCode,
    MissingCredentialsError,
    OpenAIError,
    TransportError,
    classify_exception,
    classify_status,
)
from .http import ApiClient, close_all_clients, set_transport
from .logging import configure_logger, get_logger
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    "RequestBuilder",
    "Credentials",
    "default_credentials",
    "reset_default_credentials",
    "set_base_url",
    "set_credentials",
    "set_key",
    "ApiModel",
    "DeletedObject",
    "ListPage",
    "RequestModel",
    "Usage",
    "ClientError",
    "DecodeError",
    "ErrorCode",
    "MissingCredentialsError",
    "OpenAIError",
    "TransportError",
    "classify_exception",
    "classify_status",
    "ApiClient",
    "close_all_clients",
    "set_transport",
    "configure_logger",
    "get_logger",
    "TimeoutConfig",
    "get_timeout_config",
]
