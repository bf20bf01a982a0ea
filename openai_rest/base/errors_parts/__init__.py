"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `openai_rest.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .client_error import (
    ClientError,
    DecodeError,
    MissingCredentialsError,
    OpenAIError,
    TransportError,
)
from .classification import classify_exception, classify_status

__all__ = [
    "ErrorCode",
    "ClientError",
    "OpenAIError",
    "TransportError",
    "DecodeError",
    "MissingCredentialsError",
    "classify_exception",
    "classify_status",
]
