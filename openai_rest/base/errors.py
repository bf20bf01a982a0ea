"""Stable error surface for the client.

Callers catch :class:`OpenAIError` for failures reported by the API and
:class:`TransportError` for failures below it. Both derive from
:class:`ClientError` and expose a normalized ``kind`` (:class:`ErrorCode`).
No retries are performed anywhere in the client; errors are surfaced as-is.
"""
from __future__ import annotations

from .errors_parts import (
    ClientError,
    DecodeError,
    ErrorCode,
    MissingCredentialsError,
    OpenAIError,
    TransportError,
    classify_exception,
    classify_status,
)

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
