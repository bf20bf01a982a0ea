"""
Normalized client error codes (taxonomy).

Defines the `ErrorCode` enumeration attached to every error raised by the
client. Values are lowercase snake_case and are a stable public contract for
logging and caller-side branching.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    SERVER_ERROR = "server_error"
    UNAVAILABLE = "unavailable"
    TRANSIENT = "transient"
    CONNECTION = "connection"
    DECODE = "decode"
    IO = "io"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
