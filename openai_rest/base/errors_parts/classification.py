"""
Error classification helpers mapping HTTP statuses and exceptions to
normalized ErrorCode values.

``classify_status`` covers API responses; ``classify_exception`` covers the
exceptions ``httpx`` raises (and falls back to message heuristics for
anything else) so ``TransportError.kind`` is meaningful.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

import httpx

from .error_code import ErrorCode
from .client_error import OpenAIError, TransportError


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Checks ``exc.status_code``, ``exc.status`` and ``exc.response.status_code``
    in that order. Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


def classify_status(status: Optional[int]) -> ErrorCode:
    """Map an HTTP status to an :class:`ErrorCode`.

    Unlisted 5xx statuses are treated as server errors; everything else
    unlisted is ``UNKNOWN``.
    """
    if status is None:
        return ErrorCode.UNKNOWN
    if status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    if 500 <= status < 600:
        return ErrorCode.SERVER_ERROR
    return ErrorCode.UNKNOWN


_MESSAGE_PATTERNS = (
    (ErrorCode.RATE_LIMIT, ("rate limit", "too many requests")),
    (ErrorCode.TIMEOUT, ("timeout", "timed out")),
    (ErrorCode.AUTH, ("unauthorized", "api key", "forbidden")),
    (ErrorCode.NOT_FOUND, ("not found", "does not exist")),
    (ErrorCode.CONNECTION, ("connection refused", "connection reset", "name resolution")),
)


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:
    for code, patterns in _MESSAGE_PATTERNS:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. Client errors carry their own ``kind``.
        2. Timeouts (``httpx.TimeoutException`` and builtin timeouts).
        3. ``httpx`` network / protocol errors.
        4. HTTP status attributes.
        5. Message heuristics.
        6. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, (OpenAIError, TransportError)):
        return exc.kind
    if isinstance(exc, (httpx.TimeoutException, TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, httpx.ConnectError):
        return ErrorCode.CONNECTION
    if isinstance(exc, (httpx.RemoteProtocolError, httpx.ReadError, httpx.WriteError)):
        return ErrorCode.TRANSIENT
    status = _extract_status(exc)
    if status is not None:
        return classify_status(status)
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


__all__ = [
    "classify_status",
    "classify_exception",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
