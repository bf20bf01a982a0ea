"""Streaming helpers (server-sent event decoding)."""

from .sse import DONE, SSEEvent, aiter_sse_payloads, decode_sse_line, iter_sse_payloads

__all__ = [
    "SSEEvent",
    "DONE",
    "decode_sse_line",
    "iter_sse_payloads",
    "aiter_sse_payloads",
]
