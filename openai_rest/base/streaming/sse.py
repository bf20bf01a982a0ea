"""Server-sent event decoding for streamed API responses.

The API streams ``data: {json}`` lines separated by blank lines and ends the
stream with ``data: [DONE]``. :func:`decode_sse_line` turns one raw line
(``bytes`` or ``str``, as yielded by ``httpx.Response.iter_lines``) into an
:class:`SSEEvent`; :func:`iter_sse_payloads` / :func:`aiter_sse_payloads`
turn a line iterator into parsed JSON payloads.

Failure modes:
    - Lines that are not ``data:`` fields (comments, ``event:``, ``id:``,
      ``retry:``, blank separators) are ignored.
    - A ``data:`` field that is not a JSON object is logged as
      ``stream.decode_error`` at WARNING and skipped; the stream continues.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterable, AsyncIterator, Dict, Iterable, Iterator, Optional, Union

from ..constants import SSE_DATA_PREFIX, SSE_DONE
from ..logging import LogContext, get_logger, log_event

_logger = get_logger("openai_rest.stream")


@dataclass(frozen=True)
class SSEEvent:
    """One decoded ``data:`` field. ``done`` marks the terminal sentinel."""

    data: str
    done: bool = False


DONE = SSEEvent(data=SSE_DONE, done=True)


def decode_sse_line(line: Union[str, bytes, None]) -> Optional[SSEEvent]:
    """Decode a single SSE line.

    Returns ``DONE`` for the terminal sentinel, an :class:`SSEEvent` for a
    data field, and ``None`` for everything else.
    """
    if not line:
        return None
    text = line.decode("utf-8") if isinstance(line, bytes) else str(line)
    text = text.rstrip("\r\n")
    if not text.startswith(SSE_DATA_PREFIX):
        return None
    data = text[len(SSE_DATA_PREFIX):].strip()
    if data == SSE_DONE:
        return DONE
    if not data:
        return None
    return SSEEvent(data=data)


def _parse_event(
    event: SSEEvent, logger: logging.Logger, ctx: Optional[LogContext]
) -> Optional[Dict[str, Any]]:
    try:
        payload = json.loads(event.data)
    except ValueError as exc:
        log_event(logger, "stream.decode_error", ctx, level=logging.WARNING, error=str(exc), data=event.data)
        return None
    if not isinstance(payload, dict):
        log_event(
            logger, "stream.decode_error", ctx, level=logging.WARNING, error="payload is not an object", data=event.data
        )
        return None
    return payload


def iter_sse_payloads(
    lines: Iterable[Union[str, bytes]],
    logger: Optional[logging.Logger] = None,
    ctx: Optional[LogContext] = None,
) -> Iterator[Dict[str, Any]]:
    """Yield JSON payloads from SSE lines until ``[DONE]`` or end of input."""
    logger = logger or _logger
    for line in lines:
        event = decode_sse_line(line)
        if event is None:
            continue
        if event.done:
            return
        payload = _parse_event(event, logger, ctx)
        if payload is not None:
            yield payload


async def aiter_sse_payloads(
    lines: AsyncIterable[Union[str, bytes]],
    logger: Optional[logging.Logger] = None,
    ctx: Optional[LogContext] = None,
) -> AsyncIterator[Dict[str, Any]]:
    """Async twin of :func:`iter_sse_payloads`."""
    logger = logger or _logger
    async for line in lines:
        event = decode_sse_line(line)
        if event is None:
            continue
        if event.done:
            return
        payload = _parse_event(event, logger, ctx)
        if payload is not None:
            yield payload


__all__ = [
    "SSEEvent",
    "DONE",
    "decode_sse_line",
    "iter_sse_payloads",
    "aiter_sse_payloads",
]
