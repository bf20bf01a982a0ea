"""JSON formatter for the client's log handlers.

Each record becomes one JSON object with ``ts``, ``level`` and ``logger``.
Messages produced by ``log_event`` are already JSON objects; their keys are
lifted to the top level instead of being nested as an escaped string. Any
``extra=`` attributes passed to the logging call are appended as well.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

ISO = "%Y-%m-%dT%H:%M:%S.%fZ"

# attributes every LogRecord carries; anything else came from ``extra=``
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}


def _as_object(text: str) -> Dict[str, Any] | None:
    if not text.startswith("{"):
        return None
    try:
        parsed = json.loads(text)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        out: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(ISO),
            "level": record.levelname,
            "logger": record.name,
        }
        text = record.getMessage()
        event = _as_object(text)
        if event is None:
            out["msg"] = text
        else:
            out.update(event)
        if record.exc_info:
            out["exc"] = self.formatException(record.exc_info)
        for key, value in vars(record).items():
            if key.startswith("_") or key in _STANDARD_ATTRS:
                continue
            out.setdefault(key, value)
        return json.dumps(out, ensure_ascii=False, default=str)


__all__ = ["JsonFormatter", "ISO"]
