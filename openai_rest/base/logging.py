"""Structured logging for the client.

Every logger handed out by :func:`get_logger` is a child of the shared
``openai_rest`` logger. That logger owns one stderr handler, does not
propagate to the root logger, and takes its level from the
``OPENAI_REST_LOG_LEVEL`` environment variable (default ``WARNING`` so a
library import stays quiet).

``log_event`` emits one JSON object per line; ``normalized_log_event`` wraps
it and guarantees the canonical keys ``phase``, ``attempt``, ``emitted`` and
``tokens`` (plus ``error_code`` when known) are present.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Mapping, Optional

from .log_support import JsonFormatter, LogContext


BASE_LOGGER_NAME = "openai_rest"
LOG_LEVEL_ENV = "OPENAI_REST_LOG_LEVEL"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# marker attributes on handlers/loggers this module owns
_BASE_LOGGER_ATTR = "_openai_rest_logger_initialized"
_CONSOLE_HANDLER_ATTR = "_openai_rest_console_handler"
_FILE_HANDLER_ATTR = "_openai_rest_file_handler"

_FILE_MAX_BYTES = 10 * 1024 * 1024
_FILE_BACKUPS = 5

_LEVEL_NAMES: Dict[str, int] = {
    "WARN": logging.WARNING,
    **{name: getattr(logging, name) for name in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")},
}


def _make_formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _parse_level(value: str | None, default: int = logging.WARNING) -> int:
    """Map a level name (case-insensitive, ``WARN`` accepted) to its number.

    Empty or unknown names give ``default``.
    """
    if not value:
        return default
    return _LEVEL_NAMES.get(value.strip().upper(), default)


def _refresh_console(logger: logging.Logger, level: int, json_mode: bool) -> None:
    for handler in logger.handlers:
        if not getattr(handler, _CONSOLE_HANDLER_ATTR, False):
            continue
        handler.setLevel(level)
        # follow sys.stderr swaps (pytest capture, redirect_stderr)
        with contextlib.suppress(ValueError):
            handler.setStream(sys.stderr)  # type: ignore[attr-defined]
        if json_mode != isinstance(handler.formatter, JsonFormatter):
            handler.setFormatter(_make_formatter(json_mode))


def _ensure_base_logger(json_mode: bool, level: int) -> logging.Logger:
    """Create the shared ``openai_rest`` logger once, refresh it afterwards.

    The level is re-read from the environment on every call.
    """
    base = logging.getLogger(BASE_LOGGER_NAME)
    wanted = _parse_level(os.getenv(LOG_LEVEL_ENV), default=level)
    base.setLevel(wanted)
    if getattr(base, _BASE_LOGGER_ATTR, False):
        _refresh_console(base, wanted, json_mode)
        return base

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(wanted)
    console.setFormatter(_make_formatter(json_mode))
    setattr(console, _CONSOLE_HANDLER_ATTR, True)
    base.handlers[:] = [console]
    base.propagate = False
    setattr(base, _BASE_LOGGER_ATTR, True)
    return base


def get_logger(
    name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.WARNING
) -> logging.Logger:
    """Return a logger under the shared ``openai_rest`` hierarchy.

    Names outside the hierarchy are prefixed so every record reaches the
    shared handler exactly once.
    """
    base = _ensure_base_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return base
    qualified = name if name.startswith(BASE_LOGGER_NAME + ".") else f"{BASE_LOGGER_NAME}.{name}"
    child = logging.getLogger(qualified)
    child.setLevel(logging.NOTSET)
    child.propagate = True
    return child


def _drop_file_handlers(logger: logging.Logger, keep: Optional[str] = None) -> Optional[logging.FileHandler]:
    """Remove managed file handlers except the one writing to ``keep``; return that one."""
    kept: Optional[logging.FileHandler] = None
    for handler in list(logger.handlers):
        if not getattr(handler, _FILE_HANDLER_ATTR, False):
            continue
        if keep is not None and isinstance(handler, logging.FileHandler) and handler.baseFilename == keep:
            kept = handler
            continue
        logger.removeHandler(handler)
        handler.close()
    return kept


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared ``openai_rest`` logger at runtime.

    Args:
        level: New level, numeric or by name. ``None`` keeps the current one.
        file_path: Attach (or reuse) a rotating file handler writing there.
            ``None`` removes the file handler previously attached here.
        json_mode: JSON formatter (default) or plain text.

    Returns:
        The base logger. Handlers attached by other code are left alone.
    """
    logger = _ensure_base_logger(json_mode=json_mode, level=logging.WARNING)

    if level is not None:
        numeric = _parse_level(level, default=logger.level) if isinstance(level, str) else level
        logger.setLevel(numeric)
        for handler in logger.handlers:
            handler.setLevel(numeric)

    if file_path is None:
        _drop_file_handlers(logger)
        return logger

    target = os.path.abspath(os.path.expanduser(file_path))
    folder = os.path.dirname(target)
    if folder:
        os.makedirs(folder, exist_ok=True)

    handler = _drop_file_handlers(logger, keep=target)
    if handler is None:
        handler = RotatingFileHandler(target, maxBytes=_FILE_MAX_BYTES, backupCount=_FILE_BACKUPS, encoding="utf-8")
        setattr(handler, _FILE_HANDLER_ATTR, True)
        logger.addHandler(handler)
    handler.setLevel(logger.level)
    handler.setFormatter(_make_formatter(json_mode))
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Log ``event`` as a single JSON object.

    ``ctx`` fields are merged first, then ``fields``; ``None`` values are
    dropped unless ``keep_none`` is set. Nothing is serialised when the
    logger is disabled for ``level``.
    """
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload.update(ctx.to_dict())
    payload.update(fields if keep_none else {k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = ("phase", "attempt", "error_code", "emitted", "tokens")


def _coerce_tokens(tokens: Any) -> Any:
    """Turn token usage (mapping, pydantic model, pair sequence) into a plain dict."""
    if tokens is None:
        return None
    if isinstance(tokens, Mapping):
        return dict(tokens)
    if callable(getattr(tokens, "model_dump", None)):
        return tokens.model_dump(exclude_none=True)
    if isinstance(tokens, (list, tuple)):
        with contextlib.suppress(TypeError, ValueError):
            return dict(tokens)
    return {"value": repr(tokens)}


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | None = None,
    tokens: Any = None,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Log ``event`` with the canonical keys always present.

    ``attempt``, ``emitted`` and ``tokens`` are written as ``null`` when
    unknown; ``error_code`` only appears when set. Extra fields cannot
    overwrite canonical keys.
    """
    fields = {k: v for k, v in extra_fields.items() if v is not None and k not in REQUIRED_NORMALIZED_KEYS}
    fields.update(phase=phase, attempt=attempt, emitted=emitted, tokens=_coerce_tokens(tokens))
    if error_code is not None:
        fields["error_code"] = error_code
    log_event(logger, event, ctx, level=level, keep_none=True, **fields)


__all__ = [
    "LogContext",
    "BASE_LOGGER_NAME",
    "LOG_LEVEL_ENV",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
