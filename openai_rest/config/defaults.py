"""openai_rest.config.defaults
==========================

Central place for small, stable default values used across the openai_rest
package. These defaults can be overridden via environment variables or an
external configuration file, but provide sensible fallbacks for local
development and tests.

Module Purpose
--------------
- Provide a single import location for conservative default constants (no I/O).
- Keep resource modules free of magic literals.

This module intentionally avoids importing from other openai_rest modules to
prevent circular dependencies. Only plain constants should live here.
"""

from __future__ import annotations

# ---- Endpoint ----
# Base URL of the public API; must end with a trailing slash so relative
# routes ("chat/completions") join correctly.
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1/"

# ---- Model defaults ----
# Used by config consumers that need a model when the caller gave none.
OPENAI_DEFAULT_CHAT_MODEL = "gpt-4o-mini"
OPENAI_DEFAULT_COMPLETION_MODEL = "gpt-3.5-turbo-instruct"
OPENAI_DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
OPENAI_DEFAULT_MODERATION_MODEL = "omni-moderation-latest"
OPENAI_DEFAULT_TRANSCRIPTION_MODEL = "whisper-1"

# ---- Upload defaults ----
OPENAI_DEFAULT_FILE_PURPOSE = "fine-tune"

# ---- Timeouts (seconds) ----
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0
DEFAULT_HTTP_TIMEOUT_SECONDS = 600.0
DEFAULT_STREAM_TIMEOUT_SECONDS = 600.0


__all__ = [
    "OPENAI_DEFAULT_BASE_URL",
    "OPENAI_DEFAULT_CHAT_MODEL",
    "OPENAI_DEFAULT_COMPLETION_MODEL",
    "OPENAI_DEFAULT_EMBEDDING_MODEL",
    "OPENAI_DEFAULT_MODERATION_MODEL",
    "OPENAI_DEFAULT_TRANSCRIPTION_MODEL",
    "OPENAI_DEFAULT_FILE_PURPOSE",
    "DEFAULT_CONNECT_TIMEOUT_SECONDS",
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "DEFAULT_STREAM_TIMEOUT_SECONDS",
]
