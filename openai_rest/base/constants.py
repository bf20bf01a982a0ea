"""Wire-level constants shared by the HTTP and streaming layers."""

from __future__ import annotations

# Server-sent events
SSE_DATA_PREFIX = "data:"
SSE_DONE = "[DONE]"

# Multipart upload content types
JSONL_MIME = "application/jsonl"
WAV_MIME = "audio/wav"

# Request headers
USER_AGENT = "openai-rest-python"

# Client pool purposes
PURPOSE_API = "api"
PURPOSE_STREAM = "stream"

__all__ = [
    "SSE_DATA_PREFIX",
    "SSE_DONE",
    "JSONL_MIME",
    "WAV_MIME",
    "USER_AGENT",
    "PURPOSE_API",
    "PURPOSE_STREAM",
]
