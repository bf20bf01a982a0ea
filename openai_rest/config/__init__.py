"""Unified configuration layer for the client.

Goals
-----
* Centralize defaults (base URL, default models).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by
       OPENAI_REST_CONFIG_FILE
    3. Environment variables (OPENAI_KEY / OPENAI_API_KEY, OPENAI_BASE_URL)
    4. In-code overrides passed to the helper
* Provide a single call site: ``get_client_config()``.

External Config File (Optional)
-------------------------------
If OPENAI_REST_CONFIG_FILE is set to a path, JSON is attempted first and YAML
second. Settings live under an ``openai`` section:

```
openai:
  api_key: sk-...
  base_url: https://proxy.internal/v1/
  chat_model: gpt-4o-mini
```

Public API
----------
* get_client_config(overrides: dict | None = None) -> dict
* reset_config_cache() -> None
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import json
import os

import yaml

from .env import is_placeholder, resolve_api_key, resolve_base_url
from .defaults import (
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_CHAT_MODEL,
    OPENAI_DEFAULT_COMPLETION_MODEL,
    OPENAI_DEFAULT_EMBEDDING_MODEL,
    OPENAI_DEFAULT_MODERATION_MODEL,
    OPENAI_DEFAULT_TRANSCRIPTION_MODEL,
)


CONFIG_SECTION = "openai"

DEFAULTS: Dict[str, Any] = {
    "base_url": OPENAI_DEFAULT_BASE_URL,
    "chat_model": OPENAI_DEFAULT_CHAT_MODEL,
    "completion_model": OPENAI_DEFAULT_COMPLETION_MODEL,
    "embedding_model": OPENAI_DEFAULT_EMBEDDING_MODEL,
    "moderation_model": OPENAI_DEFAULT_MODERATION_MODEL,
    "transcription_model": OPENAI_DEFAULT_TRANSCRIPTION_MODEL,
}


_FILE_CACHE: Optional[Dict[str, Any]] = None
_FILE_CACHE_PATH: Optional[str] = None
_DOTENV_LOADED = False


def _parse_dotenv_line(line: str) -> Optional[Tuple[str, str]]:
    """Return ``(name, value)`` for a ``[export ]NAME=VALUE`` line, else ``None``."""
    line = line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    name, _, value = line.partition("=")
    name = name.strip()
    if name.startswith("export "):
        name = name[len("export "):].strip()
    if not name:
        return None
    return name, value.strip().strip("\"'")


def _load_dotenv_once() -> None:
    """Load ``DOTENV_FILE`` (default ``.env``) into the environment once.

    A variable is only written when it is unset or holds a placeholder, so
    real environment values always win over the file.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    _DOTENV_LOADED = True
    path = Path(os.getenv("DOTENV_FILE", ".env"))
    if not path.is_file():
        return
    for raw in path.read_text(encoding="utf-8").splitlines():
        parsed = _parse_dotenv_line(raw)
        if parsed is None:
            continue
        name, value = parsed
        current = os.environ.get(name)
        if current is None or is_placeholder(current):
            os.environ[name] = value


def _parse_config_text(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError:
            data = {}
    return data if isinstance(data, dict) else {}


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE, _FILE_CACHE_PATH
    path = os.getenv("OPENAI_REST_CONFIG_FILE")
    if _FILE_CACHE is not None and _FILE_CACHE_PATH == path:
        return _FILE_CACHE
    _FILE_CACHE_PATH = path
    if not path or not Path(path).is_file():
        _FILE_CACHE = {}
        return _FILE_CACHE
    data = _parse_config_text(Path(path).read_text(encoding="utf-8"))
    section = data.get(CONFIG_SECTION)
    _FILE_CACHE = section if isinstance(section, dict) else {}
    return _FILE_CACHE


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    key, _ = resolve_api_key()
    if key:
        out["api_key"] = key
    base_url = resolve_base_url()
    if base_url:
        out["base_url"] = base_url
    return out


def get_client_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged client configuration.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored.
    """
    _load_dotenv_once()
    cfg: Dict[str, Any] = dict(DEFAULTS)
    cfg |= _load_external_config()
    cfg |= _env_overrides()
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


def reset_config_cache() -> None:
    """Forget the cached config file and allow the .env file to be re-read."""
    global _FILE_CACHE, _FILE_CACHE_PATH, _DOTENV_LOADED
    _FILE_CACHE = None
    _FILE_CACHE_PATH = None
    _DOTENV_LOADED = False


__all__ = [
    "get_client_config",
    "reset_config_cache",
    "DEFAULTS",
    "CONFIG_SECTION",
]
