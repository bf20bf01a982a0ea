"""API credentials and the process-wide default.

A :class:`Credentials` value pairs an API key with the base URL requests are
sent to. Every request type accepts an optional ``credentials`` field; when it
is absent the process-wide default is used. The default is created lazily from
:func:`openai_rest.config.get_client_config` (config file, ``OPENAI_KEY`` /
``OPENAI_API_KEY`` and ``OPENAI_BASE_URL``) and can be replaced at runtime with
:func:`set_key`, :func:`set_base_url` or :func:`set_credentials`. All access to
the default is guarded by a re-entrant lock.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from typing import Optional

from ..config import get_client_config
from ..config.defaults import OPENAI_DEFAULT_BASE_URL
from .errors import MissingCredentialsError


def normalize_base_url(url: str) -> str:
    """Return ``url`` stripped of surrounding whitespace and ending in exactly one ``/``."""
    return url.strip().rstrip("/") + "/"


@dataclass(frozen=True)
class Credentials:
    """API key plus base URL. The key is masked in ``repr``."""

    api_key: str = field(repr=False)
    base_url: str = OPENAI_DEFAULT_BASE_URL

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", normalize_base_url(self.base_url or OPENAI_DEFAULT_BASE_URL))

    def __repr__(self) -> str:
        return f"Credentials(api_key='{self.masked_key}', base_url='{self.base_url}')"

    @property
    def masked_key(self) -> str:
        if len(self.api_key) <= 8:
            return "***"
        return f"{self.api_key[:3]}...{self.api_key[-4:]}"

    @classmethod
    def from_env(cls) -> "Credentials":
        """Resolve credentials from config file and environment.

        Raises:
            MissingCredentialsError: When no usable (non-placeholder) key is set.
        """
        cfg = get_client_config()
        api_key = cfg.get("api_key")
        if not api_key:
            raise MissingCredentialsError(
                "no API key found; set OPENAI_KEY (or OPENAI_API_KEY) or call openai_rest.set_key()"
            )
        return cls(api_key=str(api_key), base_url=str(cfg.get("base_url") or OPENAI_DEFAULT_BASE_URL))

    def with_key(self, api_key: str) -> "Credentials":
        return replace(self, api_key=api_key)

    def with_base_url(self, base_url: str) -> "Credentials":
        return replace(self, base_url=base_url)


_DEFAULT: Optional[Credentials] = None
_LOCK = threading.RLock()


def default_credentials() -> Credentials:
    """Return the process-wide default credentials, loading them on first use."""
    global _DEFAULT
    with _LOCK:
        if _DEFAULT is None:
            _DEFAULT = Credentials.from_env()
        return _DEFAULT


def set_credentials(credentials: Credentials) -> None:
    """Replace the process-wide default credentials."""
    global _DEFAULT
    with _LOCK:
        _DEFAULT = credentials


def set_key(api_key: str) -> None:
    """Set the default API key, keeping the current (or configured) base URL."""
    global _DEFAULT
    with _LOCK:
        if _DEFAULT is not None:
            _DEFAULT = _DEFAULT.with_key(api_key)
            return
        base_url = get_client_config().get("base_url") or OPENAI_DEFAULT_BASE_URL
        _DEFAULT = Credentials(api_key=api_key, base_url=str(base_url))


def set_base_url(base_url: str) -> None:
    """Set the default base URL, keeping the current (or configured) key."""
    global _DEFAULT
    with _LOCK:
        if _DEFAULT is not None:
            _DEFAULT = _DEFAULT.with_base_url(base_url)
            return
        api_key = get_client_config().get("api_key") or ""
        _DEFAULT = Credentials(api_key=str(api_key), base_url=base_url)


def reset_default_credentials() -> None:
    """Forget the default so the next call re-reads the environment."""
    global _DEFAULT
    with _LOCK:
        _DEFAULT = None


def resolve_credentials(credentials: Optional[Credentials]) -> Credentials:
    """Return ``credentials`` when given, else the process-wide default."""
    return credentials if credentials is not None else default_credentials()


__all__ = [
    "Credentials",
    "normalize_base_url",
    "default_credentials",
    "set_credentials",
    "set_key",
    "set_base_url",
    "reset_default_credentials",
    "resolve_credentials",
]
