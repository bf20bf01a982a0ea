"""openai_rest.config.env
=====================

Centralized environment variable mapping and helpers for client credentials.

Purpose
-------
- Provide a single source of truth for the environment variable names the
  client reads (canonical and aliases).
- Offer small utilities to look up and promote the API key in a consistent
  way across the package.

Design Notes
------------
- ``OPENAI_KEY`` is the canonical key variable. ``OPENAI_API_KEY`` is
  accepted as an alias since most tooling exports that name.
- Helpers never raise on unset variables; callers decide how to proceed
  (e.g., fall back to a config file or raise ``MissingCredentialsError``).
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Config field → canonical env var
ENV_MAP: Dict[str, str] = {
    "api_key": "OPENAI_KEY",  # pragma: allowlist secret - env var name, not a secret
    "base_url": "OPENAI_BASE_URL",
}

# Config field → ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "api_key": ("OPENAI_KEY", "OPENAI_API_KEY"),
}


_PLACEHOLDER_MARKERS = ("placeholder", "changeme", "example")


def is_placeholder(val: Optional[str]) -> bool:
    """Return True for values that look like unfilled templates.

    Case-insensitive: any of :data:`_PLACEHOLDER_MARKERS` as a substring, or
    a ``test_`` prefix.
    """
    if val is None:
        return False
    normalized = str(val).strip().lower()
    return normalized.startswith("test_") or any(m in normalized for m in _PLACEHOLDER_MARKERS)


def get_env_var_name(field: str) -> Optional[str]:
    """Return the canonical environment variable name for a config field."""
    return ENV_MAP.get(field.lower()) if field else None


def get_env_var_candidates(field: str) -> Iterable[str]:
    """Yield acceptable environment variable names for a config field.

    The canonical name is yielded first, followed by any aliases.
    """
    f = (field or "").lower()
    canonical = ENV_MAP.get(f)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(f, ()):  # pragma: no branch - small tuples
        if alias != canonical:
            yield alias


def resolve_env_value(field: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve a config field from the process environment.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        (value, env_var_used) for the first non-empty candidate, or
        (None, None) when nothing is set.
    """
    for name in get_env_var_candidates(field):
        if val := os.environ.get(name):
            return val, name
    return None, None


def resolve_api_key() -> Tuple[Optional[str], Optional[str]]:
    """Resolve the API key, skipping candidates that hold placeholder values."""
    for name in get_env_var_candidates("api_key"):
        val = os.environ.get(name)
        if val and not is_placeholder(val):
            return val, name
    return None, None


def resolve_base_url() -> Optional[str]:
    """Return the base URL override from the environment, if any."""
    return resolve_env_value("base_url")[0]


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_env_value",
    "resolve_api_key",
    "resolve_base_url",
]
