from __future__ import annotations

import threading

import pytest

from openai_rest.base.credentials import (
    Credentials,
    default_credentials,
    normalize_base_url,
    reset_default_credentials,
    resolve_credentials,
    set_base_url,
    set_credentials,
    set_key,
)
from openai_rest.base.errors import MissingCredentialsError
from openai_rest.config.defaults import OPENAI_DEFAULT_BASE_URL


def test_normalize_base_url():
    assert normalize_base_url("https://x.local/v1") == "https://x.local/v1/"
    assert normalize_base_url(" https://x.local/v1/// ") == "https://x.local/v1/"


def test_credentials_defaults_and_masking():
    c = Credentials(api_key="sk-abcdefghijklmnop")
    assert c.base_url == OPENAI_DEFAULT_BASE_URL
    assert "abcdefghijklmnop" not in repr(c)
    assert c.masked_key == "sk-...mnop"
    assert Credentials(api_key="short").masked_key == "***"


def test_credentials_are_immutable_values():
    c = Credentials(api_key="sk-one", base_url="https://a.local/v1")
    c2 = c.with_key("sk-two")
    assert c.api_key == "sk-one"
    assert c2.api_key == "sk-two"
    assert c2.base_url == "https://a.local/v1/"
    assert c.with_base_url("https://b.local").base_url == "https://b.local/"
    with pytest.raises(AttributeError):
        c.api_key = "x"  # type: ignore[misc]


def test_from_env_reads_key_and_base_url(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-alias-key")
    monkeypatch.setenv("OPENAI_BASE_URL", "https://proxy.local/v1")
    c = Credentials.from_env()
    assert c.api_key == "sk-alias-key"
    assert c.base_url == "https://proxy.local/v1/"


def test_from_env_without_key_raises():
    with pytest.raises(MissingCredentialsError):
        Credentials.from_env()


def test_default_is_loaded_lazily_and_cached(monkeypatch):
    monkeypatch.setenv("OPENAI_KEY", "sk-first")
    first = default_credentials()
    monkeypatch.setenv("OPENAI_KEY", "sk-second")
    assert default_credentials() is first
    reset_default_credentials()
    assert default_credentials().api_key == "sk-second"


def test_set_key_keeps_base_url(monkeypatch):
    monkeypatch.setenv("OPENAI_BASE_URL", "https://proxy.local/v1")
    set_key("sk-set")
    assert default_credentials() == Credentials(api_key="sk-set", base_url="https://proxy.local/v1")
    set_base_url("https://other.local/v2")
    assert default_credentials().api_key == "sk-set"
    assert default_credentials().base_url == "https://other.local/v2/"


def test_set_base_url_before_key(monkeypatch):
    monkeypatch.setenv("OPENAI_KEY", "sk-env")
    set_base_url("https://other.local")
    assert default_credentials().api_key == "sk-env"


def test_resolve_prefers_explicit():
    explicit = Credentials(api_key="sk-explicit")
    set_credentials(Credentials(api_key="sk-default"))
    assert resolve_credentials(explicit) is explicit
    assert resolve_credentials(None).api_key == "sk-default"


def test_concurrent_set_key_is_consistent():
    set_credentials(Credentials(api_key="sk-0", base_url="https://fixed.local"))

    def worker(i: int) -> None:
        set_key(f"sk-{i}")

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    final = default_credentials()
    assert final.base_url == "https://fixed.local/"
    assert final.api_key in {f"sk-{i}" for i in range(20)}
