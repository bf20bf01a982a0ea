from __future__ import annotations

import openai_rest


def test_public_exports_resolve():
    for name in openai_rest.__all__:
        assert hasattr(openai_rest, name), name


def test_set_key_reaches_requests(mock_api):
    openai_rest.set_key("sk-from-set-key-1234")
    mock_api.add("GET", "models", {"data": [{"id": "gpt-4o-mini"}]})
    assert [m.id for m in openai_rest.Model.list()] == ["gpt-4o-mini"]
    assert mock_api.last.headers["Authorization"] == "Bearer sk-from-set-key-1234"
