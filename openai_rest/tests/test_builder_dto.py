from __future__ import annotations

import asyncio

import pytest
from pydantic import ValidationError

from openai_rest.base.builder import RequestBuilder
from openai_rest.base.credentials import Credentials
from openai_rest.base.dto import DeletedObject, ListPage, RequestModel, Usage
from openai_rest.completions import Completion, CompletionRequest


class _Target:
    @staticmethod
    def create(request):
        return ("sync", request)

    @staticmethod
    async def acreate(request):
        return ("async", request)


class _Req(RequestModel):
    model: str
    tags: list = []
    note: str = ""

    _skip_when_empty = ("tags", "note")


def test_setters_return_new_builders():
    b1 = RequestBuilder(CompletionRequest, Completion, model="m")
    b2 = b1.max_tokens(16)
    b3 = b2.temperature(0.5)
    assert b1.fields == {"model": "m"}
    assert b2.fields == {"model": "m", "max_tokens": 16}
    assert b3.build().temperature == 0.5
    assert b1 != b2
    assert b2 == b1.set(max_tokens=16)
    assert hash(b2) == hash(b1.set(max_tokens=16))


def test_unset_and_clone():
    b = RequestBuilder(CompletionRequest, Completion, model="m").n(2)
    assert b.unset("n").fields == {"model": "m"}
    assert b.clone() == b
    assert b.clone() is not b


def test_unknown_fields_and_immutability():
    b = RequestBuilder(CompletionRequest, Completion, model="m")
    with pytest.raises(AttributeError):
        b.not_a_field(1)
    with pytest.raises(AttributeError):
        b.set(nope=1)
    with pytest.raises(AttributeError):
        b.model = "x"  # type: ignore[misc]
    assert "model='m'" in repr(b)


def test_build_validates():
    with pytest.raises(ValidationError):
        RequestBuilder(CompletionRequest, Completion).build()
    with pytest.raises(ValidationError):
        RequestBuilder(CompletionRequest, Completion, model="m").temperature(3.0).build()


def test_create_delegates_to_target():
    b = RequestBuilder(_Req, _Target, model="m")
    kind, req = b.create()
    assert kind == "sync"
    assert req.model == "m"
    kind, _ = asyncio.run(b.acreate())
    assert kind == "async"
    with pytest.raises(AttributeError):
        b.create_stream()


def test_to_body_skips_empty_and_credentials():
    creds = Credentials(api_key="sk-secret-value-123")
    body = _Req(model="m", credentials=creds).to_body()
    assert body == {"model": "m"}
    assert _Req(model="m", tags=["a"], note="n").to_body() == {"model": "m", "tags": ["a"], "note": "n"}


def test_request_models_reject_unknown_fields():
    with pytest.raises(ValidationError):
        _Req(model="m", extra_field=1)


def test_shared_response_shapes():
    page = ListPage[Usage].model_validate({"data": [{"prompt_tokens": 1, "total_tokens": 1}], "has_more": True, "new": 1})
    assert page.data[0].completion_tokens is None
    assert page.has_more is True
    deleted = DeletedObject.model_validate({"id": "x", "object": "model", "deleted": True})
    assert deleted.deleted is True
