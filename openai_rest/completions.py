"""Legacy text completions (``POST completions``).

Given a prompt, the model returns one or more predicted completions and can
optionally return the log-probabilities of alternative tokens. Streaming
yields one :class:`Completion` chunk per server-sent event; chunks that do
not decode are logged as ``stream.decode_error`` and skipped.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict, Iterator, List, Optional, Union

from pydantic import Field, ValidationError

from .base.builder import RequestBuilder
from .base.dto import ApiModel, RequestModel, Usage
from .base.http import ApiClient, decode_response
from .base.logging import LogContext, get_logger, log_event

ROUTE = "completions"

_logger = get_logger("openai_rest.completions")


class CompletionRequest(RequestModel):
    """Request body for ``POST completions``."""

    model: str = Field(..., min_length=1)
    prompt: Optional[Union[str, List[str]]] = None
    suffix: Optional[str] = None
    max_tokens: Optional[int] = Field(default=None, gt=0)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    n: Optional[int] = Field(default=None, gt=0)
    stream: Optional[bool] = None
    logprobs: Optional[int] = Field(default=None, ge=0)
    echo: Optional[bool] = None
    stop: Optional[Union[str, List[str]]] = None
    presence_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0)
    frequency_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0)
    best_of: Optional[int] = Field(default=None, gt=0)
    logit_bias: Optional[Dict[str, int]] = None
    user: Optional[str] = None
    seed: Optional[int] = None

    _skip_when_empty = ("stop", "user")


class CompletionChoice(ApiModel):
    text: str = ""
    index: int = 0
    logprobs: Optional[Any] = None
    finish_reason: Optional[str] = None


class Completion(ApiModel):
    """A text completion (or one streamed chunk of it)."""

    id: str = ""
    object: str = "text_completion"
    created: int = 0
    model: str = ""
    choices: List[CompletionChoice] = Field(default_factory=list)
    usage: Optional[Usage] = None

    @property
    def text(self) -> str:
        """Text of the first choice (empty when there is none)."""
        return self.choices[0].text if self.choices else ""

    @classmethod
    def builder(cls, model: str) -> RequestBuilder[CompletionRequest]:
        return RequestBuilder(CompletionRequest, cls, model=model)

    @classmethod
    def create(cls, request: CompletionRequest) -> "Completion":
        payload = ApiClient(request.credentials, resource="completions").post(
            ROUTE, request.to_body(), model=request.model
        )
        return decode_response(cls, payload)

    @classmethod
    async def acreate(cls, request: CompletionRequest) -> "Completion":
        payload = await ApiClient(request.credentials, resource="completions").apost(
            ROUTE, request.to_body(), model=request.model
        )
        return decode_response(cls, payload)

    @classmethod
    def create_stream(cls, request: CompletionRequest) -> Iterator["Completion"]:
        """Stream completion chunks; the request is sent with ``stream=true``."""
        ctx = LogContext(resource="completions", model=request.model)
        client = ApiClient(request.credentials, resource="completions")
        for payload in client.stream("POST", ROUTE, json=_stream_body(request), model=request.model):
            chunk = _decode_chunk(payload, ctx)
            if chunk is not None:
                yield chunk

    @classmethod
    async def acreate_stream(cls, request: CompletionRequest) -> AsyncIterator["Completion"]:
        ctx = LogContext(resource="completions", model=request.model)
        client = ApiClient(request.credentials, resource="completions")
        async for payload in client.astream("POST", ROUTE, json=_stream_body(request), model=request.model):
            chunk = _decode_chunk(payload, ctx)
            if chunk is not None:
                yield chunk


def _stream_body(request: CompletionRequest) -> Dict[str, Any]:
    body = request.to_body()
    body["stream"] = True
    return body


def _decode_chunk(payload: Dict[str, Any], ctx: LogContext) -> Optional[Completion]:
    try:
        return Completion.model_validate(payload)
    except ValidationError as exc:
        log_event(_logger, "stream.decode_error", ctx, level=logging.WARNING, error=str(exc), data=payload)
        return None


__all__ = ["CompletionRequest", "CompletionChoice", "Completion"]
