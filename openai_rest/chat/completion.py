"""Chat completions: create, stream, merge stream deltas, stored completions.

Streaming
---------
``ChatCompletionDelta.create`` (or ``ChatCompletion.create_stream``) sends the
request with ``stream=true`` and yields one :class:`ChatCompletionDelta` per
server-sent event. Events that do not decode into a delta are logged as
``stream.decode_error`` and skipped.

Merging
-------
``ChatCompletionDelta.merge`` folds a later chunk into an accumulated one:

* both chunks must carry the same completion id;
* choices are matched by ``index`` (new indices are appended);
* role, name, tool_call_id and finish_reason are filled when still unset;
* string content is concatenated, multi-part content is extended;
* function-call and tool-call argument fragments are concatenated, tool calls
  being matched by their own ``index``;
* a later ``usage`` replaces the accumulated one.

``to_completion`` turns the accumulated delta into a :class:`ChatCompletion`
(role defaults to assistant, finish_reason to ``""``) and
:func:`merge_stream` / :func:`amerge_stream` do the whole fold.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterable, AsyncIterator, Dict, Iterable, Iterator, List, Optional

from pydantic import Field, ValidationError, field_validator

from ..base.builder import RequestBuilder
from ..base.credentials import Credentials
from ..base.dto import ApiModel, Usage
from ..base.http import ApiClient, decode_response
from ..base.logging import LogContext, get_logger, log_event
from .request import ChatCompletionRequest
from .types import (
    ChatCompletionDeltaMergeError,
    ChatCompletionMessage,
    ChatCompletionMessageDelta,
    ContentPart,
    MergeErrorReason,
)

ROUTE = "chat/completions"

_logger = get_logger("openai_rest.chat")


class ChatCompletionChoice(ApiModel):
    index: int = 0
    finish_reason: str = ""
    message: ChatCompletionMessage
    logprobs: Optional[Any] = None

    @field_validator("finish_reason", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class ChatCompletionChoiceDelta(ApiModel):
    index: int = 0
    finish_reason: Optional[str] = None
    delta: ChatCompletionMessageDelta = Field(default_factory=ChatCompletionMessageDelta)
    logprobs: Optional[Any] = None

    def merge(self, other: "ChatCompletionChoiceDelta") -> None:
        """Fold ``other`` into this choice in place.

        Raises:
            ChatCompletionDeltaMergeError: When the indices differ.
        """
        if self.index != other.index:
            raise ChatCompletionDeltaMergeError(
                MergeErrorReason.DIFFERENT_COMPLETION_CHOICE_INDICES, f"{self.index} != {other.index}"
            )
        mine, theirs = self.delta, other.delta
        if mine.role is None:
            mine.role = theirs.role
        if self.finish_reason is None:
            self.finish_reason = other.finish_reason
        if mine.name is None:
            mine.name = theirs.name
        if mine.tool_call_id is None:
            mine.tool_call_id = theirs.tool_call_id
        if theirs.refusal is not None:
            mine.refusal = (mine.refusal or "") + theirs.refusal

        mine.content = _merge_content(mine.content, theirs.content)

        if theirs.function_call is not None:
            if mine.function_call is None:
                mine.function_call = theirs.function_call.model_copy(deep=True)
            else:
                if mine.function_call.name is None:
                    mine.function_call.name = theirs.function_call.name
                if theirs.function_call.arguments is not None:
                    mine.function_call.arguments = (mine.function_call.arguments or "") + theirs.function_call.arguments

        if theirs.tool_calls:
            if mine.tool_calls is None:
                mine.tool_calls = []
            by_index = {tc.index: tc for tc in mine.tool_calls}
            for tc in theirs.tool_calls:
                existing = by_index.get(tc.index)
                if existing is None:
                    copy = tc.model_copy(deep=True)
                    mine.tool_calls.append(copy)
                    by_index[copy.index] = copy
                else:
                    existing.merge(tc)


def _merge_content(mine: Any, theirs: Any) -> Any:
    if theirs is None:
        return mine
    if mine is None:
        return theirs if isinstance(theirs, str) else [p.model_copy(deep=True) for p in theirs]
    if isinstance(mine, str) and isinstance(theirs, str):
        return mine + theirs
    parts: List[ContentPart] = [ContentPart.of_text(mine)] if isinstance(mine, str) else list(mine)
    if isinstance(theirs, str):
        parts.append(ContentPart.of_text(theirs))
    else:
        parts.extend(p.model_copy(deep=True) for p in theirs)
    return parts


class ChatCompletion(ApiModel):
    """A complete chat completion."""

    id: str = ""
    object: str = "chat.completion"
    created: int = 0
    model: str = ""
    choices: List[ChatCompletionChoice] = Field(default_factory=list)
    usage: Optional[Usage] = None
    system_fingerprint: Optional[str] = None
    service_tier: Optional[str] = None

    @property
    def message(self) -> Optional[ChatCompletionMessage]:
        """Message of the first choice, if any."""
        return self.choices[0].message if self.choices else None

    @property
    def text(self) -> str:
        message = self.message
        return message.text if message is not None else ""

    @classmethod
    def builder(cls, model: str, messages: Iterable[ChatCompletionMessage]) -> RequestBuilder[ChatCompletionRequest]:
        return RequestBuilder(ChatCompletionRequest, cls, model=model, messages=list(messages))

    @classmethod
    def create(cls, request: ChatCompletionRequest) -> "ChatCompletion":
        payload = ApiClient(request.credentials, resource="chat").post(ROUTE, request.to_body(), model=request.model)
        return decode_response(cls, payload)

    @classmethod
    async def acreate(cls, request: ChatCompletionRequest) -> "ChatCompletion":
        payload = await ApiClient(request.credentials, resource="chat").apost(
            ROUTE, request.to_body(), model=request.model
        )
        return decode_response(cls, payload)

    @classmethod
    def create_stream(cls, request: ChatCompletionRequest) -> Iterator["ChatCompletionDelta"]:
        return ChatCompletionDelta.create(request)

    @classmethod
    def acreate_stream(cls, request: ChatCompletionRequest) -> AsyncIterator["ChatCompletionDelta"]:
        return ChatCompletionDelta.acreate(request)

    @classmethod
    def retrieve(cls, completion_id: str, credentials: Optional[Credentials] = None) -> "ChatCompletion":
        """Fetch a completion created with ``store=true``."""
        payload = ApiClient(credentials, resource="chat").get(f"{ROUTE}/{completion_id}")
        return decode_response(cls, payload)

    @classmethod
    async def aretrieve(cls, completion_id: str, credentials: Optional[Credentials] = None) -> "ChatCompletion":
        payload = await ApiClient(credentials, resource="chat").aget(f"{ROUTE}/{completion_id}")
        return decode_response(cls, payload)

    @classmethod
    def list_messages(cls, completion_id: str, credentials: Optional[Credentials] = None) -> "ChatCompletionMessages":
        """Fetch the messages of a stored completion."""
        payload = ApiClient(credentials, resource="chat").get(f"{ROUTE}/{completion_id}/messages")
        return decode_response(ChatCompletionMessages, payload)

    @classmethod
    async def alist_messages(
        cls, completion_id: str, credentials: Optional[Credentials] = None
    ) -> "ChatCompletionMessages":
        payload = await ApiClient(credentials, resource="chat").aget(f"{ROUTE}/{completion_id}/messages")
        return decode_response(ChatCompletionMessages, payload)

    @classmethod
    def all_messages(cls, completion_id: str, credentials: Optional[Credentials] = None) -> List[ChatCompletionMessage]:
        """Fetch every message of a stored completion, following ``has_more`` pages."""
        items = ApiClient(credentials, resource="chat").list_all(f"{ROUTE}/{completion_id}/messages")
        return [decode_response(ChatCompletionMessage, item) for item in items]

    @classmethod
    async def aall_messages(
        cls, completion_id: str, credentials: Optional[Credentials] = None
    ) -> List[ChatCompletionMessage]:
        items = await ApiClient(credentials, resource="chat").alist_all(f"{ROUTE}/{completion_id}/messages")
        return [decode_response(ChatCompletionMessage, item) for item in items]


class ChatCompletionMessages(ApiModel):
    """Messages of a stored chat completion."""

    object: str = "list"
    data: List[ChatCompletionMessage] = Field(default_factory=list)
    first_id: Optional[str] = None
    last_id: Optional[str] = None
    has_more: bool = False


def _stream_body(request: ChatCompletionRequest) -> Dict[str, Any]:
    body = request.to_body()
    body["stream"] = True
    return body


def _decode_delta(payload: Dict[str, Any], ctx: LogContext) -> Optional["ChatCompletionDelta"]:
    try:
        return ChatCompletionDelta.model_validate(payload)
    except ValidationError as exc:
        log_event(_logger, "stream.decode_error", ctx, level=logging.WARNING, error=str(exc), data=payload)
        return None


class ChatCompletionDelta(ApiModel):
    """One streamed chunk of a chat completion (or several merged chunks)."""

    id: str = ""
    object: str = "chat.completion.chunk"
    created: int = 0
    model: str = ""
    choices: List[ChatCompletionChoiceDelta] = Field(default_factory=list)
    usage: Optional[Usage] = None
    system_fingerprint: Optional[str] = None

    @classmethod
    def create(cls, request: ChatCompletionRequest) -> Iterator["ChatCompletionDelta"]:
        """Stream deltas for ``request``. The request is sent on first iteration."""
        ctx = LogContext(resource="chat", model=request.model)
        client = ApiClient(request.credentials, resource="chat")
        for payload in client.stream("POST", ROUTE, json=_stream_body(request), model=request.model):
            delta = _decode_delta(payload, ctx)
            if delta is not None:
                yield delta

    @classmethod
    async def acreate(cls, request: ChatCompletionRequest) -> AsyncIterator["ChatCompletionDelta"]:
        ctx = LogContext(resource="chat", model=request.model)
        client = ApiClient(request.credentials, resource="chat")
        async for payload in client.astream("POST", ROUTE, json=_stream_body(request), model=request.model):
            delta = _decode_delta(payload, ctx)
            if delta is not None:
                yield delta

    def merge(self, other: "ChatCompletionDelta") -> None:
        """Fold a later chunk into this one in place.

        Raises:
            ChatCompletionDeltaMergeError: When the completion ids (or the
                indices of matched choices) differ.
        """
        if other.id != self.id:
            raise ChatCompletionDeltaMergeError(
                MergeErrorReason.DIFFERENT_COMPLETION_IDS, f"{self.id!r} != {other.id!r}"
            )
        by_index = {c.index: c for c in self.choices}
        for other_choice in other.choices:
            choice = by_index.get(other_choice.index)
            if choice is None:
                copy = other_choice.model_copy(deep=True)
                self.choices.append(copy)
                by_index[copy.index] = copy
            else:
                choice.merge(other_choice)
        if other.usage is not None:
            self.usage = other.usage.model_copy()
        if self.system_fingerprint is None:
            self.system_fingerprint = other.system_fingerprint

    def to_completion(self) -> ChatCompletion:
        return ChatCompletion(
            id=self.id,
            object=self.object,
            created=self.created,
            model=self.model,
            usage=self.usage,
            system_fingerprint=self.system_fingerprint,
            choices=[
                ChatCompletionChoice(
                    index=c.index,
                    finish_reason=c.finish_reason or "",
                    message=c.delta.to_message(),
                    logprobs=c.logprobs,
                )
                for c in sorted(self.choices, key=lambda c: c.index)
            ],
        )


def merge_stream(deltas: Iterable[ChatCompletionDelta]) -> ChatCompletion:
    """Fold a whole stream of deltas into one :class:`ChatCompletion`.

    Raises:
        ValueError: When the stream produced no deltas.
        ChatCompletionDeltaMergeError: When chunks belong to different completions.
    """
    acc: Optional[ChatCompletionDelta] = None
    for delta in deltas:
        if acc is None:
            acc = delta.model_copy(deep=True)
        else:
            acc.merge(delta)
    if acc is None:
        raise ValueError("stream produced no deltas")
    return acc.to_completion()


async def amerge_stream(deltas: AsyncIterable[ChatCompletionDelta]) -> ChatCompletion:
    acc: Optional[ChatCompletionDelta] = None
    async for delta in deltas:
        if acc is None:
            acc = delta.model_copy(deep=True)
        else:
            acc.merge(delta)
    if acc is None:
        raise ValueError("stream produced no deltas")
    return acc.to_completion()


__all__ = [
    "ChatCompletionChoice",
    "ChatCompletionChoiceDelta",
    "ChatCompletion",
    "ChatCompletionMessages",
    "ChatCompletionDelta",
    "merge_stream",
    "amerge_stream",
]
