from __future__ import annotations

import asyncio

import pytest

from openai_rest.base.errors import OpenAIError
from openai_rest.chat import (
    ChatCompletion,
    ChatCompletionChoiceDelta,
    ChatCompletionDelta,
    ChatCompletionDeltaMergeError,
    ChatCompletionMessage,
    ChatCompletionMessageRole,
    MergeErrorReason,
    amerge_stream,
    merge_stream,
)


def _chunk(delta, index=0, finish_reason=None, cid="chatcmpl-9", usage=None):
    data = {
        "id": cid,
        "object": "chat.completion.chunk",
        "created": 1,
        "model": "gpt-4o-mini",
        "choices": [{"index": index, "delta": delta, "finish_reason": finish_reason}],
    }
    if usage is not None:
        data["usage"] = usage
    return data


_TEXT_STREAM = [
    _chunk({"role": "assistant", "content": ""}),
    _chunk({"content": "Hel"}),
    _chunk({"content": "lo"}),
    _chunk({}, finish_reason="stop"),
    {"id": "chatcmpl-9", "choices": [], "usage": {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5}},
]


def _deltas(chunks):
    return [ChatCompletionDelta.model_validate(c) for c in chunks]


def test_merge_text_stream():
    completion = merge_stream(_deltas(_TEXT_STREAM))
    assert isinstance(completion, ChatCompletion)
    assert completion.text == "Hello"
    assert completion.choices[0].finish_reason == "stop"
    assert completion.choices[0].message.role is ChatCompletionMessageRole.ASSISTANT
    assert completion.usage.total_tokens == 5


def test_merge_does_not_mutate_first_delta():
    deltas = _deltas(_TEXT_STREAM)
    merge_stream(deltas)
    assert deltas[0].choices[0].delta.content == ""


def test_merge_tool_call_fragments():
    chunks = [
        _chunk({"role": "assistant", "tool_calls": [{"index": 0, "id": "call_a", "type": "function", "function": {"name": "lookup", "arguments": ""}}]}),
        _chunk({"tool_calls": [{"index": 0, "function": {"arguments": '{"city": '}}]}),
        _chunk({"tool_calls": [{"index": 1, "id": "call_b", "type": "function", "function": {"name": "other", "arguments": "{}"}}]}),
        _chunk({"tool_calls": [{"index": 0, "function": {"arguments": '"Oslo"}'}}]}),
        _chunk({}, finish_reason="tool_calls"),
    ]
    message = merge_stream(_deltas(chunks)).choices[0].message
    assert message.content is None
    assert [c.id for c in message.tool_calls] == ["call_a", "call_b"]
    assert message.tool_calls[0].function.name == "lookup"
    assert message.tool_calls[0].function.arguments == '{"city": "Oslo"}'
    assert message.tool_calls[1].function.arguments == "{}"


def test_merge_legacy_function_call():
    chunks = [
        _chunk({"role": "assistant", "function_call": {"name": "f", "arguments": "{\"a\""}}),
        _chunk({"function_call": {"arguments": ": 1}"}}),
    ]
    message = merge_stream(_deltas(chunks)).choices[0].message
    assert message.function_call.name == "f"
    assert message.function_call.arguments == '{"a": 1}'


def test_merge_multiple_choices_in_any_order():
    chunks = [
        _chunk({"role": "assistant", "content": "A"}, index=1),
        _chunk({"role": "assistant", "content": "B"}, index=0),
        _chunk({"content": "a"}, index=1),
    ]
    completion = merge_stream(_deltas(chunks))
    assert [c.index for c in completion.choices] == [0, 1]
    assert [c.message.text for c in completion.choices] == ["B", "Aa"]


def test_merge_rejects_different_ids():
    first, second = _deltas([_chunk({"content": "a"}), _chunk({"content": "b"}, cid="other")])
    with pytest.raises(ChatCompletionDeltaMergeError) as info:
        first.merge(second)
    assert info.value.reason is MergeErrorReason.DIFFERENT_COMPLETION_IDS


def test_choice_merge_rejects_different_indices():
    a = ChatCompletionChoiceDelta(index=0)
    b = ChatCompletionChoiceDelta(index=1)
    with pytest.raises(ChatCompletionDeltaMergeError) as info:
        a.merge(b)
    assert info.value.reason is MergeErrorReason.DIFFERENT_COMPLETION_CHOICE_INDICES


def test_merge_stream_empty():
    with pytest.raises(ValueError):
        merge_stream([])


def test_create_stream_over_http(mock_api, sse, log_capture):
    bad = {"id": "chatcmpl-9", "choices": "not-a-list"}
    mock_api.add("POST", "chat/completions", sse(_TEXT_STREAM[0], bad, *_TEXT_STREAM[1:]))
    builder = ChatCompletion.builder("gpt-4o-mini", [ChatCompletionMessage.user("Hi")])
    deltas = list(builder.create_stream())
    assert len(deltas) == len(_TEXT_STREAM)
    assert mock_api.last_json()["stream"] is True
    assert merge_stream(deltas).text == "Hello"
    errors = [e for e in log_capture.events() if e["event"] == "stream.decode_error"]
    assert errors and errors[0]["resource"] == "chat"


def test_async_stream_and_merge(mock_api, sse):
    mock_api.add("POST", "chat/completions", sse(*_TEXT_STREAM))
    request = ChatCompletion.builder("gpt-4o-mini", [ChatCompletionMessage.user("Hi")]).build()

    async def run():
        return await amerge_stream(ChatCompletionDelta.acreate(request))

    assert asyncio.run(run()).text == "Hello"


def test_error_event_mid_stream_raises(mock_api, sse):
    overloaded = {"error": {"message": "server overloaded", "type": "server_error"}}
    mock_api.add("POST", "chat/completions", sse(_TEXT_STREAM[0], overloaded, *_TEXT_STREAM[1:]))
    builder = ChatCompletion.builder("gpt-4o-mini", [ChatCompletionMessage.user("Hi")])
    received = []
    with pytest.raises(OpenAIError) as info:
        for delta in builder.create_stream():
            received.append(delta)
    assert len(received) == 1
    assert info.value.message == "server overloaded"
    assert info.value.error_type == "server_error"


def test_async_error_event_mid_stream_raises(mock_api, sse):
    mock_api.add("POST", "chat/completions", sse({"error": {"message": "server overloaded", "type": "server_error"}}))
    request = ChatCompletion.builder("gpt-4o-mini", [ChatCompletionMessage.user("Hi")]).build()
    with pytest.raises(OpenAIError):
        asyncio.run(amerge_stream(ChatCompletion.acreate_stream(request)))
