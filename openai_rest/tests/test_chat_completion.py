from __future__ import annotations

import asyncio

import httpx
import pytest
from pydantic import BaseModel, Field, ValidationError

from openai_rest.base.credentials import Credentials
from openai_rest.chat import (
    ChatCompletion,
    ChatCompletionMessage,
    ChatCompletionMessageRole,
    ChatCompletionRequest,
    ChatCompletionResponseFormat,
    ChatCompletionTool,
    ContentPart,
    ToolCall,
    ToolCallFunction,
    tool_choice_function,
)

_RESPONSE = {
    "id": "chatcmpl-1",
    "object": "chat.completion",
    "created": 100,
    "model": "gpt-4o-mini",
    "choices": [
        {
            "index": 0,
            "finish_reason": None,
            "message": {"role": "assistant", "content": "Hi there", "tool_calls": []},
        }
    ],
    "usage": {"prompt_tokens": 5, "completion_tokens": 2, "total_tokens": 7},
    "system_fingerprint": "fp_1",
    "unexpected": {"nested": True},
}


class GetWeather(BaseModel):
    """Look up the weather for a city."""

    city: str = Field(..., description="City name")


def test_create_chat_completion(mock_api):
    mock_api.add("POST", "chat/completions", _RESPONSE)
    messages = [ChatCompletionMessage.system("Be brief."), ChatCompletionMessage.user("Hello")]
    result = ChatCompletion.builder("gpt-4o-mini", messages).temperature(0.0).create()
    assert result.text == "Hi there"
    choice = result.choices[0]
    assert choice.finish_reason == ""
    assert choice.message.role is ChatCompletionMessageRole.ASSISTANT
    assert choice.message.tool_calls is None
    assert result.usage.total_tokens == 7
    assert mock_api.last_json() == {
        "model": "gpt-4o-mini",
        "messages": [{"role": "system", "content": "Be brief."}, {"role": "user", "content": "Hello"}],
        "temperature": 0.0,
    }


def test_request_body_omits_empty_and_merges_extra_body():
    req = ChatCompletionRequest(
        model="m",
        messages=[ChatCompletionMessage.user("x")],
        stop=[],
        user="",
        credentials=Credentials(api_key="sk-do-not-send-1234"),
        extra_body={"service_tier": "flex"},
    )
    body = req.to_body()
    assert body == {"model": "m", "messages": [{"role": "user", "content": "x"}], "service_tier": "flex"}


def test_request_validation():
    with pytest.raises(ValidationError):
        ChatCompletionRequest(model="m", messages=[])
    with pytest.raises(ValidationError):
        ChatCompletionRequest(model="m", messages=[ChatCompletionMessage.user("x")], top_p=1.5)
    with pytest.raises(ValidationError):
        ChatCompletionRequest(model="m", messages=[ChatCompletionMessage.user("x")], bogus=True)


def test_tools_and_tool_choice():
    tool = ChatCompletionTool.from_model(GetWeather)
    req = ChatCompletionRequest(
        model="m",
        messages=[ChatCompletionMessage.user("weather in Oslo?")],
        tools=[tool],
        tool_choice=tool_choice_function("GetWeather"),
    )
    body = req.to_body()
    fn = body["tools"][0]["function"]
    assert fn["name"] == "GetWeather"
    assert fn["strict"] is True
    assert fn["description"] == "Look up the weather for a city."
    assert fn["parameters"]["required"] == ["city"]
    assert body["tool_choice"] == {"type": "function", "function": {"name": "GetWeather"}}
    with pytest.raises(ValidationError):
        ChatCompletionRequest(
            model="m",
            messages=[ChatCompletionMessage.user("x")],
            tools=[tool],
            tool_choice=tool_choice_function("Other"),
        )
    assert ChatCompletionRequest(model="m", messages=[ChatCompletionMessage.user("x")], tool_choice="auto").to_body()[
        "tool_choice"
    ] == "auto"


def test_response_format_uses_schema_key():
    fmt = ChatCompletionResponseFormat.from_model(GetWeather)
    req = ChatCompletionRequest(model="m", messages=[ChatCompletionMessage.user("x")], response_format=fmt)
    body = req.to_body()["response_format"]
    assert body["type"] == "json_schema"
    assert body["json_schema"]["name"] == "GetWeather"
    assert body["json_schema"]["schema"]["additionalProperties"] is False
    assert ChatCompletionResponseFormat.json_object().model_dump(exclude_none=True) == {"type": "json_object"}


def test_message_constructors_and_text():
    tool_msg = ChatCompletionMessage.tool("call_1", "42")
    assert tool_msg.role is ChatCompletionMessageRole.TOOL
    assert tool_msg.tool_call_id == "call_1"
    multi = ChatCompletionMessage.user([ContentPart.of_text("a"), ContentPart.of_image("https://img"), ContentPart.of_text("b")])
    assert multi.text == "ab"
    dumped = multi.model_dump(mode="json", exclude_none=True)
    assert dumped["content"][1] == {"type": "image_url", "image_url": {"url": "https://img"}}
    call = ToolCall(id="call_1", function=ToolCallFunction(name="f", arguments="{}"))
    assistant = ChatCompletionMessage.assistant(tool_calls=[call])
    assert assistant.model_dump(mode="json", exclude_none=True) == {
        "role": "assistant",
        "tool_calls": [{"id": "call_1", "type": "function", "function": {"name": "f", "arguments": "{}"}}],
    }
    assert ChatCompletionMessage.developer("d").role is ChatCompletionMessageRole.DEVELOPER


def test_stored_completion_endpoints(mock_api):
    mock_api.add("GET", "chat/completions/chatcmpl-1", _RESPONSE)
    mock_api.add(
        "GET",
        "chat/completions/chatcmpl-1/messages",
        {"object": "list", "data": [{"role": "user", "content": "Hello", "id": "m1"}], "has_more": False, "last_id": "m1"},
    )
    assert ChatCompletion.retrieve("chatcmpl-1").id == "chatcmpl-1"
    messages = ChatCompletion.list_messages("chatcmpl-1")
    assert messages.data[0].text == "Hello"
    assert messages.last_id == "m1"


def test_all_messages_follows_pages(mock_api):
    pages = {
        None: {"data": [{"role": "user", "content": "Hello", "id": "m1"}], "has_more": True, "last_id": "m1"},
        "m1": {"data": [{"role": "assistant", "content": "Hi there", "id": "m2"}], "has_more": False, "last_id": "m2"},
    }

    def route(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=pages[request.url.params.get("after")])

    mock_api.add("GET", "chat/completions/chatcmpl-1/messages", route)
    messages = ChatCompletion.all_messages("chatcmpl-1")
    assert [m.text for m in messages] == ["Hello", "Hi there"]
    assert messages[1].role is ChatCompletionMessageRole.ASSISTANT
    assert mock_api.last.url.params["order"] == "asc"
    again = asyncio.run(ChatCompletion.aall_messages("chatcmpl-1"))
    assert [m.text for m in again] == ["Hello", "Hi there"]


def test_async_create(mock_api):
    mock_api.add("POST", "chat/completions", _RESPONSE)
    request = ChatCompletion.builder("gpt-4o-mini", [ChatCompletionMessage.user("Hello")]).build()
    result = asyncio.run(ChatCompletion.acreate(request))
    assert result.system_fingerprint == "fp_1"
