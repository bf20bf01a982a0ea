"""
Chat message, tool and response-format types.

Purpose
-------
Pydantic models mirroring the chat completions wire format. The same message
model is used in request bodies and responses: serialisation drops ``None``
fields (and an empty ``tool_calls`` list) and decoding ignores unknown
fields.

Streaming counterparts (``*Delta``) carry every field as optional; the merge
logic in :mod:`openai_rest.chat.completion` folds them back into full
messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .structured_output import JsonSchemaStyle, generate_json_schema, schema_name


class ChatModel(BaseModel):
    """Base for chat types used in both directions."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ChatCompletionMessageRole(str, Enum):
    SYSTEM = "system"
    DEVELOPER = "developer"
    USER = "user"
    ASSISTANT = "assistant"
    FUNCTION = "function"
    TOOL = "tool"


class ReasoningEffort(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ImageUrl(ChatModel):
    url: str
    detail: Optional[Literal["auto", "low", "high"]] = None


class ContentPart(ChatModel):
    """One part of a multi-part message (text or image)."""

    type: Literal["text", "image_url"] = "text"
    text: Optional[str] = None
    image_url: Optional[ImageUrl] = None

    @classmethod
    def of_text(cls, text: str) -> "ContentPart":
        return cls(type="text", text=text)

    @classmethod
    def of_image(cls, url: str, detail: Optional[str] = None) -> "ContentPart":
        return cls(type="image_url", image_url=ImageUrl(url=url, detail=detail))


Content = Union[str, List[ContentPart]]


def content_text(content: Optional[Content]) -> str:
    """Concatenate the textual parts of ``content``."""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    return "".join(p.text or "" for p in content if p.type == "text")


class ChatCompletionFunctionCall(ChatModel):
    """A function call requested by the model (legacy ``functions`` API)."""

    name: str = ""
    arguments: str = ""


class FunctionCallDelta(ChatModel):
    name: Optional[str] = None
    arguments: Optional[str] = None


class ToolCallFunction(ChatModel):
    name: str = ""
    arguments: str = ""


class ToolCall(ChatModel):
    id: str = ""
    type: str = "function"
    function: ToolCallFunction = Field(default_factory=ToolCallFunction)


class ToolCallFunctionDelta(ChatModel):
    name: Optional[str] = None
    arguments: Optional[str] = None


class ToolCallDelta(ChatModel):
    """A streamed fragment of a tool call, addressed by ``index``."""

    index: int = 0
    id: Optional[str] = None
    type: Optional[str] = None
    function: Optional[ToolCallFunctionDelta] = None

    def merge(self, other: "ToolCallDelta") -> None:
        """Fold ``other`` (same index) into this fragment.

        ``id``, ``type`` and the function name are filled when unset;
        argument fragments are concatenated.
        """
        if self.id is None:
            self.id = other.id
        if self.type is None:
            self.type = other.type
        if other.function is None:
            return
        if self.function is None:
            self.function = other.function.model_copy(deep=True)
            return
        if self.function.name is None:
            self.function.name = other.function.name
        if other.function.arguments is not None:
            self.function.arguments = (self.function.arguments or "") + other.function.arguments

    def to_tool_call(self) -> ToolCall:
        fn = self.function or ToolCallFunctionDelta()
        return ToolCall(
            id=self.id or "",
            type=self.type or "function",
            function=ToolCallFunction(name=fn.name or "", arguments=fn.arguments or ""),
        )


class ChatCompletionMessage(ChatModel):
    """A chat message.

    ``content`` is required for every message except assistant messages that
    only carry ``function_call`` / ``tool_calls``.
    """

    role: ChatCompletionMessageRole = ChatCompletionMessageRole.USER
    content: Optional[Content] = None
    name: Optional[str] = None
    function_call: Optional[ChatCompletionFunctionCall] = None
    tool_call_id: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None
    refusal: Optional[str] = None

    @field_validator("tool_calls", mode="after")
    @classmethod
    def _empty_tool_calls_to_none(cls, value: Optional[List[ToolCall]]) -> Optional[List[ToolCall]]:
        return value or None

    @property
    def text(self) -> str:
        return content_text(self.content)

    @classmethod
    def system(cls, content: Content) -> "ChatCompletionMessage":
        return cls(role=ChatCompletionMessageRole.SYSTEM, content=content)

    @classmethod
    def developer(cls, content: Content) -> "ChatCompletionMessage":
        return cls(role=ChatCompletionMessageRole.DEVELOPER, content=content)

    @classmethod
    def user(cls, content: Content, name: Optional[str] = None) -> "ChatCompletionMessage":
        return cls(role=ChatCompletionMessageRole.USER, content=content, name=name)

    @classmethod
    def assistant(
        cls, content: Optional[Content] = None, tool_calls: Optional[List[ToolCall]] = None
    ) -> "ChatCompletionMessage":
        return cls(role=ChatCompletionMessageRole.ASSISTANT, content=content, tool_calls=tool_calls)

    @classmethod
    def tool(cls, tool_call_id: str, content: Content) -> "ChatCompletionMessage":
        return cls(role=ChatCompletionMessageRole.TOOL, tool_call_id=tool_call_id, content=content)


class ChatCompletionMessageDelta(ChatModel):
    """A message fragment received while streaming."""

    role: Optional[ChatCompletionMessageRole] = None
    content: Optional[Content] = None
    name: Optional[str] = None
    function_call: Optional[FunctionCallDelta] = None
    tool_call_id: Optional[str] = None
    tool_calls: Optional[List[ToolCallDelta]] = None
    refusal: Optional[str] = None

    def to_message(self) -> ChatCompletionMessage:
        """Convert to a full message; the role defaults to assistant."""
        function_call = None
        if self.function_call is not None:
            function_call = ChatCompletionFunctionCall(
                name=self.function_call.name or "", arguments=self.function_call.arguments or ""
            )
        return ChatCompletionMessage(
            role=self.role or ChatCompletionMessageRole.ASSISTANT,
            content=self.content,
            name=self.name,
            function_call=function_call,
            tool_call_id=self.tool_call_id,
            tool_calls=[tc.to_tool_call() for tc in self.tool_calls or []],
            refusal=self.refusal,
        )


# ---------------------------------------------------------------- functions & tools


class ChatCompletionFunctionDefinition(ChatModel):
    """A function the model may call (legacy ``functions`` parameter)."""

    name: str
    description: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None


class ToolCallFunctionDefinition(ChatModel):
    """The function half of a tool definition."""

    name: str
    description: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None
    strict: Optional[bool] = None

    @classmethod
    def from_model(
        cls,
        model: Type[BaseModel],
        strict: bool = True,
        style: JsonSchemaStyle = JsonSchemaStyle.OPENAI,
    ) -> "ToolCallFunctionDefinition":
        """Describe a function whose parameters are the fields of ``model``.

        Grok does not support strict schema adherence, so ``strict`` is left
        unset for that style.
        """
        schema, description = generate_json_schema(model, style)
        return cls(
            name=schema_name(model),
            description=description,
            parameters=schema,
            strict=strict if style is JsonSchemaStyle.OPENAI else None,
        )


class ChatCompletionTool(ChatModel):
    type: Literal["function"] = "function"
    function: ToolCallFunctionDefinition

    @classmethod
    def from_model(
        cls,
        model: Type[BaseModel],
        strict: bool = True,
        style: JsonSchemaStyle = JsonSchemaStyle.OPENAI,
    ) -> "ChatCompletionTool":
        return cls(function=ToolCallFunctionDefinition.from_model(model, strict, style))


class ToolChoiceFunctionName(ChatModel):
    name: str


class ToolChoiceFunction(ChatModel):
    type: Literal["function"] = "function"
    function: ToolChoiceFunctionName


ToolChoiceMode = Literal["none", "auto", "required"]
ToolChoice = Union[ToolChoiceMode, ToolChoiceFunction]


def tool_choice_function(name: str) -> ToolChoiceFunction:
    """Force the model to call the named function."""
    return ToolChoiceFunction(function=ToolChoiceFunctionName(name=name))


# ---------------------------------------------------------------- response format


class ResponseFormatJsonSchema(ChatModel):
    """``json_schema`` payload of a structured-output response format."""

    name: str
    description: Optional[str] = None
    json_schema: Optional[Dict[str, Any]] = Field(default=None, alias="schema")
    strict: Optional[bool] = None

    @classmethod
    def from_model(
        cls,
        model: Type[BaseModel],
        strict: bool = True,
        style: JsonSchemaStyle = JsonSchemaStyle.OPENAI,
    ) -> "ResponseFormatJsonSchema":
        schema, description = generate_json_schema(model, style)
        return cls(name=schema_name(model), description=description, json_schema=schema, strict=strict)


class ChatCompletionResponseFormat(ChatModel):
    type: Literal["text", "json_object", "json_schema"] = "text"
    json_schema: Optional[ResponseFormatJsonSchema] = None

    @classmethod
    def text(cls) -> "ChatCompletionResponseFormat":
        return cls(type="text")

    @classmethod
    def json_object(cls) -> "ChatCompletionResponseFormat":
        return cls(type="json_object")

    @classmethod
    def from_json_schema(cls, schema: ResponseFormatJsonSchema) -> "ChatCompletionResponseFormat":
        return cls(type="json_schema", json_schema=schema)

    @classmethod
    def from_model(
        cls,
        model: Type[BaseModel],
        strict: bool = True,
        style: JsonSchemaStyle = JsonSchemaStyle.OPENAI,
    ) -> "ChatCompletionResponseFormat":
        return cls.from_json_schema(ResponseFormatJsonSchema.from_model(model, strict, style))


# ---------------------------------------------------------------- merge errors


class MergeErrorReason(str, Enum):
    DIFFERENT_COMPLETION_IDS = "different_completion_ids"
    DIFFERENT_COMPLETION_CHOICE_INDICES = "different_completion_choice_indices"


class ChatCompletionDeltaMergeError(ValueError):
    """Two stream deltas could not be merged."""

    def __init__(self, reason: MergeErrorReason, detail: str = "") -> None:
        self.reason = reason
        message = {
            MergeErrorReason.DIFFERENT_COMPLETION_IDS: "Different completion IDs",
            MergeErrorReason.DIFFERENT_COMPLETION_CHOICE_INDICES: "Different completion choice indices",
        }[reason]
        super().__init__(f"{message}: {detail}" if detail else message)


__all__ = [
    "ChatCompletionMessageRole",
    "ReasoningEffort",
    "ImageUrl",
    "ContentPart",
    "Content",
    "content_text",
    "ChatCompletionFunctionCall",
    "FunctionCallDelta",
    "ToolCallFunction",
    "ToolCall",
    "ToolCallFunctionDelta",
    "ToolCallDelta",
    "ChatCompletionMessage",
    "ChatCompletionMessageDelta",
    "ChatCompletionFunctionDefinition",
    "ToolCallFunctionDefinition",
    "ChatCompletionTool",
    "ToolChoiceFunctionName",
    "ToolChoiceFunction",
    "ToolChoiceMode",
    "ToolChoice",
    "tool_choice_function",
    "ResponseFormatJsonSchema",
    "ChatCompletionResponseFormat",
    "MergeErrorReason",
    "ChatCompletionDeltaMergeError",
]
