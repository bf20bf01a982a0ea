"""Chat completions: message types, requests, streaming deltas and structured outputs."""

from .completion import (
    ChatCompletion,
    ChatCompletionChoice,
    ChatCompletionChoiceDelta,
    ChatCompletionDelta,
    ChatCompletionMessages,
    amerge_stream,
    merge_stream,
)
from .request import ChatCompletionRequest
from .structured_output import JsonSchemaStyle, generate_json_schema, schema_name
from .types import (
    ChatCompletionDeltaMergeError,
    ChatCompletionFunctionCall,
    ChatCompletionFunctionDefinition,
    ChatCompletionMessage,
    ChatCompletionMessageDelta,
    ChatCompletionMessageRole,
    ChatCompletionResponseFormat,
    ChatCompletionTool,
    Content,
    ContentPart,
    ImageUrl,
    MergeErrorReason,
    ReasoningEffort,
    ResponseFormatJsonSchema,
    ToolCall,
    ToolCallDelta,
    ToolCallFunction,
    ToolCallFunctionDefinition,
    ToolChoice,
    ToolChoiceFunction,
    content_text,
    tool_choice_function,
)

__all__ = [
    "ChatCompletion",
    "ChatCompletionChoice",
    "ChatCompletionChoiceDelta",
    "ChatCompletionDelta",
    "ChatCompletionMessages",
    "merge_stream",
    "amerge_stream",
    "ChatCompletionRequest",
    "JsonSchemaStyle",
    "generate_json_schema",
    "schema_name",
    "ChatCompletionDeltaMergeError",
    "ChatCompletionFunctionCall",
    "ChatCompletionFunctionDefinition",
    "ChatCompletionMessage",
    "ChatCompletionMessageDelta",
    "ChatCompletionMessageRole",
    "ChatCompletionResponseFormat",
    "ChatCompletionTool",
    "Content",
    "ContentPart",
    "ImageUrl",
    "MergeErrorReason",
    "ReasoningEffort",
    "ResponseFormatJsonSchema",
    "ToolCall",
    "ToolCallDelta",
    "ToolCallFunction",
    "ToolCallFunctionDefinition",
    "ToolChoice",
    "ToolChoiceFunction",
    "content_text",
    "tool_choice_function",
]
