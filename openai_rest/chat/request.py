"""Request body for ``POST chat/completions``."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import Field, model_validator

from ..base.dto import RequestModel
from .types import (
    ChatCompletionFunctionDefinition,
    ChatCompletionMessage,
    ChatCompletionResponseFormat,
    ChatCompletionTool,
    ReasoningEffort,
    ToolChoice,
)


class ChatCompletionRequest(RequestModel):
    """Parameters of a chat completion.

    ``stop``, ``user``, ``tools`` and ``functions`` are omitted from the body
    when empty. ``extra_body`` is merged into the JSON body as-is for
    parameters this model does not know about (provider extensions, new API
    fields); its keys win over typed fields. ``credentials`` is never sent.

    Raises:
        ValidationError: When the message list is empty or numeric parameters
            are out of range.
    """

    model: str = Field(..., min_length=1)
    messages: List[ChatCompletionMessage] = Field(..., min_length=1)
    reasoning_effort: Optional[ReasoningEffort] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    n: Optional[int] = Field(default=None, gt=0)
    stream: Optional[bool] = None
    stream_options: Optional[Dict[str, Any]] = None
    stop: Optional[Union[str, List[str]]] = None
    seed: Optional[int] = None
    max_tokens: Optional[int] = Field(default=None, gt=0)
    max_completion_tokens: Optional[int] = Field(default=None, gt=0)
    presence_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0)
    frequency_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0)
    logit_bias: Optional[Dict[str, float]] = None
    logprobs: Optional[bool] = None
    top_logprobs: Optional[int] = Field(default=None, ge=0)
    user: Optional[str] = None
    tools: List[ChatCompletionTool] = Field(default_factory=list)
    tool_choice: Optional[ToolChoice] = None
    parallel_tool_calls: Optional[bool] = None
    functions: List[ChatCompletionFunctionDefinition] = Field(default_factory=list)
    function_call: Optional[Union[str, Dict[str, str]]] = None
    response_format: Optional[ChatCompletionResponseFormat] = None
    store: Optional[bool] = None
    metadata: Optional[Dict[str, str]] = None
    extra_body: Optional[Dict[str, Any]] = Field(default=None, exclude=True)

    _skip_when_empty = ("stop", "user", "tools", "functions")

    @model_validator(mode="after")
    def _validate_tool_choice(self) -> "ChatCompletionRequest":
        """A forced function choice must name a declared tool."""
        choice = self.tool_choice
        if choice is None or isinstance(choice, str):
            return self
        names = {t.function.name for t in self.tools}
        if names and choice.function.name not in names:
            raise ValueError(f"tool_choice names undeclared tool {choice.function.name!r}")
        return self

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        if self.extra_body:
            body.update(self.extra_body)
        return body


__all__ = ["ChatCompletionRequest"]
