"""Edits (``POST edits``): given an input and an instruction, return edited text.

The API returns ``choices`` as ``[{"text": ..., "index": ...}]``; :class:`Edit`
flattens them to the list of texts.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import Field, field_validator

from .base.builder import RequestBuilder
from .base.dto import ApiModel, RequestModel, Usage
from .base.http import ApiClient, decode_response

ROUTE = "edits"


class EditRequest(RequestModel):
    """Request body for ``POST edits``. An empty ``input`` is not sent."""

    model: str = Field(..., min_length=1)
    input: str = ""
    instruction: str
    n: Optional[int] = Field(default=None, gt=0)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    _skip_when_empty = ("input",)


class Edit(ApiModel):
    object: str = "edit"
    created: int = 0
    choices: List[str] = Field(default_factory=list)
    usage: Optional[Usage] = None

    @field_validator("choices", mode="before")
    @classmethod
    def _flatten_choices(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [c.get("text", "") if isinstance(c, dict) else c for c in value]
        return value

    @classmethod
    def builder(cls, model: str, instruction: str) -> RequestBuilder[EditRequest]:
        return RequestBuilder(EditRequest, cls, model=model, instruction=instruction)

    @classmethod
    def create(cls, request: EditRequest) -> "Edit":
        payload = ApiClient(request.credentials, resource="edits").post(ROUTE, request.to_body(), model=request.model)
        return decode_response(cls, payload)

    @classmethod
    async def acreate(cls, request: EditRequest) -> "Edit":
        payload = await ApiClient(request.credentials, resource="edits").apost(
            ROUTE, request.to_body(), model=request.model
        )
        return decode_response(cls, payload)


__all__ = ["EditRequest", "Edit"]
