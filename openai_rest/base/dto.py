"""
Pydantic base models and shared DTOs.

Purpose
-------
``RequestModel`` is the base for every request body. It carries the optional
``credentials`` used to send it (never serialised) and a ``to_body`` helper
that produces the JSON body: ``None`` fields are dropped, as are the fields a
subclass lists in ``_skip_when_empty`` when they hold an empty list/string.

``ApiModel`` is the base for every response object; unknown fields returned
by the API are ignored so new server-side fields never break decoding.

Shared response shapes (``Usage``, ``ListPage``, ``DeletedObject``) live here
as well.
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Generic, List, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field, InstanceOf

from .credentials import Credentials

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base for response objects."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RequestModel(BaseModel):
    """Base for request bodies.

    Unknown fields are rejected so typos surface at build time instead of
    being sent to the API.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    _skip_when_empty: ClassVar[Tuple[str, ...]] = ()

    credentials: Optional[InstanceOf[Credentials]] = Field(default=None, exclude=True)

    def to_body(self) -> Dict[str, Any]:
        """Return the JSON request body."""
        body = self.model_dump(mode="json", exclude_none=True, by_alias=True, exclude={"credentials"})
        for name in self._skip_when_empty:
            key = type(self).model_fields[name].alias or name
            if key in body and body[key] in ([], "", {}):
                del body[key]
        return body


class Usage(ApiModel):
    """Token accounting. ``completion_tokens`` is absent for embeddings."""

    prompt_tokens: int = 0
    completion_tokens: Optional[int] = None
    total_tokens: int = 0


class ListPage(ApiModel, Generic[T]):
    """One page of a list endpoint."""

    object: str = "list"
    data: List[T] = Field(default_factory=list)
    first_id: Optional[str] = None
    last_id: Optional[str] = None
    has_more: bool = False


class DeletedObject(ApiModel):
    """Acknowledgement returned by DELETE endpoints."""

    id: str
    object: str = ""
    deleted: bool


__all__ = [
    "ApiModel",
    "RequestModel",
    "Usage",
    "ListPage",
    "DeletedObject",
]
