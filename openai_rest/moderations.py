"""Moderations (``POST moderations``): classify input against the content policy.

Category names on the wire contain ``/`` and ``-`` (``hate/threatening``,
``self-harm``); they are exposed as snake_case attributes via aliases.
"""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import Field

from .base.builder import RequestBuilder
from .base.dto import ApiModel, RequestModel
from .base.http import ApiClient, decode_response

ROUTE = "moderations"


class ModerationRequest(RequestModel):
    input: Union[str, List[str]]
    model: Optional[str] = None


class Categories(ApiModel):
    hate: bool = False
    hate_threatening: bool = Field(default=False, alias="hate/threatening")
    harassment: bool = False
    harassment_threatening: bool = Field(default=False, alias="harassment/threatening")
    self_harm: bool = Field(default=False, alias="self-harm")
    sexual: bool = False
    sexual_minors: bool = Field(default=False, alias="sexual/minors")
    violence: bool = False
    violence_graphic: bool = Field(default=False, alias="violence/graphic")


class CategoryScores(ApiModel):
    hate: float = 0.0
    hate_threatening: float = Field(default=0.0, alias="hate/threatening")
    harassment: float = 0.0
    harassment_threatening: float = Field(default=0.0, alias="harassment/threatening")
    self_harm: float = Field(default=0.0, alias="self-harm")
    sexual: float = 0.0
    sexual_minors: float = Field(default=0.0, alias="sexual/minors")
    violence: float = 0.0
    violence_graphic: float = Field(default=0.0, alias="violence/graphic")


class ModerationResult(ApiModel):
    flagged: bool
    categories: Categories = Field(default_factory=Categories)
    category_scores: CategoryScores = Field(default_factory=CategoryScores)


class Moderation(ApiModel):
    id: str = ""
    model: str = ""
    results: List[ModerationResult] = Field(default_factory=list)

    @property
    def flagged(self) -> bool:
        """True when any result is flagged."""
        return any(r.flagged for r in self.results)

    @classmethod
    def builder(cls, input: Union[str, List[str]]) -> RequestBuilder[ModerationRequest]:
        return RequestBuilder(ModerationRequest, cls, input=input)

    @classmethod
    def create(cls, request: ModerationRequest) -> "Moderation":
        payload = ApiClient(request.credentials, resource="moderations").post(
            ROUTE, request.to_body(), model=request.model
        )
        return decode_response(cls, payload)

    @classmethod
    async def acreate(cls, request: ModerationRequest) -> "Moderation":
        payload = await ApiClient(request.credentials, resource="moderations").apost(
            ROUTE, request.to_body(), model=request.model
        )
        return decode_response(cls, payload)


__all__ = ["ModerationRequest", "Categories", "CategoryScores", "ModerationResult", "Moderation"]
