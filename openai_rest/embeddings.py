"""Embeddings (``POST embeddings``): vector representations of input text.

``Embeddings.create`` embeds one or many inputs; ``Embedding.create`` is the
single-input shortcut returning just the first vector.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Union

from pydantic import Field

from .base.credentials import Credentials
from .base.dto import ApiModel, RequestModel, Usage
from .base.errors import DecodeError, ErrorCode
from .base.http import ApiClient, decode_response

ROUTE = "embeddings"


class EmbeddingsRequest(RequestModel):
    model: str = Field(..., min_length=1)
    input: Union[str, List[str]]
    user: Optional[str] = None
    encoding_format: Optional[str] = None
    dimensions: Optional[int] = Field(default=None, gt=0)

    _skip_when_empty = ("user",)


class Embedding(ApiModel):
    """One embedding vector. The API's ``embedding`` field is exposed as ``vec``."""

    object: str = "embedding"
    index: int = 0
    vec: List[float] = Field(alias="embedding")

    def distance(self, other: "Embedding") -> float:
        """Euclidean distance to ``other``."""
        if len(self.vec) != len(other.vec):
            raise ValueError("embeddings have different dimensions")
        return math.sqrt(sum((a - b) ** 2 for a, b in zip(self.vec, other.vec)))

    def magnitude(self) -> float:
        return math.sqrt(sum(a * a for a in self.vec))

    def cosine_similarity(self, other: "Embedding") -> float:
        if len(self.vec) != len(other.vec):
            raise ValueError("embeddings have different dimensions")
        denom = self.magnitude() * other.magnitude()
        if denom == 0:
            return 0.0
        return sum(a * b for a, b in zip(self.vec, other.vec)) / denom

    @classmethod
    def create(
        cls,
        model: str,
        input: str,
        user: Optional[str] = None,
        credentials: Optional[Credentials] = None,
    ) -> "Embedding":
        return _first(Embeddings.create(model, input, user=user, credentials=credentials))

    @classmethod
    async def acreate(
        cls,
        model: str,
        input: str,
        user: Optional[str] = None,
        credentials: Optional[Credentials] = None,
    ) -> "Embedding":
        return _first(await Embeddings.acreate(model, input, user=user, credentials=credentials))


class Embeddings(ApiModel):
    object: str = "list"
    data: List[Embedding] = Field(default_factory=list)
    model: str = ""
    usage: Optional[Usage] = None

    @property
    def vectors(self) -> List[List[float]]:
        return [e.vec for e in self.data]

    @classmethod
    def create(
        cls,
        model: str,
        input: Union[str, Sequence[str]],
        user: Optional[str] = None,
        credentials: Optional[Credentials] = None,
    ) -> "Embeddings":
        return cls.create_from(_request(model, input, user, credentials))

    @classmethod
    async def acreate(
        cls,
        model: str,
        input: Union[str, Sequence[str]],
        user: Optional[str] = None,
        credentials: Optional[Credentials] = None,
    ) -> "Embeddings":
        return await cls.acreate_from(_request(model, input, user, credentials))

    @classmethod
    def create_from(cls, request: EmbeddingsRequest) -> "Embeddings":
        payload = ApiClient(request.credentials, resource="embeddings").post(
            ROUTE, request.to_body(), model=request.model
        )
        return decode_response(cls, payload)

    @classmethod
    async def acreate_from(cls, request: EmbeddingsRequest) -> "Embeddings":
        payload = await ApiClient(request.credentials, resource="embeddings").apost(
            ROUTE, request.to_body(), model=request.model
        )
        return decode_response(cls, payload)


def _request(
    model: str,
    input: Union[str, Sequence[str]],
    user: Optional[str],
    credentials: Optional[Credentials],
) -> EmbeddingsRequest:
    value: Union[str, List[str]] = input if isinstance(input, str) else list(input)
    return EmbeddingsRequest(model=model, input=value, user=user, credentials=credentials)


def _first(embeddings: Embeddings) -> Embedding:
    if not embeddings.data:
        raise DecodeError(message="embeddings response contained no data", kind=ErrorCode.DECODE)
    return embeddings.data[0]


__all__ = ["EmbeddingsRequest", "Embedding", "Embeddings"]
