from __future__ import annotations

import math

import pytest

from openai_rest.base.errors import DecodeError
from openai_rest.embeddings import Embedding, Embeddings
from openai_rest.moderations import Moderation


def _embeddings(*vectors):
    return {
        "object": "list",
        "model": "text-embedding-3-small",
        "data": [{"object": "embedding", "index": i, "embedding": v} for i, v in enumerate(vectors)],
        "usage": {"prompt_tokens": 3, "total_tokens": 3},
    }


def test_embeddings_create_many(mock_api):
    mock_api.add("POST", "embeddings", _embeddings([1.0, 0.0], [0.0, 1.0]))
    result = Embeddings.create("text-embedding-3-small", ["a", "b"])
    assert result.vectors == [[1.0, 0.0], [0.0, 1.0]]
    assert result.usage.completion_tokens is None
    assert mock_api.last_json() == {"model": "text-embedding-3-small", "input": ["a", "b"]}


def test_embedding_create_single_returns_first(mock_api):
    mock_api.add("POST", "embeddings", _embeddings([3.0, 4.0]))
    emb = Embedding.create("text-embedding-3-small", "hello", user="u1")
    assert emb.vec == [3.0, 4.0]
    assert emb.magnitude() == 5.0
    assert mock_api.last_json()["user"] == "u1"


def test_embedding_create_empty_response(mock_api):
    mock_api.add("POST", "embeddings", _embeddings())
    with pytest.raises(DecodeError):
        Embedding.create("m", "hello")


def test_embedding_math():
    a = Embedding(embedding=[1.0, 0.0])
    b = Embedding(vec=[0.0, 1.0])
    assert math.isclose(a.distance(b), math.sqrt(2))
    assert a.cosine_similarity(b) == 0.0
    assert a.cosine_similarity(a) == 1.0
    assert Embedding(vec=[0.0, 0.0]).cosine_similarity(a) == 0.0
    with pytest.raises(ValueError):
        a.distance(Embedding(vec=[1.0]))


def test_moderation_aliases(mock_api):
    mock_api.add(
        "POST",
        "moderations",
        {
            "id": "modr-1",
            "model": "omni-moderation-latest",
            "results": [
                {
                    "flagged": True,
                    "categories": {"hate": False, "self-harm": True, "violence/graphic": False},
                    "category_scores": {"self-harm": 0.91, "hate/threatening": 0.01},
                }
            ],
        },
    )
    mod = Moderation.builder("I want to hurt myself").create()
    assert mod.flagged is True
    result = mod.results[0]
    assert result.categories.self_harm is True
    assert result.category_scores.self_harm == 0.91
    assert result.category_scores.hate_threatening == 0.01
    assert mock_api.last_json() == {"input": "I want to hurt myself"}


def test_moderation_not_flagged_without_results():
    assert Moderation().flagged is False
