"""openai_rest package

Unofficial client for the OpenAI REST API built on httpx and pydantic.

Public API (re-exported):
    - Version: ``__version__``
    - Credentials: :class:`Credentials`, :func:`set_key`, :func:`set_base_url`
    - Errors: :class:`OpenAIError`, :class:`TransportError`, :class:`ErrorCode`
    - Resources: ``Model``, ``Completion``, ``ChatCompletion``, ``Edit``,
      ``Embedding``/``Embeddings``, ``Moderation``, ``File``/``Files``,
      ``Transcription``

Every resource exposes blocking class methods (``create``, ``retrieve``...)
and ``a``-prefixed async twins. Request parameters are assembled with
``Resource.builder(...)``, which returns an immutable
:class:`~openai_rest.base.builder.RequestBuilder`.
"""

from .audio import Transcription, TranscriptionRequest
from .base.builder import RequestBuilder
from .base.credentials import Credentials, set_base_url, set_credentials, set_key
from .base.errors import (
    ClientError,
    DecodeError,
    ErrorCode,
    MissingCredentialsError,
    OpenAIError,
    TransportError,
)
from .base.logging import configure_logger
from .chat import (
    ChatCompletion,
    ChatCompletionDelta,
    ChatCompletionMessage,
    ChatCompletionMessageRole,
    ChatCompletionRequest,
    merge_stream,
)
from .completions import Completion, CompletionRequest
from .edits import Edit, EditRequest
from .embeddings import Embedding, Embeddings, EmbeddingsRequest
from .files import File, Files, FileUploadRequest
from .models import Model, ModelCatalog
from .moderations import Moderation, ModerationRequest

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "RequestBuilder",
    "Credentials",
    "set_base_url",
    "set_credentials",
    "set_key",
    "configure_logger",
    "ClientError",
    "DecodeError",
    "ErrorCode",
    "MissingCredentialsError",
    "OpenAIError",
    "TransportError",
    "Model",
    "ModelCatalog",
    "Completion",
    "CompletionRequest",
    "ChatCompletion",
    "ChatCompletionDelta",
    "ChatCompletionMessage",
    "ChatCompletionMessageRole",
    "ChatCompletionRequest",
    "merge_stream",
    "Edit",
    "EditRequest",
    "Embedding",
    "Embeddings",
    "EmbeddingsRequest",
    "Moderation",
    "ModerationRequest",
    "File",
    "Files",
    "FileUploadRequest",
    "Transcription",
    "TranscriptionRequest",
]
