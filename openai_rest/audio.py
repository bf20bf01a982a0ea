"""Audio transcription (``POST audio/transcriptions``).

The audio file is uploaded as a multipart ``file`` part (content type
``audio/wav``) together with the model and optional parameters as text
fields.

``text``, ``srt`` and ``vtt`` response formats come back as plain text and are
wrapped into :class:`Transcription` as its ``text``; ``json`` and
``verbose_json`` are decoded normally.
"""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import Field

from .base.builder import RequestBuilder
from .base.constants import WAV_MIME
from .base.dto import ApiModel, RequestModel
from .base.http import ApiClient, decode_response
from .files import read_upload

ROUTE = "audio/transcriptions"


class TranscriptionRequest(RequestModel):
    model: str = Field(..., min_length=1)
    file_name: str = Field(..., min_length=1)
    prompt: Optional[str] = None
    response_format: Optional[Literal["json", "text", "srt", "verbose_json", "vtt"]] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    language: Optional[str] = None
    mime_type: str = WAV_MIME

    def form_fields(self) -> Dict[str, str]:
        """Text fields of the multipart form (``None`` values omitted)."""
        fields: Dict[str, Any] = {
            "model": self.model,
            "prompt": self.prompt,
            "response_format": self.response_format,
            "temperature": self.temperature,
            "language": self.language,
        }
        return {k: str(v) for k, v in fields.items() if v is not None}


class Transcription(ApiModel):
    text: str = ""

    @classmethod
    def _from_payload(cls, payload: Any) -> "Transcription":
        if isinstance(payload, str):
            return cls(text=payload)
        return decode_response(cls, payload)

    @classmethod
    def builder(cls, model: str) -> RequestBuilder[TranscriptionRequest]:
        return RequestBuilder(TranscriptionRequest, cls, model=model)

    @classmethod
    def create(cls, request: TranscriptionRequest) -> "Transcription":
        name, content = read_upload(request.file_name)
        payload = ApiClient(request.credentials, resource="audio").post_multipart(
            ROUTE, {"file": (name, content, request.mime_type)}, request.form_fields(), model=request.model
        )
        return cls._from_payload(payload)

    @classmethod
    async def acreate(cls, request: TranscriptionRequest) -> "Transcription":
        name, content = read_upload(request.file_name)
        payload = await ApiClient(request.credentials, resource="audio").apost_multipart(
            ROUTE, {"file": (name, content, request.mime_type)}, request.form_fields(), model=request.model
        )
        return cls._from_payload(payload)


__all__ = ["TranscriptionRequest", "Transcription"]
