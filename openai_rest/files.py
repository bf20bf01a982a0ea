"""Files: upload, list, retrieve, download and delete (``files`` endpoints).

Uploads are sent as ``multipart/form-data`` with a ``file`` part (the local
file's basename, content type ``application/jsonl``) and a ``purpose`` text
field. A local file that cannot be read raises :class:`OpenAIError` with
``error_type="io"`` before any request is made.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import Field

from .base.builder import RequestBuilder
from .base.constants import JSONL_MIME
from .base.credentials import Credentials
from .base.dto import ApiModel, DeletedObject, RequestModel
from .base.errors import ErrorCode, OpenAIError
from .base.http import ApiClient, decode_response
from .config.defaults import OPENAI_DEFAULT_FILE_PURPOSE

ROUTE = "files"


def read_upload(file_name: str) -> Tuple[str, bytes]:
    """Return ``(basename, contents)`` of a local file.

    Raises:
        OpenAIError: ``error_type="io"`` when the file cannot be read.
    """
    path = Path(file_name)
    try:
        resolved = path.resolve(strict=True)
        return resolved.name, resolved.read_bytes()
    except OSError as exc:
        raise OpenAIError(
            message=f"cannot read {file_name}: {exc.strerror or exc}",
            error_type="io",
            kind=ErrorCode.IO,
        ) from exc


class FileUploadRequest(RequestModel):
    file_name: str = Field(..., min_length=1)
    purpose: str = OPENAI_DEFAULT_FILE_PURPOSE
    mime_type: str = JSONL_MIME


class DeletedFile(DeletedObject):
    object: str = "file"


class File(ApiModel):
    """An uploaded file."""

    id: str
    object: str = "file"
    bytes: int = 0
    created_at: int = 0
    filename: str = ""
    purpose: str = ""
    status: Optional[str] = None

    @classmethod
    def builder(cls) -> RequestBuilder[FileUploadRequest]:
        return RequestBuilder(FileUploadRequest, cls)

    @staticmethod
    def _multipart(request: FileUploadRequest):
        name, content = read_upload(request.file_name)
        files = {"file": (name, content, request.mime_type)}
        return files, {"purpose": request.purpose}

    @classmethod
    def create(cls, request: FileUploadRequest) -> "File":
        files, data = cls._multipart(request)
        payload = ApiClient(request.credentials, resource="files").post_multipart(ROUTE, files, data)
        return decode_response(cls, payload)

    @classmethod
    async def acreate(cls, request: FileUploadRequest) -> "File":
        files, data = cls._multipart(request)
        payload = await ApiClient(request.credentials, resource="files").apost_multipart(ROUTE, files, data)
        return decode_response(cls, payload)

    @classmethod
    def retrieve(cls, file_id: str, credentials: Optional[Credentials] = None) -> "File":
        payload = ApiClient(credentials, resource="files").get(f"{ROUTE}/{file_id}")
        return decode_response(cls, payload)

    @classmethod
    async def aretrieve(cls, file_id: str, credentials: Optional[Credentials] = None) -> "File":
        payload = await ApiClient(credentials, resource="files").aget(f"{ROUTE}/{file_id}")
        return decode_response(cls, payload)

    @classmethod
    def content(cls, file_id: str, credentials: Optional[Credentials] = None) -> bytes:
        """Download the raw contents of a file."""
        return ApiClient(credentials, resource="files").get_raw(f"{ROUTE}/{file_id}/content")

    @classmethod
    async def acontent(cls, file_id: str, credentials: Optional[Credentials] = None) -> bytes:
        return await ApiClient(credentials, resource="files").aget_raw(f"{ROUTE}/{file_id}/content")

    @classmethod
    def delete(cls, file_id: str, credentials: Optional[Credentials] = None) -> DeletedFile:
        payload = ApiClient(credentials, resource="files").delete(f"{ROUTE}/{file_id}")
        return decode_response(DeletedFile, payload)

    @classmethod
    async def adelete(cls, file_id: str, credentials: Optional[Credentials] = None) -> DeletedFile:
        payload = await ApiClient(credentials, resource="files").adelete(f"{ROUTE}/{file_id}")
        return decode_response(DeletedFile, payload)


class Files(ApiModel):
    object: str = "list"
    data: List[File] = Field(default_factory=list)

    @classmethod
    def list(cls, credentials: Optional[Credentials] = None, purpose: Optional[str] = None) -> "Files":
        payload = ApiClient(credentials, resource="files").get(ROUTE, params={"purpose": purpose})
        return decode_response(cls, payload)

    @classmethod
    async def alist(cls, credentials: Optional[Credentials] = None, purpose: Optional[str] = None) -> "Files":
        payload = await ApiClient(credentials, resource="files").aget(ROUTE, params={"purpose": purpose})
        return decode_response(cls, payload)


__all__ = ["FileUploadRequest", "File", "DeletedFile", "Files", "read_upload"]
