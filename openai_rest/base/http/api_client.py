"""Authenticated request helper shared by every resource module.

Purpose:
    :class:`ApiClient` binds a :class:`Credentials` value to the pooled
    ``httpx`` clients and performs exactly one HTTP exchange per call:
    build the request (bearer token, JSON body, multipart form or query
    params), send it, and either return the decoded JSON or raise.

Error mapping:
    - non-2xx with an ``{"error": {...}}`` body -> :class:`OpenAIError`
      carrying the API's message, type, param and code.
    - non-2xx with any other body -> ``OpenAIError(error_type="unknown")``
      whose message is the raw body text.
    - ``httpx.HTTPError`` (connect, TLS, timeout, protocol) ->
      :class:`TransportError` with the original exception chained.
    - 2xx ``text/*`` body -> returned as ``str`` (plain-text transcripts).
    - 2xx whose body is not JSON otherwise -> :class:`DecodeError`.
    - an ``{"error": {...}}`` event inside a 2xx stream -> :class:`OpenAIError`,
      raised in place of the payload.

Logging:
    ``http.request`` / ``http.response`` at DEBUG and ``http.error`` at
    WARNING on the ``openai_rest.http`` logger; streams finish with a
    normalized ``stream.end`` event at DEBUG. Bodies and keys are never
    logged.

No retries, backoff or caching are performed.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Dict, Iterator, List, Mapping, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..constants import PURPOSE_API, PURPOSE_STREAM
from ..credentials import Credentials, resolve_credentials
from ..errors import (
    DecodeError,
    ErrorCode,
    MissingCredentialsError,
    OpenAIError,
    TransportError,
    classify_exception,
)
from ..logging import LogContext, get_logger, log_event, normalized_log_event
from ..streaming import aiter_sse_payloads, iter_sse_payloads
from .pool import get_httpx_client, open_async_httpx_client

_logger = get_logger("openai_rest.http")

M = TypeVar("M", bound=BaseModel)


def decode_response(model_cls: Type[M], payload: Any) -> M:
    """Validate a decoded JSON payload into ``model_cls``.

    Raises:
        DecodeError: When the payload does not match the model.
    """
    try:
        return model_cls.model_validate(payload)
    except ValidationError as exc:
        raise DecodeError(
            message=f"unexpected {model_cls.__name__} payload: {exc.error_count()} validation error(s)",
            kind=ErrorCode.DECODE,
            raw=exc,
        ) from exc


class ApiClient:
    """Performs authenticated calls against the configured base URL.

    Parameters:
        credentials: Explicit credentials; ``None`` uses the process-wide
            default (see :func:`openai_rest.set_key`).
        resource: Resource name attached to log events (``"chat"``...).
    """

    def __init__(self, credentials: Optional[Credentials] = None, resource: Optional[str] = None) -> None:
        self.credentials = resolve_credentials(credentials)
        if not self.credentials.api_key:
            raise MissingCredentialsError("credentials carry an empty API key")
        self.resource = resource

    # ------------------------------------------------------------------ helpers
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.credentials.api_key}"}

    def url(self, route: str) -> str:
        return self.credentials.base_url + route.lstrip("/")

    def _ctx(self, method: str, route: str, model: Optional[str]) -> LogContext:
        return LogContext(resource=self.resource, model=model, method=method, route=route)

    def _api_error(self, response: httpx.Response, ctx: LogContext) -> OpenAIError:
        text = response.text
        try:
            body = response.json()
        except ValueError:
            body = None
        return self._log_api_error(OpenAIError.from_response(response.status_code, body, text), response, ctx)

    def _stream_error(self, response: httpx.Response, payload: Dict[str, Any], ctx: LogContext) -> OpenAIError:
        err = OpenAIError.from_response(response.status_code, payload, json.dumps(payload))
        return self._log_api_error(err, response, ctx)

    def _log_api_error(self, err: OpenAIError, response: httpx.Response, ctx: LogContext) -> OpenAIError:
        log_event(
            _logger,
            "http.error",
            ctx,
            level=logging.WARNING,
            status=response.status_code,
            error_type=err.error_type,
            error_code=err.kind.value,
            request_id=response.headers.get("x-request-id"),
        )
        return err

    def _transport_error(self, exc: httpx.HTTPError, ctx: LogContext) -> TransportError:
        kind = classify_exception(exc)
        log_event(_logger, "http.error", ctx, level=logging.WARNING, error=type(exc).__name__, error_code=kind.value)
        return TransportError(message=str(exc) or type(exc).__name__, kind=kind, raw=exc)

    def _log_response(self, response: httpx.Response, ctx: LogContext) -> None:
        log_event(
            _logger,
            "http.response",
            ctx,
            level=logging.DEBUG,
            status=response.status_code,
            request_id=response.headers.get("x-request-id"),
        )

    def _log_stream_end(self, ctx: LogContext, emitted: int) -> None:
        normalized_log_event(
            _logger,
            "stream.end",
            ctx,
            phase="finalize",
            attempt=1,
            emitted=emitted > 0,
            tokens=None,
            level=logging.DEBUG,
            events=emitted,
        )

    def _decode_json(self, response: httpx.Response) -> Any:
        if not response.content:
            return {}
        if response.headers.get("content-type", "").startswith("text/"):
            return response.text
        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(message="response body is not valid JSON", kind=ErrorCode.DECODE, raw=exc) from exc

    def _send_kwargs(
        self,
        json: Any,
        params: Optional[Mapping[str, Any]],
        files: Optional[Mapping[str, Any]],
        data: Optional[Mapping[str, Any]],
    ) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"headers": self.headers()}
        if json is not None:
            kwargs["json"] = json
        if params:
            kwargs["params"] = {k: v for k, v in params.items() if v is not None}
        if files is not None:
            kwargs["files"] = files
        if data is not None:
            kwargs["data"] = data
        return kwargs

    # ------------------------------------------------------------------ sync
    def _send(self, method: str, route: str, kwargs: Dict[str, Any], ctx: LogContext) -> httpx.Response:
        log_event(_logger, "http.request", ctx, level=logging.DEBUG, url=self.url(route))
        client = get_httpx_client(self.credentials.base_url, PURPOSE_API)
        try:
            response = client.request(method, route.lstrip("/"), **kwargs)
        except httpx.HTTPError as exc:
            raise self._transport_error(exc, ctx) from exc
        self._log_response(response, ctx)
        if response.is_error:
            raise self._api_error(response, ctx)
        return response

    def request(
        self,
        method: str,
        route: str,
        *,
        json: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        files: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
        model: Optional[str] = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        An empty body gives ``{}`` and a ``text/*`` body its text.
        """
        ctx = self._ctx(method, route, model)
        response = self._send(method, route, self._send_kwargs(json, params, files, data), ctx)
        return self._decode_json(response)

    def get(self, route: str, *, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.request("GET", route, params=params)

    def post(self, route: str, body: Any, *, model: Optional[str] = None) -> Any:
        return self.request("POST", route, json=body, model=model)

    def delete(self, route: str) -> Any:
        return self.request("DELETE", route)

    def post_multipart(
        self,
        route: str,
        files: Mapping[str, Any],
        data: Optional[Mapping[str, Any]] = None,
        *,
        model: Optional[str] = None,
    ) -> Any:
        return self.request("POST", route, files=files, data=data, model=model)

    def get_raw(self, route: str) -> bytes:
        """GET ``route`` and return the undecoded body (file contents)."""
        ctx = self._ctx("GET", route, None)
        return self._send("GET", route, self._send_kwargs(None, None, None, None), ctx).content

    def list_all(self, route: str, after: Optional[str] = None) -> List[Any]:
        """Collect every item of a cursor-paginated list endpoint.

        Requests pages with ``order=asc`` and ``after=<last id>`` while the
        API reports ``has_more``.
        """
        items: List[Any] = []
        cursor = after
        while True:
            page = self.get(route, params={"order": "asc", "after": cursor})
            items.extend(page.get("data") or [])
            cursor = page.get("last_id")
            if not page.get("has_more") or not cursor:
                return items

    def stream(
        self, method: str, route: str, *, json: Any = None, model: Optional[str] = None
    ) -> Iterator[Dict[str, Any]]:
        """Send a streaming request and yield each decoded event payload.

        The request is sent when iteration starts. A non-2xx status raises
        :class:`OpenAIError` before the first item, and an ``error`` event
        raises it mid-stream; iteration ends at ``[DONE]`` or when the server
        closes the stream.
        """
        ctx = self._ctx(method, route, model)
        log_event(_logger, "http.request", ctx, level=logging.DEBUG, url=self.url(route), stream=True)
        client = get_httpx_client(self.credentials.base_url, PURPOSE_STREAM)
        try:
            with client.stream(method, route.lstrip("/"), **self._send_kwargs(json, None, None, None)) as response:
                self._log_response(response, ctx)
                if response.is_error:
                    response.read()
                    raise self._api_error(response, ctx)
                emitted = 0
                for payload in iter_sse_payloads(response.iter_lines(), ctx=ctx):
                    if isinstance(payload.get("error"), dict):
                        raise self._stream_error(response, payload, ctx)
                    emitted += 1
                    yield payload
                self._log_stream_end(ctx, emitted)
        except httpx.HTTPError as exc:
            raise self._transport_error(exc, ctx) from exc

    # ------------------------------------------------------------------ async
    async def _asend(self, method: str, route: str, kwargs: Dict[str, Any], ctx: LogContext) -> httpx.Response:
        log_event(_logger, "http.request", ctx, level=logging.DEBUG, url=self.url(route))
        try:
            async with open_async_httpx_client(self.credentials.base_url, PURPOSE_API) as client:
                response = await client.request(method, route.lstrip("/"), **kwargs)
        except httpx.HTTPError as exc:
            raise self._transport_error(exc, ctx) from exc
        self._log_response(response, ctx)
        if response.is_error:
            raise self._api_error(response, ctx)
        return response

    async def arequest(
        self,
        method: str,
        route: str,
        *,
        json: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        files: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
        model: Optional[str] = None,
    ) -> Any:
        ctx = self._ctx(method, route, model)
        response = await self._asend(method, route, self._send_kwargs(json, params, files, data), ctx)
        return self._decode_json(response)

    async def aget(self, route: str, *, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.arequest("GET", route, params=params)

    async def apost(self, route: str, body: Any, *, model: Optional[str] = None) -> Any:
        return await self.arequest("POST", route, json=body, model=model)

    async def adelete(self, route: str) -> Any:
        return await self.arequest("DELETE", route)

    async def apost_multipart(
        self,
        route: str,
        files: Mapping[str, Any],
        data: Optional[Mapping[str, Any]] = None,
        *,
        model: Optional[str] = None,
    ) -> Any:
        return await self.arequest("POST", route, files=files, data=data, model=model)

    async def aget_raw(self, route: str) -> bytes:
        ctx = self._ctx("GET", route, None)
        response = await self._asend("GET", route, self._send_kwargs(None, None, None, None), ctx)
        return response.content

    async def alist_all(self, route: str, after: Optional[str] = None) -> List[Any]:
        items: List[Any] = []
        cursor = after
        while True:
            page = await self.aget(route, params={"order": "asc", "after": cursor})
            items.extend(page.get("data") or [])
            cursor = page.get("last_id")
            if not page.get("has_more") or not cursor:
                return items

    async def astream(
        self, method: str, route: str, *, json: Any = None, model: Optional[str] = None
    ) -> AsyncIterator[Dict[str, Any]]:
        """Async twin of :meth:`stream`."""
        ctx = self._ctx(method, route, model)
        log_event(_logger, "http.request", ctx, level=logging.DEBUG, url=self.url(route), stream=True)
        kwargs = self._send_kwargs(json, None, None, None)
        try:
            async with open_async_httpx_client(self.credentials.base_url, PURPOSE_STREAM) as client, client.stream(
                method, route.lstrip("/"), **kwargs
            ) as response:
                self._log_response(response, ctx)
                if response.is_error:
                    await response.aread()
                    raise self._api_error(response, ctx)
                emitted = 0
                async for payload in aiter_sse_payloads(response.aiter_lines(), ctx=ctx):
                    if isinstance(payload.get("error"), dict):
                        raise self._stream_error(response, payload, ctx)
                    emitted += 1
                    yield payload
                self._log_stream_end(ctx, emitted)
        except httpx.HTTPError as exc:
            raise self._transport_error(exc, ctx) from exc


__all__ = ["ApiClient", "decode_response"]
