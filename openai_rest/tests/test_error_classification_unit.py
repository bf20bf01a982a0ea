from __future__ import annotations

import asyncio
import types

import httpx

from openai_rest.base.errors import (
    DecodeError,
    ErrorCode,
    OpenAIError,
    TransportError,
    classify_exception,
    classify_status,
)


def test_classify_client_error_passthrough():
    e = OpenAIError(message="nope", kind=ErrorCode.AUTH)
    assert classify_exception(e) is ErrorCode.AUTH  # nosec B101 - assert is appropriate in unit tests
    t = TransportError(message="bad", kind=ErrorCode.CONNECTION)
    assert classify_exception(t) is ErrorCode.CONNECTION  # nosec B101


def test_classify_http_status_mapping():
    e1 = types.SimpleNamespace(status_code=404)
    assert classify_exception(e1) is ErrorCode.NOT_FOUND  # nosec B101
    e2 = types.SimpleNamespace(response=types.SimpleNamespace(status_code=503))
    assert classify_exception(e2) is ErrorCode.UNAVAILABLE  # nosec B101


def test_classify_status_table():
    assert classify_status(401) is ErrorCode.AUTH  # nosec B101
    assert classify_status(429) is ErrorCode.RATE_LIMIT  # nosec B101
    assert classify_status(400) is ErrorCode.VALIDATION  # nosec B101
    assert classify_status(507) is ErrorCode.SERVER_ERROR  # nosec B101
    assert classify_status(418) is ErrorCode.UNKNOWN  # nosec B101
    assert classify_status(None) is ErrorCode.UNKNOWN  # nosec B101


def test_classify_httpx_exceptions():
    req = httpx.Request("GET", "https://api.unit.local/v1/models")
    assert classify_exception(httpx.ReadTimeout("slow", request=req)) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(httpx.ConnectError("refused", request=req)) is ErrorCode.CONNECTION  # nosec B101
    assert classify_exception(httpx.RemoteProtocolError("eof", request=req)) is ErrorCode.TRANSIENT  # nosec B101
    assert classify_exception(asyncio.TimeoutError()) is ErrorCode.TIMEOUT  # nosec B101


def test_classify_heuristics():
    assert classify_exception(Exception("rate limit exceeded")) is ErrorCode.RATE_LIMIT  # nosec B101
    assert classify_exception(Exception("timed out waiting")) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(Exception("Invalid API key")) is ErrorCode.AUTH  # nosec B101
    assert classify_exception(Exception("random")) is ErrorCode.UNKNOWN  # nosec B101


def test_openai_error_from_envelope():
    body = {"error": {"message": "bad model", "type": "invalid_request_error", "param": "model", "code": None}}
    err = OpenAIError.from_response(404, body, "raw")
    assert str(err) == "bad model"
    assert err.error_type == "invalid_request_error"
    assert err.param == "model"
    assert err.code is None
    assert err.status_code == 404
    assert err.kind is ErrorCode.NOT_FOUND
    assert err.to_dict() == {"message": "bad model", "type": "invalid_request_error", "param": "model"}


def test_openai_error_without_envelope_keeps_raw_text():
    err = OpenAIError.from_response(502, None, "<html>Bad gateway</html>")
    assert err.error_type == "unknown"
    assert err.message == "<html>Bad gateway</html>"
    assert err.kind is ErrorCode.TRANSIENT


def test_openai_error_numeric_code_is_stringified():
    err = OpenAIError.from_response(429, {"error": {"message": "slow down", "code": 42}}, "")
    assert err.code == "42"
    assert err.error_type == "unknown"


def test_errors_are_hashable_exceptions():
    err = DecodeError(message="bad json", kind=ErrorCode.DECODE)
    assert isinstance(err, TransportError)
    assert str(err) == "decode: bad json"
    assert len({err, err}) == 1
