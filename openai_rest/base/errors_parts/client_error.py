"""
Structured exception types raised by the client.

``OpenAIError`` carries the error object the API returned (or a synthesized
one for non-JSON bodies and local I/O failures). ``TransportError`` wraps
network level failures from ``httpx`` and ``DecodeError`` covers success
responses whose body does not match the expected shape.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .error_code import ErrorCode


class ClientError(Exception):
    """Base class for every error raised by openai_rest."""


@dataclass(eq=False)
class OpenAIError(ClientError):
    """An error reported by the API (or synthesized in its shape).

    Attributes:
        message: Human-readable error message.
        error_type: The API's ``type`` string (``invalid_request_error``...),
            ``"unknown"`` for unparseable bodies, ``"io"`` for local file errors.
        param: Request parameter the error refers to, when reported.
        code: The API's own machine-readable code string, when reported.
        status_code: HTTP status of the response; ``None`` for local errors.
        kind: Normalized :class:`ErrorCode` classification.
    """

    message: str
    error_type: str = "unknown"
    param: Optional[str] = None
    code: Optional[str] = None
    status_code: Optional[int] = None
    kind: ErrorCode = ErrorCode.UNKNOWN

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_response(cls, status_code: int, body: Any, text: str) -> "OpenAIError":
        """Build from a non-success response.

        ``body`` is the decoded JSON (or ``None``) and ``text`` the raw body.
        An ``{"error": {...}}`` envelope yields its fields; anything else yields
        ``error_type="unknown"`` with the raw text as the message.
        """
        from .classification import classify_status

        kind = classify_status(status_code)
        err = body.get("error") if isinstance(body, dict) else None
        if isinstance(err, dict) and isinstance(err.get("message"), str):
            code = err.get("code")
            return cls(
                message=err["message"],
                error_type=str(err.get("type") or "unknown"),
                param=err.get("param"),
                code=str(code) if code is not None else None,
                status_code=status_code,
                kind=kind,
            )
        return cls(message=text, error_type="unknown", status_code=status_code, kind=kind)

    def to_dict(self) -> Dict[str, Any]:
        """Return the error in the API's wire shape (without ``None`` keys)."""
        data = {"message": self.message, "type": self.error_type, "param": self.param, "code": self.code}
        return {k: v for k, v in data.items() if v is not None}


@dataclass(eq=False)
class TransportError(ClientError):
    """A failure below the API layer (connection, TLS, timeout, bad body).

    Attributes:
        message: Human-readable description.
        kind: Normalized :class:`ErrorCode` classification.
        raw: The original exception, also chained as ``__cause__``.
    """

    message: str
    kind: ErrorCode = ErrorCode.UNKNOWN
    raw: Optional[BaseException] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class DecodeError(TransportError):
    """A success response whose body could not be decoded into the result type."""


class MissingCredentialsError(ClientError):
    """No usable API key was found in explicit credentials, config, or environment."""


__all__ = [
    "ClientError",
    "OpenAIError",
    "TransportError",
    "DecodeError",
    "MissingCredentialsError",
]
