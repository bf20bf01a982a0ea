"""Fluent, immutable request builders.

Every resource exposes ``Resource.builder(...)`` returning a
:class:`RequestBuilder`. Each field of the request model is available as a
setter method that returns a *new* builder::

    request = (
        ChatCompletion.builder("gpt-4o-mini", messages)
        .temperature(0.2)
        .max_tokens(64)
        .build()
    )

``build()`` validates with pydantic and raises ``pydantic.ValidationError``
when required fields are missing or values are malformed. ``create()`` /
``acreate()`` (and the streaming twins where the target supports them) build
and send in one step.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Generic, Optional, Type, TypeVar

from .dto import RequestModel

R = TypeVar("R", bound=RequestModel)


class RequestBuilder(Generic[R]):
    """Immutable builder over a :class:`RequestModel` subclass.

    Parameters:
        request_cls: Request model to build.
        target: Object exposing ``create(request)`` (and optionally
            ``acreate``, ``create_stream``, ``acreate_stream``).
        **fields: Initial field values.
    """

    __slots__ = ("_request_cls", "_target", "_fields")

    def __init__(self, request_cls: Type[R], target: Any = None, **fields: Any) -> None:
        object.__setattr__(self, "_request_cls", request_cls)
        object.__setattr__(self, "_target", target)
        object.__setattr__(self, "_fields", dict(fields))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable; use set() or a field setter")

    def __getattr__(self, name: str) -> Callable[[Any], "RequestBuilder[R]"]:
        if name.startswith("_") or name not in self._request_cls.model_fields:
            raise AttributeError(f"{self._request_cls.__name__} has no field {name!r}")

        def setter(value: Any) -> "RequestBuilder[R]":
            return self.set(**{name: value})

        setter.__name__ = name
        return setter

    @property
    def fields(self) -> Dict[str, Any]:
        return dict(self._fields)

    def set(self, **fields: Any) -> "RequestBuilder[R]":
        """Return a new builder with ``fields`` applied."""
        unknown = [k for k in fields if k not in self._request_cls.model_fields]
        if unknown:
            raise AttributeError(f"{self._request_cls.__name__} has no field(s) {', '.join(sorted(unknown))}")
        return type(self)(self._request_cls, self._target, **{**self._fields, **fields})

    def unset(self, name: str) -> "RequestBuilder[R]":
        """Return a new builder without ``name`` (back to the model default)."""
        remaining = {k: v for k, v in self._fields.items() if k != name}
        return type(self)(self._request_cls, self._target, **remaining)

    def clone(self) -> "RequestBuilder[R]":
        return type(self)(self._request_cls, self._target, **self._fields)

    def build(self) -> R:
        """Validate and return the request model."""
        return self._request_cls(**self._fields)

    def _require(self, attr: str) -> Callable[..., Any]:
        fn: Optional[Callable[..., Any]] = getattr(self._target, attr, None)
        if fn is None:
            raise AttributeError(f"{self._request_cls.__name__} builder does not support {attr}()")
        return fn

    def create(self) -> Any:
        return self._require("create")(self.build())

    async def acreate(self) -> Any:
        return await self._require("acreate")(self.build())

    def create_stream(self) -> Any:
        return self._require("create_stream")(self.build())

    def acreate_stream(self) -> Any:
        return self._require("acreate_stream")(self.build())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RequestBuilder):
            return NotImplemented
        return self._request_cls is other._request_cls and self._fields == other._fields

    def __hash__(self) -> int:
        return hash((self._request_cls, tuple(sorted(self._fields))))

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self._fields.items())
        return f"{type(self).__name__}[{self._request_cls.__name__}]({inner})"


__all__ = ["RequestBuilder"]
