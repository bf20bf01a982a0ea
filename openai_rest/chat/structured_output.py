"""JSON Schema generation for structured outputs and strict tool definitions.

``generate_json_schema`` turns a pydantic model into the schema dialect the
API accepts for ``response_format: {"type": "json_schema"}`` and strict
function tools:

* ``$ref`` / ``$defs`` are inlined (recursive models are rejected).
* ``oneOf`` becomes ``anyOf`` and single-entry ``allOf`` wrappers are unwrapped.
* ``title`` keys are dropped; ``const`` becomes a one-value ``enum``.
* string schemas keep only ``type`` and ``enum``; number and integer schemas
  keep only ``type`` (``format``, ``minimum``, ``multipleOf``... are not
  supported by the API).
* ``JsonSchemaStyle.OPENAI``: every object lists all of its properties as
  ``required`` and gets ``additionalProperties: false`` unless set;
  ``default`` values are dropped since every field is required.
* ``JsonSchemaStyle.GROK``: optional fields lose their ``null`` branch and
  ``required`` is left as generated.
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type

from pydantic import BaseModel

_REF_PREFIX = "#/$defs/"


class JsonSchemaStyle(str, Enum):
    OPENAI = "openai"
    GROK = "grok"


def _inline_refs(node: Any, defs: Dict[str, Any], stack: Tuple[str, ...] = ()) -> Any:
    if isinstance(node, list):
        return [_inline_refs(v, defs, stack) for v in node]
    if not isinstance(node, dict):
        return node
    ref = node.get("$ref")
    if isinstance(ref, str) and ref.startswith(_REF_PREFIX):
        name = ref[len(_REF_PREFIX):]
        if name in stack:
            raise ValueError(f"recursive schema {name!r} cannot be inlined")
        target = copy.deepcopy(defs[name])
        siblings = {k: v for k, v in node.items() if k != "$ref"}
        merged = _inline_refs(target, defs, stack + (name,))
        merged.update(_inline_refs(siblings, defs, stack))
        return merged
    return {k: _inline_refs(v, defs, stack) for k, v in node.items() if k != "$defs"}


def _drop_null_branch(obj: Dict[str, Any]) -> None:
    branches = obj.get("anyOf")
    if not isinstance(branches, list):
        return
    non_null = [b for b in branches if not (isinstance(b, dict) and b.get("type") == "null")]
    if len(non_null) == len(branches):
        return
    if len(non_null) == 1 and isinstance(non_null[0], dict):
        del obj["anyOf"]
        for k, v in non_null[0].items():
            obj.setdefault(k, v)
    else:
        obj["anyOf"] = non_null
    if obj.get("default", "") is None:
        del obj["default"]


def _post_process(obj: Any, style: JsonSchemaStyle) -> None:
    if not isinstance(obj, dict):
        return
    obj.pop("title", None)
    if "oneOf" in obj:
        obj["anyOf"] = obj.pop("oneOf")
    all_of = obj.get("allOf")
    if isinstance(all_of, list) and len(all_of) == 1 and isinstance(all_of[0], dict):
        del obj["allOf"]
        for k, v in all_of[0].items():
            obj.setdefault(k, v)
    if "const" in obj and "enum" not in obj:
        obj["enum"] = [obj.pop("const")]
    if style is JsonSchemaStyle.GROK:
        _drop_null_branch(obj)
    else:
        obj.pop("default", None)
    if isinstance(obj.get("anyOf"), list):
        for v in obj["anyOf"]:
            _post_process(v, style)

    ty = obj.get("type")
    if ty == "array":
        _post_process(obj.get("items"), style)
    elif ty == "object":
        properties = obj.get("properties")
        if not isinstance(properties, dict):
            return
        for v in properties.values():
            _post_process(v, style)
        if style is JsonSchemaStyle.OPENAI:
            obj["required"] = list(properties.keys())
            obj.setdefault("additionalProperties", False)
    elif ty == "string":
        kept = {k: v for k, v in obj.items() if k in ("type", "enum")}
        obj.clear()
        obj.update(kept)
    elif ty in ("number", "integer"):
        kept = {"type": ty}
        obj.clear()
        obj.update(kept)


def generate_json_schema(
    model: Type[BaseModel], style: JsonSchemaStyle = JsonSchemaStyle.OPENAI
) -> Tuple[Dict[str, Any], Optional[str]]:
    """Return ``(schema, description)`` for ``model`` in the given style.

    ``description`` is the model's docstring-derived description, if any.
    """
    raw = model.model_json_schema()
    defs = raw.pop("$defs", {})
    schema = _inline_refs(raw, defs)
    description = schema.get("description")
    _post_process(schema, style)
    return schema, description


def schema_name(model: Type[BaseModel]) -> str:
    """Name used for the schema / function (the model's title or class name)."""
    title = model.model_config.get("title")
    return str(title) if title else model.__name__


__all__ = ["JsonSchemaStyle", "generate_json_schema", "schema_name"]
