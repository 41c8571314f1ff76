# src/agentcfg/utils/serialization.py
"""Shared helpers for normalizing and serializing stored values."""

from __future__ import annotations

import json
from typing import Any

from pydantic_core import PydanticSerializationError, to_jsonable_python

from agentcfg.config.errors import DeserializeError


def to_serializable(obj: Any) -> Any:
    """Convert a value to the JSON-like model used by every store.

    Plain JSON types pass through unchanged. Pydantic models, dataclasses,
    paths, dates and tuples are converted the way pydantic would dump them
    in ``json`` mode.

    Raises:
        DeserializeError: If the value has no JSON representation
    """
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj

    try:
        return to_jsonable_python(obj)
    except PydanticSerializationError as exc:
        raise DeserializeError(f"unsupported value {type(obj).__name__}: {exc}") from exc


def normalize_mapping(data: Any) -> dict[str, Any]:
    """Normalize a parsed YAML document to a ``str -> JSON value`` mapping.

    Anything other than a mapping at the top level is treated as empty.
    YAML-only scalars (dates, timestamps) become their JSON form and
    non-string keys become strings.
    """
    if not isinstance(data, dict):
        return {}
    return {str(key): to_serializable(value) for key, value in data.items()}


def canonical_json(obj: Any) -> str:
    """Stable JSON text: sorted keys, no insignificant whitespace."""
    return json.dumps(
        to_serializable(obj),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
