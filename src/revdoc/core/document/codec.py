"""JSON-safe conversion and serialized-size measurement.

The size budget of a document is measured on its *compact* JSON text
(no whitespace after separators, non-ASCII characters kept verbatim) and
counted in UTF-16 code units, so the number matches the string length a
JavaScript persistence collaborator would report.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any


def jsonify(value: Any) -> Any:
    """
    Return a JSON-safe deep copy of ``value``.

    Strategies:
    - Primitives (None, bool, int, float, str) -> returned as-is.
    - Mappings -> new dict with keys coerced to str.
    - list/tuple -> new list with recursive conversion.
    - Pydantic models -> their aliased JSON dump.
    - Other objects -> ``repr(obj)`` fallback.
    """
    if value is None or isinstance(value, bool | int | float | str):
        return value
    if isinstance(value, Mapping):
        return {str(k): jsonify(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [jsonify(v) for v in value]
    model_dump = getattr(value, "model_dump", None)
    if callable(model_dump):
        return model_dump(by_alias=True, mode="json")
    return repr(value)


def dumps_compact(payload: Any) -> str:
    """Serialize ``payload`` as compact JSON text."""
    return json.dumps(jsonify(payload), separators=(",", ":"), ensure_ascii=False)


def serialized_size(payload: Any) -> int:
    """Length of the compact JSON form of ``payload`` in UTF-16 code units.

    Characters outside the Basic Multilingual Plane, such as most emoji,
    count as two.
    """
    return len(dumps_compact(payload).encode("utf-16-le")) // 2


__all__ = ["dumps_compact", "jsonify", "serialized_size"]
