"""Schema-driven structural validation.

Validation runs against a *candidate* state: the full set of fields a
document would hold (for an update, the new data merged over the current
fields). Only declared fields are checked; extra keys pass through.

Two entry points:

- :func:`validate` is fail-fast and raises the first violation in schema
  declaration order. The engine uses it.
- :func:`find_violations` walks every declared field and returns all
  violations, for callers that want a full report.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from ..contracts.schema import DocumentSchema, FieldRule, StringRule
from ..errors import ValidationError

REQUIRED = "required"
WRONG_TYPE = "wrong type"
TOO_LONG = "exceeds max length"


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


_KIND_CHECKS: dict[str, Callable[[Any], bool]] = {
    "string": lambda v: isinstance(v, str),
    "number": _is_number,
    "boolean": lambda v: isinstance(v, bool),
}


def _check_field(name: str, rule: FieldRule, value: Any) -> ValidationError | None:
    if value is None:
        return ValidationError(name, REQUIRED) if rule.required else None
    if not _KIND_CHECKS[rule.type](value):
        return ValidationError(name, WRONG_TYPE)
    if isinstance(rule, StringRule) and rule.max_length is not None:
        if len(value) > rule.max_length:
            return ValidationError(name, TOO_LONG)
    return None


def find_violations(candidate: Mapping[str, Any], schema: DocumentSchema) -> list[ValidationError]:
    """Return every violation in ``candidate``, in schema declaration order."""
    found: list[ValidationError] = []
    for name, rule in schema.fields.items():
        error = _check_field(name, rule, candidate.get(name))
        if error is not None:
            found.append(error)
    return found


def validate(candidate: Mapping[str, Any], schema: DocumentSchema) -> None:
    """Raise :class:`ValidationError` for the first invalid declared field."""
    for name, rule in schema.fields.items():
        error = _check_field(name, rule, candidate.get(name))
        if error is not None:
            raise error


__all__ = ["REQUIRED", "TOO_LONG", "WRONG_TYPE", "find_violations", "validate"]
