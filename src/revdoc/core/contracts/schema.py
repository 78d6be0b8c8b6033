"""Document schema contracts.

This module defines the Pydantic v2 models that describe *what a document may
contain* and *how the engine treats it*:

- `StringRule`, `NumberRule`, `BooleanRule`: per-field rules, a tagged union
  discriminated on ``type``.
- `DocumentSchema`: the ordered field rules plus the three tunables
  (``max_history``, ``min_time_gap``, ``max_char_limit``).

Input shape
-----------
Schemas usually arrive as plain mappings::

    {
        "maxHistory": 3,
        "minTimeGap": 0,
        "fields": {
            "title": {"type": "string", "required": True, "maxLength": 20},
            "views": {"type": "number"},
        },
    }

Tunables are accepted as camelCase, as the underscore-prefixed keys of the
stored wire format (``_maxHistory``), or as snake_case. An explicit ``0`` is
kept as-is; only an *absent* tunable falls back to the settings default.

Notes
-----
- Field declaration order is preserved; validation and diffing follow it.
- Models are frozen: a schema is immutable for the lifetime of an engine.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..errors import SchemaError
from ..settings import load_settings

FieldKind = Literal["string", "number", "boolean"]


class _Rule(BaseModel):
    """Shared flags for every field rule."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    required: bool = Field(default=False, description="Field must be present and non-null.")


class StringRule(_Rule):
    """A text field with an optional length cap."""

    type: Literal["string"] = "string"
    max_length: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("maxLength", "max_length"),
        serialization_alias="maxLength",
        description="Maximum number of characters, if any.",
    )


class NumberRule(_Rule):
    """An int or float field (booleans are rejected)."""

    type: Literal["number"] = "number"


class BooleanRule(_Rule):
    """A true/false field."""

    type: Literal["boolean"] = "boolean"


FieldRule = Annotated[StringRule | NumberRule | BooleanRule, Field(discriminator="type")]


def _default_max_history() -> int:
    return load_settings().default_max_history


def _default_min_time_gap() -> int:
    return load_settings().default_min_time_gap


def _default_max_char_limit() -> int:
    return load_settings().default_max_char_limit


class DocumentSchema(BaseModel):
    """Resolved, immutable schema for one versioned document."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    fields: dict[str, FieldRule] = Field(default_factory=dict)

    max_history: int = Field(
        default_factory=_default_max_history,
        ge=1,
        validation_alias=AliasChoices("maxHistory", "_maxHistory", "max_history"),
        serialization_alias="maxHistory",
    )
    min_time_gap: int = Field(
        default_factory=_default_min_time_gap,
        ge=0,
        validation_alias=AliasChoices("minTimeGap", "_minTimeGap", "min_time_gap"),
        serialization_alias="minTimeGap",
    )
    max_char_limit: int = Field(
        default_factory=_default_max_char_limit,
        ge=0,
        validation_alias=AliasChoices("maxCharLimit", "_maxCharLimit", "max_char_limit"),
        serialization_alias="maxCharLimit",
    )

    @classmethod
    def coerce(cls, schema: DocumentSchema | Mapping[str, Any]) -> DocumentSchema:
        """Return ``schema`` as a `DocumentSchema`, parsing plain mappings.

        Raises
        ------
        SchemaError
            If ``schema`` is not a mapping or does not describe a valid schema.
        """
        if isinstance(schema, DocumentSchema):
            return schema
        if not isinstance(schema, Mapping):
            raise SchemaError(
                f"Invalid document schema: expected an object, got {type(schema).__name__}"
            )
        try:
            return cls.model_validate(dict(schema))
        except (PydanticValidationError, TypeError, ValueError) as e:
            raise SchemaError(f"Invalid document schema: {e}") from e

    def field_names(self) -> tuple[str, ...]:
        """Declared field names in declaration order."""
        return tuple(self.fields)


__all__ = [
    "BooleanRule",
    "DocumentSchema",
    "FieldKind",
    "FieldRule",
    "NumberRule",
    "StringRule",
]
