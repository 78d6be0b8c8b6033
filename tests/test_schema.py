"""Unit tests for the document schema contracts."""

from __future__ import annotations

from typing import Any

import pytest

from revdoc.core.contracts.schema import (
    BooleanRule,
    DocumentSchema,
    NumberRule,
    StringRule,
)
from revdoc.core.errors import SchemaError


def test_rules_are_tagged_by_type() -> None:
    """Each rule mapping is parsed into the variant named by its `type`."""
    schema = DocumentSchema.coerce(
        {
            "fields": {
                "title": {"type": "string", "required": True, "maxLength": 20},
                "views": {"type": "number"},
                "published": {"type": "boolean", "required": False},
            }
        }
    )
    title, views, published = (schema.fields[k] for k in ("title", "views", "published"))

    assert isinstance(title, StringRule)
    assert title.required is True and title.max_length == 20
    assert isinstance(views, NumberRule) and views.required is False
    assert isinstance(published, BooleanRule)


def test_field_order_is_preserved() -> None:
    """Declaration order drives validation and diffing, so it must survive parsing."""
    fields = {name: {"type": "string"} for name in ("zeta", "alpha", "mid")}
    schema = DocumentSchema.coerce({"fields": fields})
    assert schema.field_names() == ("zeta", "alpha", "mid")


@pytest.mark.parametrize(
    "tunables",
    [
        {"maxHistory": 3, "minTimeGap": 0, "maxCharLimit": 500},
        {"_maxHistory": 3, "_minTimeGap": 0, "_maxCharLimit": 500},
        {"max_history": 3, "min_time_gap": 0, "max_char_limit": 500},
    ],
)
def test_tunable_spellings(tunables: dict[str, Any]) -> None:
    """camelCase, underscore-prefixed and snake_case tunables are all accepted."""
    schema = DocumentSchema.coerce({**tunables, "fields": {}})
    assert (schema.max_history, schema.min_time_gap, schema.max_char_limit) == (3, 0, 500)


def test_explicit_zero_gap_is_not_replaced_by_default() -> None:
    """`minTimeGap: 0` disables rate limiting instead of falling back to 2000."""
    schema = DocumentSchema.coerce({"minTimeGap": 0, "fields": {}})
    assert schema.min_time_gap == 0


def test_existing_schema_instance_is_returned_as_is() -> None:
    schema = DocumentSchema.coerce({"fields": {}})
    assert DocumentSchema.coerce(schema) is schema


@pytest.mark.parametrize(
    "bad",
    [
        {"fields": {"x": {"type": "date"}}},
        {"fields": {"x": {"required": True}}},
        {"maxHistory": 0, "fields": {}},
        {"minTimeGap": -1, "fields": {}},
        {"fields": {"x": {"type": "string", "maxLength": -5}}},
        5,
        [],
        "fields",
    ],
)
def test_invalid_schema_raises_schema_error(bad: Any) -> None:
    """Unknown kinds, missing tags, bad tunables and non-object schemas are rejected."""
    with pytest.raises(SchemaError):
        DocumentSchema.coerce(bad)


def test_schema_is_frozen() -> None:
    schema = DocumentSchema.coerce({"fields": {}})
    with pytest.raises(Exception):
        schema.max_history = 99  # type: ignore[misc]
