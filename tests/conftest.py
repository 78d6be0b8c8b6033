"""Shared fixtures for the revdoc test-suite."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest

from revdoc.core.document.clock import ManualClock
from revdoc.core.settings import load_settings

TITLE_SCHEMA: dict[str, Any] = {
    "maxHistory": 3,
    "maxCharLimit": 500,
    "minTimeGap": 0,
    "fields": {
        "title": {"type": "string", "required": True, "maxLength": 20},
        "content": {"type": "string", "required": False},
    },
}


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Rebuild cached settings after each test so env tweaks don't leak."""
    yield
    load_settings.cache_clear()


@pytest.fixture
def clock() -> ManualClock:
    """A deterministic clock starting at 2023-11-14T22:13:20.000Z."""
    return ManualClock(start_ms=1_700_000_000_000)


@pytest.fixture
def title_schema() -> dict[str, Any]:
    """Small schema: required, length-capped title plus optional content."""
    return {**TITLE_SCHEMA, "fields": dict(TITLE_SCHEMA["fields"])}
