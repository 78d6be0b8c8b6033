"""Pydantic contracts for schemas and archive records."""

from __future__ import annotations

from .history import ArchiveEntry, FieldDiff
from .schema import BooleanRule, DocumentSchema, FieldRule, NumberRule, StringRule

__all__ = [
    "ArchiveEntry",
    "BooleanRule",
    "DocumentSchema",
    "FieldDiff",
    "FieldRule",
    "NumberRule",
    "StringRule",
]
