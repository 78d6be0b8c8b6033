"""History records kept in a document's bounded archive.

An archive entry records the state *before* one accepted update: for every
schema field the update changed, the value it had (``from``) and the value it
received (``to``). Replaying entries newest-first and writing back each
``from`` value recovers earlier versions.

Wire format
-----------
Entries serialize (``model_dump(by_alias=True)``) to the compact keys used by
stored representations::

    {"_v": 1, "_at": "2025-11-12T02:02:37.104Z",
     "_diff": [{"field": "title", "from": "Start", "to": "Next"}]}

Both the aliases and the Python attribute names are accepted on input.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FieldDiff(BaseModel):
    """One changed field within an update."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field: str
    from_: Any = Field(default=None, alias="from", description="Prior value, None if absent")
    to: Any = None


class ArchiveEntry(BaseModel):
    """Pre-update values for the fields changed by a single update."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_version: int = Field(alias="_v", description="Version before the update")
    timestamp: str = Field(alias="_at", description="UTC ISO-8601 time of the update")
    diffs: tuple[FieldDiff, ...] = Field(default=(), alias="_diff")

    def to_wire(self) -> dict[str, Any]:
        """Return the entry as a plain dict using the stored key names."""
        return self.model_dump(by_alias=True, mode="json")


__all__ = ["ArchiveEntry", "FieldDiff"]
