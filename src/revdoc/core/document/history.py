"""Diff computation, bounded archival and snapshot reconstruction.

Reconstruction
--------------
Each :class:`ArchiveEntry` stores the *pre-update* value of every field the
update changed. Starting from the current fields and undoing entries from
newest to oldest therefore walks the document back one version at a time:
after undoing the entry with ``from_version == v`` the working copy holds
exactly the fields of version ``v``.

Because the archive is capped, only the last ``len(archive)`` versions plus
the current one are reachable. Anything older, and any version that never
existed, raises :class:`VersionNotFoundError`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ..contracts.history import ArchiveEntry, FieldDiff
from ..contracts.schema import DocumentSchema
from ..errors import VersionNotFoundError

META_PREFIX = "_"


def strip_metadata(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``fields`` without reserved ``_``-prefixed keys."""
    return {k: v for k, v in fields.items() if not k.startswith(META_PREFIX)}


def compute_diff(
    current: Mapping[str, Any],
    new_data: Mapping[str, Any],
    schema: DocumentSchema,
) -> tuple[FieldDiff, ...]:
    """Diff the declared fields that ``new_data`` touches.

    Order follows schema declaration, not ``new_data`` key order. Fields not
    present as keys in ``new_data`` are never diffed. Equality is by value,
    so a fresh but equal list or dict does not count as a change. A field
    missing from ``current`` always counts as changed, even when set to None.
    """
    diffs: list[FieldDiff] = []
    for name in schema.fields:
        if name not in new_data:
            continue
        after = new_data[name]
        if name in current and current[name] == after:
            continue
        diffs.append(FieldDiff(field=name, from_=current.get(name), to=after))
    return tuple(diffs)


def append_entry(
    archive: Sequence[ArchiveEntry],
    entry: ArchiveEntry,
    max_history: int,
) -> tuple[ArchiveEntry, ...]:
    """Return a new archive with ``entry`` appended and the oldest evicted."""
    grown = (*archive, entry)
    if len(grown) > max_history:
        grown = grown[len(grown) - max_history :]
    return grown


def retained_versions(current_version: int, archive: Sequence[ArchiveEntry]) -> tuple[int, ...]:
    """Versions reachable by :func:`reconstruct`, ascending."""
    found = {entry.from_version for entry in archive if entry.from_version < current_version}
    found.add(current_version)
    return tuple(sorted(found))


def reconstruct(
    current: Mapping[str, Any],
    current_version: int,
    archive: Sequence[ArchiveEntry],
    target_version: int,
) -> dict[str, Any]:
    """Rebuild the fields of ``target_version`` by undoing archived diffs.

    Raises
    ------
    VersionNotFoundError
        If ``target_version`` is not the current version and no archive entry
        leads back to it.
    """
    if target_version == current_version:
        return strip_metadata(current)

    working = dict(current)
    for entry in sorted(archive, key=lambda e: e.from_version, reverse=True):
        if entry.from_version < target_version:
            break
        for diff in entry.diffs:
            working[diff.field] = diff.from_
        if entry.from_version == target_version:
            return strip_metadata(working)

    raise VersionNotFoundError(target_version)


__all__ = [
    "META_PREFIX",
    "append_entry",
    "compute_diff",
    "reconstruct",
    "retained_versions",
    "strip_metadata",
]
