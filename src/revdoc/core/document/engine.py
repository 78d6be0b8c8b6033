"""
In-memory versioned document with optimistic concurrency and bounded history.

This module implements the document engine. A :class:`VersionedDocument`
owns one record and guards every mutation through :meth:`~VersionedDocument.update`:

- ``update(new_data, expected_version)``: concurrency check, rate check,
  validation, diff, archive append, size check, commit.
- ``get_snapshot(version)``: rebuild the fields of a recent version from the
  bounded archive.
- ``to_representation()``: the full record including metadata, suitable for
  storing and later feeding back into the constructor.

Transaction model
-----------------
The current state is an immutable :class:`DocumentState`. An update builds
the complete *prospective* state first and swaps it in only after every
check has passed, so a failed update never leaves partial effects behind.

Representation
--------------
User fields sit at the top level next to three reserved keys::

    {"title": "Next", "_version": 2, "_lastUpdatedAt": 1700000000000,
     "_archive": [{"_v": 1, "_at": "...Z", "_diff": [...]}]}

A mapping carrying a numeric ``_version`` is treated as a stored
representation and rehydrated without validation.
"""

from __future__ import annotations

import copy
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..contracts.history import ArchiveEntry
from ..contracts.schema import DocumentSchema
from ..errors import (
    ConcurrencyError,
    DocumentError,
    RateLimitError,
    SizeLimitError,
)
from ..settings import get_logger
from .clock import Clock, SystemClock, iso_timestamp
from .codec import jsonify, serialized_size
from .history import append_entry, compute_diff, reconstruct, retained_versions
from .validator import validate

VERSION_KEY = "_version"
UPDATED_AT_KEY = "_lastUpdatedAt"
ARCHIVE_KEY = "_archive"
META_KEYS = frozenset({VERSION_KEY, UPDATED_AT_KEY, ARCHIVE_KEY})

logger = get_logger(__name__)


def _is_version_marker(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    # finite and integral: 2.0 is a marker, 2.5 and NaN are not
    return isinstance(value, int) or (math.isfinite(value) and value.is_integer())


def _without_meta(data: Mapping[str, Any]) -> dict[str, Any]:
    return {k: copy.deepcopy(v) for k, v in data.items() if k not in META_KEYS}


@dataclass(frozen=True, slots=True)
class DocumentState:
    """
    Immutable value of a document at one version.

    Attributes
    ----------
    fields : dict[str, Any]
        Schema-declared fields plus any extra caller data.
    version : int
        Starts at 1 and grows by exactly one per accepted update.
    last_updated_at : int | float
        Epoch milliseconds of the last accepted update; 0 before any.
    archive : tuple[ArchiveEntry, ...]
        Oldest first, never longer than the schema's ``max_history``.
    """

    fields: dict[str, Any]
    version: int
    last_updated_at: int | float = 0
    archive: tuple[ArchiveEntry, ...] = field(default_factory=tuple)

    def to_representation(self) -> dict[str, Any]:
        """Return a JSON-safe dict in the stored wire format."""
        rep: dict[str, Any] = dict(self.fields)
        rep[VERSION_KEY] = self.version
        rep[UPDATED_AT_KEY] = self.last_updated_at
        rep[ARCHIVE_KEY] = [entry.to_wire() for entry in self.archive]
        return jsonify(rep)


class VersionedDocument:
    """
    One in-memory versioned document plus its schema and configuration.

    Parameters
    ----------
    input_data : Mapping[str, Any] | None
        Either raw field values (a fresh document at version 1, validated) or
        a stored representation carrying a numeric ``_version`` (rehydrated
        as-is, not validated).
    schema : DocumentSchema | Mapping[str, Any]
        Field rules and tunables. Plain mappings are parsed with
        :meth:`DocumentSchema.coerce`.
    clock : Clock | None
        Source of "now" in epoch milliseconds. Defaults to :class:`SystemClock`.

    Raises
    ------
    ValidationError
        If a fresh document violates the schema.
    SchemaError
        If ``schema`` is malformed.
    """

    __slots__ = ("_schema", "_clock", "_state")

    def __init__(
        self,
        input_data: Mapping[str, Any] | None,
        schema: DocumentSchema | Mapping[str, Any],
        *,
        clock: Clock | None = None,
    ) -> None:
        self._schema: DocumentSchema = DocumentSchema.coerce(schema)
        self._clock: Clock = clock if clock is not None else SystemClock()

        data: Mapping[str, Any] = input_data if input_data is not None else {}
        marker = data.get(VERSION_KEY)
        if _is_version_marker(marker):
            archive_raw = data.get(ARCHIVE_KEY) or ()
            self._state = DocumentState(
                fields=_without_meta(data),
                version=int(marker),
                last_updated_at=data.get(UPDATED_AT_KEY) or 0,
                archive=tuple(ArchiveEntry.model_validate(e) for e in archive_raw),
            )
            logger.debug("Rehydrated document at v%d", self._state.version)
        else:
            fields = _without_meta(data)
            validate(fields, self._schema)
            self._state = DocumentState(fields=fields, version=1)
            logger.debug("Created document at v1 with %d field(s)", len(fields))

    @classmethod
    def from_representation(
        cls,
        representation: Mapping[str, Any],
        schema: DocumentSchema | Mapping[str, Any],
        *,
        clock: Clock | None = None,
    ) -> VersionedDocument:
        """Rehydrate a document previously produced by :meth:`to_representation`."""
        if not _is_version_marker(representation.get(VERSION_KEY)):
            raise ValueError(f"representation has no integral {VERSION_KEY!r} marker")
        return cls(representation, schema, clock=clock)

    # ------------------------------- Read API -------------------------------

    @property
    def schema(self) -> DocumentSchema:
        return self._schema

    @property
    def version(self) -> int:
        return self._state.version

    @property
    def last_updated_at(self) -> int | float:
        return self._state.last_updated_at

    @property
    def archive(self) -> tuple[ArchiveEntry, ...]:
        return self._state.archive

    @property
    def fields(self) -> Mapping[str, Any]:
        """Read-only copy of the current fields (metadata excluded)."""
        return MappingProxyType(copy.deepcopy(self._state.fields))

    @property
    def size(self) -> int:
        """Characters in the compact JSON form of the full representation."""
        return serialized_size(self._state.to_representation())

    def get_remaining_capacity(self) -> int:
        """Characters left before ``max_char_limit``, floored at 0."""
        return max(self._schema.max_char_limit - self.size, 0)

    def to_representation(self) -> dict[str, Any]:
        """Return the full record including version, timestamp and archive."""
        return self._state.to_representation()

    def retained_versions(self) -> tuple[int, ...]:
        """Versions :meth:`get_snapshot` can currently reach, ascending."""
        return retained_versions(self._state.version, self._state.archive)

    def get_snapshot(self, target_version: int) -> dict[str, Any]:
        """
        Return the fields as they were at ``target_version``, without metadata.

        Raises
        ------
        VersionNotFoundError
            If the version was evicted from the archive or never existed.
        """
        state = self._state
        snapshot = reconstruct(state.fields, state.version, state.archive, target_version)
        return copy.deepcopy(snapshot)

    # ------------------------------ Write API -------------------------------

    def update(self, new_data: Mapping[str, Any], expected_version: int) -> Mapping[str, Any]:
        """
        Apply ``new_data`` if ``expected_version`` is still current.

        Returns a read-only view of the resulting representation. An update
        that changes no declared field is a no-op: same version, no archive
        entry.

        Raises
        ------
        ConcurrencyError
            ``expected_version`` differs from the current version.
        RateLimitError
            Less than ``min_time_gap`` ms passed since the last accepted update.
        ValidationError
            The merged state violates the schema.
        SizeLimitError
            The resulting representation would exceed ``max_char_limit``.
        """
        state = self._state
        schema = self._schema
        now = self._clock.now_ms()

        if state.version != expected_version:
            raise self._rejected(ConcurrencyError(state.version, expected_version))

        elapsed = now - state.last_updated_at
        if elapsed < schema.min_time_gap:
            raise self._rejected(RateLimitError(elapsed, schema.min_time_gap))

        incoming = _without_meta(new_data)
        merged = {**state.fields, **incoming}
        try:
            validate(merged, schema)
        except DocumentError as e:
            self._rejected(e)
            raise

        diffs = compute_diff(state.fields, incoming, schema)
        if not diffs:
            logger.debug("No-op update at v%d", state.version)
            return self._view()

        entry = ArchiveEntry(
            from_version=state.version,
            timestamp=iso_timestamp(now),
            diffs=diffs,
        )
        prospective = DocumentState(
            fields=merged,
            version=state.version + 1,
            last_updated_at=now,
            archive=append_entry(state.archive, entry, schema.max_history),
        )

        size = serialized_size(prospective.to_representation())
        if size > schema.max_char_limit:
            raise self._rejected(SizeLimitError(size, schema.max_char_limit))

        self._state = prospective
        logger.debug(
            "Committed v%d -> v%d (%d field(s) changed, %d chars)",
            state.version,
            prospective.version,
            len(diffs),
            size,
        )
        return self._view()

    # ------------------------------- Helpers --------------------------------

    def _view(self) -> Mapping[str, Any]:
        return MappingProxyType(self._state.to_representation())

    def _rejected(self, error: DocumentError) -> DocumentError:
        logger.info(
            "Rejected update at v%d: %s: %s", self._state.version, type(error).__name__, error
        )
        return error

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return (
            f"VersionedDocument(version={self._state.version}, "
            f"archive={len(self._state.archive)}/{self._schema.max_history})"
        )


__all__ = ["DocumentState", "VersionedDocument", "META_KEYS"]
