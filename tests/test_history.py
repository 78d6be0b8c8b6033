"""Unit tests for diffing, bounded archival and reconstruction."""

from __future__ import annotations

import pytest

from revdoc.core.contracts.history import ArchiveEntry, FieldDiff
from revdoc.core.contracts.schema import DocumentSchema
from revdoc.core.document.history import (
    append_entry,
    compute_diff,
    reconstruct,
    retained_versions,
    strip_metadata,
)
from revdoc.core.errors import VersionNotFoundError

SCHEMA = DocumentSchema.coerce(
    {
        "fields": {
            "title": {"type": "string"},
            "body": {"type": "string"},
            "tags": {"type": "string"},
        }
    }
)


def _entry(v: int, **changes: tuple[object, object]) -> ArchiveEntry:
    diffs = tuple(FieldDiff(field=k, from_=a, to=b) for k, (a, b) in changes.items())
    return ArchiveEntry(from_version=v, timestamp="2025-01-01T00:00:00.000Z", diffs=diffs)


def test_diff_follows_schema_order_not_input_order() -> None:
    current = {"title": "a", "body": "b"}
    diffs = compute_diff(current, {"body": "B", "title": "A"}, SCHEMA)
    assert [d.field for d in diffs] == ["title", "body"]
    assert diffs[0] == FieldDiff(field="title", from_="a", to="A")


def test_diff_skips_unchanged_absent_and_undeclared_fields() -> None:
    current = {"title": "a", "body": "b"}
    diffs = compute_diff(current, {"title": "a", "extra": 1}, SCHEMA)
    assert diffs == ()


def test_diff_from_is_none_for_previously_absent_field() -> None:
    diffs = compute_diff({"title": "a"}, {"tags": "x"}, SCHEMA)
    assert diffs == (FieldDiff(field="tags", from_=None, to="x"),)


def test_absent_field_set_to_none_is_recorded() -> None:
    """Absent and explicitly None are distinct; only a present None is unchanged."""
    assert compute_diff({"title": "a"}, {"tags": None}, SCHEMA) == (
        FieldDiff(field="tags", from_=None, to=None),
    )
    assert compute_diff({"title": "a", "tags": None}, {"tags": None}, SCHEMA) == ()


def test_diff_compares_by_value() -> None:
    """A new but equal nested value is not a change."""
    schema = DocumentSchema.coerce({"fields": {"meta": {"type": "string"}}})
    assert compute_diff({"meta": ["a", {"b": 1}]}, {"meta": ["a", {"b": 1}]}, schema) == ()


def test_diff_serializes_with_wire_keys() -> None:
    entry = _entry(1, title=("Start", "Next"))
    assert entry.to_wire() == {
        "_v": 1,
        "_at": "2025-01-01T00:00:00.000Z",
        "_diff": [{"field": "title", "from": "Start", "to": "Next"}],
    }
    assert ArchiveEntry.model_validate(entry.to_wire()) == entry


def test_append_entry_evicts_oldest() -> None:
    archive: tuple[ArchiveEntry, ...] = ()
    for v in range(1, 6):
        archive = append_entry(archive, _entry(v, title=(str(v), str(v + 1))), max_history=3)
    assert [e.from_version for e in archive] == [3, 4, 5]


def test_reconstruct_current_version_strips_metadata() -> None:
    current = {"title": "x", "_hidden": 1}
    assert reconstruct(current, 4, (), 4) == {"title": "x"}


def test_reconstruct_walks_back_through_each_entry() -> None:
    # v1: title=A body=a  ->  v2: title=B  ->  v3: body=b2  ->  v4: title=C
    archive = (
        _entry(1, title=("A", "B")),
        _entry(2, body=("a", "b2")),
        _entry(3, title=("B", "C")),
    )
    current = {"title": "C", "body": "b2"}

    assert reconstruct(current, 4, archive, 3) == {"title": "B", "body": "b2"}
    assert reconstruct(current, 4, archive, 2) == {"title": "B", "body": "a"}
    assert reconstruct(current, 4, archive, 1) == {"title": "A", "body": "a"}
    # the input is never mutated
    assert current == {"title": "C", "body": "b2"}


def test_reconstruct_ignores_archive_order() -> None:
    archive = (_entry(2, title=("B", "C")), _entry(1, title=("A", "B")))
    assert reconstruct({"title": "C"}, 3, archive, 1) == {"title": "A"}


@pytest.mark.parametrize("target", [0, -1, 1, 9])
def test_reconstruct_unknown_versions(target: int) -> None:
    """Evicted, negative and future versions are all not found."""
    archive = (_entry(2, title=("B", "C")), _entry(3, title=("C", "D")))
    with pytest.raises(VersionNotFoundError) as info:
        reconstruct({"title": "D"}, 4, archive, target)
    assert info.value.target_version == target


def test_retained_versions() -> None:
    archive = (_entry(2, title=("B", "C")), _entry(3, title=("C", "D")))
    assert retained_versions(4, archive) == (2, 3, 4)
    assert retained_versions(1, ()) == (1,)


def test_strip_metadata() -> None:
    assert strip_metadata({"a": 1, "_version": 2, "_x": 3}) == {"a": 1}
