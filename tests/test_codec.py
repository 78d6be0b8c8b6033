"""Unit tests for JSON normalization and size measurement."""

from __future__ import annotations

from revdoc.core.document.codec import dumps_compact, jsonify, serialized_size


def test_dump_is_compact_and_keeps_non_ascii() -> None:
    assert dumps_compact({"a": [1, 2], "b": "é"}) == '{"a":[1,2],"b":"é"}'


def test_size_counts_utf16_code_units() -> None:
    """A character outside the BMP takes two units; one inside takes one."""
    assert serialized_size({"t": "é"}) == len('{"t":"é"}')
    assert serialized_size({"t": "\U0001f600"}) == len('{"t":""}') + 2


def test_jsonify_falls_back_to_repr() -> None:
    """Keys become strings, tuples become lists, unknown objects use repr."""
    marker = object()
    assert jsonify({1: (True, None), "o": marker}) == {"1": [True, None], "o": repr(marker)}
