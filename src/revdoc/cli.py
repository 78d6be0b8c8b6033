# src/revdoc/cli.py
"""
revdoc Command Line Interface (CLI).

This module implements a small terminal front end using `typer` and `rich`.
It plays the part of an *external collaborator*: it reads schemas and stored
representations from JSON files, drives a :class:`VersionedDocument`, and
prints what happened. The engine itself never touches the filesystem.

Commands
--------
- **replay**: run a scripted sequence of updates against a fresh document
  on a manual clock and show each step's outcome.
- **inspect**: show metadata and the archive of a stored representation.
- **snapshot**: rebuild a past version of a stored representation.

Usage
-----
    $ revdoc replay schema.json script.json --output doc.json
    $ revdoc inspect schema.json doc.json
    $ revdoc snapshot schema.json doc.json 3

Script format
-------------
    {
      "initial": {"title": "Start"},
      "steps": [
        {"data": {"title": "Next"}, "expected_version": 1, "at": 1700000005000},
        {"data": {"title": "Again"}}
      ]
    }

``expected_version`` defaults to the document's current version. ``at`` moves
the clock to an absolute epoch-millisecond reading; without it the clock
advances by the schema's ``minTimeGap``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from revdoc.core.contracts.schema import DocumentSchema
from revdoc.core.document.clock import ManualClock, iso_timestamp
from revdoc.core.document.codec import dumps_compact
from revdoc.core.document.engine import VersionedDocument
from revdoc.core.errors import DocumentError

app = typer.Typer(
    help="revdoc: versioned documents with bounded, replayable history.",
    rich_markup_mode="markdown",
)
console = Console()


def _existing_file(help_text: str) -> Any:
    """Typer argument for a JSON file that must already exist."""
    return typer.Argument(
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help=help_text,
    )


# --------------------------------------------------------------------------- #
# Helpers: I/O
# --------------------------------------------------------------------------- #


def _load_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _fail(title: str, error: Exception) -> typer.Exit:
    """Print ``error`` in red and return an Exit(1) for the caller to raise."""
    console.print(f"\n[bold red]❌ {title}:[/bold red] {error}")
    return typer.Exit(code=1)


def _expect_object(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be a JSON object, got {type(value).__name__}")
    return value


def _read_script(path: Path) -> tuple[dict[str, Any], list[dict[str, Any]]]:
    """Load a replay script and check its shape before anything runs.

    Returns the initial fields and the steps, each step with ``data`` as an
    object and ``at`` (when given) as an int.
    """
    script = _expect_object(_load_json(path), "script")
    initial = _expect_object(script.get("initial") or {}, "'initial'")
    raw_steps = script.get("steps", [])
    if not isinstance(raw_steps, list):
        raise ValueError(f"'steps' must be a JSON array, got {type(raw_steps).__name__}")

    steps: list[dict[str, Any]] = []
    for i, raw in enumerate(raw_steps, start=1):
        step = dict(_expect_object(raw, f"step {i}"))
        step["data"] = _expect_object(step.get("data", {}), f"step {i} 'data'")
        if "at" in step:
            at = step["at"]
            if isinstance(at, bool) or not isinstance(at, int):
                raise ValueError(f"step {i} 'at' must be an integer, got {at!r}")
        steps.append(step)
    return initial, steps


def _load_document(schema_file: Path, document_file: Path) -> VersionedDocument:
    try:
        schema = DocumentSchema.coerce(_load_json(schema_file))
        representation = _expect_object(_load_json(document_file), "document")
        return VersionedDocument.from_representation(representation, schema)
    except (OSError, ValueError, DocumentError) as e:
        raise _fail("Load Error", e) from e


def _print_snapshot(doc: VersionedDocument, version: int) -> None:
    try:
        snapshot = doc.get_snapshot(version)
    except DocumentError as e:
        raise _fail("Snapshot Error", e) from e
    console.rule(f"[bold]Snapshot v{version}[/bold]")
    console.print_json(dumps_compact(snapshot))


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def replay(
    schema_file: Annotated[Path, _existing_file("Schema JSON file.")],
    script_file: Annotated[Path, _existing_file("Update script JSON file.")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the final representation to this path."),
    ] = None,
    snapshot: Annotated[
        int | None,
        typer.Option("--snapshot", "-s", help="Also print the snapshot of this version."),
    ] = None,
) -> None:
    """
    Replay a scripted sequence of updates against a fresh document.

    Rejected steps are reported and skipped; the replay always runs to the end.
    """
    try:
        schema = DocumentSchema.coerce(_load_json(schema_file))
        initial, steps = _read_script(script_file)
        clock = ManualClock()
        doc = VersionedDocument(initial, schema, clock=clock)
    except (OSError, ValueError, DocumentError) as e:
        raise _fail("Replay Error", e) from e

    console.print(
        Panel.fit(
            f"[bold magenta]revdoc replay[/bold magenta]\nScript: [u]{script_file.name}[/u]",
            border_style="magenta",
        )
    )

    table = Table(title="Steps")
    table.add_column("#", justify="right")
    table.add_column("Expected", justify="right")
    table.add_column("Outcome")
    table.add_column("Version", justify="right")
    table.add_column("Remaining", justify="right")

    for i, step in enumerate(steps, start=1):
        if "at" in step:
            clock.set(step["at"])
        else:
            clock.advance(schema.min_time_gap)

        expected = step.get("expected_version", doc.version)
        before = doc.version
        try:
            doc.update(step["data"], expected)
            outcome = "[green]committed[/green]" if doc.version > before else "[dim]no-op[/dim]"
        except DocumentError as e:
            outcome = f"[red]{type(e).__name__}[/red]: {e}"

        table.add_row(
            str(i),
            str(expected),
            outcome,
            str(doc.version),
            str(doc.get_remaining_capacity()),
        )

    console.print(table)
    console.rule("[bold]Final document[/bold]")
    console.print_json(dumps_compact(doc.to_representation()))

    if output is not None:
        with output.open("w", encoding="utf-8") as f:
            json.dump(doc.to_representation(), f, ensure_ascii=False, indent=2)
            f.write("\n")
        console.print(f"[dim]Saved representation to: {output}[/dim]")

    if snapshot is not None:
        _print_snapshot(doc, snapshot)


@app.command()  # type: ignore[misc]
def inspect(
    schema_file: Annotated[Path, _existing_file("Schema JSON file.")],
    document_file: Annotated[Path, _existing_file("Stored document representation.")],
) -> None:
    """Show the metadata and retained archive of a stored document."""
    doc = _load_document(schema_file, document_file)
    limits = doc.schema

    updated = iso_timestamp(int(doc.last_updated_at)) if doc.last_updated_at else "never"
    console.print(
        Panel(
            f"Version: [cyan]{doc.version}[/cyan]\n"
            f"Last updated: {updated}\n"
            f"Size: {doc.size}/{limits.max_char_limit} chars "
            f"([green]{doc.get_remaining_capacity()}[/green] remaining)\n"
            f"Retained versions: {', '.join(str(v) for v in doc.retained_versions())}",
            title=document_file.name,
            border_style="cyan",
        )
    )

    table = Table(title=f"Archive ({len(doc.archive)}/{limits.max_history})")
    table.add_column("From", justify="right")
    table.add_column("At")
    table.add_column("Changes")
    for entry in doc.archive:
        changes = ", ".join(
            f"{d.field}: {d.from_!r} -> {d.to!r}" for d in entry.diffs
        )
        table.add_row(f"v{entry.from_version}", entry.timestamp, changes)
    console.print(table)


@app.command()  # type: ignore[misc]
def snapshot(
    schema_file: Annotated[Path, _existing_file("Schema JSON file.")],
    document_file: Annotated[Path, _existing_file("Stored document representation.")],
    version: Annotated[int, typer.Argument(help="Version to rebuild.")],
) -> None:
    """Rebuild and print the fields of a stored document at ``version``."""
    doc = _load_document(schema_file, document_file)
    _print_snapshot(doc, version)


if __name__ == "__main__":
    app()
