"""CLI duplicates command: DNA-based duplicate candidates."""

from __future__ import annotations

import dataclasses
import json
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from atomflow.cli.common import console, load_atoms_or_exit
from atomflow.dna import find_duplicate_candidates


def duplicates_cmd(
    atoms_file: Annotated[str, typer.Argument(help="JSON file with extracted atoms.")],
    threshold: Annotated[
        float | None, typer.Option(help="Minimum DNA similarity (0-1).")
    ] = None,
    min_score: Annotated[
        int | None, typer.Option("--min-score", help="Minimum duplicability score (0-100).")
    ] = None,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
) -> None:
    """List atom pairs whose DNA is similar enough to be duplicated logic."""
    from atomflow.config import Config
    from atomflow.logging.logger import EventLogger

    config = Config()
    event_logger = EventLogger(config.log_dir)

    atoms = load_atoms_or_exit(atoms_file)
    with event_logger.timed("dna.duplicates", atoms_file=atoms_file) as ctx:
        candidates = find_duplicate_candidates(
            atoms,
            threshold=threshold if threshold is not None else config.duplicate_threshold,
            min_duplicability=min_score if min_score is not None else config.min_duplicability,
        )
        ctx["candidates"] = len(candidates)

    if output_json:
        typer.echo(json.dumps([dataclasses.asdict(c) for c in candidates], indent=2))
        return

    if not candidates:
        console.print("[dim]No duplicate candidates found.[/dim]")
        return

    table = Table(title=f"Duplicate candidates ({len(candidates)})")
    table.add_column("First")
    table.add_column("Second")
    table.add_column("Similarity", justify="right")
    for c in candidates:
        table.add_row(escape(c.first_id), escape(c.second_id), f"{c.similarity:.2f}")
    console.print(table)
