"""CLI edges command: resolve cross-file call edges."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from atomflow.chains import CrossFileResolver
from atomflow.cli.common import console, load_atoms_or_exit


def edges_cmd(
    atoms_file: Annotated[str, typer.Argument(help="JSON file with extracted atoms.")],
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
) -> None:
    """List resolved cross-file call edges with their confidence."""
    from atomflow.config import Config
    from atomflow.logging.logger import EventLogger

    config = Config()
    event_logger = EventLogger(config.log_dir)

    atoms = load_atoms_or_exit(atoms_file)
    with event_logger.timed("edges.resolve", atoms_file=atoms_file) as ctx:
        edges = CrossFileResolver(atoms).resolve_all()
        ctx["atoms"] = len(atoms)
        ctx["edges"] = len(edges)
        ctx["mapping_errors"] = sum(1 for e in edges if e.mapping.error)

    if output_json:
        typer.echo(json.dumps([e.to_dict() for e in edges], indent=2))
        return

    if not edges:
        console.print("[dim]No cross-file edges found.[/dim]")
        return

    table = Table(title=f"Cross-file edges ({len(edges)})")
    table.add_column("Caller")
    table.add_column("Callee")
    table.add_column("Line", justify="right")
    table.add_column("Args", justify="right")
    table.add_column("Confidence", justify="right")
    for edge in edges:
        args = "error" if edge.mapping.error else str(len(edge.mapping.mappings))
        table.add_row(
            escape(edge.caller_id),
            escape(f"{edge.callee_name} ({edge.callee_file})"),
            str(edge.call_site),
            args,
            f"{edge.confidence:.2f}",
        )
    console.print(table)
