"""CLI trace command: follow a variable across files."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from rich.markup import escape

from atomflow.chains import CrossFileResolver
from atomflow.cli.common import console, load_atoms_or_exit
from atomflow.journey import (
    find_source_atom,
    summarize_journey,
    trace_data_journey,
    variable_exists,
)


def trace_cmd(
    atoms_file: Annotated[str, typer.Argument(help="JSON file with extracted atoms.")],
    atom_id: Annotated[str, typer.Argument(help="Id of the atom to start from.")],
    variable: Annotated[str, typer.Argument(help="Variable or parameter to follow.")],
    max_depth: Annotated[
        int | None, typer.Option("--max-depth", help="Maximum number of hops.")
    ] = None,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
) -> None:
    """Trace how a variable travels through cross-file calls."""
    from atomflow.config import Config
    from atomflow.logging.logger import EventLogger

    config = Config()
    event_logger = EventLogger(config.log_dir)
    depth_limit = max_depth if max_depth is not None else config.journey_max_depth

    atoms = load_atoms_or_exit(atoms_file)
    resolver = CrossFileResolver(atoms)
    source = resolver.by_id.get(atom_id)
    if source is None and "::" in atom_id:
        # Absolute or differently rooted paths: match by file name and atom name.
        file_path, _, name = atom_id.rpartition("::")
        source = find_source_atom(resolver.atoms, file_path, name)
    if source is None:
        console.print(f"[red]Atom not found:[/red] {escape(atom_id)}")
        raise typer.Exit(code=1)

    with event_logger.timed("journey.trace", atom_id=source.id, variable=variable) as ctx:
        steps = trace_data_journey(
            source.id, variable, resolver.build_edge_map(), resolver.by_id, depth_limit
        )
        ctx["steps"] = len(steps)
    summary = summarize_journey(steps)

    if output_json:
        payload = {
            "source": {"id": source.id, "name": source.name, "variable": variable},
            "summary": {
                "totalSteps": summary.total_steps,
                "maxDepthReached": summary.max_depth_reached,
                "uniqueFiles": summary.unique_files,
                "uniqueFunctions": summary.unique_functions,
                "avgConfidence": summary.avg_confidence,
            },
            "journey": {str(depth): hops for depth, hops in summary.by_depth.items()},
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    shown_variable, shown_source = escape(variable), escape(source.name)
    if not steps:
        if variable_exists(source, variable):
            console.print(
                f"'{shown_variable}' is used in {shown_source} but never passed across files."
            )
        else:
            console.print(
                f"'{shown_variable}' is not a parameter or call argument of {shown_source}."
            )
        return

    console.print(
        f"[bold]{shown_variable}[/bold] from {shown_source}: {summary.total_steps} hop(s), "
        f"{summary.unique_files} file(s), avg confidence {summary.avg_confidence:.2f}"
    )
    for depth, hops in summary.by_depth.items():
        for hop in hops:
            console.print(f"{'  ' * depth}{escape(hop)}")
