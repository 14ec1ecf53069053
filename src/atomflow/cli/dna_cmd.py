"""CLI dna command: fingerprint atoms."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from atomflow.cli.common import console, load_atoms_or_exit
from atomflow.dna import DNACache, validate_dna


def dna_cmd(
    atoms_file: Annotated[str, typer.Argument(help="JSON file with extracted atoms.")],
    atom: Annotated[str | None, typer.Option(help="Only show this atom id.")] = None,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
) -> None:
    """Compute DNA fingerprints for every atom in a file."""
    from atomflow.config import Config
    from atomflow.logging.logger import EventLogger

    config = Config()
    event_logger = EventLogger(config.log_dir)

    atoms = load_atoms_or_exit(atoms_file)
    if atom is not None:
        atoms = [a for a in atoms if a.id == atom]
        if not atoms:
            console.print(f"[red]Atom not found:[/red] {escape(atom)}")
            raise typer.Exit(code=1)

    cache = DNACache()
    with event_logger.timed("dna.extract", atoms_file=atoms_file) as ctx:
        dnas = cache.get_many(atoms)
        ctx["atoms"] = len(dnas)

    if output_json:
        payload = [
            {**dnas[a.id].to_dict(), "atomId": a.id, "valid": validate_dna(dnas[a.id]).valid}
            for a in atoms
        ]
        typer.echo(json.dumps(payload, indent=2))
        return

    table = Table(title=f"DNA ({len(atoms)} atoms)")
    table.add_column("Atom")
    table.add_column("Flow type")
    table.add_column("Fingerprint")
    table.add_column("Structural")
    table.add_column("Cx", justify="right")
    table.add_column("Dup", justify="right")
    for a in atoms:
        d = dnas[a.id]
        table.add_row(
            escape(a.id),
            str(d.flow_type),
            d.semantic_fingerprint,
            d.structural_hash,
            str(d.complexity_score),
            str(d.duplicability_score),
        )
    console.print(table)
