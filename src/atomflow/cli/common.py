"""Helpers shared by CLI commands."""

from __future__ import annotations

import typer
from rich.markup import escape
from rich.console import Console

from atomflow.exceptions import AtomLoadError
from atomflow.models import Atom, load_atoms

console = Console()


def load_atoms_or_exit(path: str) -> list[Atom]:
    """Load atoms for a command, exiting with code 1 on a bad file."""
    try:
        return load_atoms(path)
    except AtomLoadError as exc:
        console.print(f"[red]Could not load atoms:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
