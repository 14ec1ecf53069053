"""Root Typer app for the atomflow CLI."""

from __future__ import annotations

import typer

app = typer.Typer(
    name="atomflow",
    help="atomflow: DNA fingerprints and cross-file data flow for extracted atoms.",
    no_args_is_help=True,
)


def _register_commands() -> None:
    """Register all CLI commands."""
    from atomflow.cli.dna_cmd import dna_cmd
    from atomflow.cli.duplicates_cmd import duplicates_cmd
    from atomflow.cli.edges_cmd import edges_cmd
    from atomflow.cli.trace_cmd import trace_cmd

    app.command(name="dna")(dna_cmd)
    app.command(name="edges")(edges_cmd)
    app.command(name="trace")(trace_cmd)
    app.command(name="duplicates")(duplicates_cmd)


_register_commands()
