#!/usr/bin/env python3
"""macutils CLI - disk, installer and compatibility inventory for Macs."""
from typing import Optional

import typer
from rich.console import Console

from macutils.cli_inventory_commands import register_inventory_commands
from macutils.cli_support import setup_file_logging

app = typer.Typer(
    name="mu",
    help="""macutils - find macOS installers and check what this Mac can run

Quick start:
  mu scan                 # Disks, volumes and installers
  mu installers           # Installer volumes and eligibility
  mu compat iMac18,3      # Installable versions for a model
""",
    add_completion=False,
)

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug-level logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write logs to this file"),
):
    """Global options."""
    if verbose or log_file:
        setup_file_logging(log_file=log_file, verbose=verbose)


register_inventory_commands(app, console)

if __name__ == "__main__":
    app()
