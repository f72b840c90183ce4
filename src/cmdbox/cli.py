# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Main CLI entry point for cmdbox.

Terminal front end for the command registry: parses args, builds a
request, hands it to CommandService and prints the replies.
"""

import logging
from typing import Optional

import typer

from cmdbox import __version__


app = typer.Typer(
    name="cmdbox",
    help="Dynamic command registry for uploaded JS and Python scripts",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    config_path: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to config file"
    ),
):
    """Import, run and export script commands."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    ctx.obj = {"config_path": config_path}


@app.command()
def version():
    """Show version information."""
    typer.echo(f"cmdbox version {__version__}")


# Static commands (import, config) and registry operations
from cmdbox.commands import config, imports, registry

app.add_typer(imports.app, name="import")
app.add_typer(config.app, name="config")
app.command("run")(registry.run_command)
app.command("export")(registry.export_command)
app.command("list")(registry.list_command)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
