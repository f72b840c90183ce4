"""
Registry commands for cmdbox: run, export and list.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

from pathlib import Path

import typer

from cmdbox.commands.common import build_service, console_sink, exit_for
from cmdbox.schemas import ExportRequest, RunRequest


def run_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the command"),
):
    """Run a registered command and print its output.

    Examples:
        cmdbox run greet
    """
    service = build_service(ctx)
    exit_for(service.run_command(RunRequest(name=name), console_sink()))


def export_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the command"),
    out: Path = typer.Option(
        Path("."), "--out", "-o", file_okay=False, help="Directory to write the file to"
    ),
):
    """Export a registered command's source file.

    Examples:
        cmdbox export greet --out ./backup
    """
    service = build_service(ctx)
    exit_for(service.export_command(ExportRequest(name=name), console_sink(export_dir=out)))


def list_command(ctx: typer.Context):
    """List registered commands."""
    service = build_service(ctx)
    exit_for(service.list_commands(console_sink()))
