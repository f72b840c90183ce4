# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Shared helpers for cmdbox CLI commands."""

from pathlib import Path
from typing import Optional

import typer

from cmdbox.config import ConfigError, load_config, resolve_settings
from cmdbox.event_client import EventClient
from cmdbox.registry import ArtifactStore, CommandService, Executor
from cmdbox.replies import ConsoleReplySink
from cmdbox.schemas import Outcome


def _config_path(ctx: typer.Context) -> Optional[str]:
    obj = ctx.find_root().obj or {}
    return obj.get("config_path")


def build_service(ctx: typer.Context) -> CommandService:
    """Build a CommandService from config, exiting with an error on bad config."""
    try:
        settings = resolve_settings(load_config(_config_path(ctx)))
    except (FileNotFoundError, ConfigError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    return CommandService(
        store=ArtifactStore(settings.commands_dir),
        executor=Executor(settings.interpreters, timeout_s=settings.timeout_s),
        event_client=EventClient(settings.event_log),
    )


def console_sink(export_dir: Optional[Path] = None) -> ConsoleReplySink:
    return ConsoleReplySink(export_dir=export_dir)


def exit_for(outcome: Outcome) -> None:
    """Exit non-zero for failure outcomes."""
    if not outcome.ok:
        raise typer.Exit(1)
