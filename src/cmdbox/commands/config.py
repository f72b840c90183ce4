# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Config command for cmdbox.

Provides basic configuration validation.
"""

import typer

from cmdbox.config import ConfigError, load_config, resolve_settings

app = typer.Typer(help="Manage and validate configuration")


@app.command()
def validate(
    config_path: str = typer.Option(None, "--config", "-c", help="Path to config file"),
):
    """
    Validate configuration file.

    Checks that the config file is valid YAML with usable settings.
    """
    typer.echo("Validating configuration...")
    typer.echo()

    try:
        settings = resolve_settings(load_config(config_path))
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except ConfigError as e:
        typer.echo(f"Validation failed: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("Configuration structure is valid")
    typer.echo()
    typer.echo(f"Commands directory: {settings.commands_dir}")
    typer.echo()
    typer.echo("Configuration validation complete!")


@app.command()
def show(
    config_path: str = typer.Option(None, "--config", "-c", help="Path to config file"),
):
    """Show resolved settings."""
    try:
        settings = resolve_settings(load_config(config_path))
    except (FileNotFoundError, ConfigError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"commands_dir: {settings.commands_dir}")
    typer.echo(f"event_log: {settings.event_log}")
    typer.echo(f"timeout_s: {settings.timeout_s if settings.timeout_s else 'none'}")
    typer.echo("interpreters:")
    for language, binary in sorted(settings.interpreters.items()):
        typer.echo(f"  {language}: {binary}")
