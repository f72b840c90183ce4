"""
Import commands for cmdbox.

Adds a JS or PY script to the registry from a file or inline text.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

from pathlib import Path
from typing import Optional

import typer

from cmdbox.commands.common import build_service, console_sink, exit_for
from cmdbox.registry import parse_code_block
from cmdbox.schemas import ImportRequest

app = typer.Typer(help="Import a JS/PY script and register it as a command", no_args_is_help=True)


@app.command("file")
def file_command(
    ctx: typer.Context,
    path: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Script file to import"
    ),
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Name of the command (defaults to the file name)"
    ),
):
    """Import a script file.

    The language comes from the file extension (.js or .py). The script
    is run once; if it fails it is not kept.

    Examples:
        cmdbox import file ./greet.py
        cmdbox import file ./Tool.js --name tool
    """
    service = build_service(ctx)
    request = ImportRequest(
        source=path.read_bytes(),
        language_hint=path.suffix,
        declared_name=name,
        filename=path.name,
    )
    exit_for(service.import_command(request, console_sink()))


@app.command("text")
def text_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the command"),
    code: Optional[str] = typer.Argument(
        None, help="Script source or a ```lang fenced block (default: stdin)"
    ),
    language: Optional[str] = typer.Option(
        None, "--language", "-l", help="js, javascript, py or python (overrides the fence)"
    ),
):
    """Import inline script text.

    Examples:
        cmdbox import text greet $'```python\\nprint("hi")\\n```'
        echo 'console.log(1)' | cmdbox import text one --language js
    """
    if code is None:
        code = typer.get_text_stream("stdin").read()

    fence_language, body = parse_code_block(code)
    service = build_service(ctx)
    request = ImportRequest(
        source=body.encode("utf-8"),
        language_hint=language or fence_language,
        declared_name=name,
    )
    exit_for(service.import_command(request, console_sink()))
