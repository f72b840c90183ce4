# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Reply sinks for cmdbox.

The service never talks to a transport directly. It replies through a
ReplySink, which a chat bot, a terminal or a test can implement.
"""

import logging
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Tuple

import typer


logger = logging.getLogger(__name__)


class ReplySink(ABC):
    """Outbound channel for replies to one request."""

    @abstractmethod
    def reply(self, text: str) -> None:
        """Send a single text message."""

    @abstractmethod
    def reply_with_attachment(self, text: str, path: Path) -> None:
        """Send a text message with the file at path attached."""

    @abstractmethod
    def acknowledge(self, text: str) -> Any:
        """Show a progress message. Returns a handle for retract()."""

    @abstractmethod
    def retract(self, handle: Any) -> None:
        """Remove a progress message shown by acknowledge()."""


class ConsoleReplySink(ReplySink):
    """Writes replies to the terminal.

    Progress messages go to stderr. A printed line cannot be taken back,
    so retract() only logs.
    """

    def __init__(self, export_dir: Optional[Path] = None):
        self.export_dir = Path(export_dir) if export_dir else Path(".")

    def reply(self, text: str) -> None:
        typer.echo(text)

    def reply_with_attachment(self, text: str, path: Path) -> None:
        self.export_dir.mkdir(parents=True, exist_ok=True)
        destination = self.export_dir / path.name
        if destination.resolve() != path.resolve():
            shutil.copyfile(path, destination)
        typer.echo(text)
        typer.echo(f"Saved to {destination}")

    def acknowledge(self, text: str) -> str:
        typer.echo(text, err=True)
        return text

    def retract(self, handle: Any) -> None:
        logger.debug(f"Retracted progress message: {handle}")


@dataclass
class RecordingReplySink(ReplySink):
    """Keeps every reply in memory, in order."""

    replies: List[str] = field(default_factory=list)
    attachments: List[Tuple[str, bytes]] = field(default_factory=list)
    acks: List[str] = field(default_factory=list)
    retracted: List[str] = field(default_factory=list)

    def reply(self, text: str) -> None:
        self.replies.append(text)

    def reply_with_attachment(self, text: str, path: Path) -> None:
        # Read at send time, as a transport upload would
        self.replies.append(text)
        self.attachments.append((path.name, path.read_bytes()))

    def acknowledge(self, text: str) -> str:
        self.acks.append(text)
        return text

    def retract(self, handle: Any) -> None:
        self.retracted.append(handle)

    @property
    def pending_acks(self) -> List[str]:
        """Progress messages still showing."""
        return [a for a in self.acks if a not in self.retracted]
