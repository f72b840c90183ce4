# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Command registry schemas for cmdbox.

Requests flow in from an event source, artifacts live on disk, and every
service call hands back an Outcome:
- ImportRequest → validate → store → smoke test → Outcome
- RunRequest / ExportRequest → resolve → execute or attach → Outcome
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class Language(Enum):
    """Supported script languages, valued by file extension."""

    JS = "js"
    PY = "py"

    @property
    def extension(self) -> str:
        return f".{self.value}"


@dataclass(frozen=True)
class CommandArtifact:
    """A persisted command: one file per name in the commands directory."""
    name: str  # normalized, e.g. "hello.js"
    language: Language
    path: Path

    @property
    def stem(self) -> str:
        return self.name[: -len(self.language.extension)]


@dataclass
class ExecutionResult:
    """Captured result of one interpreter invocation. Never persisted."""
    exit_succeeded: bool
    stdout: str = ""
    stderr: str = ""
    returncode: Optional[int] = None
    launch_error: Optional[str] = None
    duration_ms: int = 0
    timed_out: bool = False

    def error_text(self) -> str:
        """Human-readable failure detail for replies."""
        if self.launch_error:
            return self.launch_error
        if self.stderr:
            return self.stderr
        return f"exited with code {self.returncode}"


@dataclass
class ImportRequest:
    """Upload of a script, either a file attachment or inline text.

    language_hint is a file extension ("py", ".js") or a declared
    code block language ("python", "javascript").
    """
    source: bytes
    language_hint: Optional[str]
    declared_name: Optional[str] = None
    filename: Optional[str] = None  # set for file uploads


@dataclass
class RunRequest:
    name: str


@dataclass
class ExportRequest:
    name: str


@dataclass
class ListRequest:
    pass


class OutcomeStatus(Enum):
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    REJECTED = "rejected"
    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    EXPORTED = "exported"
    LISTED = "listed"
    IO_ERROR = "io_error"


# Statuses that count as success for exit codes
SUCCESS_STATUSES = frozenset(
    {OutcomeStatus.COMMITTED, OutcomeStatus.SUCCEEDED, OutcomeStatus.EXPORTED, OutcomeStatus.LISTED}
)


@dataclass
class Outcome:
    """What a service operation did, alongside the reply it sent."""
    status: OutcomeStatus
    message: str
    artifact: Optional[CommandArtifact] = None
    result: Optional[ExecutionResult] = None

    @property
    def ok(self) -> bool:
        return self.status in SUCCESS_STATUSES
