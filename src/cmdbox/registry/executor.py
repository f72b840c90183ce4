"""
Script executor for cmdbox.

Runs a stored artifact under its language's interpreter and captures
stdout, stderr and exit status.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import logging
import subprocess
from datetime import datetime, timezone
from typing import Dict, Optional

from cmdbox.schemas import CommandArtifact, ExecutionResult, Language


DEFAULT_INTERPRETERS = {
    Language.JS.value: "node",
    Language.PY.value: "python3",
}


def _decode(data: Optional[bytes]) -> str:
    """Decode captured output, replacing invalid UTF-8."""
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


class Executor:
    """Invokes the interpreter for an artifact as a blocking child process."""

    def __init__(
        self,
        interpreters: Optional[Dict[str, str]] = None,
        timeout_s: Optional[float] = None,
    ):
        """
        Initialize executor.

        Args:
            interpreters: Mapping of language value ("js", "py") to binary
            timeout_s: Kill the child after this many seconds (None: no limit)
        """
        self.interpreters = dict(DEFAULT_INTERPRETERS)
        if interpreters:
            self.interpreters.update(interpreters)
        self.timeout_s = timeout_s
        self.logger = logging.getLogger(__name__)

    def interpreter_for(self, language: Language) -> str:
        return self.interpreters[language.value]

    def execute(self, artifact: CommandArtifact) -> ExecutionResult:
        """
        Run an artifact and capture its output.

        The artifact path is the only argument passed to the interpreter.
        A binary that cannot be started yields launch_error rather than a
        non-zero exit.

        Args:
            artifact: Stored command to execute

        Returns:
            ExecutionResult with captured streams
        """
        interpreter = self.interpreter_for(artifact.language)
        argv = [interpreter, str(artifact.path.resolve())]
        self.logger.info(f"Executing: {' '.join(argv)}")

        start_time = datetime.now(timezone.utc)
        try:
            proc = subprocess.run(
                argv,
                cwd=artifact.path.parent,
                capture_output=True,
                timeout=self.timeout_s,
            )
        except subprocess.TimeoutExpired as e:
            self.logger.warning(f"{artifact.name} timed out after {self.timeout_s}s")
            return ExecutionResult(
                exit_succeeded=False,
                stdout=_decode(e.stdout),
                stderr=_decode(e.stderr) + f"\nTimed out after {self.timeout_s} seconds",
                duration_ms=_elapsed_ms(start_time),
                timed_out=True,
            )
        except OSError as e:
            self.logger.error(f"Failed to launch {interpreter}: {e}")
            return ExecutionResult(
                exit_succeeded=False,
                launch_error=str(e),
                duration_ms=_elapsed_ms(start_time),
            )

        result = ExecutionResult(
            exit_succeeded=proc.returncode == 0,
            stdout=_decode(proc.stdout),
            stderr=_decode(proc.stderr),
            returncode=proc.returncode,
            duration_ms=_elapsed_ms(start_time),
        )

        if result.stdout:
            self.logger.debug(f"STDOUT:\n{result.stdout}")
        if result.stderr:
            self.logger.warning(f"STDERR:\n{result.stderr}")
        if not result.exit_succeeded:
            self.logger.error(f"{artifact.name} failed with exit code {proc.returncode}")

        return result


def _elapsed_ms(start_time: datetime) -> int:
    return int((datetime.now(timezone.utc) - start_time).total_seconds() * 1000)
