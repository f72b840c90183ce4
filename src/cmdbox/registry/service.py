"""Command service: import, run, export and list registered commands.

Ties a logical command name to an on-disk artifact and an interpreter.
Each request is independent and moves through

    Validating -> Storing -> SmokeTesting -> Committed | RolledBack

Every failure becomes exactly one reply; nothing propagates to the caller.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import logging
import threading
import uuid
from typing import Any, Dict, Optional, Union

from cmdbox.event_client import EventClient
from cmdbox.registry import naming
from cmdbox.registry.errors import (
    CommandExistsError,
    CommandNotFoundError,
    CommandValidationError,
)
from cmdbox.registry.executor import Executor
from cmdbox.registry.store import ArtifactStore
from cmdbox.replies import ReplySink
from cmdbox.schemas import (
    CommandArtifact,
    ExportRequest,
    ImportRequest,
    ListRequest,
    Outcome,
    OutcomeStatus,
    RunRequest,
)


logger = logging.getLogger(__name__)

Request = Union[ImportRequest, RunRequest, ExportRequest, ListRequest]


class CommandService:
    """Orchestrates name validation, storage and execution for each request."""

    def __init__(
        self,
        store: ArtifactStore,
        executor: Executor,
        event_client: Optional[EventClient] = None,
    ):
        self.store = store
        self.executor = executor
        self.event_client = event_client

    def _emit(
        self,
        event_type: str,
        correlation_id: str,
        status: str,
        payload: Optional[Dict[str, Any]] = None,
        error_message: Optional[str] = None,
    ) -> None:
        if self.event_client is None:
            return
        try:
            self.event_client.log_event(
                event_type=event_type,
                correlation_id=correlation_id,
                status=status,
                payload=payload,
                error_message=error_message,
            )
        except OSError as e:
            # Events are best-effort; a broken log never changes the outcome
            logger.warning(f"Failed to log event {event_type}: {e}")

    def _finish(self, sink: ReplySink, outcome: Outcome) -> Outcome:
        sink.reply(outcome.message)
        return outcome

    # =========================================================================
    # Import
    # =========================================================================

    def import_command(self, request: ImportRequest, sink: ReplySink) -> Outcome:
        """Validate, store and smoke-test a new command.

        A script that fails to run once is deleted again, so a failed
        import leaves the store unchanged. Existing names are never
        overwritten.
        """
        correlation_id = str(uuid.uuid4())
        raw_name = request.declared_name
        if not raw_name and request.filename:
            raw_name = naming.default_name(request.filename)

        self._emit(
            "command.import.started",
            correlation_id,
            "running",
            payload={"name": raw_name, "filename": request.filename},
        )

        try:
            name, language = naming.validate(raw_name or "", request.language_hint)
        except CommandValidationError as e:
            self._emit("command.import.rejected", correlation_id, "rejected", error_message=str(e))
            return self._finish(sink, Outcome(OutcomeStatus.REJECTED, str(e)))

        stem, _ = naming.split_name(name)
        artifact: Optional[CommandArtifact] = None
        try:
            with self.store.lock(stem):
                if self.store.exists(name):
                    raise CommandExistsError(name)
                artifact = self.store.create(name, request.source)

                result = self.executor.execute(artifact)
                if not result.exit_succeeded:
                    self.store.delete(name)
                    self._emit(
                        "command.import.rolled_back",
                        correlation_id,
                        "failed",
                        payload={
                            "name": name,
                            "exit_code": result.returncode,
                            "launch_error": result.launch_error,
                        },
                        error_message=result.error_text(),
                    )
                    return self._finish(
                        sink,
                        Outcome(
                            OutcomeStatus.ROLLED_BACK,
                            f"Error running the file: {result.error_text()}",
                            result=result,
                        ),
                    )
        except CommandExistsError as e:
            self._emit("command.import.rejected", correlation_id, "rejected", error_message=str(e))
            return self._finish(sink, Outcome(OutcomeStatus.ALREADY_EXISTS, str(e)))
        except OSError as e:
            logger.error(f"Import of {name} failed: {e}")
            self._emit("command.import.failed", correlation_id, "failed", error_message=str(e))
            if artifact is not None:
                self._rollback_quietly(name)
            return self._finish(sink, Outcome(OutcomeStatus.IO_ERROR, f"Error: {e}"))

        self._emit(
            "command.imported",
            correlation_id,
            "succeeded",
            payload={
                "name": name,
                "language": language.value,
                "bytes": len(request.source),
                "duration_ms": result.duration_ms,
            },
        )

        if request.filename:
            message = (
                f"Imported file {request.filename} as command: `{name}`\n"
                f"Output: {result.stdout}"
            )
        else:
            message = f"Imported text as command: `{name}`\nOutput: {result.stdout}"
        return self._finish(
            sink, Outcome(OutcomeStatus.COMMITTED, message, artifact=artifact, result=result)
        )

    def _rollback_quietly(self, name: str) -> None:
        try:
            self.store.delete(name)
        except OSError as e:
            logger.error(f"Rollback of {name} failed: {e}")

    # =========================================================================
    # Run / Export / List
    # =========================================================================

    def _resolve(self, name: str, sink: ReplySink) -> Union[CommandArtifact, Outcome]:
        try:
            return self.store.resolve_existing_path(name)
        except (CommandNotFoundError, CommandValidationError):
            return self._finish(
                sink, Outcome(OutcomeStatus.NOT_FOUND, f"Command {name} does not exist")
            )

    def run_command(self, request: RunRequest, sink: ReplySink) -> Outcome:
        """Run a stored command and reply with its stdout.

        The progress acknowledgment is retracted only on success; on
        failure it stays next to the error reply.
        """
        resolved = self._resolve(request.name, sink)
        if isinstance(resolved, Outcome):
            return resolved
        artifact = resolved

        correlation_id = str(uuid.uuid4())
        self._emit(
            "command.run.started",
            correlation_id,
            "running",
            payload={"name": artifact.name, "language": artifact.language.value},
        )
        ack = sink.acknowledge(f"Running command: {request.name}")

        result = self.executor.execute(artifact)
        if not result.exit_succeeded:
            self._emit(
                "command.run.failed",
                correlation_id,
                "failed",
                payload={"name": artifact.name, "exit_code": result.returncode},
                error_message=result.error_text(),
            )
            return self._finish(
                sink,
                Outcome(
                    OutcomeStatus.FAILED,
                    f"Error running the file: {result.error_text()}",
                    artifact=artifact,
                    result=result,
                ),
            )

        self._emit(
            "command.run.completed",
            correlation_id,
            "succeeded",
            payload={"name": artifact.name, "duration_ms": result.duration_ms, "exit_code": 0},
        )
        sink.retract(ack)
        return self._finish(
            sink,
            Outcome(
                OutcomeStatus.SUCCEEDED,
                f"```\n{result.stdout}\n```",
                artifact=artifact,
                result=result,
            ),
        )

    def export_command(self, request: ExportRequest, sink: ReplySink) -> Outcome:
        """Send the stored artifact file as an attachment."""
        resolved = self._resolve(request.name, sink)
        if isinstance(resolved, Outcome):
            return resolved
        artifact = resolved

        message = f"Exporting command: {request.name}"
        try:
            sink.reply_with_attachment(message, artifact.path)
        except OSError as e:
            logger.error(f"Export of {artifact.name} failed: {e}")
            return self._finish(sink, Outcome(OutcomeStatus.IO_ERROR, f"Error: {e}"))

        self._emit(
            "command.exported",
            str(uuid.uuid4()),
            "succeeded",
            payload={"name": artifact.name},
        )
        return Outcome(OutcomeStatus.EXPORTED, message, artifact=artifact)

    def list_commands(self, sink: ReplySink) -> Outcome:
        """Reply with one line per registered command."""
        try:
            artifacts = self.store.list_artifacts()
        except OSError as e:
            return self._finish(sink, Outcome(OutcomeStatus.IO_ERROR, f"Error: {e}"))

        if not artifacts:
            return self._finish(sink, Outcome(OutcomeStatus.LISTED, "No commands registered."))

        lines = [f"{a.name} ({a.language.name.lower()})" for a in artifacts]
        return self._finish(sink, Outcome(OutcomeStatus.LISTED, "\n".join(lines)))

    # =========================================================================
    # Dispatch
    # =========================================================================

    def dispatch(self, request: Request, sink: ReplySink) -> Outcome:
        """Route a request object to its handler."""
        if isinstance(request, ImportRequest):
            return self.import_command(request, sink)
        elif isinstance(request, RunRequest):
            return self.run_command(request, sink)
        elif isinstance(request, ExportRequest):
            return self.export_command(request, sink)
        elif isinstance(request, ListRequest):
            return self.list_commands(sink)
        raise TypeError(f"Unknown request type: {type(request).__name__}")

    def dispatch_in_thread(self, request: Request, sink: ReplySink) -> threading.Thread:
        """Handle a request on its own worker thread.

        A slow script blocks only its own thread. Returns the started thread.
        """

        def _target() -> None:
            try:
                self.dispatch(request, sink)
            except Exception:
                logger.exception(f"Unhandled error while handling {type(request).__name__}")

        thread = threading.Thread(
            target=_target,
            name=f"cmdbox-{type(request).__name__}",
            daemon=True,
        )
        thread.start()
        return thread
