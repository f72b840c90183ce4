"""Flat-file artifact store.

One file per command in a single directory, named <stem>.<ext>. The
existence of the file is the registry entry; there is no index.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from cmdbox.registry.errors import (
    CommandExistsError,
    CommandNotFoundError,
    CommandValidationError,
)
from cmdbox.registry.naming import normalize_lookup, split_name, validate_stem
from cmdbox.schemas import CommandArtifact, Language


logger = logging.getLogger(__name__)

# Probe order for unqualified names
PROBE_ORDER = (Language.JS, Language.PY)


class ArtifactStore:
    """Maps normalized command names to files under a commands directory."""

    def __init__(self, root: Path):
        self.root = Path(root).expanduser()
        self._locks = {}  # stem -> [RLock, holders]
        self._locks_guard = threading.Lock()

    def path_for(self, name: str) -> Path:
        """Path of the artifact for a normalized name ("hello.js")."""
        stem, language = split_name(name)
        if language is None:
            raise CommandValidationError(f"name must carry a supported extension: {name}")
        validate_stem(stem)
        return self.root / name

    def _artifact(self, stem: str, language: Language) -> CommandArtifact:
        name = f"{stem}{language.extension}"
        return CommandArtifact(name=name, language=language, path=self.root / name)

    def _find(self, stem: str) -> Optional[CommandArtifact]:
        for language in PROBE_ORDER:
            artifact = self._artifact(stem, language)
            if artifact.path.is_file():
                return artifact
        return None

    @contextmanager
    def lock(self, stem: str) -> Iterator[None]:
        """Hold the per-stem lock for the duration of a multi-step mutation.

        Entries are dropped once no thread holds or waits on them.
        """
        with self._locks_guard:
            entry = self._locks.setdefault(stem, [threading.RLock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[stem]

    def exists(self, name: str) -> bool:
        """Check whether a command with this stem exists under either extension."""
        stem, _ = split_name(name)
        return self._find(stem) is not None

    def create(self, name: str, content: bytes) -> CommandArtifact:
        """Atomically create a new artifact.

        Args:
            name: Normalized name including extension.
            content: Raw script bytes.

        Returns:
            The created CommandArtifact.

        Raises:
            CommandExistsError: If the name (or its stem under another
                language) is already taken.
        """
        path = self.path_for(name)
        stem, language = split_name(name)

        with self.lock(stem):
            if self._find(stem) is not None:
                raise CommandExistsError(name)

            self.root.mkdir(parents=True, exist_ok=True)
            try:
                # O_EXCL makes create-if-absent atomic across processes too
                fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o644)
            except FileExistsError:
                raise CommandExistsError(name)

            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(content)
            except OSError:
                path.unlink(missing_ok=True)
                raise

        logger.info(f"Created artifact {path} ({len(content)} bytes)")
        return CommandArtifact(name=name, language=language, path=path)

    def delete(self, name: str) -> None:
        """Remove an artifact. Used only to roll back a failed import."""
        path = self.path_for(name)
        path.unlink(missing_ok=True)
        logger.info(f"Deleted artifact {path}")

    def resolve_existing_path(self, name: str) -> CommandArtifact:
        """Locate an existing artifact by bare or qualified name.

        Bare names probe JS before PY.

        Raises:
            CommandNotFoundError: If no artifact exists.
            CommandValidationError: If the name is not a valid identifier.
        """
        stem, language = normalize_lookup(name)
        if language is not None:
            artifact = self._artifact(stem, language)
            if artifact.path.is_file():
                return artifact
            raise CommandNotFoundError(name)

        artifact = self._find(stem)
        if artifact is None:
            raise CommandNotFoundError(name)
        return artifact

    def read_bytes(self, artifact: CommandArtifact) -> bytes:
        return artifact.path.read_bytes()

    def list_artifacts(self) -> List[CommandArtifact]:
        """List all artifacts in the store, sorted by name."""
        if not self.root.exists():
            return []

        artifacts = []
        for path in sorted(self.root.iterdir()):
            if not path.is_file():
                continue
            stem, language = split_name(path.name)
            if language is None:
                continue
            try:
                validate_stem(stem)
            except CommandValidationError:
                continue
            artifacts.append(self._artifact(stem, language))
        return artifacts
