"""Dynamic command registry engine.

Uploaded scripts are validated, stored one file per name, smoke-tested
once and kept only if they run.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

from cmdbox.registry.errors import (
    CommandExistsError,
    CommandNotFoundError,
    CommandValidationError,
    RegistryError,
)
from cmdbox.registry.executor import Executor
from cmdbox.registry.naming import (
    normalize_lookup,
    parse_code_block,
    resolve_language,
    validate,
)
from cmdbox.registry.service import CommandService
from cmdbox.registry.store import ArtifactStore

__all__ = [
    "ArtifactStore",
    "CommandService",
    "Executor",
    "RegistryError",
    "CommandValidationError",
    "CommandExistsError",
    "CommandNotFoundError",
    "validate",
    "resolve_language",
    "normalize_lookup",
    "parse_code_block",
]
