# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Schemas for cmdbox."""

from cmdbox.schemas.commands import (
    CommandArtifact,
    ExecutionResult,
    ExportRequest,
    ImportRequest,
    Language,
    ListRequest,
    Outcome,
    OutcomeStatus,
    RunRequest,
)

__all__ = [
    "CommandArtifact",
    "ExecutionResult",
    "ExportRequest",
    "ImportRequest",
    "Language",
    "ListRequest",
    "Outcome",
    "OutcomeStatus",
    "RunRequest",
]
