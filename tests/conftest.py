"""Shared fixtures for cmdbox tests."""

import sys

import pytest

from cmdbox.registry import ArtifactStore, CommandService, Executor
from cmdbox.replies import RecordingReplySink


@pytest.fixture
def commands_dir(tmp_path):
    """Empty commands directory."""
    return tmp_path / "commands"


@pytest.fixture
def store(commands_dir):
    return ArtifactStore(commands_dir)


@pytest.fixture
def executor():
    """Executor running Python artifacts with the current interpreter."""
    return Executor(interpreters={"py": sys.executable})


@pytest.fixture
def service(store, executor):
    return CommandService(store=store, executor=executor)


@pytest.fixture
def sink():
    return RecordingReplySink()
