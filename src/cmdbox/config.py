# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Configuration loading for cmdbox.

Config is a YAML mapping, looked up in order:
1. Explicit --config path
2. $CMDBOX_CONFIG
3. ~/.cmdbox/config.yaml (optional)

Example:
    commands_dir: ~/bot/commands
    event_log: ~/bot/events.jsonl
    timeout_s: 30
    interpreters:
      js: /usr/local/bin/node
      py: python3.12
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from cmdbox.registry.executor import DEFAULT_INTERPRETERS
from cmdbox.schemas import Language


DEFAULT_CONFIG_PATH = Path("~/.cmdbox/config.yaml")
DEFAULT_COMMANDS_DIR = Path("~/.cmdbox/commands")
DEFAULT_EVENT_LOG = Path("~/.cmdbox/events.jsonl")


class ConfigError(Exception):
    """Raised when configuration is invalid."""

    pass


@dataclass
class Settings:
    """Resolved runtime settings."""
    commands_dir: Path
    event_log: Path
    interpreters: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_INTERPRETERS))
    timeout_s: Optional[float] = None


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load the YAML config file.

    Args:
        config_path: Explicit path. Must exist if given.

    Returns:
        Config mapping, or {} when no config file is present.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ConfigError: If the file is not a YAML mapping.
    """
    explicit = config_path or os.environ.get("CMDBOX_CONFIG")
    if explicit:
        path = Path(explicit).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
    else:
        path = DEFAULT_CONFIG_PATH.expanduser()
        if not path.exists():
            return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a YAML mapping")
    return data


def resolve_settings(config: Dict[str, Any]) -> Settings:
    """Build Settings from a config mapping and environment overrides.

    $CMDBOX_COMMANDS_DIR wins over the config's commands_dir.
    """
    commands_dir = os.environ.get("CMDBOX_COMMANDS_DIR") or config.get("commands_dir")
    event_log = config.get("event_log")

    interpreters = dict(DEFAULT_INTERPRETERS)
    configured = config.get("interpreters") or {}
    if not isinstance(configured, dict):
        raise ConfigError("interpreters must be a mapping of language to binary")
    supported = {language.value for language in Language}
    for key, binary in configured.items():
        if key not in supported:
            raise ConfigError(f"unsupported interpreter language: {key}")
        interpreters[key] = str(binary)

    timeout_s = config.get("timeout_s")
    if timeout_s is not None:
        try:
            timeout_s = float(timeout_s)
        except (TypeError, ValueError):
            raise ConfigError(f"timeout_s must be a number, got: {timeout_s}")
        if timeout_s <= 0:
            raise ConfigError(f"timeout_s must be positive, got: {timeout_s}")

    return Settings(
        commands_dir=Path(commands_dir or DEFAULT_COMMANDS_DIR).expanduser(),
        event_log=Path(event_log or DEFAULT_EVENT_LOG).expanduser(),
        interpreters=interpreters,
        timeout_s=timeout_s,
    )
