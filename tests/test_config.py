"""Tests for configuration loading."""

from pathlib import Path

import pytest

from cmdbox.config import (
    DEFAULT_COMMANDS_DIR,
    ConfigError,
    load_config,
    resolve_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from the user's real config and environment."""
    monkeypatch.delenv("CMDBOX_CONFIG", raising=False)
    monkeypatch.delenv("CMDBOX_COMMANDS_DIR", raising=False)
    monkeypatch.setattr("cmdbox.config.DEFAULT_CONFIG_PATH", tmp_path / "absent.yaml")


class TestLoadConfig:
    """Tests for load_config function."""

    def test_no_config_file(self):
        assert load_config() == {}

    def test_explicit_path(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("commands_dir: /srv/commands\n")

        assert load_config(str(config_file)) == {"commands_dir": "/srv/commands"}

    def test_env_path(self, tmp_path, monkeypatch):
        config_file = tmp_path / "env.yaml"
        config_file.write_text("timeout_s: 5\n")
        monkeypatch.setenv("CMDBOX_CONFIG", str(config_file))

        assert load_config() == {"timeout_s": 5}

    def test_explicit_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        assert load_config(str(config_file)) == {}

    def test_not_a_mapping(self, tmp_path):
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="YAML mapping"):
            load_config(str(config_file))

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("key: [unclosed\n")

        with pytest.raises(ConfigError, match="invalid YAML"):
            load_config(str(config_file))


class TestResolveSettings:
    """Tests for resolve_settings function."""

    def test_defaults(self):
        settings = resolve_settings({})

        assert settings.commands_dir == DEFAULT_COMMANDS_DIR.expanduser()
        assert settings.interpreters == {"js": "node", "py": "python3"}
        assert settings.timeout_s is None

    def test_config_values(self, tmp_path):
        settings = resolve_settings({
            "commands_dir": str(tmp_path / "cmds"),
            "event_log": str(tmp_path / "events.jsonl"),
            "interpreters": {"py": "python3.12"},
            "timeout_s": 30,
        })

        assert settings.commands_dir == tmp_path / "cmds"
        assert settings.event_log == tmp_path / "events.jsonl"
        assert settings.interpreters == {"js": "node", "py": "python3.12"}
        assert settings.timeout_s == 30.0

    def test_env_overrides_commands_dir(self, monkeypatch):
        monkeypatch.setenv("CMDBOX_COMMANDS_DIR", "/env/commands")

        settings = resolve_settings({"commands_dir": "/config/commands"})

        assert settings.commands_dir == Path("/env/commands")

    def test_unknown_interpreter_language(self):
        with pytest.raises(ConfigError, match="unsupported interpreter"):
            resolve_settings({"interpreters": {"rb": "ruby"}})

    def test_interpreters_not_mapping(self):
        with pytest.raises(ConfigError):
            resolve_settings({"interpreters": ["node"]})

    @pytest.mark.parametrize("value", [0, -1, "soon"])
    def test_bad_timeout(self, value):
        with pytest.raises(ConfigError, match="timeout_s"):
            resolve_settings({"timeout_s": value})
