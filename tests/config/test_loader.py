"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence: kwargs > env > repo yaml > global yaml > defaults
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from covmcp.config.loader import GLOBAL_CONFIG_PATH, _deep_merge, _load_yaml, load_config
from covmcp.config.models import LoggingConfig
from covmcp.core.errors import ConfigError, ErrorCode


def _write_repo_config(root: Path, content: str) -> None:
    state_dir = root / ".covmcp"
    state_dir.mkdir(exist_ok=True)
    (state_dir / "config.yaml").write_text(content)


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        """Returns empty dict when file doesn't exist."""
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        """Loads valid YAML content."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("coverage:\n  default_report_path: build/lcov.info\n")

        assert _load_yaml(yaml_file) == {"coverage": {"default_report_path": "build/lcov.info"}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        """Returns empty dict for empty file."""
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        """Raises ConfigError for malformed YAML."""
        yaml_file = tmp_path / "bad.yaml"
        yaml_file.write_text("coverage: [unclosed\n")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        """A top-level list is not a config."""
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="mapping"):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins_for_scalars(self) -> None:
        assert _deep_merge({"a": 1}, {"a": 2}) == {"a": 2}

    def test_nested_dicts_merge(self) -> None:
        """Nested sections merge key by key."""
        base = {"server": {"host": "127.0.0.1", "port": 7655}}
        override = {"server": {"port": 9000}}

        assert _deep_merge(base, override) == {"server": {"host": "127.0.0.1", "port": 9000}}

    def test_does_not_mutate_inputs(self) -> None:
        base = {"a": {"b": 1}}
        _deep_merge(base, {"a": {"c": 2}})
        assert base == {"a": {"b": 1}}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_without_files(self, tmp_path: Path) -> None:
        """Built-in defaults apply when no config exists."""
        config = load_config(tmp_path)

        assert config.logging.level == "INFO"
        assert config.coverage.default_report_path == "coverage/lcov.info"
        assert config.coverage.format == "auto"
        assert config.recording.directory == ".covmcp/recording"
        assert config.server.transport == "stdio"

    def test_loads_repo_config(self, tmp_path: Path) -> None:
        """Loads config from repo .covmcp directory."""
        _write_repo_config(tmp_path, "coverage:\n  default_report_path: out/lcov.info\n")

        config = load_config(tmp_path)
        assert config.coverage.default_report_path == "out/lcov.info"

    def test_repo_config_overrides_global(self, tmp_path: Path) -> None:
        """Repo YAML wins over global YAML, section keys merge."""
        global_file = tmp_path / "global.yaml"
        global_file.write_text("server:\n  host: 0.0.0.0\n  port: 9000\n")
        _write_repo_config(tmp_path, "server:\n  port: 9100\n")

        with patch("covmcp.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config(tmp_path)

        assert config.server.host == "0.0.0.0"
        assert config.server.port == 9100

    def test_env_vars_override_yaml(self, tmp_path: Path) -> None:
        """Environment variables override YAML config."""
        _write_repo_config(tmp_path, "logging:\n  level: INFO\n")

        with patch.dict(os.environ, {"COVMCP__LOGGING__LEVEL": "WARNING"}):
            config = load_config(tmp_path)
        assert config.logging.level == "WARNING"

    def test_env_var_selects_format(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"COVMCP__COVERAGE__FORMAT": "cobertura"}):
            config = load_config(tmp_path)
        assert config.coverage.format == "cobertura"

    def test_kwargs_override_all(self, tmp_path: Path) -> None:
        """Keyword arguments override everything."""
        with patch.dict(os.environ, {"COVMCP__LOGGING__LEVEL": "WARNING"}):
            config = load_config(tmp_path, logging=LoggingConfig(level="ERROR"))
        assert config.logging.level == "ERROR"

    def test_raises_config_error_for_invalid_value(self, tmp_path: Path) -> None:
        """Raises ConfigError for invalid config values."""
        _write_repo_config(tmp_path, "server:\n  port: -1\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE

    def test_raises_config_error_for_unknown_format(self, tmp_path: Path) -> None:
        _write_repo_config(tmp_path, "coverage:\n  format: jacoco\n")

        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestGlobalConfigPath:
    """Tests for GLOBAL_CONFIG_PATH constant."""

    def test_is_in_user_config(self) -> None:
        """Path is in the user's config directory."""
        assert isinstance(GLOBAL_CONFIG_PATH, Path)
        assert "covmcp" in str(GLOBAL_CONFIG_PATH)
