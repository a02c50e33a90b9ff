"""
Tests for bkmr/config.py configuration management.

Tests the hierarchical configuration: defaults, TOML files, environment
variables and command-line overrides.
"""
import os
from pathlib import Path

import pytest

from bkmr.config import BkmrConfig, init_config


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """No user config, and an empty working directory."""
    monkeypatch.setattr("bkmr.config.USER_CONFIG_PATH", str(tmp_path / "missing.toml"))
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestBkmrConfigDefaults:
    """Test default configuration values."""

    def test_default_database(self):
        config = BkmrConfig()
        assert config.database == "~/.config/bkmr/bkmr.db"
        assert config.database_url is None

    def test_default_shell_prefix(self):
        assert BkmrConfig().shell_prefix == "shell::"

    def test_default_timeout_is_10(self):
        assert BkmrConfig().timeout == 10

    def test_default_editor_unset(self):
        assert BkmrConfig().editor is None

    def test_default_log_level(self):
        assert BkmrConfig().log_level == "WARNING"


class TestBkmrConfigLoad:
    """Test BkmrConfig.load()."""

    def test_defaults_without_files(self, isolated):
        config = BkmrConfig.load()
        assert config.database == os.path.expanduser("~/.config/bkmr/bkmr.db")

    def test_user_config(self, isolated, monkeypatch):
        user = isolated / "config.toml"
        user.write_text('editor = "nano"\ntimeout = 3\n')
        monkeypatch.setattr("bkmr.config.USER_CONFIG_PATH", str(user))
        config = BkmrConfig.load()
        assert config.editor == "nano"
        assert config.timeout == 3

    def test_local_config_overrides_user(self, isolated, monkeypatch):
        user = isolated / "config.toml"
        user.write_text('editor = "nano"\n')
        monkeypatch.setattr("bkmr.config.USER_CONFIG_PATH", str(user))
        (isolated / "bkmr.toml").write_text('editor = "vim"\n')
        assert BkmrConfig.load().editor == "vim"

    def test_explicit_file_overrides_local(self, isolated):
        (isolated / ".bkmrrc").write_text('editor = "vim"\n')
        explicit = isolated / "other.toml"
        explicit.write_text('editor = "emacs"\ncolor_output = false\n')
        config = BkmrConfig.load(explicit)
        assert config.editor == "emacs"
        assert config.color_output is False

    def test_unknown_keys_ignored(self, isolated):
        explicit = isolated / "other.toml"
        explicit.write_text('no_such_setting = 1\n')
        config = BkmrConfig.load(explicit)
        assert not hasattr(config, "no_such_setting")

    def test_env_overrides_files(self, isolated, monkeypatch):
        explicit = isolated / "other.toml"
        explicit.write_text('timeout = 3\n')
        monkeypatch.setenv("BKMR_TIMEOUT", "7")
        monkeypatch.setenv("BKMR_VERIFY_SSL", "false")
        monkeypatch.setenv("BKMR_EDITOR", "code -w")
        config = BkmrConfig.load(explicit)
        assert config.timeout == 7
        assert config.verify_ssl is False
        assert config.editor == "code -w"

    def test_legacy_db_url_env(self, isolated, monkeypatch):
        monkeypatch.setenv("BKMR_DB_URL", "~/bm.db")
        config = BkmrConfig.load()
        assert config.database == os.path.expanduser("~/bm.db")
        assert config.database_url is None


class TestDatabaseUrl:
    """Test database path and URL resolution."""

    def test_relative_path_resolved_from_cwd(self, isolated):
        config = BkmrConfig(database="bm.db")
        assert config.get_database_path() == Path.cwd() / "bm.db"
        assert config.get_database_url() == f"sqlite:///{Path.cwd() / 'bm.db'}"
        assert config.is_sqlite()

    def test_database_url_wins(self):
        config = BkmrConfig(database_url="postgresql://localhost/bkmr")
        assert config.get_database_url() == "postgresql://localhost/bkmr"
        assert not config.is_sqlite()


class TestInitConfig:
    """Test init_config()."""

    def test_returns_fresh_instances(self, isolated):
        assert init_config() is not init_config()

    def test_database_override(self, isolated, monkeypatch):
        monkeypatch.setenv("BKMR_DB_URL", "/tmp/from-env.db")
        config = init_config(database="~/cli.db")
        assert config.database == os.path.expanduser("~/cli.db")

    def test_kwargs_override(self, isolated):
        config = init_config(editor="nano", timeout=None)
        assert config.editor == "nano"
        assert config.timeout == 10
