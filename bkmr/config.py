"""
Configuration management for bkmr.

Provides a hierarchical configuration with sensible defaults. Supports a
user config (~/.config/bkmr/config.toml), a local config (./bkmr.toml or
./.bkmrrc) and BKMR_* environment variables.

The configuration is built once by the command line entry point and handed
explicitly to the database, the dispatcher and the output layer.
"""
import os
import tomli
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field

from bkmr.constants import (
    DEFAULT_DATABASE,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_USER_AGENT,
    LOCAL_CONFIG_NAMES,
    SHELL_PREFIX,
    USER_CONFIG_PATH,
)


@dataclass
class BkmrConfig:
    """
    bkmr configuration with sensible defaults.

    Configuration hierarchy (highest to lowest priority):
    1. Command-line arguments
    2. Environment variables (BKMR_*, plus the legacy BKMR_DB_URL)
    3. Explicit config file (--config)
    4. Local config file (./bkmr.toml or ./.bkmrrc)
    5. User config file (~/.config/bkmr/config.toml)
    6. Defaults
    """

    # Database settings
    database: str = field(default=DEFAULT_DATABASE)
    database_url: Optional[str] = field(default=None)  # Full connection string (overrides database)
    database_echo: bool = field(default=False)

    # Display settings
    color_output: bool = field(default=True)

    # Launching
    editor: Optional[str] = field(default=None)  # Falls back to $VISUAL / $EDITOR
    shell_prefix: str = field(default=SHELL_PREFIX)

    # Network settings (web enrichment on add)
    timeout: int = field(default=DEFAULT_REQUEST_TIMEOUT)
    user_agent: str = field(default=DEFAULT_USER_AGENT)
    verify_ssl: bool = field(default=True)

    log_level: str = field(default="WARNING")

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> "BkmrConfig":
        """
        Load configuration from files and environment.

        Args:
            config_file: Specific config file to load on top of the others

        Returns:
            Merged configuration object
        """
        config = cls()

        user_config_path = Path(USER_CONFIG_PATH).expanduser()
        if user_config_path.exists():
            config._merge(cls._load_toml(user_config_path))

        for name in LOCAL_CONFIG_NAMES:
            path = Path.cwd() / name
            if path.exists():
                config._merge(cls._load_toml(path))
                break

        if config_file and config_file.exists():
            config._merge(cls._load_toml(config_file))

        config._apply_env_vars()
        config._expand_paths()

        return config

    @staticmethod
    def _load_toml(path: Path) -> Dict[str, Any]:
        """Load TOML configuration file."""
        with open(path, "rb") as f:
            return tomli.load(f)

    def _merge(self, data: Dict[str, Any]):
        """Merge configuration data into this instance, ignoring unknown keys."""
        for key, value in data.items():
            if hasattr(self, key):
                setattr(self, key, value)

    def _apply_env_vars(self):
        """Apply environment variables with BKMR_ prefix."""
        prefix = "BKMR_"
        for key, value in os.environ.items():
            if not key.startswith(prefix):
                continue
            config_key = key[len(prefix):].lower()
            if config_key == "db_url":
                # Historical name: a path to the SQLite file
                self.database = value
            elif hasattr(self, config_key):
                current_value = getattr(self, config_key)
                if isinstance(current_value, bool):
                    setattr(self, config_key, value.lower() in ("true", "1", "yes"))
                elif isinstance(current_value, int):
                    setattr(self, config_key, int(value))
                else:
                    setattr(self, config_key, value)

    def _expand_paths(self):
        """Expand ~ and environment variables in paths."""
        if isinstance(self.database, str):
            self.database = os.path.expanduser(os.path.expandvars(self.database))

    def get_database_path(self) -> Path:
        """Get the resolved database path."""
        path = Path(self.database).expanduser()
        if not path.is_absolute():
            path = Path.cwd() / path
        return path

    def get_database_url(self) -> str:
        """
        Get SQLAlchemy database URL.

        Examples:
            sqlite:////home/me/.config/bkmr/bkmr.db
            sqlite:///:memory:
        """
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.get_database_path()}"

    def is_sqlite(self) -> bool:
        """Check if database is SQLite."""
        return self.get_database_url().startswith("sqlite:")


def init_config(
    database: Optional[str] = None,
    config_file: Optional[Path] = None,
    **kwargs,
) -> BkmrConfig:
    """
    Build the configuration with command-line overrides.

    Args:
        database: Database path override
        config_file: Extra config file to merge
        **kwargs: Other configuration overrides (None values are ignored)

    Returns:
        A new configuration instance
    """
    config = BkmrConfig.load(config_file)

    if database:
        config.database = os.path.expanduser(database)
        config.database_url = None

    for key, value in kwargs.items():
        if hasattr(config, key) and value is not None:
            setattr(config, key, value)

    return config
