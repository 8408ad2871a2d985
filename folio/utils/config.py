"""
Configuration utilities.
"""
import logging
import os
from typing import Any, Optional
from dotenv import load_dotenv

ENV_PREFIX = "FOLIO_"

DEFAULTS = {
    "storage_dir": "data/active",
    "backup_dir": "data/backups",
    "max_backups": "5",
    "commit_policy": "autosave",
    "log_level": "INFO",
    "default_theme": "light",
}


class Config:
    """Configuration manager reading FOLIO_* environment variables."""

    def __init__(self, env_file: Optional[str] = None):
        """Initialize configuration.

        Args:
            env_file: Optional .env file loaded into the environment
        """
        if env_file:
            load_dotenv(env_file)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value.

        `key` is the lower-case name without prefix, e.g. "storage_dir"
        reads FOLIO_STORAGE_DIR.
        """
        value = os.getenv(ENV_PREFIX + key.upper())
        if value is None or value == "":
            return default if default is not None else DEFAULTS.get(key)
        return value

    @property
    def storage_dir(self) -> str:
        return self.get("storage_dir")

    @property
    def backup_dir(self) -> str:
        return self.get("backup_dir")

    @property
    def max_backups(self) -> int:
        value = self.get("max_backups")
        try:
            return max(1, int(value))
        except ValueError:
            raise ValueError(f"{ENV_PREFIX}MAX_BACKUPS must be an integer, got {value!r}")

    @property
    def commit_policy(self) -> str:
        return self.get("commit_policy").lower()

    @property
    def log_level(self) -> int:
        level = logging.getLevelName(self.get("log_level").upper())
        return level if isinstance(level, int) else logging.INFO

    @property
    def default_theme(self) -> str:
        return self.get("default_theme").lower()
