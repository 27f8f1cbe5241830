"""Configuration manager with hierarchy: .env → defaults.

Usage:
    from janitor.lib.config_manager import config

    api_key = config.get("MAILCHIMP_API_KEY")
    page_size = config.get("JANITOR_PAGE_SIZE")  # coerced to int
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from janitor.lib.defaults import SENSITIVE_KEYS, get_default
from janitor.lib.logging_config import log_event

logger = logging.getLogger(__name__)


def _find_git_root(start_path: Optional[Path] = None) -> Path:
    """Walk up directory tree to find .git/ folder."""
    current = start_path or Path.cwd()
    current = current.resolve()

    while current != current.parent:
        if (current / ".git").exists():
            return current
        current = current.parent

    raise FileNotFoundError("No .git directory found in any parent directory")


def _coerce_type(value: str, default: Any) -> Any:
    """Coerce string value to match the type of the default.

    Args:
        value: String value from the environment
        default: Default value (determines target type)

    Returns:
        Value coerced to appropriate type
    """
    if default is None:
        return value

    if isinstance(default, bool):
        return value.lower() in ("true", "1", "yes", "on")
    if isinstance(default, int):
        try:
            return int(value)
        except ValueError:
            return default
    if isinstance(default, float):
        try:
            return float(value)
        except ValueError:
            return default
    return value


class ConfigManager:
    """Resolves configuration with .env → defaults hierarchy.

    The manager loads .env once, on initialization.
    """

    def __init__(self, env_path: Optional[Path] = None):
        """Initialize the config manager and load .env.

        Args:
            env_path: Explicit .env location (defaults to <git root>/.env)
        """
        self._env_loaded = False
        self._load_env(env_path)

    def _load_env(self, env_path: Optional[Path] = None) -> None:
        """Load .env file from git root (or the given path)."""
        if self._env_loaded:
            return

        if env_path is None:
            try:
                env_path = _find_git_root() / ".env"
            except FileNotFoundError:
                log_event(logger, logging.DEBUG, "Could not find git root, .env not loaded")
                self._env_loaded = True
                return

        if env_path.exists():
            load_dotenv(dotenv_path=env_path, override=True)
            log_event(logger, logging.DEBUG, "Loaded .env", path=str(env_path))
        else:
            log_event(logger, logging.DEBUG, "No .env file found", path=str(env_path))

        self._env_loaded = True

    def get(self, key: str, default: Any = None) -> Any:
        """Get config value (.env / process environment → defaults).

        Args:
            key: Configuration key
            default: Override default (uses DEFAULTS if not provided)

        Returns:
            Configuration value
        """
        env_value = os.getenv(key)
        if env_value is not None:
            default_val = default if default is not None else get_default(key)
            return _coerce_type(env_value, default_val)

        if default is not None:
            return default
        return get_default(key)

    def is_sensitive(self, key: str) -> bool:
        """Check if a key contains sensitive data."""
        return key in SENSITIVE_KEYS

    def mask_value(self, key: str, value: Any) -> str:
        """Mask sensitive values for display.

        Args:
            key: Configuration key
            value: Value to potentially mask

        Returns:
            Masked or original value as string
        """
        if not self.is_sensitive(key):
            return str(value)

        str_value = str(value)
        if not str_value:
            return ""
        if len(str_value) <= 8:
            return "*" * len(str_value)
        return str_value[:4] + "*" * (len(str_value) - 8) + str_value[-4:]


# Singleton instance
config = ConfigManager()
