r"""Platform-specific folio paths.

- Linux: ``~/.config/folio/config.toml``, ``~/.local/state/folio/log/folio.log``
- macOS: ``~/Library/Application Support/folio/config.toml``,
  ``~/Library/Logs/folio/folio.log``
- Windows: ``%LOCALAPPDATA%\folio\config.toml``,
  ``%LOCALAPPDATA%\folio\Logs\folio.log``

Paths are returned regardless of whether they exist.
"""

from pathlib import Path

import platformdirs

APP_NAME = "folio"


def get_user_config_dir() -> Path:
    """Get the directory holding the user's folio configuration."""
    return platformdirs.user_config_path(APP_NAME)


def get_user_config_path() -> Path:
    """Get the path to the user's folio config file."""
    return get_user_config_dir() / "config.toml"


def get_user_log_path() -> Path:
    """Get the path to the default folio log file."""
    return platformdirs.user_log_path(APP_NAME) / "folio.log"
