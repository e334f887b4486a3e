"""Configuration loading for the command line."""

import os
import sys
from typing import TYPE_CHECKING, NoReturn

from folio.exceptions import ConfigError

from ._models import Config

if TYPE_CHECKING:
    from pathlib import Path

STRICT_ENV_VAR = "FOLIO_STRICT_CONFIG"


def _exit(message: str) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)  # noqa: T201
    sys.exit(1)


def safe_load_config(
    *,
    config_path: "Path | None" = None,
    project_root: "Path | None" = None,
    cli_overrides: dict[str, object] | None = None,
) -> tuple[Config, str | None]:
    """Load configuration without letting a bad file stop folio.

    A config file that cannot be read, parsed or validated is reported on
    stderr and the defaults are used instead. With ``FOLIO_STRICT_CONFIG=1``
    folio exits with status 1 instead. A ``--config`` file that does not
    exist always exits.

    Args:
        config_path: Explicit config file (``--config``); replaces discovery.
        project_root: Repository root whose ``.folio.toml`` applies.
        cli_overrides: Values from ``--set``.

    Returns:
        The configuration and None, or the defaults and the error message.
    """
    if config_path is not None and not config_path.exists():
        _exit(f"Config file not found: {config_path}")

    try:
        if config_path is not None:
            return Config.from_file(config_path), None
        return Config.load(project_root=project_root, cli_overrides=cli_overrides), None
    except (ConfigError, OSError) as e:
        message = f"Failed to load config: {e}"

    if os.environ.get(STRICT_ENV_VAR) == "1":
        _exit(message)
    print(f"Warning: {message}", file=sys.stderr)  # noqa: T201
    return Config.from_dict({}), message
