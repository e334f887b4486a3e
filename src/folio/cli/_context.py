# pyright: reportUnusedCallResult=false
# ruff: noqa: TC003  # Path needed at runtime for dataclass field
"""Options shared by every folio command.

The meta app builds one ``CLIContext`` from the global flags and publishes
it in a context variable for the duration of the command.
"""

import contextvars
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from folio.config import Config

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger


class OutputFormat(StrEnum):
    """``--format`` values."""

    TEXT = "text"
    JSON = "json"
    TOML = "toml"


_active: contextvars.ContextVar["CLIContext | None"] = contextvars.ContextVar("folio_cli_context", default=None)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global flags and the configuration they produced.

    Attributes:
        config: Configuration after ``--config`` and ``--set``.
        verbose: ``--verbose``.
        quiet: ``--quiet``; commands print only their result.
        no_color: ``--no-color``.
        assume_yes: ``--yes``; confirmations are answered without asking.
        repo_path: ``--repo``, a path inside the repository to open.
        config_error: Why the configuration fell back to defaults, if it did.
        logger: The command's logger; it writes to the log file only.
    """

    config: Config = field(repr=False)
    verbose: bool = False
    quiet: bool = False
    no_color: bool = False
    assume_yes: bool = False
    repo_path: Path = field(default_factory=Path.cwd)
    config_error: str | None = None
    logger: "FilteringBoundLogger | None" = field(default=None, repr=False)

    @classmethod
    def get_current(cls) -> "CLIContext":
        """Return the published context, or one with default settings."""
        return _active.get() or cls(config=Config.from_dict({}))

    @classmethod
    def set_current(cls, ctx: "CLIContext") -> None:
        """Publish ``ctx`` for the running command."""
        _active.set(ctx)

    @classmethod
    def reset(cls) -> None:
        """Forget the published context."""
        _active.set(None)
