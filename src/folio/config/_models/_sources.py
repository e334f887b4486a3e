# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
# pyright: reportExplicitAny=false
"""Where configuration values come from."""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any, Self


class ConfigSourceName(StrEnum):
    """Configuration sources, highest precedence first."""

    CLI = "cli"
    ENV = "env"
    PROJECT = "project"
    USER = "user"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class ConfigSource:
    """One configuration source.

    Attributes:
        name: Which source this is.
        path: The TOML file behind the source, or None for CLI, env and
            defaults.
        exists: Whether the file exists (always True for non-file sources
            that carry values).
        values: Values read from the source; file and env sources are
            empty until loaded.
    """

    name: ConfigSourceName
    path: Path | None = None
    exists: bool = True
    values: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_file(cls, name: ConfigSourceName, path: Path) -> Self:
        """Describe a file source, noting whether the file is there."""
        try:
            exists = path.is_file()
        except OSError:
            exists = False
        return cls(name, path, exists)

    def with_values(self, values: dict[str, Any]) -> Self:
        """Return a copy of this source carrying ``values``."""
        return type(self)(self.name, self.path, self.exists, values)
