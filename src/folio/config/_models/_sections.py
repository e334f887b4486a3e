# pyright: reportExplicitAny=false
"""Configuration sections.

folio reads four sections: ``logging``, ``status``, ``git`` and
``dispatch``. Each is a frozen model that ignores unknown keys, so a config
file written for a newer folio still loads. The built-in defaults are the
model defaults.
"""

from enum import StrEnum
from typing import Any, ClassVar, Final

from pydantic import BaseModel, ConfigDict, Field


class LogLevel(StrEnum):
    """Log level threshold, most verbose first."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log line renderer."""

    JSON = "json"
    TEXT = "text"


class _Section(BaseModel):
    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")


class LoggingConfig(_Section):
    """``[logging]``: where and how folio logs.

    Attributes:
        level: Log level threshold.
        format: Log line renderer.
        file: Log file path; empty uses the platform log directory.
        max_bytes: Rotate the log file after this many bytes; 0 never rotates.
        backup_count: Rotated log files to keep.
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""
    max_bytes: int = Field(default=0, ge=0)
    backup_count: int = Field(default=3, ge=0)


class StatusConfig(_Section):
    """``[status]``: what the status document shows.

    Attributes:
        recent_commit_count: Commits listed under "Recent commits".
        context_lines: Context lines around each diff hunk.
        fold_file_diffs: File diffs start folded.
        fold_commits_over: "Recent commits" starts folded when it lists more
            commits than this.
        show_untracked: Show the "Untracked files" section.
    """

    recent_commit_count: int = Field(default=10, ge=0)
    context_lines: int = Field(default=3, ge=0)
    fold_file_diffs: bool = True
    fold_commits_over: int = Field(default=20, ge=0)
    show_untracked: bool = True


class GitConfig(_Section):
    """``[git]``: the git executable.

    Attributes:
        executable: Name or path of the git executable.
        timeout_seconds: Seconds before a git subprocess is abandoned; unset
            waits indefinitely.
    """

    executable: str = "git"
    timeout_seconds: float | None = Field(default=None, gt=0)


class DispatchConfig(_Section):
    """``[dispatch]``: how commands run.

    Attributes:
        serialize_commands: Run commands on one repository one at a time.
        confirm_discard: Ask before discarding changes or dropping stashes.
    """

    serialize_commands: bool = True
    confirm_discard: bool = True


SECTIONS: Final[dict[str, type[BaseModel]]] = {
    "logging": LoggingConfig,
    "status": StatusConfig,
    "git": GitConfig,
    "dispatch": DispatchConfig,
}


class ConfigSchema(BaseModel):
    """Schema of a whole configuration dictionary, used for validation."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="ignore")

    logging: LoggingConfig = LoggingConfig()
    status: StatusConfig = StatusConfig()
    git: GitConfig = GitConfig()
    dispatch: DispatchConfig = DispatchConfig()


# Unset values are left out; TOML has no null.
DEFAULT_CONFIG: Final[dict[str, Any]] = {
    name: model().model_dump(mode="json", exclude_none=True) for name, model in SECTIONS.items()
}
