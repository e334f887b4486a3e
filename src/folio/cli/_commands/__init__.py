"""folio CLI commands."""
# pyright: reportUnusedCallResult=false

from typing import TYPE_CHECKING

from ._config import app as config_app
from ._document import commands, run, sections, status
from ._shared import ExitCode, exit_with_error, format_json, get_error_console

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "ExitCode",
    "config_app",
    "exit_with_error",
    "format_json",
    "get_error_console",
    "register_commands",
]


def register_commands(app: "App") -> None:
    app.command(status, name="status")
    app.command(sections, name="sections")
    app.command(run, name="run")
    app.command(commands, name="commands")
    app.command(config_app)
