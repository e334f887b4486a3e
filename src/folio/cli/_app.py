"""The command-line interface for folio."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from folio.config import parse_string_value, safe_load_config, set_nested_key
from folio.context import logger_from_config
from folio.utils import discover_root

from ._commands import exit_with_error, register_commands
from ._commands._shared import ExitCode
from ._context import CLIContext

_HELP = "Browse and edit a git repository as a foldable status document."


def parse_overrides(assignments: list[str]) -> dict[str, object]:
    """Turn ``section.key=value`` assignments into a nested config dict.

    Raises:
        ValueError: If an assignment has no ``=`` or an empty key.
    """
    overrides: dict[str, object] = {}
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        key = key.strip()
        if not sep or not key:
            msg = f"Expected section.key=value, got {assignment!r}"
            raise ValueError(msg)
        set_nested_key(overrides, key, parse_string_value(value.strip()))
    return overrides


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Create the folio CLI application."""
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="folio",
        help=_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        verbose: Annotated[bool, Parameter(help="Enable verbose output")] = False,  # noqa: FBT002
        quiet: Annotated[bool, Parameter(help="Suppress non-essential output")] = False,  # noqa: FBT002
        no_color: Annotated[bool, Parameter(name="--no-color", help="Disable colored output")] = False,  # noqa: FBT002
        yes: Annotated[bool, Parameter(name=["--yes", "-y"], help="Answer confirmations with yes")] = False,  # noqa: FBT002
        config: Annotated[Path | None, Parameter(name="--config", help="Path to config file")] = None,
        repo: Annotated[Path | None, Parameter(name=["--repo", "-C"], help="Path inside the repository")] = None,
        set_: Annotated[
            list[str] | None,
            Parameter(name="--set", help="Override a config value (section.key=value)"),
        ] = None,
    ) -> None:
        """Launch folio with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            verbose: Enable verbose output with additional details.
            quiet: Suppress non-essential output.
            no_color: Disable colored output.
            yes: Answer confirmations with yes.
            config: Explicit path to config file.
            repo: Path inside the repository to operate on.
            set_: Config overrides.
        """
        repo_path = (repo or Path.cwd()).resolve()

        try:
            cli_overrides = parse_overrides(set_ or [])
        except ValueError as e:
            exit_with_error(str(e), ExitCode.VALIDATION_ERROR, console=error_console)
        if verbose:
            set_nested_key(cli_overrides, "logging.level", "debug")

        loaded_config, config_error = safe_load_config(
            config_path=config,
            project_root=discover_root(repo_path),
            cli_overrides=cli_overrides,
        )

        cli_logger = logger_from_config(loaded_config)

        ctx = CLIContext(
            config=loaded_config,
            verbose=verbose,
            quiet=quiet,
            no_color=no_color,
            assume_yes=yes,
            repo_path=repo_path,
            config_error=config_error,
            logger=cli_logger,
        )
        CLIContext.set_current(ctx)

        try:
            app(tokens)
        finally:
            CLIContext.reset()

    register_commands(app)
    return app


def main() -> None:
    """Default entrypoint for the `folio` CLI."""
    app = create_app()
    app.meta()
