# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
"""Config commands for viewing folio configuration."""

from typing import Annotated

from cyclopts import App, Parameter
from rich.table import Table

from folio.cli._context import CLIContext, OutputFormat

from ._shared import ExitCode, exit_with_error, format_json, get_console

app = App(name="config", help="View folio configuration.")


@app.command(name="show")
def _show(
    *,
    format: Annotated[OutputFormat, Parameter(name=["--format", "-f"], help="toml or json")] = OutputFormat.TOML,  # noqa: A002
    include_defaults: Annotated[bool, Parameter(help="Include values equal to the defaults")] = True,  # noqa: FBT002
) -> None:
    """Show the merged configuration."""
    ctx = CLIContext.get_current()
    console = get_console()
    if format == OutputFormat.TEXT:
        exit_with_error("config show supports toml and json", ExitCode.VALIDATION_ERROR)
    if format == OutputFormat.JSON:
        console.print_json(format_json(ctx.config.to_dict(include_defaults=include_defaults)))
        return
    console.print(ctx.config.to_toml(include_defaults=include_defaults), end="", markup=False)


@app.command(name="sources")
def _sources() -> None:
    """List the configuration sources in precedence order."""
    ctx = CLIContext.get_current()
    console = get_console()
    table = Table("Source", "Path", "Exists")
    for source in ctx.config.sources:
        table.add_row(source.name.value, str(source.path) if source.path else "-", "yes" if source.exists else "no")
    console.print(table)
    if ctx.config_error:
        console.print(f"[yellow]Warning:[/yellow] {ctx.config_error}")
