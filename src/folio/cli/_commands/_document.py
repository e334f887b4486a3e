# pyright: reportUnusedCallResult=false
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing
"""Document commands: status, sections, run and commands."""

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import anyio
from cyclopts import Parameter
from rich.table import Table
from rich.tree import Tree

from folio.cli._context import CLIContext, OutputFormat
from folio.commands import COMMANDS, get_command_spec
from folio.document import offset_at
from folio.enums import CommandShape
from folio.host import ConsoleHost, Editor

from ._shared import (
    ExitCode,
    create_folio_context,
    exit_with_error,
    format_json,
    get_console,
    section_to_dict,
    styled_document,
)

if TYPE_CHECKING:
    from rich.console import Console

    from folio.context import FolioContext
    from folio.document import Section


async def _open_status(console: "Console") -> "tuple[FolioContext, str]":
    folio_ctx = create_folio_context(console)
    uri = await folio_ctx.status(CLIContext.get_current().repo_path)
    if uri is None:
        # The host has already reported the failure.
        raise SystemExit(ExitCode.NOT_FOUND)
    return folio_ctx, uri


def _print_document(console: "Console", folio_ctx: "FolioContext", uri: str) -> None:
    view = folio_ctx.views.get(uri)
    if view is None or view.root is None:
        return
    console.print(styled_document(view.root, view.text), end="")


def _add_branch(tree: Tree, section: "Section") -> None:
    span = f"[{section.range.start}, {section.range.end})" if section.range is not None else "[?]"
    marker = " (folded)" if section.folded else ""
    label = f"[bold]{section.kind.value}[/bold] {span}{marker} [dim]{section.header}[/dim]"
    branch = tree.add(label)
    for child in section.children:
        _add_branch(branch, child)


def status() -> None:
    """Show the status document of the repository."""
    console = get_console()

    async def show() -> None:
        folio_ctx, uri = await _open_status(console)
        _print_document(console, folio_ctx, uri)

    anyio.run(show)


def sections(
    *,
    format: Annotated[OutputFormat, Parameter(name=["--format", "-f"], help="text or json")] = OutputFormat.TEXT,  # noqa: A002
) -> None:
    """Show the section tree of the status document."""
    console = get_console()

    async def show() -> None:
        folio_ctx, uri = await _open_status(console)
        view = folio_ctx.views.get(uri)
        if view is None or view.root is None:
            return
        if format == OutputFormat.JSON:
            console.print_json(format_json(section_to_dict(view.root)))
            return
        tree = Tree(f"[bold]{uri}[/bold]")
        for child in view.root.children:
            _add_branch(tree, child)
        console.print(tree)

    anyio.run(show)


def run(
    command: str,
    *,
    offset: Annotated[int | None, Parameter(help="Cursor offset in the status document")] = None,
    line: Annotated[int | None, Parameter(help="Cursor line (1-based) in the status document")] = None,
    column: Annotated[int, Parameter(help="Cursor column (0-based)")] = 0,
    file: Annotated[Path | None, Parameter(help="File for stage-file and unstage-file")] = None,
) -> None:
    """Run a command at a cursor position in the status document.

    Args:
        command: Command name; see ``folio commands``.
        offset: Character offset of the cursor.
        line: Line of the cursor, counted from 1.
        column: Column of the cursor, counted from 0.
        file: Working tree file for file commands.
    """
    spec = get_command_spec(command)
    if spec is None:
        exit_with_error(f"Unknown command: {command}", ExitCode.NOT_FOUND)
    if spec.shape == CommandShape.FILE and file is None:
        exit_with_error(f"{command} needs --file", ExitCode.VALIDATION_ERROR)

    console = get_console()
    quiet = CLIContext.get_current().quiet

    async def execute() -> None:
        folio_ctx, uri = await _open_status(console)
        if file is not None and spec.shape == CommandShape.FILE:
            editor = Editor(str(file.resolve()))
        else:
            view = folio_ctx.views.get(uri)
            text = view.text if view is not None else ""
            if offset is not None:
                cursor = offset
            elif line is not None:
                cursor = offset_at(text, line - 1, column)
            else:
                cursor = 0
            editor = Editor(uri, cursor)

        await folio_ctx.run(command, editor)

        if quiet:
            return
        shown = uri
        if isinstance(folio_ctx.host, ConsoleHost) and folio_ctx.host.opened:
            shown = folio_ctx.host.opened[-1]
        _print_document(console, folio_ctx, shown)

    anyio.run(execute)


def commands() -> None:
    """List the available commands."""
    console = get_console()
    table = Table("Command", "Acts on", "Refreshes", "Description")
    for spec in COMMANDS:
        table.add_row(spec.name, spec.shape.value, "yes" if spec.triggers_update else "no", spec.description)
    console.print(table)
