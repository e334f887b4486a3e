# pyright: reportExplicitAny=false
"""Shared CLI utilities for commands."""

from enum import IntEnum
from typing import TYPE_CHECKING, Any, Never

import orjson
from rich.console import Console
from rich.text import Text

from folio.cli._context import CLIContext
from folio.context import FolioContext
from folio.enums import SectionKind
from folio.host import ConsoleHost

if TYPE_CHECKING:
    from folio.document import Section

FormattableData = dict[str, Any]

_HEADER_STYLES: dict[SectionKind, str] = {
    SectionKind.ERROR: "bold red",
    SectionKind.HEAD: "bold",
    SectionKind.IN_PROGRESS: "bold yellow",
    SectionKind.UNTRACKED_FILES: "bold magenta",
    SectionKind.UNSTAGED_CHANGES: "bold magenta",
    SectionKind.STAGED_CHANGES: "bold magenta",
    SectionKind.STASHES: "bold magenta",
    SectionKind.RECENT_COMMITS: "bold magenta",
    SectionKind.COMMIT_DETAIL: "bold",
    SectionKind.STASH_DETAIL: "bold",
    SectionKind.HUNK: "cyan",
}


class ExitCode(IntEnum):
    """Standard exit codes for folio CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    IO_ERROR = 4
    INTERNAL_ERROR = 5


def get_console() -> Console:
    """Get a Rich console honoring the ``--no-color`` flag."""
    return Console(no_color=CLIContext.get_current().no_color, highlight=False)


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr."""
    return Console(stderr=True, no_color=CLIContext.get_current().no_color)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()
    console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(code)


def format_json(data: Any, *, indent: bool = True) -> str:
    """Format data as JSON."""
    options = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(data, option=options).decode("utf-8")


def create_folio_context(console: Console) -> FolioContext:
    """Build a FolioContext from the current CLI context."""
    cli = CLIContext.get_current()
    return FolioContext(
        config=cli.config,
        host=ConsoleHost(console, assume_yes=cli.assume_yes),
        logger=cli.logger,
    )


def styled_document(root: "Section", text: str) -> Text:
    """Apply light styling to the header lines of a document."""
    styled = Text(text)
    stack = [root]
    while stack:
        section = stack.pop()
        style = _HEADER_STYLES.get(section.kind)
        if style and section.range is not None and section.header and not section.range.is_empty:
            start = section.range.start
            styled.stylize(style, start, start + len(section.header))
        stack.extend(section.children)
    return styled


def section_to_dict(section: "Section") -> FormattableData:
    """Convert a section tree to plain data."""
    return {
        "kind": section.kind.value,
        "key": section.key,
        "header": section.header,
        "range": [section.range.start, section.range.end] if section.range is not None else None,
        "foldable": section.foldable,
        "folded": section.folded,
        "children": [section_to_dict(child) for child in section.children],
    }
