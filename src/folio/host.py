# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
"""Host editor interface.

folio does not draw anything itself. It asks a host (an editor integration,
or the console for the CLI) to show messages, ask questions and open
documents or files.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, final, runtime_checkable

import anyio
import anyio.to_thread
from rich.console import Console
from rich.prompt import Confirm, Prompt

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True, slots=True)
class Editor:
    """The document a command was invoked from and the cursor in it.

    Attributes:
        document_uri: URI of the document; a ``folio://`` URI for folio
            documents, a ``file://`` URI or plain path for files.
        cursor: Character offset of the cursor.
    """

    document_uri: str
    cursor: int = 0


@runtime_checkable
class Host(Protocol):
    """Services folio needs from the editor hosting it."""

    async def show_error_message(self, message: str) -> None:
        """Show an error notification."""
        ...

    async def show_info_message(self, message: str) -> None:
        """Show an informational notification."""
        ...

    async def prompt(self, message: str, *, default: str = "") -> str | None:
        """Ask for a line of text; None when cancelled, "" when left empty."""
        ...

    async def pick(self, title: str, items: Sequence[str]) -> str | None:
        """Ask the user to choose one of ``items``; None when cancelled."""
        ...

    async def confirm(self, message: str) -> bool:
        """Ask a yes/no question."""
        ...

    async def open_document(self, uri: str) -> None:
        """Show the folio document at ``uri``."""
        ...

    async def open_file(self, path: Path, line: int | None = None) -> None:
        """Open a working tree file, optionally at a one-based line."""
        ...


@final
class ConsoleHost:
    """Host that talks to the user through a rich console.

    Blocking prompts run in a worker thread so the event loop stays free.

    Attributes:
        console: Console to print to.
        assume_yes: Answer every confirmation with yes.
        opened: URIs of documents opened, in order.
    """

    __slots__ = ("assume_yes", "console", "opened")

    def __init__(self, console: Console | None = None, *, assume_yes: bool = False) -> None:
        self.console: Console = console or Console()
        self.assume_yes: bool = assume_yes
        self.opened: list[str] = []

    async def show_error_message(self, message: str) -> None:
        self.console.print(f"[bold red]error:[/bold red] {message}", highlight=False)

    async def show_info_message(self, message: str) -> None:
        self.console.print(message, highlight=False)

    async def prompt(self, message: str, *, default: str = "") -> str | None:
        def ask() -> str:
            return Prompt.ask(message, console=self.console, default=default)

        try:
            answer = await anyio.to_thread.run_sync(ask)
        except (EOFError, KeyboardInterrupt):
            return None
        return answer

    async def pick(self, title: str, items: Sequence[str]) -> str | None:
        if not items:
            return None
        choices = list(items)

        def ask() -> str:
            return Prompt.ask(title, console=self.console, choices=choices, show_choices=True)

        try:
            return await anyio.to_thread.run_sync(ask)
        except (EOFError, KeyboardInterrupt):
            return None

    async def confirm(self, message: str) -> bool:
        if self.assume_yes:
            return True

        def ask() -> bool:
            return Confirm.ask(message, console=self.console, default=False)

        try:
            return await anyio.to_thread.run_sync(ask)
        except (EOFError, KeyboardInterrupt):
            return False

    async def open_document(self, uri: str) -> None:
        self.opened.append(uri)

    async def open_file(self, path: Path, line: int | None = None) -> None:
        location = f"{path}:{line}" if line is not None else str(path)
        self.console.print(f"[cyan]open[/cyan] {location}", highlight=False)
