"""Command dispatch pipeline.

Every command runs through the same steps: resolve the repository (and the
view or file) the editor shows, run the operation, route any failure to the
error formatter, and, for mutating commands, refresh the repository and
redraw its views exactly once. Nothing raised by a command escapes to the
host.
"""

from __future__ import annotations

import contextlib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, final
from urllib.parse import unquote, urlsplit

from folio.exceptions import DocumentUriError, RepositoryUnavailableError
from folio.views import DocumentUri

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from structlog.typing import FilteringBoundLogger

    from folio.commands._errors import ErrorFormatter
    from folio.document import Section
    from folio.host import Editor, Host
    from folio.repository import PlumbingProtocol
    from folio.state import Refresher, RepositoryHandle
    from folio.views import DocumentProvider, DocumentView

    Operation = Callable[["Invocation"], Awaitable[None]]
    Command = Callable[[Editor], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class Invocation:
    """Everything an operation needs to act on one repository.

    Attributes:
        editor: Editor the command was invoked from.
        handle: Resolved repository.
        plumbing: Plumbing to run mutations through.
        host: Host for prompts and notifications.
        provider: Document provider, for opening and redrawing views.
        view: Resolved folio view, for view-shaped commands.
        path: Repository-relative path of the file the editor shows, for
            file-shaped commands.
        confirm_discard: Ask before destructive operations.
        context_lines: Context lines for detail documents.
    """

    editor: Editor
    handle: RepositoryHandle
    plumbing: PlumbingProtocol
    host: Host
    provider: DocumentProvider
    view: DocumentView | None = None
    path: Path | None = None
    confirm_discard: bool = True
    context_lines: int = 3

    @property
    def root(self) -> Path:
        """Root of the resolved repository."""
        return self.handle.root

    def section(self) -> Section | None:
        """Return the section under the cursor, or None."""
        if self.view is None:
            return None
        return self.view.click(self.editor.cursor)


def editor_path(document_uri: str) -> Path | None:
    """Return the file system path of a non-folio document, or None."""
    if not document_uri:
        return None
    parts = urlsplit(document_uri)
    if parts.scheme == "file":
        return Path(unquote(parts.path))
    if parts.scheme and len(parts.scheme) > 1:
        return None
    return Path(document_uri)


@final
class Dispatcher:
    """Builds host-callable commands from operations.

    Attributes:
        plumbing: Plumbing operations run through.
        host: Host for prompts and notifications.
        provider: Document provider owning the registries.
        refresher: Refresher run after mutating commands.
        formatter: Error formatter failures are routed to.
        serialize: Run commands on the same repository one at a time.
        confirm_discard: Ask before destructive operations.
        context_lines: Context lines for detail documents.
    """

    __slots__ = (
        "_logger",
        "confirm_discard",
        "context_lines",
        "formatter",
        "host",
        "plumbing",
        "provider",
        "refresher",
        "serialize",
    )

    def __init__(
        self,
        *,
        plumbing: PlumbingProtocol,
        host: Host,
        provider: DocumentProvider,
        refresher: Refresher,
        formatter: ErrorFormatter,
        logger: FilteringBoundLogger,
        serialize: bool = True,
        confirm_discard: bool = True,
        context_lines: int = 3,
    ) -> None:
        self.plumbing: PlumbingProtocol = plumbing
        self.host: Host = host
        self.provider: DocumentProvider = provider
        self.refresher: Refresher = refresher
        self.formatter: ErrorFormatter = formatter
        self.serialize: bool = serialize
        self.confirm_discard: bool = confirm_discard
        self.context_lines: int = context_lines
        self._logger: FilteringBoundLogger = logger

    # ==========================================================================
    # Command shapes
    # ==========================================================================

    def prime_repo(self, name: str, operation: Operation, *, triggers_update: bool = True) -> Command:
        """Build a command that acts on the repository of the editor's document."""

        async def command(editor: Editor) -> None:
            handle = self._resolve_handle(editor)
            if handle is None:
                self._logger.debug("command_unresolved", command=name, uri=editor.document_uri)
                return
            await self._run(name, self._invocation(editor, handle), operation, triggers_update)

        return command

    def prime_repo_and_view(
        self,
        name: str,
        operation: Operation,
        *,
        triggers_update: bool = True,
    ) -> Command:
        """Build a command that acts on the section under the cursor of a folio view."""

        async def command(editor: Editor) -> None:
            view = self._resolve_view(editor)
            if view is None:
                self._logger.debug("command_unresolved", command=name, uri=editor.document_uri)
                return
            invocation = self._invocation(editor, view.handle, view=view)
            await self._run(name, invocation, operation, triggers_update)

        return command

    def prime_file(self, name: str, operation: Operation, *, triggers_update: bool = True) -> Command:
        """Build a command that acts on the working tree file the editor shows."""

        async def command(editor: Editor) -> None:
            path = editor_path(editor.document_uri)
            handle = self.provider.repositories.containing(path) if path is not None else None
            if path is None or handle is None:
                self._logger.debug("command_unresolved", command=name, uri=editor.document_uri)
                return
            relative = path.resolve().relative_to(handle.root)
            invocation = self._invocation(editor, handle, path=relative)
            await self._run(name, invocation, operation, triggers_update)

        return command

    # ==========================================================================
    # Execution
    # ==========================================================================

    def _resolve_view(self, editor: Editor) -> DocumentView | None:
        try:
            uri = DocumentUri.parse(editor.document_uri)
        except DocumentUriError:
            return None
        return self.provider.views.get(str(uri))

    def _resolve_handle(self, editor: Editor) -> RepositoryHandle | None:
        try:
            uri = DocumentUri.parse(editor.document_uri)
        except DocumentUriError:
            path = editor_path(editor.document_uri)
            return self.provider.repositories.containing(path) if path is not None else None
        return self.provider.repositories.for_root(uri.root)

    def _invocation(
        self,
        editor: Editor,
        handle: RepositoryHandle,
        *,
        view: DocumentView | None = None,
        path: Path | None = None,
    ) -> Invocation:
        return Invocation(
            editor=editor,
            handle=handle,
            plumbing=self.plumbing,
            host=self.host,
            provider=self.provider,
            view=view,
            path=path,
            confirm_discard=self.confirm_discard,
            context_lines=self.context_lines,
        )

    async def _run(
        self,
        name: str,
        invocation: Invocation,
        operation: Operation,
        triggers_update: bool,  # noqa: FBT001
    ) -> None:
        handle = invocation.handle
        lock = handle.lock if self.serialize else contextlib.nullcontext()
        async with lock:
            self._logger.debug("command_started", command=name, root=str(handle.root))
            try:
                await operation(invocation)
            except Exception as e:  # noqa: BLE001
                _ = await self.formatter.handle(handle, e)
            finally:
                if triggers_update:
                    await self.refresh_and_redraw(handle)
            self._logger.debug("command_finished", command=name, root=str(handle.root))

    async def refresh_and_redraw(self, handle: RepositoryHandle) -> None:
        """Refresh ``handle`` and re-render its views, reporting any failure.

        A repository whose root has disappeared is dropped along with its
        views.
        """
        try:
            _ = await self.refresher.refresh(handle)
        except RepositoryUnavailableError as e:
            _ = self.provider.repositories.remove(handle.key)
            removed = self.provider.views.remove_for_root(handle.root)
            self._logger.warning("repository_dropped", root=str(handle.root), views=len(removed))
            _ = await self.formatter.handle(None, e)
            return
        except Exception as e:  # noqa: BLE001
            _ = await self.formatter.handle(handle, e)

        try:
            _ = self.provider.update_views(handle)
        except Exception as e:  # noqa: BLE001
            _ = await self.formatter.handle(None, e)
