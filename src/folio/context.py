"""The folio context.

``FolioContext`` owns everything one folio session needs: configuration,
the logger, plumbing, host, the repository and view registries, the
provider, and the dispatcher with its built commands.
"""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING, final

import anyio.to_thread

from folio.commands import Dispatcher, ErrorFormatter, build_commands
from folio.config import Config
from folio.document import RenderOptions
from folio.exceptions import RepositoryNotFoundError
from folio.host import ConsoleHost
from folio.repository import GitPlumbing
from folio.state import Refresher, RepositoryHandle, RepositoryRegistry, ViewRegistry
from folio.utils import create_logger, discover_root
from folio.views import DocumentProvider, DocumentUri

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

    from folio.host import Editor, Host
    from folio.repository import PlumbingProtocol


def logger_from_config(config: Config) -> FilteringBoundLogger:
    """Create the logger described by the ``logging`` config section."""
    logging = config.logging
    rotate = logging.max_bytes > 0
    return create_logger(
        level=logging.level.value,
        log_format=logging.format.value,
        log_file=logging.file,
        max_bytes=logging.max_bytes if rotate else None,
        backup_count=logging.backup_count if rotate else None,
    )


@final
class FolioContext:
    """One folio session.

    Attributes:
        config: Loaded configuration.
        logger: Logger handed to every component.
        plumbing: Repository plumbing.
        host: Host editor services.
        repositories: Open repository handles.
        views: Open document views.
        provider: Document text provider.
        refresher: Repository state refresher.
        dispatcher: Command dispatch pipeline.
        commands: Host-callable commands by name.
    """

    __slots__ = (
        "_root_finder",
        "commands",
        "config",
        "dispatcher",
        "host",
        "logger",
        "plumbing",
        "provider",
        "refresher",
        "repositories",
        "views",
    )

    def __init__(
        self,
        *,
        config: Config | None = None,
        plumbing: PlumbingProtocol | None = None,
        host: Host | None = None,
        logger: FilteringBoundLogger | None = None,
        root_finder: Callable[[Path], Path | None] = discover_root,
    ) -> None:
        """Initialize the context.

        Args:
            config: Configuration; defaults when None.
            plumbing: Plumbing; git-backed when None.
            host: Host; a console host when None.
            logger: Logger; built from ``config.logging`` when None.
            root_finder: Maps a path to the root of the repository containing
                it, or None.
        """
        self.config: Config = config if config is not None else Config.from_dict({})
        self.logger: FilteringBoundLogger = logger if logger is not None else logger_from_config(self.config)
        self.plumbing: PlumbingProtocol = plumbing or GitPlumbing(
            executable=self.config.git.executable,
            timeout=self.config.git.timeout_seconds,
        )
        self.host: Host = host or ConsoleHost()
        self._root_finder: Callable[[Path], Path | None] = root_finder

        status = self.config.status
        self.repositories: RepositoryRegistry = RepositoryRegistry()
        self.views: ViewRegistry = ViewRegistry()
        self.provider: DocumentProvider = DocumentProvider(
            self.repositories,
            self.views,
            logger=self.logger,
            options=RenderOptions.from_config(status),
        )
        self.refresher: Refresher = Refresher(
            self.plumbing,
            logger=self.logger,
            context_lines=status.context_lines,
            commit_count=status.recent_commit_count,
        )
        self.dispatcher: Dispatcher = Dispatcher(
            plumbing=self.plumbing,
            host=self.host,
            provider=self.provider,
            refresher=self.refresher,
            formatter=ErrorFormatter(self.host, logger=self.logger),
            logger=self.logger,
            serialize=self.config.dispatch.serialize_commands,
            confirm_discard=self.config.dispatch.confirm_discard,
            context_lines=status.context_lines,
        )
        self.commands: dict[str, Callable[[Editor], Awaitable[None]]] = build_commands(self.dispatcher)

    # ==========================================================================
    # Repositories
    # ==========================================================================

    async def open_repository(self, path: Path) -> RepositoryHandle:
        """Open (or return the already open) repository containing ``path``.

        The repository is refreshed before it is returned, under its lock when
        commands are serialized.

        Raises:
            RepositoryNotFoundError: If ``path`` is not inside a repository.
        """
        handle = self.repositories.containing(path)
        if handle is None:
            root = await anyio.to_thread.run_sync(self._root_finder, path)
            if root is None:
                msg = f"Not inside a git repository: {path}"
                raise RepositoryNotFoundError(msg, path=path)
            handle = self.repositories.get_or_create(str(root.resolve()), lambda: RepositoryHandle(root))
            self.logger.info("repository_opened", root=str(handle.root))

        lock = handle.lock if self.dispatcher.serialize else contextlib.nullcontext()
        async with lock:
            _ = await self.refresher.refresh(handle)
        return handle

    def close_repository(self, root: Path) -> bool:
        """Forget a repository and every view of it.

        Returns:
            True if the repository was open.
        """
        handle = self.repositories.remove(str(root.resolve()))
        if handle is None:
            return False
        removed = self.views.remove_for_root(handle.root)
        self.logger.info("repository_closed", root=str(handle.root), views=len(removed))
        return True

    def close_document(self, uri: str) -> bool:
        """Forget the view of a closed document.

        Returns:
            True if a view was registered for ``uri``.
        """
        return self.views.remove(str(DocumentUri.parse(uri))) is not None

    # ==========================================================================
    # Commands
    # ==========================================================================

    async def status(self, path: Path) -> str | None:
        """Open the status document of the repository containing ``path``.

        Failures are reported through the host.

        Returns:
            URI of the status document, or None on failure.
        """
        try:
            handle = await self.open_repository(path)
            uri = str(DocumentUri.status(handle.root))
            _ = self.provider.provide_text(uri)
            await self.host.open_document(uri)
        except Exception as e:  # noqa: BLE001
            _ = await self.dispatcher.formatter.handle(None, e)
            return None
        return uri

    async def run(self, name: str, editor: Editor) -> None:
        """Run the command called ``name`` from ``editor``.

        Raises:
            KeyError: If there is no such command.
        """
        await self.commands[name](editor)
