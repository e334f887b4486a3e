"""Document text provider.

The provider is what the host asks for document text. It never fetches
repository state itself; it renders whatever the handle currently holds and
tells listeners when a document's text has changed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, final

from folio.enums import ViewKind
from folio.exceptions import RepositoryNotFoundError, UnknownViewError
from folio.views._uri import DocumentUri
from folio.views._view import StatusView

if TYPE_CHECKING:
    from collections.abc import Callable

    from structlog.typing import FilteringBoundLogger

    from folio.document import RenderOptions
    from folio.state import RepositoryHandle, RepositoryRegistry, ViewRegistry
    from folio.views._view import DocumentView


@final
class DocumentProvider:
    """Serves document text and change notifications for folio URIs."""

    __slots__ = ("_listeners", "_logger", "options", "repositories", "views")

    def __init__(
        self,
        repositories: RepositoryRegistry,
        views: ViewRegistry,
        *,
        logger: FilteringBoundLogger,
        options: RenderOptions | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            repositories: Open repository handles.
            views: Open document views.
            logger: Logger for view lifecycle events.
            options: Render options for new status views.
        """
        self.repositories: RepositoryRegistry = repositories
        self.views: ViewRegistry = views
        self.options: RenderOptions | None = options
        self._listeners: list[Callable[[str], None]] = []
        self._logger: FilteringBoundLogger = logger

    def resolve_handle(self, uri: DocumentUri) -> RepositoryHandle:
        """Return the handle of the repository ``uri`` names.

        Raises:
            RepositoryNotFoundError: If the repository is not open.
        """
        handle = self.repositories.for_root(uri.root)
        if handle is None:
            msg = f"No open repository at {uri.root}"
            raise RepositoryNotFoundError(msg, path=uri.root)
        return handle

    def get_view(self, uri: str) -> DocumentView:
        """Return the view for ``uri``, creating status views on demand.

        Raises:
            DocumentUriError: If ``uri`` is not a folio URI.
            RepositoryNotFoundError: If the repository is not open.
            UnknownViewError: If a detail view was never opened.
        """
        parsed = DocumentUri.parse(uri)
        handle = self.resolve_handle(parsed)
        key = str(parsed)

        view = self.views.get(key)
        if view is not None:
            return view
        if parsed.kind != ViewKind.STATUS:
            msg = f"No open {parsed.kind.value} document"
            raise UnknownViewError(msg, uri=key)

        self._logger.debug("view_created", uri=key)
        return self.views.get_or_create(key, lambda: StatusView(parsed, handle, options=self.options))

    def provide_text(self, uri: str) -> str:
        """Render and return the current text of ``uri``."""
        return self.get_view(uri).update()

    def add_view(self, view: DocumentView) -> DocumentView:
        """Register an opened detail view, replacing any previous one."""
        _ = self.views.remove(view.uri)
        self._logger.debug("view_created", uri=view.uri)
        return self.views.get_or_create(view.uri, lambda: view)

    def on_did_change(self, listener: Callable[[str], None]) -> Callable[[], None]:
        """Register a listener called with the URI of every changed document.

        Returns:
            A callable that unregisters the listener.
        """
        self._listeners.append(listener)

        def dispose() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return dispose

    def notify_changed(self, uri: str) -> None:
        """Tell every listener that the text of ``uri`` changed."""
        for listener in list(self._listeners):
            listener(uri)

    def update_views(self, handle: RepositoryHandle) -> list[str]:
        """Re-render every view of ``handle`` and notify listeners.

        Stale views, such as the detail document of a dropped stash, are
        closed instead of re-rendered.

        Returns:
            URIs of the re-rendered views.
        """
        uris: list[str] = []
        for view in self.views.for_handle(handle):
            if view.stale:
                _ = self.views.remove(view.uri)
                self._logger.info("view_closed", uri=view.uri, reason="stale")
                continue
            _ = view.update()
            uris.append(view.uri)
            self.notify_changed(view.uri)
        return uris
