from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

import pytest

from folio.context import FolioContext
from folio.host import Editor
from folio.repository import FakePlumbing, RepositoryState
from folio.state import RepositoryHandle
from folio.views import DocumentView

from tests.conftest import RecordingHost


@dataclass(slots=True)
class Session:
    """An opened status document over fake plumbing."""

    context: FolioContext
    plumbing: FakePlumbing
    host: RecordingHost
    root: Path
    uri: str

    @property
    def view(self) -> DocumentView:
        view = self.context.views.get(self.uri)
        assert view is not None
        return view

    @property
    def text(self) -> str:
        return self.view.text

    @property
    def handle(self) -> RepositoryHandle:
        handle = self.context.repositories.for_root(self.root)
        assert handle is not None
        return handle

    @property
    def state(self) -> RepositoryState:
        return self.plumbing.states[self.root]

    def cursor(self, needle: str) -> int:
        """Offset of the first occurrence of ``needle`` in the document."""
        return self.text.index(needle)

    async def run(self, name: str, needle: str | None = None, *, cursor: int = 0, uri: str | None = None) -> None:
        offset = self.cursor(needle) if needle is not None else cursor
        await self.context.run(name, Editor(uri or self.uri, offset))


OpenSession = Callable[..., Awaitable[Session]]


@pytest.fixture
def open_session(
    make_context: Callable[..., FolioContext],
    plumbing: FakePlumbing,
    host: RecordingHost,
    repo_root: Path,
) -> OpenSession:
    """Return a coroutine function opening the status document of a state."""

    async def _open(state: RepositoryState, **config: object) -> Session:
        root = plumbing.add_repository(repo_root, state)
        context = make_context(**config)
        uri = await context.status(repo_root)
        assert uri is not None
        host.documents.clear()
        plumbing.calls.clear()
        return Session(context, plumbing, host, root, uri)

    return _open
