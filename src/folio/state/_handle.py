"""Per-repository handle."""

from __future__ import annotations

from typing import TYPE_CHECKING, final

import anyio

from folio.repository import RepositoryState

if TYPE_CHECKING:
    from pathlib import Path


@final
class RepositoryHandle:
    """Live state of one repository.

    The handle's root never changes. Its state is replaced wholesale by each
    refresh and never mutated in place, so readers always see a complete
    snapshot.

    Attributes:
        root: Resolved working tree root.
        state: Most recent snapshot.
        latest_error: Message of the last repository error, shown at the top
            of the status document.
        lock: Serializes commands against this repository.
    """

    __slots__ = ("_error_pending", "latest_error", "lock", "root", "state")

    def __init__(self, root: Path, state: RepositoryState | None = None) -> None:
        self.root: Path = root.resolve()
        self.state: RepositoryState = state if state is not None else RepositoryState.empty()
        self.latest_error: str | None = None
        self.lock: anyio.Lock = anyio.Lock()
        self._error_pending: bool = False

    def __repr__(self) -> str:
        return f"RepositoryHandle(root={self.root!r})"

    @property
    def key(self) -> str:
        """Registry key of this handle."""
        return str(self.root)

    def record_error(self, message: str) -> None:
        """Store a repository error to be shown by the next render.

        The error survives the refresh that follows the failing command and
        is cleared by the successful refresh after that.
        """
        self.latest_error = message
        self._error_pending = True

    def clear_error(self) -> None:
        """Forget the latest error."""
        self.latest_error = None
        self._error_pending = False

    def swap_state(self, state: RepositoryState) -> None:
        """Install a freshly fetched snapshot in one assignment."""
        self.state = state
        if self._error_pending:
            self._error_pending = False
        else:
            self.latest_error = None
