"""Repository state refresh."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final, final

import anyio

from folio.exceptions import RepositoryUnavailableError
from folio.repository import RepositoryState

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

    from folio.repository import PlumbingProtocol
    from folio.state._handle import RepositoryHandle

FACETS: Final = (
    "head",
    "untracked",
    "unstaged",
    "staged",
    "stashes",
    "commits",
    "remotes",
    "branches",
    "in_progress",
)


@final
class Refresher:
    """Fetches a complete state snapshot and swaps it onto a handle.

    Every facet is fetched concurrently. A facet that fails is logged and
    left at its empty default so the rest of the document still renders.
    """

    __slots__ = ("_logger", "commit_count", "context_lines", "plumbing")

    def __init__(
        self,
        plumbing: PlumbingProtocol,
        *,
        logger: FilteringBoundLogger,
        context_lines: int = 3,
        commit_count: int = 10,
    ) -> None:
        """Initialize the refresher.

        Args:
            plumbing: Plumbing to fetch facets through.
            logger: Logger for degraded facets.
            context_lines: Context lines around diff hunks.
            commit_count: Number of recent commits to fetch.
        """
        self.plumbing: PlumbingProtocol = plumbing
        self.context_lines: int = context_lines
        self.commit_count: int = commit_count
        self._logger: FilteringBoundLogger = logger

    async def refresh(self, handle: RepositoryHandle) -> RepositoryState:
        """Re-fetch all state for ``handle`` and install it.

        Args:
            handle: Handle to refresh.

        Returns:
            The newly installed snapshot.

        Raises:
            RepositoryUnavailableError: If the repository root no longer exists.
        """
        if not await anyio.Path(handle.root).exists():
            msg = f"Repository no longer exists: {handle.root}"
            raise RepositoryUnavailableError(msg, path=handle.root)

        fetched: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]
        async with anyio.create_task_group() as tg:
            for facet, fetch in self._fetchers(handle.root).items():
                tg.start_soon(self._fetch_facet, handle.root, facet, fetch, fetched)

        state = RepositoryState(**fetched)
        handle.swap_state(state)
        self._logger.debug(
            "repository_refreshed",
            root=str(handle.root),
            unstaged=len(state.unstaged),
            staged=len(state.staged),
            untracked=len(state.untracked),
        )
        return state

    def _fetchers(self, root: Path) -> dict[str, Callable[[], Awaitable[object]]]:
        plumbing = self.plumbing
        return {
            "head": lambda: plumbing.get_head(root),
            "untracked": lambda: plumbing.get_untracked(root),
            "unstaged": lambda: plumbing.get_unstaged(root, context_lines=self.context_lines),
            "staged": lambda: plumbing.get_staged(root, context_lines=self.context_lines),
            "stashes": lambda: plumbing.get_stashes(root),
            "commits": lambda: plumbing.get_commits(root, count=self.commit_count),
            "remotes": lambda: plumbing.get_remotes(root),
            "branches": lambda: plumbing.get_branches(root),
            "in_progress": lambda: plumbing.get_in_progress(root),
        }

    async def _fetch_facet(
        self,
        root: Path,
        facet: str,
        fetch: Callable[[], Awaitable[object]],
        fetched: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    ) -> None:
        try:
            fetched[facet] = await fetch()
        except Exception as e:  # noqa: BLE001
            self._logger.warning(
                "refresh_facet_failed",
                root=str(root),
                facet=facet,
                error=str(e),
                error_type=type(e).__name__,
            )
