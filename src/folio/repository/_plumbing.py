"""Asynchronous plumbing backed by the real git repository.

``GitPlumbing`` satisfies ``PlumbingProtocol`` by opening a short-lived
``GitRepository`` per call and running it in a worker thread, so the event
loop never blocks on disk or subprocess I/O and concurrent facet fetches never
share dulwich file handles.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

import anyio.to_thread

from folio.exceptions import UnexpectedError
from folio.repository._errors import DULWICH_ERRORS, translate_dulwich_error
from folio.repository._git import GitRepository

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from folio.repository._models import (
        CommitDetail,
        CommitInfo,
        CommitResult,
        FileChange,
        HeadInfo,
        Hunk,
        InProgressOperation,
        Remote,
        StashDetail,
        StashEntry,
    )


class GitPlumbing:
    """Plumbing that operates on repositories on disk.

    Attributes:
        executable: Name or path of the git executable.
        timeout: Seconds before a git subprocess is abandoned, or None.
    """

    __slots__: Final = ("executable", "timeout")

    def __init__(self, *, executable: str = "git", timeout: float | None = None) -> None:
        self.executable: str = executable
        self.timeout: float | None = timeout

    async def _call[T](self, root: Path, operation: Callable[[GitRepository], T]) -> T:
        def run() -> T:
            try:
                with GitRepository(root, executable=self.executable, timeout=self.timeout) as repo:
                    return operation(repo)
            except DULWICH_ERRORS as e:
                raise translate_dulwich_error(e) or UnexpectedError(str(e), cause=e) from e

        return await anyio.to_thread.run_sync(run)

    # -------------------------------------------------------------------------
    # Facets
    # -------------------------------------------------------------------------

    async def get_head(self, root: Path) -> HeadInfo | None:
        return await self._call(root, lambda repo: repo.get_head())

    async def get_untracked(self, root: Path) -> tuple[Path, ...]:
        return await self._call(root, lambda repo: repo.get_untracked())

    async def get_unstaged(self, root: Path, *, context_lines: int = 3) -> tuple[FileChange, ...]:
        return await self._call(root, lambda repo: repo.get_unstaged(context_lines=context_lines))

    async def get_staged(self, root: Path, *, context_lines: int = 3) -> tuple[FileChange, ...]:
        return await self._call(root, lambda repo: repo.get_staged(context_lines=context_lines))

    async def get_stashes(self, root: Path) -> tuple[StashEntry, ...]:
        return await self._call(root, lambda repo: repo.get_stashes())

    async def get_commits(self, root: Path, *, count: int = 10) -> tuple[CommitInfo, ...]:
        return await self._call(root, lambda repo: repo.get_commits(count=count))

    async def get_remotes(self, root: Path) -> tuple[Remote, ...]:
        return await self._call(root, lambda repo: repo.get_remotes())

    async def get_branches(self, root: Path) -> tuple[str, ...]:
        return await self._call(root, lambda repo: repo.get_branches())

    async def get_in_progress(self, root: Path) -> InProgressOperation | None:
        return await self._call(root, lambda repo: repo.get_in_progress())

    # -------------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------------

    async def show_commit(self, root: Path, sha: str, *, context_lines: int = 3) -> CommitDetail:
        return await self._call(
            root, lambda repo: repo.show_commit(sha, context_lines=context_lines)
        )

    async def show_stash(self, root: Path, index: int, *, context_lines: int = 3) -> StashDetail:
        return await self._call(
            root, lambda repo: repo.show_stash(index, context_lines=context_lines)
        )

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def stage(self, root: Path, paths: Iterable[Path]) -> None:
        path_list = list(paths)
        await self._call(root, lambda repo: repo.stage(path_list))

    async def stage_all(self, root: Path) -> None:
        await self._call(root, lambda repo: repo.stage_all())

    async def unstage(self, root: Path, paths: Iterable[Path]) -> None:
        path_list = list(paths)
        await self._call(root, lambda repo: repo.unstage(path_list))

    async def unstage_all(self, root: Path) -> None:
        await self._call(root, lambda repo: repo.unstage_all())

    async def commit(self, root: Path, message: str) -> CommitResult:
        return await self._call(root, lambda repo: repo.commit(message))

    async def apply_hunk(
        self, root: Path, change: FileChange, hunk: Hunk, *, reverse: bool = False
    ) -> None:
        await self._call(root, lambda repo: repo.apply_hunk(change, hunk, reverse=reverse))

    async def discard_hunk(
        self, root: Path, change: FileChange, hunk: Hunk, *, staged: bool = False
    ) -> None:
        await self._call(root, lambda repo: repo.discard_hunk(change, hunk, staged=staged))

    async def discard_file(self, root: Path, change: FileChange, *, staged: bool = False) -> None:
        await self._call(root, lambda repo: repo.discard_file(change, staged=staged))

    async def delete_untracked(self, root: Path, path: Path) -> None:
        await self._call(root, lambda repo: repo.delete_untracked(path))

    async def fetch(self, root: Path, remote: str | None = None) -> None:
        await self._call(root, lambda repo: repo.fetch(remote))

    async def pull(self, root: Path) -> None:
        await self._call(root, lambda repo: repo.pull())

    async def push(
        self,
        root: Path,
        remote: str | None = None,
        branch: str | None = None,
        *,
        set_upstream: bool = False,
    ) -> None:
        await self._call(
            root, lambda repo: repo.push(remote, branch, set_upstream=set_upstream)
        )

    async def checkout(self, root: Path, ref: str) -> None:
        await self._call(root, lambda repo: repo.checkout(ref))

    async def create_branch(self, root: Path, name: str, start_point: str | None = None) -> None:
        await self._call(root, lambda repo: repo.create_branch(name, start_point))

    async def merge(self, root: Path, ref: str) -> None:
        await self._call(root, lambda repo: repo.merge(ref))

    async def rebase(self, root: Path, onto: str) -> None:
        await self._call(root, lambda repo: repo.rebase(onto))

    async def stash(self, root: Path, message: str = "") -> None:
        await self._call(root, lambda repo: repo.stash(message))

    async def apply_stash(self, root: Path, index: int) -> None:
        await self._call(root, lambda repo: repo.apply_stash(index))

    async def drop_stash(self, root: Path, index: int) -> None:
        await self._call(root, lambda repo: repo.drop_stash(index))

    async def cherry_pick(self, root: Path, sha: str) -> None:
        await self._call(root, lambda repo: repo.cherry_pick(sha))
