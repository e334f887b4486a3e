# ruff: noqa: TC003  # Path needed at runtime for Protocol method signatures
"""Plumbing protocol for type-safe dependency injection.

This module defines the runtime-checkable Protocol that both GitPlumbing and
FakePlumbing satisfy. Everything above the plumbing (refresh, commands, the
CLI) talks to repositories only through this interface.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

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


@runtime_checkable
class PlumbingProtocol(Protocol):
    """Protocol for asynchronous repository operations.

    Every method takes the repository root first. Failures git recognizes
    are raised as ``RepositoryError`` carrying a ``GitErrorCode``; anything
    else is unexpected and may be raised as ``UnexpectedError`` or as any
    other exception.

    Facet fetches are independent of each other so the refresh cycle can run
    them concurrently and degrade each one separately.
    """

    # -------------------------------------------------------------------------
    # Facets
    # -------------------------------------------------------------------------

    async def get_head(self, root: Path) -> HeadInfo | None:
        """Describe HEAD, its upstream and push target."""
        ...

    async def get_untracked(self, root: Path) -> tuple[Path, ...]:
        """List untracked files, repository-relative."""
        ...

    async def get_unstaged(self, root: Path, *, context_lines: int = 3) -> tuple[FileChange, ...]:
        """Diff the working tree against the index."""
        ...

    async def get_staged(self, root: Path, *, context_lines: int = 3) -> tuple[FileChange, ...]:
        """Diff the index against HEAD."""
        ...

    async def get_stashes(self, root: Path) -> tuple[StashEntry, ...]:
        """List stash entries, newest first."""
        ...

    async def get_commits(self, root: Path, *, count: int = 10) -> tuple[CommitInfo, ...]:
        """List recent commits, newest first."""
        ...

    async def get_remotes(self, root: Path) -> tuple[Remote, ...]:
        """List configured remotes."""
        ...

    async def get_branches(self, root: Path) -> tuple[str, ...]:
        """List local and remote-tracking branch names."""
        ...

    async def get_in_progress(self, root: Path) -> InProgressOperation | None:
        """Detect an unfinished merge, rebase or cherry-pick."""
        ...

    # -------------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------------

    async def show_commit(self, root: Path, sha: str, *, context_lines: int = 3) -> CommitDetail:
        """Get a commit and the changes it introduced."""
        ...

    async def show_stash(self, root: Path, index: int, *, context_lines: int = 3) -> StashDetail:
        """Get a stash entry and the changes it records."""
        ...

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def stage(self, root: Path, paths: Iterable[Path]) -> None:
        """Stage files (untracked, modified or deleted)."""
        ...

    async def stage_all(self, root: Path) -> None:
        """Stage every tracked change."""
        ...

    async def unstage(self, root: Path, paths: Iterable[Path]) -> None:
        """Reset index entries to HEAD."""
        ...

    async def unstage_all(self, root: Path) -> None:
        """Reset the whole index to HEAD."""
        ...

    async def commit(self, root: Path, message: str) -> CommitResult:
        """Commit the index."""
        ...

    async def apply_hunk(
        self, root: Path, change: FileChange, hunk: Hunk, *, reverse: bool = False
    ) -> None:
        """Apply a hunk to the index, or reverse-apply it."""
        ...

    async def discard_hunk(
        self, root: Path, change: FileChange, hunk: Hunk, *, staged: bool = False
    ) -> None:
        """Reverse a hunk in the working tree (and the index if staged)."""
        ...

    async def discard_file(self, root: Path, change: FileChange, *, staged: bool = False) -> None:
        """Throw away the changes to one file."""
        ...

    async def delete_untracked(self, root: Path, path: Path) -> None:
        """Delete an untracked file."""
        ...

    async def fetch(self, root: Path, remote: str | None = None) -> None:
        """Fetch from a remote."""
        ...

    async def pull(self, root: Path) -> None:
        """Pull the current branch's upstream."""
        ...

    async def push(
        self,
        root: Path,
        remote: str | None = None,
        branch: str | None = None,
        *,
        set_upstream: bool = False,
    ) -> None:
        """Push the current branch."""
        ...

    async def checkout(self, root: Path, ref: str) -> None:
        """Switch the working tree to a branch."""
        ...

    async def create_branch(self, root: Path, name: str, start_point: str | None = None) -> None:
        """Create a branch at ``start_point`` (HEAD when None) and switch to it."""
        ...

    async def merge(self, root: Path, ref: str) -> None:
        """Merge a branch into the current branch."""
        ...

    async def rebase(self, root: Path, onto: str) -> None:
        """Rebase the current branch onto another."""
        ...

    async def stash(self, root: Path, message: str = "") -> None:
        """Stash local changes."""
        ...

    async def apply_stash(self, root: Path, index: int) -> None:
        """Apply a stash entry."""
        ...

    async def drop_stash(self, root: Path, index: int) -> None:
        """Drop a stash entry."""
        ...

    async def cherry_pick(self, root: Path, sha: str) -> None:
        """Apply a commit's changes without committing."""
        ...
