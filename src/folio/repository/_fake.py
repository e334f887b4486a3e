# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
"""Fake plumbing for testing.

This module provides a FakePlumbing class that implements PlumbingProtocol
in memory, without requiring a git repository or the git executable.
"""

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from pathlib import Path

import anyio

from folio.enums import ChangeStatus, GitErrorCode
from folio.exceptions import RepositoryError
from folio.repository._models import (
    CommitDetail,
    CommitInfo,
    CommitResult,
    FileChange,
    HeadInfo,
    Hunk,
    InProgressOperation,
    Remote,
    RepositoryState,
    StashDetail,
    StashEntry,
)


@dataclass(slots=True)
class FakePlumbing:
    """In-memory plumbing for testing.

    Each registered repository is a ``RepositoryState`` that mutations
    replace with an updated copy, mimicking what git would report afterwards:
    staging moves a change from the unstaged to the staged list, unstaging a
    modified file moves it back, unstaging a new file makes it untracked, and
    so on.

    Failures can be injected per facet (``fail_facet``) and per operation
    (``fail_operation``); every call is recorded in ``calls``.

    Example:
        >>> plumbing = FakePlumbing()
        >>> root = plumbing.add_repository(
        ...     Path("/fake/project"),
        ...     RepositoryState(staged=(FileChange(Path("a.txt")),)),
        ... )
        >>> anyio.run(plumbing.unstage, root, [Path("a.txt")])
        >>> plumbing.states[root].unstaged[0].path
        PosixPath('a.txt')
    """

    states: dict[Path, RepositoryState] = field(default_factory=dict)
    commit_details: dict[str, CommitDetail] = field(default_factory=dict)
    stash_changes: dict[str, tuple[FileChange, ...]] = field(default_factory=dict)
    facet_failures: dict[str, BaseException] = field(default_factory=dict)
    operation_failures: dict[str, BaseException] = field(default_factory=dict)
    calls: list[tuple[str, Path, tuple[object, ...]]] = field(default_factory=list)
    _commit_counter: int = field(default=0)

    # =========================================================================
    # Test Setup
    # =========================================================================

    def add_repository(self, root: Path, state: RepositoryState | None = None) -> Path:
        """Register a repository and return its resolved root."""
        resolved = root.resolve()
        self.states[resolved] = state if state is not None else RepositoryState.empty()
        return resolved

    def fail_facet(self, facet: str, error: BaseException | None = None) -> None:
        """Make a facet fetch (e.g. ``"stashes"``) raise until cleared."""
        self.facet_failures[facet] = error or RepositoryError(
            GitErrorCode.REPOSITORY_IS_LOCKED, f"{facet} unavailable"
        )

    def fail_operation(self, operation: str, error: BaseException) -> None:
        """Make a mutation (e.g. ``"commit"``) raise until cleared."""
        self.operation_failures[operation] = error

    def called(self, name: str) -> list[tuple[object, ...]]:
        """Return the argument tuples of every recorded call to ``name``."""
        return [args for call, _root, args in self.calls if call == name]

    # =========================================================================
    # Internals
    # =========================================================================

    def _state(self, root: Path) -> RepositoryState:
        try:
            return self.states[root.resolve()]
        except KeyError:
            msg = f"not a git repository: {root}"
            raise RepositoryError(GitErrorCode.NOT_A_GIT_REPOSITORY, msg) from None

    def _set(self, root: Path, state: RepositoryState) -> None:
        self.states[root.resolve()] = state

    async def _facet(self, root: Path, facet: str) -> RepositoryState:
        await anyio.sleep(0)
        self.calls.append((f"get_{facet}", root, ()))
        state = self._state(root)
        if facet in self.facet_failures:
            raise self.facet_failures[facet]
        return state

    async def _operation(self, root: Path, name: str, *args: object) -> RepositoryState:
        await anyio.sleep(0)
        self.calls.append((name, root, args))
        state = self._state(root)
        if name in self.operation_failures:
            raise self.operation_failures[name]
        return state

    # =========================================================================
    # Facets
    # =========================================================================

    async def get_head(self, root: Path) -> HeadInfo | None:
        return (await self._facet(root, "head")).head

    async def get_untracked(self, root: Path) -> tuple[Path, ...]:
        return (await self._facet(root, "untracked")).untracked

    async def get_unstaged(self, root: Path, *, context_lines: int = 3) -> tuple[FileChange, ...]:
        return (await self._facet(root, "unstaged")).unstaged

    async def get_staged(self, root: Path, *, context_lines: int = 3) -> tuple[FileChange, ...]:
        return (await self._facet(root, "staged")).staged

    async def get_stashes(self, root: Path) -> tuple[StashEntry, ...]:
        return (await self._facet(root, "stashes")).stashes

    async def get_commits(self, root: Path, *, count: int = 10) -> tuple[CommitInfo, ...]:
        return (await self._facet(root, "commits")).commits[:count]

    async def get_remotes(self, root: Path) -> tuple[Remote, ...]:
        return (await self._facet(root, "remotes")).remotes

    async def get_branches(self, root: Path) -> tuple[str, ...]:
        return (await self._facet(root, "branches")).branches

    async def get_in_progress(self, root: Path) -> InProgressOperation | None:
        return (await self._facet(root, "in_progress")).in_progress

    # =========================================================================
    # Details
    # =========================================================================

    async def show_commit(self, root: Path, sha: str, *, context_lines: int = 3) -> CommitDetail:
        state = await self._operation(root, "show_commit", sha)
        if sha in self.commit_details:
            return self.commit_details[sha]
        for commit in state.commits:
            if commit.sha == sha:
                return CommitDetail(commit=commit)
        raise RepositoryError(GitErrorCode.BRANCH_NOT_FOUND, f"unknown revision {sha}")

    async def show_stash(self, root: Path, index: int, *, context_lines: int = 3) -> StashDetail:
        state = await self._operation(root, "show_stash", index)
        stash = _find_stash(state, index)
        return StashDetail(stash=stash, changes=self.stash_changes.get(stash.sha, ()))

    # =========================================================================
    # Staging
    # =========================================================================

    async def stage(self, root: Path, paths: Iterable[Path]) -> None:
        path_list = list(paths)
        state = await self._operation(root, "stage", tuple(path_list))
        for path in path_list:
            if path in state.untracked:
                state = replace(
                    state,
                    untracked=tuple(p for p in state.untracked if p != path),
                    staged=_merge(state.staged, FileChange(path, ChangeStatus.ADDED)),
                )
                continue
            change = _find(state.unstaged, path)
            if change is not None:
                state = replace(
                    state,
                    unstaged=_without(state.unstaged, path),
                    staged=_merge(state.staged, change),
                )
        self._set(root, state)

    async def stage_all(self, root: Path) -> None:
        state = await self._operation(root, "stage_all")
        staged = state.staged
        for change in state.unstaged:
            staged = _merge(staged, change)
        self._set(root, replace(state, unstaged=(), staged=staged))

    async def unstage(self, root: Path, paths: Iterable[Path]) -> None:
        path_list = list(paths)
        state = await self._operation(root, "unstage", tuple(path_list))
        for path in path_list:
            state = _unstage_one(state, path)
        self._set(root, state)

    async def unstage_all(self, root: Path) -> None:
        state = await self._operation(root, "unstage_all")
        for change in state.staged:
            state = _unstage_one(state, change.path)
        self._set(root, state)

    async def commit(self, root: Path, message: str) -> CommitResult:
        state = await self._operation(root, "commit", message)
        if not state.staged:
            raise RepositoryError(GitErrorCode.NO_LOCAL_CHANGES, "nothing added to commit")

        self._commit_counter += 1
        sha = hashlib.sha1(
            f"{self._commit_counter}:{message}".encode(), usedforsecurity=False
        ).hexdigest()
        parent = state.head.commit.sha if state.head and state.head.commit else None
        commit = CommitInfo(
            sha=sha,
            message=message,
            author_name="Fake Author",
            author_email="fake@example.com",
            parent_shas=(parent,) if parent else (),
        )
        self.commit_details[sha] = CommitDetail(commit=commit, changes=state.staged)
        head = replace(state.head, commit=commit) if state.head else HeadInfo(branch="main", commit=commit)
        self._set(
            root,
            replace(state, staged=(), commits=(commit, *state.commits), head=head),
        )
        return CommitResult(sha=sha, files=frozenset(c.path for c in state.staged))

    # =========================================================================
    # Hunks and Discards
    # =========================================================================

    async def apply_hunk(
        self, root: Path, change: FileChange, hunk: Hunk, *, reverse: bool = False
    ) -> None:
        state = await self._operation(root, "apply_hunk", change.path, hunk.identity, reverse)
        source, target = ("staged", "unstaged") if reverse else ("unstaged", "staged")
        remaining = _remove_hunk(getattr(state, source), change.path, hunk)
        moved = _merge(getattr(state, target), replace(change, hunks=(hunk,)))
        self._set(root, replace(state, **{source: remaining, target: moved}))

    async def discard_hunk(
        self, root: Path, change: FileChange, hunk: Hunk, *, staged: bool = False
    ) -> None:
        state = await self._operation(root, "discard_hunk", change.path, hunk.identity, staged)
        if staged:
            self._set(root, replace(state, staged=_remove_hunk(state.staged, change.path, hunk)))
        else:
            self._set(root, replace(state, unstaged=_remove_hunk(state.unstaged, change.path, hunk)))

    async def discard_file(self, root: Path, change: FileChange, *, staged: bool = False) -> None:
        state = await self._operation(root, "discard_file", change.path, staged)
        if not staged:
            self._set(root, replace(state, unstaged=_without(state.unstaged, change.path)))
            return
        state = replace(
            state,
            staged=_without(state.staged, change.path),
            unstaged=_without(state.unstaged, change.path),
        )
        if change.status == ChangeStatus.ADDED:
            state = replace(state, untracked=tuple(sorted((*state.untracked, change.path))))
        self._set(root, state)

    async def delete_untracked(self, root: Path, path: Path) -> None:
        state = await self._operation(root, "delete_untracked", path)
        self._set(root, replace(state, untracked=tuple(p for p in state.untracked if p != path)))

    # =========================================================================
    # Remotes and Branching
    # =========================================================================

    async def fetch(self, root: Path, remote: str | None = None) -> None:
        _ = await self._operation(root, "fetch", remote)

    async def pull(self, root: Path) -> None:
        _ = await self._operation(root, "pull")

    async def push(
        self,
        root: Path,
        remote: str | None = None,
        branch: str | None = None,
        *,
        set_upstream: bool = False,
    ) -> None:
        state = await self._operation(root, "push", remote, branch, set_upstream)
        if set_upstream and remote and branch and state.head is not None:
            upstream = f"{remote}/{branch}"
            self._set(root, replace(state, head=replace(state.head, upstream=upstream, push_ref=upstream)))

    async def checkout(self, root: Path, ref: str) -> None:
        state = await self._operation(root, "checkout", ref)
        if ref not in state.branches:
            msg = f"pathspec '{ref}' did not match any file(s) known to git"
            raise RepositoryError(GitErrorCode.BRANCH_NOT_FOUND, msg)
        self._set(root, replace(state, head=_switched(state.head, ref)))

    async def create_branch(self, root: Path, name: str, start_point: str | None = None) -> None:
        state = await self._operation(root, "create_branch", name, start_point)
        if name in state.branches:
            msg = f"A branch named '{name}' already exists."
            raise RepositoryError(GitErrorCode.BRANCH_ALREADY_EXISTS, msg)
        if start_point is not None and start_point not in state.branches:
            raise RepositoryError(GitErrorCode.BRANCH_NOT_FOUND, f"'{start_point}' is not a commit")
        branches = tuple(sorted((*state.branches, name)))
        self._set(root, replace(state, branches=branches, head=_switched(state.head, name)))

    async def merge(self, root: Path, ref: str) -> None:
        state = await self._operation(root, "merge", ref)
        if ref not in state.branches:
            raise RepositoryError(GitErrorCode.BRANCH_NOT_FOUND, f"{ref} - not something we can merge")

    async def rebase(self, root: Path, onto: str) -> None:
        state = await self._operation(root, "rebase", onto)
        if onto not in state.branches:
            raise RepositoryError(GitErrorCode.BRANCH_NOT_FOUND, f"invalid upstream '{onto}'")

    # =========================================================================
    # Stashes and Cherry-picks
    # =========================================================================

    async def stash(self, root: Path, message: str = "") -> None:
        state = await self._operation(root, "stash", message)
        changes = (*state.staged, *state.unstaged)
        if not changes:
            raise RepositoryError(GitErrorCode.NO_LOCAL_CHANGES, "No local changes to save")

        branch = state.head.branch if state.head and state.head.branch else "(no branch)"
        sha = hashlib.sha1(
            f"stash:{len(state.stashes)}:{message}".encode(), usedforsecurity=False
        ).hexdigest()
        self.stash_changes[sha] = changes
        entry = StashEntry(index=0, message=f"On {branch}: {message or 'WIP'}", sha=sha)
        stashes = (entry, *(replace(s, index=s.index + 1) for s in state.stashes))
        self._set(root, replace(state, staged=(), unstaged=(), stashes=stashes))

    async def apply_stash(self, root: Path, index: int) -> None:
        state = await self._operation(root, "apply_stash", index)
        stash = _find_stash(state, index)
        unstaged = state.unstaged
        for change in self.stash_changes.get(stash.sha, ()):
            unstaged = _merge(unstaged, change)
        self._set(root, replace(state, unstaged=unstaged))

    async def drop_stash(self, root: Path, index: int) -> None:
        state = await self._operation(root, "drop_stash", index)
        _ = _find_stash(state, index)
        stashes = tuple(
            replace(s, index=s.index - 1) if s.index > index else s
            for s in state.stashes
            if s.index != index
        )
        self._set(root, replace(state, stashes=stashes))

    async def cherry_pick(self, root: Path, sha: str) -> None:
        state = await self._operation(root, "cherry_pick", sha)
        detail = self.commit_details.get(sha)
        if detail is None:
            raise RepositoryError(GitErrorCode.BRANCH_NOT_FOUND, f"bad revision '{sha}'")
        staged = state.staged
        for change in detail.changes:
            staged = _merge(staged, change)
        self._set(root, replace(state, staged=staged))


def _find(changes: tuple[FileChange, ...], path: Path) -> FileChange | None:
    return next((c for c in changes if c.path == path), None)


def _without(changes: tuple[FileChange, ...], path: Path) -> tuple[FileChange, ...]:
    return tuple(c for c in changes if c.path != path)


def _merge(changes: tuple[FileChange, ...], change: FileChange) -> tuple[FileChange, ...]:
    """Add a change to a list, combining hunks with an existing entry."""
    existing = _find(changes, change.path)
    if existing is not None:
        hunks = tuple(
            sorted(
                {h.identity: h for h in (*existing.hunks, *change.hunks)}.values(),
                key=lambda h: (h.old_start, h.new_start),
            )
        )
        change = replace(existing, hunks=hunks)
    return tuple(sorted((*_without(changes, change.path), change), key=lambda c: c.path.as_posix()))


def _remove_hunk(
    changes: tuple[FileChange, ...], path: Path, hunk: Hunk
) -> tuple[FileChange, ...]:
    existing = _find(changes, path)
    if existing is None:
        return changes
    hunks = tuple(h for h in existing.hunks if h.identity != hunk.identity)
    if not hunks:
        return _without(changes, path)
    return tuple(replace(c, hunks=hunks) if c.path == path else c for c in changes)


def _unstage_one(state: RepositoryState, path: Path) -> RepositoryState:
    change = _find(state.staged, path)
    if change is None:
        return state
    state = replace(state, staged=_without(state.staged, path))
    if change.status == ChangeStatus.ADDED:
        return replace(state, untracked=tuple(sorted((*state.untracked, path))))
    return replace(state, unstaged=_merge(state.unstaged, change))


def _find_stash(state: RepositoryState, index: int) -> StashEntry:
    for stash in state.stashes:
        if stash.index == index:
            return stash
    msg = f"stash@{{{index}}} is not a valid reference"
    raise RepositoryError(GitErrorCode.NO_STASH_FOUND, msg)


def _switched(head: HeadInfo | None, branch: str) -> HeadInfo:
    # A switched-to branch has no upstream until one is configured.
    commit = head.commit if head is not None else None
    return HeadInfo(branch=branch, commit=commit)
