# ruff: noqa: TC003  # Path and datetime needed at runtime for dataclass fields
"""Repository state models.

This module defines the immutable data structures that describe a snapshot
of repository state. A snapshot is built completely by the refresh cycle and
then swapped onto a repository handle in one assignment, so nothing here is
ever mutated after construction.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Self

from folio.enums import ChangeStatus, InProgressKind


@dataclass(frozen=True, slots=True)
class Hunk:
    """A single hunk of a unified diff.

    Attributes:
        header: The full ``@@ -a,b +c,d @@ ...`` line.
        old_start: First line of the hunk in the old file.
        old_count: Number of old-file lines covered by the hunk.
        new_start: First line of the hunk in the new file.
        new_count: Number of new-file lines covered by the hunk.
        lines: Hunk body lines, each keeping its ``' '``, ``'+'``, ``'-'``
            or ``'\\'`` prefix and without trailing newline.
    """

    header: str
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: tuple[str, ...] = ()

    @property
    def identity(self) -> str:
        """Stable identifier for this hunk within its file."""
        return f"{self.old_start},{self.new_start}"


@dataclass(frozen=True, slots=True)
class FileChange:
    """A changed file together with its diff hunks.

    Attributes:
        path: Repository-relative path (new path for renames).
        status: How the file changed.
        old_path: Previous path for renames, None otherwise.
        hunks: Diff hunks, in file order.
        binary: True if either side is binary (hunks are then empty).
    """

    path: Path
    status: ChangeStatus = ChangeStatus.MODIFIED
    old_path: Path | None = None
    hunks: tuple[Hunk, ...] = ()
    binary: bool = False


@dataclass(frozen=True, slots=True)
class CommitInfo:
    """Information about a single commit.

    Attributes:
        sha: Full 40-character commit SHA hex string.
        message: Complete commit message (subject + body).
        author_name: Author name from commit.
        author_email: Author email from commit.
        timestamp: Commit timestamp with the author's timezone.
        parent_shas: SHA hex strings of parent commits.
    """

    sha: str
    message: str
    author_name: str = ""
    author_email: str = ""
    timestamp: datetime | None = None
    parent_shas: tuple[str, ...] = ()

    @property
    def short_sha(self) -> str:
        """Abbreviated SHA as shown in logs."""
        return self.sha[:7]

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        lines = self.message.strip().splitlines()
        return lines[0] if lines else ""


@dataclass(frozen=True, slots=True)
class StashEntry:
    """A single stash entry.

    Attributes:
        index: Position in the stash list (0 is the newest).
        message: Stash message, e.g. ``On main: wip``.
        sha: SHA of the stash commit.
    """

    index: int
    message: str
    sha: str = ""

    @property
    def ref(self) -> str:
        """Reflog-style name of this entry."""
        return f"stash@{{{self.index}}}"


@dataclass(frozen=True, slots=True)
class Remote:
    """A configured remote.

    Attributes:
        name: Remote name, e.g. ``origin``.
        url: Fetch URL.
    """

    name: str
    url: str = ""


@dataclass(frozen=True, slots=True)
class HeadInfo:
    """What HEAD points at.

    Attributes:
        branch: Current branch name, or None when detached.
        commit: HEAD commit, or None in an empty repository.
        upstream: Upstream ref such as ``origin/main``, if configured.
        upstream_commit: Commit the upstream ref points at, if known.
        push_ref: Ref pushes go to, such as ``origin/main``.
        ahead: Commits on HEAD not on the upstream.
        behind: Commits on the upstream not on HEAD.
    """

    branch: str | None = None
    commit: CommitInfo | None = None
    upstream: str | None = None
    upstream_commit: CommitInfo | None = None
    push_ref: str | None = None
    ahead: int = 0
    behind: int = 0

    @property
    def is_detached(self) -> bool:
        """Whether HEAD is detached from any branch."""
        return self.branch is None


@dataclass(frozen=True, slots=True)
class InProgressOperation:
    """A merge, rebase or cherry-pick that has not been finished.

    Attributes:
        kind: Which operation is in progress.
        head: Name of the branch (or commit) being operated on.
        onto: What the operation merges or rebases onto.
    """

    kind: InProgressKind
    head: str = ""
    onto: str = ""


@dataclass(frozen=True, slots=True)
class RepositoryState:
    """Complete snapshot of repository state.

    Every facet has an empty default, so a snapshot with missing facets is
    still a valid snapshot.

    Attributes:
        head: HEAD information, None if unavailable.
        untracked: Repository-relative paths of untracked files.
        unstaged: Changes in the working tree relative to the index.
        staged: Changes in the index relative to HEAD.
        stashes: Stash entries, newest first.
        commits: Recent commits, newest first.
        remotes: Configured remotes.
        branches: Local and remote-tracking branch names.
        in_progress: Unfinished merge/rebase/cherry-pick, if any.
    """

    head: HeadInfo | None = None
    untracked: tuple[Path, ...] = ()
    unstaged: tuple[FileChange, ...] = ()
    staged: tuple[FileChange, ...] = ()
    stashes: tuple[StashEntry, ...] = ()
    commits: tuple[CommitInfo, ...] = ()
    remotes: tuple[Remote, ...] = ()
    branches: tuple[str, ...] = ()
    in_progress: InProgressOperation | None = None

    @classmethod
    def empty(cls) -> Self:
        """Return a snapshot with every facet at its default."""
        return cls()


@dataclass(frozen=True, slots=True)
class CommitDetail:
    """A commit together with the changes it introduced.

    Attributes:
        commit: The commit metadata.
        changes: Per-file changes relative to the first parent.
    """

    commit: CommitInfo
    changes: tuple[FileChange, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class StashDetail:
    """A stash entry together with the changes it records.

    Attributes:
        stash: The stash entry.
        changes: Per-file changes relative to the stash base commit.
    """

    stash: StashEntry
    changes: tuple[FileChange, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class CommitResult:
    """Result of a commit operation.

    Attributes:
        sha: Commit SHA hex string.
        files: Repository-relative paths included in the commit.
    """

    sha: str
    files: frozenset[Path] = frozenset()
