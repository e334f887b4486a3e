"""folio repository plumbing.

This package provides the data model for repository state snapshots and the
plumbing that produces them and applies mutations.

Classes:
    PlumbingProtocol: Runtime-checkable async protocol used by everything above.
    GitPlumbing: Async plumbing over real repositories (dulwich + git executable).
    GitRepository: Synchronous access to one working tree.
    FakePlumbing: In-memory plumbing for tests.

Models:
    RepositoryState: Complete, immutable snapshot of one repository.
    HeadInfo, FileChange, Hunk, StashEntry, CommitInfo, Remote,
    InProgressOperation: Snapshot facets.
    CommitDetail, StashDetail: Detail documents for a commit or stash entry.
    CommitResult: Result of a commit.
"""

from folio.repository._diff import build_patch, first_changed_line, parse_hunk_header, parse_hunks
from folio.repository._errors import classify_git_stderr, git_failure, translate_dulwich_error
from folio.repository._fake import FakePlumbing
from folio.repository._git import GitRepository
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
from folio.repository._plumbing import GitPlumbing
from folio.repository._protocol import PlumbingProtocol

__all__ = [
    "CommitDetail",
    "CommitInfo",
    "CommitResult",
    "FakePlumbing",
    "FileChange",
    "GitPlumbing",
    "GitRepository",
    "HeadInfo",
    "Hunk",
    "InProgressOperation",
    "PlumbingProtocol",
    "Remote",
    "RepositoryState",
    "StashDetail",
    "StashEntry",
    "build_patch",
    "classify_git_stderr",
    "first_changed_line",
    "git_failure",
    "parse_hunk_header",
    "parse_hunks",
    "translate_dulwich_error",
]
