"""Enumeration types for folio."""

from enum import StrEnum


class SectionKind(StrEnum):
    """Kinds of sections in a rendered document."""

    STATUS = "status"
    ERROR = "error"
    HEAD = "head"
    IN_PROGRESS = "in-progress"
    UNTRACKED_FILES = "untracked-files"
    UNSTAGED_CHANGES = "unstaged-changes"
    STAGED_CHANGES = "staged-changes"
    STASHES = "stashes"
    RECENT_COMMITS = "recent-commits"
    UNTRACKED_FILE = "untracked-file"
    CHANGE = "change"
    HUNK = "hunk"
    DIFF_LINE = "diff-line"
    COMMIT = "commit"
    STASH = "stash"
    COMMIT_DETAIL = "commit-detail"
    STASH_DETAIL = "stash-detail"
    INFO_LINE = "info-line"


class ViewKind(StrEnum):
    """Kinds of documents a repository can be displayed as."""

    STATUS = "status"
    COMMIT = "commit"
    STASH = "stash"


class ChangeStatus(StrEnum):
    """How a file differs between two trees."""

    MODIFIED = "modified"
    ADDED = "new file"
    DELETED = "deleted"
    RENAMED = "renamed"


class InProgressKind(StrEnum):
    """Multi-step git operations that can be left in progress."""

    MERGE = "merge"
    REBASE = "rebase"
    CHERRY_PICK = "cherry-pick"


class GitErrorCode(StrEnum):
    """Recognizable git failure codes.

    Values mirror the codes reported by editor git integrations so that
    messages stay familiar.
    """

    CONFLICT = "Conflict"
    UNMERGED_CHANGES = "UnmergedChanges"
    NO_LOCAL_CHANGES = "NoLocalChanges"
    DIRTY_WORK_TREE = "DirtyWorkTree"
    LOCAL_CHANGES_OVERWRITTEN = "LocalChangesOverwritten"
    PUSH_REJECTED = "PushRejected"
    DIVERGED_BRANCHES = "DivergedBranches"
    REMOTE_CONNECTION_ERROR = "RemoteConnectionError"
    AUTHENTICATION_FAILED = "AuthenticationFailed"
    NO_REMOTE_REPOSITORY_SPECIFIED = "NoRemoteRepositorySpecified"
    NO_UPSTREAM_BRANCH = "NoUpstreamBranch"
    NO_REMOTE_REFERENCE = "NoRemoteReference"
    NO_USER_NAME_CONFIGURED = "NoUserNameConfigured"
    NO_USER_EMAIL_CONFIGURED = "NoUserEmailConfigured"
    NOT_A_GIT_REPOSITORY = "NotAGitRepository"
    REPOSITORY_IS_LOCKED = "RepositoryIsLocked"
    PATCH_DOES_NOT_APPLY = "PatchDoesNotApply"
    NO_STASH_FOUND = "NoStashFound"
    STASH_CONFLICT = "StashConflict"
    BRANCH_NOT_FOUND = "BranchNotFound"
    BRANCH_ALREADY_EXISTS = "BranchAlreadyExists"
    INVALID_BRANCH_NAME = "InvalidBranchName"
    CANT_REBASE_MULTIPLE_BRANCHES = "CantRebaseMultipleBranches"
    GIT_NOT_FOUND = "GitNotFound"


class CommandShape(StrEnum):
    """How a command resolves what it operates on."""

    REPO = "repo"
    REPO_AND_VIEW = "repo+view"
    FILE = "file"
