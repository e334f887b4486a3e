"""Classification of git failures into recognizable error codes.

The git executable reports failures as free text on stderr. This module maps
that text, and the exceptions raised by dulwich, onto ``GitErrorCode`` values
so the plumbing can raise a tagged ``RepositoryError`` instead of leaving
callers to sniff error shapes.
"""

import re
from typing import Final

from dulwich.errors import (
    GitProtocolError,
    HangupException,
    NotGitRepository,
)
from dulwich.file import FileLocked

from folio.enums import GitErrorCode
from folio.exceptions import RepositoryError, UnexpectedError

# Ordered: the first matching pattern wins, so more specific patterns
# (stash conflicts, authentication) come before generic ones.
_STDERR_PATTERNS: Final[tuple[tuple[re.Pattern[str], GitErrorCode], ...]] = (
    (re.compile(r"Another git process seems to be running|index\.lock"), GitErrorCode.REPOSITORY_IS_LOCKED),
    (re.compile(r"Authentication failed|could not read Username|Permission denied \(publickey"), GitErrorCode.AUTHENTICATION_FAILED),
    (re.compile(r"Not a git repository|not a git repository", re.IGNORECASE), GitErrorCode.NOT_A_GIT_REPOSITORY),
    (re.compile(r"Please tell me who you are|unable to auto-detect email address"), GitErrorCode.NO_USER_NAME_CONFIGURED),
    (re.compile(r"empty ident name"), GitErrorCode.NO_USER_EMAIL_CONFIGURED),
    (re.compile(r"No stash entries found|No stash found|is not a valid reference.*stash", re.IGNORECASE), GitErrorCode.NO_STASH_FOUND),
    (re.compile(r"Conflicts in index\. Try without --index|could not restore untracked files from stash"), GitErrorCode.STASH_CONFLICT),
    (re.compile(r"Your local changes to the following files would be overwritten"), GitErrorCode.LOCAL_CHANGES_OVERWRITTEN),
    (re.compile(r"cannot rebase: You have unstaged changes|cannot pull with rebase: You have unstaged changes|Please commit or stash them"), GitErrorCode.DIRTY_WORK_TREE),
    (re.compile(r"You have not concluded your merge|unmerged files|Exiting because of an unresolved conflict|needs merge"), GitErrorCode.UNMERGED_CHANGES),
    (re.compile(r"CONFLICT \(|Automatic merge failed|could not apply [0-9a-f]+|Merge conflict in"), GitErrorCode.CONFLICT),
    (re.compile(r"nothing to commit|no changes added to commit|nothing added to commit"), GitErrorCode.NO_LOCAL_CHANGES),
    (re.compile(r"patch does not apply|corrupt patch|patch failed|does not match index|does not exist in index"), GitErrorCode.PATCH_DOES_NOT_APPLY),
    (re.compile(r"\[rejected\]|failed to push some refs|Updates were rejected"), GitErrorCode.PUSH_REJECTED),
    (re.compile(r"Not possible to fast-forward|have diverged|divergent branches|Need to specify how to reconcile"), GitErrorCode.DIVERGED_BRANCHES),
    (re.compile(r"There is no tracking information|has no upstream branch"), GitErrorCode.NO_UPSTREAM_BRANCH),
    (re.compile(r"Couldn't find remote ref|couldn't find remote ref"), GitErrorCode.NO_REMOTE_REFERENCE),
    (re.compile(r"No configured push destination|No remote repository specified|does not appear to be a git repository"), GitErrorCode.NO_REMOTE_REPOSITORY_SPECIFIED),
    (re.compile(r"Could not read from remote repository|unable to access|Connection refused|Could not resolve host"), GitErrorCode.REMOTE_CONNECTION_ERROR),
    (re.compile(r"A branch named .* already exists"), GitErrorCode.BRANCH_ALREADY_EXISTS),
    (re.compile(r"is not a valid branch name"), GitErrorCode.INVALID_BRANCH_NAME),
    (re.compile(r"not something we can merge|invalid upstream|unknown revision|bad revision|did not match any file\(s\) known to git"), GitErrorCode.BRANCH_NOT_FOUND),
    (re.compile(r"cannot rebase onto multiple branches"), GitErrorCode.CANT_REBASE_MULTIPLE_BRANCHES),
)


def classify_git_stderr(stderr: str) -> GitErrorCode | None:
    """Map git's stderr (or stdout) text to a recognizable error code.

    Args:
        stderr: Output produced by a failed git command.

    Returns:
        The matching error code, or None if the text is not recognized.
    """
    for pattern, code in _STDERR_PATTERNS:
        if pattern.search(stderr):
            return code
    return None


def git_failure(
    command: tuple[str, ...],
    exit_code: int,
    stdout: str,
    stderr: str,
) -> RepositoryError | UnexpectedError:
    """Build the error to raise for a failed git command.

    Git writes some failures (merge conflicts, "nothing to commit") to stdout,
    so both streams are classified.

    Args:
        command: The git arguments that were run.
        exit_code: Process exit code.
        stdout: Captured standard output.
        stderr: Captured standard error.

    Returns:
        A RepositoryError if the failure is recognized, otherwise an
        UnexpectedError describing the command and its output.
    """
    detail = (stderr.strip() or stdout.strip()) or f"exit code {exit_code}"
    code = classify_git_stderr(stderr) or classify_git_stderr(stdout)
    if code is not None:
        return RepositoryError(code, detail, command=command)
    return UnexpectedError(f"git {' '.join(command)} failed: {detail}")


DULWICH_ERRORS: Final = (NotGitRepository, HangupException, GitProtocolError, FileLocked)


def translate_dulwich_error(error: Exception) -> RepositoryError | None:
    """Map a dulwich exception to a repository error when recognizable.

    Args:
        error: Exception raised by dulwich.

    Returns:
        The equivalent RepositoryError, or None if the exception has no
        recognizable git meaning.
    """
    if isinstance(error, NotGitRepository):
        return RepositoryError(GitErrorCode.NOT_A_GIT_REPOSITORY, str(error))
    if isinstance(error, FileLocked):
        return RepositoryError(GitErrorCode.REPOSITORY_IS_LOCKED, str(error))
    if isinstance(error, HangupException | GitProtocolError):
        return RepositoryError(GitErrorCode.REMOTE_CONNECTION_ERROR, str(error))
    return None
