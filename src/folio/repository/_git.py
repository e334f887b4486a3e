"""Synchronous git repository access.

``GitRepository`` reads status, diffs, history, refs and stashes with
dulwich, and shells out to the git executable for the operations dulwich
does not cover: applying single hunks, talking to remotes, merge, rebase,
stash and cherry-pick. Every method blocks; the async plumbing runs them in
worker threads.
"""

from __future__ import annotations

import os
import re
import shutil
import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Final, Self

from dulwich import porcelain
from dulwich.diff_tree import (
    CHANGE_ADD,
    CHANGE_DELETE,
    CHANGE_RENAME,
    RenameDetector,
    tree_changes,
)
from dulwich.index import IndexEntry, build_file_from_blob, commit_tree
from dulwich.object_store import tree_lookup_path
from dulwich.objects import Blob, Commit
from dulwich.patch import is_binary, unified_diff
from dulwich.reflog import read_reflog
from dulwich.repo import Repo

from folio.enums import ChangeStatus, GitErrorCode, InProgressKind
from folio.exceptions import PathViolationError, RepositoryError, UnexpectedError
from folio.repository._diff import build_patch, parse_hunks
from folio.repository._errors import DULWICH_ERRORS, git_failure, translate_dulwich_error
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
from folio.utils._git import decode_bytes, strip_refs_heads

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType

    from dulwich.diff_tree import TreeChange

# Similarity threshold for rename detection (0-100 scale for dulwich)
_RENAME_THRESHOLD: Final = 50

# Upper bound on commits walked when counting ahead/behind
_MAX_DIVERGENCE: Final = 1000

# Never let git block on a terminal prompt or an editor, and keep its
# messages in English so they can be classified.
_GIT_ENV: Final = {
    "GIT_TERMINAL_PROMPT": "0",
    "GIT_EDITOR": "true",
    "GIT_MERGE_AUTOEDIT": "no",
    "LC_ALL": "C",
}

_MERGE_MSG: Final = re.compile(r"^Merge (?:remote-tracking )?branch '([^']+)'")


class GitRepository:
    """Blocking access to one git working tree.

    Instances hold an open dulwich ``Repo`` and are meant to be short-lived:
    open one per operation, preferably as a context manager, so concurrent
    operations never share file handles.

    Attributes:
        root: The resolved path to the repository root directory.
    """

    __slots__: Final = ("_executable", "_repo", "_root", "_timeout")
    _root: Path
    _repo: Repo
    _executable: str
    _timeout: float | None

    def __init__(
        self,
        root: Path,
        *,
        executable: str = "git",
        timeout: float | None = None,
    ) -> None:
        """Open the repository.

        Args:
            root: Worktree root of the repository.
            executable: Name or path of the git executable.
            timeout: Seconds before a git subprocess is abandoned, or None
                to wait indefinitely.

        Raises:
            RepositoryError: If ``root`` is not a git repository.
        """
        try:
            self._repo = Repo(str(root))
        except DULWICH_ERRORS as e:
            raise translate_dulwich_error(e) or UnexpectedError(str(e), cause=e) from e
        self._root = root.resolve()
        self._executable = executable
        self._timeout = timeout

    # =========================================================================
    # Context Manager Protocol
    # =========================================================================

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Release file handles held by the dulwich Repo."""
        self._repo.close()

    @property
    def root(self) -> Path:
        """Get the resolved root path of the repository."""
        return self._root

    # =========================================================================
    # Head, Refs and Remotes
    # =========================================================================

    def get_head(self) -> HeadInfo | None:
        """Describe what HEAD points at.

        Returns:
            HeadInfo with branch, commit, upstream and push information, or
            None for an unborn detached HEAD (nothing to describe).
        """
        branch = self._current_branch()
        head_sha = self._head_sha()
        commit = self._commit_info(head_sha) if head_sha is not None else None
        if branch is None and commit is None:
            return None

        upstream: str | None = None
        upstream_commit: CommitInfo | None = None
        ahead = behind = 0
        if branch is not None:
            tracking = self._upstream(branch)
            if tracking is not None:
                upstream, upstream_ref = tracking
                upstream_sha = self._resolve_ref(upstream_ref)
                if upstream_sha is not None:
                    upstream_commit = self._commit_info(upstream_sha)
                    if head_sha is not None:
                        ahead = self._count_between(head_sha, upstream_sha)
                        behind = self._count_between(upstream_sha, head_sha)

        return HeadInfo(
            branch=branch,
            commit=commit,
            upstream=upstream,
            upstream_commit=upstream_commit,
            push_ref=self._push_ref(branch, upstream),
            ahead=ahead,
            behind=behind,
        )

    def get_branches(self) -> tuple[str, ...]:
        """List local branches followed by remote-tracking branches.

        Returns:
            Branch names such as ``main`` and ``origin/main``, each group
            sorted by name. Symbolic ``<remote>/HEAD`` refs are omitted.
        """
        refs = self._repo.refs
        local = sorted(decode_bytes(name) for name in refs.keys(base=b"refs/heads/"))
        remote = sorted(
            decode_bytes(name)
            for name in refs.keys(base=b"refs/remotes/")
            if not name.endswith(b"/HEAD")
        )
        return (*local, *remote)

    def get_remotes(self) -> tuple[Remote, ...]:
        """List configured remotes.

        Returns:
            Remotes sorted by name.
        """
        config = self._repo.get_config()
        remotes: list[Remote] = []
        for section in config.sections():
            if len(section) != 2 or section[0] != b"remote":  # noqa: PLR2004
                continue
            try:
                url = decode_bytes(config.get(section, b"url"))
            except KeyError:
                url = ""
            remotes.append(Remote(name=decode_bytes(section[1]), url=url))
        return tuple(sorted(remotes, key=lambda r: r.name))

    def get_in_progress(self) -> InProgressOperation | None:
        """Detect an unfinished rebase, merge or cherry-pick.

        Returns:
            The operation in progress, or None.
        """
        git_dir = Path(self._repo.controldir())
        current = self._current_branch() or self._describe(self._head_sha())

        for dirname in ("rebase-merge", "rebase-apply"):
            rebase_dir = git_dir / dirname
            if rebase_dir.is_dir():
                head_name = _read_text(rebase_dir / "head-name")
                onto = _read_text(rebase_dir / "onto")
                return InProgressOperation(
                    kind=InProgressKind.REBASE,
                    head=strip_refs_heads(head_name) or current,
                    onto=self._describe(onto.encode() if onto else None),
                )

        merge_head = _read_text(git_dir / "MERGE_HEAD")
        if merge_head:
            match = _MERGE_MSG.match(_read_text(git_dir / "MERGE_MSG"))
            source = match.group(1) if match else self._describe(merge_head.split()[0].encode())
            return InProgressOperation(kind=InProgressKind.MERGE, head=source, onto=current)

        pick_head = _read_text(git_dir / "CHERRY_PICK_HEAD")
        if pick_head:
            return InProgressOperation(
                kind=InProgressKind.CHERRY_PICK,
                head=self._describe(pick_head.encode()),
                onto=current,
            )
        return None

    # =========================================================================
    # Working Tree and Index
    # =========================================================================

    def get_untracked(self) -> tuple[Path, ...]:
        """List untracked, non-ignored files.

        Returns:
            Repository-relative paths, sorted.
        """
        status = porcelain.status(self._repo, untracked_files="all")
        return tuple(sorted(Path(decode_bytes(p)) for p in status.untracked))

    def get_unstaged(self, *, context_lines: int = 3) -> tuple[FileChange, ...]:
        """Diff the working tree against the index.

        Args:
            context_lines: Number of context lines around changes.

        Returns:
            One FileChange per modified or deleted tracked file, sorted by path.
        """
        status = porcelain.status(self._repo, untracked_files="no")
        index = self._repo.open_index()

        changes: list[FileChange] = []
        for raw in sorted(status.unstaged):
            path_bytes = raw if isinstance(raw, bytes) else raw.encode()
            rel_path = Path(decode_bytes(path_bytes))
            entry = index[path_bytes] if path_bytes in index else None
            if not isinstance(entry, IndexEntry):
                # Conflicted entries have no single blob to diff against
                changes.append(FileChange(rel_path, ChangeStatus.MODIFIED))
                continue

            working_path = self._root / rel_path
            if working_path.is_file():
                changes.append(
                    self._file_change(
                        rel_path,
                        ChangeStatus.MODIFIED,
                        self._blob_data(entry.sha),
                        working_path.read_bytes(),
                        context_lines,
                    )
                )
            else:
                changes.append(
                    self._file_change(
                        rel_path,
                        ChangeStatus.DELETED,
                        self._blob_data(entry.sha),
                        b"",
                        context_lines,
                    )
                )
        return tuple(changes)

    def get_staged(self, *, context_lines: int = 3) -> tuple[FileChange, ...]:
        """Diff the index against HEAD, detecting renames.

        Args:
            context_lines: Number of context lines around changes.

        Returns:
            One FileChange per staged file, sorted by path.
        """
        return self._diff_trees(self._head_tree(), self._index_tree(), context_lines)

    # =========================================================================
    # History and Stashes
    # =========================================================================

    def get_commits(self, *, count: int = 10) -> tuple[CommitInfo, ...]:
        """Get the most recent commits reachable from HEAD.

        Args:
            count: Maximum number of commits to return.

        Returns:
            Commits newest first; empty for an unborn branch.
        """
        head_sha = self._head_sha()
        if head_sha is None or count <= 0:
            return ()
        walker = self._repo.get_walker(include=[head_sha], max_entries=count)
        return tuple(self._to_commit_info(entry.commit) for entry in walker)

    def get_stashes(self) -> tuple[StashEntry, ...]:
        """Read the stash list from the stash reflog.

        Returns:
            Stash entries, newest (``stash@{0}``) first.
        """
        reflog = Path(self._repo.controldir()) / "logs" / "refs" / "stash"
        try:
            with reflog.open("rb") as f:
                entries = list(read_reflog(f))
        except FileNotFoundError:
            return ()
        return tuple(
            StashEntry(
                index=i,
                message=decode_bytes(entry.message),
                sha=decode_bytes(entry.new_sha),
            )
            for i, entry in enumerate(reversed(entries))
        )

    def show_commit(self, sha: str, *, context_lines: int = 3) -> CommitDetail:
        """Get a commit together with its diff against the first parent.

        Args:
            sha: Full commit SHA.
            context_lines: Number of context lines around changes.

        Returns:
            CommitDetail for the commit.

        Raises:
            RepositoryError: If the commit does not exist.
        """
        commit = self._get_commit(sha.encode())
        parent_tree = self._get_commit(commit.parents[0]).tree if commit.parents else None
        return CommitDetail(
            commit=self._to_commit_info(commit),
            changes=self._diff_trees(parent_tree, commit.tree, context_lines),
        )

    def show_stash(self, index: int, *, context_lines: int = 3) -> StashDetail:
        """Get a stash entry together with the changes it records.

        Args:
            index: Position of the entry in the stash list.
            context_lines: Number of context lines around changes.

        Returns:
            StashDetail for the entry, diffed against the commit it was
            made on.

        Raises:
            RepositoryError: If there is no such stash entry.
        """
        stash = next((s for s in self.get_stashes() if s.index == index), None)
        if stash is None:
            raise RepositoryError(GitErrorCode.NO_STASH_FOUND, f"stash@{{{index}}} not found")
        commit = self._get_commit(stash.sha.encode())
        base_tree = self._get_commit(commit.parents[0]).tree if commit.parents else None
        return StashDetail(
            stash=stash,
            changes=self._diff_trees(base_tree, commit.tree, context_lines),
        )

    # =========================================================================
    # Staging
    # =========================================================================

    def stage(self, paths: Iterable[Path]) -> None:
        """Stage files, including deletions of tracked files.

        Args:
            paths: Repository-relative or absolute paths inside the repository.

        Raises:
            PathViolationError: If any path is outside the repository.
        """
        relative = [self._to_relative_path(p) for p in paths]
        present = [r for r in relative if (self._root / r).exists()]
        missing = [r for r in relative if r not in present]
        if present:
            porcelain.add(self._repo, paths=[str(self._root / r) for r in present])
        if missing:
            index = self._repo.open_index()
            for rel_path in missing:
                key = rel_path.encode("utf-8")
                if key in index:
                    del index[key]
            index.write()

    def stage_all(self) -> None:
        """Stage every modified or deleted tracked file."""
        status = porcelain.status(self._repo, untracked_files="no")
        self.stage(Path(decode_bytes(p)) for p in status.unstaged)

    def unstage(self, paths: Iterable[Path]) -> None:
        """Reset index entries to HEAD.

        Files not present in HEAD are removed from the index and stay in the
        working tree as untracked files.

        Args:
            paths: Repository-relative or absolute paths inside the repository.

        Raises:
            PathViolationError: If any path is outside the repository.
        """
        relative = [self._to_relative_path(p) for p in paths]
        if not relative:
            return
        tree_sha = self._head_tree()
        index = self._repo.open_index()
        try:
            for rel_path in relative:
                key = rel_path.encode("utf-8")
                entry = self._tree_entry(tree_sha, key) if tree_sha is not None else None
                if entry is not None:
                    index[key] = entry
                elif key in index:
                    del index[key]
        finally:
            index.write()

    def unstage_all(self) -> None:
        """Reset the whole index to HEAD."""
        paths: list[Path] = []
        for change in self.get_staged(context_lines=0):
            paths.append(change.path)
            if change.old_path is not None:
                paths.append(change.old_path)
        self.unstage(paths)

    def commit(self, message: str) -> CommitResult:
        """Commit the index.

        A merge or cherry-pick in progress is committed through the git
        executable so the extra parent and state files are handled.

        Args:
            message: Full commit message.

        Returns:
            CommitResult with the new SHA and committed paths.

        Raises:
            RepositoryError: With ``NO_LOCAL_CHANGES`` if nothing is staged.
        """
        staged = self.get_staged(context_lines=0)
        git_dir = Path(self._repo.controldir())
        merging = (git_dir / "MERGE_HEAD").exists()
        if not staged and not merging:
            raise RepositoryError(GitErrorCode.NO_LOCAL_CHANGES, "nothing added to commit")

        if merging or (git_dir / "CHERRY_PICK_HEAD").exists():
            _ = self._run_git("commit", "--no-verify", "-F", "-", stdin=message)
            sha = decode_bytes(self._repo.refs[b"HEAD"])
        else:
            sha = decode_bytes(porcelain.commit(self._repo, message=message.encode()))
        return CommitResult(sha=sha, files=frozenset(c.path for c in staged))

    # =========================================================================
    # Hunks and Discards
    # =========================================================================

    def apply_hunk(self, change: FileChange, hunk: Hunk, *, reverse: bool = False) -> None:
        """Apply one hunk to the index (stage it), or reverse it (unstage it).

        Args:
            change: The file the hunk belongs to.
            hunk: The hunk to apply.
            reverse: Reverse-apply the hunk instead.

        Raises:
            RepositoryError: With ``PATCH_DOES_NOT_APPLY`` if the index moved on.
        """
        args = ["apply", "--cached", "--whitespace=nowarn"]
        if reverse:
            args.append("--reverse")
        _ = self._run_git(*args, "-", stdin=build_patch(change, hunk))

    def discard_hunk(self, change: FileChange, hunk: Hunk, *, staged: bool = False) -> None:
        """Reverse one hunk in the working tree, and in the index if staged.

        Args:
            change: The file the hunk belongs to.
            hunk: The hunk to discard.
            staged: Whether the hunk is a staged hunk.
        """
        args = ["apply", "--reverse", "--whitespace=nowarn"]
        if staged:
            args.append("--index")
        _ = self._run_git(*args, "-", stdin=build_patch(change, hunk))

    def discard_file(self, change: FileChange, *, staged: bool = False) -> None:
        """Throw away the changes to one file.

        An unstaged change is restored from the index. A staged change is
        unstaged and then restored from HEAD; a newly added file is left in
        the working tree as an untracked file.

        Args:
            change: The change to discard.
            staged: Whether ``change`` is a staged change.
        """
        if not staged:
            rel_path = self._to_relative_path(change.path)
            index = self._repo.open_index()
            key = rel_path.encode("utf-8")
            entry = index[key] if key in index else None
            if not isinstance(entry, IndexEntry):
                msg = f"{rel_path} has no index entry to restore from"
                raise UnexpectedError(msg)
            self._write_blob(entry.sha, entry.mode, rel_path)
            return

        paths = [change.path] if change.old_path is None else [change.path, change.old_path]
        self.unstage(paths)
        tree_sha = self._head_tree()
        if tree_sha is None:
            return
        for path in paths:
            rel_path = self._to_relative_path(path)
            entry = self._tree_entry(tree_sha, rel_path.encode("utf-8"))
            if entry is not None:
                self._write_blob(entry.sha, entry.mode, rel_path)

    def delete_untracked(self, path: Path) -> None:
        """Delete an untracked file or directory from the working tree.

        Args:
            path: Repository-relative or absolute path inside the repository.

        Raises:
            PathViolationError: If the path is outside the repository.
        """
        target = self._root / self._to_relative_path(path)
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink(missing_ok=True)

    # =========================================================================
    # Remotes, Branching and Stashing (git executable)
    # =========================================================================

    def fetch(self, remote: str | None = None) -> None:
        """Fetch from a remote, or from git's default remote."""
        _ = self._run_git("fetch", *([remote] if remote else []))

    def pull(self) -> None:
        """Pull the upstream of the current branch."""
        _ = self._run_git("pull", "--no-edit")

    def push(
        self,
        remote: str | None = None,
        branch: str | None = None,
        *,
        set_upstream: bool = False,
    ) -> None:
        """Push the current branch.

        Args:
            remote: Remote to push to; git's default when None.
            branch: Branch to push; git's default when None.
            set_upstream: Record ``remote/branch`` as the upstream.
        """
        args = ["push"]
        if set_upstream:
            args.append("--set-upstream")
        if remote:
            args.append(remote)
            if branch:
                args.append(branch)
        _ = self._run_git(*args)

    def checkout(self, ref: str) -> None:
        """Switch the working tree to a branch or other ref."""
        _ = self._run_git("checkout", ref)

    def create_branch(self, name: str, start_point: str | None = None) -> None:
        """Create branch ``name`` at ``start_point`` and check it out.

        Raises:
            RepositoryError: With ``BRANCH_ALREADY_EXISTS`` if ``name`` is
                taken, or ``INVALID_BRANCH_NAME`` if git rejects it.
        """
        args = ["checkout", "-b", name]
        if start_point:
            args.append(start_point)
        _ = self._run_git(*args)

    def merge(self, ref: str) -> None:
        """Merge a branch into the current branch."""
        _ = self._run_git("merge", "--no-edit", ref)

    def rebase(self, onto: str) -> None:
        """Rebase the current branch onto another branch."""
        _ = self._run_git("rebase", onto)

    def stash(self, message: str = "") -> None:
        """Stash working tree and index changes.

        Raises:
            RepositoryError: With ``NO_LOCAL_CHANGES`` if there is nothing
                to stash.
        """
        args = ["stash", "push"]
        if message:
            args += ["-m", message]
        output = self._run_git(*args)
        if "No local changes to save" in output:
            raise RepositoryError(GitErrorCode.NO_LOCAL_CHANGES, output.strip(), command=tuple(args))

    def apply_stash(self, index: int) -> None:
        """Apply a stash entry without dropping it."""
        _ = self._run_git("stash", "apply", f"stash@{{{index}}}")

    def drop_stash(self, index: int) -> None:
        """Drop a stash entry."""
        _ = self._run_git("stash", "drop", f"stash@{{{index}}}")

    def cherry_pick(self, sha: str) -> None:
        """Apply a commit's changes to the index and working tree without committing."""
        _ = self._run_git("cherry-pick", "--no-commit", sha)

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    def _run_git(self, *args: str, stdin: str | None = None) -> str:
        """Run the git executable in the repository root.

        Args:
            *args: Arguments after ``git``.
            stdin: Text to feed to standard input.

        Returns:
            Captured standard output.

        Raises:
            RepositoryError: If git is missing or the failure is recognized.
            UnexpectedError: On timeout or an unrecognized failure.
        """
        env = {**os.environ, **_GIT_ENV}
        try:
            result = subprocess.run(  # noqa: S603
                [self._executable, *args],
                cwd=str(self._root),
                input=stdin,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=env,
                timeout=self._timeout,
                check=False,
            )
        except FileNotFoundError as e:
            msg = f"git executable not found: {self._executable}"
            raise RepositoryError(GitErrorCode.GIT_NOT_FOUND, msg, command=args) from e
        except subprocess.TimeoutExpired as e:
            msg = f"git {' '.join(args)} timed out after {self._timeout}s"
            raise UnexpectedError(msg, cause=e) from e

        if result.returncode != 0:
            raise git_failure(args, result.returncode, result.stdout, result.stderr)
        return result.stdout

    def _to_relative_path(self, path: Path) -> str:
        """Convert a path to a repo-relative POSIX string.

        Raises:
            PathViolationError: If the path resolves outside the repository.
        """
        resolved = (path if path.is_absolute() else self._root / path).resolve()
        if not resolved.is_relative_to(self._root) or resolved == self._root:
            msg = f"Path is outside repository: {path}"
            raise PathViolationError(msg, path=path, root=self._root)
        return resolved.relative_to(self._root).as_posix()

    def _current_branch(self) -> str | None:
        names, _sha = self._repo.refs.follow(b"HEAD")
        if len(names) > 1 and names[-1].startswith(b"refs/heads/"):
            return strip_refs_heads(names[-1])
        return None

    def _head_sha(self) -> bytes | None:
        try:
            return self._repo.head()
        except KeyError:
            # No commits yet (empty repository)
            return None

    def _head_tree(self) -> bytes | None:
        head_sha = self._head_sha()
        if head_sha is None:
            return None
        return self._get_commit(head_sha).tree

    def _index_tree(self) -> bytes:
        """Build a tree SHA from the current index."""
        index = self._repo.open_index()
        blobs: list[tuple[bytes, bytes, int]] = [
            (path, entry.sha, entry.mode)
            for path, entry in index.items()
            # Conflicted entries don't have sha/mode attributes
            if isinstance(entry, IndexEntry)
        ]
        return commit_tree(self._repo.object_store, blobs)

    def _resolve_ref(self, ref: bytes) -> bytes | None:
        try:
            return self._repo.refs[ref]
        except KeyError:
            return None

    def _upstream(self, branch: str) -> tuple[str, bytes] | None:
        """Return the display name and full ref of a branch's upstream."""
        config = self._repo.get_config()
        section = (b"branch", branch.encode())
        try:
            remote = config.get(section, b"remote")
            merge = config.get(section, b"merge")
        except KeyError:
            return None
        merge_name = strip_refs_heads(merge) or ""
        if remote == b".":
            return merge_name, f"refs/heads/{merge_name}".encode()
        remote_name = decode_bytes(remote)
        return f"{remote_name}/{merge_name}", f"refs/remotes/{remote_name}/{merge_name}".encode()

    def _push_ref(self, branch: str | None, upstream: str | None) -> str | None:
        if branch is None:
            return None
        config = self._repo.get_config()
        for section, name in (
            ((b"branch", branch.encode()), b"pushRemote"),
            ((b"remote",), b"pushDefault"),
        ):
            try:
                return f"{decode_bytes(config.get(section, name))}/{branch}"
            except KeyError:
                continue
        if upstream is not None and "/" in upstream:
            return f"{upstream.split('/', 1)[0]}/{branch}"
        return None

    def _count_between(self, include: bytes, exclude: bytes) -> int:
        walker = self._repo.get_walker(
            include=[include], exclude=[exclude], max_entries=_MAX_DIVERGENCE
        )
        return sum(1 for _ in walker)

    def _describe(self, sha: bytes | None) -> str:
        """Name a commit by a branch pointing at it, else by short SHA."""
        if not sha:
            return ""
        refs = self._repo.refs
        for base in (b"refs/heads/", b"refs/remotes/"):
            for name in sorted(refs.keys(base=base)):
                if self._resolve_ref(base + name) == sha:
                    return decode_bytes(name)
        return decode_bytes(sha)[:7]

    def _get_commit(self, sha: bytes) -> Commit:
        try:
            obj = self._repo[sha]
        except KeyError as e:
            msg = f"unknown revision {decode_bytes(sha)}"
            raise RepositoryError(GitErrorCode.BRANCH_NOT_FOUND, msg) from e
        if not isinstance(obj, Commit):
            msg = f"bad revision {decode_bytes(sha)}"
            raise RepositoryError(GitErrorCode.BRANCH_NOT_FOUND, msg)
        return obj

    def _blob_data(self, sha: bytes) -> bytes:
        blob = self._repo[sha]
        return blob.data if isinstance(blob, Blob) else b""

    def _tree_entry(self, tree_sha: bytes, path: bytes) -> IndexEntry | None:
        """Build an index entry for a path as recorded in a tree.

        Stat fields are zeroed so git re-hashes the working file instead of
        trusting a stat match.
        """
        try:
            mode, blob_sha = tree_lookup_path(self._repo.__getitem__, tree_sha, path)
        except KeyError:
            return None
        return IndexEntry(
            ctime=(0, 0),
            mtime=(0, 0),
            dev=0,
            ino=0,
            mode=mode,
            uid=0,
            gid=0,
            size=len(self._blob_data(blob_sha)),
            sha=blob_sha,
            flags=0,
        )

    def _write_blob(self, blob_sha: bytes, mode: int, rel_path: str) -> None:
        """Write a blob to the working tree."""
        blob = self._repo[blob_sha]
        target = self._root / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(blob, Blob):
            _ = build_file_from_blob(blob, mode, str(target).encode("utf-8"))

    def _diff_trees(
        self,
        old_tree: bytes | None,
        new_tree: bytes | None,
        context_lines: int,
    ) -> tuple[FileChange, ...]:
        detector = RenameDetector(self._repo.object_store, rename_threshold=_RENAME_THRESHOLD)
        changes = tree_changes(
            self._repo.object_store,
            old_tree,
            new_tree,
            rename_detector=detector,
        )
        result = [self._tree_change(c, context_lines) for c in changes]
        return tuple(sorted(result, key=lambda c: c.path.as_posix()))

    def _tree_change(self, change: TreeChange, context_lines: int) -> FileChange:
        old_path = decode_bytes(change.old.path) if change.old and change.old.path else None
        new_path = decode_bytes(change.new.path) if change.new and change.new.path else None
        old_content = self._blob_data(change.old.sha) if change.old and change.old.sha else b""
        new_content = self._blob_data(change.new.sha) if change.new and change.new.sha else b""

        if change.type == CHANGE_ADD:
            status, path, previous = ChangeStatus.ADDED, new_path, None
        elif change.type == CHANGE_DELETE:
            status, path, previous = ChangeStatus.DELETED, old_path, None
        elif change.type == CHANGE_RENAME:
            status, path, previous = ChangeStatus.RENAMED, new_path, old_path
        else:
            status, path, previous = ChangeStatus.MODIFIED, new_path or old_path, None

        return self._file_change(
            Path(path or ""),
            status,
            old_content,
            new_content,
            context_lines,
            old_path=Path(previous) if previous else None,
        )

    def _file_change(  # noqa: PLR0913
        self,
        path: Path,
        status: ChangeStatus,
        old_content: bytes,
        new_content: bytes,
        context_lines: int,
        *,
        old_path: Path | None = None,
    ) -> FileChange:
        if is_binary(old_content) or is_binary(new_content):
            return FileChange(path, status, old_path, binary=True)
        diff_lines = unified_diff(
            old_content.splitlines(keepends=True),
            new_content.splitlines(keepends=True),
            n=context_lines,
        )
        return FileChange(path, status, old_path, hunks=parse_hunks(diff_lines))

    def _commit_info(self, sha: bytes) -> CommitInfo | None:
        try:
            return self._to_commit_info(self._get_commit(sha))
        except RepositoryError:
            return None

    def _to_commit_info(self, commit: Commit) -> CommitInfo:
        name, email, timestamp = _parse_author_line(
            commit.author, commit.author_time, commit.author_timezone
        )
        return CommitInfo(
            sha=decode_bytes(commit.id),
            message=decode_bytes(commit.message),
            author_name=name,
            author_email=email,
            timestamp=timestamp,
            parent_shas=tuple(decode_bytes(p) for p in commit.parents),
        )


def _parse_author_line(author: bytes, author_time: int, author_tz: int) -> tuple[str, str, datetime]:
    """Parse an author line into name, email, and datetime.

    Args:
        author: Author bytes in "Name <email>" format.
        author_time: Unix timestamp.
        author_tz: Timezone offset in seconds east of UTC, as dulwich
            reports it.

    Returns:
        Tuple of (name, email, datetime with the author's timezone).
    """
    author_str = decode_bytes(author)
    if "<" in author_str and author_str.endswith(">"):
        name_part = author_str.rsplit("<", 1)[0].strip()
        email_part = author_str.rsplit("<", 1)[1].rstrip(">")
    else:
        name_part = author_str
        email_part = ""

    tz = timezone(timedelta(seconds=author_tz))
    return name_part, email_part, datetime.fromtimestamp(author_time, tz=tz)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8").strip()
    except (FileNotFoundError, NotADirectoryError):
        return ""
