"""Fetch, pull and push."""

from __future__ import annotations

from typing import TYPE_CHECKING

from folio.enums import GitErrorCode
from folio.exceptions import RepositoryError

if TYPE_CHECKING:
    from folio.commands._pipeline import Invocation
    from folio.repository import RepositoryState


def split_remote_ref(ref: str, remote_names: list[str]) -> tuple[str, str] | None:
    """Split ``origin/main`` into ``("origin", "main")``.

    Remote names may contain slashes, so the longest configured remote name
    that prefixes ``ref`` wins.

    Examples:
        >>> split_remote_ref("origin/main", ["origin"])
        ('origin', 'main')
        >>> split_remote_ref("team/a/main", ["team", "team/a"])
        ('team/a', 'main')
    """
    for name in sorted(remote_names, key=len, reverse=True):
        if ref.startswith(f"{name}/"):
            return name, ref[len(name) + 1 :]
    return None


def default_remote(state: RepositoryState) -> str | None:
    """Pick the remote to talk to: the upstream's, else ``origin``, else the only one."""
    names = [remote.name for remote in state.remotes]
    if state.head is not None and state.head.upstream:
        split = split_remote_ref(state.head.upstream, names)
        if split is not None:
            return split[0]
    if "origin" in names:
        return "origin"
    if len(names) == 1:
        return names[0]
    return None


async def fetch(inv: Invocation) -> None:
    """Fetch from the upstream remote, ``origin``, or the only remote."""
    await inv.plumbing.fetch(inv.root, default_remote(inv.handle.state))


async def pull(inv: Invocation) -> None:
    """Pull the current branch's upstream."""
    await inv.plumbing.pull(inv.root)


async def push(inv: Invocation) -> None:
    """Push the current branch to its push remote.

    A branch without an upstream is pushed to the default remote and the
    upstream is set.

    Raises:
        RepositoryError: If HEAD is detached or no remote is configured.
    """
    state = inv.handle.state
    head = state.head
    if head is None or head.branch is None:
        msg = "You are not currently on a branch."
        raise RepositoryError(GitErrorCode.NO_UPSTREAM_BRANCH, msg)

    names = [remote.name for remote in state.remotes]
    if head.push_ref:
        split = split_remote_ref(head.push_ref, names)
        if split is not None:
            remote, branch = split
            await inv.plumbing.push(inv.root, remote, f"{head.branch}:{branch}")
            return
    if head.upstream:
        await inv.plumbing.push(inv.root)
        return

    remote = default_remote(state)
    if remote is None:
        msg = "No configured push destination."
        raise RepositoryError(GitErrorCode.NO_REMOTE_REPOSITORY_SPECIFIED, msg)
    await inv.plumbing.push(inv.root, remote, head.branch, set_upstream=True)
