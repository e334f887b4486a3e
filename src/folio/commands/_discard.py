"""Discard at point."""

from __future__ import annotations

from typing import TYPE_CHECKING

from folio.commands._targets import resolve_target
from folio.enums import SectionKind
from folio.views import StashView

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from folio.commands._pipeline import Invocation
    from folio.commands._targets import Target


def _plan(inv: Invocation, target: Target) -> tuple[str, Callable[[], Awaitable[None]]] | None:
    plumbing, root = inv.plumbing, inv.root
    change, hunk = target.change, target.hunk

    if target.path is not None:
        path = target.path
        return f"untracked file {path.as_posix()}", lambda: plumbing.delete_untracked(root, path)
    if target.stash is not None:
        stash = target.stash
        return f"{stash.ref}", lambda: plumbing.drop_stash(root, stash.index)
    if change is not None and (target.staged or target.unstaged):
        staged = target.staged
        where = "staged" if staged else "unstaged"
        if target.kind == SectionKind.HUNK and hunk is not None:
            return (
                f"{where} hunk {hunk.header.split(' @@')[0]} @@ in {change.path.as_posix()}",
                lambda: plumbing.discard_hunk(root, change, hunk, staged=staged),
            )
        return (
            f"{where} changes to {change.path.as_posix()}",
            lambda: plumbing.discard_file(root, change, staged=staged),
        )
    if isinstance(inv.view, StashView):
        current = inv.view.current_entry()
        if current is not None:
            return f"{current.ref}", lambda: plumbing.drop_stash(root, current.index)
    return None


async def discard_at_point(inv: Invocation) -> None:
    """Discard the file, hunk or stash under the cursor after confirmation.

    Untracked files are deleted, unstaged changes are restored from the
    index, staged changes are restored from HEAD, and stashes are dropped.
    """
    section = inv.section()
    if section is None or inv.view is None or inv.view.root is None:
        return
    plan = _plan(inv, resolve_target(inv.view.root, section))
    if plan is None:
        return
    description, discard = plan
    if inv.confirm_discard and not await inv.host.confirm(f"Discard {description}?"):
        return
    await discard()
