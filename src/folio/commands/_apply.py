"""Apply at point."""

from __future__ import annotations

from typing import TYPE_CHECKING

from folio.commands._targets import resolve_target
from folio.enums import SectionKind
from folio.repository import CommitInfo
from folio.views import StashView

if TYPE_CHECKING:
    from folio.commands._pipeline import Invocation


async def apply_at_point(inv: Invocation) -> None:
    """Apply the stash, commit or hunk under the cursor.

    A stash is applied to the working tree, a commit is cherry-picked
    without committing, and an unstaged hunk is staged. Anywhere in a stash
    or commit document applies that stash or commit.
    """
    section = inv.section()
    if section is None or inv.view is None or inv.view.root is None:
        return
    root = inv.view.root
    target = resolve_target(root, section)
    change, hunk = target.change, target.hunk

    if target.stash is not None:
        await inv.plumbing.apply_stash(inv.root, target.stash.index)
    elif target.commit is not None:
        await inv.plumbing.cherry_pick(inv.root, target.commit.sha)
    elif target.unstaged and change is not None:
        if target.kind == SectionKind.HUNK and hunk is not None:
            await inv.plumbing.apply_hunk(inv.root, change, hunk)
        elif target.kind == SectionKind.CHANGE:
            await inv.plumbing.stage(inv.root, [change.path])
    elif isinstance(inv.view, StashView):
        current = inv.view.current_entry()
        if current is not None:
            await inv.plumbing.apply_stash(inv.root, current.index)
    elif root.kind == SectionKind.COMMIT_DETAIL and isinstance(root.payload, CommitInfo):
        await inv.plumbing.cherry_pick(inv.root, root.payload.sha)
