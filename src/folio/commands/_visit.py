"""Visiting the entity under the cursor."""

from __future__ import annotations

from typing import TYPE_CHECKING

from folio.commands._targets import diff_line_number, resolve_target
from folio.enums import ChangeStatus
from folio.repository import first_changed_line
from folio.views import CommitView, DocumentUri, StashView

if TYPE_CHECKING:
    from folio.commands._pipeline import Invocation
    from folio.views import DocumentView


async def visit_at_point(inv: Invocation) -> None:
    """Open what the cursor points at.

    Files and hunks open in the working tree (at the hunk's line), commits
    and stashes open as detail documents.
    """
    section = inv.section()
    if section is None or inv.view is None or inv.view.root is None:
        return
    target = resolve_target(inv.view.root, section)

    if target.path is not None:
        await inv.host.open_file(inv.root / target.path)
    elif target.change is not None:
        change = target.change
        if change.status == ChangeStatus.DELETED:
            await inv.host.show_info_message(f"{change.path.as_posix()} was deleted")
            return
        line = None
        if target.hunk is not None:
            line = diff_line_number(target, section) or first_changed_line(target.hunk)
        await inv.host.open_file(inv.root / change.path, line)
    elif target.commit is not None:
        detail = await inv.plumbing.show_commit(inv.root, target.commit.sha, context_lines=inv.context_lines)
        uri = DocumentUri.commit(inv.root, detail.commit.sha)
        await _open(inv, CommitView(uri, inv.handle, detail, options=inv.view.options))
    elif target.stash is not None:
        detail = await inv.plumbing.show_stash(inv.root, target.stash.index, context_lines=inv.context_lines)
        uri = DocumentUri.stash(inv.root, detail.stash.sha)
        await _open(inv, StashView(uri, inv.handle, detail, options=inv.view.options))


async def _open(inv: Invocation, view: DocumentView) -> None:
    _ = inv.provider.add_view(view)
    _ = view.update()
    await inv.host.open_document(view.uri)
