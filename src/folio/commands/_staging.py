"""Staging and unstaging."""

from __future__ import annotations

from typing import TYPE_CHECKING

from folio.commands._targets import resolve_target
from folio.enums import ChangeStatus, SectionKind

if TYPE_CHECKING:
    from pathlib import Path

    from folio.commands._pipeline import Invocation
    from folio.repository import FileChange


def _paths_of(change: FileChange) -> list[Path]:
    if change.status == ChangeStatus.RENAMED and change.old_path is not None:
        return [change.path, change.old_path]
    return [change.path]


async def stage(inv: Invocation) -> None:
    """Stage the file, hunk or section under the cursor."""
    section = inv.section()
    if section is None or inv.view is None or inv.view.root is None:
        return
    target = resolve_target(inv.view.root, section)

    match target.kind:
        case SectionKind.UNTRACKED_FILE if target.path is not None:
            await inv.plumbing.stage(inv.root, [target.path])
        case SectionKind.CHANGE if target.unstaged and target.change is not None:
            await inv.plumbing.stage(inv.root, [target.change.path])
        case SectionKind.HUNK if target.unstaged and target.change is not None and target.hunk is not None:
            await inv.plumbing.apply_hunk(inv.root, target.change, target.hunk)
        case SectionKind.UNTRACKED_FILES:
            await inv.plumbing.stage(inv.root, list(inv.handle.state.untracked))
        case SectionKind.UNSTAGED_CHANGES:
            await inv.plumbing.stage_all(inv.root)
        case _:
            pass


async def stage_all(inv: Invocation) -> None:
    """Stage every unstaged change to a tracked file."""
    await inv.plumbing.stage_all(inv.root)


async def unstage(inv: Invocation) -> None:
    """Unstage the file, hunk or section under the cursor."""
    section = inv.section()
    if section is None or inv.view is None or inv.view.root is None:
        return
    target = resolve_target(inv.view.root, section)

    match target.kind:
        case SectionKind.CHANGE if target.staged and target.change is not None:
            await inv.plumbing.unstage(inv.root, _paths_of(target.change))
        case SectionKind.HUNK if target.staged and target.change is not None and target.hunk is not None:
            await inv.plumbing.apply_hunk(inv.root, target.change, target.hunk, reverse=True)
        case SectionKind.STAGED_CHANGES:
            await inv.plumbing.unstage_all(inv.root)
        case _:
            pass


async def unstage_all(inv: Invocation) -> None:
    """Unstage everything."""
    await inv.plumbing.unstage_all(inv.root)


async def stage_file(inv: Invocation) -> None:
    """Stage the file the editor shows."""
    if inv.path is not None:
        await inv.plumbing.stage(inv.root, [inv.path])


async def unstage_file(inv: Invocation) -> None:
    """Unstage the file the editor shows."""
    if inv.path is None:
        return
    change = next((c for c in inv.handle.state.staged if c.path == inv.path), None)
    await inv.plumbing.unstage(inv.root, _paths_of(change) if change is not None else [inv.path])
