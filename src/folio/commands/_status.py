"""Refresh and reference listing."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from folio.commands._pipeline import Invocation


async def refresh(inv: Invocation) -> None:  # noqa: ARG001
    """Do nothing; the pipeline refreshes the repository afterwards."""


async def show_refs(inv: Invocation) -> None:
    """Show branches and remotes of the repository."""
    state = inv.handle.state
    current = state.head.branch if state.head is not None else None
    lines = ["Branches:"]
    lines.extend(f"{'*' if branch == current else ' '} {branch}" for branch in state.branches)
    if state.remotes:
        lines.append("Remotes:")
        lines.extend(f"  {remote.name} {remote.url}".rstrip() for remote in state.remotes)
    await inv.host.show_info_message("\n".join(lines))
