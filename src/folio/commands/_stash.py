"""Stashing."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from folio.commands._pipeline import Invocation


async def stash(inv: Invocation) -> None:
    """Prompt for an optional message and stash local changes."""
    message = await inv.host.prompt("Stash message")
    if message is None:
        return
    await inv.plumbing.stash(inv.root, message.strip())
