"""Branch switching, branch creation, merge and rebase."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from folio.commands._pipeline import Invocation


def _candidates(inv: Invocation) -> list[str]:
    state = inv.handle.state
    current = state.head.branch if state.head is not None else None
    return [branch for branch in state.branches if branch != current]


async def checkout(inv: Invocation) -> None:
    """Pick a branch and switch the working tree to it."""
    choice = await inv.host.pick("Checkout", _candidates(inv))
    if choice:
        await inv.plumbing.checkout(inv.root, choice)


async def create_branch(inv: Invocation) -> None:
    """Prompt for a name, then create a branch at HEAD and switch to it."""
    name = await inv.host.prompt("Create branch")
    if name is None or not name.strip():
        return
    await inv.plumbing.create_branch(inv.root, name.strip())


async def merge(inv: Invocation) -> None:
    """Pick a branch and merge it into the current branch."""
    choice = await inv.host.pick("Merge", _candidates(inv))
    if choice:
        await inv.plumbing.merge(inv.root, choice)


async def rebase(inv: Invocation) -> None:
    """Pick a branch and rebase the current branch onto it."""
    choice = await inv.host.pick("Rebase onto", _candidates(inv))
    if choice:
        await inv.plumbing.rebase(inv.root, choice)
