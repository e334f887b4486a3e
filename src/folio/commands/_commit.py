"""Committing."""

from __future__ import annotations

from typing import TYPE_CHECKING

from folio.enums import GitErrorCode
from folio.exceptions import RepositoryError

if TYPE_CHECKING:
    from folio.commands._pipeline import Invocation


async def commit(inv: Invocation) -> None:
    """Prompt for a message and commit the staged changes.

    An empty or cancelled message commits nothing.

    Raises:
        RepositoryError: If nothing is staged and no merge or cherry-pick
            is waiting to be concluded.
    """
    state = inv.handle.state
    if not state.staged and state.in_progress is None:
        msg = "nothing added to commit"
        raise RepositoryError(GitErrorCode.NO_LOCAL_CHANGES, msg)

    message = await inv.host.prompt("Commit message")
    if message is None or not message.strip():
        return
    result = await inv.plumbing.commit(inv.root, message)
    await inv.host.show_info_message(f"Committed {result.sha[:7]}")
