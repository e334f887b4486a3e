"""Folding."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from folio.commands._pipeline import Invocation


async def toggle_fold(inv: Invocation) -> None:
    """Fold or unfold the section under the cursor."""
    if inv.view is not None and inv.view.toggle_fold_at(inv.editor.cursor):
        inv.provider.notify_changed(inv.view.uri)
