"""Cursor-to-section resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from folio.document._section import Section


def hit_test(root: Section, offset: int) -> Section | None:
    """Return the most specific section covering ``offset``.

    Descends from ``root`` through the child whose non-empty range contains
    the offset. Children collapsed by folding have empty ranges and are
    never returned.

    Args:
        root: A laid-out section tree.
        offset: Character offset into the document.

    Returns:
        The deepest section containing ``offset``, or None when the offset
        is negative or outside the root's range.
    """
    if root.range is None or root.range.is_empty or not root.range.contains(offset):
        return None

    current = root
    while True:
        for child in current.children:
            if child.range is not None and not child.range.is_empty and child.range.contains(offset):
                current = child
                break
        else:
            return current
