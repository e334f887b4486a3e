"""Text layout and position helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from folio.document._section import TextRange

if TYPE_CHECKING:
    from folio.document._section import Section


def layout(root: Section) -> str:
    """Produce the text of a section tree and assign every section's range.

    Each section emits its header followed by a newline (the root's empty
    header emits nothing), then its children unless folded, then its
    trailer. Descendants of a folded section keep their place in the tree
    with a zero-width range at the folded section's body boundary, the
    offset right after its header.

    Args:
        root: Root of the tree to lay out.

    Returns:
        The document text.
    """
    parts: list[str] = []
    _ = _emit(root, parts, 0)
    return "".join(parts)


def _emit(section: Section, parts: list[str], offset: int) -> int:
    start = offset
    if section.header:
        parts.append(section.header)
        parts.append("\n")
        offset += len(section.header) + 1

    if section.folded:
        for child in section.children:
            _collapse(child, offset)
    else:
        for child in section.children:
            offset = _emit(child, parts, offset)

    if section.trailer:
        parts.append(section.trailer)
        offset += len(section.trailer)

    section.range = TextRange(start, offset)
    return offset


def _collapse(section: Section, offset: int) -> None:
    section.range = TextRange(offset, offset)
    for child in section.children:
        _collapse(child, offset)


def position_at(text: str, offset: int) -> tuple[int, int]:
    """Convert a character offset to a zero-based ``(line, column)`` pair.

    Offsets outside the text are clamped to its bounds.
    """
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset)
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start


def offset_at(text: str, line: int, column: int) -> int:
    """Convert a zero-based ``(line, column)`` pair to a character offset.

    Lines past the end clamp to the end of the text, and columns past the
    end of a line clamp to that line's end.

    Examples:
        >>> offset_at("ab\\ncd\\n", 1, 1)
        4
        >>> offset_at("ab\\ncd\\n", 0, 10)
        2
    """
    if line < 0:
        return 0
    start = 0
    for _ in range(line):
        newline = text.find("\n", start)
        if newline < 0:
            return len(text)
        start = newline + 1
    end = text.find("\n", start)
    if end < 0:
        end = len(text)
    return start + max(0, min(column, end - start))
