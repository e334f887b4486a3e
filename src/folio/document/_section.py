"""Section tree model.

A rendered document is a tree of sections. Each section knows its kind,
the entity it represents (its payload), the text of its own line, and the
half-open character range it occupies once laid out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from folio.enums import SectionKind


@dataclass(frozen=True, slots=True)
class TextRange:
    """Half-open character range ``[start, end)`` in a document.

    Attributes:
        start: Offset of the first character.
        end: Offset one past the last character.
    """

    start: int
    end: int

    @property
    def is_empty(self) -> bool:
        """Whether the range covers no characters."""
        return self.end <= self.start

    def contains(self, offset: int) -> bool:
        """Whether ``offset`` falls inside this (non-empty) range."""
        return self.start <= offset < self.end

    def encloses(self, other: TextRange) -> bool:
        """Whether ``other`` lies completely within this range."""
        return self.start <= other.start and other.end <= self.end


@dataclass(slots=True, eq=False)
class Section:
    """A node of a rendered document.

    Sections compare by identity. Two renders of the same repository state
    produce equal keys but distinct sections.

    Attributes:
        kind: What the section represents.
        key: Deterministic identity used to carry fold state across renders.
        header: Text of the section's own line, without newline. The root
            section has an empty header and emits no line.
        payload: Entity behind the section (a FileChange, Hunk, CommitInfo,
            StashEntry or repository-relative Path), or None.
        children: Nested sections in document order.
        trailer: Text emitted after the children, e.g. a blank separator line.
        foldable: Whether the section can be collapsed.
        folded: Whether the section is currently collapsed.
        range: Character range assigned by layout, None before layout.
    """

    kind: SectionKind
    key: str
    header: str = ""
    payload: object | None = None
    children: list[Section] = field(default_factory=list)
    trailer: str = ""
    foldable: bool = False
    folded: bool = False
    range: TextRange | None = None

    def child_key(self, kind: SectionKind, identity: object) -> str:
        """Build the key of a child section of ``kind`` with ``identity``."""
        return f"{self.key}/{kind.value}:{identity}"

    def add(self, child: Section) -> Section:
        """Append ``child`` and return it."""
        self.children.append(child)
        return child


def iter_sections(root: Section) -> Iterator[Section]:
    """Yield ``root`` and every descendant in document order."""
    stack = [root]
    while stack:
        section = stack.pop()
        yield section
        stack.extend(reversed(section.children))


def find_section(root: Section, key: str) -> Section | None:
    """Return the section with ``key``, or None."""
    return next((s for s in iter_sections(root) if s.key == key), None)


def find_kind(root: Section, kind: SectionKind) -> Section | None:
    """Return the first section of ``kind`` in document order, or None."""
    return next((s for s in iter_sections(root) if s.kind == kind), None)


def ancestors(root: Section, section: Section) -> list[Section]:
    """Return the ancestors of ``section``, outermost first.

    Returns:
        Sections from ``root`` down to the parent of ``section``. Empty when
        ``section`` is ``root`` or is not part of the tree.
    """
    path: list[Section] = []

    def walk(node: Section) -> bool:
        if node is section:
            return True
        path.append(node)
        if any(walk(child) for child in node.children):
            return True
        _ = path.pop()
        return False

    return path if walk(root) else []


def enclosing(root: Section, section: Section, *kinds: SectionKind) -> Section | None:
    """Return ``section`` or its nearest ancestor whose kind is in ``kinds``."""
    if section.kind in kinds:
        return section
    return next((s for s in reversed(ancestors(root, section)) if s.kind in kinds), None)
