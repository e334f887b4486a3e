"""Resolution of the entity a command acts on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from folio.document import ancestors
from folio.enums import SectionKind

if TYPE_CHECKING:
    from pathlib import Path

    from folio.document import Section
    from folio.repository import CommitInfo, FileChange, Hunk, StashEntry

_ENTITY_KINDS: Final = frozenset(
    {
        SectionKind.HUNK,
        SectionKind.CHANGE,
        SectionKind.UNTRACKED_FILE,
        SectionKind.COMMIT,
        SectionKind.STASH,
    }
)

_AREA_KINDS: Final = frozenset(
    {
        SectionKind.UNTRACKED_FILES,
        SectionKind.UNSTAGED_CHANGES,
        SectionKind.STAGED_CHANGES,
        SectionKind.STASHES,
        SectionKind.RECENT_COMMITS,
        SectionKind.COMMIT_DETAIL,
        SectionKind.STASH_DETAIL,
    }
)


@dataclass(frozen=True, slots=True)
class Target:
    """What the cursor points at.

    Attributes:
        kind: Kind of the innermost entity section (a diff line resolves to
            its hunk), or the kind of the section itself for headers.
        area: Kind of the enclosing top-level area, e.g. staged changes.
        section: The entity section.
        change: File change for change and hunk targets.
        hunk: Hunk for hunk targets.
        path: Path for untracked file targets.
        commit: Commit for commit targets.
        stash: Stash entry for stash targets.
    """

    kind: SectionKind
    area: SectionKind | None
    section: Section
    change: FileChange | None = None
    hunk: Hunk | None = None
    path: Path | None = None
    commit: CommitInfo | None = None
    stash: StashEntry | None = None

    @property
    def staged(self) -> bool:
        """Whether the target lies in the staged changes area."""
        return self.area == SectionKind.STAGED_CHANGES

    @property
    def unstaged(self) -> bool:
        """Whether the target lies in the unstaged changes area."""
        return self.area == SectionKind.UNSTAGED_CHANGES


def resolve_target(root: Section, section: Section) -> Target:
    """Resolve the section under the cursor to the entity it belongs to."""
    chain = [*ancestors(root, section), section]
    area = next((s.kind for s in reversed(chain) if s.kind in _AREA_KINDS), None)
    entity = next((s for s in reversed(chain) if s.kind in _ENTITY_KINDS), section)

    payload = entity.payload
    fields: dict[str, object] = {}
    match entity.kind:
        case SectionKind.HUNK:
            fields = {"change": chain[chain.index(entity) - 1].payload, "hunk": payload}
        case SectionKind.CHANGE:
            fields = {"change": payload}
        case SectionKind.UNTRACKED_FILE:
            fields = {"path": payload}
        case SectionKind.COMMIT:
            fields = {"commit": payload}
        case SectionKind.STASH:
            fields = {"stash": payload}
        case _:
            pass
    return Target(kind=entity.kind, area=area, section=entity, **fields)  # pyright: ignore[reportArgumentType]


def diff_line_number(target: Target, section: Section) -> int | None:
    """Return the new-file line a diff line (or its hunk) corresponds to."""
    hunk = target.hunk
    if hunk is None:
        return None
    index = section.payload if section.kind == SectionKind.DIFF_LINE else None
    if not isinstance(index, int):
        return None
    line_no = hunk.new_start
    for line in hunk.lines[:index]:
        if line.startswith((" ", "+")):
            line_no += 1
    return max(line_no, 1)
