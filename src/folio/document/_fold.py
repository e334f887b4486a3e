"""Fold state: toggling and carrying folds across renders."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Self

from folio.document._section import iter_sections
from folio.enums import SectionKind

if TYPE_CHECKING:
    from folio.config import StatusConfig
    from folio.document._section import Section


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Options that shape a rendered document.

    Attributes:
        fold_file_diffs: File sections start folded.
        fold_commits_over: "Recent commits" starts folded when it lists more
            commits than this.
        show_untracked: Whether untracked files are listed.
    """

    fold_file_diffs: bool = True
    fold_commits_over: int = 20
    show_untracked: bool = True

    @classmethod
    def from_config(cls, config: StatusConfig) -> Self:
        """Build render options from the ``status`` config section."""
        return cls(
            fold_file_diffs=config.fold_file_diffs,
            fold_commits_over=config.fold_commits_over,
            show_untracked=config.show_untracked,
        )


def default_folded(section: Section, options: RenderOptions) -> bool:
    """Return the fold state a section starts in when it has no history."""
    if not section.foldable:
        return False
    if section.kind == SectionKind.CHANGE:
        return options.fold_file_diffs
    if section.kind == SectionKind.RECENT_COMMITS:
        return len(section.children) > options.fold_commits_over
    return False


def carry_over_folds(
    root: Section,
    previous: Section | None,
    options: RenderOptions | None = None,
) -> None:
    """Seed fold state of a new tree from the previous render.

    A foldable section takes the fold state of the previous section with the
    same key, or its kind default when the key is new.

    Args:
        root: Freshly built tree (not yet laid out).
        previous: Root of the previous render, if any.
        options: Render options for kind defaults.
    """
    options = options or RenderOptions()
    history: dict[str, bool] = {}
    if previous is not None:
        history = {s.key: s.folded for s in iter_sections(previous) if s.foldable}

    for section in iter_sections(root):
        if section.foldable:
            section.folded = history.get(section.key, default_folded(section, options))
        else:
            section.folded = False


def toggle_fold(section: Section) -> bool:
    """Flip the fold state of ``section``.

    The caller lays the document out again afterwards.

    Returns:
        True if the section is foldable and was toggled, False otherwise.
    """
    if not section.foldable:
        return False
    section.folded = not section.folded
    return True
