"""folio document engine.

A repository is shown as a tree of nested sections laid out as text. The
engine renders state snapshots to section trees, keeps fold state across
renders, and resolves a cursor offset to the section under it.
"""

from folio.document._detail import render_commit_detail, render_stash_detail
from folio.document._fold import RenderOptions, carry_over_folds, default_folded, toggle_fold
from folio.document._hit import hit_test
from folio.document._layout import layout, offset_at, position_at
from folio.document._section import (
    Section,
    TextRange,
    ancestors,
    enclosing,
    find_kind,
    find_section,
    iter_sections,
)
from folio.document._status import RenderedDocument, add_change, build_status_tree, render_status

__all__ = [
    "RenderOptions",
    "RenderedDocument",
    "Section",
    "TextRange",
    "add_change",
    "ancestors",
    "build_status_tree",
    "carry_over_folds",
    "default_folded",
    "enclosing",
    "find_kind",
    "find_section",
    "hit_test",
    "iter_sections",
    "layout",
    "offset_at",
    "position_at",
    "render_commit_detail",
    "render_stash_detail",
    "render_status",
    "toggle_fold",
]
