"""Commit and stash detail documents."""

from __future__ import annotations

from typing import TYPE_CHECKING

from folio.document._fold import RenderOptions, carry_over_folds
from folio.document._layout import layout
from folio.document._section import Section
from folio.document._status import RenderedDocument, add_change
from folio.enums import SectionKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from folio.repository import CommitDetail, FileChange, StashDetail


def render_commit_detail(
    detail: CommitDetail,
    *,
    previous: Section | None = None,
    options: RenderOptions | None = None,
) -> RenderedDocument:
    """Render a commit: its metadata, message, and per-file diffs.

    Example text::

        commit 1a2b3c4d5e6f...
        Author:   Jane Doe <jane@example.com>
        Date:     2026-01-02 03:04:05 +0000

            Add feature

        modified   a.txt
    """
    commit = detail.commit
    root = Section(SectionKind.COMMIT_DETAIL, "commit-detail", f"commit {commit.sha}", payload=commit)
    _info(root, "author", f"Author:   {commit.author_name} <{commit.author_email}>")
    if commit.timestamp is not None:
        _info(root, "date", f"Date:     {commit.timestamp.strftime('%Y-%m-%d %H:%M:%S %z')}")
    if len(commit.parent_shas) > 1:
        _info(root, "merge", f"Merge:    {' '.join(sha[:7] for sha in commit.parent_shas)}")

    _message(root, commit.message)
    _changes(root, detail.changes)
    return _finish(root, previous, options)


def render_stash_detail(
    detail: StashDetail,
    *,
    previous: Section | None = None,
    options: RenderOptions | None = None,
) -> RenderedDocument:
    """Render a stash entry and the changes it records."""
    stash = detail.stash
    root = Section(
        SectionKind.STASH_DETAIL,
        "stash-detail",
        f"{stash.ref} {stash.message}",
        payload=stash,
    )
    if stash.sha:
        _info(root, "commit", f"Commit:   {stash.sha}")
    _changes(root, detail.changes)
    return _finish(root, previous, options)


def _info(root: Section, identity: str, text: str) -> Section:
    return root.add(
        Section(SectionKind.INFO_LINE, root.child_key(SectionKind.INFO_LINE, identity), text)
    )


def _message(root: Section, message: str) -> None:
    lines = message.strip("\n").splitlines()
    if not lines:
        return
    root.children[-1].trailer = "\n"
    for index, line in enumerate(lines):
        _ = _info(root, f"message-{index}", f"    {line}")


def _changes(root: Section, changes: Iterable[FileChange]) -> None:
    changes = tuple(changes)
    if not changes:
        return
    if root.children:
        root.children[-1].trailer = "\n"
    for change in changes:
        _ = add_change(root, change)


def _finish(root: Section, previous: Section | None, options: RenderOptions | None) -> RenderedDocument:
    carry_over_folds(root, previous, options)
    return RenderedDocument(layout(root), root)
