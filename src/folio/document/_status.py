"""Status document rendering.

Builds the section tree of a repository's status document from a state
snapshot, seeds fold state, and lays the text out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from folio.document._fold import RenderOptions, carry_over_folds
from folio.document._layout import layout
from folio.document._section import Section
from folio.enums import ChangeStatus, InProgressKind, SectionKind

if TYPE_CHECKING:
    from folio.repository import (
        CommitInfo,
        FileChange,
        HeadInfo,
        InProgressOperation,
        RepositoryState,
    )

_LABEL_WIDTH: Final = 10
_STATUS_WIDTH: Final = 11

_IN_PROGRESS_VERBS: Final = {
    InProgressKind.MERGE: ("Merging", "into"),
    InProgressKind.REBASE: ("Rebasing", "onto"),
    InProgressKind.CHERRY_PICK: ("Cherry-picking", "onto"),
}


@dataclass(frozen=True, slots=True)
class RenderedDocument:
    """Text of a document together with its laid-out section tree.

    Attributes:
        text: The document text.
        root: Root section; every section's range indexes into ``text``.
    """

    text: str
    root: Section


def render_status(
    state: RepositoryState,
    *,
    latest_error: str | None = None,
    previous: Section | None = None,
    options: RenderOptions | None = None,
) -> RenderedDocument:
    """Render the status document for a repository state.

    Rendering never fails on missing data: an absent head or an empty facet
    simply omits its section.

    Args:
        state: Snapshot to render.
        latest_error: Repository error to show at the top, if any.
        previous: Root of the previous render, for carrying fold state.
        options: Render options.

    Returns:
        The rendered document.
    """
    options = options or RenderOptions()
    root = build_status_tree(state, latest_error=latest_error, options=options)
    carry_over_folds(root, previous, options)
    return RenderedDocument(layout(root), root)


def build_status_tree(
    state: RepositoryState,
    *,
    latest_error: str | None = None,
    options: RenderOptions | None = None,
) -> Section:
    """Build the (unfolded, not laid out) section tree of a status document."""
    options = options or RenderOptions()
    root = Section(SectionKind.STATUS, "status")
    blocks: list[Section] = []

    if latest_error:
        blocks.append(Section(SectionKind.ERROR, "error", f"GitError! {latest_error}"))

    if state.head is not None:
        blocks.append(_head_section(state.head))

    if state.in_progress is not None:
        blocks.append(_in_progress_section(state.in_progress))

    if options.show_untracked and state.untracked:
        section = _top_level(SectionKind.UNTRACKED_FILES, f"Untracked files ({len(state.untracked)})")
        for path in state.untracked:
            _ = section.add(
                Section(
                    SectionKind.UNTRACKED_FILE,
                    section.child_key(SectionKind.UNTRACKED_FILE, path.as_posix()),
                    path.as_posix(),
                    payload=path,
                )
            )
        blocks.append(section)

    for kind, title, changes in (
        (SectionKind.UNSTAGED_CHANGES, "Unstaged changes", state.unstaged),
        (SectionKind.STAGED_CHANGES, "Staged changes", state.staged),
    ):
        if changes:
            section = _top_level(kind, f"{title} ({len(changes)})")
            for change in changes:
                _ = add_change(section, change)
            blocks.append(section)

    if state.stashes:
        section = _top_level(SectionKind.STASHES, f"Stashes ({len(state.stashes)})")
        for stash in state.stashes:
            _ = section.add(
                Section(
                    SectionKind.STASH,
                    section.child_key(SectionKind.STASH, stash.sha or stash.ref),
                    f"{stash.ref} {stash.message}",
                    payload=stash,
                )
            )
        blocks.append(section)

    if state.commits:
        section = _top_level(SectionKind.RECENT_COMMITS, "Recent commits")
        for commit in state.commits:
            _ = section.add(_commit_line(section, commit))
        blocks.append(section)

    for block in blocks[:-1]:
        block.trailer = "\n"
    root.children.extend(blocks)
    return root


def add_change(parent: Section, change: FileChange) -> Section:
    """Append a foldable file section with its hunks and diff lines."""
    section = parent.add(
        Section(
            SectionKind.CHANGE,
            parent.child_key(SectionKind.CHANGE, change.path.as_posix()),
            _change_header(change),
            payload=change,
            foldable=True,
        )
    )
    for hunk in change.hunks:
        hunk_section = section.add(
            Section(
                SectionKind.HUNK,
                section.child_key(SectionKind.HUNK, hunk.identity),
                hunk.header,
                payload=hunk,
                foldable=True,
            )
        )
        for index, line in enumerate(hunk.lines):
            _ = hunk_section.add(
                Section(
                    SectionKind.DIFF_LINE,
                    hunk_section.child_key(SectionKind.DIFF_LINE, index),
                    line,
                    payload=index,
                )
            )
    return section


def _change_header(change: FileChange) -> str:
    label = f"{change.status.value:<{_STATUS_WIDTH}}"
    if change.status == ChangeStatus.RENAMED and change.old_path is not None:
        header = f"{label}{change.old_path.as_posix()} -> {change.path.as_posix()}"
    else:
        header = f"{label}{change.path.as_posix()}"
    if change.binary:
        header += " (binary)"
    return header


def _top_level(kind: SectionKind, header: str) -> Section:
    return Section(kind, kind.value, header, foldable=True)


def _commit_line(parent: Section, commit: CommitInfo) -> Section:
    return Section(
        SectionKind.COMMIT,
        parent.child_key(SectionKind.COMMIT, commit.sha),
        f"{commit.short_sha} {commit.subject}",
        payload=commit,
    )


def _label(name: str) -> str:
    return f"{name + ':':<{_LABEL_WIDTH}}"


def _head_section(head: HeadInfo) -> Section:
    if head.commit is not None:
        name = head.branch or head.commit.short_sha
        text = f"{name} {head.commit.subject}".rstrip()
    else:
        text = head.branch or ""
    section = Section(SectionKind.HEAD, "head", f"{_label('Head')}{text}", payload=head)

    if head.upstream:
        merge = head.upstream
        if head.upstream_commit is not None:
            merge = f"{merge} {head.upstream_commit.subject}".rstrip()
        divergence = [
            f"{label} {count}"
            for label, count in (("ahead", head.ahead), ("behind", head.behind))
            if count
        ]
        if divergence:
            merge = f"{merge} ({', '.join(divergence)})"
        _ = section.add(
            Section(
                SectionKind.INFO_LINE,
                section.child_key(SectionKind.INFO_LINE, "merge"),
                f"{_label('Merge')}{merge}",
                payload=head.upstream,
            )
        )

    if head.push_ref:
        _ = section.add(
            Section(
                SectionKind.INFO_LINE,
                section.child_key(SectionKind.INFO_LINE, "push"),
                f"{_label('Push')}{head.push_ref}",
                payload=head.push_ref,
            )
        )
    return section


def _in_progress_section(operation: InProgressOperation) -> Section:
    verb, preposition = _IN_PROGRESS_VERBS[operation.kind]
    text = f"{verb} {operation.head}".rstrip()
    if operation.onto:
        text = f"{text} {preposition} {operation.onto}"
    return Section(SectionKind.IN_PROGRESS, "in-progress", text, payload=operation)
