"""Document views.

A view owns the section tree and text of one document URI. Views are
re-rendered from their repository handle after every refresh, keeping the
fold state of sections whose keys survive.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import TYPE_CHECKING

from folio.document import (
    RenderOptions,
    ancestors,
    hit_test,
    layout,
    render_commit_detail,
    render_stash_detail,
    render_status,
    toggle_fold,
)

if TYPE_CHECKING:
    from folio.document import RenderedDocument, Section
    from folio.repository import CommitDetail, StashDetail, StashEntry
    from folio.state import RepositoryHandle
    from folio.views._uri import DocumentUri


class DocumentView(ABC):
    """Base class for rendered documents of a repository.

    Attributes:
        document_uri: Parsed URI of this view.
        handle: Repository the view shows.
        options: Render options.
        text: Current document text.
        root: Current section tree, None before the first render.
    """

    __slots__ = ("document_uri", "handle", "options", "root", "text")

    def __init__(
        self,
        document_uri: DocumentUri,
        handle: RepositoryHandle,
        *,
        options: RenderOptions | None = None,
    ) -> None:
        self.document_uri: DocumentUri = document_uri
        self.handle: RepositoryHandle = handle
        self.options: RenderOptions = options or RenderOptions()
        self.text: str = ""
        self.root: Section | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.uri!r})"

    @property
    def uri(self) -> str:
        """URI string of this view."""
        return str(self.document_uri)

    @property
    def stale(self) -> bool:
        """Whether what the view shows no longer exists in the repository."""
        return False

    @abstractmethod
    def render(self, previous: Section | None) -> RenderedDocument:
        """Render the document from the data the view currently holds."""

    def update(self) -> str:
        """Re-render, carrying fold state over from the previous render.

        Returns:
            The new document text.
        """
        document = self.render(self.root)
        self.text = document.text
        self.root = document.root
        return self.text

    def relayout(self) -> str:
        """Lay the current tree out again after a fold change."""
        if self.root is None:
            return self.update()
        self.text = layout(self.root)
        return self.text

    def click(self, offset: int) -> Section | None:
        """Return the most specific section at ``offset``."""
        if self.root is None:
            _ = self.update()
        if self.root is None:
            return None
        return hit_test(self.root, offset)

    def toggle_fold_at(self, offset: int) -> bool:
        """Toggle the innermost foldable section at ``offset`` and relayout.

        A cursor on a diff line toggles its hunk, a cursor on a file header
        toggles the file, and so on.

        Returns:
            True if a section was toggled.
        """
        section = self.click(offset)
        if section is None or self.root is None:
            return False
        candidates = [section, *reversed(ancestors(self.root, section))]
        target = next((s for s in candidates if s.foldable), None)
        if target is None or not toggle_fold(target):
            return False
        _ = self.relayout()
        return True


class StatusView(DocumentView):
    """The status document of a repository."""

    __slots__ = ()

    def render(self, previous: Section | None) -> RenderedDocument:
        return render_status(
            self.handle.state,
            latest_error=self.handle.latest_error,
            previous=previous,
            options=self.options,
        )


class CommitView(DocumentView):
    """Detail document of a single commit.

    Commits are immutable, so the detail is fetched once when the view is
    opened and only re-rendered afterwards.
    """

    __slots__ = ("detail",)

    def __init__(
        self,
        document_uri: DocumentUri,
        handle: RepositoryHandle,
        detail: CommitDetail,
        *,
        options: RenderOptions | None = None,
    ) -> None:
        super().__init__(document_uri, handle, options=options)
        self.detail: CommitDetail = detail

    def render(self, previous: Section | None) -> RenderedDocument:
        return render_commit_detail(self.detail, previous=previous, options=self.options)


class StashView(DocumentView):
    """Detail document of a stash entry.

    Dropping a stash renumbers the ones after it, so the view follows its
    entry by SHA through every refresh. Once the entry is gone from the
    repository state the view is stale.
    """

    __slots__ = ("detail",)

    def __init__(
        self,
        document_uri: DocumentUri,
        handle: RepositoryHandle,
        detail: StashDetail,
        *,
        options: RenderOptions | None = None,
    ) -> None:
        super().__init__(document_uri, handle, options=options)
        self.detail: StashDetail = detail

    @property
    def stale(self) -> bool:
        return self.current_entry() is None

    def current_entry(self) -> StashEntry | None:
        """Return the shown stash as it is listed now, or None once dropped."""
        sha = self.detail.stash.sha
        return next((stash for stash in self.handle.state.stashes if stash.sha == sha), None)

    def render(self, previous: Section | None) -> RenderedDocument:
        entry = self.current_entry()
        if entry is not None and entry != self.detail.stash:
            self.detail = replace(self.detail, stash=entry)
        return render_stash_detail(self.detail, previous=previous, options=self.options)
