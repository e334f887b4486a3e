from pathlib import Path

import pytest

from folio.document import RenderOptions, find_section
from folio.enums import SectionKind
from folio.repository import RepositoryState
from folio.state import RepositoryHandle
from folio.views import DocumentUri, StatusView

from tests.conftest import make_change, sample_state


@pytest.fixture
def view(repo_root: Path) -> StatusView:
    handle = RepositoryHandle(repo_root, sample_state())
    return StatusView(DocumentUri.status(handle.root), handle)


class TestStatusView:
    def test_repr_names_uri(self, view: StatusView) -> None:
        assert repr(view).startswith("StatusView('folio://status/")

    def test_click_renders_lazily(self, view: StatusView) -> None:
        assert view.root is None

        section = view.click(0)

        assert section is not None and section.kind == SectionKind.HEAD
        assert view.text

    def test_update_keeps_fold_state(self, view: StatusView) -> None:
        _ = view.update()
        assert view.toggle_fold_at(view.text.index("modified   b.txt"))
        assert "@@ -1,3 +1,3 @@" in view.text

        view.handle.swap_state(sample_state(untracked=()))
        text = view.update()

        assert "@@ -1,3 +1,3 @@" in text
        assert "new.txt" not in text

    def test_toggle_on_diff_line_folds_hunk(self, repo_root: Path) -> None:
        handle = RepositoryHandle(repo_root, RepositoryState(unstaged=(make_change("b.txt"),)))
        view = StatusView(DocumentUri.status(handle.root), handle, options=RenderOptions(fold_file_diffs=False))
        _ = view.update()

        assert view.toggle_fold_at(view.text.index("+B"))

        assert view.text == "Unstaged changes (1)\nmodified   b.txt\n@@ -1,3 +1,3 @@\n"
        assert view.root is not None
        hunk = find_section(view.root, "unstaged-changes/change:b.txt/hunk:1,1")
        assert hunk is not None and hunk.folded

    def test_toggle_on_head_does_nothing(self, view: StatusView) -> None:
        text = view.update()

        assert not view.toggle_fold_at(0)
        assert view.text == text

    def test_toggle_outside_document(self, view: StatusView) -> None:
        _ = view.update()

        assert not view.toggle_fold_at(10_000)

    def test_relayout_before_render_renders(self, view: StatusView) -> None:
        assert view.relayout().startswith("Head:")
