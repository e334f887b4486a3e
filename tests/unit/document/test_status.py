from pathlib import Path

from folio.document import RenderOptions, build_status_tree, find_kind, find_section, render_status
from folio.enums import ChangeStatus, InProgressKind, SectionKind
from folio.repository import FileChange, HeadInfo, InProgressOperation, RepositoryState

from tests.conftest import make_change, make_commit, make_hunk, sample_state

_UNFOLDED = RenderOptions(fold_file_diffs=False)


class TestRenderStatus:
    def test_renders_every_area_in_order(self) -> None:
        document = render_status(sample_state())

        assert document.text == (
            "Head:     main Initial commit\n"
            "\n"
            "Untracked files (1)\n"
            "new.txt\n"
            "\n"
            "Unstaged changes (1)\n"
            "modified   b.txt\n"
            "\n"
            "Staged changes (1)\n"
            "modified   a.txt\n"
            "\n"
            "Stashes (1)\n"
            "stash@{0} On main: wip\n"
            "\n"
            "Recent commits\n"
            "0000000 Initial commit\n"
        )

    def test_empty_state_renders_empty_document(self) -> None:
        document = render_status(RepositoryState.empty())

        assert document.text == ""
        assert document.root.kind == SectionKind.STATUS
        assert document.root.children == []

    def test_omits_empty_sections(self) -> None:
        document = render_status(sample_state(untracked=(), stashes=()))

        assert "Untracked files" not in document.text
        assert "Stashes" not in document.text
        assert find_kind(document.root, SectionKind.STASHES) is None

    def test_last_block_has_no_trailing_blank_line(self) -> None:
        document = render_status(sample_state(commits=()))

        assert document.text.endswith("stash@{0} On main: wip\n")
        assert not document.text.endswith("\n\n")

    def test_latest_error_is_shown_first(self) -> None:
        document = render_status(sample_state(), latest_error="nothing added to commit")

        assert document.text.startswith("GitError! nothing added to commit\n\nHead:")
        assert document.root.children[0].kind == SectionKind.ERROR

    def test_unfolded_change_shows_hunks_and_lines(self) -> None:
        state = RepositoryState(unstaged=(make_change("b.txt"),))

        document = render_status(state, options=_UNFOLDED)

        assert document.text == (
            "Unstaged changes (1)\n"
            "modified   b.txt\n"
            "@@ -1,3 +1,3 @@\n"
            " a\n"
            "-b\n"
            "+B\n"
            " c\n"
        )

    def test_hidden_untracked_files(self) -> None:
        document = render_status(sample_state(), options=RenderOptions(show_untracked=False))

        assert "new.txt" not in document.text


class TestHeadSection:
    def test_upstream_and_divergence(self) -> None:
        head = HeadInfo(
            branch="main",
            commit=make_commit(1, "Local work"),
            upstream="origin/main",
            upstream_commit=make_commit(2, "Upstream work"),
            push_ref="origin/main",
            ahead=2,
            behind=1,
        )

        document = render_status(RepositoryState(head=head))

        assert document.text == (
            "Head:     main Local work\n"
            "Merge:    origin/main Upstream work (ahead 2, behind 1)\n"
            "Push:     origin/main\n"
        )

    def test_only_nonzero_divergence_is_listed(self) -> None:
        head = HeadInfo(branch="main", commit=make_commit(1), upstream="origin/main", ahead=3)

        document = render_status(RepositoryState(head=head))

        assert "Merge:    origin/main (ahead 3)\n" in document.text

    def test_detached_head_shows_short_sha(self) -> None:
        head = HeadInfo(branch=None, commit=make_commit(1, "Detached"))

        document = render_status(RepositoryState(head=head))

        assert document.text == "Head:     0000000 Detached\n"

    def test_unborn_branch_shows_branch_name(self) -> None:
        document = render_status(RepositoryState(head=HeadInfo(branch="main")))

        assert document.text == "Head:     main\n"


class TestInProgressSection:
    def test_merge(self) -> None:
        state = RepositoryState(in_progress=InProgressOperation(InProgressKind.MERGE, "feature", "main"))

        assert render_status(state).text == "Merging feature into main\n"

    def test_rebase(self) -> None:
        state = RepositoryState(in_progress=InProgressOperation(InProgressKind.REBASE, "topic", "main"))

        assert render_status(state).text == "Rebasing topic onto main\n"

    def test_cherry_pick_without_onto(self) -> None:
        state = RepositoryState(in_progress=InProgressOperation(InProgressKind.CHERRY_PICK, "abc1234"))

        assert render_status(state).text == "Cherry-picking abc1234\n"


class TestChangeHeaders:
    def test_rename_shows_both_paths(self) -> None:
        change = make_change("new.txt", ChangeStatus.RENAMED, old_path="old.txt", hunks=())

        document = render_status(RepositoryState(staged=(change,)))

        assert "renamed    old.txt -> new.txt\n" in document.text

    def test_binary_marker(self) -> None:
        change = FileChange(Path("logo.png"), ChangeStatus.ADDED, binary=True)

        document = render_status(RepositoryState(staged=(change,)))

        assert "new file   logo.png (binary)\n" in document.text

    def test_deleted_file(self) -> None:
        change = make_change("gone.txt", ChangeStatus.DELETED, hunks=())

        document = render_status(RepositoryState(unstaged=(change,)))

        assert "deleted    gone.txt\n" in document.text


class TestSectionTree:
    def test_keys_are_deterministic(self) -> None:
        first = build_status_tree(sample_state())
        second = build_status_tree(sample_state())

        assert [s.key for s in first.children] == [s.key for s in second.children]
        assert find_section(first, "unstaged-changes/change:b.txt") is not None
        assert find_section(first, "unstaged-changes/change:b.txt/hunk:1,1") is not None

    def test_same_path_in_both_areas_has_distinct_keys(self) -> None:
        state = RepositoryState(unstaged=(make_change("a.txt"),), staged=(make_change("a.txt"),))

        root = build_status_tree(state)

        assert find_section(root, "unstaged-changes/change:a.txt") is not None
        assert find_section(root, "staged-changes/change:a.txt") is not None

    def test_payloads_point_at_entities(self) -> None:
        state = sample_state()
        root = build_status_tree(state)

        change = find_section(root, "staged-changes/change:a.txt")
        hunk = find_section(root, "staged-changes/change:a.txt/hunk:1,1")
        line = find_section(root, "staged-changes/change:a.txt/hunk:1,1/diff-line:2")

        assert change is not None and change.payload is state.staged[0]
        assert hunk is not None and hunk.payload is state.staged[0].hunks[0]
        assert line is not None and line.payload == 2

    def test_foldable_kinds(self) -> None:
        root = build_status_tree(sample_state())

        foldable = {s.kind for s in root.children if s.foldable}
        assert SectionKind.HEAD not in foldable
        assert SectionKind.UNSTAGED_CHANGES in foldable
        assert SectionKind.RECENT_COMMITS in foldable

    def test_many_commits_start_folded(self) -> None:
        commits = tuple(make_commit(i) for i in range(1, 6))

        document = render_status(RepositoryState(commits=commits), options=RenderOptions(fold_commits_over=3))

        assert document.text == "Recent commits\n"

    def test_hunk_sections_are_open_by_default(self) -> None:
        state = RepositoryState(unstaged=(make_change("b.txt", hunks=(make_hunk(), make_hunk(10, 10))),))

        document = render_status(state, options=_UNFOLDED)

        assert document.text.count("@@ -") == 2
