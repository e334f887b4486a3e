from pathlib import Path

import pytest

from folio.enums import ChangeStatus, GitErrorCode, InProgressKind
from folio.exceptions import PathViolationError, RepositoryError
from folio.repository import GitRepository

from tests.integration.conftest import commit_file, run_git


class TestOpen:
    def test_not_a_repository(self, tmp_path: Path) -> None:
        with pytest.raises(RepositoryError) as exc_info:
            _ = GitRepository(tmp_path / "nowhere")

        assert exc_info.value.code == GitErrorCode.NOT_A_GIT_REPOSITORY

    def test_root_is_resolved(self, git_repo: Path) -> None:
        with GitRepository(git_repo) as repo:
            assert repo.root == git_repo


class TestFacets:
    def test_head(self, git_repo: Path) -> None:
        with GitRepository(git_repo) as repo:
            head = repo.get_head()

        assert head is not None
        assert head.branch == "main"
        assert head.commit is not None
        assert head.commit.subject == "Initial commit"
        assert head.commit.author_email == "test@example.com"
        assert head.upstream is None

    def test_clean_repository(self, git_repo: Path) -> None:
        with GitRepository(git_repo) as repo:
            assert repo.get_untracked() == ()
            assert repo.get_unstaged() == ()
            assert repo.get_staged() == ()
            assert repo.get_stashes() == ()
            assert repo.get_in_progress() is None
            assert repo.get_branches() == ("main",)
            assert [c.subject for c in repo.get_commits()] == ["Initial commit"]

    def test_untracked_files_are_listed_individually(self, git_repo: Path) -> None:
        (git_repo / "docs").mkdir()
        _ = (git_repo / "docs" / "guide.md").write_text("hi\n")
        _ = (git_repo / "c.txt").write_text("c\n")

        with GitRepository(git_repo) as repo:
            assert repo.get_untracked() == (Path("c.txt"), Path("docs/guide.md"))

    def test_unstaged_modification_has_hunks(self, git_repo: Path) -> None:
        _ = (git_repo / "a.txt").write_text("one\nTWO\nthree\n")

        with GitRepository(git_repo) as repo:
            (change,) = repo.get_unstaged()

        assert change.path == Path("a.txt")
        assert change.status == ChangeStatus.MODIFIED
        (hunk,) = change.hunks
        assert hunk.header == "@@ -1,3 +1,3 @@"
        assert hunk.lines == (" one", "-two", "+TWO", " three")

    def test_context_lines(self, git_repo: Path) -> None:
        _ = (git_repo / "a.txt").write_text("one\nTWO\nthree\n")

        with GitRepository(git_repo) as repo:
            (change,) = repo.get_unstaged(context_lines=0)

        assert change.hunks[0].lines == ("-two", "+TWO")

    def test_deleted_file(self, git_repo: Path) -> None:
        (git_repo / "b.txt").unlink()

        with GitRepository(git_repo) as repo:
            (change,) = repo.get_unstaged()

        assert change.status == ChangeStatus.DELETED
        assert change.hunks[0].lines == ("-alpha", "-beta")

    def test_commits_newest_first(self, git_repo: Path) -> None:
        commit_file(git_repo, "c.txt", "c\n", "Add c")

        with GitRepository(git_repo) as repo:
            commits = repo.get_commits(count=5)

        assert [c.subject for c in commits] == ["Add c", "Initial commit"]
        assert commits[0].parent_shas == (commits[1].sha,)

    def test_remotes_and_upstream(self, git_repo: Path, tmp_path: Path) -> None:
        remote = tmp_path / "remote.git"
        _ = run_git(tmp_path, "init", "--bare", str(remote))
        _ = run_git(git_repo, "remote", "add", "origin", str(remote))
        _ = run_git(git_repo, "push", "--set-upstream", "origin", "main")
        commit_file(git_repo, "c.txt", "c\n", "Add c")

        with GitRepository(git_repo) as repo:
            remotes = repo.get_remotes()
            head = repo.get_head()
            branches = repo.get_branches()

        assert [r.name for r in remotes] == ["origin"]
        assert remotes[0].url == str(remote)
        assert head is not None
        assert head.upstream == "origin/main"
        assert head.push_ref == "origin/main"
        assert (head.ahead, head.behind) == (1, 0)
        assert branches == ("main", "origin/main")


class TestStaging:
    def test_stage_and_unstage_file(self, git_repo: Path) -> None:
        _ = (git_repo / "a.txt").write_text("one\nTWO\nthree\n")

        with GitRepository(git_repo) as repo:
            repo.stage([Path("a.txt")])
            assert [c.path for c in repo.get_staged()] == [Path("a.txt")]
            assert repo.get_unstaged() == ()

            repo.unstage([Path("a.txt")])
            assert repo.get_staged() == ()
            assert [c.path for c in repo.get_unstaged()] == [Path("a.txt")]

    def test_staging_a_new_file_and_unstaging_it_again(self, git_repo: Path) -> None:
        _ = (git_repo / "c.txt").write_text("c\n")

        with GitRepository(git_repo) as repo:
            repo.stage([Path("c.txt")])
            (change,) = repo.get_staged()
            assert change.status == ChangeStatus.ADDED

            repo.unstage([Path("c.txt")])
            assert repo.get_staged() == ()
            assert repo.get_untracked() == (Path("c.txt"),)

    def test_stage_deletion(self, git_repo: Path) -> None:
        (git_repo / "b.txt").unlink()

        with GitRepository(git_repo) as repo:
            repo.stage_all()
            (change,) = repo.get_staged()

        assert change.status == ChangeStatus.DELETED

    def test_stage_one_hunk(self, git_repo: Path) -> None:
        lines = [f"line {i}\n" for i in range(1, 21)]
        commit_file(git_repo, "long.txt", "".join(lines), "Add long")
        lines[1] = "line TWO\n"
        lines[18] = "line NINETEEN\n"
        _ = (git_repo / "long.txt").write_text("".join(lines))

        with GitRepository(git_repo) as repo:
            (change,) = repo.get_unstaged()
            assert len(change.hunks) == 2
            repo.apply_hunk(change, change.hunks[1])

            (staged,) = repo.get_staged()
            (unstaged,) = repo.get_unstaged()

        assert any(line == "+line NINETEEN" for line in staged.hunks[0].lines)
        assert len(unstaged.hunks) == 1
        assert any(line == "+line TWO" for line in unstaged.hunks[0].lines)

    def test_unstage_one_hunk(self, git_repo: Path) -> None:
        _ = (git_repo / "a.txt").write_text("one\nTWO\nthree\n")

        with GitRepository(git_repo) as repo:
            repo.stage([Path("a.txt")])
            (change,) = repo.get_staged()
            repo.apply_hunk(change, change.hunks[0], reverse=True)

            assert repo.get_staged() == ()

    def test_path_outside_repository(self, git_repo: Path, tmp_path: Path) -> None:
        with GitRepository(git_repo) as repo, pytest.raises(PathViolationError):
            repo.stage([tmp_path / "elsewhere.txt"])


class TestCommit:
    def test_commit_staged_changes(self, git_repo: Path) -> None:
        _ = (git_repo / "a.txt").write_text("one\nTWO\nthree\n")

        with GitRepository(git_repo) as repo:
            repo.stage([Path("a.txt")])
            result = repo.commit("Capitalize two")
            head = repo.get_head()

        assert result.files == frozenset({Path("a.txt")})
        assert head is not None and head.commit is not None
        assert head.commit.sha == result.sha
        assert head.commit.subject == "Capitalize two"

    def test_nothing_staged(self, git_repo: Path) -> None:
        with GitRepository(git_repo) as repo, pytest.raises(RepositoryError) as exc_info:
            _ = repo.commit("Nothing")

        assert exc_info.value.code == GitErrorCode.NO_LOCAL_CHANGES

    def test_show_commit(self, git_repo: Path) -> None:
        with GitRepository(git_repo) as repo:
            head = repo.get_head()
            assert head is not None and head.commit is not None
            detail = repo.show_commit(head.commit.sha)

        assert [(c.path, c.status) for c in detail.changes] == [
            (Path("a.txt"), ChangeStatus.ADDED),
            (Path("b.txt"), ChangeStatus.ADDED),
        ]

    def test_show_unknown_commit(self, git_repo: Path) -> None:
        with GitRepository(git_repo) as repo, pytest.raises(RepositoryError) as exc_info:
            _ = repo.show_commit("f" * 40)

        assert exc_info.value.code == GitErrorCode.BRANCH_NOT_FOUND

    def test_rename_is_detected(self, git_repo: Path) -> None:
        _ = run_git(git_repo, "mv", "a.txt", "renamed.txt")

        with GitRepository(git_repo) as repo:
            (change,) = repo.get_staged()

        assert change.status == ChangeStatus.RENAMED
        assert change.old_path == Path("a.txt")
        assert change.path == Path("renamed.txt")


class TestDiscard:
    def test_discard_unstaged_file(self, git_repo: Path) -> None:
        _ = (git_repo / "a.txt").write_text("changed\n")

        with GitRepository(git_repo) as repo:
            (change,) = repo.get_unstaged()
            repo.discard_file(change)
            assert repo.get_unstaged() == ()

        assert (git_repo / "a.txt").read_text() == "one\ntwo\nthree\n"

    def test_discard_staged_file(self, git_repo: Path) -> None:
        _ = (git_repo / "a.txt").write_text("changed\n")

        with GitRepository(git_repo) as repo:
            repo.stage([Path("a.txt")])
            (change,) = repo.get_staged()
            repo.discard_file(change, staged=True)
            assert repo.get_staged() == ()
            assert repo.get_unstaged() == ()

        assert (git_repo / "a.txt").read_text() == "one\ntwo\nthree\n"

    def test_discard_hunk(self, git_repo: Path) -> None:
        _ = (git_repo / "a.txt").write_text("one\nTWO\nthree\n")

        with GitRepository(git_repo) as repo:
            (change,) = repo.get_unstaged()
            repo.discard_hunk(change, change.hunks[0])

        assert (git_repo / "a.txt").read_text() == "one\ntwo\nthree\n"

    def test_delete_untracked(self, git_repo: Path) -> None:
        (git_repo / "build").mkdir()
        _ = (git_repo / "build" / "out.o").write_text("x")

        with GitRepository(git_repo) as repo:
            repo.delete_untracked(Path("build"))
            assert repo.get_untracked() == ()

        assert not (git_repo / "build").exists()


class TestStash:
    def test_stash_show_apply_drop(self, git_repo: Path) -> None:
        _ = (git_repo / "a.txt").write_text("one\nTWO\nthree\n")

        with GitRepository(git_repo) as repo:
            repo.stash("halfway")
            assert repo.get_unstaged() == ()
            (entry,) = repo.get_stashes()
            assert entry.ref == "stash@{0}"
            assert entry.message == "On main: halfway"

            detail = repo.show_stash(0)
            assert [c.path for c in detail.changes] == [Path("a.txt")]

            repo.apply_stash(0)
            assert [c.path for c in repo.get_unstaged()] == [Path("a.txt")]

            repo.drop_stash(0)
            assert repo.get_stashes() == ()

    def test_nothing_to_stash(self, git_repo: Path) -> None:
        with GitRepository(git_repo) as repo, pytest.raises(RepositoryError) as exc_info:
            repo.stash()

        assert exc_info.value.code == GitErrorCode.NO_LOCAL_CHANGES

    def test_missing_stash(self, git_repo: Path) -> None:
        with GitRepository(git_repo) as repo, pytest.raises(RepositoryError) as exc_info:
            _ = repo.show_stash(3)

        assert exc_info.value.code == GitErrorCode.NO_STASH_FOUND


class TestBranching:
    def test_merge_conflict_is_in_progress(self, git_repo: Path) -> None:
        _ = run_git(git_repo, "checkout", "-b", "feature")
        commit_file(git_repo, "a.txt", "one\nfeature\nthree\n", "Feature change")
        _ = run_git(git_repo, "checkout", "main")
        commit_file(git_repo, "a.txt", "one\nmain\nthree\n", "Main change")

        with GitRepository(git_repo) as repo:
            with pytest.raises(RepositoryError) as exc_info:
                repo.merge("feature")
            operation = repo.get_in_progress()

        assert exc_info.value.code == GitErrorCode.CONFLICT
        assert operation is not None
        assert operation.kind == InProgressKind.MERGE
        assert operation.head == "feature"
        assert operation.onto == "main"

    def test_merge_unknown_branch(self, git_repo: Path) -> None:
        with GitRepository(git_repo) as repo, pytest.raises(RepositoryError) as exc_info:
            repo.merge("nope")

        assert exc_info.value.code == GitErrorCode.BRANCH_NOT_FOUND

    def test_create_branch_and_checkout(self, git_repo: Path) -> None:
        with GitRepository(git_repo) as repo:
            repo.create_branch("topic")
            on_topic = repo.get_head()
            repo.checkout("main")
            on_main = repo.get_head()
            branches = repo.get_branches()

        assert on_topic is not None
        assert on_topic.branch == "topic"
        assert on_main is not None
        assert on_main.branch == "main"
        assert branches == ("main", "topic")

    def test_create_existing_branch(self, git_repo: Path) -> None:
        with GitRepository(git_repo) as repo, pytest.raises(RepositoryError) as exc_info:
            repo.create_branch("main")

        assert exc_info.value.code == GitErrorCode.BRANCH_ALREADY_EXISTS

    def test_checkout_unknown_branch(self, git_repo: Path) -> None:
        with GitRepository(git_repo) as repo, pytest.raises(RepositoryError) as exc_info:
            repo.checkout("nope")

        assert exc_info.value.code == GitErrorCode.BRANCH_NOT_FOUND

    def test_cherry_pick_stages_changes(self, git_repo: Path) -> None:
        _ = run_git(git_repo, "checkout", "-b", "feature")
        commit_file(git_repo, "c.txt", "c\n", "Add c")
        sha = run_git(git_repo, "rev-parse", "HEAD").stdout.strip()
        _ = run_git(git_repo, "checkout", "main")

        with GitRepository(git_repo) as repo:
            repo.cherry_pick(sha)
            (change,) = repo.get_staged()

        assert change.path == Path("c.txt")

    def test_missing_git_executable(self, git_repo: Path) -> None:
        with (
            GitRepository(git_repo, executable="definitely-not-a-git-binary") as repo,
            pytest.raises(RepositoryError) as exc_info,
        ):
            repo.fetch()

        assert exc_info.value.code == GitErrorCode.GIT_NOT_FOUND
