import json
from io import StringIO
from pathlib import Path

import pytest

from folio.commands import ErrorFormatter, classify, format_error
from folio.enums import GitErrorCode
from folio.exceptions import FolioError, RepositoryError, UnexpectedError
from folio.state import RepositoryHandle

from tests.conftest import RecordingHost


class _Unprintable(Exception):
    def __str__(self) -> str:
        raise RuntimeError("no")


class TestFormatError:
    def test_strips_git_prefixes(self) -> None:
        error = RepositoryError(
            GitErrorCode.DIVERGED_BRANCHES,
            "hint: You have divergent branches\nfatal: Need to specify how to reconcile divergent branches.",
        )

        assert format_error(error) == "You have divergent branches"

    def test_picks_the_line_that_explains_the_code(self) -> None:
        error = RepositoryError(
            GitErrorCode.PUSH_REJECTED,
            "To origin\n ! [rejected]  main -> main (fetch first)\nerror: failed to push some refs to 'origin'",
        )

        assert format_error(error) == "! [rejected]  main -> main (fetch first)"

    def test_unrecognized_detail_uses_first_line(self) -> None:
        error = RepositoryError(GitErrorCode.CONFLICT, "\nsomething odd\nmore")

        assert format_error(error) == "something odd"

    def test_missing_detail_spells_out_the_code(self) -> None:
        assert format_error(RepositoryError(GitErrorCode.NO_LOCAL_CHANGES)) == "No local changes"

    def test_unexpected_error_uses_detail(self) -> None:
        assert format_error(UnexpectedError("git status failed: boom")) == "git status failed: boom"
        assert format_error(UnexpectedError("")) == "UnexpectedError"

    def test_folio_error_uses_message(self) -> None:
        assert format_error(FolioError("plain message")) == "plain message"

    def test_other_errors_carry_type_name(self) -> None:
        assert format_error(ValueError("bad value")) == "ValueError: bad value"
        assert format_error(RuntimeError()) == "RuntimeError"

    def test_never_raises(self) -> None:
        assert format_error(_Unprintable()) == "Unknown error"


class TestClassify:
    def test_repository_errors_belong_in_the_document(self) -> None:
        classified = classify(RepositoryError(GitErrorCode.CONFLICT, "CONFLICT (content): Merge conflict in a.txt"))

        assert classified.repository_error
        assert classified.message == "CONFLICT (content): Merge conflict in a.txt"

    def test_unexpected_errors_do_not(self) -> None:
        assert not classify(UnexpectedError("boom")).repository_error
        assert not classify(OSError("disk")).repository_error


class TestErrorFormatter:
    @pytest.mark.anyio
    async def test_repository_error_is_recorded_on_handle(
        self, host: RecordingHost, logger, log_stream: StringIO, tmp_path: Path  # noqa: ANN001
    ) -> None:
        formatter = ErrorFormatter(host, logger=logger)
        handle = RepositoryHandle(tmp_path)

        _ = await formatter.handle(handle, RepositoryError(GitErrorCode.NO_LOCAL_CHANGES, "nothing to commit"))

        assert handle.latest_error == "nothing to commit"
        assert host.errors == []
        event = json.loads(log_stream.getvalue().splitlines()[-1])
        assert event["event"] == "repository_error"
        assert event["code"] == "NoLocalChanges"

    @pytest.mark.anyio
    async def test_repository_error_without_handle_goes_to_host(self, host: RecordingHost, logger) -> None:  # noqa: ANN001
        formatter = ErrorFormatter(host, logger=logger)

        _ = await formatter.handle(None, RepositoryError(GitErrorCode.NOT_A_GIT_REPOSITORY, "fatal: not a git repository"))

        assert host.errors == ["not a git repository"]

    @pytest.mark.anyio
    async def test_other_errors_go_to_host(self, host: RecordingHost, logger, tmp_path: Path) -> None:  # noqa: ANN001
        formatter = ErrorFormatter(host, logger=logger)
        handle = RepositoryHandle(tmp_path)

        classified = await formatter.handle(handle, KeyError("missing"))

        assert not classified.repository_error
        assert handle.latest_error is None
        assert host.errors == ["KeyError: 'missing'"]
