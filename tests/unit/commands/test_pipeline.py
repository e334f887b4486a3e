import json
import shutil
from io import StringIO
from pathlib import Path

import anyio
import pytest

from folio.commands import COMMANDS, editor_path, get_command_spec
from folio.enums import CommandShape
from folio.host import Editor
from folio.repository import FakePlumbing, HeadInfo
from folio.views import DocumentUri

from tests.conftest import sample_state
from tests.unit.commands.conftest import OpenSession

pytestmark = pytest.mark.anyio


def _facet_fetches(calls: list[tuple[str, Path, tuple[object, ...]]]) -> int:
    return sum(1 for name, _root, _args in calls if name == "get_head")


class TestEditorPath:
    def test_plain_path(self) -> None:
        assert editor_path("/repo/a.txt") == Path("/repo/a.txt")

    def test_file_uri(self) -> None:
        assert editor_path("file:///repo/my%20file.txt") == Path("/repo/my file.txt")

    def test_other_schemes(self) -> None:
        assert editor_path("folio://status/%2Frepo") is None
        assert editor_path("untitled:Untitled-1") is None

    def test_empty(self) -> None:
        assert editor_path("") is None


class TestDispatch:
    async def test_mutating_command_refreshes_once(self, open_session: OpenSession) -> None:
        session = await open_session(sample_state())

        await session.run("stage-all")

        assert _facet_fetches(session.plumbing.calls) == 1

    async def test_failed_command_still_refreshes(self, open_session: OpenSession) -> None:
        session = await open_session(sample_state())
        session.plumbing.fail_operation("stage_all", RuntimeError("disk on fire"))

        await session.run("stage-all")

        assert _facet_fetches(session.plumbing.calls) == 1

    async def test_unexpected_error_goes_to_host(self, open_session: OpenSession, log_stream: StringIO) -> None:
        session = await open_session(sample_state())
        session.plumbing.fail_operation("stage_all", RuntimeError("disk on fire"))

        await session.run("stage-all")

        assert session.host.errors == ["RuntimeError: disk on fire"]
        assert "GitError!" not in session.text
        events = [json.loads(line) for line in log_stream.getvalue().splitlines()]
        failed = [e for e in events if e["event"] == "command_failed"]
        assert failed and "exception" in failed[0]

    async def test_non_folio_editor_is_ignored(self, open_session: OpenSession) -> None:
        session = await open_session(sample_state())

        await session.context.run("stage", Editor("untitled:Untitled-1"))

        assert session.plumbing.calls == []
        assert session.host.errors == []

    async def test_view_command_needs_open_view(self, open_session: OpenSession, tmp_path: Path) -> None:
        session = await open_session(sample_state())

        await session.context.run("stage", Editor(str(DocumentUri.status(tmp_path / "other"))))

        assert session.plumbing.calls == []

    async def test_repo_command_from_working_tree_file(self, open_session: OpenSession) -> None:
        session = await open_session(sample_state())

        await session.context.run("fetch", Editor(str(session.root / "a.txt")))

        assert session.plumbing.called("fetch") == [(None,)]

    async def test_unknown_command(self, open_session: OpenSession) -> None:
        session = await open_session(sample_state())

        with pytest.raises(KeyError):
            await session.run("explode")

    async def test_vanished_repository_is_dropped(self, open_session: OpenSession) -> None:
        session = await open_session(sample_state())
        shutil.rmtree(session.root)

        await session.run("refresh")

        assert session.context.repositories.for_root(session.root) is None
        assert session.context.views.get(session.uri) is None
        assert len(session.host.errors) == 1
        assert "no longer exists" in session.host.errors[0]

    async def test_commands_on_one_repository_are_serialized(
        self, open_session: OpenSession, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        session = await open_session(sample_state())
        events: list[str] = []
        original = FakePlumbing.stage_all

        async def slow_stage_all(self: FakePlumbing, root: Path) -> None:
            events.append("start")
            await anyio.sleep(0.01)
            await original(self, root)
            events.append("end")

        monkeypatch.setattr(FakePlumbing, "stage_all", slow_stage_all)

        async with anyio.create_task_group() as tg:
            tg.start_soon(session.run, "stage-all")
            tg.start_soon(session.run, "stage-all")

        assert events == ["start", "end", "start", "end"]

    async def test_status_refresh_waits_for_running_command(
        self, open_session: OpenSession, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        session = await open_session(sample_state())
        events: list[str] = []
        started = anyio.Event()
        original_stage_all = FakePlumbing.stage_all
        original_get_head = FakePlumbing.get_head

        async def slow_stage_all(self: FakePlumbing, root: Path) -> None:
            events.append("start")
            started.set()
            await anyio.sleep(0.01)
            await original_stage_all(self, root)
            events.append("end")

        async def get_head(self: FakePlumbing, root: Path) -> HeadInfo | None:
            events.append("refresh")
            return await original_get_head(self, root)

        monkeypatch.setattr(FakePlumbing, "stage_all", slow_stage_all)
        monkeypatch.setattr(FakePlumbing, "get_head", get_head)

        async with anyio.create_task_group() as tg:
            tg.start_soon(session.run, "stage-all")
            await started.wait()
            tg.start_soon(session.context.status, session.root)

        assert events == ["start", "end", "refresh", "refresh"]

    async def test_serialization_can_be_disabled(
        self, open_session: OpenSession, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        session = await open_session(sample_state(), dispatch={"serialize_commands": False})
        events: list[str] = []

        async def slow_pull(self: FakePlumbing, root: Path) -> None:
            events.append("start")
            await anyio.sleep(0.01)
            events.append("end")

        monkeypatch.setattr(FakePlumbing, "pull", slow_pull)

        async with anyio.create_task_group() as tg:
            tg.start_soon(session.run, "pull")
            tg.start_soon(session.run, "pull")

        assert events == ["start", "start", "end", "end"]


class TestStatusEntry:
    async def test_status_outside_repository_reports_error(self, folio_context, host, tmp_path: Path) -> None:  # noqa: ANN001
        uri = await folio_context.status(tmp_path)

        assert uri is None
        assert host.errors == [f"Not inside a git repository: {tmp_path}"]

    async def test_status_opens_document(self, folio_context, host, plumbing, repo_root: Path) -> None:  # noqa: ANN001
        _ = plumbing.add_repository(repo_root, sample_state())

        uri = await folio_context.status(repo_root / "sub" / "dir")

        assert uri == str(DocumentUri.status(repo_root))
        assert host.documents == [uri]

    async def test_reopening_refreshes(self, folio_context, plumbing, repo_root: Path) -> None:  # noqa: ANN001
        _ = plumbing.add_repository(repo_root, sample_state())
        first = await folio_context.open_repository(repo_root)
        plumbing.states[first.root] = sample_state(untracked=())

        second = await folio_context.open_repository(repo_root)

        assert second is first
        assert second.state.untracked == ()

    async def test_close_repository_drops_views(self, folio_context, plumbing, repo_root: Path) -> None:  # noqa: ANN001
        _ = plumbing.add_repository(repo_root, sample_state())
        uri = await folio_context.status(repo_root)

        assert folio_context.close_repository(repo_root)
        assert folio_context.views.get(uri) is None
        assert not folio_context.close_repository(repo_root)


class TestCommandTable:
    def test_names_are_unique(self) -> None:
        names = [spec.name for spec in COMMANDS]

        assert len(names) == len(set(names))

    def test_navigation_commands_do_not_refresh(self) -> None:
        quiet = {spec.name for spec in COMMANDS if not spec.triggers_update}

        assert quiet == {"visit-at-point", "toggle-fold", "show-refs"}

    def test_shapes(self) -> None:
        assert get_command_spec("stage") is not None
        assert get_command_spec("stage").shape == CommandShape.REPO_AND_VIEW  # type: ignore[union-attr]
        assert get_command_spec("commit").shape == CommandShape.REPO  # type: ignore[union-attr]
        assert get_command_spec("stage-file").shape == CommandShape.FILE  # type: ignore[union-attr]
        assert get_command_spec("missing") is None

    def test_context_builds_every_command(self, folio_context) -> None:  # noqa: ANN001
        assert set(folio_context.commands) == {spec.name for spec in COMMANDS}
