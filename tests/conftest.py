"""Shared test fixtures for folio tests."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from folio.config import Config
from folio.context import FolioContext
from folio.enums import ChangeStatus
from folio.repository import (
    CommitInfo,
    FakePlumbing,
    FileChange,
    HeadInfo,
    Hunk,
    RepositoryState,
    StashEntry,
)
from folio.utils import create_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


# ---------------------------------------------------------------------------
# Host double
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class RecordingHost:
    """Host that records every request and answers from canned replies.

    Attributes:
        prompt_replies: Answers returned by ``prompt``, in order. None
            means cancelled.
        pick_replies: Answers returned by ``pick``, in order.
        confirm_reply: Answer returned by every ``confirm``.
    """

    prompt_replies: list[str | None] = field(default_factory=list)
    pick_replies: list[str | None] = field(default_factory=list)
    confirm_reply: bool = True
    errors: list[str] = field(default_factory=list)
    infos: list[str] = field(default_factory=list)
    prompts: list[str] = field(default_factory=list)
    picks: list[tuple[str, tuple[str, ...]]] = field(default_factory=list)
    confirms: list[str] = field(default_factory=list)
    documents: list[str] = field(default_factory=list)
    files: list[tuple[Path, int | None]] = field(default_factory=list)

    async def show_error_message(self, message: str) -> None:
        self.errors.append(message)

    async def show_info_message(self, message: str) -> None:
        self.infos.append(message)

    async def prompt(self, message: str, *, default: str = "") -> str | None:
        self.prompts.append(message)
        return self.prompt_replies.pop(0) if self.prompt_replies else None

    async def pick(self, title: str, items: Sequence[str]) -> str | None:
        self.picks.append((title, tuple(items)))
        return self.pick_replies.pop(0) if self.pick_replies else None

    async def confirm(self, message: str) -> bool:
        self.confirms.append(message)
        return self.confirm_reply

    async def open_document(self, uri: str) -> None:
        self.documents.append(uri)

    async def open_file(self, path: Path, line: int | None = None) -> None:
        self.files.append((path, line))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def log_stream() -> StringIO:
    return StringIO()


@pytest.fixture
def logger(log_stream: StringIO) -> "FilteringBoundLogger":
    """Logger writing JSON lines to ``log_stream``."""
    return create_logger(level="debug", log_file=log_stream)


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def plumbing() -> FakePlumbing:
    return FakePlumbing()


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """An existing directory standing in for a repository root."""
    root = tmp_path / "repo"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def make_context(
    plumbing: FakePlumbing,
    host: RecordingHost,
    logger: "FilteringBoundLogger",
):
    """Return a factory building a FolioContext over the fake plumbing."""

    def _make(**config: object) -> FolioContext:
        return FolioContext(
            config=Config.from_dict(dict(config)),
            plumbing=plumbing,
            host=host,
            logger=logger,
            root_finder=fake_root_finder(plumbing),
        )

    return _make


@pytest.fixture
def folio_context(make_context) -> FolioContext:  # noqa: ANN001
    return make_context()


# ---------------------------------------------------------------------------
# Helper functions for building repository state
# ---------------------------------------------------------------------------


def fake_root_finder(plumbing: FakePlumbing):  # noqa: ANN201
    """Find the innermost registered fake repository containing a path."""

    def find(path: Path) -> Path | None:
        path = path.resolve()
        roots = [root for root in plumbing.states if path == root or path.is_relative_to(root)]
        return max(roots, key=lambda r: len(r.parts), default=None)

    return find


def make_hunk(old_start: int = 1, new_start: int = 1, lines: Sequence[str] = (" a", "-b", "+B", " c")) -> Hunk:
    """Build a hunk whose counts match its lines."""
    old_count = sum(1 for line in lines if line.startswith((" ", "-")))
    new_count = sum(1 for line in lines if line.startswith((" ", "+")))
    header = f"@@ -{old_start},{old_count} +{new_start},{new_count} @@"
    return Hunk(header, old_start, old_count, new_start, new_count, tuple(lines))


def make_change(
    path: str,
    status: ChangeStatus = ChangeStatus.MODIFIED,
    *,
    hunks: Sequence[Hunk] | None = None,
    old_path: str | None = None,
) -> FileChange:
    return FileChange(
        Path(path),
        status,
        old_path=Path(old_path) if old_path is not None else None,
        hunks=tuple(hunks) if hunks is not None else (make_hunk(),),
    )


def make_commit(index: int, message: str | None = None) -> CommitInfo:
    sha = f"{index:040x}"
    return CommitInfo(
        sha=sha,
        message=message or f"Commit number {index}",
        author_name="Test User",
        author_email="test@example.com",
    )


def sample_state(**overrides: object) -> RepositoryState:
    """A repository on ``main`` with one change in every area."""
    head_commit = make_commit(1, "Initial commit")
    values: dict[str, object] = {
        "head": HeadInfo(branch="main", commit=head_commit),
        "untracked": (Path("new.txt"),),
        "unstaged": (make_change("b.txt"),),
        "staged": (make_change("a.txt"),),
        "stashes": (StashEntry(0, "On main: wip", sha="5" * 40),),
        "commits": (head_commit,),
        "branches": ("feature", "main"),
    }
    values.update(overrides)
    return RepositoryState(**values)  # pyright: ignore[reportArgumentType]
