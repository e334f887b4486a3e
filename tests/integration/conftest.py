import shutil
import subprocess
from pathlib import Path

import pytest


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)
            if shutil.which("git") is None:
                item.add_marker(pytest.mark.skip(reason="git executable not found"))


def run_git(cwd: Path, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
    """Run a git command in the given directory."""
    return subprocess.run(  # noqa: S603
        ["git", *args],  # noqa: S607
        cwd=str(cwd),
        capture_output=True,
        text=True,
        check=check,
    )


def init_git_repo(path: Path) -> None:
    """Initialize a repository on ``main`` with a committer identity."""
    path.mkdir(parents=True, exist_ok=True)
    run_git(path, "init", "--initial-branch=main")
    run_git(path, "config", "user.email", "test@example.com")
    run_git(path, "config", "user.name", "Test User")
    run_git(path, "config", "commit.gpgsign", "false")


def commit_file(root: Path, name: str, content: str, message: str) -> None:
    """Write ``name``, stage it and commit."""
    path = root / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    run_git(root, "add", name)
    run_git(root, "commit", "-m", message)


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """A repository with one commit containing ``a.txt`` and ``b.txt``."""
    root = (tmp_path / "project").resolve()
    init_git_repo(root)
    (root / "a.txt").write_text("one\ntwo\nthree\n")
    (root / "b.txt").write_text("alpha\nbeta\n")
    run_git(root, "add", "a.txt", "b.txt")
    run_git(root, "commit", "-m", "Initial commit")
    return root
