"""Small git helpers shared by the plumbing, the context and the CLI."""

from pathlib import Path

from dulwich.errors import NotGitRepository
from dulwich.repo import Repo

_HEADS_PREFIX = "refs/heads/"


def decode_bytes(value: bytes | str) -> str:
    """Return ``value`` as text; git bytes that are not UTF-8 are replaced."""
    return value.decode("utf-8", errors="replace") if isinstance(value, bytes) else value


def strip_refs_heads(branch: bytes | str | None) -> str | None:
    """Turn ``refs/heads/main`` into ``main``; other names pass through."""
    if branch is None:
        return None
    return decode_bytes(branch).removeprefix(_HEADS_PREFIX)


def get_worktree_dir(repo: Repo) -> Path:
    """Return the working tree directory of an open repository.

    dulwich reports the ``.git`` directory itself for some layouts; its
    parent is the working tree then.
    """
    path = Path(decode_bytes(repo.path))
    return path.parent if path.name == ".git" else path


def discover_root(start: Path | str | None = None) -> Path | None:
    """Find the root of the repository containing ``start``.

    Args:
        start: File or directory to search upwards from; the current
            directory when None.

    Returns:
        The resolved working tree root, or None outside any repository.
    """
    path = Path(start) if start is not None else Path.cwd()
    if path.is_file():
        path = path.parent
    try:
        repo = Repo.discover(str(path))
    except NotGitRepository:
        return None
    with repo:
        return get_worktree_dir(repo).resolve()
