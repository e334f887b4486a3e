"""Unified diff parsing and patch construction.

Diffs are produced line by line by dulwich's ``unified_diff``; this module
turns those lines into ``Hunk`` objects and builds the minimal patch text
``git apply`` needs to apply or reverse a single hunk.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

from folio.enums import ChangeStatus
from folio.repository._models import FileChange, Hunk

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

_HUNK_HEADER: Final = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

_LINE: Final = re.compile(r"[^\n]*\n|[^\n]+\Z")

NO_NEWLINE_MARKER: Final = "\\ No newline at end of file"


def parse_hunk_header(header: str) -> tuple[int, int, int, int] | None:
    """Parse the line ranges out of a hunk header.

    Args:
        header: A line such as ``@@ -1,3 +1,4 @@ def main():``.

    Returns:
        Tuple of (old_start, old_count, new_start, new_count), or None if
        the line is not a hunk header. Omitted counts default to 1.
    """
    match = _HUNK_HEADER.match(header)
    if match is None:
        return None
    old_start, old_count, new_start, new_count = match.groups()
    return (
        int(old_start),
        int(old_count) if old_count is not None else 1,
        int(new_start),
        int(new_count) if new_count is not None else 1,
    )


def parse_hunks(diff_lines: Iterable[bytes | str]) -> tuple[Hunk, ...]:
    """Parse unified diff lines into hunks.

    File header lines (``---``/``+++``) before the first hunk are skipped.
    A body line that does not end with a newline gets a
    ``\\ No newline at end of file`` marker appended after it, matching what
    git prints and what ``git apply`` expects.

    Args:
        diff_lines: Diff lines as yielded by ``dulwich.patch.unified_diff``
            (bytes) or read from git output (str), each ending with its
            newline unless it is the last line of a file without one.

    Returns:
        The parsed hunks in order.
    """
    hunks: list[Hunk] = []
    header: str | None = None
    ranges: tuple[int, int, int, int] = (0, 0, 0, 0)
    body: list[str] = []

    def flush() -> None:
        if header is not None:
            hunks.append(Hunk(header, *ranges, lines=tuple(body)))

    for line in _split_lines(diff_lines):
        parsed = parse_hunk_header(line)
        if parsed is not None:
            flush()
            header = line.rstrip("\r\n")
            ranges = parsed
            body = []
            continue
        if header is None:
            continue
        if line.endswith("\n"):
            body.append(line[:-1])
        else:
            body.append(line)
            if not line.startswith("\\"):
                body.append(NO_NEWLINE_MARKER)

    flush()
    return tuple(hunks)


def _split_lines(diff_lines: Iterable[bytes | str]) -> Iterator[str]:
    # dulwich yields "-line\n\\ No newline at end of file\n" as one item
    for raw in diff_lines:
        text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        yield from _LINE.findall(text)


def build_patch(change: FileChange, hunk: Hunk) -> str:
    """Build a single-hunk patch suitable for ``git apply``.

    Args:
        change: The file the hunk belongs to.
        hunk: The hunk to put in the patch.

    Returns:
        Patch text ending with a newline.
    """
    path = change.path.as_posix()
    old_path = (change.old_path or change.path).as_posix()

    lines = [f"diff --git a/{old_path} b/{path}"]
    if change.status == ChangeStatus.ADDED:
        lines += ["new file mode 100644", "--- /dev/null", f"+++ b/{path}"]
    elif change.status == ChangeStatus.DELETED:
        lines += ["deleted file mode 100644", f"--- a/{old_path}", "+++ /dev/null"]
    else:
        lines += [f"--- a/{old_path}", f"+++ b/{path}"]
    lines.append(hunk.header)
    lines.extend(hunk.lines)
    return "\n".join(lines) + "\n"


def first_changed_line(hunk: Hunk) -> int:
    """Return the new-file line number of the first added or removed line.

    Args:
        hunk: The hunk to inspect.

    Returns:
        1-based line number in the new file, suitable for opening an editor
        at the change.
    """
    line_no = hunk.new_start
    for line in hunk.lines:
        if line.startswith(("+", "-")):
            return max(line_no, 1)
        if line.startswith(" "):
            line_no += 1
    return max(hunk.new_start, 1)
