"""Error formatting and routing.

Repository errors are expected outcomes of normal use and are shown inside
the status document. Everything else is a bug or an environment problem and
goes to the host as an error notification.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, final

from folio.exceptions import FolioError, RepositoryError, UnexpectedError
from folio.repository import classify_git_stderr

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from folio.host import Host
    from folio.state import RepositoryHandle

_GIT_PREFIX: Final = re.compile(r"^(?:error|fatal|hint|warning): ")
_WORD_BOUNDARY: Final = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True, slots=True)
class ClassifiedError:
    """Outcome of classifying an exception.

    Attributes:
        repository_error: True for recognized git failures that belong in
            the document.
        message: One-line human-readable message.
    """

    repository_error: bool
    message: str


def _summarize_git_output(error: RepositoryError) -> str:
    lines = [_GIT_PREFIX.sub("", line.strip()) for line in error.detail.splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return _WORD_BOUNDARY.sub(" ", error.code.value).capitalize()
    for line in lines:
        if classify_git_stderr(line) == error.code:
            return line
    return lines[0]


def format_error(error: BaseException) -> str:
    """Render an exception as a one-line message. Never raises."""
    try:
        if isinstance(error, RepositoryError):
            return _summarize_git_output(error)
        if isinstance(error, UnexpectedError):
            return error.detail or type(error).__name__
        text = str(error).strip()
        if isinstance(error, FolioError):
            return text or type(error).__name__
        return f"{type(error).__name__}: {text}" if text else type(error).__name__
    except Exception:  # noqa: BLE001
        return "Unknown error"


def classify(error: BaseException) -> ClassifiedError:
    """Classify an exception raised while running a command."""
    return ClassifiedError(
        repository_error=isinstance(error, RepositoryError),
        message=format_error(error),
    )


@final
class ErrorFormatter:
    """Routes command failures to the document or the host."""

    __slots__ = ("_logger", "host")

    def __init__(self, host: Host, *, logger: FilteringBoundLogger) -> None:
        self.host: Host = host
        self._logger: FilteringBoundLogger = logger

    def classify(self, error: BaseException) -> ClassifiedError:
        """Classify ``error``; see :func:`classify`."""
        return classify(error)

    async def handle(self, handle: RepositoryHandle | None, error: BaseException) -> ClassifiedError:
        """Record or report a command failure.

        Repository errors are stored on ``handle`` for the next render.
        Other errors, and repository errors with no handle to attach to, are
        logged with their traceback and shown through the host.

        Args:
            handle: Repository the command ran against, if resolved.
            error: The failure.

        Returns:
            The classification that was acted on.
        """
        classified = classify(error)
        if handle is not None and isinstance(error, RepositoryError):
            handle.record_error(classified.message)
            self._logger.info(
                "repository_error",
                root=str(handle.root),
                code=error.code.value,
                message=classified.message,
            )
            return classified

        self._logger.error(
            "command_failed",
            root=str(handle.root) if handle is not None else None,
            message=classified.message,
            exc_info=error,
        )
        try:
            await self.host.show_error_message(classified.message)
        except Exception as e:  # noqa: BLE001
            self._logger.error("host_error_message_failed", error=str(e))
        return classified
