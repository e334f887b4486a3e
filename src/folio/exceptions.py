"""folio exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from folio.enums import GitErrorCode

if TYPE_CHECKING:
    from pathlib import Path


class FolioError(Exception):
    """Base exception for folio errors."""


# =============================================================================
# Repository Exceptions
# =============================================================================


class RepositoryError(FolioError):
    """Raised by the plumbing when git reports a recognizable failure.

    Repository errors are expected outcomes of normal use (merge conflicts,
    nothing to commit, rejected pushes). They are recorded on the repository
    handle and shown inside the rendered document.

    Attributes:
        code: The recognized git error code.
        detail: Raw detail text reported by git (usually stderr).
        command: The git command that failed, if any.
    """

    def __init__(
        self,
        code: GitErrorCode,
        detail: str = "",
        *,
        command: tuple[str, ...] | None = None,
    ) -> None:
        """Initialize with error code and detail.

        Args:
            code: The recognized git error code.
            detail: Raw detail text reported by git.
            command: The git command that failed.
        """
        super().__init__(detail or code.value)
        self.code: GitErrorCode = code
        self.detail: str = detail
        self.command: tuple[str, ...] | None = command


class UnexpectedError(FolioError):
    """Raised by the plumbing for failures without a recognizable git code.

    Attributes:
        detail: Human-readable description of the failure.
        cause: The underlying exception, if any.
    """

    def __init__(self, detail: str, *, cause: BaseException | None = None) -> None:
        """Initialize with detail and optional cause.

        Args:
            detail: Human-readable description of the failure.
            cause: The underlying exception.
        """
        super().__init__(detail)
        self.detail: str = detail
        self.cause: BaseException | None = cause


class RepositoryUnavailableError(FolioError):
    """Raised when a repository root no longer exists.

    Attributes:
        path: The repository root that disappeared.
    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and path context.

        Args:
            message: Human-readable error message.
            path: The repository root that disappeared.
        """
        super().__init__(message)
        self.path: Path | None = path


class PathViolationError(FolioError):
    """Raised when attempting to operate on files outside a repository.

    Attributes:
        path: The path that violated the constraint.
        root: The repository root.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        root: Path | None = None,
    ) -> None:
        """Initialize with error message and path violation context.

        Args:
            message: Human-readable error message.
            path: The path that violated the constraint.
            root: The repository root.
        """
        super().__init__(message)
        self.path: Path | None = path
        self.root: Path | None = root


class RepositoryNotFoundError(FolioError, KeyError):
    """Raised when no git repository is found or registered for a location.

    Attributes:
        path: The location that was searched.
    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and path context.

        Args:
            message: Human-readable error message.
            path: The location that was searched.
        """
        super().__init__(message)
        self.path: Path | None = path

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


# =============================================================================
# View Exceptions
# =============================================================================


class ViewError(FolioError):
    """Base exception for document view errors."""


class DocumentUriError(ViewError, ValueError):
    """Raised when a document URI cannot be decoded.

    Attributes:
        uri: The offending URI string.
    """

    def __init__(self, message: str, *, uri: str) -> None:
        """Initialize with error message and URI context."""
        super().__init__(message)
        self.uri: str = uri


class UnknownViewError(ViewError, KeyError):
    """Raised when a view cannot be created for a URI.

    Attributes:
        uri: The URI that has no view.
    """

    def __init__(self, message: str, *, uri: str) -> None:
        """Initialize with error message and URI context."""
        super().__init__(message)
        self.uri: str = uri

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(FolioError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source
