"""gitvault exceptions.

Errors fall into two kinds that callers are expected to branch on:

- ``ErrorKind.REPOSITORY_MISSING``: the target path holds no initialized
  store. Raised only by read commands, never by writes (which create it).
- ``ErrorKind.OPERATION_FAILED``: everything else, always carrying the
  underlying cause.
"""

from enum import StrEnum
from pathlib import Path  # noqa: TC003 - Used at runtime in signatures
from typing import Any, ClassVar


class ErrorKind(StrEnum):
    """Kinds of failure reported by the command layer."""

    REPOSITORY_MISSING = "repository_missing"
    OPERATION_FAILED = "operation_failed"


class GitVaultError(Exception):
    """Base exception for gitvault errors.

    Attributes:
        kind: The error kind used by callers to branch on failures.
        cause: The underlying exception, if any.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.OPERATION_FAILED

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        """Initialize with error message and optional cause.

        Args:
            message: Human-readable error message.
            cause: The underlying exception, if any.
        """
        super().__init__(message)
        self.cause: BaseException | None = cause
        if cause is not None:
            self.__cause__ = cause


# =============================================================================
# Repository Exceptions
# =============================================================================


class RepositoryNotFoundError(GitVaultError):
    """Raised when no initialized store exists at the requested path.

    Attributes:
        path: The directory that was expected to hold the store.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.REPOSITORY_MISSING

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        cause: BaseException | None = None,
    ) -> None:
        """Initialize with error message and path context.

        Args:
            message: Human-readable error message.
            path: The directory that was expected to hold the store.
            cause: The underlying exception, if any.
        """
        super().__init__(message, cause=cause)
        self.path: Path | None = path


class GitOperationError(GitVaultError):
    """Raised when a command fails inside an existing or newly created store.

    Attributes:
        path: The repository path the command targeted.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        cause: BaseException | None = None,
    ) -> None:
        """Initialize with error message, path and cause.

        Args:
            message: Human-readable error message.
            path: The repository path the command targeted.
            cause: The underlying exception, if any.
        """
        super().__init__(message, cause=cause)
        self.path: Path | None = path


class CommandValidationError(GitOperationError, ValueError):
    """Raised when command parameters are invalid.

    Attributes:
        field: The parameter that failed validation (if applicable).
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        path: Path | None = None,
    ) -> None:
        """Initialize with error message and validation context.

        Args:
            message: Human-readable error message.
            field: The parameter that failed validation.
            path: The repository path the command targeted.
        """
        super().__init__(message, path=path)
        self.field: str | None = field


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(GitVaultError):
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
