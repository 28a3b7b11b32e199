"""Distill exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Literal

from distill._exit_codes import (
    EXIT_CONFIG_ERROR,
    EXIT_FAILURE,
    EXIT_GENERATION_ERROR,
    EXIT_NOTHING_TO_COMMIT,
    EXIT_REPOSITORY_ERROR,
    EXIT_REPOSITORY_NOT_FOUND,
)

if TYPE_CHECKING:
    from pathlib import Path

PolicyReason = Literal["nothing-staged", "nothing-after-staging"]
DiffFailureReason = Literal["head-missing", "diff-failed"]
CommitFailureReason = Literal["no-head", "tree-write", "commit-write"]


class DistillError(Exception):
    """Base exception for Distill errors.

    Attributes:
        exit_code: Process exit code used by the CLI when this error ends a run.
    """

    exit_code: ClassVar[int] = EXIT_FAILURE


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(DistillError):
    """Raised when a required setting is missing, blank, or invalid.

    Attributes:
        key: The environment variable that caused the error.
    """

    exit_code: ClassVar[int] = EXIT_CONFIG_ERROR

    def __init__(self, message: str, *, key: str) -> None:
        """Initialize with error message and setting context.

        Args:
            message: Human-readable error message.
            key: The environment variable that caused the error.
        """
        super().__init__(message)
        self.key: str = key


# =============================================================================
# Repository Exceptions
# =============================================================================


class RepositoryError(DistillError):
    """Base exception for repository errors."""

    exit_code: ClassVar[int] = EXIT_REPOSITORY_ERROR


class RepositoryOpenError(RepositoryError):
    """Raised when no readable git repository is found.

    Attributes:
        path: The directory the search started from.
    """

    exit_code: ClassVar[int] = EXIT_REPOSITORY_NOT_FOUND

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and path context.

        Args:
            message: Human-readable error message.
            path: The directory the search started from.
        """
        super().__init__(message)
        self.path: Path | None = path


class StatusQueryError(RepositoryError):
    """Raised when the repository status cannot be computed."""


class StagingError(RepositoryError):
    """Raised when changes cannot be added to the index or the index written."""


class DiffError(RepositoryError):
    """Raised when the staged diff cannot be produced.

    Attributes:
        reason: Either "head-missing" or "diff-failed".
    """

    def __init__(self, message: str, *, reason: DiffFailureReason) -> None:
        """Initialize with error message and failure reason.

        Args:
            message: Human-readable error message.
            reason: Either "head-missing" or "diff-failed".
        """
        super().__init__(message)
        self.reason: DiffFailureReason = reason


class CommitError(RepositoryError):
    """Raised when the commit cannot be created.

    Attributes:
        reason: One of "no-head", "tree-write" or "commit-write".
    """

    def __init__(self, message: str, *, reason: CommitFailureReason) -> None:
        """Initialize with error message and failure reason.

        Args:
            message: Human-readable error message.
            reason: One of "no-head", "tree-write" or "commit-write".
        """
        super().__init__(message)
        self.reason: CommitFailureReason = reason


# =============================================================================
# Workflow Exceptions
# =============================================================================


class PolicyError(DistillError):
    """Raised when there is nothing staged to describe.

    Attributes:
        reason: "nothing-staged" when auto-staging is disabled, or
            "nothing-after-staging" when staging everything left the index
            unchanged.
    """

    exit_code: ClassVar[int] = EXIT_NOTHING_TO_COMMIT

    def __init__(self, message: str, *, reason: PolicyReason) -> None:
        """Initialize with error message and policy context.

        Args:
            message: Human-readable error message.
            reason: Which of the two staging policies was violated.
        """
        super().__init__(message)
        self.reason: PolicyReason = reason


class EmptyDiffError(DistillError):
    """Raised when staging succeeded but the staged diff has no text."""

    exit_code: ClassVar[int] = EXIT_NOTHING_TO_COMMIT


# =============================================================================
# Generation Exceptions
# =============================================================================


class GenerationError(DistillError):
    """Raised when the commit message could not be generated.

    Attributes:
        status_code: HTTP status returned by the API, if the request got that far.
    """

    exit_code: ClassVar[int] = EXIT_GENERATION_ERROR

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialize with error message and HTTP context.

        Args:
            message: Human-readable error message.
            status_code: HTTP status returned by the API, if any.
        """
        super().__init__(message)
        self.status_code: int | None = status_code
