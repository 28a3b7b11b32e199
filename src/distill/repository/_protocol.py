"""Repository protocol for type-safe dependency injection.

This module defines a runtime-checkable Protocol that both GitRepository
and FakeRepository satisfy, so the commit workflow can be driven and tested
without a real git repository.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from distill.repository._models import CommitResult


@runtime_checkable
class RepositoryProtocol(Protocol):
    """Protocol for the staging-area operations the workflow needs.

    Example:
        >>> def ensure_staged(repo: RepositoryProtocol) -> None:
        ...     if not repo.has_staged_changes():
        ...         repo.stage_all()
    """

    @property
    def root(self) -> Path:
        """Root directory of the repository's working tree."""
        ...

    def close(self) -> None:
        """Release any resources held by the repository."""
        ...

    def has_staged_changes(self) -> bool:
        """Check whether the index differs from HEAD.

        Returns:
            True if at least one path is staged.

        Raises:
            StatusQueryError: If status cannot be computed.
        """
        ...

    def stage_all(self) -> None:
        """Stage every change in the working tree.

        Raises:
            StagingError: If the index cannot be updated or written.
        """
        ...

    def get_staged_diff(self) -> str:
        """Get the staged diff as unified patch text.

        Returns:
            Patch text, possibly empty.

        Raises:
            DiffError: If HEAD is missing or the diff cannot be generated.
        """
        ...

    def commit(self, message: str) -> CommitResult:
        """Commit the index with HEAD as the single parent.

        Args:
            message: The commit message, stored verbatim.

        Returns:
            CommitResult describing the new commit.

        Raises:
            CommitError: If the commit cannot be created.
        """
        ...
