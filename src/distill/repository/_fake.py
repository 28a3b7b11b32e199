# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
"""Fake repository for testing.

This module provides a FakeRepository class that implements RepositoryProtocol
for use in tests without requiring an actual Git repository.
"""

import hashlib
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType
from typing import Self

from distill.exceptions import CommitError
from distill.repository._identity import FALLBACK_IDENTITY
from distill.repository._models import CommitResult, Identity


@dataclass(slots=True)
class FakeRepository:
    """Fake Git repository for testing.

    The fake maintains internal state that can be manipulated for testing:
    - staged/unstaged sets track file status
    - diff_text is returned verbatim by get_staged_diff() while anything is staged
    - commits records every CommitResult produced
    - fail_on maps an operation name to an exception raised when it is called

    Staging moves every unstaged path into the staged set, and committing
    clears the staged set.

    Example:
        >>> repo = FakeRepository(unstaged={Path("/fake/project/a.txt")})
        >>> repo.stage_all()
        >>> assert repo.has_staged_changes() is True
        >>> result = repo.commit("Add a")
        >>> assert repo.head == result.sha
    """

    root: Path = field(default_factory=lambda: Path("/fake/project"))
    staged: set[Path] = field(default_factory=set)
    unstaged: set[Path] = field(default_factory=set)
    diff_text: str = ""
    identity: Identity = FALLBACK_IDENTITY
    head: str | None = "0" * 40
    commits: list[CommitResult] = field(default_factory=list)
    fail_on: dict[str, Exception] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    # =========================================================================
    # Context Manager Protocol
    # =========================================================================

    def __enter__(self) -> Self:
        """Enter context manager.

        Returns:
            Self for use in with statement.
        """
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit context manager."""
        self.close()

    # =========================================================================
    # RepositoryProtocol Methods
    # =========================================================================

    def close(self) -> None:
        """Close the repository (no-op for fake)."""

    def has_staged_changes(self) -> bool:
        """Check whether anything is staged.

        Returns:
            True if the staged set is non-empty.
        """
        self._record("has_staged_changes")
        return bool(self.staged)

    def stage_all(self) -> None:
        """Move every unstaged path into the staged set."""
        self._record("stage_all")
        self.staged |= self.unstaged
        self.unstaged.clear()

    def get_staged_diff(self) -> str:
        """Get the configured diff text.

        Returns:
            diff_text when anything is staged, otherwise an empty string.
        """
        self._record("get_staged_diff")
        return self.diff_text if self.staged else ""

    def commit(self, message: str) -> CommitResult:
        """Record a commit of the staged set.

        Args:
            message: The commit message.

        Returns:
            CommitResult with a deterministic fake SHA.

        Raises:
            CommitError: If there is no HEAD to use as parent.
        """
        self._record("commit")
        if self.head is None:
            msg = "Failed to get parent commit"
            raise CommitError(msg, reason="no-head")

        digest = hashlib.sha1(  # noqa: S324
            f"{self.head}\n{message}".encode(), usedforsecurity=False
        ).hexdigest()
        result = CommitResult(
            sha=digest,
            parent_sha=self.head,
            message=message,
            identity=self.identity,
        )
        self.commits.append(result)
        self.head = digest
        self.staged.clear()
        return result

    # =========================================================================
    # Helpers
    # =========================================================================

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        error = self.fail_on.get(operation)
        if error is not None:
            raise error
