"""Distill repository management.

This package provides access to the staging area of a git repository:
detecting staged changes, staging everything, extracting the staged diff,
and committing with a resolved identity.

Classes:
    GitRepository: dulwich-backed repository discovered from a working directory.
    FakeRepository: In-memory implementation for tests.
    RepositoryProtocol: Runtime-checkable protocol for dependency injection.

Models:
    ChangeStatus: Status snapshot for the repository.
    DiffLine: One classified line of a staged diff.
    DiffOrigin: Classification of a diff line.
    Identity: Author and committer identity.
    CommitResult: Result of a commit operation.

Example:
    >>> from distill.repository import GitRepository
    >>> with GitRepository() as repo:
    ...     if repo.has_staged_changes():
    ...         print(repo.get_staged_diff())
"""

from distill.repository._diff import render_patch
from distill.repository._fake import FakeRepository
from distill.repository._identity import FALLBACK_IDENTITY, resolve_identity
from distill.repository._models import (
    ChangeStatus,
    CommitResult,
    DiffLine,
    DiffOrigin,
    Identity,
)
from distill.repository._protocol import RepositoryProtocol
from distill.repository._repository import GitRepository

__all__ = [
    "FALLBACK_IDENTITY",
    "ChangeStatus",
    "CommitResult",
    "DiffLine",
    "DiffOrigin",
    "FakeRepository",
    "GitRepository",
    "Identity",
    "RepositoryProtocol",
    "render_patch",
    "resolve_identity",
]
