# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
"""Repository models.

This module defines data structures for representing repository state,
classified diff lines, commit identities, and commit results.
"""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ChangeStatus:
    """File status snapshot for the repository.

    Attributes:
        staged: Files whose index entry differs from HEAD (added, modified,
            type-changed or deleted).
        unstaged: Tracked files whose working tree copy differs from the index.
        untracked: Files that are not tracked by git (ignored files excluded).
    """

    staged: frozenset[Path]
    unstaged: frozenset[Path]
    untracked: frozenset[Path]


class DiffOrigin(StrEnum):
    """Classification of a single line of a staged diff."""

    FILE_HEADER = "F"
    HUNK_HEADER = "H"
    CONTEXT = " "
    ADDITION = "+"
    DELETION = "-"
    BINARY = "B"
    EOF_NOTICE = "="


@dataclass(frozen=True, slots=True)
class DiffLine:
    """One classified line of a staged diff.

    Attributes:
        origin: What kind of line this is.
        content: Raw line bytes without the origin marker, including the
            trailing newline when the source had one.
    """

    origin: DiffOrigin
    content: bytes


@dataclass(frozen=True, slots=True)
class Identity:
    """Author and committer identity used for new commits.

    Attributes:
        name: Display name.
        email: Email address.
    """

    name: str
    email: str

    def to_bytes(self) -> bytes:
        """Format the identity as git expects it.

        Returns:
            Identity as bytes in "Name <email>" format.
        """
        return f"{self.name} <{self.email}>".encode()


@dataclass(frozen=True, slots=True)
class CommitResult:
    """Result of a commit operation.

    Attributes:
        sha: Hex SHA of the new commit.
        parent_sha: Hex SHA of the commit HEAD pointed at before.
        message: The commit message exactly as stored.
        identity: Identity used as both author and committer.
    """

    sha: str
    parent_sha: str
    message: str
    identity: Identity
