"""Git repository management.

This module provides the GitRepository class, which owns a single dulwich Repo
for the duration of a run and implements the staging-area operations Distill
needs: status, staging everything, extracting the staged diff, and committing.
"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import TYPE_CHECKING, Final, Self

from dulwich import porcelain
from dulwich.errors import NotGitRepository
from dulwich.index import IndexEntry, commit_tree
from dulwich.objects import S_ISGITLINK, Commit
from dulwich.repo import Repo

from distill.exceptions import (
    CommitError,
    DiffError,
    RepositoryOpenError,
    StagingError,
    StatusQueryError,
)
from distill.repository._diff import iter_tree_diff, render_patch
from distill.repository._identity import resolve_identity
from distill.repository._models import ChangeStatus, CommitResult, Identity

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from types import TracebackType

    from distill.repository._models import DiffLine

_HEAD: Final = b"HEAD"

# Errors dulwich raises for unreadable objects, index or working tree files
_GIT_ERRORS: Final = (OSError, KeyError, ValueError)


class GitRepository:
    """Manages the git repository containing a working directory.

    The repository is discovered by walking up from the working directory,
    the same way git itself does. The instance exclusively owns its dulwich
    Repo; nothing else in the process opens the same repository.

    The class implements the context manager protocol for proper resource
    cleanup. When used as a context manager, the underlying dulwich Repo is
    automatically closed when exiting the context.

    Attributes:
        root: The resolved path to the repository's working tree.

    Example:
        with GitRepository() as repo:
            if not repo.has_staged_changes():
                repo.stage_all()
            print(repo.get_staged_diff())
    """

    __slots__: Final = ("_repo", "_root")
    _root: Path
    _repo: Repo

    def __init__(self, working_dir: Path | None = None) -> None:
        """Open the repository containing a directory.

        Args:
            working_dir: The directory to start discovery from. If None,
                uses the current working directory.

        Raises:
            RepositoryOpenError: If no readable repository is found at or
                above the working directory.
        """
        if working_dir is None:
            working_dir = Path.cwd()
        try:
            self._repo = Repo.discover(str(working_dir))
        except NotGitRepository as e:
            msg = (
                "Failed to open git repository. "
                "Make sure you're in a git repository."
            )
            raise RepositoryOpenError(msg, path=working_dir) from e
        except _GIT_ERRORS as e:
            msg = f"Failed to read git repository at {working_dir}: {e}"
            raise RepositoryOpenError(msg, path=working_dir) from e
        self._root = Path(self._repo.path).resolve()

    # =========================================================================
    # Context Manager Protocol
    # =========================================================================

    def __enter__(self) -> Self:
        """Enter the context manager.

        Returns:
            The repository instance.
        """
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager and close the repository."""
        self.close()

    def close(self) -> None:
        """Close the underlying git repository.

        Releases file handles held by the dulwich Repo. This method is
        automatically called when using the context manager protocol.
        """
        self._repo.close()

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def root(self) -> Path:
        """Get the resolved root path of the repository.

        Returns:
            The absolute path to the repository's working tree.
        """
        return self._root

    # =========================================================================
    # Status Methods
    # =========================================================================

    def get_status(self, *, include_untracked: bool = True) -> ChangeStatus:
        """Get the current status of the repository.

        Ignored files are never reported.

        Args:
            include_untracked: Whether to scan the working tree for
                untracked files. Skipping the scan is cheaper.

        Returns:
            ChangeStatus with absolute paths.

        Raises:
            StatusQueryError: If status cannot be computed.
        """
        try:
            raw = porcelain.status(
                self._repo,
                untracked_files="all" if include_untracked else "no",
            )
        except _GIT_ERRORS as e:
            msg = f"Failed to get git status: {e}"
            raise StatusQueryError(msg) from e

        # Staged changes come as a dict with keys: 'add', 'delete', 'modify'
        staged: set[str] = set()
        for files in raw.staged.values():
            staged.update(os.fsdecode(f) for f in files)

        return ChangeStatus(
            staged=self._to_absolute_paths(staged),
            unstaged=self._to_absolute_paths(os.fsdecode(f) for f in raw.unstaged),
            untracked=self._to_absolute_paths(os.fsdecode(f) for f in raw.untracked),
        )

    def has_staged_changes(self) -> bool:
        """Check whether the index differs from HEAD.

        A path counts as staged when it was added, modified (including mode
        and type changes) or deleted in the index relative to HEAD. Untracked
        files are not consulted. This is a read-only query.

        Returns:
            True if at least one path is staged.

        Raises:
            StatusQueryError: If status cannot be computed.
        """
        return bool(self.get_status(include_untracked=False).staged)

    # =========================================================================
    # Staging Methods
    # =========================================================================

    def stage_all(self) -> None:
        """Stage every change in the working tree.

        New, modified and deleted files anywhere under the repository root
        are added to the index, honoring ignore rules, and the index is
        written to disk. Tracked files are re-added by path so that changes
        to the executable bit alone are picked up as well. Staging an already fully staged tree changes nothing.
        Callers must re-check has_staged_changes() afterwards; staging a
        clean working tree leaves nothing staged.

        Raises:
            StagingError: If the index cannot be updated or written. The index
                is left in whatever state the failed write produced.
        """
        try:
            tracked = self._tracked_paths_on_disk()
            _ = porcelain.add(self._repo, paths=[self._root, *tracked])
        except _GIT_ERRORS as e:
            msg = f"Failed to stage all changes: {e}"
            raise StagingError(msg) from e

    # =========================================================================
    # Diff Methods
    # =========================================================================

    def iter_staged_diff(self) -> Iterator[DiffLine]:
        """Produce the staged diff as classified lines.

        Compares HEAD's tree (old) to a tree written from the current index
        (new). Writing the index tree stores tree objects but creates no
        commit. The returned iterator is single-pass.

        Returns:
            Iterator of DiffLine values in file, hunk, line order.

        Raises:
            DiffError: If HEAD is missing or the index tree cannot be written.
                Failures while iterating are also raised as DiffError.
        """
        head_tree = self._get_head_tree()
        if head_tree is None:
            msg = (
                "Failed to get HEAD reference. The repository has no commits yet; "
                "create an initial commit first."
            )
            raise DiffError(msg, reason="head-missing")
        try:
            index_tree = self._write_index_tree()
        except _GIT_ERRORS as e:
            msg = f"Failed to get index tree: {e}"
            raise DiffError(msg, reason="diff-failed") from e
        return self._guard_diff(
            iter_tree_diff(self._repo.object_store, head_tree, index_tree)
        )

    def get_staged_diff(self) -> str:
        """Get the staged diff as unified patch text.

        Two calls without an intervening index change return identical text.

        Returns:
            Patch text, possibly empty.

        Raises:
            DiffError: If HEAD is missing or the diff cannot be generated.
        """
        return render_patch(self.iter_staged_diff())

    # =========================================================================
    # Commit Methods
    # =========================================================================

    def commit(self, message: str) -> CommitResult:
        """Commit the index with HEAD as the single parent.

        The message is stored verbatim. The identity is resolved from git
        configuration on every call. No hooks run, nothing is signed, and no
        merge parents are added. HEAD (or the branch it points to) is advanced
        with an atomic compare-and-swap.

        Args:
            message: The commit message.

        Returns:
            CommitResult describing the new commit.

        Raises:
            CommitError: If there is no parent commit, the tree cannot be
                written, or the commit cannot be stored.
        """
        parent_sha = self._get_head_sha()
        if parent_sha is None:
            msg = (
                "Failed to get parent commit. The repository has no commits yet; "
                "create an initial commit first."
            )
            raise CommitError(msg, reason="no-head")

        try:
            tree_sha = self._write_index_tree()
        except _GIT_ERRORS as e:
            msg = f"Failed to write tree from index: {e}"
            raise CommitError(msg, reason="tree-write") from e

        identity = resolve_identity(self._repo.get_config_stack())
        commit = self._build_commit(tree_sha, parent_sha, identity, message)

        try:
            self._repo.object_store.add_object(commit)
            updated = self._repo.refs.set_if_equals(
                _HEAD,
                parent_sha,
                commit.id,
                message=_reflog_message(commit.message),
                committer=commit.committer,
                timestamp=commit.commit_time,
                timezone=commit.commit_timezone,
            )
        except _GIT_ERRORS as e:
            msg = f"Failed to create commit: {e}"
            raise CommitError(msg, reason="commit-write") from e

        if not updated:
            msg = "Failed to create commit: HEAD changed while committing"
            raise CommitError(msg, reason="commit-write")

        return CommitResult(
            sha=commit.id.decode("ascii"),
            parent_sha=parent_sha.decode("ascii"),
            message=message,
            identity=identity,
        )

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    def _build_commit(
        self, tree_sha: bytes, parent_sha: bytes, identity: Identity, message: str
    ) -> Commit:
        """Assemble a commit object.

        Args:
            tree_sha: Hex SHA of the tree to commit.
            parent_sha: Hex SHA of the single parent.
            identity: Author and committer identity.
            message: Commit message, stored verbatim.

        Returns:
            The unsaved Commit object.
        """
        now = int(time.time())
        # Seconds east of UTC, as dulwich expects
        offset = time.localtime(now).tm_gmtoff

        commit = Commit()
        commit.tree = tree_sha
        commit.parents = [parent_sha]
        commit.author = commit.committer = identity.to_bytes()
        commit.author_time = commit.commit_time = now
        commit.author_timezone = commit.commit_timezone = offset
        commit.message = message.encode()
        return commit

    def _get_head_sha(self) -> bytes | None:
        """Get the current HEAD commit SHA.

        Returns:
            The HEAD commit SHA as hex bytes, or None if no commits exist.
        """
        try:
            return self._repo.head()
        except KeyError:
            # No commits yet (empty repository)
            return None

    def _get_head_tree(self) -> bytes | None:
        """Get the tree SHA for HEAD commit.

        Returns:
            Tree SHA as hex bytes, or None if no commits exist.

        Raises:
            DiffError: If HEAD cannot be read or is not a commit.
        """
        head_sha = self._get_head_sha()
        if head_sha is None:
            return None
        try:
            commit_obj = self._repo[head_sha]
        except _GIT_ERRORS as e:
            msg = f"Failed to read HEAD commit: {e}"
            raise DiffError(msg, reason="diff-failed") from e
        if not isinstance(commit_obj, Commit):
            msg = f"HEAD does not point to a commit: {head_sha.decode('ascii')}"
            raise DiffError(msg, reason="diff-failed")
        return commit_obj.tree

    def _tracked_paths_on_disk(self) -> list[Path]:
        """List tracked files that still exist in the working tree.

        dulwich only reports tracked files whose content changed, so a file
        whose mode alone changed has to be named explicitly to be restaged.
        Submodule entries are skipped.

        Returns:
            Absolute paths of tracked regular files and symlinks.
        """
        index = self._repo.open_index()
        paths: list[Path] = []
        for path, entry in index.items():
            if isinstance(entry, IndexEntry) and S_ISGITLINK(entry.mode):
                continue
            full_path = self._root / os.fsdecode(path)
            if full_path.is_symlink() or full_path.is_file():
                paths.append(full_path)
        return paths

    def _write_index_tree(self) -> bytes:
        """Write the current index to tree objects.

        Returns:
            Tree SHA representing the current index state.
        """
        index = self._repo.open_index()
        blobs: list[tuple[bytes, bytes, int]] = []
        for path, entry in index.items():
            # Skip conflicted entries (they don't have sha/mode attributes)
            if isinstance(entry, IndexEntry):
                blobs.append((path, entry.sha, entry.mode))
        return commit_tree(self._repo.object_store, blobs)

    def _guard_diff(self, lines: Iterator[DiffLine]) -> Iterator[DiffLine]:
        """Re-raise library failures during diff iteration as DiffError.

        Args:
            lines: The underlying diff line iterator.

        Yields:
            The same lines, unchanged.

        Raises:
            DiffError: If reading objects fails mid-iteration.
        """
        try:
            yield from lines
        except _GIT_ERRORS as e:
            msg = f"Failed to generate diff output: {e}"
            raise DiffError(msg, reason="diff-failed") from e

    def _to_absolute_paths(self, relative_paths: Iterable[str]) -> frozenset[Path]:
        """Convert repository-relative paths to absolute paths.

        Args:
            relative_paths: Repository-relative path strings.

        Returns:
            Frozenset of absolute Path objects.
        """
        return frozenset(self._root / p for p in relative_paths)


def _reflog_message(message: bytes) -> bytes:
    """Build the reflog entry for a new commit, as `git commit` writes it."""
    subject = message.splitlines()[0] if message else b""
    return b"commit: " + subject
