"""Shared test fixtures for Distill tests."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest
from dulwich import porcelain
from dulwich.repo import Repo
from rich.console import Console

TEST_NAME = "Test User"
TEST_EMAIL = "test@example.com"
TEST_IDENTITY = f"{TEST_NAME} <{TEST_EMAIL}>".encode()


@dataclass(frozen=True, slots=True)
class GitProject:
    """A real git repository with one initial commit."""

    root: Path
    initial_sha: str

    def write(self, name: str, content: str | bytes) -> Path:
        """Write a file relative to the repository root."""
        path = self.root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)
        return path

    def stage(self, *names: str) -> None:
        """Stage specific files, like `git add <names>`."""
        with Repo(str(self.root)) as repo:
            _ = porcelain.add(repo, paths=[str(self.root / name) for name in names])

    def head(self) -> str:
        """Get the current HEAD commit SHA."""
        with Repo(str(self.root)) as repo:
            return repo.head().decode("ascii")


GitProjectFactory = Callable[..., GitProject]


@pytest.fixture
def isolated_git_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Hide the user's global and system git configuration."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(home / ".gitconfig"))
    return home


@pytest.fixture
def make_git_project(
    tmp_path: Path,
    isolated_git_config: Path,  # noqa: ARG001
) -> GitProjectFactory:
    """Return a factory creating git repositories with an initial commit.

    Structure:
        tmp_path/
            <name>/
                .git/
                README.md      # committed
    """

    def _make(name: str = "project", *, with_identity: bool = True) -> GitProject:
        root = tmp_path / name
        root.mkdir()
        with Repo.init(str(root)) as repo:
            if with_identity:
                config = repo.get_config()
                config.set((b"user",), b"name", TEST_NAME.encode())
                config.set((b"user",), b"email", TEST_EMAIL.encode())
                config.write_to_path()

            (root / "README.md").write_text("# Test project\n")
            _ = porcelain.add(repo, paths=[str(root / "README.md")])
            sha = porcelain.commit(
                repo,
                message=b"Initial commit",
                author=TEST_IDENTITY,
                committer=TEST_IDENTITY,
            )
        return GitProject(root=root.resolve(), initial_sha=sha.decode("ascii"))

    return _make


@pytest.fixture
def git_project(make_git_project: GitProjectFactory) -> GitProject:
    """Create a git repository with user identity and one commit."""
    return make_git_project()


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )
