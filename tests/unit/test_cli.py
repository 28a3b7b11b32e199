"""Tests for the distill CLI with the repository and API mocked out."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from rich.console import Console

from distill import __version__
from distill.cli import create_app
from distill.exceptions import RepositoryOpenError
from distill.generation import FakeMessageGenerator
from distill.repository import FakeRepository

if TYPE_CHECKING:
    from unittest.mock import MagicMock

    from pytest_mock import MockerFixture

DIFF = "--- a/a.txt b/a.txt\n@@ -1 +1 @@\n-old\n+new\n"


@pytest.fixture
def distill_cli(console: Console) -> Callable[..., int]:
    """Run the CLI and return its exit code (0 if no SystemExit)."""
    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> int:
        try:
            app(args)
        except SystemExit as e:
            if e.code is None:
                return 0
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    return _run


@pytest.fixture
def api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-test")
    monkeypatch.delenv("DISTILL_DEBUG", raising=False)
    monkeypatch.delenv("DISTILL_LOG_LEVEL", raising=False)


@pytest.fixture
def fake_repo(mocker: MockerFixture) -> FakeRepository:
    repo = FakeRepository(staged={Path("/fake/project/a.txt")})
    repo.diff_text = DIFF
    _ = mocker.patch("distill.cli._app.GitRepository", return_value=repo)
    return repo


@pytest.fixture
def fake_generator(mocker: MockerFixture) -> FakeMessageGenerator:
    generator = FakeMessageGenerator(message="feat: update a")
    client = mocker.MagicMock()
    client.__enter__.return_value = generator
    _ = mocker.patch(
        "distill.cli._app.OpenRouterClient.from_config", return_value=client
    )
    return generator


class TestConfiguration:
    def test_missing_api_key_exits_before_opening_repository(
        self,
        distill_cli: Callable[..., int],
        console: Console,
        mocker: MockerFixture,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
        git_repository: MagicMock = mocker.patch("distill.cli._app.GitRepository")

        with console.capture() as capture:
            exit_code = distill_cli()

        assert exit_code == 2
        assert "Error: OPENROUTER_API_KEY environment variable is not set." in (
            capture.get().replace("\n", " ")
        )
        git_repository.assert_not_called()


@pytest.mark.usefixtures("api_key")
class TestRun:
    def test_success_commits_and_exits_zero(
        self,
        distill_cli: Callable[..., int],
        console: Console,
        fake_repo: FakeRepository,
        fake_generator: FakeMessageGenerator,
    ) -> None:
        with console.capture() as capture:
            exit_code = distill_cli()

        assert exit_code == 0
        assert fake_generator.diffs == [DIFF]
        assert [c.message for c in fake_repo.commits] == ["feat: update a"]
        assert "Successfully committed" in capture.get()

    @pytest.mark.usefixtures("fake_generator")
    def test_dry_run_flag(
        self, distill_cli: Callable[..., int], fake_repo: FakeRepository
    ) -> None:
        assert distill_cli("--dry-run") == 0
        assert fake_repo.commits == []

    @pytest.mark.usefixtures("fake_generator")
    def test_no_auto_stage_flag(
        self,
        distill_cli: Callable[..., int],
        console: Console,
        fake_repo: FakeRepository,
    ) -> None:
        fake_repo.unstaged = set(fake_repo.staged)
        fake_repo.staged.clear()

        with console.capture() as capture:
            exit_code = distill_cli("--no-auto-stage")

        assert exit_code == 5
        assert "Error: No staged changes found" in capture.get()
        assert "stage_all" not in fake_repo.calls

    @pytest.mark.usefixtures("fake_generator")
    def test_verbose_logs_to_stderr(
        self,
        distill_cli: Callable[..., int],
        capsys: pytest.CaptureFixture[str],
        fake_repo: FakeRepository,  # noqa: ARG002
    ) -> None:
        assert distill_cli("-v", "--dry-run") == 0

        captured = capsys.readouterr()
        assert "config_loaded" in captured.err
        assert "repository_opened" in captured.err
        assert "config_loaded" not in captured.out

    def test_repository_open_error_exit_code(
        self,
        distill_cli: Callable[..., int],
        console: Console,
        mocker: MockerFixture,
    ) -> None:
        _ = mocker.patch(
            "distill.cli._app.GitRepository",
            side_effect=RepositoryOpenError("Failed to open git repository."),
        )

        with console.capture() as capture:
            exit_code = distill_cli()

        assert exit_code == 3
        assert "Error: Failed to open git repository." in capture.get()


class TestVersion:
    def test_version_flag(
        self, distill_cli: Callable[..., int], console: Console
    ) -> None:
        with console.capture() as capture:
            exit_code = distill_cli("--version")

        assert exit_code == 0
        assert __version__ in capture.get()
