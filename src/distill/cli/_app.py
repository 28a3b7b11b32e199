"""The command-line interface for Distill."""

from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console
from rich.markup import escape

from distill import __version__
from distill.config import load_config
from distill.exceptions import DistillError
from distill.generation import OpenRouterClient
from distill.repository import GitRepository
from distill.utils import create_cli_logger
from distill.workflow import WorkflowOptions, run_workflow

HELP = "Generate a commit message for your staged changes and commit them."


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Build the distill application.

    Args:
        console: Console for the commit message and status lines.
        error_console: Console for error messages.
        exit_on_error: Whether cyclopts exits on argument parsing errors.

    Returns:
        The configured cyclopts App.
    """
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="distill",
        help=HELP,
        version=__version__,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *,
        no_auto_stage: Annotated[
            bool,
            Parameter(
                name="--no-auto-stage",
                negative=(),
                help="Don't stage changes automatically when nothing is staged",
            ),
        ] = False,
        dry_run: Annotated[
            bool,
            Parameter(
                name="--dry-run",
                negative=(),
                help="Generate the commit message but don't commit",
            ),
        ] = False,
        verbose: Annotated[
            bool,
            Parameter(
                name=["--verbose", "-v"], negative=(), help="Enable debug logging"
            ),
        ] = False,
    ) -> None:
        """Generate a commit message for the staged changes and commit them.

        Args:
            no_auto_stage: Fail instead of staging everything when nothing
                is staged.
            dry_run: Print the generated message without committing.
            verbose: Enable debug logging on stderr.
        """
        logger = create_cli_logger(verbose=verbose)
        try:
            # Configuration is checked before touching the repository
            config = load_config()
            logger = create_cli_logger(
                verbose=verbose or config.debug,
                level=config.log_level.value,
                log_format=config.log_format.value,  # type: ignore[arg-type]
            )
            logger.debug("config_loaded", model=config.model, base_url=config.base_url)

            options = WorkflowOptions(auto_stage=not no_auto_stage, dry_run=dry_run)
            with (
                GitRepository() as repo,
                OpenRouterClient.from_config(config, logger=logger) as client,
            ):
                logger.debug("repository_opened", root=str(repo.root))
                _ = run_workflow(
                    repo, client, options, console=console, logger=logger
                )
        except DistillError as e:
            logger.debug("run_failed", error=type(e).__name__)
            error_console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise SystemExit(e.exit_code) from None

    return app


def main() -> None:
    """Default entrypoint for the `distill` CLI."""
    app = create_app()
    app()
