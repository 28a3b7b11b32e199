"""The commit message workflow.

run_workflow() drives one Distill run against an already opened repository:
make sure something is staged, extract the staged diff, generate a message,
show it, and commit unless this is a dry run. Configuration loading and
opening the repository are the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from distill.exceptions import EmptyDiffError, GenerationError, PolicyError

if TYPE_CHECKING:
    from rich.console import Console
    from structlog.typing import FilteringBoundLogger

    from distill.generation import MessageGenerator
    from distill.repository import CommitResult, RepositoryProtocol

SEPARATOR: Final = "------------------------"


@dataclass(frozen=True, slots=True)
class WorkflowOptions:
    """Options for a single run.

    Attributes:
        auto_stage: Stage every change when nothing is staged.
        dry_run: Generate and show the message without committing.
    """

    auto_stage: bool = True
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class WorkflowResult:
    """Outcome of a successful run.

    Attributes:
        message: The generated commit message.
        diff: The staged diff the message was generated from.
        staged_automatically: Whether stage_all() was invoked.
        commit: The created commit, or None for dry runs.
    """

    message: str
    diff: str
    staged_automatically: bool
    commit: CommitResult | None


def run_workflow(
    repo: RepositoryProtocol,
    generator: MessageGenerator,
    options: WorkflowOptions,
    *,
    console: Console,
    logger: FilteringBoundLogger,
) -> WorkflowResult:
    """Generate a commit message for the staged changes and commit them.

    Args:
        repo: The open repository.
        generator: Produces the commit message from the diff.
        options: Staging and dry-run behaviour.
        console: Console the message and status lines are printed to.
        logger: Logger for progress events.

    Returns:
        WorkflowResult describing what happened.

    Raises:
        PolicyError: If nothing is staged and auto-staging is disabled, or
            staging everything left nothing staged.
        EmptyDiffError: If the staged diff has no text.
        GenerationError: If the message could not be generated.
        RepositoryError: If any repository operation fails.
    """
    staged_automatically = _ensure_staged(repo, options, logger)

    diff = repo.get_staged_diff()
    logger.debug("staged_diff", chars=len(diff))
    if not diff.strip():
        msg = "No staged changes found to generate commit message for."
        raise EmptyDiffError(msg)

    logger.info("generation_started")
    try:
        message = generator.generate(diff)
    except GenerationError as e:
        msg = f"Failed to generate commit message from OpenRouter API: {e}"
        raise GenerationError(msg, status_code=e.status_code) from e
    logger.info("generation_finished", message_chars=len(message))

    console.print("Generated commit message:")
    console.print(SEPARATOR)
    console.print(
        message, markup=False, highlight=False, emoji=False, soft_wrap=True
    )
    console.print(SEPARATOR)

    if options.dry_run:
        console.print("Dry run mode - commit message generated but not committed.")
        logger.info("dry_run_complete")
        return WorkflowResult(
            message=message,
            diff=diff,
            staged_automatically=staged_automatically,
            commit=None,
        )

    commit = repo.commit(message)
    logger.info("commit_created", sha=commit.sha, parent=commit.parent_sha)
    console.print("✅ Successfully committed changes with AI-generated message!")
    return WorkflowResult(
        message=message,
        diff=diff,
        staged_automatically=staged_automatically,
        commit=commit,
    )


def _ensure_staged(
    repo: RepositoryProtocol, options: WorkflowOptions, logger: FilteringBoundLogger
) -> bool:
    """Make sure the index has changes, staging everything if allowed.

    Returns:
        True if stage_all() was called.
    """
    if repo.has_staged_changes():
        logger.debug("staged_changes_found")
        return False

    if not options.auto_stage:
        msg = (
            "No staged changes found and --no-auto-stage flag is set. "
            "Please stage some changes first."
        )
        raise PolicyError(msg, reason="nothing-staged")

    logger.info("staging_all_changes")
    repo.stage_all()
    if not repo.has_staged_changes():
        msg = "No changes to commit after staging all files."
        raise PolicyError(msg, reason="nothing-after-staging")
    return True
