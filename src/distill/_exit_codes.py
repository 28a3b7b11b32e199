"""Exit codes for the distill command.

    0 - Success
    1 - Unexpected error
    2 - Configuration error
    3 - No git repository found
    4 - Repository operation failed
    5 - Nothing to commit
    6 - Commit message generation failed
"""

EXIT_SUCCESS: int = 0
"""Command completed successfully."""

EXIT_FAILURE: int = 1
"""Unexpected error."""

EXIT_CONFIG_ERROR: int = 2
"""Required setting missing, blank, or invalid."""

EXIT_REPOSITORY_NOT_FOUND: int = 3
"""No readable git repository at or above the working directory."""

EXIT_REPOSITORY_ERROR: int = 4
"""Status, staging, diff, or commit failed."""

EXIT_NOTHING_TO_COMMIT: int = 5
"""Nothing staged, or the staged diff is empty."""

EXIT_GENERATION_ERROR: int = 6
"""Commit message generation failed."""
