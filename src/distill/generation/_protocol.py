"""Message generator protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class MessageGenerator(Protocol):
    """Anything that turns a staged diff into a commit message."""

    def generate(self, diff: str) -> str:
        """Generate a commit message for a diff.

        Args:
            diff: Unified patch text of the staged changes.

        Returns:
            The commit message, without surrounding whitespace.

        Raises:
            GenerationError: If no message could be produced.
        """
        ...
