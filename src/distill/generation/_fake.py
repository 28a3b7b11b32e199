"""Fake message generator for testing."""

from dataclasses import dataclass, field


@dataclass(slots=True)
class FakeMessageGenerator:
    """Message generator returning a canned message.

    Every diff passed to generate() is recorded in `diffs`. When `error` is
    set it is raised instead of returning the message.

    Example:
        >>> generator = FakeMessageGenerator(message="feat: add parser")
        >>> generator.generate("--- a/x b/x\\n")
        'feat: add parser'
    """

    message: str = "chore: update files"
    error: Exception | None = None
    diffs: list[str] = field(default_factory=list)

    def generate(self, diff: str) -> str:
        """Record the diff and return the canned message.

        Args:
            diff: Unified patch text.

        Returns:
            The configured message.
        """
        self.diffs.append(diff)
        if self.error is not None:
            raise self.error
        return self.message
