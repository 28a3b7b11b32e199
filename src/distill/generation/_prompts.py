"""Prompt text sent to the chat completions API."""

from typing import Final

SYSTEM_PROMPT: Final = """\
You are an expert software engineer who writes clear, concise git commit \
messages.

Write a commit message for the staged diff provided by the user, following \
the Conventional Commits format:

<type>(<optional scope>): <subject>

<optional body>

Rules:
- type is one of: feat, fix, docs, style, refactor, perf, test, build, ci, \
chore, revert
- the subject is written in the imperative mood, has no trailing period, and \
is at most 72 characters
- add a body only when the change needs explaining; wrap it at 72 characters \
and describe what changed and why
- never mention that the message was generated

Respond with the commit message only, without code fences or commentary.\
"""


def build_messages(diff: str) -> list[dict[str, str]]:
    """Build the chat messages for a staged diff.

    Args:
        diff: Unified patch text of the staged changes.

    Returns:
        The system and user messages in request order.
    """
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": diff},
    ]
