"""Commit message generation.

Classes:
    MessageGenerator: Runtime-checkable protocol for message generators.
    OpenRouterClient: httpx-backed client for the OpenRouter API.
    FakeMessageGenerator: Canned generator for tests.
"""

from distill.generation._client import OpenRouterClient
from distill.generation._fake import FakeMessageGenerator
from distill.generation._prompts import SYSTEM_PROMPT, build_messages
from distill.generation._protocol import MessageGenerator

__all__ = [
    "SYSTEM_PROMPT",
    "FakeMessageGenerator",
    "MessageGenerator",
    "OpenRouterClient",
    "build_messages",
]
