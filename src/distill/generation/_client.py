"""OpenRouter chat completions client.

This module provides OpenRouterClient, a blocking httpx client that sends a
staged diff to the OpenRouter chat completions endpoint and returns the
generated commit message. Requests are never retried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final, Self

import httpx

from distill import __version__
from distill.config import DEFAULT_BASE_URL, DEFAULT_MODEL, DEFAULT_TIMEOUT
from distill.exceptions import GenerationError
from distill.generation._prompts import build_messages

if TYPE_CHECKING:
    from types import TracebackType

    from structlog.typing import FilteringBoundLogger

    from distill.config import Config

_REFERER: Final = "https://github.com/distill-cli/distill"
_TITLE: Final = "Distill"
# Longest slice of an error body included in messages
_MAX_ERROR_BODY: Final = 200


class OpenRouterClient:
    """Generate commit messages with the OpenRouter API.

    The client owns its httpx.Client unless one is injected, and closes it
    on close() or when used as a context manager.

    Example:
        with OpenRouterClient(api_key) as client:
            message = client.generate(diff)
    """

    __slots__: Final = ("_client", "_logger", "_model", "_owns_client")

    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.Client | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: OpenRouter API key, sent as a bearer token.
            model: Model slug to request.
            base_url: API base URL; the completions path is appended.
            timeout: Request timeout in seconds.
            http_client: Optional pre-built client (tests inject a
                MockTransport). Its own settings are used as-is.
            logger: Optional structlog logger for request events.
        """
        self._model = model
        self._logger = logger
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.Client(
                base_url=base_url.rstrip("/") + "/",
                timeout=timeout,
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "HTTP-Referer": _REFERER,
                    "X-Title": _TITLE,
                    "User-Agent": f"distill/{__version__}",
                },
            )
        self._client = http_client

    @classmethod
    def from_config(
        cls, config: Config, *, logger: FilteringBoundLogger | None = None
    ) -> Self:
        """Build a client from loaded configuration.

        Args:
            config: The loaded configuration.
            logger: Optional structlog logger for request events.

        Returns:
            A new client owning its httpx.Client.
        """
        return cls(
            config.api_key,
            model=config.model,
            base_url=config.base_url,
            timeout=config.timeout,
            logger=logger,
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client:
            self._client.close()

    @property
    def model(self) -> str:
        """Model slug sent with every request."""
        return self._model

    def generate(self, diff: str) -> str:
        """Generate a commit message for a staged diff.

        Args:
            diff: Unified patch text of the staged changes.

        Returns:
            The first choice's message content with surrounding whitespace
            removed.

        Raises:
            GenerationError: On transport failure, a non-2xx status, or a
                response without usable message content.
        """
        payload = {"model": self._model, "messages": build_messages(diff)}
        if self._logger is not None:
            self._logger.debug(
                "generation_request", model=self._model, diff_chars=len(diff)
            )

        try:
            response = self._client.post("chat/completions", json=payload)
        except httpx.TimeoutException as e:
            msg = f"Request to OpenRouter timed out: {e}"
            raise GenerationError(msg) from e
        except httpx.HTTPError as e:
            msg = f"Request to OpenRouter failed: {e}"
            raise GenerationError(msg) from e

        if response.is_error:
            body = response.text[:_MAX_ERROR_BODY]
            msg = f"OpenRouter API returned HTTP {response.status_code}: {body}"
            raise GenerationError(msg, status_code=response.status_code)

        try:
            data: Any = response.json()  # pyright: ignore[reportExplicitAny]
        except ValueError as e:
            msg = "OpenRouter API returned a response that is not valid JSON"
            raise GenerationError(msg, status_code=response.status_code) from e

        message = _extract_message(data)
        if message is None:
            msg = "OpenRouter API response did not contain a commit message"
            raise GenerationError(msg, status_code=response.status_code)

        if self._logger is not None:
            self._logger.debug(
                "generation_response",
                status_code=response.status_code,
                message_chars=len(message),
            )
        return message


def _extract_message(data: Any) -> str | None:  # pyright: ignore[reportExplicitAny]
    """Pull choices[0].message.content out of a completions response.

    Args:
        data: Decoded JSON body.

    Returns:
        The stripped content, or None if missing or blank.
    """
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if not isinstance(content, str):
        return None
    return content.strip() or None
