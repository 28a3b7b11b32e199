"""Configuration models.

This module provides the Config Pydantic model and the enums used by its
logging settings.
"""

from enum import StrEnum
from typing import ClassVar, Final

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MODEL: Final = "openai/gpt-4o-mini"
DEFAULT_BASE_URL: Final = "https://openrouter.ai/api/v1"
DEFAULT_TIMEOUT: Final = 60.0


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class Config(BaseModel):
    """Runtime configuration for a Distill run.

    Attributes:
        api_key: OpenRouter API key, used verbatim. Never shown in reprs.
        model: Model slug sent to OpenRouter.
        base_url: OpenRouter API base URL.
        timeout: Request timeout in seconds.
        log_level: Log level threshold for CLI logs.
        log_format: Log output format for CLI logs.
        debug: Force debug logging regardless of log_level.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    api_key: str = Field(min_length=1, repr=False)
    model: str = Field(default=DEFAULT_MODEL, min_length=1)
    base_url: str = Field(default=DEFAULT_BASE_URL, min_length=1)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    log_level: LogLevel = LogLevel.WARNING
    log_format: LogFormat = LogFormat.TEXT
    debug: bool = False
