"""Distill configuration.

This module provides the public API for Distill configuration: a frozen
Config model loaded from environment variables.

Example:
    >>> from distill.config import load_config
    >>> config = load_config({"OPENROUTER_API_KEY": "sk-or-test"})
    >>> config.model
    'openai/gpt-4o-mini'
"""

from distill.exceptions import ConfigurationError

from ._load import API_KEY_VAR, ENV_FIELDS, load_config
from ._models import (
    DEFAULT_BASE_URL,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT,
    Config,
    LogFormat,
    LogLevel,
)

__all__ = [
    "API_KEY_VAR",
    "DEFAULT_BASE_URL",
    "DEFAULT_MODEL",
    "DEFAULT_TIMEOUT",
    "ENV_FIELDS",
    "Config",
    "ConfigurationError",
    "LogFormat",
    "LogLevel",
    "load_config",
]
