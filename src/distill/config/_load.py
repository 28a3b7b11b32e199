"""Configuration loading from the process environment."""

import os
from collections.abc import Mapping
from typing import Final

from pydantic import ValidationError

from distill.exceptions import ConfigurationError

from ._models import Config

API_KEY_VAR: Final = "OPENROUTER_API_KEY"

# Environment variable -> Config field
ENV_FIELDS: Final[Mapping[str, str]] = {
    "DISTILL_MODEL": "model",
    "OPENROUTER_BASE_URL": "base_url",
    "DISTILL_TIMEOUT": "timeout",
    "DISTILL_LOG_LEVEL": "log_level",
    "DISTILL_LOG_FORMAT": "log_format",
}


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Load configuration from environment variables.

    OPENROUTER_API_KEY is required and passed through untouched. Optional
    settings fall back to their defaults when unset or blank. DISTILL_DEBUG
    set to any non-empty value enables debug logging.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        The validated, frozen Config.

    Raises:
        ConfigurationError: If the API key is missing or blank, or an
            optional setting has an invalid value.
    """
    if environ is None:
        environ = os.environ

    api_key = environ.get(API_KEY_VAR)
    if api_key is None:
        msg = (
            f"{API_KEY_VAR} environment variable is not set. "
            "Please set it to your OpenRouter API key."
        )
        raise ConfigurationError(msg, key=API_KEY_VAR)
    if not api_key.strip():
        msg = (
            f"{API_KEY_VAR} environment variable is empty. "
            "Please provide a valid API key."
        )
        raise ConfigurationError(msg, key=API_KEY_VAR)

    values: dict[str, object] = {"api_key": api_key}
    for var, field_name in ENV_FIELDS.items():
        raw = environ.get(var, "").strip()
        if raw:
            values[field_name] = raw.lower() if field_name.startswith("log_") else raw
    values["debug"] = bool(environ.get("DISTILL_DEBUG"))

    try:
        return Config.model_validate(values)
    except ValidationError as e:
        error = e.errors()[0]
        field_name = str(error["loc"][0]) if error["loc"] else ""
        var = _var_for_field(field_name)
        msg = f"Invalid value for {var}: {error['msg']}"
        raise ConfigurationError(msg, key=var) from e


def _var_for_field(field_name: str) -> str:
    for var, name in ENV_FIELDS.items():
        if name == field_name:
            return var
    return API_KEY_VAR
