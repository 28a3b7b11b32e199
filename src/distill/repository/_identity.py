"""Commit identity resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from distill.repository._models import Identity

if TYPE_CHECKING:
    from dulwich.config import Config

# Identity used when git config does not provide both user.name and user.email
FALLBACK_IDENTITY: Final = Identity(name="Distill", email="distill@example.com")


def resolve_identity(config: Config) -> Identity:
    """Resolve the commit identity from layered git configuration.

    Uses user.name and user.email when both are set and non-empty, otherwise
    the fixed fallback identity. Nothing is cached.

    Args:
        config: Git configuration, usually the repository's config stack
            (repository, global and system files).

    Returns:
        The resolved identity.
    """
    name = _config_value(config, b"name")
    email = _config_value(config, b"email")
    if name and email:
        return Identity(name=name, email=email)
    return FALLBACK_IDENTITY


def _config_value(config: Config, key: bytes) -> str | None:
    """Read a value from the [user] section.

    Args:
        config: Git configuration to read from.
        key: Key within the [user] section.

    Returns:
        The stripped value, or None if not set.
    """
    try:
        value = config.get((b"user",), key)
    except KeyError:
        return None
    return value.decode("utf-8", errors="replace").strip() or None
