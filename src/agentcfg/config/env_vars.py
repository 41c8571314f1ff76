"""Environment variable names - centralized, type-safe, no magic strings!

All access to agentcfg's own switches should go through this module.
Per-key overrides (``OPENAI_API_KEY`` shadowing ``openai_api_key``) are
dynamic and are read directly by the resolver.
"""

from __future__ import annotations

import os
from enum import Enum


class EnvVar(str, Enum):
    """All environment variable names used by agentcfg."""

    # ================================================================
    # Storage selection
    # ================================================================
    IN_MEMORY_CONFIG = "AGENTCFG_IN_MEMORY_CONFIG"
    DISABLE_KEYRING = "AGENTCFG_DISABLE_KEYRING"

    # ================================================================
    # Logging
    # ================================================================
    LOG_LEVEL = "AGENTCFG_LOG_LEVEL"

    # ================================================================
    # Paths (typically inherited, not set by agentcfg)
    # ================================================================
    XDG_CONFIG_HOME = "XDG_CONFIG_HOME"
    APPDATA = "APPDATA"


def get_env(var: EnvVar, default: str | None = None) -> str | None:
    """Get environment variable value (type-safe).

    Args:
        var: EnvVar enum member
        default: Default value if not set

    Returns:
        Environment variable value or default
    """
    return os.getenv(var.value, default)


def is_set(var: EnvVar) -> bool:
    """Check if environment variable is set.

    Presence is what matters for the storage switches, so an empty
    string still counts as set.

    Example:
        >>> if is_set(EnvVar.IN_MEMORY_CONFIG):
        ...     print("Nothing will be written to disk")
    """
    return var.value in os.environ
