"""Default configuration values - no more magic strings!

All default names and numbers should be defined here, not hardcoded in the code.
"""

from __future__ import annotations


# ================================================================
# Application
# ================================================================

APP_NAME = "agentcfg"
"""Directory name under the platform config root."""


# ================================================================
# File Names
# ================================================================

CONFIG_FILENAME = "config.yaml"
"""Persisted (non-secret) configuration values."""

SECRETS_FILENAME = "secrets.yaml"
"""Secrets file, only used when the keyring is disabled."""

PERMISSIONS_FILENAME = "tool_permissions.json"
"""Tool permission cache."""

IN_MEMORY_PATH = "<in-memory>"
"""Reported as the config path when nothing is written to disk."""


# ================================================================
# Keyring
# ================================================================

KEYRING_SERVICE = "agentcfg"
"""Default keyring service name."""

KEYRING_USERNAME = "secrets"
"""Single credential slot holding every secret as one JSON object."""


# ================================================================
# Permission Cache
# ================================================================

PERMISSION_STORE_VERSION = 1
"""Schema version written to tool_permissions.json."""


# ================================================================
# Logging
# ================================================================

DEFAULT_LOG_LEVEL = "WARNING"
"""Default logging level."""

DEFAULT_LOG_MAX_BYTES = 5 * 1024 * 1024
"""Rotate the log file after 5 MiB."""

DEFAULT_LOG_BACKUP_COUNT = 3
"""Number of rotated log files to keep."""
