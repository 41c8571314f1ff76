"""Configuration enums - no magic strings!"""

from __future__ import annotations

from enum import Enum


class ConfigSource(str, Enum):
    """Which layer answered a lookup."""

    ENV = "env"
    FILE = "file"
    KEYRING = "keyring"
    MEMORY = "memory"
