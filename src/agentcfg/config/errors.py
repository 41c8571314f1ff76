"""Configuration and storage errors.

Callers should tell "value never set" (:class:`NotFoundError`) apart from
"storage is broken" (:class:`FileError`, :class:`DirectoryError`,
:class:`KeyringError`).
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base class for every agentcfg error."""


class NotFoundError(ConfigError, KeyError):
    """Key is absent from both the environment and the persisted layer."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Configuration value not found: {self.key}"


class DeserializeError(ConfigError):
    """Value does not match the requested type, or file content is invalid."""

    def __str__(self) -> str:
        return f"Failed to deserialize value: {self.args[0] if self.args else ''}"


class FileError(ConfigError):
    """I/O failure reading, writing or removing a backing file."""

    def __str__(self) -> str:
        return f"Failed to access config file: {self.args[0] if self.args else ''}"


class DirectoryError(ConfigError):
    """The config directory cannot be determined or created."""

    def __str__(self) -> str:
        return (
            f"Failed to create config directory: {self.args[0] if self.args else ''}"
        )


class KeyringError(ConfigError):
    """The keyring reported a failure other than a missing entry."""

    def __str__(self) -> str:
        return f"Failed to access keyring: {self.args[0] if self.args else ''}"


__all__ = [
    "ConfigError",
    "NotFoundError",
    "DeserializeError",
    "FileError",
    "DirectoryError",
    "KeyringError",
]
