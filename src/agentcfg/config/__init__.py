"""
Configuration and secrets for agentcfg.

Environment variables always win over persisted storage; persisted storage
is a YAML file, the system keyring, or process memory.
"""

from agentcfg.config.base import (
    Config,
    ResolvedValue,
    get_config,
    reset_config,
)
from agentcfg.config.enums import ConfigSource
from agentcfg.config.env_vars import EnvVar
from agentcfg.config.errors import (
    ConfigError,
    DeserializeError,
    DirectoryError,
    FileError,
    KeyringError,
    NotFoundError,
)
from agentcfg.config.logging import get_logger, setup_logging
from agentcfg.config.paths import app_config_dir, default_config_dir
from agentcfg.config.storage import (
    ConfigStorage,
    FileStorage,
    KeyringStorage,
    MemoryStorage,
    SecretStorage,
    StorageSelection,
    get_storage_selection,
    select_storage,
)

__all__ = [
    # Resolver
    "Config",
    "ResolvedValue",
    "get_config",
    "reset_config",
    # Enums
    "ConfigSource",
    "EnvVar",
    # Errors
    "ConfigError",
    "NotFoundError",
    "DeserializeError",
    "FileError",
    "DirectoryError",
    "KeyringError",
    # Storage
    "ConfigStorage",
    "SecretStorage",
    "FileStorage",
    "KeyringStorage",
    "MemoryStorage",
    "StorageSelection",
    "select_storage",
    "get_storage_selection",
    # Paths
    "app_config_dir",
    "default_config_dir",
    # Logging
    "setup_logging",
    "get_logger",
]
