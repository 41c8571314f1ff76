"""agentcfg - layered configuration, secrets and tool permission cache."""

from importlib.metadata import PackageNotFoundError, version

from agentcfg.config import (
    Config,
    ConfigError,
    DeserializeError,
    DirectoryError,
    FileError,
    KeyringError,
    NotFoundError,
    get_config,
)
from agentcfg.permission import ToolPermissionStore, ToolRequest

try:
    __version__ = version("agentcfg")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "Config",
    "get_config",
    "ConfigError",
    "NotFoundError",
    "DeserializeError",
    "FileError",
    "DirectoryError",
    "KeyringError",
    "ToolPermissionStore",
    "ToolRequest",
    "__version__",
]
