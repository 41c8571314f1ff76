"""Storage modes and the process-wide backend selector.

Storage modes form a tagged union. Config can live in memory or a file;
secrets can additionally live in the system keyring:

    ConfigStorage = FileStorage | MemoryStorage
    SecretStorage = KeyringStorage | FileStorage | MemoryStorage

Decision table for :func:`select_storage`:

    in-memory switch   keyring-disable switch   config   secrets
    present            -                        Memory   Memory
    absent             absent                   File     Keyring
    absent             present                  File     File (secrets.yaml)
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel

from agentcfg.config.defaults import (
    CONFIG_FILENAME,
    KEYRING_SERVICE,
    PERMISSIONS_FILENAME,
    SECRETS_FILENAME,
)
from agentcfg.config.env_vars import EnvVar, is_set
from agentcfg.config.paths import app_config_dir

logger = logging.getLogger(__name__)


class MemoryStorage(BaseModel):
    """Process-lifetime storage; nothing touches disk."""

    kind: Literal["memory"] = "memory"

    model_config = {"frozen": True}


class FileStorage(BaseModel):
    """Storage backed by a single file."""

    kind: Literal["file"] = "file"
    path: Path

    model_config = {"frozen": True}


class KeyringStorage(BaseModel):
    """Secrets packed into one credential of the system keyring."""

    kind: Literal["keyring"] = "keyring"
    service: str = KEYRING_SERVICE

    model_config = {"frozen": True}


# Type aliases for the two storage roles
ConfigStorage = FileStorage | MemoryStorage
SecretStorage = KeyringStorage | FileStorage | MemoryStorage


class StorageSelection(BaseModel):
    """Resolved storage for config, secrets and the permission cache."""

    config: ConfigStorage
    secrets: SecretStorage
    permissions: ConfigStorage

    model_config = {"frozen": True}

    @property
    def in_memory(self) -> bool:
        return isinstance(self.config, MemoryStorage)


def select_storage(config_dir: Path | None = None) -> StorageSelection:
    """Decide storage for this process from the environment.

    Reads the switches at call time. The in-memory switch overrides
    everything else and skips the config directory entirely.

    Raises:
        DirectoryError: If the config directory cannot be created
    """
    if is_set(EnvVar.IN_MEMORY_CONFIG):
        logger.debug("In-memory configuration requested")
        return StorageSelection(
            config=MemoryStorage(),
            secrets=MemoryStorage(),
            permissions=MemoryStorage(),
        )

    directory = app_config_dir(config_dir)

    secrets: SecretStorage
    if is_set(EnvVar.DISABLE_KEYRING):
        logger.debug("Keyring disabled, storing secrets in %s", SECRETS_FILENAME)
        secrets = FileStorage(path=directory / SECRETS_FILENAME)
    else:
        secrets = KeyringStorage(service=KEYRING_SERVICE)

    return StorageSelection(
        config=FileStorage(path=directory / CONFIG_FILENAME),
        secrets=secrets,
        permissions=FileStorage(path=directory / PERMISSIONS_FILENAME),
    )


@lru_cache(maxsize=1)
def get_storage_selection() -> StorageSelection:
    """Storage decision for the default locations, made once per process."""
    return select_storage()


def reset_storage_selection() -> None:
    """Forget the memoized decision (tests only)."""
    get_storage_selection.cache_clear()
