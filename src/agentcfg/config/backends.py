"""Value backends behind the config and secret stores.

Every backend exposes the same whole-mapping contract: ``load()`` returns
the full ``key -> value`` mapping and ``save()`` replaces it. There is no
partial-key format on disk or in the keyring.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import yaml

from agentcfg.config.defaults import KEYRING_USERNAME
from agentcfg.config.enums import ConfigSource
from agentcfg.config.errors import DeserializeError, FileError, KeyringError
from agentcfg.config.storage import (
    FileStorage,
    KeyringStorage,
    MemoryStorage,
    SecretStorage,
)
from agentcfg.utils.atomic import atomic_write_text
from agentcfg.utils.serialization import normalize_mapping

logger = logging.getLogger(__name__)

# Process-wide in-memory maps, one per namespace
_MEMORY_VALUES: dict[str, dict[str, Any]] = {}
_MEMORY_LOCK = threading.Lock()


class ValueBackend(ABC):
    """Whole-mapping storage for one namespace."""

    source: ConfigSource

    @abstractmethod
    def load(self) -> dict[str, Any]:
        """Return every stored value."""

    @abstractmethod
    def save(self, values: dict[str, Any]) -> None:
        """Replace every stored value."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location for logs and ``Config.path``."""


class MemoryBackend(ValueBackend):
    """Process-wide map shared by every instance with the same namespace."""

    source = ConfigSource.MEMORY

    def __init__(self, namespace: str):
        self.namespace = namespace

    def load(self) -> dict[str, Any]:
        with _MEMORY_LOCK:
            return copy.deepcopy(_MEMORY_VALUES.get(self.namespace, {}))

    def save(self, values: dict[str, Any]) -> None:
        with _MEMORY_LOCK:
            _MEMORY_VALUES[self.namespace] = copy.deepcopy(values)

    def clear(self) -> None:
        with _MEMORY_LOCK:
            _MEMORY_VALUES.pop(self.namespace, None)

    @property
    def location(self) -> str:
        return f"<in-memory:{self.namespace}>"


class YamlFileBackend(ValueBackend):
    """YAML mapping on disk, normalized to JSON-like values on load."""

    source = ConfigSource.FILE

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FileError(f"{self.path}: {exc}") from exc

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise DeserializeError(f"invalid YAML in {self.path}: {exc}") from exc

        return normalize_mapping(data)

    def save(self, values: dict[str, Any]) -> None:
        content = yaml.safe_dump(
            values,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        atomic_write_text(self.path, content)
        logger.debug(f"Saved {len(values)} values to {self.path}")

    def exists(self) -> bool:
        return self.path.exists()

    def clear(self) -> None:
        try:
            self.path.unlink()
        except OSError as exc:
            raise FileError(f"{self.path}: {exc}") from exc

    @property
    def location(self) -> str:
        return str(self.path)


class KeyringBackend(ValueBackend):
    """All secrets packed into one JSON object under a single credential.

    Reading one secret deserializes the whole blob; writing one secret is a
    full read-modify-write of the same blob. A missing credential means no
    secrets have been stored yet.
    """

    source = ConfigSource.KEYRING

    def __init__(self, service: str, username: str = KEYRING_USERNAME):
        try:
            import keyring
        except ImportError as exc:
            raise KeyringError("keyring library not installed") from exc

        self.keyring = keyring
        self.service = service
        self.username = username

    def load(self) -> dict[str, Any]:
        try:
            content = self.keyring.get_password(self.service, self.username)
        except Exception as exc:
            raise KeyringError(str(exc)) from exc

        if content is None:
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise DeserializeError(f"invalid secrets blob in keyring: {exc}") from exc

        if not isinstance(data, dict):
            raise DeserializeError("secrets blob in keyring is not a JSON object")
        return data

    def save(self, values: dict[str, Any]) -> None:
        payload = json.dumps(values)
        try:
            self.keyring.set_password(self.service, self.username, payload)
        except Exception as exc:
            raise KeyringError(str(exc)) from exc

    @property
    def location(self) -> str:
        return f"<keyring:{self.service}/{self.username}>"


def create_backend(storage: SecretStorage, namespace: str) -> ValueBackend:
    """Build the backend for a storage mode.

    Args:
        storage: Any config or secret storage mode
        namespace: In-memory namespace (``"config"`` or ``"secrets"``)
    """
    if isinstance(storage, MemoryStorage):
        return MemoryBackend(namespace)
    if isinstance(storage, FileStorage):
        return YamlFileBackend(storage.path)
    if isinstance(storage, KeyringStorage):
        return KeyringBackend(storage.service)
    raise TypeError(f"Unsupported storage: {storage!r}")


def reset_memory_values() -> None:
    """Drop every in-memory namespace (tests only)."""
    with _MEMORY_LOCK:
        _MEMORY_VALUES.clear()
