"""Layered configuration and secrets for agentcfg.

Configuration values are resolved with the following precedence:

1. Environment variable named after the key in upper case
   (``openai_api_key`` is shadowed by ``OPENAI_API_KEY``)
2. Configuration file (``~/.config/agentcfg/config.yaml`` by default)

Secrets follow the same precedence, with the persisted layer being either
the system keyring (one JSON object under a single credential) or, when
``AGENTCFG_DISABLE_KEYRING`` is set, ``secrets.yaml`` next to the config
file.

Setting ``AGENTCFG_IN_MEMORY_CONFIG`` (any value) keeps both config and
secrets in process memory only. :meth:`Config.in_memory` does the same
programmatically.

Example::

    config = get_config()
    api_key = config.get_secret("openai_api_key", str)

    class ServerConfig(BaseModel):
        host: str
        port: int

    server = config.get_param("server", ServerConfig)

Keys are recommended to be snake_case. Environment variables are never
written by this module.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Generic, TypeVar, overload

from pydantic import BaseModel, TypeAdapter, ValidationError

from agentcfg.config.backends import (
    MemoryBackend,
    ValueBackend,
    YamlFileBackend,
    create_backend,
)
from agentcfg.config.defaults import IN_MEMORY_PATH, KEYRING_SERVICE
from agentcfg.config.enums import ConfigSource
from agentcfg.config.errors import DeserializeError, NotFoundError
from agentcfg.config.storage import (
    ConfigStorage,
    FileStorage,
    KeyringStorage,
    MemoryStorage,
    SecretStorage,
    get_storage_selection,
    select_storage,
)
from agentcfg.utils.atomic import temp_path_for
from agentcfg.utils.serialization import to_serializable

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONFIG_NAMESPACE = "config"
SECRETS_NAMESPACE = "secrets"


class ResolvedValue(BaseModel, Generic[T]):
    """A configuration value with its source for debugging."""

    value: T
    source: ConfigSource

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


def _convert(key: str, value: Any, type_: Any) -> Any:
    """Validate a JSON-like value into the requested type."""
    if type_ is Any:
        return value
    try:
        return TypeAdapter(type_).validate_python(value)
    except ValidationError as exc:
        raise DeserializeError(f"{key}: {exc}") from exc


def _reject_constant(token: str) -> Any:
    raise ValueError(f"not a JSON value: {token}")


def _env_override(key: str) -> tuple[bool, Any]:
    """Look up ``KEY`` in the environment.

    The raw string is parsed as strict JSON when possible, otherwise kept
    as a plain string. ``NaN`` and ``Infinity`` are not JSON and stay
    strings. Malformed JSON is never an error here.
    """
    env_key = key.upper()
    if env_key not in os.environ:
        return False, None

    raw = os.environ[env_key]
    try:
        return True, json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        return True, raw


class Config:
    """Configuration and secret resolver over pluggable storage."""

    def __init__(
        self,
        config_storage: ConfigStorage,
        secret_storage: SecretStorage,
    ):
        """Initialize with explicit storage modes.

        Args:
            config_storage: Where non-secret values live
            secret_storage: Where secrets live, never the same file as config
        """
        if (
            isinstance(config_storage, FileStorage)
            and isinstance(secret_storage, FileStorage)
            and temp_path_for(config_storage.path)
            == temp_path_for(secret_storage.path)
        ):
            # equal paths, or e.g. app.yaml and app.yml sharing app.tmp
            raise ValueError("Config and secrets must not share a file")

        self.config_storage = config_storage
        self.secret_storage = secret_storage
        self._values: ValueBackend = create_backend(config_storage, CONFIG_NAMESPACE)
        self._secrets: ValueBackend = create_backend(
            secret_storage, SECRETS_NAMESPACE
        )

    # ================================================================
    # Constructors
    # ================================================================

    @classmethod
    def with_keyring(
        cls, config_path: str | Path, service: str = KEYRING_SERVICE
    ) -> Config:
        """File-backed config with secrets in the system keyring."""
        return cls(
            FileStorage(path=Path(config_path)),
            KeyringStorage(service=service),
        )

    @classmethod
    def with_file_secrets(
        cls, config_path: str | Path, secrets_path: str | Path
    ) -> Config:
        """File-backed config and secrets in two separate YAML files."""
        return cls(
            FileStorage(path=Path(config_path)),
            FileStorage(path=Path(secrets_path)),
        )

    @classmethod
    def in_memory(cls) -> Config:
        """Ephemeral config; values live as long as the process."""
        return cls(MemoryStorage(), MemoryStorage())

    @classmethod
    def from_environment(cls, config_dir: Path | None = None) -> Config:
        """Pick storage from the environment switches.

        Raises:
            DirectoryError: If the config directory cannot be created
        """
        selection = select_storage(config_dir)
        return cls(selection.config, selection.secrets)

    # ================================================================
    # File management
    # ================================================================

    @property
    def path(self) -> str:
        """Path of the config file, or ``<in-memory>``."""
        if isinstance(self._values, MemoryBackend):
            return IN_MEMORY_PATH
        return self._values.location

    def exists(self) -> bool:
        """Whether the config already exists (always true in memory)."""
        if isinstance(self._values, YamlFileBackend):
            return self._values.exists()
        return True

    def clear(self) -> None:
        """Remove every config value (secrets are untouched).

        Raises:
            FileError: If the config file cannot be removed
        """
        if isinstance(self._values, YamlFileBackend):
            self._values.clear()
        elif isinstance(self._values, MemoryBackend):
            self._values.clear()
        logger.info(f"Cleared configuration at {self.path}")

    def load_values(self) -> dict[str, Any]:
        """Load every persisted config value."""
        return self._values.load()

    def save_values(self, values: dict[str, Any]) -> None:
        """Replace every persisted config value."""
        self._values.save(values)

    def load_secrets(self) -> dict[str, Any]:
        """Load every persisted secret.

        A missing keyring entry is an empty mapping, not an error.
        """
        return self._secrets.load()

    # ================================================================
    # Config values
    # ================================================================

    @overload
    def get_param(self, key: str) -> Any: ...

    @overload
    def get_param(self, key: str, type_: type[T]) -> T: ...

    def get_param(self, key: str, type_: Any = Any) -> Any:
        """Get a configuration value (non-secret).

        Args:
            key: Config key, checked as ``KEY.upper()`` in the environment first
            type_: Target type; anything a pydantic ``TypeAdapter`` accepts

        Raises:
            NotFoundError: Key is in neither the environment nor the file
            DeserializeError: Value does not match ``type_``, or invalid file
            FileError: Config file cannot be read
        """
        return self.resolve_param(key, type_).value

    def resolve_param(self, key: str, type_: Any = Any) -> ResolvedValue[Any]:
        """Like :meth:`get_param`, also reporting which layer answered."""
        return self._resolve(key, type_, self._values)

    def set_param(self, key: str, value: Any) -> None:
        """Set a configuration value, rewriting the whole config file.

        Environment variables are not affected; an existing override
        keeps shadowing the stored value.
        """
        values = self.load_values()
        values[key] = to_serializable(value)
        self.save_values(values)
        logger.debug(f"Set config key {key!r} in {self.path}")

    def delete(self, key: str) -> None:
        """Delete a configuration value. Missing keys are not an error."""
        values = self.load_values()
        values.pop(key, None)
        self.save_values(values)
        logger.debug(f"Deleted config key {key!r} from {self.path}")

    # ================================================================
    # Secrets
    # ================================================================

    @overload
    def get_secret(self, key: str) -> Any: ...

    @overload
    def get_secret(self, key: str, type_: type[T]) -> T: ...

    def get_secret(self, key: str, type_: Any = Any) -> Any:
        """Get a secret value.

        Checks the environment first, then the keyring (or secrets file).

        Raises:
            NotFoundError: Key is in neither the environment nor the store
            DeserializeError: Value does not match ``type_``
            KeyringError: The keyring failed for a reason other than a
                missing entry
        """
        return self.resolve_secret(key, type_).value

    def resolve_secret(self, key: str, type_: Any = Any) -> ResolvedValue[Any]:
        """Like :meth:`get_secret`, also reporting which layer answered."""
        return self._resolve(key, type_, self._secrets)

    def set_secret(self, key: str, value: Any) -> None:
        """Store a secret alongside every other secret."""
        values = self.load_secrets()
        values[key] = to_serializable(value)
        self._secrets.save(values)
        # never log the value
        logger.debug(f"Set secret {key!r} in {self._secrets.location}")

    def delete_secret(self, key: str) -> None:
        """Remove one secret; other secrets remain unchanged."""
        values = self.load_secrets()
        values.pop(key, None)
        self._secrets.save(values)
        logger.debug(f"Deleted secret {key!r} from {self._secrets.location}")

    # ================================================================
    # Dispatch
    # ================================================================

    def get(self, key: str, is_secret: bool, type_: Any = Any) -> Any:
        """Get a value from the secret or config layer."""
        if is_secret:
            return self.get_secret(key, type_)
        return self.get_param(key, type_)

    def set(self, key: str, value: Any, is_secret: bool) -> None:
        """Save a value in the secret or config layer."""
        if is_secret:
            self.set_secret(key, value)
        else:
            self.set_param(key, value)

    # ================================================================
    # Internals
    # ================================================================

    def _resolve(
        self, key: str, type_: Any, backend: ValueBackend
    ) -> ResolvedValue[Any]:
        found, env_value = _env_override(key)
        if found:
            logger.debug(f"Key {key!r} from environment")
            return ResolvedValue(
                value=_convert(key, env_value, type_), source=ConfigSource.ENV
            )

        values = backend.load()
        if key not in values:
            raise NotFoundError(key)
        return ResolvedValue(
            value=_convert(key, values[key], type_), source=backend.source
        )

    def __repr__(self) -> str:
        return (
            f"Config(config={self.config_storage.kind}, "
            f"secrets={self.secret_storage.kind}, path={self.path!r})"
        )


# ================================================================
# Global instance
# ================================================================

_config: Config | None = None
_config_lock = threading.Lock()


def get_config() -> Config:
    """Get or create the process-wide configuration.

    Storage is decided once, on first call, from the environment.

    Raises:
        DirectoryError: If the default config directory cannot be created
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                selection = get_storage_selection()
                _config = Config(selection.config, selection.secrets)
                logger.debug(f"Initialized global config: {_config!r}")
    return _config


def reset_config() -> None:
    """Drop the process-wide configuration (tests only)."""
    global _config
    with _config_lock:
        _config = None
