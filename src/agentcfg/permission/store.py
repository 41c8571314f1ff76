"""Tool permission cache with per-record expiry.

Decisions are keyed by ``tool_name:context_hash`` where the hash covers the
call's arguments, so the same tool with different arguments is asked about
again. Each key holds an append-only history; the most recently appended
record that has not expired is authoritative.

Every mutation rewrites ``tool_permissions.json`` through a ``.tmp`` sibling
and an atomic rename. Other processes writing the same file are not
coordinated against: the last rename wins.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path

from pydantic import ValidationError

from agentcfg.config.defaults import PERMISSIONS_FILENAME
from agentcfg.config.errors import DeserializeError, FileError
from agentcfg.config.storage import (
    ConfigStorage,
    FileStorage,
    MemoryStorage,
    select_storage,
)
from agentcfg.permission.models import (
    ToolPermissionFile,
    ToolPermissionRecord,
    ToolRequest,
)
from agentcfg.utils.atomic import atomic_write_text

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class ToolPermissionStore:
    """Remembers allow/deny decisions for parameterized tool calls."""

    def __init__(
        self,
        storage: ConfigStorage | None = None,
        clock: Clock = time.time,
    ):
        """Create an empty store.

        Use :meth:`load` to start from what is already on disk.

        Args:
            storage: File or memory storage, defaults to memory
            clock: Returns the current epoch time in seconds
        """
        self.storage: ConfigStorage = storage or MemoryStorage()
        self._clock = clock
        self._data = ToolPermissionFile()
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def in_memory(cls, clock: Clock = time.time) -> ToolPermissionStore:
        return cls(MemoryStorage(), clock=clock)

    @classmethod
    def for_directory(
        cls, permissions_dir: Path, clock: Clock = time.time
    ) -> ToolPermissionStore:
        """Store backed by ``<permissions_dir>/tool_permissions.json``."""
        return cls(
            FileStorage(path=Path(permissions_dir) / PERMISSIONS_FILENAME),
            clock=clock,
        )

    @classmethod
    def from_environment(
        cls, config_dir: Path | None = None, clock: Clock = time.time
    ) -> ToolPermissionStore:
        """Memory when AGENTCFG_IN_MEMORY_CONFIG is set, else the config dir."""
        return cls(select_storage(config_dir).permissions, clock=clock)

    @classmethod
    def load(
        cls,
        storage: ConfigStorage | None = None,
        clock: Clock = time.time,
    ) -> ToolPermissionStore:
        """Load a store and prune expired records before returning it.

        Args:
            storage: Defaults to the environment's choice
            clock: Returns the current epoch time in seconds

        Raises:
            DeserializeError: The file is not a valid permission store
            FileError: The file cannot be read or the pruned store written
        """
        if storage is None:
            store = cls.from_environment(clock=clock)
        else:
            store = cls(storage, clock=clock)

        storage = store.storage
        if isinstance(storage, MemoryStorage):
            return store

        store._data = cls._read_file(storage)
        store.cleanup_expired()
        return store

    @staticmethod
    def _read_file(storage: FileStorage) -> ToolPermissionFile:
        path = storage.path
        if not path.exists():
            return ToolPermissionFile()

        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FileError(f"{path}: {exc}") from exc

        try:
            return ToolPermissionFile.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            raise DeserializeError(f"invalid permission store {path}: {exc}") from exc

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def version(self) -> int:
        return self._data.version

    @property
    def permissions(self) -> dict[str, list[ToolPermissionRecord]]:
        """Copy of every record list, keyed by ``tool_name:context_hash``."""
        with self._lock:
            return {key: list(records) for key, records in self._data.permissions.items()}

    def check_permission(self, request: ToolRequest) -> bool | None:
        """Return the latest unexpired decision for this exact call.

        Returns:
            ``True``/``False`` for a remembered decision, ``None`` if there
            is no applicable one
        """
        now = self._now()
        with self._lock:
            records = self._data.permissions.get(request.lookup_key, [])
            for record in reversed(records):
                if record.is_active(now):
                    return record.allowed
        return None

    def record_permission(
        self,
        request: ToolRequest,
        allowed: bool,
        expiry_duration: timedelta | None = None,
    ) -> ToolPermissionRecord:
        """Append a decision and persist the whole store.

        Args:
            request: The tool call being decided
            allowed: The decision
            expiry_duration: How long the decision stays valid; forever if None

        Raises:
            FileError: Persisting failed; the record is not kept
        """
        now = self._now()
        record = ToolPermissionRecord(
            tool_name=request.name,
            allowed=allowed,
            context_hash=request.context_hash,
            readable_context=request.to_readable_string(),
            timestamp=now,
            expiry=(
                now + int(expiry_duration.total_seconds())
                if expiry_duration is not None
                else None
            ),
        )

        key = request.lookup_key
        with self._lock:
            records = self._data.permissions.setdefault(key, [])
            records.append(record)
            try:
                self._save()
            except Exception:
                records.pop()
                if not records:
                    del self._data.permissions[key]
                raise

        logger.debug(
            f"Recorded {'allow' if allowed else 'deny'} for {request.name} "
            f"(expiry={record.expiry})"
        )
        return record

    def get_history(self, request: ToolRequest) -> list[ToolPermissionRecord]:
        """Every record for this exact call, oldest first, expired included."""
        with self._lock:
            return list(self._data.permissions.get(request.lookup_key, []))

    def cleanup_expired(self) -> bool:
        """Drop expired records and empty keys, persisting if anything changed.

        Returns:
            True if anything was removed
        """
        now = self._now()
        with self._lock:
            pruned: dict[str, list[ToolPermissionRecord]] = {}
            changed = False
            for key, records in self._data.permissions.items():
                active = [r for r in records if r.is_active(now)]
                if len(active) != len(records):
                    changed = True
                if active:
                    pruned[key] = active

            if not changed:
                return False

            previous = self._data
            self._data = ToolPermissionFile(permissions=pruned, version=previous.version)
            try:
                self._save()
            except Exception:
                self._data = previous
                raise

        logger.info("Removed expired tool permissions")
        return True

    # ------------------------------------------------------------------
    # Persistence (private)
    # ------------------------------------------------------------------

    def _now(self) -> int:
        return int(self._clock())

    def _save(self) -> None:
        """Write the whole store atomically. Caller holds the lock."""
        storage = self.storage
        if isinstance(storage, MemoryStorage):
            return

        content = json.dumps(self._data.to_json_dict(), indent=2)
        atomic_write_text(storage.path, content)

    def __repr__(self) -> str:
        where = (
            "<in-memory>"
            if isinstance(self.storage, MemoryStorage)
            else str(self.storage.path)
        )
        return f"ToolPermissionStore({where}, keys={len(self._data.permissions)})"
