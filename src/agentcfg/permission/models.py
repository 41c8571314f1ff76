"""Pydantic models for the tool permission cache."""

from __future__ import annotations

import hashlib
from typing import Any

from pydantic import BaseModel, Field

from agentcfg.config.defaults import PERMISSION_STORE_VERSION
from agentcfg.utils.serialization import canonical_json


def compute_context_hash(arguments: Any) -> str:
    """Hex SHA-256 of the canonical JSON form of a tool's arguments.

    Equal argument payloads hash equally in any process, regardless of
    key order.
    """
    return hashlib.sha256(canonical_json(arguments).encode("utf-8")).hexdigest()


class ToolRequest(BaseModel):
    """A tool call awaiting a permission decision."""

    id: str = ""
    name: str
    arguments: Any = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def context_hash(self) -> str:
        return compute_context_hash(self.arguments)

    @property
    def lookup_key(self) -> str:
        """``tool_name:context_hash``."""
        return f"{self.name}:{self.context_hash}"

    def to_readable_string(self) -> str:
        """Human-readable echo of the call, stored with each decision."""
        return f"{self.name}({canonical_json(self.arguments)})"


class ToolPermissionRecord(BaseModel):
    """One authorization decision.

    ``expiry`` is valid while ``now < expiry``.
    """

    tool_name: str
    allowed: bool
    context_hash: str
    readable_context: str | None = None
    timestamp: int
    expiry: int | None = None

    model_config = {"frozen": True}

    def is_active(self, now: int) -> bool:
        return self.expiry is None or now < self.expiry

    def to_json_dict(self) -> dict[str, Any]:
        """Serialized form; ``readable_context`` is omitted when absent."""
        data = self.model_dump(mode="json")
        if data["readable_context"] is None:
            del data["readable_context"]
        return data


class ToolPermissionFile(BaseModel):
    """On-disk representation of the permission cache."""

    permissions: dict[str, list[ToolPermissionRecord]] = Field(default_factory=dict)
    version: int = PERMISSION_STORE_VERSION

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "permissions": {
                key: [record.to_json_dict() for record in records]
                for key, records in self.permissions.items()
            },
            "version": self.version,
        }
