"""Tool permission cache for agentcfg."""

from agentcfg.permission.models import (
    ToolPermissionFile,
    ToolPermissionRecord,
    ToolRequest,
    compute_context_hash,
)
from agentcfg.permission.store import ToolPermissionStore

__all__ = [
    "ToolPermissionFile",
    "ToolPermissionRecord",
    "ToolPermissionStore",
    "ToolRequest",
    "compute_context_hash",
]
