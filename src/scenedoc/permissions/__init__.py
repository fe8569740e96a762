"""Permission module.

Exports the ``FileHandlePermissionManager`` and its result types.
"""
from __future__ import annotations

from scenedoc.permissions.manager import (
    FileHandlePermissionManager,
    PermissionOutcome,
    PermissionStatus,
)

__all__ = [
    "FileHandlePermissionManager",
    "PermissionOutcome",
    "PermissionStatus",
]
