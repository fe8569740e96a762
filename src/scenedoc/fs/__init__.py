"""File access module.

Exports the collaborator contracts from ``scenedoc.fs.base`` and the
local-filesystem implementation.
"""
from __future__ import annotations

from scenedoc.fs.base import (
    Blob,
    FileHandle,
    FileOpenOptions,
    FileSaveOptions,
    OpenFile,
    PermissionMode,
    PermissionState,
    SaveFile,
)
from scenedoc.fs.local import LocalFileHandle, LocalFileSystem

__all__ = [
    "Blob",
    "FileHandle",
    "FileOpenOptions",
    "FileSaveOptions",
    "OpenFile",
    "SaveFile",
    "PermissionMode",
    "PermissionState",
    "LocalFileHandle",
    "LocalFileSystem",
]
