"""Collaborator contracts for file access.

scenedoc never talks to a file picker or the disk directly.  The
persistence layer is handed four primitives and only sees the types
defined here:

- ``open_file(options) -> Blob``
- ``save_file(blob, options, existing_handle) -> FileHandle``
- ``FileHandle.query_permission(mode) -> PermissionState``
- ``FileHandle.request_permission(mode) -> PermissionState``

All primitives are coroutines.  ``scenedoc.fs.local`` provides a
local-filesystem implementation; applications embedding scenedoc can
supply their own.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable


class PermissionState(Enum):
    """Current permission of a file handle for a given access mode.

    ``PROMPT`` means nothing has been decided yet; asking for
    permission may show a prompt.
    """

    PROMPT = "prompt"
    GRANTED = "granted"
    DENIED = "denied"


class PermissionMode(Enum):
    """Access mode a permission applies to."""

    READ = "read"
    READWRITE = "readwrite"


@runtime_checkable
class FileHandle(Protocol):
    """Opaque, revocable reference to a previously chosen file.

    The handle is owned by the application and outlives a single save;
    scenedoc only borrows it for one verify-then-save call.
    """

    @property
    def name(self) -> str:
        """Display name of the file."""

    async def query_permission(self, mode: PermissionMode) -> PermissionState:
        """Return the current permission without prompting."""

    async def request_permission(self, mode: PermissionMode) -> PermissionState:
        """Ask for permission, possibly prompting the user."""


@dataclass(frozen=True)
class Blob:
    """Raw file content with its MIME type.

    Parameters
    ----------
    data:
        The file bytes.
    mime_type:
        MIME type of ``data``; empty when unknown.
    name:
        File name the blob was read from, if any.
    handle:
        Handle of the file the blob was read from, if the opening
        primitive provides one.
    """

    data: bytes
    mime_type: str = ""
    name: str | None = None
    handle: FileHandle | None = field(default=None, compare=False)

    @classmethod
    def from_text(cls, text: str, mime_type: str) -> "Blob":
        """Build a blob from text encoded as UTF-8."""
        return cls(data=text.encode("utf-8"), mime_type=mime_type)

    def text(self) -> str:
        """Return the content decoded as UTF-8."""
        return self.data.decode("utf-8")

    @property
    def size(self) -> int:
        """Size of the content in bytes."""
        return len(self.data)


@dataclass(frozen=True)
class FileOpenOptions:
    """Options passed to the open-file primitive.

    An empty ``extensions`` tuple means any file may be picked.
    """

    description: str = ""
    extensions: tuple[str, ...] = ()
    mime_types: tuple[str, ...] = ()


@dataclass(frozen=True)
class FileSaveOptions:
    """Options passed to the save-file primitive."""

    file_name: str
    description: str = ""
    extensions: tuple[str, ...] = ()


class OpenFile(Protocol):
    """Signature of the open-file primitive."""

    async def __call__(self, options: FileOpenOptions) -> Blob: ...


class SaveFile(Protocol):
    """Signature of the save-file primitive."""

    async def __call__(
        self,
        blob: Blob,
        options: FileSaveOptions,
        existing_handle: FileHandle | None = None,
    ) -> FileHandle: ...
