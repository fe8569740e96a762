"""Local-filesystem implementation of the file primitives.

``LocalFileSystem`` stands in for a browser-style file picker when
scenedoc runs as a library or from the CLI:

- the "picker" is a ``select_file`` callable choosing a path for
  ``open_file``;
- ``save_file`` writes to the reused handle's path or, for a fresh
  save, to ``directory / options.file_name``;
- ``LocalFileHandle`` tracks a permission state per mode and consults
  a ``prompt`` callable when permission has to be requested.

File I/O goes through ``anyio.Path``, and the blocking ``select_file``
and ``prompt`` callables run in a worker thread, so the primitives never
block the event loop.  ``OSError`` propagates unchanged.
"""
from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path, PurePath

import anyio
import anyio.to_thread

from scenedoc.document.types import (
    JSON_MIME_TYPE,
    LIBRARY_EXTENSION,
    LIBRARY_MIME_TYPE,
    SCENE_EXTENSION,
    SCENE_MIME_TYPE,
)
from scenedoc.fs.base import (
    Blob,
    FileHandle,
    FileOpenOptions,
    FileSaveOptions,
    PermissionMode,
    PermissionState,
)

logger = logging.getLogger(__name__)

PermissionPrompt = Callable[[Path, PermissionMode], bool]
FileSelector = Callable[[FileOpenOptions], Path]

_MIME_BY_EXTENSION: dict[str, str] = {
    SCENE_EXTENSION: SCENE_MIME_TYPE,
    LIBRARY_EXTENSION: LIBRARY_MIME_TYPE,
    ".json": JSON_MIME_TYPE,
}


def guess_mime_type(path: Path) -> str:
    """Return the MIME type for ``path`` based on its extension."""
    return _MIME_BY_EXTENSION.get(path.suffix.lower(), "")


def _bare_file_name(file_name: str) -> str:
    """Return ``file_name`` if it names a file with no directory part."""
    if (
        file_name in ("", ".", "..")
        or "\\" in file_name
        or PurePath(file_name).name != file_name
    ):
        raise ValueError(f"Not a bare file name: {file_name!r}")
    return file_name


def writable_prompt(path: Path, mode: PermissionMode) -> bool:
    """Grant access when the OS would let this process write the file."""
    if mode == PermissionMode.READ:
        return os.access(path, os.R_OK)
    if path.exists():
        return os.access(path, os.W_OK)
    return os.access(path.parent, os.W_OK)


class LocalFileHandle:
    """File handle for a path on the local filesystem.

    Permission is tracked per mode.  A read-write grant also covers
    reads; a read grant says nothing about writes.

    Parameters
    ----------
    path:
        The file this handle refers to.
    permission:
        Initial permission state for ``mode``.  Handles created by a
        save start as ``GRANTED`` for read-write; handles returned by an
        open are granted for reading only.
    prompt:
        Called by ``request_permission`` to decide whether to grant.
    mode:
        The mode ``permission`` applies to.
    """

    def __init__(
        self,
        path: Path,
        permission: PermissionState = PermissionState.PROMPT,
        prompt: PermissionPrompt = writable_prompt,
        mode: PermissionMode = PermissionMode.READWRITE,
    ) -> None:
        self.path = Path(path)
        self._prompt = prompt
        self._states: dict[PermissionMode, PermissionState] = {
            each: PermissionState.PROMPT for each in PermissionMode
        }
        self._record(mode, permission)

    def __repr__(self) -> str:
        state = self._states[PermissionMode.READWRITE]
        return f"LocalFileHandle({str(self.path)!r}, {state.value})"

    @property
    def name(self) -> str:
        return self.path.name

    def _record(self, mode: PermissionMode, state: PermissionState) -> None:
        self._states[mode] = state
        if mode == PermissionMode.READWRITE and state == PermissionState.GRANTED:
            self._states[PermissionMode.READ] = state

    async def query_permission(self, mode: PermissionMode) -> PermissionState:
        return self._states[mode]

    async def request_permission(self, mode: PermissionMode) -> PermissionState:
        granted = await anyio.to_thread.run_sync(self._prompt, self.path, mode)
        self._record(mode, PermissionState.GRANTED if granted else PermissionState.DENIED)
        return self._states[mode]

    def revoke(self) -> None:
        """Drop every granted permission, as after an application restart."""
        for mode in PermissionMode:
            self._states[mode] = PermissionState.PROMPT


def latest_matching_file(directory: Path) -> FileSelector:
    """Return a selector picking the newest file with an accepted extension.

    An empty extension list accepts any file.

    Raises
    ------
    FileNotFoundError
        From the selector, when no file matches.
    """

    def select(options: FileOpenOptions) -> Path:
        candidates = [
            path
            for path in directory.iterdir()
            if path.is_file()
            and (not options.extensions or path.suffix.lower() in options.extensions)
        ]
        if not candidates:
            raise FileNotFoundError(f"No matching file in {directory}")
        return max(candidates, key=lambda path: path.stat().st_mtime)

    return select


class LocalFileSystem:
    """Open and save primitives backed by a local directory.

    Parameters
    ----------
    directory:
        Where fresh saves are written and, by default, where files are
        opened from.
    select_file:
        Chooses the file ``open_file`` reads.  Defaults to the newest
        matching file in ``directory``.
    prompt:
        Permission prompt given to every handle this instance creates.
    """

    def __init__(
        self,
        directory: Path,
        select_file: FileSelector | None = None,
        prompt: PermissionPrompt = writable_prompt,
    ) -> None:
        self.directory = Path(directory)
        self._select_file = (
            select_file if select_file is not None else latest_matching_file(self.directory)
        )
        self._prompt = prompt

    def handle_for(self, path: Path) -> LocalFileHandle:
        """Return an unchecked handle for ``path``."""
        return LocalFileHandle(path, prompt=self._prompt)

    async def open_file(self, options: FileOpenOptions) -> Blob:
        path = await anyio.to_thread.run_sync(self._select_file, options)
        data = await anyio.Path(path).read_bytes()
        logger.debug("Opened %s (%d bytes)", path, len(data))
        return Blob(
            data=data,
            mime_type=guess_mime_type(path),
            name=path.name,
            handle=LocalFileHandle(
                path,
                PermissionState.GRANTED,
                prompt=self._prompt,
                mode=PermissionMode.READ,
            ),
        )

    async def save_file(
        self,
        blob: Blob,
        options: FileSaveOptions,
        existing_handle: FileHandle | None = None,
    ) -> FileHandle:
        """Write ``blob`` and return the handle written to.

        Raises
        ------
        TypeError
            If ``existing_handle`` was not created by a ``LocalFileSystem``.
        ValueError
            If a fresh save's ``file_name`` is not a bare file name, so
            it would land outside ``directory``.
        """
        if existing_handle is not None:
            if not isinstance(existing_handle, LocalFileHandle):
                raise TypeError(
                    f"LocalFileSystem cannot write through {type(existing_handle).__name__}"
                )
            handle = existing_handle
        else:
            handle = LocalFileHandle(
                self.directory / _bare_file_name(options.file_name),
                PermissionState.GRANTED,
                prompt=self._prompt,
            )
        await anyio.Path(handle.path).write_bytes(blob.data)
        logger.debug("Wrote %d bytes to %s", blob.size, handle.path)
        return handle
