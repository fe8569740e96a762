"""User-facing persistence operations.

``PersistenceOrchestrator`` wires the codecs, the permission manager,
and the injected file primitives into four operations:

save_scene      Serialize the scene and write it, reusing the previous
                file handle when permission still holds
load_scene      Open a file and restore the scene from it
save_library    Serialize the library and write it to a new location
import_library  Open a library file and merge its items

Every operation is a coroutine that suspends only inside the
primitives.  The orchestrator keeps no state between calls; the file
handle lives in the caller's app state under ``"fileHandle"`` and a
possibly new handle is returned from ``save_scene``.

Usage
-----
::

    from scenedoc.fs import LocalFileSystem
    from scenedoc.persistence import PersistenceOrchestrator

    fs = LocalFileSystem(Path("drawings"))
    orchestrator = PersistenceOrchestrator(fs.open_file, fs.save_file)
    app_state["fileHandle"] = await orchestrator.save_scene(elements, app_state)
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from scenedoc.config import ExportConfig
from scenedoc.document.codec import LibraryDocumentCodec, SceneDocumentCodec
from scenedoc.document.loader import Library, LoadedScene, load_scene_from_blob
from scenedoc.document.types import (
    JSON_MIME_TYPE,
    LIBRARY_EXTENSION,
    LIBRARY_FILE_NAME,
    LIBRARY_MIME_TYPE,
    SCENE_EXTENSION,
    SCENE_MIME_TYPE,
    Element,
)
from scenedoc.errors import AbortError
from scenedoc.fs.base import (
    Blob,
    FileHandle,
    FileOpenOptions,
    FileSaveOptions,
    OpenFile,
    SaveFile,
)
from scenedoc.permissions.manager import FileHandlePermissionManager

logger = logging.getLogger(__name__)

DEFAULT_SCENE_NAME: str = "Untitled"

SceneLoader = Callable[..., LoadedScene]

SCENE_OPEN_OPTIONS = FileOpenOptions(
    description="Excalidraw files",
    extensions=(".json", SCENE_EXTENSION),
    mime_types=(SCENE_MIME_TYPE, JSON_MIME_TYPE),
)

LIBRARY_OPEN_OPTIONS = FileOpenOptions(
    description="Excalidraw library files",
    extensions=(".json", LIBRARY_EXTENSION),
    mime_types=(LIBRARY_MIME_TYPE, JSON_MIME_TYPE),
)


def scene_file_name(app_state: Mapping[str, Any]) -> str:
    """Return the suggested file name for a scene, ``<name>.excalidraw``.

    Only the last path component of ``app_state["name"]`` is used.  A
    name with nothing usable left falls back to ``DEFAULT_SCENE_NAME``.
    """
    name = str(app_state.get("name") or "").replace("\\", "/").rsplit("/", 1)[-1].strip()
    if name in ("", ".", ".."):
        name = DEFAULT_SCENE_NAME
    return f"{name}{SCENE_EXTENSION}"


class PersistenceOrchestrator:
    """Runs the save and load protocols over injected file primitives.

    Parameters
    ----------
    open_file:
        Coroutine returning the ``Blob`` of a file chosen by the user.
    save_file:
        Coroutine writing a ``Blob`` and returning the handle written
        to.  Receives the previous handle as a reuse hint, or ``None``
        when the user must choose a location.
    config:
        Export settings used to build the default codecs.
    scene_codec, library_codec:
        Override the codecs, e.g. to inject custom sanitizers.
    permission_manager:
        Checks write permission on a reused handle.
    scene_loader:
        Turns an opened ``Blob`` into a ``LoadedScene``.  Called as
        ``scene_loader(blob, local_app_state, codec=scene_codec)``.
    """

    def __init__(
        self,
        open_file: OpenFile,
        save_file: SaveFile,
        config: ExportConfig | None = None,
        scene_codec: SceneDocumentCodec | None = None,
        library_codec: LibraryDocumentCodec | None = None,
        permission_manager: FileHandlePermissionManager | None = None,
        scene_loader: SceneLoader = load_scene_from_blob,
    ) -> None:
        self._open_file = open_file
        self._save_file = save_file
        self._scene_codec = scene_codec if scene_codec is not None else SceneDocumentCodec(config)
        self._library_codec = (
            library_codec if library_codec is not None else LibraryDocumentCodec(config)
        )
        self._permissions = (
            permission_manager
            if permission_manager is not None
            else FileHandlePermissionManager()
        )
        self._scene_loader = scene_loader

    # ------------------------------------------------------------------
    # Scenes
    # ------------------------------------------------------------------

    async def save_scene(
        self, elements: Iterable[Element], app_state: Mapping[str, Any]
    ) -> FileHandle:
        """Serialize and save a scene, returning the handle written to.

        When ``app_state["fileHandle"]`` is set, write permission on it
        is verified first and the handle is passed to ``save_file`` for
        reuse.  Otherwise no permission check happens and ``save_file``
        asks for a destination itself.

        Raises
        ------
        AbortError
            If the previous handle no longer has write permission.  No
            write is attempted in that case.
        """
        serialized = self._scene_codec.serialize(elements, app_state)
        blob = Blob.from_text(serialized, SCENE_MIME_TYPE)

        existing_handle: FileHandle | None = app_state.get("fileHandle")
        if existing_handle is not None:
            if not await self._permissions.verify_permission(existing_handle):
                logger.info("Save aborted: no write permission for %r", existing_handle)
                raise AbortError()

        options = FileSaveOptions(
            file_name=scene_file_name(app_state),
            description="Excalidraw file",
            extensions=(SCENE_EXTENSION,),
        )
        handle = await self._save_file(blob, options, existing_handle)
        logger.debug("Saved scene (%d bytes) to %r", blob.size, handle)
        return handle

    async def load_scene(
        self, local_app_state: Mapping[str, Any] | None = None
    ) -> LoadedScene:
        """Open a scene file and restore it on top of ``local_app_state``.

        Raises
        ------
        InvalidDocumentError
            If the chosen file is not a scene document.
        """
        blob = await self._open_file(SCENE_OPEN_OPTIONS)
        return self._scene_loader(blob, local_app_state, codec=self._scene_codec)

    # ------------------------------------------------------------------
    # Libraries
    # ------------------------------------------------------------------

    async def save_library(self, library: Library) -> FileHandle:
        """Serialize ``library`` and save it to a newly chosen location.

        Library saves never reuse a handle.
        """
        items = await library.load_library()
        serialized = self._library_codec.serialize(items)
        blob = Blob.from_text(serialized, LIBRARY_MIME_TYPE)
        options = FileSaveOptions(
            file_name=LIBRARY_FILE_NAME,
            description="Excalidraw library file",
            extensions=(LIBRARY_EXTENSION,),
        )
        handle = await self._save_file(blob, options, None)
        logger.debug("Saved library with %d item(s) to %r", len(items), handle)
        return handle

    async def import_library(self, library: Library) -> int:
        """Open a library file and merge it into ``library``.

        Returns
        -------
        int
            The number of items added.

        Raises
        ------
        InvalidDocumentError
            If the chosen file is not a version-1 library document.
        """
        blob = await self._open_file(LIBRARY_OPEN_OPTIONS)
        return await library.import_library(blob)
