"""Unit tests for scenedoc.persistence.orchestrator: the save/load
protocols over mocked file primitives.
"""
from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from scenedoc.config import ExportConfig
from scenedoc.document.codec import LibraryDocumentCodec, SceneDocumentCodec
from scenedoc.document.loader import Library, LoadedScene
from scenedoc.document.types import LIBRARY_MIME_TYPE, SCENE_MIME_TYPE
from scenedoc.document.validator import is_library_document, is_scene_document
from scenedoc.errors import AbortError, InvalidDocumentError
from scenedoc.fs.base import Blob, FileSaveOptions
from scenedoc.permissions.manager import FileHandlePermissionManager
from scenedoc.persistence.orchestrator import (
    LIBRARY_OPEN_OPTIONS,
    SCENE_OPEN_OPTIONS,
    PersistenceOrchestrator,
    scene_file_name,
)

pytestmark = pytest.mark.anyio


def _permissions(granted: bool) -> MagicMock:
    manager = MagicMock(spec=FileHandlePermissionManager)
    manager.verify_permission = AsyncMock(return_value=granted)
    return manager


def _orchestrator(
    open_result: Blob | None = None,
    permissions: MagicMock | None = None,
    **kwargs: Any,
) -> tuple[PersistenceOrchestrator, AsyncMock, AsyncMock]:
    open_file = AsyncMock(return_value=open_result)
    save_file = AsyncMock(return_value=MagicMock(name="new-handle"))
    orchestrator = PersistenceOrchestrator(
        open_file,
        save_file,
        permission_manager=permissions if permissions is not None else _permissions(True),
        **kwargs,
    )
    return orchestrator, open_file, save_file


# ===========================================================================
# save_scene
# ===========================================================================


class TestSaveScene:
    async def test_first_save_prompts_without_permission_check(
        self, elements: list[dict[str, Any]], app_state: dict[str, Any]
    ) -> None:
        permissions = _permissions(True)
        orchestrator, _, save_file = _orchestrator(permissions=permissions)

        handle = await orchestrator.save_scene(elements, app_state)

        permissions.verify_permission.assert_not_awaited()
        save_file.assert_awaited_once()
        blob, options, existing = save_file.await_args.args
        assert existing is None
        assert handle is save_file.return_value
        assert blob.mime_type == SCENE_MIME_TYPE
        assert options == FileSaveOptions(
            file_name="diagram.excalidraw",
            description="Excalidraw file",
            extensions=(".excalidraw",),
        )

    async def test_written_blob_is_valid_scene(
        self, elements: list[dict[str, Any]], app_state: dict[str, Any]
    ) -> None:
        orchestrator, _, save_file = _orchestrator()
        await orchestrator.save_scene(elements, app_state)
        blob = save_file.await_args.args[0]
        assert is_scene_document(json.loads(blob.text())) is True

    async def test_save_in_place_with_permission(
        self, elements: list[dict[str, Any]], app_state: dict[str, Any]
    ) -> None:
        previous = MagicMock(name="previous-handle")
        permissions = _permissions(True)
        orchestrator, _, save_file = _orchestrator(permissions=permissions)

        await orchestrator.save_scene(elements, {**app_state, "fileHandle": previous})

        permissions.verify_permission.assert_awaited_once_with(previous)
        assert save_file.await_args.args[2] is previous

    async def test_denied_permission_aborts_before_write(
        self, elements: list[dict[str, Any]], app_state: dict[str, Any]
    ) -> None:
        orchestrator, _, save_file = _orchestrator(permissions=_permissions(False))

        with pytest.raises(AbortError):
            await orchestrator.save_scene(elements, {**app_state, "fileHandle": MagicMock()})

        save_file.assert_not_awaited()

    async def test_io_failure_propagates_unwrapped(
        self, elements: list[dict[str, Any]], app_state: dict[str, Any]
    ) -> None:
        orchestrator, _, save_file = _orchestrator()
        save_file.side_effect = OSError("disk full")

        with pytest.raises(OSError, match="disk full") as exc_info:
            await orchestrator.save_scene(elements, app_state)
        assert not isinstance(exc_info.value, AbortError)

    async def test_file_handle_not_serialized(
        self, elements: list[dict[str, Any]], app_state: dict[str, Any]
    ) -> None:
        orchestrator, _, save_file = _orchestrator()
        await orchestrator.save_scene(elements, {**app_state, "fileHandle": MagicMock()})
        assert "fileHandle" not in save_file.await_args.args[0].text()

    async def test_config_source_written(self) -> None:
        orchestrator, _, save_file = _orchestrator(config=ExportConfig(source="tests"))
        await orchestrator.save_scene([], {"name": "x"})
        assert json.loads(save_file.await_args.args[0].text())["source"] == "tests"

    async def test_custom_codec_used(self) -> None:
        codec = MagicMock(spec=SceneDocumentCodec)
        codec.serialize.return_value = "{}"
        orchestrator, _, save_file = _orchestrator(scene_codec=codec)
        await orchestrator.save_scene([], {})
        codec.serialize.assert_called_once_with([], {})
        assert save_file.await_args.args[0].data == b"{}"


class TestSceneFileName:
    def test_uses_scene_name(self) -> None:
        assert scene_file_name({"name": "plan"}) == "plan.excalidraw"

    def test_falls_back_when_unnamed(self) -> None:
        assert scene_file_name({}) == "Untitled.excalidraw"
        assert scene_file_name({"name": ""}) == "Untitled.excalidraw"

    def test_directory_parts_dropped(self) -> None:
        assert scene_file_name({"name": "../escaped"}) == "escaped.excalidraw"
        assert scene_file_name({"name": "/tmp/abs"}) == "abs.excalidraw"
        assert scene_file_name({"name": "a\\b"}) == "b.excalidraw"

    def test_dot_names_fall_back(self) -> None:
        assert scene_file_name({"name": ".."}) == "Untitled.excalidraw"
        assert scene_file_name({"name": "drawings/"}) == "Untitled.excalidraw"


# ===========================================================================
# load_scene
# ===========================================================================


class TestLoadScene:
    async def test_opens_and_restores(
        self, elements: list[dict[str, Any]], app_state: dict[str, Any]
    ) -> None:
        text = SceneDocumentCodec().serialize(elements, app_state)
        orchestrator, open_file, _ = _orchestrator(Blob.from_text(text, SCENE_MIME_TYPE))

        loaded = await orchestrator.load_scene({"zoom": 1})

        open_file.assert_awaited_once_with(SCENE_OPEN_OPTIONS)
        assert isinstance(loaded, LoadedScene)
        assert len(loaded.elements) == 3
        assert loaded.app_state["zoom"] == 1

    async def test_invalid_file_rejected(self) -> None:
        orchestrator, _, _ = _orchestrator(Blob.from_text('{"type": "other"}', ""))
        with pytest.raises(InvalidDocumentError):
            await orchestrator.load_scene()

    async def test_custom_loader_receives_blob(self) -> None:
        blob = Blob.from_text("{}", "")
        loader = MagicMock(return_value=LoadedScene())
        orchestrator, _, _ = _orchestrator(blob, scene_loader=loader)

        await orchestrator.load_scene({"a": 1})

        args, kwargs = loader.call_args
        assert args == (blob, {"a": 1})
        assert isinstance(kwargs["codec"], SceneDocumentCodec)

    async def test_cancelled_picker_propagates(self) -> None:
        orchestrator, open_file, _ = _orchestrator()
        open_file.side_effect = FileNotFoundError("cancelled")
        with pytest.raises(FileNotFoundError):
            await orchestrator.load_scene()


# ===========================================================================
# Libraries
# ===========================================================================


class TestLibraries:
    async def test_save_library_always_prompts(self) -> None:
        permissions = _permissions(True)
        orchestrator, _, save_file = _orchestrator(permissions=permissions)
        library = Library([[{"id": "a"}]])

        await orchestrator.save_library(library)

        blob, options, existing = save_file.await_args.args
        assert existing is None
        assert options.file_name == "library.excalidrawlib"
        assert options.extensions == (".excalidrawlib",)
        assert blob.mime_type == LIBRARY_MIME_TYPE
        permissions.verify_permission.assert_not_awaited()

    async def test_saved_library_is_valid(self) -> None:
        orchestrator, _, save_file = _orchestrator()
        await orchestrator.save_library(Library([[{"id": "a"}], [{"id": "b"}]]))
        data = json.loads(save_file.await_args.args[0].text())
        assert is_library_document(data) is True
        assert data["library"] == [[{"id": "a"}], [{"id": "b"}]]

    async def test_import_library(self) -> None:
        text = LibraryDocumentCodec().serialize([[{"id": "a", "versionNonce": 1}]])
        orchestrator, open_file, _ = _orchestrator(Blob.from_text(text, LIBRARY_MIME_TYPE))
        library = Library()

        added = await orchestrator.import_library(library)

        open_file.assert_awaited_once_with(LIBRARY_OPEN_OPTIONS)
        assert added == 1
        assert len(library) == 1

    async def test_import_invalid_library(self) -> None:
        text = '{"type": "excalidrawlib", "version": 2, "library": []}'
        orchestrator, _, _ = _orchestrator(Blob.from_text(text, ""))
        with pytest.raises(InvalidDocumentError):
            await orchestrator.import_library(Library())
