"""Loaders turning opened files into trusted in-memory data.

``load_scene_from_blob`` and ``Library.import_library`` are the two
places where bytes from an untrusted file enter the application.  Both
decode the JSON and pass it through the matching validator gate before
anything else touches it.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from scenedoc.document.codec import LibraryDocumentCodec, SceneDocumentCodec
from scenedoc.document.sanitize import clean_app_state_for_export
from scenedoc.document.types import AppState, Element, LibraryItem
from scenedoc.errors import InvalidDocumentError
from scenedoc.fs.base import Blob

logger = logging.getLogger(__name__)


@dataclass
class LoadedScene:
    """Scene data restored from a file.

    ``app_state`` is the caller's local state with the exportable
    settings from the file laid over it.  Its ``fileHandle`` entry is
    the handle of the opened file, or ``None`` if the open primitive
    did not provide one.
    """

    elements: list[Element] = field(default_factory=list)
    app_state: AppState = field(default_factory=dict)


def load_scene_from_blob(
    blob: Blob,
    local_app_state: Mapping[str, Any] | None = None,
    codec: SceneDocumentCodec | None = None,
) -> LoadedScene:
    """Decode ``blob`` as a scene document and restore it.

    Parameters
    ----------
    blob:
        The opened file.
    local_app_state:
        The application's current state, used as the base for the
        restored state.
    codec:
        Codec used to parse the document.  Defaults to a plain
        ``SceneDocumentCodec``.

    Raises
    ------
    InvalidDocumentError
        If the content is not JSON or not a scene document.
    """
    scene_codec = codec if codec is not None else SceneDocumentCodec()
    try:
        document = scene_codec.parse(blob.data)
    except InvalidDocumentError as exc:
        logger.debug("Rejected %s: %s", blob.name or "<blob>", exc)
        raise InvalidDocumentError("invalid file", expected_type=exc.expected_type) from exc

    app_state: AppState = dict(local_app_state or {})
    app_state.update(clean_app_state_for_export(document.app_state))
    app_state["fileHandle"] = blob.handle
    return LoadedScene(elements=list(document.elements), app_state=app_state)


# ---------------------------------------------------------------------------
# Library
# ---------------------------------------------------------------------------


def _same_element(left: Any, right: Any) -> bool:
    if isinstance(left, Mapping) and isinstance(right, Mapping) and left.get("id") is not None:
        return (
            left.get("id") == right.get("id")
            and left.get("versionNonce") == right.get("versionNonce")
        )
    return left == right


def _same_item(left: Any, right: Any) -> bool:
    if not isinstance(left, (list, tuple)) or not isinstance(right, (list, tuple)):
        return left == right
    return len(left) == len(right) and all(
        _same_element(a, b) for a, b in zip(left, right)
    )


class Library:
    """In-memory collection of reusable library items.

    Items are kept in insertion order.  An item counts as already
    present when it has the same number of elements as an existing one
    and each element matches on ``id`` and ``versionNonce``.

    Parameters
    ----------
    items:
        Initial library content.
    codec:
        Codec used to parse imported library files.
    """

    def __init__(
        self,
        items: Iterable[LibraryItem] | None = None,
        codec: LibraryDocumentCodec | None = None,
    ) -> None:
        self._items: list[LibraryItem] = list(items) if items is not None else []
        self._codec = codec if codec is not None else LibraryDocumentCodec()

    def __len__(self) -> int:
        return len(self._items)

    async def load_library(self) -> list[LibraryItem]:
        """Return a copy of the current library items."""
        return list(self._items)

    async def save_library(self, items: Iterable[LibraryItem]) -> None:
        """Replace the library content with ``items``."""
        self._items = list(items)

    async def reset(self) -> None:
        """Remove every item."""
        self._items = []

    async def import_library(self, blob: Blob) -> int:
        """Merge the items of a library file into this library.

        Items already present in this library are skipped.  Repeats
        within ``blob`` itself are not compared with each other.

        Returns
        -------
        int
            The number of items added.

        Raises
        ------
        InvalidDocumentError
            If ``blob`` is not a version-1 library document.
        """
        document = self._codec.parse(blob.data)
        existing = await self.load_library()
        added = [
            item
            for item in document.library
            if not any(_same_item(current, item) for current in existing)
        ]
        await self.save_library([*existing, *added])
        logger.debug(
            "Imported %d of %d library item(s) from %s",
            len(added),
            len(document.library),
            blob.name or "<blob>",
        )
        return len(added)
