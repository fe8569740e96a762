"""scenedoc: versioned scene and library documents for drawing editors.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import json
    import scenedoc

    elements = [{"id": "a1", "type": "rectangle", "x": 10, "y": 20}]
    app_state = {"name": "diagram", "viewBackgroundColor": "#ffffff"}

    # Serialize a scene to a portable document
    text = scenedoc.serialize_scene(elements, app_state)

    # Gate untrusted input before using it
    assert scenedoc.is_scene_document(json.loads(text))

    # Library documents are a separate kind
    lib_text = scenedoc.serialize_library([elements])
    assert scenedoc.is_library_document(json.loads(lib_text))

    scenedoc.__version__
    '0.1.0'
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from scenedoc.config import ExportConfig


def serialize_scene(
    elements: Iterable[dict[str, Any]],
    app_state: Mapping[str, Any],
    config: "ExportConfig | None" = None,
) -> str:
    """Serialize a scene to deterministic scene-document JSON.

    Parameters
    ----------
    elements:
        Drawing elements in z-order.
    app_state:
        Application state; only exportable keys are kept.
    config:
        Export settings.  Defaults to ``ExportConfig()``.

    Returns
    -------
    str
        Indented JSON text.
    """
    from scenedoc.document.codec import SceneDocumentCodec

    return SceneDocumentCodec(config).serialize(elements, app_state)


def serialize_library(
    library_items: Iterable[list[dict[str, Any]]],
    config: "ExportConfig | None" = None,
) -> str:
    """Serialize library items to deterministic library-document JSON."""
    from scenedoc.document.codec import LibraryDocumentCodec

    return LibraryDocumentCodec(config).serialize(library_items)


def is_scene_document(candidate: Any) -> bool:
    """Return ``True`` if ``candidate`` has the shape of a scene document."""
    from scenedoc.document.validator import is_scene_document as _is_scene

    return _is_scene(candidate)


def is_library_document(candidate: Any) -> bool:
    """Return ``True`` if ``candidate`` is a version-1 library document."""
    from scenedoc.document.validator import is_library_document as _is_library

    return _is_library(candidate)


__all__ = [
    "__version__",
    "serialize_scene",
    "serialize_library",
    "is_scene_document",
    "is_library_document",
]
