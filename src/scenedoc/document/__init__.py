"""Document module.

Exports the document types, format constants, and the validator gates.
The codecs live in ``scenedoc.document.codec`` and the loaders in
``scenedoc.document.loader``.
"""
from __future__ import annotations

from scenedoc.document.types import (
    EXPORT_SOURCE,
    LIBRARY_EXTENSION,
    LIBRARY_FILE_NAME,
    LIBRARY_MIME_TYPE,
    LIBRARY_TYPE,
    LIBRARY_VERSION,
    SCENE_EXTENSION,
    SCENE_MIME_TYPE,
    SCENE_TYPE,
    SCENE_VERSION,
    LibraryDocument,
    SceneDocument,
)
from scenedoc.document.validator import (
    detect_document_type,
    is_library_document,
    is_scene_document,
)

__all__ = [
    # Documents
    "SceneDocument",
    "LibraryDocument",
    # Constants
    "EXPORT_SOURCE",
    "SCENE_TYPE",
    "SCENE_VERSION",
    "SCENE_MIME_TYPE",
    "SCENE_EXTENSION",
    "LIBRARY_TYPE",
    "LIBRARY_VERSION",
    "LIBRARY_MIME_TYPE",
    "LIBRARY_EXTENSION",
    "LIBRARY_FILE_NAME",
    # Validation
    "is_scene_document",
    "is_library_document",
    "detect_document_type",
]
