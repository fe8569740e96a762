"""Document types and format constants.

A *document* is the portable, versioned snapshot written to disk.  Two
kinds exist and they are told apart only by their ``type``
discriminant:

- ``SceneDocument`` (``"excalidraw"``, version 2): the elements of one
  drawing plus the exportable application settings.
- ``LibraryDocument`` (``"excalidrawlib"``, version 1): a collection of
  reusable shape groups.

Both are plain data.  Elements and library items are opaque mappings;
nothing here looks inside them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Format constants
# ---------------------------------------------------------------------------

EXPORT_SOURCE: str = "https://excalidraw.com"

SCENE_TYPE: str = "excalidraw"
LIBRARY_TYPE: str = "excalidrawlib"

SCENE_VERSION: int = 2
LIBRARY_VERSION: int = 1

SCENE_MIME_TYPE: str = "application/vnd.excalidraw+json"
LIBRARY_MIME_TYPE: str = "application/vnd.excalidrawlib+json"
JSON_MIME_TYPE: str = "application/json"

SCENE_EXTENSION: str = ".excalidraw"
LIBRARY_EXTENSION: str = ".excalidrawlib"

LIBRARY_FILE_NAME: str = f"library{LIBRARY_EXTENSION}"

Element = dict[str, Any]
AppState = dict[str, Any]
LibraryItem = list[Element]


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SceneDocument:
    """A serialized drawing scene.

    Parameters
    ----------
    elements:
        Drawing elements in z-order.  May be empty.
    app_state:
        Exportable application settings.  Stored under ``appState``.
    source:
        Producer identity, advisory only.
    version:
        Format version the document was written with.  Documents read
        from disk keep the version they were written with.
    type:
        Discriminant, always ``SCENE_TYPE``.
    """

    elements: list[Element] = field(default_factory=list)
    app_state: AppState = field(default_factory=dict)
    source: str = EXPORT_SOURCE
    version: int = SCENE_VERSION
    type: str = SCENE_TYPE

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible form with the canonical key order."""
        return {
            "type": self.type,
            "version": self.version,
            "source": self.source,
            "elements": self.elements,
            "appState": self.app_state,
        }


@dataclass(frozen=True)
class LibraryDocument:
    """A serialized collection of reusable library items.

    Each item is itself a list of elements forming one shape group.
    """

    library: list[LibraryItem] = field(default_factory=list)
    source: str = EXPORT_SOURCE
    version: int = LIBRARY_VERSION
    type: str = LIBRARY_TYPE

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible form with the canonical key order."""
        return {
            "type": self.type,
            "version": self.version,
            "source": self.source,
            "library": self.library,
        }
