"""Scene and library document codecs.

Serialization is deterministic: the envelope keys are emitted in a
fixed order, mappings nested inside the payload are written with sorted
keys, the JSON is indented, and non-ASCII text is kept as-is.
Calling ``serialize`` twice with equal input yields identical strings.

Parsing always goes through the matching validator gate, so a value
returned by ``parse`` is a typed document and never the raw decoded
candidate.

Usage
-----
::

    from scenedoc.document.codec import SceneDocumentCodec

    codec = SceneDocumentCodec()
    text = codec.serialize(elements, app_state)
    document = codec.parse(text)
    assert document.version == 2
"""
from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any

import yaml

from scenedoc.config import ExportConfig
from scenedoc.document.sanitize import (
    AppStateSanitizer,
    ElementsSanitizer,
    clean_app_state_for_export,
    clear_elements_for_export,
)
from scenedoc.document.types import (
    LIBRARY_TYPE,
    LIBRARY_VERSION,
    SCENE_TYPE,
    SCENE_VERSION,
    Element,
    LibraryDocument,
    LibraryItem,
    SceneDocument,
)
from scenedoc.document.validator import is_library_document, is_scene_document
from scenedoc.errors import InvalidDocumentError

logger = logging.getLogger(__name__)


def _canonical(value: Any) -> Any:
    """Return ``value`` with every nested mapping rebuilt in sorted key order."""
    if isinstance(value, Mapping):
        return {
            key: _canonical(item)
            for key, item in sorted(value.items(), key=lambda pair: str(pair[0]))
        }
    if isinstance(value, (list, tuple)):
        return [_canonical(item) for item in value]
    return value


def _decode(text: str | bytes, expected_type: str) -> Any:
    try:
        return json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidDocumentError(
            f"Cannot decode {expected_type!r} document: {exc}",
            expected_type=expected_type,
        ) from exc


class _DocumentCodec:
    """Shared encoding helpers for both document kinds."""

    def __init__(self, config: ExportConfig | None = None) -> None:
        self._config = config if config is not None else ExportConfig()

    @property
    def config(self) -> ExportConfig:
        """The export configuration this codec writes with."""
        return self._config

    def _dumps(self, data: dict[str, Any]) -> str:
        # Envelope order comes from to_dict; only the payloads are canonicalized.
        payload = {key: _canonical(value) for key, value in data.items()}
        return json.dumps(payload, indent=self._config.indent, ensure_ascii=False)

    @staticmethod
    def to_yaml(document: SceneDocument | LibraryDocument) -> str:
        """Render a document as YAML for human inspection.

        YAML output is a viewing aid only; documents are always stored
        as JSON.
        """
        return yaml.safe_dump(
            document.to_dict(),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )


# ---------------------------------------------------------------------------
# Scene documents
# ---------------------------------------------------------------------------


class SceneDocumentCodec(_DocumentCodec):
    """Converts between in-memory scenes and scene documents.

    Parameters
    ----------
    config:
        Export settings; the ``source`` is written into every document.
    sanitize_elements:
        Callable stripping non-portable data from elements.
    sanitize_app_state:
        Callable selecting the exportable app-state keys.
    """

    def __init__(
        self,
        config: ExportConfig | None = None,
        sanitize_elements: ElementsSanitizer = clear_elements_for_export,
        sanitize_app_state: AppStateSanitizer = clean_app_state_for_export,
    ) -> None:
        super().__init__(config)
        self._sanitize_elements = sanitize_elements
        self._sanitize_app_state = sanitize_app_state

    def build(
        self, elements: Iterable[Element], app_state: Mapping[str, Any]
    ) -> SceneDocument:
        """Sanitize the scene and wrap it in a current-version document."""
        return SceneDocument(
            elements=list(self._sanitize_elements(elements)),
            app_state=dict(self._sanitize_app_state(app_state)),
            source=self._config.source,
            version=SCENE_VERSION,
        )

    def serialize(
        self, elements: Iterable[Element], app_state: Mapping[str, Any]
    ) -> str:
        """Serialize a scene to deterministic, indented JSON text."""
        return self._dumps(self.build(elements, app_state).to_dict())

    def from_dict(self, data: Any) -> SceneDocument:
        """Build a ``SceneDocument`` from a decoded candidate.

        Raises
        ------
        InvalidDocumentError
            If ``data`` does not pass ``is_scene_document``.
        """
        if not is_scene_document(data):
            raise InvalidDocumentError("invalid file", expected_type=SCENE_TYPE)
        version = data.get("version", SCENE_VERSION)
        if isinstance(version, int) and version > SCENE_VERSION:
            logger.warning(
                "Scene document version %d is newer than supported version %d",
                version,
                SCENE_VERSION,
            )
        source = data.get("source")
        return SceneDocument(
            elements=list(data.get("elements") or []),
            app_state=dict(data.get("appState") or {}),
            source=source if isinstance(source, str) else "",
            version=version,
        )

    def parse(self, text: str | bytes) -> SceneDocument:
        """Decode JSON text and gate it as a scene document."""
        return self.from_dict(_decode(text, SCENE_TYPE))


# ---------------------------------------------------------------------------
# Library documents
# ---------------------------------------------------------------------------


class LibraryDocumentCodec(_DocumentCodec):
    """Converts between library item collections and library documents.

    Library items are assumed to be export-safe already, so there is no
    sanitization step.
    """

    def build(self, library_items: Iterable[LibraryItem]) -> LibraryDocument:
        """Wrap ``library_items`` in a version-1 library document."""
        return LibraryDocument(
            library=list(library_items),
            source=self._config.source,
            version=LIBRARY_VERSION,
        )

    def serialize(self, library_items: Iterable[LibraryItem]) -> str:
        """Serialize library items to deterministic, indented JSON text."""
        return self._dumps(self.build(library_items).to_dict())

    def from_dict(self, data: Any) -> LibraryDocument:
        """Build a ``LibraryDocument`` from a decoded candidate.

        Raises
        ------
        InvalidDocumentError
            If ``data`` does not pass ``is_library_document`` or its
            ``library`` field is present but not a sequence.
        """
        if not is_library_document(data):
            raise InvalidDocumentError("invalid library", expected_type=LIBRARY_TYPE)
        items = data.get("library")
        if items is None:
            items = []
        if not isinstance(items, (list, tuple)):
            raise InvalidDocumentError(
                "invalid library: 'library' must be a sequence",
                expected_type=LIBRARY_TYPE,
            )
        source = data.get("source")
        return LibraryDocument(
            library=list(items),
            source=source if isinstance(source, str) else "",
            version=data["version"],
        )

    def parse(self, text: str | bytes) -> LibraryDocument:
        """Decode JSON text and gate it as a library document."""
        return self.from_dict(_decode(text, LIBRARY_TYPE))
