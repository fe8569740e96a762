"""Shape and version gate for incoming documents.

Both checks are deliberately shallow: they look at the discriminant,
the version where relevant, and whether the top-level containers have
the right kind.  Nothing recurses into elements or app-state values;
that is left to whoever restores the scene.

Both functions are total.  Any input, including ``None`` or a bare
number, yields a boolean.

Usage
-----
::

    import json
    from scenedoc.document.validator import is_scene_document

    candidate = json.loads(text)
    if not is_scene_document(candidate):
        raise InvalidDocumentError("invalid file")
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from scenedoc.document.types import LIBRARY_TYPE, LIBRARY_VERSION, SCENE_TYPE


def _is_sequence(value: Any) -> bool:
    # JSON arrays decode to lists; tuples are accepted for in-process callers.
    return isinstance(value, (list, tuple))


def is_scene_document(candidate: Any) -> bool:
    """Return ``True`` if ``candidate`` has the shape of a scene document.

    Parameters
    ----------
    candidate:
        Any decoded value, usually the result of ``json.loads``.

    Returns
    -------
    bool
        ``True`` iff ``candidate`` is a mapping whose ``type`` is the
        scene discriminant, whose ``elements`` is absent or a sequence,
        and whose ``appState`` is absent or a mapping.  The version is
        not checked here; older versions are migrated by the loader.
    """
    if not isinstance(candidate, Mapping):
        return False
    if candidate.get("type") != SCENE_TYPE:
        return False
    elements = candidate.get("elements")
    if elements is not None and not _is_sequence(elements):
        return False
    app_state = candidate.get("appState")
    if app_state is not None and not isinstance(app_state, Mapping):
        return False
    return True


def is_library_document(candidate: Any) -> bool:
    """Return ``True`` if ``candidate`` is a version-1 library document.

    The version comparison is strict.  ``2`` is rejected, and so are
    ``1.0`` and ``True``, which only compare equal to ``1``.
    """
    if not isinstance(candidate, Mapping):
        return False
    if candidate.get("type") != LIBRARY_TYPE:
        return False
    version = candidate.get("version")
    return type(version) is int and version == LIBRARY_VERSION


def detect_document_type(candidate: Any) -> str | None:
    """Return the discriminant of a valid document, or ``None``.

    Used by tooling that accepts either kind of file and has to decide
    which codec to hand it to.
    """
    if is_scene_document(candidate):
        return SCENE_TYPE
    if is_library_document(candidate):
        return LIBRARY_TYPE
    return None
