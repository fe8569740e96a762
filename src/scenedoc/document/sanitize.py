"""Default export cleanup for elements and application state.

The codecs take these as plain callables so an application can plug in
its own rules.  The defaults drop what never belongs in a file:

- deleted elements, which stay in memory only for undo;
- the in-progress point of linear elements;
- every app-state key not listed in ``EXPORTABLE_APP_STATE_KEYS``,
  which covers selection, viewport position, and the file handle.

Inputs are never mutated.
"""
from __future__ import annotations

import copy
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from scenedoc.document.types import AppState, Element

ElementsSanitizer = Callable[[Iterable[Element]], list[Element]]
AppStateSanitizer = Callable[[Mapping[str, Any]], AppState]

LINEAR_ELEMENT_TYPES: frozenset[str] = frozenset({"arrow", "line", "draw"})

EXPORTABLE_APP_STATE_KEYS: tuple[str, ...] = ("gridSize", "viewBackgroundColor")


def clear_elements_for_export(elements: Iterable[Element]) -> list[Element]:
    """Return export-safe copies of the non-deleted elements, in order."""
    cleared: list[Element] = []
    for element in elements:
        if element.get("isDeleted"):
            continue
        element_copy = copy.deepcopy(dict(element))
        if element_copy.get("type") in LINEAR_ELEMENT_TYPES:
            element_copy["lastCommittedPoint"] = None
        cleared.append(element_copy)
    return cleared


def clean_app_state_for_export(app_state: Mapping[str, Any]) -> AppState:
    """Return only the exportable keys of ``app_state``.

    Keys missing from ``app_state`` are omitted rather than filled in.
    """
    return {
        key: copy.deepcopy(app_state[key])
        for key in EXPORTABLE_APP_STATE_KEYS
        if key in app_state
    }
