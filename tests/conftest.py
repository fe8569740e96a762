"""Shared test fixtures for scenedoc.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "scenedoc"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def anyio_backend() -> str:
    """Run ``pytest.mark.anyio`` tests on asyncio only."""
    return "asyncio"


@pytest.fixture()
def elements() -> list[dict[str, Any]]:
    """A small scene: two live shapes, one arrow, one deleted shape."""
    return [
        {"id": "rect-1", "type": "rectangle", "x": 0, "y": 0, "versionNonce": 11},
        {"id": "ellipse-1", "type": "ellipse", "x": 40, "y": 10, "versionNonce": 12},
        {
            "id": "arrow-1",
            "type": "arrow",
            "points": [[0, 0], [30, 30]],
            "lastCommittedPoint": [30, 30],
            "versionNonce": 13,
        },
        {"id": "gone-1", "type": "text", "text": "x", "isDeleted": True, "versionNonce": 14},
    ]


@pytest.fixture()
def app_state() -> dict[str, Any]:
    """Application state mixing exportable and transient keys."""
    return {
        "name": "diagram",
        "viewBackgroundColor": "#ffffff",
        "gridSize": None,
        "selectedElementIds": {"rect-1": True},
        "scrollX": 120,
        "fileHandle": None,
    }
