"""Persistence module.

Exports the ``PersistenceOrchestrator`` and the file-name helper.
"""
from __future__ import annotations

from scenedoc.persistence.orchestrator import (
    DEFAULT_SCENE_NAME,
    PersistenceOrchestrator,
    scene_file_name,
)

__all__ = ["PersistenceOrchestrator", "DEFAULT_SCENE_NAME", "scene_file_name"]
