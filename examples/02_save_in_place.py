#!/usr/bin/env python3
"""Example: Save As, then Save in Place

Demonstrates the file-handle lifecycle: the first save picks a
location, later saves reuse the returned handle after re-checking write
permission, and a refused permission aborts before anything is written.

Usage:
    python examples/02_save_in_place.py

Requirements:
    pip install scenedoc
"""
from __future__ import annotations

import tempfile
from pathlib import Path

import anyio

from scenedoc.errors import AbortError
from scenedoc.fs import LocalFileSystem
from scenedoc.fs.base import PermissionMode
from scenedoc.persistence import PersistenceOrchestrator


def deny(path: Path, mode: PermissionMode) -> bool:
    print(f"  prompt: user refused access to {path.name}")
    return False


async def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        directory = Path(tmp)
        fs = LocalFileSystem(directory, prompt=deny)
        orchestrator = PersistenceOrchestrator(fs.open_file, fs.save_file)

        app_state = {"name": "notes", "viewBackgroundColor": "#ffffff", "fileHandle": None}
        elements = [{"id": "a", "type": "rectangle"}]

        # Step 1: "Save as" prompts for a location and returns a handle
        app_state["fileHandle"] = await orchestrator.save_scene(elements, app_state)
        print(f"Saved to {app_state['fileHandle'].path.name}")

        # Step 2: "Save" reuses the handle without prompting
        elements.append({"id": "b", "type": "ellipse"})
        await orchestrator.save_scene(elements, app_state)
        print("Saved in place")

        # Step 3: After a restart the permission is gone and must be re-requested
        app_state["fileHandle"].revoke()
        try:
            await orchestrator.save_scene(elements, app_state)
        except AbortError:
            print("Save aborted, file left untouched")

        # Step 4: Load it back
        loaded = await orchestrator.load_scene({})
        print(f"Loaded {len(loaded.elements)} element(s)")


if __name__ == "__main__":
    anyio.run(main)
