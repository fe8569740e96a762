#!/usr/bin/env python3
"""Example: Scene and Library Documents

Demonstrates serializing a scene and a library, and gating decoded
JSON with the validators before trusting it.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install scenedoc
"""
from __future__ import annotations

import json

import scenedoc

ELEMENTS = [
    {"id": "box", "type": "rectangle", "x": 10, "y": 10, "width": 120, "height": 60},
    {"id": "label", "type": "text", "x": 20, "y": 30, "text": "Hello"},
    {"id": "old", "type": "ellipse", "isDeleted": True},
]

APP_STATE = {
    "name": "greeting",
    "viewBackgroundColor": "#fafafa",
    "selectedElementIds": {"box": True},
}


def main() -> None:
    print(f"scenedoc version: {scenedoc.__version__}")

    # Step 1: Serialize a scene; deleted elements and selection are dropped
    text = scenedoc.serialize_scene(ELEMENTS, APP_STATE)
    print(text)

    # Step 2: Validate what comes back in
    candidate = json.loads(text)
    print(f"Valid scene: {scenedoc.is_scene_document(candidate)}")
    print(f"Malformed scene: {scenedoc.is_scene_document({'type': 'excalidraw', 'elements': 'x'})}")

    # Step 3: Libraries are a separate document kind with a strict version
    library_text = scenedoc.serialize_library([ELEMENTS[:2]])
    print(f"Valid library: {scenedoc.is_library_document(json.loads(library_text))}")
    print(
        "Library v2 accepted: "
        f"{scenedoc.is_library_document({'type': 'excalidrawlib', 'version': 2})}"
    )


if __name__ == "__main__":
    main()
