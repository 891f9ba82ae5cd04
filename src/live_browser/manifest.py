from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import jsonschema

DEFAULT_MANIFEST = Path("package.json")

MANIFEST_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "directories": {
            "type": "object",
            "properties": {"lib": {"type": "string"}},
        },
    },
}


def load_manifest(path: Union[str, Path] = DEFAULT_MANIFEST) -> Dict[str, Any]:
    manifest_path = Path(path)
    with manifest_path.open("r", encoding="utf-8") as f:
        manifest = json.load(f)
    jsonschema.validate(manifest, MANIFEST_SCHEMA)
    return manifest


def lib_directory(manifest: Dict[str, Any]) -> Optional[str]:
    return manifest.get("directories", {}).get("lib") or None
