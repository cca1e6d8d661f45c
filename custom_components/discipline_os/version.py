from __future__ import annotations

import json
from pathlib import Path

from .const import SCHEMA_VERSION

MANIFEST_PATH = Path(__file__).with_name("manifest.json")


def read_manifest_version(path: Path = MANIFEST_PATH) -> str:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return "0.0.0"
    v = str(data.get("version") or "").strip() if isinstance(data, dict) else ""
    return v or "0.0.0"


BACKEND_VERSION = read_manifest_version()
# Shown in the device registry, e.g. "0.1.0 (schema 8)".
SW_VERSION = f"{BACKEND_VERSION} (schema {SCHEMA_VERSION})"
