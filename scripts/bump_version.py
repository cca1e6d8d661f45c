#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import re
from pathlib import Path

MANIFEST = Path("custom_components/discipline_os/manifest.json")
PYPROJECT = Path("pyproject.toml")
_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Set the Discipline OS release version.")
    p.add_argument("--version", required=True, help="New version, e.g. 0.1.1")
    return p.parse_args()


def _bump_pyproject(version: str) -> None:
    text = PYPROJECT.read_text(encoding="utf-8")
    text = re.sub(r'(?m)^version = ".*"$', f'version = "{version}"', text, count=1)
    PYPROJECT.write_text(text, encoding="utf-8")


def main() -> int:
    args = parse_args()
    version = str(args.version).strip()
    if not _VERSION_RE.match(version):
        raise SystemExit("Invalid --version (expected MAJOR.MINOR.PATCH)")

    manifest = json.loads(MANIFEST.read_text(encoding="utf-8"))
    manifest["version"] = version
    MANIFEST.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    if PYPROJECT.exists():
        _bump_pyproject(version)
    print("Updated manifest and pyproject version to", version)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
