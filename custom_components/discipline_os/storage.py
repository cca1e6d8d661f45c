"""Storage for Discipline OS (.storage).

One snapshot per config entry, in the current schema (see migration.py):
- schema_version, theme, privacy_mode, month_offset
- status_labels, scoring, profile
- habits: ordered habit list
- entries: mapping day key -> day entry
- undo: previous snapshot for single-level undo

Whatever is on disk goes through migrate() on load, so older or hand-edited
files always come back as a valid State.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from homeassistant.core import HomeAssistant
from homeassistant.helpers.storage import Store

from .const import DOMAIN, EXPORT_FILENAME, STORAGE_VERSION
from .migration import default_state, migrate
from .type_defs import State

_LOGGER = logging.getLogger(__name__)


class BackupError(ValueError):
    """Raised when a backup file cannot be read as a snapshot."""


def dump_backup(state: State) -> str:
    """Serialize the full State the way exports are written."""
    return json.dumps(state, indent=2, ensure_ascii=False)


def load_backup(text: str) -> State:
    """Parse an exported snapshot and migrate it; raise BackupError on bad input."""
    try:
        raw = json.loads(text)
    except (TypeError, ValueError) as err:
        raise BackupError(f"Backup is not valid JSON: {err}") from err
    if not isinstance(raw, dict):
        raise BackupError("Backup must be a JSON object")
    return migrate(raw)


def _write_text(path: Path, text: str) -> None:
    path.write_text(text + "\n", encoding="utf-8")


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


class DisciplineStore:
    """Per-config-entry storage wrapper."""

    def __init__(self, hass: HomeAssistant, entry_id: str) -> None:
        self._hass = hass
        self._store: Store[dict[str, Any]] = Store(hass, STORAGE_VERSION, f"{DOMAIN}_{entry_id}")
        # True until something has been read from or written to disk.
        self.is_new = True

    async def async_load(self) -> State:
        try:
            loaded = await self._store.async_load()
        except Exception:  # noqa: BLE001
            _LOGGER.warning("Stored data for %s is unreadable; starting from defaults", self._store.key)
            self.is_new = False
            return default_state()
        if loaded is None:
            return default_state()
        self.is_new = False
        return migrate(loaded)

    async def async_save(self, state: State) -> None:
        await self._store.async_save(dict(state))
        self.is_new = False

    async def async_remove(self) -> None:
        await self._store.async_remove()

    def export_path(self) -> Path:
        return Path(self._hass.config.path(EXPORT_FILENAME))

    async def async_export(self, state: State, path: Path | None = None) -> Path:
        target = path or self.export_path()
        await self._hass.async_add_executor_job(_write_text, target, dump_backup(state))
        _LOGGER.debug("Exported snapshot to %s", target)
        return target

    async def async_import(self, path: Path) -> State:
        """Read and migrate a backup file. Raises BackupError; nothing is saved here."""
        try:
            text = await self._hass.async_add_executor_job(_read_text, path)
        except OSError as err:
            raise BackupError(f"Cannot read {path}: {err}") from err
        return load_backup(text)
