"""Diagnostics support for Discipline OS.

This file is picked up by Home Assistant automatically when present.
"""

from __future__ import annotations

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .const import DOMAIN
from .dates import is_day_key
from .version import BACKEND_VERSION

REDACTED = "**REDACTED**"


def summarize_state(state: dict[str, Any]) -> dict[str, Any]:
    """Shape summary of a State; notes and (in privacy mode) habit names are hidden."""
    privacy = bool(state.get("privacy_mode"))
    entries = state.get("entries") if isinstance(state.get("entries"), dict) else {}
    day_keys = sorted(k for k in entries if is_day_key(k))
    return {
        "schema_version": state.get("schema_version"),
        "privacy_mode": privacy,
        "scoring": state.get("scoring"),
        "profile": state.get("profile"),
        "habits": [
            {**h, "name": REDACTED} if privacy else dict(h)
            for h in state.get("habits", [])
            if isinstance(h, dict)
        ],
        "entries": {
            "count": len(entries),
            "invalid_keys": len(entries) - len(day_keys),
            "first": day_keys[0] if day_keys else None,
            "last": day_keys[-1] if day_keys else None,
            "submitted": sum(1 for e in entries.values() if isinstance(e, dict) and e.get("submitted") is True),
            "with_note": sum(1 for e in entries.values() if isinstance(e, dict) and e.get("note")),
        },
        "has_undo": isinstance(state.get("undo"), dict),
    }


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant,
    entry: ConfigEntry,
) -> dict[str, Any]:
    """Return diagnostics for a config entry (with personal data redacted)."""
    coordinator = hass.data.get(DOMAIN, {}).get(entry.entry_id)

    payload: dict[str, Any] = {
        "entry": {
            "entry_id": entry.entry_id,
            "title": entry.title,
            "version": entry.version,
            "data": dict(entry.data),
            "options": dict(entry.options),
        },
        "backend_version": BACKEND_VERSION,
    }

    if coordinator is not None:
        payload["coordinator"] = {
            "last_update_success": bool(getattr(coordinator, "last_update_success", False)),
            "last_exception": repr(getattr(coordinator, "last_exception", None)),
            "state": summarize_state(coordinator.state or {}),
        }

    return payload
