"""Websocket state helpers."""

from __future__ import annotations

from typing import Any

from .undo import can_undo


def public_state(state: dict[str, Any], *, runtime: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return a stable public payload for the UI (undo reduced to a flag)."""
    if not isinstance(state, dict):
        return {}
    runtime = runtime or {}
    return {
        "schema_version": int(state.get("schema_version") or 0),
        "theme": state.get("theme", "dark"),
        "privacy_mode": bool(state.get("privacy_mode")),
        "month_offset": int(state.get("month_offset") or 0),
        "status_labels": state.get("status_labels", {}),
        "scoring": state.get("scoring", {}),
        "profile": state.get("profile", {}),
        "habits": state.get("habits", []),
        "entries": state.get("entries", {}),
        "can_undo": can_undo(state),  # type: ignore[arg-type]
        "runtime": runtime,
    }
