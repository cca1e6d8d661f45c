"""Schema migration for Discipline OS snapshots.

Any JSON-shaped value migrates to a valid current-schema State:
- start from defaults
- overlay top-level scalars when their type is right
- merge status_labels / scoring / profile key by key (unknown keys dropped)
- normalize habits (or fall back to the default list)
- keep entries as-is when they are a mapping; they are repaired lazily by
  model.ensure_entry / model.read_entry
- force schema_version to SCHEMA_VERSION

Older snapshots come in two layouts, told apart by the top-level tag only:
"schema_version" (current layout) or "version" (browser-era v7 layout with
camelCase keys). The legacy layout is renamed into the current one and then
runs through the same per-field migrators.
"""

from __future__ import annotations

import copy
import math
from typing import Any
from uuid import uuid4

from .const import (
    DEFAULT_CURRENT_WEIGHT,
    DEFAULT_DURATION_MINUTES,
    DEFAULT_GOAL,
    DEFAULT_GOAL_WEIGHT,
    DEFAULT_HABIT_NAME,
    DEFAULT_HABITS,
    DEFAULT_STATUS_LABELS,
    DEFAULT_THEME,
    DEFAULT_THRESHOLD,
    MONTH_OFFSET_LIMIT,
    SCHEMA_VERSION,
    THEME_CHOICES,
    THRESHOLD_MAX,
    THRESHOLD_MIN,
)
from .type_defs import Habit, Profile, ScoringConfig, State, StatusLabels

_LEGACY_TOP_LEVEL_KEYS = {
    "theme": "theme",
    "privacyMode": "privacy_mode",
    "monthOffset": "month_offset",
    "statusLabels": "status_labels",
    "scoring": "scoring",
    "profile": "profile",
    "habits": "habits",
    "entries": "entries",
    "undo": "undo",
}
_LEGACY_PROFILE_KEYS = {
    "goal": "goal",
    "currentWeight": "current_weight",
    "goalWeight": "goal_weight",
    "duration": "duration_minutes",
    "autoWorkoutHabit": "auto_workout_habit",
}
_LEGACY_ENTRY_KEYS = {
    "workoutTitle": "workout_title",
    "workoutMeta": "workout_meta",
}


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:10]}"


def default_state() -> State:
    return {
        "schema_version": SCHEMA_VERSION,
        "theme": DEFAULT_THEME,
        "privacy_mode": False,
        "month_offset": 0,
        "status_labels": dict(DEFAULT_STATUS_LABELS),
        "scoring": {"threshold": DEFAULT_THRESHOLD},
        "profile": {
            "goal": DEFAULT_GOAL,
            "current_weight": DEFAULT_CURRENT_WEIGHT,
            "goal_weight": DEFAULT_GOAL_WEIGHT,
            "duration_minutes": DEFAULT_DURATION_MINUTES,
            "auto_workout_habit": True,
        },
        "habits": copy.deepcopy(DEFAULT_HABITS),
        "entries": {},
        "undo": None,
    }


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # Rejects inf, nan and ints too large for a float.
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _migrate_theme(value: Any) -> str:
    return value if value in THEME_CHOICES else DEFAULT_THEME


def _migrate_month_offset(value: Any) -> int:
    if not _is_number(value):
        return 0
    return int(_clamp(int(value), -MONTH_OFFSET_LIMIT, MONTH_OFFSET_LIMIT))


def _migrate_status_labels(value: Any) -> StatusLabels:
    labels: StatusLabels = dict(DEFAULT_STATUS_LABELS)  # type: ignore[assignment]
    if not isinstance(value, dict):
        return labels
    for key in ("good", "mid", "bad"):
        v = value.get(key)
        if isinstance(v, str):
            labels[key] = v  # type: ignore[literal-required]
    return labels


def _migrate_scoring(value: Any) -> ScoringConfig:
    threshold = DEFAULT_THRESHOLD
    if isinstance(value, dict) and _is_number(value.get("threshold")):
        threshold = int(_clamp(int(value["threshold"]), THRESHOLD_MIN, THRESHOLD_MAX))
    return {"threshold": threshold}


def _migrate_profile(value: Any) -> Profile:
    profile = default_state()["profile"]
    if not isinstance(value, dict):
        return profile
    goal = value.get("goal")
    if isinstance(goal, str) and goal.strip():
        profile["goal"] = goal.strip()
    for key in ("current_weight", "goal_weight"):
        if _is_number(value.get(key)):
            profile[key] = value[key]  # type: ignore[literal-required]
    duration = value.get("duration_minutes")
    if _is_number(duration) and duration > 0:
        profile["duration_minutes"] = int(duration)
    if isinstance(value.get("auto_workout_habit"), bool):
        profile["auto_workout_habit"] = value["auto_workout_habit"]
    return profile


def _migrate_habits(value: Any) -> list[Habit]:
    if not isinstance(value, list) or not value:
        return copy.deepcopy(DEFAULT_HABITS)  # type: ignore[return-value]
    habits: list[Habit] = []
    seen: set[str] = set()
    for raw in value:
        if not isinstance(raw, dict):
            continue
        habit_id = str(raw.get("id") or "")
        if not habit_id or habit_id in seen:
            habit_id = new_id("h")
        seen.add(habit_id)
        name = raw.get("name")
        enabled = raw.get("enabled")
        habits.append(
            {
                "id": habit_id,
                "name": (name.strip() if isinstance(name, str) else "") or DEFAULT_HABIT_NAME,
                "enabled": enabled if isinstance(enabled, bool) else True,
            }
        )
    if not habits:
        return copy.deepcopy(DEFAULT_HABITS)  # type: ignore[return-value]
    return habits


def _migrate_entries(value: Any) -> dict[str, Any]:
    return copy.deepcopy(value) if isinstance(value, dict) else {}


def _migrate_undo(value: Any) -> dict[str, Any] | None:
    return copy.deepcopy(value) if isinstance(value, dict) else None


def _from_legacy_layout(raw: dict[str, Any]) -> dict[str, Any]:
    """Rename a v7 browser snapshot into the current key layout."""
    out: dict[str, Any] = {}
    for old, new in _LEGACY_TOP_LEVEL_KEYS.items():
        if old in raw:
            out[new] = raw[old]

    profile = raw.get("profile")
    if isinstance(profile, dict):
        out["profile"] = {new: profile[old] for old, new in _LEGACY_PROFILE_KEYS.items() if old in profile}

    entries = raw.get("entries")
    if isinstance(entries, dict):
        renamed: dict[str, Any] = {}
        for key, entry in entries.items():
            if isinstance(entry, dict):
                entry = {_LEGACY_ENTRY_KEYS.get(k, k): v for k, v in entry.items()}
            renamed[key] = entry
        out["entries"] = renamed

    undo = raw.get("undo")
    if isinstance(undo, dict):
        out["undo"] = _from_legacy_layout(undo) if "schema_version" not in undo else undo
    return out


def is_legacy_layout(raw: dict[str, Any]) -> bool:
    return "schema_version" not in raw and "version" in raw


def migrate(raw: Any) -> State:
    """Return a valid current-schema State for any input. Never raises."""
    if not isinstance(raw, dict):
        return default_state()
    if is_legacy_layout(raw):
        raw = _from_legacy_layout(raw)

    state = default_state()
    state["theme"] = _migrate_theme(raw.get("theme"))
    privacy = raw.get("privacy_mode")
    state["privacy_mode"] = privacy if isinstance(privacy, bool) else False
    state["month_offset"] = _migrate_month_offset(raw.get("month_offset"))
    state["status_labels"] = _migrate_status_labels(raw.get("status_labels"))
    state["scoring"] = _migrate_scoring(raw.get("scoring"))
    state["profile"] = _migrate_profile(raw.get("profile"))
    state["habits"] = _migrate_habits(raw.get("habits"))
    state["entries"] = _migrate_entries(raw.get("entries"))
    state["undo"] = _migrate_undo(raw.get("undo"))  # type: ignore[typeddict-item]
    state["schema_version"] = SCHEMA_VERSION
    return state
