"""Day entries, habits and the mutators that change them.

All functions take the live State explicitly and change it in place. Every
mutator returns a MutationResult instead of raising: a submitted day answers
LOCKED, an unknown target INVALID, and a change that would do nothing NOOP.
An APPLIED mutator has already stored the undo snapshot; persisting is left
to the caller.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from typing import Any

from .const import (
    DEFAULT_HABIT_NAME,
    GOAL_CHOICES,
    HABIT_TEMPLATES,
    MONTH_OFFSET_LIMIT,
    THEME_CHOICES,
    THRESHOLD_MAX,
    THRESHOLD_MIN,
    WEIGHT_MAX,
    WEIGHT_MIN,
    WORKOUT_HABIT_NAME,
)
from .dates import shift_day
from .migration import new_id
from .type_defs import DayEntry, Habit, MutationResult, Plan, State, WorkoutItem
from .undo import take_snapshot

_LOGGER = logging.getLogger(__name__)

__all__ = ["MutationResult"]


def _blank_entry(state: State) -> DayEntry:
    return {
        "submitted": False,
        "note": "",
        "habits": {h["id"]: False for h in state["habits"]},
        "workouts": [],
    }


def _repair_workout_item(raw: Any) -> WorkoutItem | None:
    if not isinstance(raw, dict):
        return None
    item_id = raw.get("id")
    name = raw.get("name")
    prescription = raw.get("prescription")
    raw["id"] = str(item_id) if item_id else new_id("w")
    raw["name"] = name if isinstance(name, str) else ""
    raw["prescription"] = prescription if isinstance(prescription, str) else ""
    raw["done"] = raw.get("done") is True
    return raw  # type: ignore[return-value]


def _repair_entry(state: State, entry: Any) -> DayEntry:
    if not isinstance(entry, dict):
        return _blank_entry(state)
    if not isinstance(entry.get("habits"), dict):
        entry["habits"] = {}
    flags = entry["habits"]
    for habit in state["habits"]:
        if not isinstance(flags.get(habit["id"]), bool):
            flags[habit["id"]] = False
    if not isinstance(entry.get("submitted"), bool):
        entry["submitted"] = False
    if not isinstance(entry.get("note"), str):
        entry["note"] = ""
    workouts = entry.get("workouts")
    if not isinstance(workouts, list):
        workouts = []
    entry["workouts"] = [w for w in (_repair_workout_item(x) for x in workouts) if w is not None]
    for key in ("workout_title", "workout_meta"):
        if key in entry and not isinstance(entry[key], str):
            entry[key] = ""
    return entry  # type: ignore[return-value]


def ensure_entry(state: State, day: str) -> DayEntry:
    """Return the entry for day, creating and repairing it in place."""
    entries = state["entries"]
    entry = _repair_entry(state, entries.get(day))
    entries[day] = entry
    return entry


def read_entry(state: State, day: str) -> DayEntry:
    """Like ensure_entry, but a missing day is not added to entries."""
    entries = state["entries"]
    if day not in entries:
        return _blank_entry(state)
    return ensure_entry(state, day)


def active_habits(state: State) -> list[Habit]:
    return [h for h in state["habits"] if h["enabled"]]


def find_habit(state: State, habit_id: str) -> Habit | None:
    return next((h for h in state["habits"] if h["id"] == habit_id), None)


def find_workout_habit(state: State) -> Habit | None:
    # Matched by name, so a renamed or duplicated "Workout" habit changes which
    # flag is driven. First match wins; enabled or not.
    return next((h for h in state["habits"] if h["name"].strip().lower() == WORKOUT_HABIT_NAME), None)


def _editable_entry(state: State, day: str) -> DayEntry | None:
    entry = ensure_entry(state, day)
    if entry["submitted"]:
        _LOGGER.debug("Rejected change on locked day %s", day)
        return None
    return entry


def apply_auto_workout_habit(state: State, day: str) -> None:
    """Mirror "all workout items done" onto the workout habit for the day."""
    if not state["profile"]["auto_workout_habit"]:
        return
    habit = find_workout_habit(state)
    if habit is None:
        return
    entry = ensure_entry(state, day)
    if not entry["workouts"]:
        return
    entry["habits"][habit["id"]] = all(w["done"] for w in entry["workouts"])


# Day mutators


def toggle_habit(state: State, day: str, habit_id: str) -> MutationResult:
    if find_habit(state, habit_id) is None:
        return MutationResult.INVALID
    entry = _editable_entry(state, day)
    if entry is None:
        return MutationResult.LOCKED
    take_snapshot(state)
    entry["habits"][habit_id] = not entry["habits"].get(habit_id, False)
    return MutationResult.APPLIED


def set_note(state: State, day: str, text: str) -> MutationResult:
    entry = _editable_entry(state, day)
    if entry is None:
        return MutationResult.LOCKED
    take_snapshot(state)
    entry["note"] = str(text or "")
    return MutationResult.APPLIED


def submit_day(state: State, day: str) -> MutationResult:
    entry = ensure_entry(state, day)
    if entry["submitted"]:
        return MutationResult.NOOP
    take_snapshot(state)
    entry["submitted"] = True
    return MutationResult.APPLIED


def unlock_day(state: State, day: str) -> MutationResult:
    entry = ensure_entry(state, day)
    if not entry["submitted"]:
        return MutationResult.NOOP
    take_snapshot(state)
    entry["submitted"] = False
    return MutationResult.APPLIED


def reset_day(state: State, day: str) -> MutationResult:
    """Clear habits, note and workouts for day."""
    entry = _editable_entry(state, day)
    if entry is None:
        return MutationResult.LOCKED
    take_snapshot(state)
    for key in entry["habits"]:
        entry["habits"][key] = False
    entry["note"] = ""
    entry["workouts"] = []
    entry["workout_title"] = ""
    entry["workout_meta"] = ""
    return MutationResult.APPLIED


def copy_previous_day(state: State, day: str) -> MutationResult:
    """Overwrite the day's habit flags with the previous day's."""
    entry = _editable_entry(state, day)
    if entry is None:
        return MutationResult.LOCKED
    previous = read_entry(state, shift_day(day, -1))
    take_snapshot(state)
    for key in entry["habits"]:
        entry["habits"][key] = previous["habits"].get(key) is True
    return MutationResult.APPLIED


def add_workout_item(state: State, day: str, name: str, prescription: str = "") -> MutationResult:
    name = str(name or "").strip()
    if not name:
        return MutationResult.INVALID
    entry = _editable_entry(state, day)
    if entry is None:
        return MutationResult.LOCKED
    take_snapshot(state)
    entry["workouts"].append(
        {"id": new_id("w"), "name": name, "prescription": str(prescription or ""), "done": False}
    )
    apply_auto_workout_habit(state, day)
    return MutationResult.APPLIED


def _find_workout_item(entry: DayEntry, item_id: str) -> WorkoutItem | None:
    return next((w for w in entry["workouts"] if w["id"] == item_id), None)


def toggle_workout_item(state: State, day: str, item_id: str) -> MutationResult:
    entry = _editable_entry(state, day)
    if entry is None:
        return MutationResult.LOCKED
    item = _find_workout_item(entry, item_id)
    if item is None:
        return MutationResult.INVALID
    take_snapshot(state)
    item["done"] = not item["done"]
    apply_auto_workout_habit(state, day)
    return MutationResult.APPLIED


def delete_workout_item(state: State, day: str, item_id: str) -> MutationResult:
    entry = _editable_entry(state, day)
    if entry is None:
        return MutationResult.LOCKED
    if _find_workout_item(entry, item_id) is None:
        return MutationResult.INVALID
    take_snapshot(state)
    entry["workouts"] = [w for w in entry["workouts"] if w["id"] != item_id]
    apply_auto_workout_habit(state, day)
    return MutationResult.APPLIED


def clear_workouts(state: State, day: str) -> MutationResult:
    entry = _editable_entry(state, day)
    if entry is None:
        return MutationResult.LOCKED
    take_snapshot(state)
    entry["workouts"] = []
    entry["workout_title"] = ""
    entry["workout_meta"] = ""
    apply_auto_workout_habit(state, day)
    return MutationResult.APPLIED


def apply_plan(state: State, day: str, plan: Plan) -> MutationResult:
    """Replace the day's workout list and title/meta with a generated plan."""
    entry = _editable_entry(state, day)
    if entry is None:
        return MutationResult.LOCKED
    take_snapshot(state)
    entry["workouts"] = [
        {"id": new_id("w"), "name": it["name"], "prescription": it["prescription"], "done": False}
        for it in plan["items"]
    ]
    entry["workout_title"] = plan["title"]
    entry["workout_meta"] = plan["meta"]
    apply_auto_workout_habit(state, day)
    return MutationResult.APPLIED


# Habit list mutators


def add_habit(state: State, name: str) -> MutationResult:
    name = str(name or "").strip()
    if not name:
        return MutationResult.INVALID
    take_snapshot(state)
    state["habits"].append({"id": new_id("h"), "name": name, "enabled": True})
    return MutationResult.APPLIED


def rename_habit(state: State, habit_id: str, name: str) -> MutationResult:
    habit = find_habit(state, habit_id)
    if habit is None:
        return MutationResult.INVALID
    take_snapshot(state)
    habit["name"] = str(name or "").strip() or DEFAULT_HABIT_NAME
    return MutationResult.APPLIED


def set_habit_enabled(state: State, habit_id: str, enabled: bool) -> MutationResult:
    habit = find_habit(state, habit_id)
    if habit is None:
        return MutationResult.INVALID
    if habit["enabled"] is bool(enabled):
        return MutationResult.NOOP
    take_snapshot(state)
    habit["enabled"] = bool(enabled)
    return MutationResult.APPLIED


def move_habit(state: State, habit_id: str, step: int) -> MutationResult:
    """Swap a habit with its neighbour (step -1 = up, +1 = down)."""
    if step not in (-1, 1):
        return MutationResult.INVALID
    habits = state["habits"]
    idx = next((i for i, h in enumerate(habits) if h["id"] == habit_id), None)
    if idx is None:
        return MutationResult.INVALID
    other = idx + step
    if other < 0 or other >= len(habits):
        return MutationResult.NOOP
    take_snapshot(state)
    habits[idx], habits[other] = habits[other], habits[idx]
    return MutationResult.APPLIED


def delete_habit(state: State, habit_id: str) -> MutationResult:
    """Drop the habit from the list; flags already stored on entries stay."""
    if find_habit(state, habit_id) is None:
        return MutationResult.INVALID
    take_snapshot(state)
    state["habits"] = [h for h in state["habits"] if h["id"] != habit_id]
    return MutationResult.APPLIED


def apply_template(
    state: State,
    name: str | None = None,
    *,
    choice: Callable[[Sequence[Any]], Any] = random.choice,
) -> MutationResult:
    """Replace the habit list and threshold with a preset (random when name is None)."""
    if name is None:
        template = choice(HABIT_TEMPLATES)
    else:
        template = next((t for t in HABIT_TEMPLATES if t["name"].lower() == str(name).strip().lower()), None)
        if template is None:
            return MutationResult.INVALID
    take_snapshot(state)
    state["scoring"]["threshold"] = int(template["threshold"])
    state["habits"] = [{"id": new_id("h"), "name": n, "enabled": True} for n in template["habits"]]
    _LOGGER.debug("Applied habit template %s", template["name"])
    return MutationResult.APPLIED


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def update_profile(
    state: State,
    *,
    goal: str | None = None,
    current_weight: float | None = None,
    goal_weight: float | None = None,
    duration_minutes: int | None = None,
    auto_workout_habit: bool | None = None,
) -> MutationResult:
    if goal is not None and goal not in GOAL_CHOICES:
        return MutationResult.INVALID
    if duration_minutes is not None and int(duration_minutes) <= 0:
        return MutationResult.INVALID
    take_snapshot(state)
    profile = state["profile"]
    if goal is not None:
        profile["goal"] = goal
    if current_weight is not None:
        profile["current_weight"] = _clamp(float(current_weight), WEIGHT_MIN, WEIGHT_MAX)
    if goal_weight is not None:
        profile["goal_weight"] = _clamp(float(goal_weight), WEIGHT_MIN, WEIGHT_MAX)
    if duration_minutes is not None:
        profile["duration_minutes"] = int(duration_minutes)
    if auto_workout_habit is not None:
        profile["auto_workout_habit"] = bool(auto_workout_habit)
    return MutationResult.APPLIED


def parse_status_labels(raw: str) -> dict[str, str] | None:
    """Parse "good | mid | bad"; None unless three non-blank parts are given."""
    parts = [p.strip() for p in str(raw or "").split("|") if p.strip()]
    if len(parts) < 3:
        return None
    return {"good": parts[0], "mid": parts[1], "bad": parts[2]}


def update_settings(state: State, *, threshold: int | None = None, labels: str | None = None) -> MutationResult:
    """Set threshold and/or labels; NOOP when neither would change."""
    new_threshold = state["scoring"]["threshold"]
    if threshold is not None:
        new_threshold = int(_clamp(int(threshold), THRESHOLD_MIN, THRESHOLD_MAX))
    new_labels = dict(state["status_labels"])
    if labels is not None:
        new_labels = parse_status_labels(labels) or new_labels
    if new_threshold == state["scoring"]["threshold"] and new_labels == state["status_labels"]:
        return MutationResult.NOOP
    take_snapshot(state)
    state["scoring"]["threshold"] = new_threshold
    state["status_labels"] = new_labels  # type: ignore[typeddict-item]
    return MutationResult.APPLIED


# Display preferences; these never touch the undo snapshot.


def set_theme(state: State, theme: str) -> MutationResult:
    if theme not in THEME_CHOICES:
        return MutationResult.INVALID
    if state["theme"] == theme:
        return MutationResult.NOOP
    state["theme"] = theme
    return MutationResult.APPLIED


def toggle_privacy(state: State) -> MutationResult:
    state["privacy_mode"] = not state["privacy_mode"]
    return MutationResult.APPLIED


def shift_month(state: State, step: int) -> MutationResult:
    current = int(state["month_offset"])
    offset = int(_clamp(current + int(step), -MONTH_OFFSET_LIMIT, MONTH_OFFSET_LIMIT))
    if offset == current:
        return MutationResult.NOOP
    state["month_offset"] = offset
    return MutationResult.APPLIED
