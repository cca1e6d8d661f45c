"""Scores, status buckets, streaks and week/month aggregates.

Read-side only: nothing here adds entries to the State. Existing entries may
be repaired in place through model.read_entry.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .dates import is_day_key, iter_days, shift_day
from .model import active_habits, read_entry
from .type_defs import State, Status


def score(state: State, day: str) -> int:
    """Number of active habits flagged done for day."""
    entry = read_entry(state, day)
    flags = entry["habits"]
    return sum(1 for h in active_habits(state) if flags.get(h["id"]) is True)


def _threshold(state: State) -> int:
    return int(state["scoring"]["threshold"])


def status_for(value: int, state: State) -> Status:
    threshold = _threshold(state)
    labels = state["status_labels"]
    if value >= threshold:
        return {"class": "good", "label": labels["good"]}
    if value >= max(1, threshold - 2):
        return {"class": "mid", "label": labels["mid"]}
    return {"class": "bad", "label": labels["bad"]}


def habit_streak(state: State, habit_id: str, from_day: str) -> int:
    """Consecutive days back from from_day whose stored flag is exactly True.

    Uses raw history; the habit does not need to be enabled, or even exist.
    Entries are read without going through read_entry: a missing day ends the
    streak, and repairing would add flags for the current habit list.
    """
    entries = state["entries"]
    streak = 0
    cursor = from_day
    while is_day_key(cursor):
        entry = entries.get(cursor)
        if not isinstance(entry, dict):
            break
        flags = entry.get("habits")
        if not isinstance(flags, dict) or flags.get(habit_id) is not True:
            break
        streak += 1
        cursor = shift_day(cursor, -1)
    return streak


def _entry_span(state: State) -> tuple[str, str] | None:
    keys = sorted(k for k in state["entries"] if is_day_key(k))
    if not keys:
        return None
    return keys[0], keys[-1]


def overall_streaks(state: State, selected_day: str) -> dict[str, int]:
    """Current run ending at selected_day and best run over the whole history."""
    span = _entry_span(state)
    if span is None:
        return {"current": 0, "best": 0}
    threshold = _threshold(state)
    entries = state["entries"]

    def qualifies(day: str) -> bool:
        # Only stored days count; score() still goes through read_entry.
        return day in entries and score(state, day) >= threshold

    current = 0
    cursor = selected_day
    while is_day_key(cursor) and qualifies(cursor):
        current += 1
        cursor = shift_day(cursor, -1)

    best = 0
    run = 0
    for day in iter_days(*span):
        if qualifies(day):
            run += 1
            best = max(best, run)
        else:
            run = 0
    return {"current": current, "best": best}


def week_recap(state: State, week_day_keys: Sequence[str]) -> dict[str, Any]:
    """Aggregate a week (normally the seven keys from dates.week_days)."""
    active = active_habits(state)
    threshold = _threshold(state)
    per_habit = {h["id"]: 0 for h in active}

    total = 0
    submitted = 0
    locked_in = 0
    best: dict[str, Any] = {"day": None, "score": -1}
    worst: dict[str, Any] = {"day": None, "score": 999}

    for day in week_day_keys:
        entry = read_entry(state, day)
        s = score(state, day)
        total += s
        if entry["submitted"]:
            submitted += 1
        if s >= threshold:
            locked_in += 1
        if s > best["score"]:
            best = {"day": day, "score": s}
        if s < worst["score"]:
            worst = {"day": day, "score": s}
        for h in active:
            if entry["habits"].get(h["id"]) is True:
                per_habit[h["id"]] += 1

    days = len(week_day_keys)
    ordered = sorted(
        ({"habit_id": h["id"], "name": h["name"], "count": per_habit[h["id"]]} for h in active),
        key=lambda x: x["count"],
        reverse=True,
    )
    return {
        "days": list(week_day_keys),
        "average": round(total / days, 1) if days else 0.0,
        "submitted": submitted,
        "best": best if best["day"] is not None else None,
        "worst": worst if worst["day"] is not None else None,
        "locked_in": locked_in,
        "max_score": len(active),
        "threshold": threshold,
        "per_habit": ordered,
    }


def heatmap_level(value: int, max_score: int) -> int:
    """Month view intensity bucket, 0..4."""
    ratio = value / max(1, max_score)
    if ratio == 0:
        return 0
    if ratio < 0.34:
        return 1
    if ratio < 0.67:
        return 2
    if ratio < 0.9:
        return 3
    return 4


def month_heatmap(state: State, day_keys: Sequence[str]) -> list[dict[str, Any]]:
    max_score = len(active_habits(state))
    cells: list[dict[str, Any]] = []
    for day in day_keys:
        s = score(state, day)
        cells.append({"day": day, "score": s, "max": max_score, "level": heatmap_level(s, max_score)})
    return cells


def day_summary(state: State, day: str) -> dict[str, Any]:
    """Everything the day view shows, computed without adding entries."""
    entry = read_entry(state, day)
    s = score(state, day)
    active = active_habits(state)
    return {
        "day": day,
        "entry": entry,
        "score": s,
        "max_score": len(active),
        "status": status_for(s, state),
        "habits": [
            {
                "id": h["id"],
                "name": h["name"],
                "done": entry["habits"].get(h["id"]) is True,
                "streak": habit_streak(state, h["id"], day),
            }
            for h in active
        ],
        "streaks": overall_streaks(state, day),
    }
