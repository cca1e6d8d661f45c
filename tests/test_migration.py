from __future__ import annotations

import pytest

from custom_components.discipline_os.const import DEFAULT_HABITS, MONTH_OFFSET_LIMIT, SCHEMA_VERSION
from custom_components.discipline_os.migration import default_state, migrate


def _assert_valid(state: dict) -> None:
    assert state["schema_version"] == SCHEMA_VERSION
    assert state["theme"] in ("dark", "light")
    assert isinstance(state["privacy_mode"], bool)
    assert isinstance(state["month_offset"], int)
    assert set(state["status_labels"]) == {"good", "mid", "bad"}
    assert isinstance(state["scoring"]["threshold"], int) and state["scoring"]["threshold"] >= 1
    assert set(state["profile"]) == {"goal", "current_weight", "goal_weight", "duration_minutes", "auto_workout_habit"}
    assert state["habits"]
    for h in state["habits"]:
        assert isinstance(h["id"], str) and h["id"]
        assert isinstance(h["name"], str) and h["name"]
        assert isinstance(h["enabled"], bool)
    assert isinstance(state["entries"], dict)
    assert state["undo"] is None or isinstance(state["undo"], dict)


@pytest.mark.parametrize(
    "raw",
    [
        None,
        [],
        "garbage",
        42,
        {},
        {"schema_version": 1},
        {"schema_version": 999, "theme": "neon"},
        {"status_labels": "x", "scoring": [], "profile": 7, "habits": "nope", "entries": [1, 2], "undo": "u"},
        {"habits": [None, 3, "x"]},
        {"scoring": {"threshold": True}, "profile": {"current_weight": "heavy", "duration_minutes": -5}},
        {"month_offset": float("inf"), "scoring": {"threshold": float("nan")}},
        {"month_offset": 10**400, "profile": {"duration_minutes": float("inf"), "current_weight": float("-inf")}},
        {"scoring": {"threshold": 1e308}, "profile": {"goal_weight": 10**400}},
        {"month_offset": 10**9},
        {"habits": [{"id": "a", "name": "One"}, {"id": "a", "name": "Two"}]},
    ],
)
def test_migrate_is_total(raw) -> None:
    state = migrate(raw)
    _assert_valid(state)
    assert migrate(state) == state


def test_empty_input_gives_defaults() -> None:
    assert migrate({}) == default_state()


def test_nested_objects_merge_key_by_key_and_drop_unknown_keys() -> None:
    state = migrate(
        {
            "status_labels": {"good": "YES", "extra": "dropped"},
            "scoring": {"threshold": 4, "weights": [1, 2]},
            "profile": {"goal": "muscle", "favourite_color": "red"},
        }
    )
    assert state["status_labels"]["good"] == "YES"
    assert state["status_labels"]["mid"] == default_state()["status_labels"]["mid"]
    assert "extra" not in state["status_labels"]
    assert state["scoring"] == {"threshold": 4}
    assert state["profile"]["goal"] == "muscle"
    assert state["profile"]["current_weight"] == 180
    assert "favourite_color" not in state["profile"]


def test_threshold_is_clamped() -> None:
    assert migrate({"scoring": {"threshold": 0}})["scoring"]["threshold"] == 1
    assert migrate({"scoring": {"threshold": 500}})["scoring"]["threshold"] == 50


def test_habits_are_normalized() -> None:
    state = migrate(
        {
            "habits": [
                {"id": "a", "name": "  Read  ", "enabled": False},
                {"name": ""},
                {"id": "c", "enabled": "yes"},
            ]
        }
    )
    habits = state["habits"]
    assert habits[0] == {"id": "a", "name": "Read", "enabled": False}
    assert habits[1]["id"]
    assert habits[1]["name"] == "Habit"
    assert habits[1]["enabled"] is True
    assert habits[2] == {"id": "c", "name": "Habit", "enabled": True}


def test_empty_habit_list_falls_back_to_defaults() -> None:
    assert migrate({"habits": []})["habits"] == DEFAULT_HABITS


def test_entries_are_kept_without_deep_validation() -> None:
    entries = {"2026-01-01": {"habits": "broken"}, "not-a-day": 5}
    state = migrate({"entries": entries})
    assert state["entries"] == entries
    assert state["entries"] is not entries


def test_migrate_is_idempotent_with_generated_ids() -> None:
    once = migrate({"habits": [{"name": "No id"}]})
    assert migrate(once) == once


def test_legacy_browser_snapshot_is_converted() -> None:
    legacy = {
        "version": 7,
        "theme": "light",
        "privacyMode": True,
        "monthOffset": -2,
        "statusLabels": {"good": "G", "mid": "M", "bad": "B"},
        "scoring": {"threshold": 5},
        "profile": {
            "goal": "endurance",
            "currentWeight": 200,
            "goalWeight": 190,
            "duration": 15,
            "autoWorkoutHabit": False,
        },
        "habits": [{"id": "h-workout", "name": "Workout", "enabled": True}],
        "entries": {
            "2026-01-05": {
                "submitted": True,
                "note": "ok",
                "habits": {"h-workout": True},
                "workouts": [],
                "workoutTitle": "No-Equipment Plan • 15 min",
                "workoutMeta": "meta",
            }
        },
        "undo": {"version": 7, "privacyMode": False},
    }
    state = migrate(legacy)
    _assert_valid(state)
    assert state["theme"] == "light"
    assert state["privacy_mode"] is True
    assert state["month_offset"] == -2
    assert state["status_labels"] == {"good": "G", "mid": "M", "bad": "B"}
    assert state["scoring"]["threshold"] == 5
    assert state["profile"] == {
        "goal": "endurance",
        "current_weight": 200,
        "goal_weight": 190,
        "duration_minutes": 15,
        "auto_workout_habit": False,
    }
    entry = state["entries"]["2026-01-05"]
    assert entry["workout_title"] == "No-Equipment Plan • 15 min"
    assert "workoutTitle" not in entry
    assert state["undo"]["privacy_mode"] is False
    assert migrate(state) == state


def test_non_finite_numbers_fall_back_to_defaults() -> None:
    state = migrate(
        {
            "month_offset": float("inf"),
            "scoring": {"threshold": float("nan")},
            "profile": {"duration_minutes": float("inf"), "current_weight": 10**400},
        }
    )
    assert state["month_offset"] == 0
    assert state["scoring"]["threshold"] == default_state()["scoring"]["threshold"]
    assert state["profile"]["duration_minutes"] == default_state()["profile"]["duration_minutes"]
    assert state["profile"]["current_weight"] == default_state()["profile"]["current_weight"]


def test_duplicate_habit_ids_get_fresh_ids() -> None:
    state = migrate(
        {
            "habits": [
                {"id": "a", "name": "One"},
                {"id": "a", "name": "Two"},
                {"id": "b", "name": "Three"},
            ]
        }
    )
    ids = [h["id"] for h in state["habits"]]
    assert ids[0] == "a"
    assert ids[2] == "b"
    assert len(set(ids)) == 3
    assert [h["name"] for h in state["habits"]] == ["One", "Two", "Three"]
    assert migrate(state) == state


def test_month_offset_is_clamped() -> None:
    assert migrate({"month_offset": 10**9})["month_offset"] == MONTH_OFFSET_LIMIT
    assert migrate({"month_offset": -(10**9)})["month_offset"] == -MONTH_OFFSET_LIMIT
    assert migrate({"month_offset": -3})["month_offset"] == -3
