from __future__ import annotations

import copy
import random

from custom_components.discipline_os import model
from custom_components.discipline_os.const import MONTH_OFFSET_LIMIT
from custom_components.discipline_os.migration import default_state, migrate
from custom_components.discipline_os.model import MutationResult
from custom_components.discipline_os.planner import build_plan

DAY = "2026-02-18"


def _state() -> dict:
    return default_state()


def _habit_ids(state: dict) -> list[str]:
    return [h["id"] for h in state["habits"]]


def test_ensure_entry_creates_full_entry() -> None:
    state = _state()
    entry = model.ensure_entry(state, DAY)
    assert state["entries"][DAY] is entry
    assert entry["submitted"] is False
    assert entry["note"] == ""
    assert entry["workouts"] == []
    assert entry["habits"] == {hid: False for hid in _habit_ids(state)}


def test_ensure_entry_repairs_broken_fields_and_keeps_deleted_habit_history() -> None:
    state = _state()
    state["entries"][DAY] = {
        "submitted": "yes",
        "note": None,
        "habits": {"h-workout": "true", "h-old": True},
        "workouts": [{"name": "Plank"}, "junk", {"id": "w1", "name": "Squats", "done": 1}],
        "workout_title": 5,
    }
    entry = model.ensure_entry(state, DAY)
    assert entry["submitted"] is False
    assert entry["note"] == ""
    assert entry["habits"]["h-workout"] is False
    assert entry["habits"]["h-old"] is True
    assert all(isinstance(entry["habits"][hid], bool) for hid in _habit_ids(state))
    assert len(entry["workouts"]) == 2
    assert entry["workouts"][0]["id"]
    assert entry["workouts"][0]["prescription"] == ""
    assert entry["workouts"][1]["done"] is False
    assert entry["workout_title"] == ""


def test_ensure_entry_replaces_non_dict_entry() -> None:
    state = _state()
    state["entries"][DAY] = "corrupt"
    entry = model.ensure_entry(state, DAY)
    assert entry["habits"] == {hid: False for hid in _habit_ids(state)}


def test_read_entry_does_not_insert_missing_day() -> None:
    state = _state()
    entry = model.read_entry(state, DAY)
    assert DAY not in state["entries"]
    assert not any(entry["habits"].values())


def test_active_habits_keep_order() -> None:
    state = _state()
    state["habits"][1]["enabled"] = False
    active = model.active_habits(state)
    assert [h["id"] for h in active] == [hid for i, hid in enumerate(_habit_ids(state)) if i != 1]


def test_toggle_habit_takes_snapshot_first() -> None:
    state = _state()
    assert model.toggle_habit(state, DAY, "h-deep") is MutationResult.APPLIED
    assert state["entries"][DAY]["habits"]["h-deep"] is True
    assert state["undo"] is not None
    assert state["undo"]["entries"][DAY]["habits"]["h-deep"] is False
    assert state["undo"]["undo"] is None
    assert model.toggle_habit(state, DAY, "h-deep") is MutationResult.APPLIED
    assert state["entries"][DAY]["habits"]["h-deep"] is False
    assert state["undo"]["entries"][DAY]["habits"]["h-deep"] is True


def test_toggle_unknown_habit_is_invalid() -> None:
    state = _state()
    assert model.toggle_habit(state, DAY, "nope") is MutationResult.INVALID
    assert state["undo"] is None


def test_locked_day_rejects_toggle_without_change() -> None:
    state = _state()
    model.ensure_entry(state, DAY)["habits"]["h-deep"] = True
    assert model.submit_day(state, DAY) is MutationResult.APPLIED
    before = copy.deepcopy(state)

    assert model.toggle_habit(state, DAY, "h-deep") is MutationResult.LOCKED
    assert model.set_note(state, DAY, "late") is MutationResult.LOCKED
    assert model.reset_day(state, DAY) is MutationResult.LOCKED
    assert model.add_workout_item(state, DAY, "Run") is MutationResult.LOCKED
    assert model.clear_workouts(state, DAY) is MutationResult.LOCKED
    assert model.copy_previous_day(state, DAY) is MutationResult.LOCKED
    assert model.apply_plan(state, DAY, build_plan(state["profile"])) is MutationResult.LOCKED
    assert state == before


def test_submit_and_unlock() -> None:
    state = _state()
    assert model.unlock_day(state, DAY) is MutationResult.NOOP
    assert model.submit_day(state, DAY) is MutationResult.APPLIED
    assert model.submit_day(state, DAY) is MutationResult.NOOP
    assert model.unlock_day(state, DAY) is MutationResult.APPLIED
    assert model.set_note(state, DAY, "fixed") is MutationResult.APPLIED
    assert state["entries"][DAY]["note"] == "fixed"


def test_reset_day_clears_everything() -> None:
    state = _state()
    model.toggle_habit(state, DAY, "h-grind")
    model.set_note(state, DAY, "note")
    model.add_workout_item(state, DAY, "Run", "20 min")
    assert model.reset_day(state, DAY) is MutationResult.APPLIED
    entry = state["entries"][DAY]
    assert not any(entry["habits"].values())
    assert entry["note"] == ""
    assert entry["workouts"] == []
    assert entry["workout_title"] == "" and entry["workout_meta"] == ""


def test_copy_previous_day() -> None:
    state = _state()
    model.toggle_habit(state, "2026-02-17", "h-sleep")
    model.toggle_habit(state, DAY, "h-grind")
    assert model.copy_previous_day(state, DAY) is MutationResult.APPLIED
    flags = state["entries"][DAY]["habits"]
    assert flags["h-sleep"] is True
    assert flags["h-grind"] is False


def test_workout_items_add_toggle_delete() -> None:
    state = _state()
    state["profile"]["auto_workout_habit"] = False
    assert model.add_workout_item(state, DAY, "   ") is MutationResult.INVALID
    assert model.add_workout_item(state, DAY, "Run", "5 km") is MutationResult.APPLIED
    item = state["entries"][DAY]["workouts"][0]
    assert item["name"] == "Run" and item["prescription"] == "5 km" and item["done"] is False

    assert model.toggle_workout_item(state, DAY, item["id"]) is MutationResult.APPLIED
    assert state["entries"][DAY]["workouts"][0]["done"] is True
    assert model.toggle_workout_item(state, DAY, "missing") is MutationResult.INVALID

    assert model.delete_workout_item(state, DAY, item["id"]) is MutationResult.APPLIED
    assert state["entries"][DAY]["workouts"] == []


def test_auto_workout_habit_follows_completion() -> None:
    state = _state()
    model.add_workout_item(state, DAY, "Run")
    model.add_workout_item(state, DAY, "Plank")
    entry = state["entries"][DAY]
    assert entry["habits"]["h-workout"] is False

    first, second = (w["id"] for w in entry["workouts"])
    model.toggle_workout_item(state, DAY, first)
    assert state["entries"][DAY]["habits"]["h-workout"] is False
    model.toggle_workout_item(state, DAY, second)
    assert state["entries"][DAY]["habits"]["h-workout"] is True

    # Emptying the list leaves the flag as it was.
    model.delete_workout_item(state, DAY, first)
    model.delete_workout_item(state, DAY, second)
    assert state["entries"][DAY]["workouts"] == []
    assert state["entries"][DAY]["habits"]["h-workout"] is True


def test_auto_workout_habit_matches_name_case_insensitively() -> None:
    state = _state()
    state["habits"] = [{"id": "x", "name": "  WORKOUT ", "enabled": False}]
    model.add_workout_item(state, DAY, "Run")
    item_id = state["entries"][DAY]["workouts"][0]["id"]
    model.toggle_workout_item(state, DAY, item_id)
    assert state["entries"][DAY]["habits"]["x"] is True


def test_auto_workout_habit_off_leaves_flag() -> None:
    state = _state()
    state["profile"]["auto_workout_habit"] = False
    model.toggle_habit(state, DAY, "h-workout")
    model.add_workout_item(state, DAY, "Run")
    assert state["entries"][DAY]["habits"]["h-workout"] is True


def test_apply_plan_replaces_workouts_and_title() -> None:
    state = _state()
    model.add_workout_item(state, DAY, "Old item")
    plan = build_plan(state["profile"], choice=random.Random(3).choice)
    assert model.apply_plan(state, DAY, plan) is MutationResult.APPLIED
    entry = state["entries"][DAY]
    assert [w["name"] for w in entry["workouts"]] == [it["name"] for it in plan["items"]]
    assert len({w["id"] for w in entry["workouts"]}) == len(plan["items"])
    assert not any(w["done"] for w in entry["workouts"])
    assert entry["workout_title"] == plan["title"]
    assert entry["workout_meta"] == plan["meta"]
    assert entry["habits"]["h-workout"] is False


def test_habit_crud_and_reorder() -> None:
    state = _state()
    assert model.add_habit(state, "  ") is MutationResult.INVALID
    assert model.add_habit(state, " Read 15m ") is MutationResult.APPLIED
    new = state["habits"][-1]
    assert new["name"] == "Read 15m" and new["enabled"] is True

    assert model.rename_habit(state, new["id"], "   ") is MutationResult.APPLIED
    assert state["habits"][-1]["name"] == "Habit"

    assert model.move_habit(state, new["id"], 1) is MutationResult.NOOP
    assert model.move_habit(state, new["id"], -1) is MutationResult.APPLIED
    assert state["habits"][-2]["id"] == new["id"]
    assert model.move_habit(state, state["habits"][0]["id"], -1) is MutationResult.NOOP
    assert model.move_habit(state, new["id"], 2) is MutationResult.INVALID

    assert model.set_habit_enabled(state, new["id"], False) is MutationResult.APPLIED
    assert model.set_habit_enabled(state, new["id"], False) is MutationResult.NOOP


def test_delete_habit_keeps_history() -> None:
    state = _state()
    model.toggle_habit(state, DAY, "h-deep")
    assert model.delete_habit(state, "h-deep") is MutationResult.APPLIED
    assert "h-deep" not in _habit_ids(state)
    assert state["entries"][DAY]["habits"]["h-deep"] is True
    assert model.delete_habit(state, "h-deep") is MutationResult.INVALID


def test_apply_template_by_name_and_random() -> None:
    state = _state()
    assert model.apply_template(state, "hard mode") is MutationResult.APPLIED
    assert state["scoring"]["threshold"] == 7
    assert [h["name"] for h in state["habits"]][0] == "Workout"
    assert len(state["habits"]) == 8

    assert model.apply_template(state, "Nope") is MutationResult.INVALID
    assert model.apply_template(state, choice=lambda seq: seq[0]) is MutationResult.APPLIED
    assert state["scoring"]["threshold"] == 4


def test_update_profile_clamps_weights() -> None:
    state = _state()
    assert model.update_profile(state, goal="bulk") is MutationResult.INVALID
    assert model.update_profile(state, goal="muscle", current_weight=20, goal_weight=900, duration_minutes=40) is MutationResult.APPLIED
    assert state["profile"]["goal"] == "muscle"
    assert state["profile"]["current_weight"] == 50
    assert state["profile"]["goal_weight"] == 600
    assert state["profile"]["duration_minutes"] == 40


def test_update_settings_threshold_and_labels() -> None:
    state = _state()
    model.update_settings(state, threshold=0, labels="A | B")
    assert state["scoring"]["threshold"] == 1
    assert state["status_labels"] == default_state()["status_labels"]
    model.update_settings(state, threshold=8, labels=" A | B | C ")
    assert state["scoring"]["threshold"] == 8
    assert state["status_labels"] == {"good": "A", "mid": "B", "bad": "C"}


def test_display_preferences_skip_undo() -> None:
    state = _state()
    assert model.set_theme(state, "light") is MutationResult.APPLIED
    assert model.set_theme(state, "light") is MutationResult.NOOP
    assert model.set_theme(state, "neon") is MutationResult.INVALID
    model.toggle_privacy(state)
    model.shift_month(state, -1)
    assert state["privacy_mode"] is True
    assert state["month_offset"] == -1
    assert state["undo"] is None


def test_every_entry_valid_after_ensure() -> None:
    state = migrate(
        {
            "entries": {
                "2026-01-01": None,
                "2026-01-02": {"habits": []},
                "2026-01-03": {"workouts": {"a": 1}, "submitted": 1},
            }
        }
    )
    ids = _habit_ids(state)
    for day in list(state["entries"]):
        entry = model.ensure_entry(state, day)
        assert all(isinstance(entry["habits"][hid], bool) for hid in ids)
        assert isinstance(entry["submitted"], bool)
        assert isinstance(entry["note"], str)
        assert isinstance(entry["workouts"], list)


def test_shift_month_stays_within_limit() -> None:
    state = _state()
    state["month_offset"] = MONTH_OFFSET_LIMIT - 1
    assert model.shift_month(state, 5) is MutationResult.APPLIED
    assert state["month_offset"] == MONTH_OFFSET_LIMIT
    assert model.shift_month(state, 1) is MutationResult.NOOP
    assert model.shift_month(state, -(10**9)) is MutationResult.APPLIED
    assert state["month_offset"] == -MONTH_OFFSET_LIMIT


def test_update_settings_without_change_keeps_undo_point() -> None:
    state = _state()
    model.set_note(state, DAY, "first")
    model.set_note(state, DAY, "second")
    snapshot = state["undo"]

    assert model.update_settings(state) is MutationResult.NOOP
    assert model.update_settings(state, labels="only | two") is MutationResult.NOOP
    assert model.update_settings(state, threshold=state["scoring"]["threshold"]) is MutationResult.NOOP
    assert state["undo"] is snapshot
    assert state["undo"]["entries"][DAY]["note"] == "first"
