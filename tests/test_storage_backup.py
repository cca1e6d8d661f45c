from __future__ import annotations

import json

import pytest

from custom_components.discipline_os import model
from custom_components.discipline_os.diagnostics import REDACTED, summarize_state
from custom_components.discipline_os.migration import default_state
from custom_components.discipline_os.storage import BackupError, dump_backup, load_backup
from custom_components.discipline_os.ws_state import public_state

DAY = "2026-02-18"


def _populated() -> dict:
    state = default_state()
    model.toggle_habit(state, DAY, "h-deep")
    model.set_note(state, DAY, "private note")
    model.add_workout_item(state, DAY, "Run", "5 km")
    model.submit_day(state, DAY)
    return state


def test_backup_round_trip() -> None:
    state = _populated()
    loaded = load_backup(dump_backup(state))
    assert loaded == state


def test_backup_is_pretty_printed_utf8() -> None:
    text = dump_backup(default_state())
    assert text.startswith("{\n  ")
    assert "≥" in text


@pytest.mark.parametrize("text", ["", "{not json", "[1, 2]", '"string"', "null"])
def test_bad_backup_raises(text: str) -> None:
    with pytest.raises(BackupError):
        load_backup(text)


def test_old_backup_is_migrated() -> None:
    raw = {"version": 7, "privacyMode": True, "scoring": {"threshold": 99}}
    loaded = load_backup(json.dumps(raw))
    assert loaded["privacy_mode"] is True
    assert loaded["scoring"]["threshold"] == 50


def test_public_state_hides_snapshot() -> None:
    state = _populated()
    view = public_state(state)
    assert "undo" not in view
    assert view["can_undo"] is True
    assert view["entries"][DAY]["note"] == "private note"


def test_diagnostics_summary_redacts() -> None:
    state = _populated()
    summary = summarize_state(state)
    assert summary["entries"]["count"] == 1
    assert summary["entries"]["submitted"] == 1
    assert summary["entries"]["with_note"] == 1
    assert "private note" not in json.dumps(summary)
    assert summary["habits"][0]["name"] == "Workout"

    state["privacy_mode"] = True
    assert all(h["name"] == REDACTED for h in summarize_state(state)["habits"])


def test_backup_with_non_finite_numbers_loads_defaults() -> None:
    loaded = load_backup('{"month_offset": 1e400, "scoring": {"threshold": NaN}, "profile": {"duration_minutes": Infinity}}')
    defaults = default_state()
    assert loaded["month_offset"] == 0
    assert loaded["scoring"] == defaults["scoring"]
    assert loaded["profile"]["duration_minutes"] == defaults["profile"]["duration_minutes"]
