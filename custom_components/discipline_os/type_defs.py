"""Type definitions for Discipline OS data structures.

TypedDict is used for the fixed-key records. Maps keyed at runtime (entries by
day key, habit flags by habit id) stay plain dicts. These are static-analysis
only; runtime repair happens in migration.py and model.py.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal, NotRequired, TypedDict


class MutationResult(StrEnum):
    """Outcome of a core mutation; rejections are values, not exceptions."""

    APPLIED = "applied"
    LOCKED = "locked"
    NOOP = "noop"
    INVALID = "invalid"


DayKey = str  # "YYYY-MM-DD", local calendar day
HabitId = str

StatusClass = Literal["good", "mid", "bad"]


class Habit(TypedDict):
    id: HabitId
    name: str
    enabled: bool


class WorkoutItem(TypedDict):
    id: str
    name: str
    prescription: str
    done: bool


class DayEntry(TypedDict):
    submitted: bool
    note: str
    habits: dict[HabitId, bool]
    workouts: list[WorkoutItem]
    workout_title: NotRequired[str]
    workout_meta: NotRequired[str]


class StatusLabels(TypedDict):
    good: str
    mid: str
    bad: str


class ScoringConfig(TypedDict):
    threshold: int


class Profile(TypedDict):
    goal: str
    current_weight: float
    goal_weight: float
    duration_minutes: int
    auto_workout_habit: bool


class State(TypedDict):
    schema_version: int
    theme: str
    privacy_mode: bool
    month_offset: int
    status_labels: StatusLabels
    scoring: ScoringConfig
    profile: Profile
    habits: list[Habit]
    entries: dict[DayKey, DayEntry]
    undo: State | None


# "class" is a keyword, hence the functional form.
Status = TypedDict("Status", {"class": StatusClass, "label": str})


class PlanItem(TypedDict):
    name: str
    prescription: str
    done: bool


class Plan(TypedDict):
    title: str
    meta: str
    goal: str
    intensity: str
    rounds: int
    work_seconds: int
    rest_seconds: int
    weight_delta: float
    finisher: str
    items: list[PlanItem]
