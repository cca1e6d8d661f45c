"""No-equipment workout generator.

A plan is derived from the profile (goal, weights, duration). Rounds, timing
and the finisher are deterministic; the exercise in each category slot is
drawn at random through an injectable ``choice`` callable.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from .const import DEFAULT_CURRENT_WEIGHT, DEFAULT_DURATION_MINUTES, DEFAULT_GOAL, DEFAULT_GOAL_WEIGHT
from .type_defs import Plan, PlanItem, Profile

Choice = Callable[[Sequence[Any]], Any]

WARMUPS = [
    "Jumping jacks",
    "High knees",
    "Butt kicks",
    "Arm circles",
    "Inchworms",
    "Hip openers",
    "Shadow boxing",
]
PUSHES = [
    "Push-ups",
    "Incline push-ups (hands on couch)",
    "Knee push-ups",
    "Pike push-ups",
]
LEGS = [
    "Bodyweight squats",
    "Reverse lunges",
    "Split squats",
    "Wall sit",
    "Glute bridges",
]
CORE = [
    "Plank",
    "Dead bug",
    "Bicycle crunches",
    "Leg raises",
    "Mountain climbers",
]
CARDIO = [
    "Burpees (low-impact ok)",
    "Skaters",
    "Fast step-ups (stairs)",
    "Shadow boxing combos",
    "Squat-to-reach (fast)",
]

FINISHER_TEMPO = "Tempo squats (slow down) - 2 min"
FINISHER_EMOM = "EMOM 6: 6 burpees (or 10 squat-to-reach)"
FINISHER_STEADY = "8 min steady shadow boxing"
FINISHER_HOLDS = "2 min plank + 2 min wall sit"

COOLDOWN = "Hamstrings + hips + chest opener • 3–5 min"

_WORK_SECONDS = {"high": 40, "medium_high": 35, "medium": 30}


@dataclass(frozen=True, slots=True)
class PlanInputs:
    goal: str
    duration: int
    current_weight: float
    goal_weight: float

    @property
    def weight_delta(self) -> float:
        # Positive = cutting, negative = gaining.
        return self.current_weight - self.goal_weight


def _positive_number(value: Any, fallback: float) -> float:
    if isinstance(value, bool):
        return fallback
    try:
        n = float(value)
    except (TypeError, ValueError):
        return fallback
    return n if n > 0 else fallback


def _fmt_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def inputs_from_profile(profile: Profile | dict[str, Any]) -> PlanInputs:
    goal = str(profile.get("goal") or DEFAULT_GOAL)
    return PlanInputs(
        goal=goal,
        duration=int(_positive_number(profile.get("duration_minutes"), DEFAULT_DURATION_MINUTES)),
        current_weight=_positive_number(profile.get("current_weight"), DEFAULT_CURRENT_WEIGHT),
        goal_weight=_positive_number(profile.get("goal_weight"), DEFAULT_GOAL_WEIGHT),
    )


def intensity_for(goal: str) -> str:
    if goal == "fat_loss":
        return "high"
    if goal == "endurance":
        return "medium_high"
    return "medium"


def rounds_for(duration: int) -> int:
    if duration <= 15:
        return 3
    if duration <= 25:
        return 4
    return 5


def rest_seconds_for(intensity: str) -> int:
    return 20 if intensity == "high" else 25


def finisher_for(goal: str, weight_delta: float) -> str:
    """Pick the finisher; earlier rules win."""
    if goal == "muscle" and weight_delta < 0:
        return FINISHER_TEMPO
    if goal == "fat_loss" and weight_delta > 10:
        return FINISHER_EMOM
    if goal == "endurance":
        return FINISHER_STEADY
    return FINISHER_HOLDS


def _item(name: str, prescription: str) -> PlanItem:
    return {"name": name, "prescription": prescription, "done": False}


def build_plan(profile: Profile | dict[str, Any], *, choice: Choice = random.choice) -> Plan:
    """Build a plan for the profile.

    Items always come in slot order: warmup, push, legs, core, cardio, rest,
    finisher, cooldown.
    """
    inputs = inputs_from_profile(profile)
    intensity = intensity_for(inputs.goal)
    rounds = rounds_for(inputs.duration)
    work = _WORK_SECONDS[intensity]
    rest = rest_seconds_for(intensity)
    finisher = finisher_for(inputs.goal, inputs.weight_delta)

    block = f"{rounds} rounds • {work}s work"
    items = [
        _item("Warmup", f"Pick 2: {choice(WARMUPS)} + {choice(WARMUPS)} • 4–5 min"),
        _item(choice(PUSHES), block),
        _item(choice(LEGS), block),
        _item(choice(CORE), block),
        _item(choice(CARDIO), block),
        _item("Rest", f"{rest}s between moves"),
        _item("Finisher", finisher),
        _item("Cooldown", COOLDOWN),
    ]

    cw = _fmt_number(inputs.current_weight)
    gw = _fmt_number(inputs.goal_weight)
    return {
        "title": f"No-Equipment Plan • {inputs.duration} min",
        "meta": (
            f"Goal: {inputs.goal.replace('_', ' ')} • {cw}→{gw} lbs • "
            f"Rounds {rounds} • {work}s on / {rest}s off"
        ),
        "goal": inputs.goal,
        "intensity": intensity,
        "rounds": rounds,
        "work_seconds": work,
        "rest_seconds": rest,
        "weight_delta": inputs.weight_delta,
        "finisher": finisher,
        "items": items,
    }
