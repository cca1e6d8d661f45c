"""Single-level undo via full State snapshots."""

from __future__ import annotations

import copy

from .migration import migrate
from .type_defs import MutationResult, State


def take_snapshot(state: State) -> None:
    """Store a deep copy of the current State as the undo point.

    The copy carries no undo of its own, so snapshots never nest.
    """
    snapshot = copy.deepcopy({k: v for k, v in state.items() if k != "undo"})
    snapshot["undo"] = None
    state["undo"] = snapshot  # type: ignore[typeddict-item]


def can_undo(state: State) -> bool:
    return isinstance(state.get("undo"), dict)


def undo(state: State) -> tuple[State, MutationResult]:
    """Return the restored State, or the same State and NOOP when there is nothing to undo."""
    snapshot = state.get("undo")
    if not isinstance(snapshot, dict):
        return state, MutationResult.NOOP
    restored = migrate(snapshot)
    restored["undo"] = None
    return restored, MutationResult.APPLIED
