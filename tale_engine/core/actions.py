"""
Session action definitions.

Actions are the only way session state changes. The presentation layer
issues player actions; the session itself issues follow-up actions
(enemy phase, safe transition, delegated attack) through the scheduler.
Game logic should dispatch Actions, never mutate state directly. This
enables:
- A single reducer entry point per action
- Deferred, cancellable continuations
- Deterministic replays in tests

Usage:
    session.dispatch(Action(ActionType.ATTACK, {"target_id": combat_id}))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class ActionType(Enum):
    """
    Semantic session actions.

    Player actions come first; follow-ups are only ever produced by the
    session (scheduler or evaluation pass).
    """

    # Script / session lifecycle
    LOAD_SCRIPT = auto()
    RESET = auto()
    CLEAR_SESSION = auto()
    RESTORE_SESSION = auto()
    REPORT = auto()

    # Navigation
    ADVANCE_SCENE = auto()
    MAKE_CHOICE = auto()

    # Field actions
    USE_ITEM = auto()
    TOGGLE_EQUIPMENT = auto()
    REST = auto()
    OPEN_SHOP = auto()
    CLOSE_SHOP = auto()
    BUY = auto()
    SELL = auto()

    # Combat actions
    ATTACK = auto()
    CAST_SKILL = auto()
    USE_COMBAT_ITEM = auto()
    FLEE = auto()
    SET_TARGET = auto()
    SET_ACTIVE_SKILL = auto()
    RESTART_COMBAT = auto()
    CONTINUE_AFTER_COMBAT = auto()

    # Modes
    TOGGLE_DELEGATION = auto()
    SET_UI_BLOCKING = auto()

    # Follow-ups
    RESOLVE_ENEMY_PHASE = auto()
    SAFE_TRANSITION = auto()
    VICTORY_ADVANCE = auto()
    FLEE_ADVANCE = auto()
    DELEGATED_ATTACK = auto()


# Actions the session schedules for itself; the public API never accepts them.
FOLLOW_UP_ACTIONS: frozenset[ActionType] = frozenset({
    ActionType.RESOLVE_ENEMY_PHASE,
    ActionType.SAFE_TRANSITION,
    ActionType.VICTORY_ADVANCE,
    ActionType.FLEE_ADVANCE,
    ActionType.DELEGATED_ATTACK,
})


@dataclass(frozen=True)
class Action:
    """An action and its keyword payload."""
    type: ActionType
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def is_follow_up(self) -> bool:
        return self.type in FOLLOW_UP_ACTIONS
