"""
Session module - state, reducer and the public game session.

Provides:
- SessionState, the aggregate every action transforms
- SessionReducer, (state, action) -> transition
- GameSession, the dispatching, clock-driven entry point
"""

from tale_framework.session.state import SessionState, GameLogEntry, LogType
from tale_framework.session.config import SessionConfig
from tale_framework.session.reducer import (
    SessionReducer,
    Transition,
    TransitionContext,
    ScheduledAction,
)
from tale_framework.session.game import GameSession

__all__ = [
    "SessionState",
    "GameLogEntry",
    "LogType",
    "SessionConfig",
    "SessionReducer",
    "Transition",
    "TransitionContext",
    "ScheduledAction",
    "GameSession",
]
