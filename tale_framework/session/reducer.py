"""
Session reducer - (state, action) -> transition.

Every action runs against a private copy of the state. Handlers mutate
that copy through a TransitionContext, which also collects what the
owner must do afterwards: tasks to schedule, keys to cancel, events to
publish. If a handler raises a GameError the copy is thrown away and
the only visible change is the error string.

After every action an evaluation pass looks at the resulting state and
arms the automatic follow-ups (combat start, enemy phase, delegated
attack).
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from tale_engine.core.actions import Action, ActionType
from tale_engine.core.events import SessionEvent
from tale_framework.catalog import GameCatalog
from tale_framework.errors import GameError
from tale_framework.session.config import SessionConfig
from tale_framework.session.state import GameLogEntry, LogType, SessionState

logger = logging.getLogger(__name__)

SHOP_ACTIONS = frozenset({ActionType.BUY, ActionType.SELL})


@dataclass
class ScheduledAction:
    delay: float
    action: Action
    key: Optional[str] = None


@dataclass
class Transition:
    """Result of reducing one action."""
    state: SessionState
    scheduled: list[ScheduledAction] = field(default_factory=list)
    cancelled: list[str] = field(default_factory=list)
    events: list[tuple[Enum, dict[str, Any]]] = field(default_factory=list)
    reset_schedule: bool = False

    @property
    def error(self) -> Optional[str]:
        return self.state.error


class TransitionContext:
    """Mutable working set handed to handlers."""

    def __init__(
        self,
        state: SessionState,
        config: SessionConfig,
        catalog: GameCatalog,
        rng: random.Random,
    ):
        self.state = state
        self.config = config
        self.catalog = catalog
        self.rng = rng
        self.rules = config.rules
        self.transition = Transition(state=state)

    def log(self, type: LogType, message: str, speaker: Optional[str] = None) -> GameLogEntry:
        """Append to the in-game log, evicting the oldest entries past the limit."""
        state = self.state
        state.log_counter += 1
        entry = GameLogEntry(id=state.log_counter, type=type, message=message, speaker=speaker)
        state.log.append(entry)
        overflow = len(state.log) - self.config.log_limit
        if overflow > 0:
            del state.log[:overflow]
        self.emit(SessionEvent.LOG_APPENDED, entry=entry)
        return entry

    def schedule(self, delay: float, action_type: ActionType, key: Optional[str] = None, **payload) -> None:
        self.transition.scheduled.append(
            ScheduledAction(delay=delay, action=Action(action_type, payload), key=key)
        )

    def cancel(self, key: str) -> None:
        self.transition.scheduled = [s for s in self.transition.scheduled if s.key != key]
        self.transition.cancelled.append(key)

    def is_scheduled(self, key: str) -> bool:
        return any(s.key == key for s in self.transition.scheduled)

    def emit(self, event_type: Enum, **data) -> None:
        self.transition.events.append((event_type, data))

    def replace_state(self, state: SessionState) -> None:
        """Swap in a brand new session (load, reset, restore)."""
        self.state = state
        self.transition.state = state
        self.transition.reset_schedule = True


Handler = Callable[[TransitionContext, Action], None]


class SessionReducer:
    """
    Applies actions to session state.

    Usage:
        reducer = SessionReducer(config, catalog)
        transition = reducer.reduce(state, Action(ActionType.REST))
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        catalog: Optional[GameCatalog] = None,
        handlers: Optional[dict[ActionType, Handler]] = None,
        evaluate: Optional[Callable[[TransitionContext], None]] = None,
    ):
        from tale_framework.session import handlers as default_handlers

        self.config = config or SessionConfig()
        self.catalog = catalog or GameCatalog.default()
        self._handlers = handlers if handlers is not None else default_handlers.build_handlers()
        self._evaluate = evaluate or default_handlers.evaluate

    def reduce(
        self,
        state: SessionState,
        action: Action,
        rng: Optional[random.Random] = None,
    ) -> Transition:
        """
        Reduce one action.

        The input state is never modified.
        """
        rng = rng or random.Random()
        handler = self._handlers.get(action.type)
        if handler is None:
            raise ValueError(f"No handler for {action.type}")

        ctx = self._context(state, rng)
        if not action.is_follow_up:
            ctx.state.error = None

        try:
            handler(ctx, action)
        except GameError as e:
            logger.debug(f"{action.type.name} rejected: {e.message}")
            ctx = self._context(state, rng)
            ctx.state.error = e.message
            if action.type in SHOP_ACTIONS:
                ctx.state.shop_error = e.message

        self._evaluate(ctx)
        return ctx.transition

    def _context(self, state: SessionState, rng: random.Random) -> TransitionContext:
        return TransitionContext(state.clone(), self.config, self.catalog, rng)
