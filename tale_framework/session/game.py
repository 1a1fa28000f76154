"""
Game session - the public entry point of the engine.

GameSession owns the current SessionState, a virtual-clock scheduler
for paced continuations, the event bus and the persistence gateway.
Every public operation is a dispatched action and returns the new
state; user-facing failures show up as `state.error`, never as an
exception.

Usage:
    session = GameSession(SessionConfig(seed=7))
    session.load_script(document)
    session.advance_to_scene("forest_01")
    session.attack()
    session.update(1.0)   # enemies strike back
"""

from __future__ import annotations

import logging
import random
from typing import Any, Optional

from tale_engine.core.actions import Action, ActionType
from tale_engine.core.events import EventBus
from tale_engine.core.scheduler import Scheduler
from tale_engine.resources.store import KeyValueStore, MemoryStore
from tale_framework.catalog import GameCatalog
from tale_framework.content.loader import RawScript, parse_script_document
from tale_framework.errors import PersistenceError, ScriptInvalid
from tale_framework.save.manager import SessionPersistence
from tale_framework.session.config import SessionConfig
from tale_framework.session.reducer import SessionReducer, Transition
from tale_framework.session.state import SessionState


class GameSession:
    """
    Single-player game session.

    All mutation goes through dispatch(); delayed follow-ups fire from
    update(dt), one at a time, each against the state left by the last.
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        catalog: Optional[GameCatalog] = None,
        store: Optional[KeyValueStore] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.config = config or SessionConfig()
        self.catalog = catalog or GameCatalog.default()
        self.event_bus = event_bus or EventBus()
        self.scheduler = Scheduler()
        self.rng = random.Random(self.config.seed)
        self.reducer = SessionReducer(self.config, self.catalog)
        self.persistence = SessionPersistence(
            store if store is not None else MemoryStore(),
            self.event_bus,
            log_limit=self.config.log_limit,
        )
        self.state = SessionState()
        self.logger = logging.getLogger(__name__)

    # Dispatch

    def dispatch(self, action: Action) -> SessionState:
        """Apply a player action."""
        if action.is_follow_up:
            raise ValueError(f"{action.type.name} is scheduled by the session, not dispatched")
        return self._apply(action)

    def update(self, dt: float) -> SessionState:
        """Advance the clock and run every continuation that falls due."""
        self.scheduler.advance(dt, self._apply)
        return self.state

    def _apply(self, action: Action) -> SessionState:
        transition = self.reducer.reduce(self.state, action, self.rng)
        self._commit(transition)
        return self.state

    def _commit(self, transition: Transition) -> None:
        self.state = transition.state
        if transition.reset_schedule:
            self.scheduler.cancel_all()
        for key in transition.cancelled:
            self.scheduler.cancel(key)
        for entry in transition.scheduled:
            self.scheduler.schedule(entry.delay, entry.action, key=entry.key)
        for event_type, data in transition.events:
            self.event_bus.publish(event_type, **data)

    def _do(self, action_type: ActionType, **payload: Any) -> SessionState:
        return self.dispatch(Action(action_type, payload))

    def _report(self, message: str, is_error: bool = False) -> SessionState:
        return self._do(ActionType.REPORT, message=message, is_error=is_error)

    # Script lifecycle

    def load_script(self, raw: RawScript) -> SessionState:
        """Start a new game from a script; remembers it on success."""
        try:
            document = parse_script_document(raw)
        except ScriptInvalid as e:
            document = None
            self.state = self.state.model_copy(update={"error": e.message})

        if document is not None:
            self._do(ActionType.LOAD_SCRIPT, document=document)

        try:
            if self.state.error is None:
                self.persistence.save_script(document)
            else:
                self.logger.warning(f"Script rejected: {self.state.error}")
                self.persistence.clear()
        except PersistenceError as e:
            self._report(e.message, is_error=True)
        return self.state

    def resume_last_script(self) -> SessionState:
        """Reload the script remembered by the last successful load."""
        try:
            document = self.persistence.load_script_document()
        except PersistenceError as e:
            return self._report(e.message, is_error=True)
        if document is None:
            return self._report("No stored script to resume.", is_error=True)
        return self.load_script(document)

    def reset(self) -> SessionState:
        """Reset the game and forget everything stored."""
        self._do(ActionType.RESET)
        try:
            self.persistence.clear()
        except PersistenceError as e:
            self._report(e.message, is_error=True)
        return self.state

    def clear_session(self) -> SessionState:
        """Reset in memory only; stored data is kept."""
        return self._do(ActionType.CLEAR_SESSION)

    def save_session(self) -> SessionState:
        if self.state.script is None:
            return self._report("There is no game to save.", is_error=True)
        try:
            self.persistence.save_state(self.state)
        except PersistenceError as e:
            return self._report(e.message, is_error=True)
        return self._report("Game saved.")

    def load_session(self) -> SessionState:
        try:
            snapshot = self.persistence.load_state()
        except PersistenceError as e:
            return self._report(e.message, is_error=True)
        if snapshot is None:
            return self._report("No saved game found.", is_error=True)
        return self._do(ActionType.RESTORE_SESSION, state=snapshot)

    # Navigation

    def advance_to_scene(self, scene_id: Optional[str]) -> SessionState:
        return self._do(ActionType.ADVANCE_SCENE, scene_id=scene_id)

    def make_choice(self, choice_id: str) -> SessionState:
        return self._do(ActionType.MAKE_CHOICE, choice_id=choice_id)

    # Field

    def use_item(self, item_id: str) -> SessionState:
        return self._do(ActionType.USE_ITEM, item_id=item_id)

    def toggle_equipment(self, item_id: str) -> SessionState:
        return self._do(ActionType.TOGGLE_EQUIPMENT, item_id=item_id)

    def rest(self) -> SessionState:
        return self._do(ActionType.REST)

    def open_shop(self, scene_id: Optional[str] = None) -> SessionState:
        return self._do(ActionType.OPEN_SHOP, scene_id=scene_id)

    def close_shop(self) -> SessionState:
        return self._do(ActionType.CLOSE_SHOP)

    def buy(self, item_id: str, quantity: int = 1) -> SessionState:
        return self._do(ActionType.BUY, item_id=item_id, quantity=quantity)

    def sell(self, item_id: str, quantity: int = 1) -> SessionState:
        return self._do(ActionType.SELL, item_id=item_id, quantity=quantity)

    # Combat

    def attack(self, combat_id: Optional[str] = None) -> SessionState:
        return self._do(ActionType.ATTACK, combat_id=combat_id)

    def cast_skill(self, skill_id: str, combat_id: Optional[str] = None) -> SessionState:
        return self._do(ActionType.CAST_SKILL, skill_id=skill_id, combat_id=combat_id)

    def use_combat_item(self, item_id: str, combat_id: Optional[str] = None) -> SessionState:
        return self._do(ActionType.USE_COMBAT_ITEM, item_id=item_id, combat_id=combat_id)

    def flee(self) -> SessionState:
        return self._do(ActionType.FLEE)

    def set_target(self, combat_id: Optional[str]) -> SessionState:
        return self._do(ActionType.SET_TARGET, combat_id=combat_id)

    def set_active_skill(self, skill_id: Optional[str]) -> SessionState:
        return self._do(ActionType.SET_ACTIVE_SKILL, skill_id=skill_id)

    def restart_combat(self) -> SessionState:
        return self._do(ActionType.RESTART_COMBAT)

    def continue_after_combat(self) -> SessionState:
        return self._do(ActionType.CONTINUE_AFTER_COMBAT)

    # Modes

    def toggle_delegation(self) -> SessionState:
        return self._do(ActionType.TOGGLE_DELEGATION)

    def set_ui_blocking(self, blocking: bool) -> SessionState:
        return self._do(ActionType.SET_UI_BLOCKING, blocking=blocking)
