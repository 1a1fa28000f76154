"""
Save/Load system - session persistence.

Provides:
- The last loaded script under its own key
- The full session snapshot under a second key
- Save integrity validation (checksum)
- Derived stats rebuilt on load, never trusted from disk
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any, NoReturn, Optional

from pydantic import ValidationError

from tale_engine.core.events import EventBus
from tale_engine.resources.store import KeyValueStore, StoreError
from tale_framework.errors import PersistenceError
from tale_framework.progression.player import compute_derived_stats
from tale_framework.session.state import SessionState

SCRIPT_KEY = "rpg_game_script"
STATE_KEY = "rpg_game_state"
SAVE_VERSION = 1


class SaveEvent(Enum):
    """Save system events."""
    SAVE_COMPLETED = auto()
    SAVE_FAILED = auto()
    LOAD_COMPLETED = auto()
    LOAD_FAILED = auto()
    CLEARED = auto()


class SessionPersistence:
    """
    Gateway between the session and a key-value store.

    Nothing else in the session touches the store.
    """

    def __init__(
        self,
        store: KeyValueStore,
        event_bus: Optional[EventBus] = None,
        log_limit: int = 100,
    ):
        self.store = store
        self.event_bus = event_bus
        self.log_limit = log_limit
        self.logger = logging.getLogger(__name__)

    def _publish(self, event: SaveEvent, **data) -> None:
        if self.event_bus:
            self.event_bus.publish(event, **data)

    # Script

    def save_script(self, document: dict[str, Any]) -> None:
        try:
            self.store.set(SCRIPT_KEY, document)
        except StoreError as e:
            self.logger.error(f"Failed to store script: {e}")
            raise PersistenceError(f"Could not remember the script: {e}") from e

    def load_script_document(self) -> Optional[dict[str, Any]]:
        try:
            return self.store.get(SCRIPT_KEY)
        except StoreError as e:
            self.logger.error(f"Failed to read script: {e}")
            raise PersistenceError(f"Could not read the stored script: {e}") from e

    # Session snapshot

    def save_state(self, state: SessionState) -> None:
        """
        Write the session snapshot with a checksum.

        Raises:
            PersistenceError: The store rejected the write
        """
        save_dict = {
            "version": SAVE_VERSION,
            "savedAt": datetime.now(timezone.utc).isoformat(),
            "state": state.to_payload(),
        }
        save_dict["checksum"] = self._calculate_checksum(save_dict)

        try:
            self.store.set(STATE_KEY, save_dict)
        except StoreError as e:
            self.logger.error(f"Save failed: {e}")
            self._publish(SaveEvent.SAVE_FAILED, error=str(e))
            raise PersistenceError(f"Could not save the game: {e}") from e

        self.logger.info("Session saved")
        self._publish(SaveEvent.SAVE_COMPLETED)

    def load_state(self) -> Optional[SessionState]:
        """
        Read the session snapshot.

        A snapshot whose checksum does not match is removed.

        Returns:
            The restored state, or None if nothing is saved

        Raises:
            PersistenceError: Unreadable, corrupted or invalid snapshot
        """
        try:
            save_dict = self.store.get(STATE_KEY)
        except StoreError as e:
            self._fail_load(f"Could not read the saved game: {e}")
        if save_dict is None:
            return None

        if not isinstance(save_dict, dict) or "state" not in save_dict:
            self._fail_load("The saved game is not in a known format.")

        checksum = save_dict.get("checksum")
        if checksum and not self._verify_checksum(save_dict, checksum):
            self.logger.error("Save data corrupted: checksum mismatch")
            self._remove(STATE_KEY)
            self._fail_load("The saved game is corrupted and was discarded.")

        try:
            state = SessionState.model_validate(save_dict["state"])
        except ValidationError as e:
            self._fail_load(f"The saved game could not be read: {e.errors()[0]['msg']}")

        if state.player is not None:
            state.player = compute_derived_stats(state.player)
        if len(state.log) > self.log_limit:
            state.log = state.log[-self.log_limit:]

        self.logger.info("Session loaded")
        self._publish(SaveEvent.LOAD_COMPLETED)
        return state

    def _fail_load(self, message: str) -> NoReturn:
        self.logger.error(f"Load failed: {message}")
        self._publish(SaveEvent.LOAD_FAILED, error=message)
        raise PersistenceError(message)

    def has_saved_state(self) -> bool:
        try:
            return self.store.get(STATE_KEY) is not None
        except StoreError:
            return False

    def clear(self) -> None:
        """Forget both the script and the snapshot."""
        self._remove(SCRIPT_KEY)
        self._remove(STATE_KEY)
        self._publish(SaveEvent.CLEARED)

    def _remove(self, key: str) -> None:
        try:
            self.store.remove(key)
        except StoreError as e:
            self.logger.error(f"Failed to remove {key!r}: {e}")
            raise PersistenceError(f"Could not clear saved data: {e}") from e

    # Checksum validation

    def _calculate_checksum(self, data: dict) -> str:
        """Calculate checksum for save data."""
        json_str = json.dumps(data, sort_keys=True, separators=(',', ':'))
        hash_bytes = hashlib.sha256(json_str.encode('utf-8')).digest()
        return base64.b64encode(hash_bytes).decode('ascii')

    def _verify_checksum(self, data: dict, expected_checksum: str) -> bool:
        data_copy = data.copy()
        data_copy.pop('checksum', None)
        return self._calculate_checksum(data_copy) == expected_checksum
