"""
Save module - session persistence behind a key-value store.
"""

from tale_framework.save.manager import (
    SessionPersistence,
    SaveEvent,
    SCRIPT_KEY,
    STATE_KEY,
)

__all__ = [
    "SessionPersistence",
    "SaveEvent",
    "SCRIPT_KEY",
    "STATE_KEY",
]
