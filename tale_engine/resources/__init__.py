"""
Resources module - static catalog data and persistence backends.
"""

from tale_engine.resources.database import Database
from tale_engine.resources.store import (
    KeyValueStore,
    MemoryStore,
    JsonFileStore,
    StoreError,
)

__all__ = [
    "Database",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "StoreError",
]
