"""
Game error taxonomy.

Domain functions raise these; the session reducer is the only place
that catches them and turns them into state (error strings, shop
errors, log entries). Nothing here crosses the public session API.
"""

from __future__ import annotations

from enum import Enum


class ErrorCategory(Enum):
    CONTENT = "content"
    RESOURCE = "resource"
    INVALID_STATE = "invalid_state"
    PERSISTENCE = "persistence"


class GameError(Exception):
    """Base class for recoverable game errors."""
    category: ErrorCategory = ErrorCategory.INVALID_STATE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# Content errors: malformed script or dangling references

class ContentError(GameError):
    category = ErrorCategory.CONTENT


class ScriptInvalid(ContentError):
    pass


class SceneNotFound(ContentError):
    def __init__(self, scene_id: str):
        super().__init__(f"Scene '{scene_id}' not found.")
        self.scene_id = scene_id


class UnknownSkill(ContentError):
    def __init__(self, skill_id: str):
        super().__init__(f"Unknown skill '{skill_id}'.")
        self.skill_id = skill_id


class UnknownItem(ContentError):
    def __init__(self, item_id: str):
        super().__init__(f"Unknown item '{item_id}'.")
        self.item_id = item_id


class ItemNotSellable(ContentError):
    def __init__(self, item_name: str):
        super().__init__(f"{item_name} cannot be traded.")
        self.item_name = item_name


# Resource errors: not enough of something

class ResourceError(GameError):
    category = ErrorCategory.RESOURCE


class ItemNotFound(ResourceError):
    def __init__(self, item_id: str):
        super().__init__("That item is not in your bag.")
        self.item_id = item_id


class InsufficientGold(ResourceError):
    def __init__(self, required: int, available: int):
        super().__init__(f"Not enough gold ({required}G needed, {available}G held).")
        self.required = required
        self.available = available


class InsufficientMP(ResourceError):
    def __init__(self, required: int, available: int):
        super().__init__(f"Not enough MP ({required} needed, {available} left).")
        self.required = required
        self.available = available


class InsufficientQuantity(ResourceError):
    def __init__(self, requested: int, held: int):
        super().__init__(f"Only {held} held, cannot use {requested}.")
        self.requested = requested
        self.held = held


# Invalid-state errors: the action does not make sense right now

class InvalidStateError(GameError):
    category = ErrorCategory.INVALID_STATE


class ActionNotAllowed(InvalidStateError):
    pass


class ItemNotUsable(InvalidStateError):
    pass


class ItemNotEquippable(InvalidStateError):
    pass


class NoEffect(InvalidStateError):
    pass


class InvalidTarget(InvalidStateError):
    pass


# Persistence

class PersistenceError(GameError):
    category = ErrorCategory.PERSISTENCE
