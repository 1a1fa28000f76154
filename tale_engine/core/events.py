"""
Typed event bus for decoupled communication.

Uses Enums for event types to prevent magic strings. The session core
publishes what happened (scene entered, log appended, combat ended) and
the presentation layer subscribes instead of polling state.

Usage:
    bus.subscribe(SessionEvent.LOG_APPENDED, on_log)
    bus.publish(SessionEvent.LOG_APPENDED, entry=entry)
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable

logger = logging.getLogger(__name__)


class SessionEvent(Enum):
    """Events published by the game session."""
    SCRIPT_LOADED = auto()
    SESSION_RESET = auto()
    SCENE_ENTERED = auto()
    LOG_APPENDED = auto()
    COMBAT_STARTED = auto()
    COMBAT_ENDED = auto()
    LEVEL_UP = auto()
    SKILL_LEARNED = auto()
    GAME_OVER = auto()
    GAME_COMPLETED = auto()


class UIEvent(Enum):
    """Panel state changes the presentation layer may react to."""
    SHOP_OPENED = auto()
    SHOP_CLOSED = auto()
    DELEGATION_TOGGLED = auto()


@dataclass
class Event:
    """
    One published occurrence.

    Attributes:
        type: Enum member identifying what happened
        data: Keyword payload given to publish()
        consumed: Set by a handler to stop lower-priority handlers
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]


@dataclass(eq=False)
class _Subscription:
    handler: EventHandler
    priority: int = 0
    one_shot: bool = False


class EventBus:
    """
    Publish/subscribe hub between the session and its observers.

    Handlers run in descending priority, ties in subscription order. A
    handler may consume the event to stop later handlers, or subscribe
    one-shot to be dropped after its first call. Publishing from inside a
    handler queues the new event until the current dispatch finishes, so
    observers always see events in the order they happened.
    """

    def __init__(self):
        self._subscriptions: dict[Enum, list[_Subscription]] = {}
        self._pending: deque[Event] = deque()
        self._dispatching = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
    ) -> None:
        """
        Register a handler for one event type.

        Args:
            event_type: Enum member to listen for
            handler: Called with the Event
            priority: Higher runs earlier
            one_shot: Drop the handler after it has run once
        """
        subs = self._subscriptions.setdefault(event_type, [])
        position = next(
            (i for i, sub in enumerate(subs) if priority > sub.priority),
            len(subs),
        )
        subs.insert(position, _Subscription(handler, priority, one_shot))

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        subs = self._subscriptions.get(event_type)
        if subs:
            subs[:] = [sub for sub in subs if sub.handler != handler]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Build and deliver an event.

        Returns:
            The Event, so callers can check whether it was consumed
        """
        event = Event(type=event_type, data=data)
        self.publish_event(event)
        return event

    def publish_event(self, event: Event) -> None:
        self._pending.append(event)
        if self._dispatching:
            return

        self._dispatching = True
        try:
            while self._pending:
                self._deliver(self._pending.popleft())
        finally:
            self._dispatching = False

    def clear(self, event_type: Enum | None = None) -> None:
        """Drop the handlers of one event type, or of every type."""
        if event_type is None:
            self._subscriptions.clear()
        else:
            self._subscriptions.pop(event_type, None)

    def handler_count(self, event_type: Enum) -> int:
        return len(self._subscriptions.get(event_type, []))

    def _deliver(self, event: Event) -> None:
        subs = self._subscriptions.get(event.type)
        if not subs:
            return

        for sub in list(subs):
            if sub.one_shot and sub in subs:
                subs.remove(sub)
            try:
                sub.handler(event)
            except Exception:
                logger.exception(f"Event handler {sub.handler!r} failed on {event.type.name}")
            if event.consumed:
                break
