"""
Core engine module.

Exports:
- Component, ContentModel: Pydantic data record bases
- EventBus, Event, SessionEvent, UIEvent: Event system
- Action, ActionType: Session actions
- Scheduler, ScheduledTask: Deferred continuations on a virtual clock
"""

from tale_engine.core.component import Component, ContentModel
from tale_engine.core.events import EventBus, Event, SessionEvent, UIEvent
from tale_engine.core.actions import Action, ActionType, FOLLOW_UP_ACTIONS
from tale_engine.core.scheduler import Scheduler, ScheduledTask

__all__ = [
    # Data
    "Component",
    "ContentModel",
    # Events
    "EventBus",
    "Event",
    "SessionEvent",
    "UIEvent",
    # Actions
    "Action",
    "ActionType",
    "FOLLOW_UP_ACTIONS",
    # Scheduling
    "Scheduler",
    "ScheduledTask",
]
