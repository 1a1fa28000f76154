"""
Deferred action scheduler on a virtual clock.

Pacing in the session (enemy turns, post-defeat transitions, post-victory
advancement, delegated attacks) is expressed as one-shot continuations:
"run this action after at least `delay` seconds". The scheduler never
calls game code on its own; the owner advances the clock with
`advance(dt, fire)` from its update loop, the same way a fixed-timestep
game loop feeds `dt` to its systems.

Guards are the owner's business: a fired action re-checks state when it
runs and becomes a no-op if the world moved on. The scheduler only
offers suppression of not-yet-fired tasks through keys.

Usage:
    scheduler.schedule(1.5, action, key="safe_transition")
    scheduler.advance(dt, session.dispatch)
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Any, Callable, Optional


@dataclass(order=True)
class ScheduledTask:
    """A pending continuation. Ordered by due time, then insertion order."""
    due: float
    seq: int
    action: Any = field(compare=False)
    key: Optional[str] = field(default=None, compare=False)
    cancelled: bool = field(default=False, compare=False)


class Scheduler:
    """
    Min-heap of scheduled tasks driven by an explicit clock.

    - `schedule` with a key replaces any pending task under that key
    - `cancel` suppresses the next firing for a key
    - tasks scheduled while advancing fire in the same call if they fall
      inside the advanced window
    """

    def __init__(self):
        self._now = 0.0
        self._heap: list[ScheduledTask] = []
        self._keyed: dict[str, ScheduledTask] = {}
        self._counter = itertools.count()

    @property
    def now(self) -> float:
        """Current virtual time in seconds."""
        return self._now

    def schedule(
        self,
        delay: float,
        action: Any,
        key: Optional[str] = None,
    ) -> ScheduledTask:
        """
        Schedule an action to become due after `delay` seconds.

        Args:
            delay: Seconds from now (negative values are treated as 0)
            action: Opaque payload handed back on firing
            key: Optional replacement/cancellation key

        Returns:
            The scheduled task
        """
        if key is not None:
            self.cancel(key)

        task = ScheduledTask(
            due=self._now + max(0.0, delay),
            seq=next(self._counter),
            action=action,
            key=key,
        )
        heapq.heappush(self._heap, task)
        if key is not None:
            self._keyed[key] = task
        return task

    def cancel(self, key: str) -> bool:
        """Suppress the pending task under `key`. Returns True if one existed."""
        task = self._keyed.pop(key, None)
        if task is None:
            return False
        task.cancelled = True
        return True

    def cancel_all(self) -> None:
        """Drop every pending task."""
        for task in self._heap:
            task.cancelled = True
        self._heap.clear()
        self._keyed.clear()

    def is_scheduled(self, key: str) -> bool:
        return key in self._keyed

    @property
    def pending(self) -> list[ScheduledTask]:
        """Live tasks in firing order."""
        return sorted(t for t in self._heap if not t.cancelled)

    def next_due(self) -> Optional[float]:
        """Due time of the next live task, if any."""
        live = self.pending
        return live[0].due if live else None

    def advance(self, dt: float, fire: Callable[[Any], None]) -> int:
        """
        Move the clock forward and fire every task that falls due.

        Each task runs to completion before the next one is popped, so a
        fired action may schedule or cancel further tasks.

        Args:
            dt: Seconds to advance
            fire: Callback receiving each due task's action

        Returns:
            Number of tasks fired
        """
        target = self._now + max(0.0, dt)
        fired = 0

        while self._heap and self._heap[0].due <= target:
            task = heapq.heappop(self._heap)
            if task.cancelled:
                continue
            if task.key is not None and self._keyed.get(task.key) is task:
                del self._keyed[task.key]

            self._now = task.due
            fire(task.action)
            fired += 1

        self._now = target
        return fired
