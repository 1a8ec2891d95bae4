"""Event Bus — pub/sub with wildcard matching.

Both the reasoning engine and the synergy control loop publish here.
Delivery is fire-and-forget: handler failures are swallowed by the
fan-out and never reach the emitter. Subscribe to "emergent_*" to get
every emergence event, or to "*" for everything.
"""

from __future__ import annotations

import asyncio
import fnmatch
from collections import defaultdict, deque
from datetime import datetime
from typing import Any, Callable, Awaitable

from pydantic import BaseModel, Field

from synergos.types import new_id

EventHandler = Callable[["Event"], Awaitable[None]]

# A (topic, data) pair collected inside a critical section, emitted after it.
PendingEvent = tuple[str, dict[str, Any]]


class Event(BaseModel):
    """A system event."""

    id: str = Field(default_factory=new_id)
    topic: str
    data: dict[str, Any] = Field(default_factory=dict)
    source: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)


class EventBus:
    """Async pub/sub event bus with wildcard topic matching."""

    def __init__(self, history_limit: int = 500) -> None:
        self._subscribers: dict[str, list[EventHandler]] = defaultdict(list)
        self._history: deque[Event] = deque(maxlen=history_limit)

    def subscribe(self, pattern: str, handler: EventHandler) -> None:
        """Subscribe to events matching a topic pattern."""
        self._subscribers[pattern].append(handler)

    def unsubscribe(self, pattern: str, handler: EventHandler) -> None:
        """Remove a subscription."""
        handlers = self._subscribers.get(pattern, [])
        if handler in handlers:
            handlers.remove(handler)

    async def emit(self, topic: str, data: dict | None = None, source: str = "") -> Event:
        """Emit an event to all matching subscribers."""
        event = Event(topic=topic, data=data or {}, source=source)

        self._history.append(event)

        handlers = self.handlers_for(topic)
        if handlers:
            await asyncio.gather(*(h(event) for h in handlers), return_exceptions=True)

        return event

    def handlers_for(self, topic: str) -> list[EventHandler]:
        """Every handler whose pattern matches the topic, in subscription order."""
        return [
            handler
            for pattern, handlers in self._subscribers.items()
            if fnmatch.fnmatch(topic, pattern)
            for handler in handlers
        ]

    async def emit_all(self, events: list[PendingEvent], source: str = "") -> None:
        """Emit a batch of pending events in order."""
        for topic, data in events:
            await self.emit(topic, data, source=source)

    def history(self, topic_filter: str = "*", limit: int = 50) -> list[Event]:
        """Get recent events (newest first), optionally filtered by topic pattern."""
        matching = [e for e in reversed(self._history) if fnmatch.fnmatch(e.topic, topic_filter)]
        return matching[:limit]

    @property
    def subscriber_count(self) -> int:
        return sum(len(h) for h in self._subscribers.values())

    def topics(self) -> list[str]:
        """Distinct topics still in the retained history, oldest first."""
        return list(dict.fromkeys(e.topic for e in self._history))
