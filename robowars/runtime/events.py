"""In-process event bus keyed by event class."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

TEvent = TypeVar("TEvent")
EventHandler = Callable[[Any], None]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Subscription:
    """Token returned by `EventBus.subscribe`."""

    id: int
    event_type: type[object]


class EventBus:
    """Dispatches events to handlers registered for their class or a base class.

    Handlers run synchronously in subscription order.
    """

    def __init__(self) -> None:
        self._next_id = 1
        self._handlers: dict[type[object], dict[int, EventHandler]] = {}

    @property
    def subscription_count(self) -> int:
        return sum(len(handlers) for handlers in self._handlers.values())

    def subscribe(
        self,
        event_type: type[TEvent],
        handler: Callable[[TEvent], None],
    ) -> Subscription:
        subscription = Subscription(self._next_id, event_type)
        self._next_id += 1
        self._handlers.setdefault(event_type, {})[subscription.id] = handler
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription; unknown tokens are ignored."""
        handlers = self._handlers.get(subscription.event_type)
        if handlers is None:
            return
        handlers.pop(subscription.id, None)
        if not handlers:
            del self._handlers[subscription.event_type]

    def publish(self, event: object) -> int:
        """Deliver one event and return the number of handlers invoked."""
        matched: list[tuple[int, EventHandler]] = []
        for event_type in type(event).__mro__:
            handlers = self._handlers.get(event_type)
            if handlers:
                matched.extend(handlers.items())
        matched.sort(key=lambda item: item[0])
        for _, handler in matched:
            handler(event)
        logger.debug("event_published type=%s handlers=%d", type(event).__name__, len(matched))
        return len(matched)
