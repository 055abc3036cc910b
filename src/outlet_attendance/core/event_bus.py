from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Protocol, Type

from .aggregate import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class EventPublisher(Protocol):
    def publish_all(self, events: Iterable[DomainEvent]) -> None:
        raise NotImplementedError


class InMemoryEventBus(EventPublisher):
    """In-process publish/subscribe.

    Delivery is best-effort: a failing subscriber is logged and skipped, it never
    propagates back into the command that already committed its state change.
    A handler subscribed to ``DomainEvent`` receives every event.
    """

    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        handlers = self._handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: DomainEvent) -> None:
        for event_type in type(event).__mro__:
            for handler in list(self._handlers.get(event_type, [])):
                try:
                    handler(event)
                except Exception:
                    logger.exception("Error handling event %s", event.event_name)

    def publish_all(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            self.publish(event)

    def subscriber_count(self, event_type: Type[DomainEvent]) -> int:
        return len(self._handlers.get(event_type, []))

    def clear(self) -> None:
        self._handlers.clear()
