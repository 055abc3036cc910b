from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class DomainEvent:
    """Immutable fact raised by an aggregate.

    Subclasses declare their identifier fields followed by ``occurred_at``.
    """

    @property
    def event_name(self) -> str:
        return type(self).__name__


class AggregateRoot:
    """Buffers domain events in raise order until the caller drains them."""

    def __init__(self):
        self._events: List[DomainEvent] = []

    def raise_event(self, event: DomainEvent) -> DomainEvent:
        self._events.append(event)
        return event

    def get_uncommitted_events(self) -> List[DomainEvent]:
        return list(self._events)

    def clear_events(self) -> None:
        self._events = []

    def mark_events_as_committed(self) -> None:
        self.clear_events()

    def pull_events(self) -> List[DomainEvent]:
        """Snapshot and clear in one step (used by handlers after the state write)."""
        events = self.get_uncommitted_events()
        self.clear_events()
        return events
