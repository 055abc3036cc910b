from __future__ import annotations

import logging
from dataclasses import dataclass

from outlet_attendance.core.aggregate import AggregateRoot, DomainEvent
from outlet_attendance.core.event_bus import InMemoryEventBus


@dataclass(frozen=True)
class Pinged(DomainEvent):
    n: int


@dataclass(frozen=True)
class Ponged(DomainEvent):
    n: int


def test_subscribers_receive_their_type_only():
    bus = InMemoryEventBus()
    pings, pongs = [], []
    bus.subscribe(Pinged, pings.append)
    bus.subscribe(Ponged, pongs.append)

    bus.publish_all([Pinged(1), Ponged(2), Pinged(3)])

    assert [e.n for e in pings] == [1, 3]
    assert [e.n for e in pongs] == [2]


def test_base_type_subscriber_receives_everything():
    bus = InMemoryEventBus()
    seen = []
    bus.subscribe(DomainEvent, seen.append)

    bus.publish(Pinged(1))
    bus.publish(Ponged(2))

    assert [e.event_name for e in seen] == ["Pinged", "Ponged"]


def test_failing_subscriber_is_logged_and_isolated(caplog):
    bus = InMemoryEventBus()
    seen = []

    def boom(event):
        raise RuntimeError("nope")

    bus.subscribe(Pinged, boom)
    bus.subscribe(Pinged, seen.append)

    with caplog.at_level(logging.ERROR, logger="outlet_attendance"):
        bus.publish(Pinged(1))

    assert seen == [Pinged(1)]
    assert "Error handling event Pinged" in caplog.text


def test_subscribe_is_idempotent_and_unsubscribe_works():
    bus = InMemoryEventBus()
    bus.subscribe(Pinged, print)
    bus.subscribe(Pinged, print)
    assert bus.subscriber_count(Pinged) == 1

    bus.unsubscribe(Pinged, print)
    assert bus.subscriber_count(Pinged) == 0

    bus.subscribe(Ponged, print)
    bus.clear()
    assert bus.subscriber_count(Ponged) == 0


def test_aggregate_root_buffers_in_order():
    root = AggregateRoot()
    first = root.raise_event(Pinged(1))
    root.raise_event(Ponged(2))

    snapshot = root.get_uncommitted_events()
    snapshot.clear()
    assert root.get_uncommitted_events()[0] is first

    root.mark_events_as_committed()
    assert root.pull_events() == []
