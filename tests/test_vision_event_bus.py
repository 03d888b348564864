"""Tests for the perception event bus."""

from __future__ import annotations

import threading

from vision.detections import Snapshot
from vision.event_bus import SCENE_DESCRIPTION_KIND, PerceptionEvent, PerceptionEventBus


def test_descriptions_coalesce_to_the_latest() -> None:
    bus = PerceptionEventBus()
    first = Snapshot(frame_id=1)
    second = Snapshot(frame_id=2)

    bus.publish_description("first", first)
    bus.publish_description("second", second)

    event = bus.get_next(timeout=0.0)
    assert event is not None
    assert event.kind == SCENE_DESCRIPTION_KIND
    assert event.content == "second"
    assert event.snapshot is second
    assert len(bus) == 0


def test_higher_priority_events_are_delivered_first() -> None:
    bus = PerceptionEventBus()
    bus.publish(PerceptionEvent(kind="status", content="low", priority="low"))
    bus.publish(PerceptionEvent(kind="status", content="urgent", priority="critical"))
    bus.publish(PerceptionEvent(kind="status", content="normal"))

    assert [bus.get_next(timeout=0.0).content for _ in range(3)] == ["urgent", "normal", "low"]


def test_full_bus_drops_the_oldest_event() -> None:
    bus = PerceptionEventBus(maxlen=2)
    for content in ("a", "b", "c"):
        bus.publish(PerceptionEvent(kind="status", content=content))

    assert [event.content for event in bus.drain()] == ["b", "c"]


def test_get_next_times_out_and_wakes_on_publish() -> None:
    bus = PerceptionEventBus()
    assert bus.get_next(timeout=0.01) is None

    timer = threading.Timer(0.05, bus.publish_description, args=("late", Snapshot()))
    timer.start()
    try:
        event = bus.get_next(timeout=2.0)
    finally:
        timer.cancel()

    assert event is not None
    assert event.content == "late"
