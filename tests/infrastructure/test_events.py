import logging
import time
from dataclasses import dataclass

from printcrop.events import Event, EventBus, ImageLoadedEvent


@dataclass(kw_only=True)
class SimpleEvent(Event):
    payload: str = ""


def test_sync_subscribe_publish():
    bus = EventBus()
    received = []

    bus.subscribe(SimpleEvent, lambda event: received.append(event.payload))
    bus.publish(SimpleEvent(payload="hello"))

    assert received == ["hello"]


def test_async_subscribe_publish():
    bus = EventBus()
    received = []

    def handler(event: SimpleEvent):
        time.sleep(0.05)
        received.append(event.payload)

    bus.subscribe(SimpleEvent, handler, async_=True)
    futures = bus.publish(SimpleEvent(payload="world"))
    for future in futures:
        future.result(timeout=5)

    assert received == ["world"]
    bus.shutdown()


def test_unsubscribe_stops_delivery():
    bus = EventBus()
    received = []
    subscription = bus.subscribe(ImageLoadedEvent, received.append)

    bus.publish(ImageLoadedEvent(width=1, height=2))
    bus.unsubscribe(subscription)
    bus.publish(ImageLoadedEvent(width=3, height=4))

    assert [(e.width, e.height) for e in received] == [(1, 2)]


def test_events_are_routed_by_type():
    bus = EventBus()
    received = []
    bus.subscribe(ImageLoadedEvent, received.append)

    bus.publish(SimpleEvent(payload="ignored"))

    assert received == []


def test_failing_handler_does_not_block_others(caplog):
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(SimpleEvent, broken)
    bus.subscribe(SimpleEvent, lambda event: received.append(event.payload))

    with caplog.at_level(logging.ERROR):
        bus.publish(SimpleEvent(payload="still delivered"))

    assert received == ["still delivered"]
    assert "Sync handler failed" in caplog.text
