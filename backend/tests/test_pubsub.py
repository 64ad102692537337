"""Tests for the listener registry and subscription handles."""
from rsvp.pubsub import Listeners


def test_emit_in_registration_order():
    listeners = Listeners()
    seen = []
    listeners.add(lambda v: seen.append(("a", v)))
    listeners.add(lambda v: seen.append(("b", v)))
    listeners.emit(1)
    assert seen == [("a", 1), ("b", 1)]


def test_same_callback_twice_needs_two_closes():
    listeners = Listeners()
    seen = []
    first = listeners.add(seen.append)
    listeners.add(seen.append)
    first.close()
    listeners.emit("x")
    assert seen == ["x"]
    assert len(listeners) == 1


def test_listener_may_unsubscribe_during_emit():
    listeners = Listeners()
    seen = []
    handle = None

    def once(value):
        seen.append(value)
        handle.close()

    handle = listeners.add(once)
    listeners.emit(1)
    listeners.emit(2)
    assert seen == [1]
