"""Tests for the subscription hub."""

from unittest.mock import MagicMock

from music_sheets.domain.sheets.events import SubscriptionHub


def test_notify_calls_every_listener_once():
    hub = SubscriptionHub()
    listeners = [MagicMock() for _ in range(4)]
    for listener in listeners:
        hub.subscribe(listener)

    hub.notify()

    for listener in listeners:
        listener.assert_called_once_with()


def test_unsubscribe_handle_removes_only_that_listener():
    hub = SubscriptionHub()
    first, second = MagicMock(), MagicMock()
    unsubscribe_first = hub.subscribe(first)
    hub.subscribe(second)

    unsubscribe_first()
    hub.notify()

    first.assert_not_called()
    second.assert_called_once_with()


def test_unsubscribe_handle_is_idempotent():
    hub = SubscriptionHub()
    listener = MagicMock()
    unsubscribe = hub.subscribe(listener)

    unsubscribe()
    unsubscribe()

    assert len(hub) == 0


def test_duplicate_registration_notifies_once():
    hub = SubscriptionHub()
    listener = MagicMock()
    hub.subscribe(listener)
    hub.subscribe(listener)

    hub.notify()

    assert len(hub) == 1
    listener.assert_called_once_with()


def test_listeners_called_in_registration_order():
    hub = SubscriptionHub()
    calls = []
    hub.subscribe(lambda: calls.append("first"))
    hub.subscribe(lambda: calls.append("second"))
    hub.subscribe(lambda: calls.append("third"))

    hub.notify()

    assert calls == ["first", "second", "third"]


def test_failing_listener_does_not_stop_broadcast():
    hub = SubscriptionHub()
    broken = MagicMock(side_effect=RuntimeError("boom"))
    healthy = MagicMock()
    hub.subscribe(broken)
    hub.subscribe(healthy)

    hub.notify()

    broken.assert_called_once_with()
    healthy.assert_called_once_with()


def test_listener_may_unsubscribe_during_notify():
    hub = SubscriptionHub()
    other = MagicMock()
    handles = {}

    def once():
        handles["once"]()

    handles["once"] = hub.subscribe(once)
    hub.subscribe(other)

    hub.notify()
    hub.notify()

    assert len(hub) == 1
    assert other.call_count == 2
