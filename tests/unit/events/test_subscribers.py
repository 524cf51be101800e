"""Tests for EventDispatcher.subscribe and declarative subscribers."""

from unittest.mock import Mock

import pytest

from courier import DeclarativeSubscriber, EventDispatcher, EventSubscriber, InvalidHandler, listens_to
from tests.fixtures.widgets import (
    AuditLog,
    InvoicePaid,
    WidgetAuditSubscriber,
    WidgetCreated,
    WidgetRenamed,
)


class BillingSubscriber:
    def __init__(self) -> None:
        self.seen = []

    def subscribe(self, dispatcher: EventDispatcher) -> None:
        dispatcher.listen("tests.fixtures.widgets.billing.*", self.seen.append)
        dispatcher.listen(WidgetCreated, self.seen.append)


class LoudAuditSubscriber(WidgetAuditSubscriber):
    @listens_to
    def on_created(self, event: WidgetCreated) -> None:
        self.log.entries.append(f"CREATED {event.name.upper()}")


def test_subscribe_instance_lets_it_register_listeners():
    dispatcher = EventDispatcher()
    subscriber = BillingSubscriber()

    assert dispatcher.subscribe(subscriber) is dispatcher
    dispatcher.dispatch(InvoicePaid(invoice_id=1, amount=5))
    dispatcher.dispatch(WidgetCreated(widget_id=1, name="foo"))

    assert [type(e) for e in subscriber.seen] == [InvoicePaid, WidgetCreated]


def test_subscribe_class_resolves_it_once():
    instance = BillingSubscriber()
    resolver = Mock(return_value=instance)
    dispatcher = EventDispatcher(resolver)

    dispatcher.subscribe(BillingSubscriber)
    dispatcher.dispatch(WidgetCreated(widget_id=1, name="foo"))
    dispatcher.dispatch(WidgetCreated(widget_id=2, name="bar"))

    resolver.assert_called_once_with(BillingSubscriber)
    assert len(instance.seen) == 2


def test_subscribe_rejects_objects_without_subscribe():
    with pytest.raises(InvalidHandler):
        EventDispatcher().subscribe(object())


def test_subscriber_protocol_is_structural():
    assert isinstance(BillingSubscriber(), EventSubscriber)
    assert not isinstance(object(), EventSubscriber)


def test_declarative_subscriber_registers_decorated_methods():
    log = AuditLog()
    dispatcher = EventDispatcher().subscribe(WidgetAuditSubscriber(log))

    dispatcher.dispatch(WidgetCreated(widget_id=1, name="foo"))
    dispatcher.dispatch(WidgetRenamed(widget_id=1, old_name="foo", new_name="bar"))

    assert log.entries == ["created foo", "renamed foo to bar"]


def test_declarative_subscriber_overrides_replace_base_listener():
    log = AuditLog()
    dispatcher = EventDispatcher().subscribe(LoudAuditSubscriber(log))

    dispatcher.dispatch(WidgetCreated(widget_id=1, name="foo"))
    dispatcher.dispatch(WidgetRenamed(widget_id=1, old_name="foo", new_name="bar"))

    assert log.entries == ["CREATED FOO", "renamed foo to bar"]


def test_declarative_subscriber_without_listeners_registers_nothing():
    dispatcher = EventDispatcher().subscribe(DeclarativeSubscriber())

    assert dispatcher.listeners() == {}
