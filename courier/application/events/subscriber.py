"""Subscribers register several listeners with a dispatcher at once."""

from types import MethodType
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ...routing import listens_to

if TYPE_CHECKING:
    from .dispatcher import EventDispatcher


@runtime_checkable
class EventSubscriber(Protocol):
    """Protocol for objects that register their own listeners.

    Example:
        >>> class WidgetAuditSubscriber:
        ...     def subscribe(self, dispatcher: EventDispatcher) -> None:
        ...         dispatcher.listen(WidgetCreated, self.on_created)
        ...         dispatcher.listen("shop.widgets.*", self.on_any)
    """

    def subscribe(self, dispatcher: "EventDispatcher") -> None:
        """Register event listeners with the dispatcher."""
        ...


class DeclarativeSubscriber:
    """Subscriber whose listeners are its @listens_to methods.

    Each decorated method is registered for the event type named in its
    annotation, in definition order.

    Example:
        >>> class WidgetNotifications(DeclarativeSubscriber):
        ...     def __init__(self, mailer: Mailer):
        ...         self.mailer = mailer
        ...
        ...     @listens_to
        ...     def on_created(self, event: WidgetCreated) -> None:
        ...         self.mailer.send(f"Widget {event.name} created")
        >>>
        >>> dispatcher.subscribe(WidgetNotifications)
    """

    def subscribe(self, dispatcher: "EventDispatcher") -> None:
        for event_type, method in listens_to.marked_methods(type(self)):
            dispatcher.listen(event_type, MethodType(method, self))
