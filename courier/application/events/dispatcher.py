"""Synchronous event dispatcher with exact and wildcard listeners."""

import logging
from collections.abc import Iterable
from typing import Any

from typing_extensions import Self

from ...context import get_context, reset_context, set_context
from ...domain import Event, InvalidHandler, qualified_name
from ..handlers import Resolver, construct
from .listeners import WILDCARD, ListenerReference, WildcardListeners

LOGGER = logging.getLogger(__name__)

EventKey = type | str


def _key_for(event: EventKey) -> str:
    return event if isinstance(event, str) else qualified_name(event)


class EventDispatcher:
    """Fans events out to every matching listener on the calling thread.

    Listeners are keyed either by an event class, stored under its
    fully-qualified type name (``module.QualName``), or by a string. A
    string containing ``*`` is a wildcard pattern matched against that
    name, where ``*`` spans any characters including dots.

    For each event, exact listeners run first in registration order, then
    the listeners of every matching pattern, patterns in registration
    order. Nothing is deduplicated, so a listener registered under both an
    exact key and a matching pattern runs twice. A listener that raises
    aborts the remaining listeners and the error propagates to the caller.

    Args:
        resolver: Function used to instantiate listener and subscriber
            classes. Without one they must be default-constructible.

    Examples:
        >>> dispatcher = EventDispatcher(container.resolve)
        >>> dispatcher.listen(WidgetCreated, SendWelcomeMail)
        >>> dispatcher.listen("shop.billing.*", audit_log.append)
        >>> dispatcher.dispatch(WidgetCreated(name="foo"))
    """

    def __init__(self, resolver: Resolver | None = None):
        self.resolver = resolver
        self._listeners: dict[str, list[ListenerReference]] = {}
        self._wildcards: dict[str, WildcardListeners] = {}

    def listen(self, event: EventKey, listener: Any) -> Self:
        """Register a listener for an event class, type name or pattern.

        Args:
            event: The event class, its fully-qualified name, or a pattern
                containing ``*``.
            listener: A callable taking the event, a listener class
                (resolved on every dispatch) or an object with ``handle``.

        Returns:
            The dispatcher, for chaining.

        Raises:
            InvalidHandler: If the listener offers none of those forms.
        """
        reference = ListenerReference.of(listener)
        key = _key_for(event)
        if WILDCARD in key:
            if key not in self._wildcards:
                self._wildcards[key] = WildcardListeners(key)
            self._wildcards[key].listeners.append(reference)
        else:
            self._listeners.setdefault(key, []).append(reference)
        return self

    def subscribe(self, subscriber: Any) -> Self:
        """Let a subscriber register its listeners.

        Args:
            subscriber: An EventSubscriber instance or class. Classes are
                resolved once, here.

        Returns:
            The dispatcher, for chaining.
        """
        if isinstance(subscriber, type):
            subscriber = construct(subscriber, self.resolver)
        subscribe = getattr(subscriber, "subscribe", None)
        if not callable(subscribe):
            raise InvalidHandler.for_value(subscriber, None, "a subscribe(dispatcher) method")
        subscribe(self)
        return self

    def dispatch(self, event: Any) -> None:
        """Invoke every listener matching the event's type.

        While listeners run, an Event becomes the causation of the execution
        context, so commands dispatched from listeners trace back to it.

        Raises:
            Exception: Whatever the first failing listener raised.
        """
        listeners = self._matching(qualified_name(type(event)))
        if not listeners:
            return

        token = None
        if isinstance(event, Event):
            token = set_context(get_context().for_event(event.event_id))
        try:
            for reference in listeners:
                try:
                    reference.invoke(event, self.resolver)
                except Exception:
                    LOGGER.debug(
                        "Event listener failed",
                        extra={"event_type": type(event).__name__, "listener": repr(reference)},
                        exc_info=True,
                    )
                    raise
        finally:
            if token is not None:
                reset_context(token)

    def dispatch_all(self, events: Iterable[Any]) -> None:
        """Dispatch each event in turn."""
        for event in events:
            self.dispatch(event)

    def has_listeners(self, event: EventKey) -> bool:
        """Check whether dispatching ``event`` would reach any listener."""
        key = _key_for(event)
        if WILDCARD in key:
            return bool(key in self._wildcards and self._wildcards[key].listeners)
        return bool(self._matching(key))

    def forget(self, event: EventKey | None = None) -> Self:
        """Remove listeners.

        With an event, only its exact listeners are removed; wildcard
        patterns that match it keep firing. Without one, every listener
        is removed.

        Returns:
            The dispatcher, for chaining.
        """
        if event is None:
            self._listeners.clear()
            self._wildcards.clear()
        else:
            self._listeners.pop(_key_for(event), None)
        return self

    def listeners(self) -> dict[str, list[Any]]:
        """Snapshot of exact listeners by type name, as they were registered."""
        return {
            key: [reference.listener for reference in references]
            for key, references in self._listeners.items()
        }

    def _matching(self, type_name: str) -> tuple[ListenerReference, ...]:
        # Copied so listeners may register further listeners while running
        matched = list(self._listeners.get(type_name, ()))
        for wildcard in self._wildcards.values():
            if wildcard.matches(type_name):
                matched.extend(wildcard.listeners)
        return tuple(matched)
