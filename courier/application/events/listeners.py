"""Listener references held by the EventDispatcher.

Like bus handlers, listeners are classified once, when they are
registered:

- CallableListener: a function or any other callable taking the event
- InstanceListener: an object exposing ``handle(event)``
- FactoryListener: a listener class, resolved anew for every event
"""

import re
from abc import ABC, abstractmethod
from typing import Any

from ...domain import InvalidHandler
from ..handlers import Resolver, construct

WILDCARD = "*"


def compile_wildcard(pattern: str) -> re.Pattern[str]:
    """Convert a wildcard pattern to a regular expression.

    ``*`` matches any run of characters, including the ``.`` separating
    module and class names. Everything else is literal. Use with
    ``fullmatch`` so the pattern is anchored at both ends.
    """
    return re.compile(re.escape(pattern).replace(re.escape(WILDCARD), ".*"))


def _call_listener(listener: Any, event: Any) -> None:
    if callable(listener):
        listener(event)
    elif callable(getattr(listener, "handle", None)):
        listener.handle(event)
    else:
        raise InvalidHandler.for_value(listener, type(event), "__call__(event) or handle(event)")


class ListenerReference(ABC):
    __slots__ = ("listener",)

    def __init__(self, listener: Any):
        self.listener = listener

    @staticmethod
    def of(listener: Any) -> "ListenerReference":
        """Classify a listener value.

        Raises:
            InvalidHandler: If the value is neither a class, a callable nor
                an object with a ``handle`` method.
        """
        if isinstance(listener, ListenerReference):
            return listener
        if isinstance(listener, type):
            return FactoryListener(listener)
        if callable(listener):
            return CallableListener(listener)
        if callable(getattr(listener, "handle", None)):
            return InstanceListener(listener)
        raise InvalidHandler.for_value(listener, None, "__call__(event) or handle(event)")

    @abstractmethod
    def invoke(self, event: Any, resolver: Resolver | None) -> None: ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.listener!r})"


class CallableListener(ListenerReference):
    __slots__ = ()

    def invoke(self, event: Any, resolver: Resolver | None) -> None:
        self.listener(event)


class InstanceListener(ListenerReference):
    __slots__ = ()

    def invoke(self, event: Any, resolver: Resolver | None) -> None:
        self.listener.handle(event)


class FactoryListener(ListenerReference):
    """Listener class instantiated through the resolver on every invocation."""

    __slots__ = ()

    def invoke(self, event: Any, resolver: Resolver | None) -> None:
        _call_listener(construct(self.listener, resolver, type(event)), event)


class WildcardListeners:
    """Listeners registered under one wildcard pattern."""

    __slots__ = ("pattern", "regex", "listeners")

    def __init__(self, pattern: str):
        self.pattern = pattern
        self.regex = compile_wildcard(pattern)
        self.listeners: list[ListenerReference] = []

    def matches(self, type_name: str) -> bool:
        return self.regex.fullmatch(type_name) is not None
