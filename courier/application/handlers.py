"""Handler registration and resolution shared by the command and query buses.

A registration is turned into one of three handler references when it is
registered, so dispatch never has to guess what kind of value it holds:

- InstanceHandler: an object exposing ``handle(message)``
- FactoryHandler: a handler class, instantiated through the resolver
- InlineHandler: a plain callable taking the message

Unregistered message types may fall back to a conventional handler class
named after the message (``CreateWidget`` -> ``CreateWidgetHandler``).
Once found, that class is cached as a FactoryHandler and behaves exactly
like an explicit registration.
"""

import importlib
import logging
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from types import ModuleType
from typing import Any, Protocol, runtime_checkable

from ..domain.exceptions import HandlerNotFound, HandlerResolutionFailed, InvalidHandler

LOGGER = logging.getLogger(__name__)

# Constructs an instance from a class; usually DependencyContainer.resolve
Resolver = Callable[[type[Any]], Any]


@runtime_checkable
class MessageHandler(Protocol):
    """Capability of anything that can process a command or query."""

    def handle(self, message: Any) -> Any: ...


def construct(cls: type, resolver: Resolver | None, message_type: type | None = None) -> Any:
    """Instantiate a handler or listener class.

    Without a resolver the class must be default-constructible.

    Args:
        cls: The class to instantiate.
        resolver: Optional resolver function (type -> instance).
        message_type: The message being dispatched, for error reporting.

    Raises:
        HandlerResolutionFailed: If the resolver or constructor raises.
    """
    try:
        if resolver is not None:
            return resolver(cls)
        return cls()
    except Exception as e:
        raise HandlerResolutionFailed.for_type(cls, message_type) from e


def _is_handler(value: object) -> bool:
    return isinstance(value, MessageHandler) and callable(value.handle)


class HandlerReference(ABC):
    """A registered handler, tagged by how it is turned into a MessageHandler."""

    __slots__ = ()

    @staticmethod
    def of(handler: Any) -> "HandlerReference":
        """Classify a registration value.

        Classes become factories, objects with ``handle`` become instances
        and remaining callables become inline handlers. Anything else is
        kept as an instance and reported as InvalidHandler on dispatch.
        """
        if isinstance(handler, HandlerReference):
            return handler
        if isinstance(handler, type):
            return FactoryHandler(handler)
        if _is_handler(handler):
            return InstanceHandler(handler)
        if callable(handler):
            return InlineHandler(handler)
        return InstanceHandler(handler)

    @abstractmethod
    def resolve(self, message_type: type, resolver: Resolver | None) -> MessageHandler:
        """Produce the handler that processes ``message_type``."""
        ...


class InstanceHandler(HandlerReference):
    __slots__ = ("handler",)

    def __init__(self, handler: Any):
        self.handler = handler

    def resolve(self, message_type: type, resolver: Resolver | None) -> MessageHandler:
        if not _is_handler(self.handler):
            raise InvalidHandler.for_value(self.handler, message_type, "a handle(message) method")
        return self.handler

    def __repr__(self) -> str:
        return f"InstanceHandler({self.handler!r})"


class FactoryHandler(HandlerReference):
    """Handler class resolved into a fresh instance on every dispatch.

    Instance lifetime is left to the resolver; a container may hand out
    singletons.
    """

    __slots__ = ("handler_type",)

    def __init__(self, handler_type: type):
        self.handler_type = handler_type

    def resolve(self, message_type: type, resolver: Resolver | None) -> MessageHandler:
        instance = construct(self.handler_type, resolver, message_type)
        if not _is_handler(instance):
            raise InvalidHandler.for_value(instance, message_type, "a handle(message) method")
        return instance

    def __repr__(self) -> str:
        return f"FactoryHandler({self.handler_type.__name__})"


class InlineHandler(HandlerReference):
    """Adapts a plain callable to the handler capability."""

    __slots__ = ("fn",)

    def __init__(self, fn: Callable[[Any], Any]):
        self.fn = fn

    def handle(self, message: Any) -> Any:
        return self.fn(message)

    def resolve(self, message_type: type, resolver: Resolver | None) -> MessageHandler:
        return self

    def __repr__(self) -> str:
        return f"InlineHandler({self.fn!r})"


class HandlerConvention:
    """Finds a handler class named after the message class.

    The message's own module is searched first, then ``modules`` in order.
    A candidate only counts if it is a class with a callable ``handle``.

    Examples:
        >>> convention = HandlerConvention(modules=["shop.handlers"])
        >>> convention.find(CreateWidget)
        <class 'shop.handlers.CreateWidgetHandler'>
    """

    __slots__ = ("suffix", "modules", "_unimportable")

    def __init__(self, suffix: str = "Handler", modules: Iterable[str] = ()):
        self.suffix = suffix
        self.modules = tuple(modules)
        self._unimportable: set[str] = set()

    def handler_name(self, message_type: type) -> str:
        return message_type.__name__ + self.suffix

    def _try_import_module(self, module_name: str) -> ModuleType | None:
        module = sys.modules.get(module_name)
        if module is not None or module_name in self._unimportable:
            return module
        try:
            return importlib.import_module(module_name)
        except ImportError:
            # Warned once; later lookups skip the module silently
            self._unimportable.add(module_name)
            LOGGER.warning(
                "Handler module could not be imported",
                extra={"module_name": module_name},
            )
            return None

    def find(self, message_type: type) -> type | None:
        """Return the conventional handler class, or None.

        Modules that are missing are skipped. Any other error raised while
        importing a module propagates.
        """
        name = self.handler_name(message_type)
        for module_name in (message_type.__module__, *self.modules):
            module = self._try_import_module(module_name)
            candidate = getattr(module, name, None)
            if isinstance(candidate, type) and callable(getattr(candidate, "handle", None)):
                return candidate
        return None


class HandlerRegistry:
    """Maps message types to exactly one handler reference each.

    Lookup is by the exact runtime type of the message. Re-registering a
    type replaces the previous entry.

    Args:
        kind: Message kind used in error messages ("command", "query").
        resolver: Optional resolver used to instantiate handler classes.
        convention: Optional convention for unregistered message types.
    """

    def __init__(
        self,
        kind: str,
        resolver: Resolver | None = None,
        convention: HandlerConvention | None = None,
    ):
        self.kind = kind
        self.resolver = resolver
        self.convention = convention
        self._handlers: dict[type, HandlerReference] = {}

    def register(self, message_type: type, handler: Any) -> None:
        self._handlers[message_type] = HandlerReference.of(handler)

    def __contains__(self, message_type: object) -> bool:
        return message_type in self._handlers

    def registrations(self) -> dict[type, HandlerReference]:
        """Snapshot of the current entries, including cached conventional ones."""
        return dict(self._handlers)

    def lookup(self, message_type: type) -> HandlerReference:
        """Find the registration for a message type.

        Raises:
            HandlerNotFound: If there is neither an explicit registration
                nor a conventional handler class.
            HandlerResolutionFailed: If importing a module searched by the
                convention raised.
        """
        reference = self._handlers.get(message_type)
        if reference is not None:
            return reference
        if self.convention is None:
            raise HandlerNotFound.for_message(self.kind, message_type)

        try:
            handler_type = self.convention.find(message_type)
        except Exception as e:
            raise HandlerResolutionFailed.for_lookup(message_type) from e
        if handler_type is None:
            raise HandlerNotFound.for_message(self.kind, message_type)

        LOGGER.debug(
            "Resolved handler by convention",
            extra={
                "message_type": message_type.__name__,
                "handler_type": handler_type.__name__,
            },
        )
        reference = self._handlers[message_type] = FactoryHandler(handler_type)
        return reference

    def resolve(self, message_type: type) -> MessageHandler:
        """Look up and instantiate the handler for a message type.

        Raises:
            HandlerNotFound: If no handler exists.
            HandlerResolutionFailed: If a handler class cannot be built.
            InvalidHandler: If the resolved value has no ``handle`` method.
        """
        return self.lookup(message_type).resolve(message_type, self.resolver)
