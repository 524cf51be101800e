"""Command and query buses.

Both buses route a message to exactly one handler through the same
pipeline: look up the registration for the message's runtime type, turn
it into a handler, wrap ``handler.handle`` in the bus's middleware and
call the result once with the message.
"""

import logging
from collections.abc import Iterable
from typing import Any, ClassVar, Generic, TypeVar

from typing_extensions import Self

from ..config import CourierSettings
from ..domain import BusError, Command, HandlerExecutionFailed, Query
from ..result import Result
from .chain import Interceptor, MiddlewareStack
from .handlers import HandlerConvention, HandlerRegistry, MessageHandler, Resolver

LOGGER = logging.getLogger(__name__)

TMessage = TypeVar("TMessage")


class MessageBus(Generic[TMessage]):
    """Dispatch engine shared by CommandBus and QueryBus.

    Registration and middleware are expected to be configured once at
    startup; dispatching does not lock, so concurrent registration from
    other threads needs external synchronisation.

    Args:
        resolver: Function used to instantiate handler classes, typically
            ``DependencyContainer.resolve``. Without one, handler classes
            must be default-constructible.
        handler_suffix: Suffix used for conventional handler lookup.
        convention_lookup: Whether unregistered message types fall back to
            a conventionally named handler class.
        handler_modules: Extra modules searched for conventional handlers.
    """

    kind: ClassVar[str] = "message"

    def __init__(
        self,
        resolver: Resolver | None = None,
        *,
        handler_suffix: str = "Handler",
        convention_lookup: bool = True,
        handler_modules: Iterable[str] = (),
    ):
        convention = (
            HandlerConvention(handler_suffix, handler_modules) if convention_lookup else None
        )
        self.handlers = HandlerRegistry(self.kind, resolver, convention)
        self.middleware = MiddlewareStack()

    @classmethod
    def from_settings(cls, settings: CourierSettings, resolver: Resolver | None = None) -> Self:
        """Create a bus configured from CourierSettings."""
        return cls(
            resolver,
            handler_suffix=settings.handler_suffix,
            convention_lookup=settings.convention_lookup,
            handler_modules=settings.handler_modules,
        )

    def register(self, message_type: type[TMessage], handler: Any) -> Self:
        """Register the handler for a message type.

        Replaces any previous registration for the same type.

        Args:
            message_type: The message class.
            handler: A handler instance, a handler class (resolved on
                dispatch) or a callable taking the message.

        Returns:
            The bus, for chaining.
        """
        self.handlers.register(message_type, handler)
        return self

    def use_middleware(self, middleware: Interceptor) -> Self:
        """Append middleware to the chain.

        The first middleware added runs outermost. Each is called as
        ``middleware(message, next)`` and continues the chain by calling
        ``next(message)``; it may also transform the message or result,
        call ``next`` more than once, or return without calling it.

        Returns:
            The bus, for chaining.
        """
        self.middleware.append(middleware)
        return self

    def has_handler(self, message_type: type[TMessage]) -> bool:
        """Check whether dispatching ``message_type`` would find a handler."""
        try:
            self.handlers.lookup(message_type)
        except BusError:
            return False
        return True

    def dispatch(self, message: TMessage) -> Result[Any, BusError]:
        """Dispatch a message and capture the outcome in a Result.

        Never raises for failures of the message's handling: resolution
        errors (HandlerNotFound, HandlerResolutionFailed, InvalidHandler)
        are returned as they are, and anything raised by middleware or the
        handler is wrapped in HandlerExecutionFailed.

        Args:
            message: The command or query to dispatch.

        Returns:
            Result.ok(handler result) or Result.err(BusError).
        """
        message_type = type(message)
        try:
            handler = self.handlers.resolve(message_type)
        except BusError as e:
            LOGGER.debug(
                "Handler resolution failed",
                extra={"message_type": message_type.__name__},
                exc_info=True,
            )
            return Result.err(e)

        try:
            return Result.ok(self._execute(handler, message))
        except Exception as e:
            LOGGER.debug(
                "Message handling failed",
                extra={"message_type": message_type.__name__},
                exc_info=True,
            )
            return Result.err(HandlerExecutionFailed.wrap(message_type, e))

    def dispatch_sync(self, message: TMessage) -> Any:
        """Dispatch a message, raising on failure.

        Uses the same resolution and middleware as ``dispatch`` but lets
        errors propagate: resolution errors are raised as BusErrors and
        handler or middleware exceptions are re-raised unwrapped.

        Args:
            message: The command or query to dispatch.

        Returns:
            The handler's result.
        """
        handler = self.handlers.resolve(type(message))
        return self._execute(handler, message)

    def _execute(self, handler: MessageHandler, message: TMessage) -> Any:
        chain = self.middleware.wrap(handler.handle)
        return chain(message)


class CommandBus(MessageBus[Command[Any]]):
    """Command bus for dispatching commands through middleware.

    Commands change state and have exactly one handler each.

    Examples:
        >>> bus = CommandBus(container.resolve)
        >>> bus.register(CreateWidget, CreateWidgetHandler)
        >>>
        >>> result = bus.dispatch(CreateWidget(name="foo"))
        >>> if result.is_ok():
        ...     widget = result.unwrap()
    """

    kind = "command"


class QueryBus(MessageBus[Query[Any]]):
    """Query bus for dispatching queries through middleware.

    Queries read state and should not modify it. Middleware on this bus
    is the natural place for caching.

    Examples:
        >>> bus = QueryBus().register(GetWidgetByName, widgets.find_by_name)
        >>> widget = bus.dispatch_sync(GetWidgetByName(name="foo"))
    """

    kind = "query"
