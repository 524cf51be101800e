"""Annotation-based routing for class-style middleware and subscribers.

Methods are marked with a decorator and routed by the type annotation of
their first message parameter. Routing follows the class hierarchy, so a
method annotated with ``Command`` receives every command.
"""

import inspect
from collections.abc import Callable, Iterator
from functools import singledispatch
from typing import Any, TypeVar

T = TypeVar("T")


class _NotRouted:
    """Sentinel returned when no method is registered for a message type."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "NOT_ROUTED"


NOT_ROUTED: Any = _NotRouted()


def _extract_handler_type(func: Callable[..., Any], param_index: int = 1) -> type:
    """Extract the type annotation from a handler method.

    Args:
        func: The handler method to inspect.
        param_index: Index of the parameter to extract
            (0=self, 1=first arg, etc.)

    Returns:
        The annotated message type to route on.

    Raises:
        ValueError: If the parameter lacks a type annotation.
    """
    annotation = None
    func_name = getattr(func, "__name__", repr(func))

    # Fast path: use __annotations__ directly if available
    annotations = getattr(func, "__annotations__", None)
    code = getattr(func, "__code__", None)
    if annotations and code:
        param_names = code.co_varnames
        if len(param_names) <= param_index:
            raise ValueError(f"Handler {func_name} must have at least {param_index + 1} parameters")
        param_name = param_names[param_index]
        annotation = annotations.get(param_name)

    # Fallback to inspect, which also evaluates string annotations
    if annotation is None or isinstance(annotation, str):
        sig = inspect.signature(func, eval_str=True)
        params = list(sig.parameters.values())

        if len(params) <= param_index:
            raise ValueError(f"Handler {func_name} must have at least {param_index + 1} parameters")

        param = params[param_index]

        if param.annotation is inspect.Parameter.empty:
            raise ValueError(
                f"Handler {func_name} parameter '{param.name}' must have a type annotation"
            )
        annotation = param.annotation

    return annotation


class MessageRouter:
    """Routes messages to type-specific methods of an instance.

    Uses singledispatch so lookups follow the message's MRO. Unregistered
    message types return NOT_ROUTED.
    """

    __slots__ = ("_dispatch",)

    def __init__(self) -> None:
        @singledispatch
        def dispatch(message: object, instance: object, *args: Any, **kwargs: Any) -> object:
            return NOT_ROUTED

        self._dispatch = dispatch

    def register(self, message_type: type, handler: Callable[..., object]) -> None:
        """Register a method for a specific message type.

        Args:
            message_type: The message class this method processes.
            handler: The unbound method to call for this message type.
        """

        # Swap argument order so singledispatch keys on the message
        def wrapper(msg: object, inst: object, *args: Any, h: Any = handler, **kwargs: Any) -> object:
            return h(inst, msg, *args, **kwargs)

        self._dispatch.register(message_type)(wrapper)

    def route(self, instance: Any, message: Any, *args: Any, **kwargs: Any) -> object:
        """Route a message to its registered method.

        Returns:
            The method's result, or NOT_ROUTED if nothing matches.
        """
        return self._dispatch(message, instance, *args, **kwargs)


class HandlerDecorator:
    """Marks methods as handlers for the message type in their annotation."""

    def __init__(self, marker_attr: str, type_attr: str):
        """Initialize the decorator.

        Args:
            marker_attr: Attribute name to mark decorated methods.
            type_attr: Attribute name to store the message type.
        """
        self.marker_attr = marker_attr
        self.type_attr = type_attr

    def __call__(self, func: Callable[..., T]) -> Callable[..., T]:
        message_type = _extract_handler_type(func, param_index=1)
        setattr(func, self.type_attr, message_type)
        setattr(func, self.marker_attr, True)
        return func

    def marked_methods(self, cls: type) -> Iterator[tuple[type, Callable[..., Any]]]:
        """Yield (message_type, function) for every marked method of ``cls``.

        Subclass definitions shadow same-named methods of their bases.
        """
        seen: set[str] = set()
        for klass in cls.__mro__:
            for name, value in klass.__dict__.items():
                if name in seen:
                    continue
                seen.add(name)
                if getattr(value, self.marker_attr, None):
                    yield getattr(value, self.type_attr), value


intercepts = HandlerDecorator("_is_message_interceptor", "_intercepts_message_type")
listens_to = HandlerDecorator("_is_event_listener", "_listens_to_event_type")

intercepts.__doc__ = """Decorator marking a method as a message interceptor.

The message type is extracted from the method's type annotation. Use the
base types (Command, Query) to intercept every message of that kind, or a
specific type for targeted interception.

Example:
    >>> class AuditMiddleware(Middleware):
    ...     @intercepts
    ...     def audit(self, command: Command, next: Next) -> Any:
    ...         self.log.append(type(command).__name__)
    ...         return next(command)
"""

listens_to.__doc__ = """Decorator marking a method of a DeclarativeSubscriber as a listener.

The event type is extracted from the method's type annotation.

Example:
    >>> class WidgetNotifications(DeclarativeSubscriber):
    ...     @listens_to
    ...     def on_created(self, event: WidgetCreated) -> None:
    ...         self.mailer.send(event.name)
"""


def setup_middleware_routing(cls: type) -> MessageRouter:
    """Build the router for a middleware class from its @intercepts methods.

    Args:
        cls: The middleware class to set up routing for.

    Returns:
        A configured MessageRouter.
    """
    router = MessageRouter()
    # Bases first so that subclass interceptors win for the same type
    for message_type, method in reversed(list(intercepts.marked_methods(cls))):
        router.register(message_type, method)
    return router
