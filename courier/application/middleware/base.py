"""Base middleware class for commands and queries.

Middleware components wrap handlers to provide cross-cutting concerns
like logging, retries, caching or transaction management. Any callable
``(message, next) -> result`` can be used as middleware; this class adds
annotation-based routing on top of that contract.
"""

from typing import Any, ClassVar

from ...routing import NOT_ROUTED, MessageRouter, setup_middleware_routing
from ..chain import Next


class Middleware:
    """Base class for middleware with annotation-based routing.

    Methods decorated with @intercepts receive messages matching their
    annotated type (including subclasses). If no interceptor matches the
    message type, the middleware forwards to the next handler unchanged.

    Instances are callable with ``(message, next)``, so they can be passed
    straight to ``use_middleware``.

    Examples:
        Intercept all commands:

        >>> class AuditMiddleware(Middleware):
        ...     @intercepts
        ...     def audit(self, cmd: Command, next: Next) -> Any:
        ...         print(f"Command: {type(cmd).__name__}")
        ...         return next(cmd)

        Intercept a specific query type:

        >>> class AdminOnlyMiddleware(Middleware):
        ...     @intercepts
        ...     def check_admin(self, query: GetAuditLog, next: Next) -> Any:
        ...         if not self.is_admin(query.requester):
        ...             raise PermissionError("Admin required")
        ...         return next(query)
    """

    # Class-level routing table
    _message_router: ClassVar[MessageRouter] = MessageRouter()

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Set up routing when a subclass is defined."""
        super().__init_subclass__(**kwargs)
        cls._message_router = setup_middleware_routing(cls)

    def intercept(self, message: Any, next: Next) -> Any:
        """Route message to interceptor method or forward to next.

        Args:
            message: The command or query to intercept.
            next: The rest of the middleware chain.

        Returns:
            The result from the interceptor or next handler.
        """
        result = self._message_router.route(self, message, next)
        if result is NOT_ROUTED:
            return next(message)
        return result

    def __call__(self, message: Any, next: Next) -> Any:
        return self.intercept(message, next)
