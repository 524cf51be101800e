"""Context propagation middleware for correlation and causation tracking.

This middleware manages the execution context for commands and queries so
that events raised by handlers, log records and nested dispatches can be
traced back to the message that started the operation.
"""

from typing import Any

from ulid import ULID

from ...context import ExecutionContext, get_context, reset_context, set_context
from ...domain import Command, Query
from ...routing import intercepts
from ..chain import Next
from .base import Middleware


class ContextPropagationMiddleware(Middleware):
    """Middleware that propagates execution context from messages.

    **Context Setup**:
    - correlation_id: the message's, else the surrounding context's (nested
      dispatch), else a new one (entry point)
    - causation_id: the message's, else the message being handled in the
      surrounding context, else the surrounding causation, else the
      correlation_id (self-referencing entry point)
    - message_id: always the message's own id

    **Context Cleanup**:
    The previous context is restored after the inner call returns, even if
    it fails, so nested dispatches do not clobber the outer operation.

    **Middleware Order**:
    Register it before LoggingMiddleware or anything else that reads the
    context.

    Examples:
        >>> bus = (
        ...     CommandBus()
        ...     .use_middleware(ContextPropagationMiddleware())
        ...     .use_middleware(LoggingMiddleware("INFO"))
        ... )
    """

    @intercepts
    def propagate_command(self, command: Command, next: Next) -> Any:
        return self._propagate(command, next)

    @intercepts
    def propagate_query(self, query: Query, next: Next) -> Any:
        return self._propagate(query, next)

    def _propagate(self, message: Command | Query, next: Next) -> Any:
        outer = get_context()

        correlation_id = message.correlation_id or outer.correlation_id or ULID()
        causation_id = (
            message.causation_id or outer.message_id or outer.causation_id or correlation_id
        )

        token = set_context(
            ExecutionContext(
                correlation_id=correlation_id,
                causation_id=causation_id,
                message_id=message.message_id,
            )
        )
        try:
            return next(message)
        finally:
            reset_context(token)
