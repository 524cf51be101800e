import contextvars
from dataclasses import dataclass, replace

from ulid import ULID


@dataclass(frozen=True)
class ExecutionContext:
    """Immutable context for tracking message flow through the system.

    ExecutionContext captures the causal relationship between commands,
    queries and the events they raise, enabling tracing and debugging of a
    single logical operation.

    Attributes:
        correlation_id: Unique ID that traces an entire logical operation.
            Remains constant across nested dispatches.
        causation_id: ID of what directly caused the current message.
        message_id: ID of the command or query currently being handled.
            Events raised while it is handled use it as their causation_id.

    Examples:
        Create a new context at system entry point:

        >>> ctx = ExecutionContext.create()

        Create a child context for a message:

        >>> msg_ctx = ctx.for_message(command.command_id)
    """

    correlation_id: ULID | None = None
    causation_id: ULID | None = None
    message_id: ULID | None = None

    @classmethod
    def create(cls, correlation_id: ULID | None = None) -> "ExecutionContext":
        """Create a new context, typically at a system entry point.

        Args:
            correlation_id: Optional correlation ID. If not provided, a new
                ULID is generated. At entry points, causation_id is set to
                correlation_id (self-referencing).

        Returns:
            A new ExecutionContext instance.
        """
        if correlation_id is None:
            correlation_id = ULID()

        return cls(
            correlation_id=correlation_id,
            causation_id=correlation_id,  # Self-referencing at entry
            message_id=None,
        )

    def for_message(self, message_id: ULID) -> "ExecutionContext":
        """Create a child context for handling a command or query.

        The correlation_id is inherited and the message_id is set.

        Args:
            message_id: The ID of the message being handled.

        Returns:
            A new ExecutionContext with message_id set.
        """
        return replace(self, message_id=message_id)

    def for_event(self, event_id: ULID) -> "ExecutionContext":
        """Create a child context for reacting to an event.

        The correlation_id is inherited, the causation_id becomes the
        event_id and the message_id is cleared.

        Args:
            event_id: The ID of the event being processed.

        Returns:
            A new ExecutionContext with causation_id set to event_id.
        """
        return replace(self, causation_id=event_id, message_id=None)


# Context variable for storing the current execution context
_context: contextvars.ContextVar[ExecutionContext | None] = contextvars.ContextVar(
    "execution_context", default=None
)


def get_context() -> ExecutionContext:
    """Get the current execution context.

    If no context has been set, returns an empty ExecutionContext with all
    fields None.
    """
    ctx = _context.get()
    if ctx is None:
        return ExecutionContext()
    return ctx


def set_context(context: ExecutionContext) -> contextvars.Token[ExecutionContext | None]:
    """Set the current execution context.

    Args:
        context: The ExecutionContext to set.

    Returns:
        A token that restores the previous context via reset_context().
    """
    return _context.set(context)


def reset_context(token: contextvars.Token[ExecutionContext | None]) -> None:
    """Restore the context that was current before the matching set_context()."""
    _context.reset(token)


def clear_context() -> None:
    """Clear the current execution context.

    This is useful for cleanup or testing.
    """
    _context.set(None)


def get_or_create_context() -> ExecutionContext:
    """Get the current context, or create a new one if not set.

    Useful at system entry points where a new logical operation begins.

    Returns:
        The current or newly created ExecutionContext.
    """
    ctx = _context.get()
    if ctx is None:
        ctx = ExecutionContext.create()
        set_context(ctx)
    return ctx
