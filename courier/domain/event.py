from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID

from ..context import get_context


def utc_now() -> datetime:
    """Get the current UTC timestamp.

    Returns:
        Current datetime with UTC timezone information

    Note:
        Used as default_factory for Event.occurred_at to ensure all
        events are timestamped in UTC regardless of system timezone.
    """
    return datetime.now(tz=timezone.utc)


def _current_correlation_id() -> ULID | None:
    return get_context().correlation_id


def _current_causation_id() -> ULID | None:
    ctx = get_context()
    return ctx.message_id or ctx.causation_id


def qualified_name(message_type: type) -> str:
    """Get the fully-qualified type name of a message class.

    This is the name wildcard listener patterns are matched against,
    e.g. ``shop.billing.InvoicePaid``.

    Args:
        message_type: The message class.

    Returns:
        The dotted module path followed by the class's qualified name.
    """
    return f"{message_type.__module__}.{message_type.__qualname__}"


class Event(BaseModel):
    """Immutable record of something that already happened.

    Events are named in the past tense (``WidgetCreated``,
    ``InvoicePaid``) and are usually raised by handlers as a side effect of
    processing a command. They are handed to the EventDispatcher which
    notifies every matching listener synchronously.

    - **Immutable**: Once created, events cannot be modified
    - **Identifiable**: Each event gets a unique ID at construction
    - **Timestamped**: All events record when they occurred (UTC)
    - **Traceable**: Events created while a command is being handled
      inherit its correlation ID, and the command becomes their causation

    Attributes:
        event_id: Unique identifier for this specific event instance
        occurred_at: When the event occurred (UTC timezone)
        correlation_id: Correlation ID of the logical operation, taken from
            the current execution context when not given
        causation_id: ID of the message that caused this event, taken from
            the current execution context when not given

    Examples:
        >>> class WidgetCreated(Event):
        ...     widget_id: int
        ...     name: str
        >>>
        >>> event = WidgetCreated(widget_id=1, name="foo")
        >>> event.event_name
        'WidgetCreated'
    """

    model_config = ConfigDict(frozen=True)

    event_id: ULID = Field(
        default_factory=ULID,
        description="Unique identifier for this event instance",
    )
    occurred_at: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC timezone)",
    )
    correlation_id: ULID | None = Field(
        default_factory=_current_correlation_id,
        description="Correlation ID for tracing the entire logical operation",
    )
    causation_id: ULID | None = Field(
        default_factory=_current_causation_id,
        description="ID of the message that directly caused this event",
    )

    @property
    def event_name(self) -> str:
        """The event's class name without its module path."""
        return type(self).__name__

    @classmethod
    def type_name(cls) -> str:
        """The fully-qualified type name used for wildcard matching."""
        return qualified_name(cls)
