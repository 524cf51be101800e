"""Command base class for the write side of CQRS.

Commands represent intentions to change state and are dispatched to
exactly one handler through the command bus.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID

TResponse = TypeVar("TResponse")


class Command(BaseModel, Generic[TResponse]):
    """Base class for all commands in the system.

    Commands are immutable values named in the imperative (``CreateWidget``,
    ``PlaceOrder``). They carry everything the handler needs and no
    behaviour of their own. Commands are generic over their response type,
    allowing handlers to return typed results. Use ``Command[None]`` for
    commands that don't return a value.

    Type Parameters:
        TResponse: The type returned by the handler for this command

    Attributes:
        command_id: Unique identifier for this command instance.
        correlation_id: Optional correlation ID for distributed tracing.
        causation_id: Optional ID of what caused this command.

    Examples:
        >>> class CreateWidget(Command[Widget]):
        ...     name: str
        >>>
        >>> class CreateWidgetHandler:
        ...     def handle(self, command: CreateWidget) -> Widget:
        ...         return Widget(name=command.name)
    """

    model_config = ConfigDict(frozen=True)

    command_id: ULID = Field(default_factory=ULID)
    correlation_id: ULID | None = None
    causation_id: ULID | None = None

    @property
    def message_id(self) -> ULID:
        return self.command_id
