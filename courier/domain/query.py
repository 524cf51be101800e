"""Query base class for the read side of CQRS.

Queries represent requests for data and are dispatched to exactly one
handler through the query bus. Unlike commands, queries do not mutate
state - they return data.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID

TResponse = TypeVar("TResponse")


class Query(BaseModel, Generic[TResponse]):
    """Base class for all queries in the system.

    Each query is generic over its response type, providing type safety
    for query handlers.

    Type Parameters:
        TResponse: The type returned by query handlers for this query

    Attributes:
        query_id: Unique identifier for this query instance.
        correlation_id: Optional correlation ID for distributed tracing.
        causation_id: Optional ID of what caused this query.

    Examples:
        >>> class GetWidgetByName(Query[Widget | None]):
        ...     name: str
        >>>
        >>> class GetWidgetByNameHandler:
        ...     def handle(self, query: GetWidgetByName) -> Widget | None:
        ...         return self.widgets.get(query.name)
    """

    model_config = ConfigDict(frozen=True)

    query_id: ULID = Field(default_factory=ULID)
    correlation_id: ULID | None = None
    causation_id: ULID | None = None

    @property
    def message_id(self) -> ULID:
        return self.query_id
