"""Message primitives for the command, query and event sides.

This module contains the building blocks that users extend to define
their messages:

- Command: Base class for command messages (write side)
- Query: Base class for query messages (read side)
- Event: Base class for domain events (fan-out side)
- BusError and its subclasses: failures raised while routing messages
"""

from .command import Command
from .event import Event, qualified_name, utc_now
from .exceptions import (
    BusError,
    HandlerExecutionFailed,
    HandlerNotFound,
    HandlerResolutionFailed,
    InvalidHandler,
)
from .query import Query

__all__ = [
    "Command",
    "Query",
    "Event",
    "qualified_name",
    "utc_now",
    "BusError",
    "HandlerExecutionFailed",
    "HandlerNotFound",
    "HandlerResolutionFailed",
    "InvalidHandler",
]
