"""Courier - in-process command, query and event dispatch for Python.

This module provides the public API for routing commands and queries to
their handlers and fanning events out to listeners.
"""

from .application import (
    Application,
    ApplicationBuilder,
    CommandBus,
    DeclarativeSubscriber,
    EventDispatcher,
    EventSubscriber,
    Middleware,
    Next,
    QueryBus,
)
from .config import CourierSettings
from .domain import (
    BusError,
    Command,
    Event,
    HandlerExecutionFailed,
    HandlerNotFound,
    HandlerResolutionFailed,
    InvalidHandler,
    Query,
)
from .result import Result, UnwrapError
from .routing import intercepts, listens_to

__all__ = [
    # Application
    "Application",
    "ApplicationBuilder",
    "CourierSettings",
    # Dispatch
    "CommandBus",
    "EventDispatcher",
    "QueryBus",
    "Result",
    "UnwrapError",
    # Messages
    "Command",
    "Event",
    "Query",
    # Errors
    "BusError",
    "HandlerExecutionFailed",
    "HandlerNotFound",
    "HandlerResolutionFailed",
    "InvalidHandler",
    # Extension points
    "DeclarativeSubscriber",
    "EventSubscriber",
    "Middleware",
    "Next",
    # Decorators
    "intercepts",
    "listens_to",
]
