"""Logging middleware for command and query tracing."""

import logging
import time
from typing import Any

from ...context import get_context
from ...domain import Command, Query
from ...routing import intercepts
from ..chain import Next
from .base import Middleware

LOGGER = logging.getLogger(__name__)


class LoggingMiddleware(Middleware):
    """Middleware that logs every command and query with correlation.

    Logs each message received at the specified logging level with the
    message type, its id, the correlation/causation IDs of the current
    execution context and the time spent in the rest of the chain. Message
    payloads are NOT logged to avoid exposing PII or sensitive information.

    Attributes:
        level: The numeric logging level (e.g., logging.INFO,
            logging.DEBUG).

    Examples:
        >>> bus = CommandBus().use_middleware(LoggingMiddleware("INFO"))

    Note:
        For correlation tracking to work, ContextPropagationMiddleware
        should be registered before LoggingMiddleware.
    """

    def __init__(self, level: str):
        """Initialize the logging middleware.

        Args:
            level: String representation of the log level (e.g.,
                "INFO", "DEBUG"). Case-insensitive.
        """
        self.level = getattr(logging, level.upper())

    @intercepts
    def log_command(self, command: Command, next: Next) -> Any:
        return self._log("command", command, next)

    @intercepts
    def log_query(self, query: Query, next: Next) -> Any:
        return self._log("query", query, next)

    def _log(self, kind: str, message: Command | Query, next: Next) -> Any:
        extra = {
            "message_kind": kind,
            "message_type": type(message).__name__,
            "message_id": str(message.message_id),
        }

        ctx = get_context()
        if ctx.correlation_id is not None:
            extra["correlation_id"] = str(ctx.correlation_id)
        if ctx.causation_id is not None:
            extra["causation_id"] = str(ctx.causation_id)

        LOGGER.log(self.level, "Dispatching message", extra=extra)
        started = time.perf_counter()
        try:
            result = next(message)
        except Exception:
            extra["elapsed_ms"] = round((time.perf_counter() - started) * 1000, 3)
            LOGGER.log(self.level, "Message failed", extra=extra)
            raise
        extra["elapsed_ms"] = round((time.perf_counter() - started) * 1000, 3)
        LOGGER.log(self.level, "Message handled", extra=extra)
        return result
