"""Retry middleware for transient handler failures."""

import logging
import time
from typing import Any

from ...domain import Command, Query
from ...routing import intercepts
from ..chain import Next
from .base import Middleware

LOGGER = logging.getLogger(__name__)


class RetryMiddleware(Middleware):
    """Middleware that re-runs the rest of the chain on selected errors.

    The buses impose no retry policy of their own; install this middleware
    to get one. Exceptions not listed in ``retry_on`` are re-raised
    immediately.

    Attributes:
        max_attempts: The maximum number of attempts (initial + retries).
            Must be positive. For example, max_attempts=3 means 1 initial
            attempt + up to 2 retries.
        retry_delay: The delay in seconds between retry attempts.
            Must be non-negative.
        retry_on: Exception types that trigger a retry.

    Examples:
        Retry up to 3 times with 0.1s delay on connection errors:

        >>> middleware = RetryMiddleware(3, 0.1, retry_on=(ConnectionError,))
    """

    def __init__(
        self,
        max_attempts: int,
        retry_delay: float = 0.0,
        retry_on: tuple[type[Exception], ...] = (Exception,),
    ):
        """Initialize the retry middleware.

        Raises:
            ValueError: If max_attempts <= 0 or retry_delay < 0.
        """
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        if retry_delay < 0:
            raise ValueError("retry_delay must be non-negative")
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.retry_on = retry_on

    @intercepts
    def retry_command(self, command: Command, next: Next) -> Any:
        return self._retry(command, next)

    @intercepts
    def retry_query(self, query: Query, next: Next) -> Any:
        return self._retry(query, next)

    def _retry(self, message: Any, next: Next) -> Any:
        for attempt in range(1, self.max_attempts + 1):
            try:
                return next(message)
            except self.retry_on as e:
                if attempt == self.max_attempts:
                    raise
                LOGGER.warning(
                    f"Attempt {attempt}/{self.max_attempts} failed: {e}",
                    extra={"message_type": type(message).__name__},
                )
                if self.retry_delay:
                    time.sleep(self.retry_delay)
