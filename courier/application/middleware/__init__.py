"""Middleware infrastructure for commands and queries.

Middleware components wrap handlers to provide cross-cutting concerns
like logging, retries, caching, or context propagation. They follow the
chain of responsibility pattern: each receives the message and the rest
of the chain, and decides whether and how to call it.
"""

from ..chain import Interceptor, Next
from .base import Middleware
from .caching import QueryCacheMiddleware
from .context import ContextPropagationMiddleware
from .logging import LoggingMiddleware
from .retry import RetryMiddleware

__all__ = [
    # Base classes
    "Interceptor",
    "Middleware",
    "Next",
    # Middleware implementations
    "ContextPropagationMiddleware",
    "LoggingMiddleware",
    "QueryCacheMiddleware",
    "RetryMiddleware",
]
