"""Result caching for queries."""

import logging
from collections.abc import Hashable, MutableMapping
from typing import Any

from pydantic_core import PydanticSerializationError

from ...domain import Query
from ...routing import intercepts
from ..chain import Next
from .base import Middleware

LOGGER = logging.getLogger(__name__)

_ID_FIELDS = {"query_id", "correlation_id", "causation_id"}


class QueryCacheMiddleware(Middleware):
    """Memoises query results by query type and payload.

    Two queries are considered equal when they are of the same class and
    their fields match, ignoring the per-instance IDs. Failed queries are
    not cached. Queries whose fields cannot be serialized to JSON bypass
    the cache. Commands pass through untouched.

    Args:
        cache: Optional mapping to store results in. Defaults to a plain
            dict that is never trimmed and grows with every distinct query.
            Pass a bounded mapping (an LRU or TTL cache) for long-lived buses.

    Examples:
        >>> cache = QueryCacheMiddleware()
        >>> queries = QueryBus().use_middleware(cache)
        >>> queries.dispatch_sync(GetWidgetByName(name="foo"))  # miss
        >>> queries.dispatch_sync(GetWidgetByName(name="foo"))  # hit
        >>> cache.clear()
    """

    def __init__(self, cache: MutableMapping[Hashable, Any] | None = None):
        self.cache: MutableMapping[Hashable, Any] = {} if cache is None else cache

    @staticmethod
    def cache_key(query: Query) -> tuple[type, str]:
        """Build the cache key for a query.

        Raises:
            PydanticSerializationError: If a field cannot be serialized.
        """
        return type(query), query.model_dump_json(exclude=_ID_FIELDS)

    @intercepts
    def cache_query(self, query: Query, next: Next) -> Any:
        try:
            key = self.cache_key(query)
        except (PydanticSerializationError, TypeError):
            LOGGER.debug(
                "Query not cacheable", extra={"message_type": type(query).__name__}, exc_info=True
            )
            return next(query)

        if key in self.cache:
            LOGGER.debug("Query cache hit", extra={"message_type": type(query).__name__})
            return self.cache[key]

        result = next(query)
        self.cache[key] = result
        return result

    def clear(self) -> None:
        self.cache.clear()
