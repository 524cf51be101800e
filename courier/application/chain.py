"""Onion-style composition of middleware around a handler."""

from collections.abc import Callable, Iterator, Sequence
from functools import reduce
from typing import Any

# The rest of the chain, called with the (possibly replaced) message
Next = Callable[[Any], Any]

# A middleware: receives the message and the rest of the chain
Interceptor = Callable[[Any, Next], Any]


def build_chain(middleware: Sequence[Interceptor], terminal: Next) -> Next:
    """Compose middleware around a terminal call.

    The list is folded from the last-registered middleware inward, so the
    first-registered middleware runs outermost: it sees the message first
    and the result last.

    Args:
        middleware: Interceptors in registration order.
        terminal: The innermost call, usually ``handler.handle``.

    Returns:
        A single callable taking the message.
    """
    return reduce(
        lambda inner, mw: lambda msg, n=inner, m=mw: m(msg, n),
        reversed(middleware),
        terminal,
    )


class MiddlewareStack:
    """Ordered, append-only list of interceptors owned by one bus."""

    __slots__ = ("_middleware",)

    def __init__(self) -> None:
        self._middleware: list[Interceptor] = []

    def append(self, middleware: Interceptor) -> None:
        if not callable(middleware):
            raise TypeError(
                f"Middleware must be callable as (message, next), got {type(middleware).__name__}"
            )
        self._middleware.append(middleware)

    def wrap(self, terminal: Next) -> Next:
        return build_chain(self._middleware, terminal)

    def __iter__(self) -> Iterator[Interceptor]:
        return iter(self._middleware)

    def __len__(self) -> int:
        return len(self._middleware)
