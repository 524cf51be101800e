"""Two-variant result type returned by ``dispatch``.

A Result is either a success holding a value or a failure holding an
error. The buses use it so that failures never escape ``dispatch`` as
exceptions; callers branch on ``is_ok()`` / ``is_err()`` or use the
combinators instead.

Examples:
    >>> result = bus.dispatch(CreateWidget(name="foo"))
    >>> if result.is_ok():
    ...     widget = result.unwrap()
    ... elif isinstance(result.error, HandlerNotFound):
    ...     ...

    >>> names = bus.dispatch(ListWidgets()).map(lambda ws: [w.name for w in ws])
"""

from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")


class UnwrapError(RuntimeError):
    """Raised when a Result is unwrapped on the wrong variant."""


class Result(Generic[T, E]):
    __slots__ = ("_ok", "_value", "_error")

    def __init__(self, ok: bool, value: Any = None, error: Any = None):
        self._ok = ok
        self._value = value
        self._error = error

    @classmethod
    def ok(cls, value: U = None) -> "Result[U, Any]":  # type: ignore[assignment]
        return cls(True, value=value)

    @classmethod
    def err(cls, error: F) -> "Result[Any, F]":
        return cls(False, error=error)

    @classmethod
    def attempt(cls, fn: Callable[[], U]) -> "Result[U, Exception]":
        """Run ``fn`` and capture its return value or raised exception."""
        try:
            return cls.ok(fn())
        except Exception as e:
            return cls.err(e)

    @classmethod
    def all(cls, results: Iterable["Result[U, F]"]) -> "Result[list[U], F]":
        """Collect success values, or return the first failure."""
        values = []
        for result in results:
            if result.is_err():
                return cls.err(result._error)
            values.append(result._value)
        return cls.ok(values)

    def is_ok(self) -> bool:
        return self._ok

    def is_err(self) -> bool:
        return not self._ok

    @property
    def value(self) -> T | None:
        """The success value, or None for a failure."""
        return self._value if self._ok else None

    @property
    def error(self) -> E | None:
        """The failure value, or None for a success."""
        return None if self._ok else self._error

    def unwrap(self) -> T:
        """Get the success value.

        Raises:
            UnwrapError: If this is a failure. The error is chained when it
                is an exception.
        """
        if not self._ok:
            cause = self._error if isinstance(self._error, BaseException) else None
            raise UnwrapError(f"Called unwrap() on error Result: {self._error}") from cause
        return self._value

    def unwrap_err(self) -> E:
        if self._ok:
            raise UnwrapError("Called unwrap_err() on success Result")
        return self._error

    def unwrap_or(self, default: U) -> T | U:
        return self._value if self._ok else default

    def unwrap_or_else(self, fn: Callable[[E], U]) -> T | U:
        return self._value if self._ok else fn(self._error)

    def map(self, fn: Callable[[T], U]) -> "Result[U, E]":
        if not self._ok:
            return self  # type: ignore[return-value]
        return Result.ok(fn(self._value))

    def map_err(self, fn: Callable[[E], F]) -> "Result[T, F]":
        if self._ok:
            return self  # type: ignore[return-value]
        return Result.err(fn(self._error))

    def and_then(self, fn: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        if not self._ok:
            return self  # type: ignore[return-value]
        return fn(self._value)

    def tap(self, fn: Callable[[T], Any]) -> "Result[T, E]":
        if self._ok:
            fn(self._value)
        return self

    def tap_err(self, fn: Callable[[E], Any]) -> "Result[T, E]":
        if not self._ok:
            fn(self._error)
        return self

    def match(self, on_ok: Callable[[T], U], on_err: Callable[[E], U]) -> U:
        return on_ok(self._value) if self._ok else on_err(self._error)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return (self._ok, self._value, self._error) == (other._ok, other._value, other._error)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._ok:
            return f"Result.ok({self._value!r})"
        return f"Result.err({self._error!r})"
