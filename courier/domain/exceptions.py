"""Exceptions raised while routing messages to handlers."""


class BusError(Exception):
    """Base class for failures raised while routing messages and events.

    Attributes:
        message_type: The message class that was being dispatched, if any.
    """

    def __init__(self, message: str, message_type: type | None = None):
        super().__init__(message)
        self.message_type = message_type


class HandlerNotFound(BusError, LookupError):
    """Raised when no explicit or conventional handler exists for a message type."""

    @classmethod
    def for_message(cls, kind: str, message_type: type) -> "HandlerNotFound":
        return cls(f"No handler registered for {kind} {message_type.__name__}", message_type)


class HandlerResolutionFailed(BusError):
    """Raised when a handler or listener class cannot be found or instantiated.

    The underlying exception is chained as ``__cause__``.
    """

    @classmethod
    def for_type(
        cls, handler_type: type, message_type: type | None
    ) -> "HandlerResolutionFailed":
        return cls(f"Could not resolve {handler_type.__name__}", message_type)

    @classmethod
    def for_lookup(cls, message_type: type) -> "HandlerResolutionFailed":
        return cls(f"Conventional handler lookup for {message_type.__name__} failed", message_type)


class InvalidHandler(BusError, TypeError):
    """Raised when a resolved value does not expose the expected capability."""

    @classmethod
    def for_value(
        cls, value: object, message_type: type | None, capability: str
    ) -> "InvalidHandler":
        name = value.__name__ if isinstance(value, type) else type(value).__name__
        return cls(f"{name} must provide {capability}", message_type)


class HandlerExecutionFailed(BusError):
    """Raised when a handler or middleware fails while processing a message.

    Only ``dispatch`` produces this error; it wraps the original exception
    so callers can branch on a single type. ``dispatch_sync`` re-raises the
    original exception instead.

    Attributes:
        error: The exception raised during execution.
    """

    def __init__(self, message: str, message_type: type, error: Exception):
        super().__init__(message, message_type)
        self.error = error

    @classmethod
    def wrap(cls, message_type: type, error: Exception) -> "HandlerExecutionFailed":
        failure = cls(
            f"Handling {message_type.__name__} failed: {error}",
            message_type,
            error,
        )
        failure.__cause__ = error
        return failure
