"""Bus configuration using pydantic-settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings


class CourierSettings(BaseSettings):
    """Configuration for the buses and the application builder.

    All settings can be configured via environment variables with the
    COURIER_ prefix. For example:
    - COURIER_HANDLER_SUFFIX=Handler
    - COURIER_CONVENTION_LOOKUP=false
    - COURIER_HANDLER_MODULES='["myapp.handlers"]'
    - COURIER_LOG_LEVEL=INFO

    Attributes:
        handler_suffix: Suffix appended to a message class name to find
            its conventional handler (CreateWidget -> CreateWidgetHandler).
        convention_lookup: Whether buses look up conventional handlers
            lazily on first dispatch of an unregistered message type.
        handler_modules: Extra modules searched for conventional handlers,
            after the message's own module.
        log_level: Level used by LoggingMiddleware when it is installed
            through ApplicationBuilder.use_logging().

    Example:
        >>> settings = CourierSettings(handler_modules=["myapp.handlers"])
        >>> app = ApplicationBuilder(settings).build()
    """

    handler_suffix: str = "Handler"
    convention_lookup: bool = True
    handler_modules: list[str] = []
    log_level: str = "DEBUG"

    model_config = {"env_prefix": "COURIER_"}

    @field_validator("handler_suffix")
    @classmethod
    def _suffix_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("handler_suffix must not be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level {value!r}")
        return level
