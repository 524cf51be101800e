"""Configuration profiles for convention-based application setup.

A profile scans a package once, at build time, and turns what it finds
into explicit registrations on an ApplicationBuilder.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from ..domain import Command, Query
from .discovery import ClassScanner, ModuleScanner
from .events import EventSubscriber

if TYPE_CHECKING:
    from .application import ApplicationBuilder

LOGGER = logging.getLogger(__name__)

MESSAGE_MODULES = ("command", "query")
HANDLER_MODULES = ("command", "query", "handler")
SUBSCRIBER_MODULES = ("subscriber", "listener")


class ApplicationProfile(ABC):
    """Base class for application configuration profiles.

    Profiles encapsulate a set of configuration logic that can be applied
    to an ApplicationBuilder, so the same setup can be reused across
    applications and test suites.
    """

    @staticmethod
    def convention_based(package_name: str) -> "Iterable[ApplicationProfile]":
        return [
            HandlersInPackage(package_name),
            SubscribersInPackage(package_name),
        ]

    @abstractmethod
    def configure(self, builder: "ApplicationBuilder") -> None:
        """Apply this profile's configuration to the builder."""
        pass


class HandlersInPackage(ApplicationProfile):
    """Pair every command and query in a package with its named handler.

    Messages are collected from the package's ``commands`` and ``queries``
    modules; handlers from those modules plus ``handlers``. Singular and
    plural names and nested packages are all scanned. A message ``X`` is
    paired with the class named ``X`` + the builder's handler suffix.
    Messages without a handler are left to lazy lookup on dispatch.
    """

    def __init__(self, package_name: str):
        self.scanner = ModuleScanner(package_name)

    def configure(self, builder: "ApplicationBuilder") -> None:
        suffix = builder.settings.handler_suffix
        candidates: dict[str, type[Any]] = {
            cls.__name__: cls
            for cls in ClassScanner.find_all_classes(self.scanner.find_modules(*HANDLER_MODULES))
            if cls.__name__.endswith(suffix)
        }

        message_modules = list(self.scanner.find_modules(*MESSAGE_MODULES))
        for command_type in ClassScanner.find_subclasses(message_modules, Command):
            handler_type = candidates.get(command_type.__name__ + suffix)
            if handler_type is not None:
                self._log_pair(command_type, handler_type)
                builder.register_command_handler(command_type, handler_type)

        for query_type in ClassScanner.find_subclasses(message_modules, Query):
            handler_type = candidates.get(query_type.__name__ + suffix)
            if handler_type is not None:
                self._log_pair(query_type, handler_type)
                builder.register_query_handler(query_type, handler_type)

    @staticmethod
    def _log_pair(message_type: type, handler_type: type) -> None:
        LOGGER.debug(
            "Registered handler by convention",
            extra={
                "message_type": message_type.__name__,
                "handler_type": handler_type.__name__,
            },
        )


class SubscribersInPackage(ApplicationProfile):
    """Register every EventSubscriber class in a package.

    Scans ``subscribers`` and ``listeners`` modules (singular or plural,
    recursively). A class counts as a subscriber if it has a
    ``subscribe(dispatcher)`` method.
    """

    def __init__(self, package_name: str):
        self.scanner = ModuleScanner(package_name)

    def configure(self, builder: "ApplicationBuilder") -> None:
        modules = self.scanner.find_modules(*SUBSCRIBER_MODULES)
        for subscriber_type in ClassScanner.find_subclasses(modules, EventSubscriber):
            builder.register_subscriber(subscriber_type)
