from collections.abc import Callable
from typing import Any, TypeVar

from typing_extensions import Self

from ..config import CourierSettings
from ..domain import BusError, Command, Query
from ..result import Result
from .bus import CommandBus, QueryBus
from .chain import Interceptor
from .container import DependencyContainer
from .events import EventDispatcher
from .middleware import ContextPropagationMiddleware, LoggingMiddleware

T = TypeVar("T")


class Application:
    """A configured set of buses and an event dispatcher sharing one container.

    Attributes:
        commands: The command bus.
        queries: The query bus.
        events: The event dispatcher.
        settings: The settings the application was built with.
    """

    def __init__(self, container: DependencyContainer, settings: CourierSettings):
        self.container = container
        self.settings = settings
        self.commands = container.resolve(CommandBus)
        self.queries = container.resolve(QueryBus)
        self.events = container.resolve(EventDispatcher)

    def dispatch(self, command: Command[T]) -> Result[T, BusError]:
        """Dispatch a command on the command bus.

        Args:
            command: The command to dispatch.

        Returns:
            The Result of handling the command.
        """
        return self.commands.dispatch(command)

    def ask(self, query: Query[T]) -> Result[T, BusError]:
        """Dispatch a query on the query bus.

        Args:
            query: The query to dispatch.

        Returns:
            The Result of handling the query.
        """
        return self.queries.dispatch(query)

    def resolve(self, type_to_resolve: type[T]) -> T:
        """Resolve a dependency from the application's container.

        Raises:
            DependencyNotFoundError: If the dependency cannot be resolved.
        """
        return self.container.resolve(type_to_resolve)


# Handlers and listeners are registered on the buses and the dispatcher
# immediately since they are only resolved when a message arrives. Middleware
# classes and subscribers are resolved at build() instead, once every
# dependency they might need has been registered.


class ApplicationBuilder:
    """Fluent builder for Application instances.

    Examples:
        >>> app = (
        ...     ApplicationBuilder()
        ...     .register_dependency(WidgetRepository, InMemoryWidgetRepository)
        ...     .use_correlation_tracking()
        ...     .use_logging()
        ...     .convention_based("shop")
        ...     .build()
        ... )
        >>> widget = app.dispatch(CreateWidget(name="foo")).unwrap()
    """

    def __init__(self, settings: CourierSettings | None = None) -> None:
        self.settings = settings or CourierSettings()
        self.container = DependencyContainer()
        self.commands = CommandBus.from_settings(self.settings, self.container.resolve)
        self.queries = QueryBus.from_settings(self.settings, self.container.resolve)
        self.events = EventDispatcher(self.container.resolve)

        self.container.register_instance(CourierSettings, self.settings)
        self.container.register_instance(DependencyContainer, self.container)
        self.container.register_instance(CommandBus, self.commands)
        self.container.register_instance(QueryBus, self.queries)
        self.container.register_instance(EventDispatcher, self.events)

        self._command_middleware: list[Any] = []
        self._query_middleware: list[Any] = []
        self._subscribers: list[Any] = []

    def register_dependency(
        self, dependency_type: type[T], factory: Callable[..., T] | None = None
    ) -> Self:
        """Register a singleton dependency.

        The factory (or ``dependency_type`` itself) is called once, on
        first resolve, with its annotated parameters resolved from the
        container.

        Args:
            dependency_type: The type to register.
            factory: Callable building the instance.

        Returns:
            The application builder.
        """
        self.container.register_singleton(dependency_type, factory or dependency_type)
        return self

    def register_command_handler(self, command_type: type[Command[Any]], handler: Any) -> Self:
        """Register the handler (instance, class or callable) for a command type."""
        self.commands.register(command_type, handler)
        return self

    def register_query_handler(self, query_type: type[Query[Any]], handler: Any) -> Self:
        """Register the handler (instance, class or callable) for a query type."""
        self.queries.register(query_type, handler)
        return self

    def register_command_middleware(self, middleware: Interceptor | type[Any]) -> Self:
        """Append middleware to the command bus.

        Middleware classes are resolved from the container at build time.
        Middleware runs in registration order, first registered outermost.
        """
        self._command_middleware.append(middleware)
        return self

    def register_query_middleware(self, middleware: Interceptor | type[Any]) -> Self:
        """Append middleware to the query bus; see register_command_middleware."""
        self._query_middleware.append(middleware)
        return self

    def register_listener(self, event: type | str, listener: Any) -> Self:
        """Register an event listener for an event class or wildcard pattern."""
        self.events.listen(event, listener)
        return self

    def register_subscriber(self, subscriber: Any) -> Self:
        """Register an EventSubscriber instance or class, subscribed at build time."""
        self._subscribers.append(subscriber)
        return self

    def use_logging(self, level: str | None = None) -> Self:
        """Log every command and query at ``level`` (defaults to the settings)."""
        middleware = LoggingMiddleware(level or self.settings.log_level)
        return self.register_command_middleware(middleware).register_query_middleware(middleware)

    def use_correlation_tracking(self) -> Self:
        """Propagate correlation and causation ids through nested dispatches."""
        middleware = ContextPropagationMiddleware()
        return self.register_command_middleware(middleware).register_query_middleware(middleware)

    def convention_based(self, package_name: str) -> Self:
        """Register handlers and subscribers found in a package by convention.

        See HandlersInPackage and SubscribersInPackage for the layout that
        is scanned.

        Args:
            package_name: The name of the package to scan.

        Returns:
            The application builder.
        """
        from .configurators import ApplicationProfile

        for profile in ApplicationProfile.convention_based(package_name):
            profile.configure(self)
        return self

    def build(self) -> Application:
        """Resolve pending middleware and subscribers and create the Application.

        Raises:
            DependencyNotFoundError: If a middleware or subscriber class
                depends on something that cannot be resolved.
            HandlerResolutionFailed: If a subscriber class cannot be built.
        """
        for middleware in self._command_middleware:
            self.commands.use_middleware(self._resolve_middleware(middleware))
        for middleware in self._query_middleware:
            self.queries.use_middleware(self._resolve_middleware(middleware))
        for subscriber in self._subscribers:
            self.events.subscribe(subscriber)

        self._command_middleware.clear()
        self._query_middleware.clear()
        self._subscribers.clear()
        return Application(self.container, self.settings)

    def _resolve_middleware(self, middleware: Any) -> Interceptor:
        if isinstance(middleware, type):
            return self.container.resolve(middleware)
        return middleware
