"""Central test fixtures built on the widget fixture package."""

import pytest

from courier import ApplicationBuilder, CommandBus, EventDispatcher, QueryBus
from courier.application import DependencyContainer
from courier.context import clear_context
from tests.fixtures.widgets import AuditLog, WidgetRepository


@pytest.fixture
def repository() -> WidgetRepository:
    return WidgetRepository()


@pytest.fixture
def container(repository: WidgetRepository) -> DependencyContainer:
    """Container with a shared repository and no other registrations."""
    container = DependencyContainer()
    container.register_instance(WidgetRepository, repository)
    return container


@pytest.fixture
def events(container: DependencyContainer) -> EventDispatcher:
    dispatcher = EventDispatcher(container.resolve)
    container.register_instance(EventDispatcher, dispatcher)
    return dispatcher


@pytest.fixture
def command_bus(container: DependencyContainer, events: EventDispatcher) -> CommandBus:
    return CommandBus(container.resolve)


@pytest.fixture
def query_bus(container: DependencyContainer) -> QueryBus:
    return QueryBus(container.resolve)


@pytest.fixture
def app_builder() -> ApplicationBuilder:
    """Builder with the widget services registered as singletons."""
    return (
        ApplicationBuilder()
        .register_dependency(WidgetRepository)
        .register_dependency(AuditLog)
    )


@pytest.fixture
def widget_app(app_builder: ApplicationBuilder):
    """Fully configured widget application via convention-based discovery."""
    return app_builder.convention_based("tests.fixtures.widgets").build()


@pytest.fixture(autouse=True)
def clear_execution_context():
    """Automatically clear execution context after each test."""
    yield
    clear_context()
