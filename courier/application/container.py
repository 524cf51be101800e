"""Minimal dependency container used as the handler and listener resolver.

``DependencyContainer.resolve`` satisfies the resolver contract of the
buses and the event dispatcher: it takes a class and returns an instance.
Registered types are built by their factory; unregistered concrete
classes are autowired from their annotated constructor parameters.
"""

import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Generic, TypeVar, cast, get_origin

T = TypeVar("T")


class DependencyNotFoundError(Exception):
    @classmethod
    def from_type(cls, dependency_type: type[T]) -> "DependencyNotFoundError":
        name = getattr(dependency_type, "__name__", repr(dependency_type))
        return cls(f"Dependency {name} not found")


class DependencyCircularReferenceError(Exception):
    @classmethod
    def from_chain(cls, chain: list[type]) -> "DependencyCircularReferenceError":
        names = " -> ".join(getattr(t, "__name__", repr(t)) for t in chain)
        return cls(f"Circular reference detected while resolving {names}")


class Dependency(ABC, Generic[T]):
    @abstractmethod
    def resolve(self, container: "DependencyContainer") -> T:
        pass


class InstanceDependency(Dependency[T]):
    def __init__(self, instance: T):
        self.instance = instance

    def resolve(self, container: "DependencyContainer") -> T:
        return self.instance


class FactoryDependency(Dependency[T]):
    """Calls the factory on every resolve, injecting its annotated parameters.

    Parameters with a default value are left to the default.
    """

    def __init__(self, factory: Callable[..., T]):
        self.factory = factory

    def resolve(self, container: "DependencyContainer") -> T:
        return self.factory(**self.get_dependencies(container))

    def get_dependencies(self, container: "DependencyContainer") -> dict[str, Any]:
        return {
            name: container.resolve(parameter.annotation)
            for name, parameter in inspect.signature(self.factory, eval_str=True).parameters.items()
            if parameter.annotation is not inspect.Parameter.empty
            and parameter.default is inspect.Parameter.empty
            and parameter.kind not in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD)
        }


class SingletonDependency(Dependency[T]):
    def __init__(self, factory: FactoryDependency[T]):
        self.factory = factory
        self.instance: T | None = None

    def resolve(self, container: "DependencyContainer") -> T:
        if self.instance is None:
            self.instance = self.factory.resolve(container)
        return self.instance


def _is_autowirable(dependency_type: Any) -> bool:
    return (
        isinstance(dependency_type, type)
        and not inspect.isabstract(dependency_type)
        and not getattr(dependency_type, "_is_protocol", False)
        and dependency_type.__module__ != "builtins"
    )


class DependencyContainer:
    """Registry of how to build each dependency type.

    Examples:
        >>> container = DependencyContainer()
        >>> container.register_singleton(WidgetRepository, InMemoryWidgetRepository)
        >>> handler = container.resolve(CreateWidgetHandler)
        >>> bus = CommandBus(container.resolve)
    """

    def __init__(self) -> None:
        self.dependencies: dict[type, Dependency[Any]] = {}
        self._resolving: list[type] = []

    def __contains__(self, dependency_type: object) -> bool:
        return dependency_type in self.dependencies

    def resolve(self, dependency_type: type[T]) -> T:
        """Build or fetch an instance of ``dependency_type``.

        Raises:
            DependencyNotFoundError: If the type is not registered and
                cannot be autowired (abstract classes, protocols, builtins).
            DependencyCircularReferenceError: If building the type requires
                itself.
        """
        if dependency_type in self._resolving:
            raise DependencyCircularReferenceError.from_chain([*self._resolving, dependency_type])

        dependency = self._dependency_for(dependency_type)
        self._resolving.append(dependency_type)
        try:
            return cast("T", dependency.resolve(self))
        finally:
            self._resolving.pop()

    def register(self, dependency_type: type[T], dependency: Dependency[T]) -> None:
        self.dependencies[dependency_type] = dependency

    def register_instance(self, dependency_type: type[T], instance: T) -> None:
        self.register(dependency_type, InstanceDependency(instance))

    def register_factory(self, dependency_type: type[T], factory: Callable[..., T]) -> None:
        self.register(dependency_type, FactoryDependency(factory))

    def register_singleton(
        self, dependency_type: type[T], factory: Callable[..., T] | None = None
    ) -> None:
        factory_dependency = FactoryDependency(factory or dependency_type)
        self.register(dependency_type, SingletonDependency(factory_dependency))

    def _dependency_for(self, dependency_type: type[T]) -> Dependency[Any]:
        if dependency_type in self.dependencies:
            return self.dependencies[dependency_type]

        # Generic aliases such as Repository[Widget] fall back to their origin
        origin = get_origin(dependency_type)
        if origin is not None and origin in self.dependencies:
            return self.dependencies[origin]

        if _is_autowirable(dependency_type):
            return FactoryDependency(dependency_type)

        raise DependencyNotFoundError.from_type(dependency_type)
