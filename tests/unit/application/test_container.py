"""Tests for DependencyContainer."""

from abc import ABC, abstractmethod

import pytest

from courier.application import (
    DependencyCircularReferenceError,
    DependencyContainer,
    DependencyNotFoundError,
)


class Clock(ABC):
    @abstractmethod
    def now(self) -> int: ...


class FixedClock(Clock):
    def now(self) -> int:
        return 42


class Greeter:
    def __init__(self, clock: Clock, greeting: str = "hello"):
        self.clock = clock
        self.greeting = greeting


class Chicken:
    def __init__(self, egg: "Egg"):
        self.egg = egg


class Egg:
    def __init__(self, chicken: Chicken):
        self.chicken = chicken


def test_singleton_is_built_once():
    container = DependencyContainer()
    container.register_singleton(Clock, FixedClock)

    assert container.resolve(Clock) is container.resolve(Clock)
    assert container.resolve(Clock).now() == 42


def test_factory_is_called_every_time():
    container = DependencyContainer()
    container.register_factory(Clock, FixedClock)

    assert container.resolve(Clock) is not container.resolve(Clock)


def test_instance_registration():
    clock = FixedClock()
    container = DependencyContainer()
    container.register_instance(Clock, clock)

    assert container.resolve(Clock) is clock
    assert Clock in container


def test_autowires_unregistered_classes():
    container = DependencyContainer()
    container.register_singleton(Clock, FixedClock)

    greeter = container.resolve(Greeter)

    assert greeter.clock is container.resolve(Clock)
    assert greeter.greeting == "hello"
    assert container.resolve(Greeter) is not greeter


def test_abstract_dependency_must_be_registered():
    with pytest.raises(DependencyNotFoundError, match="Dependency Clock not found"):
        DependencyContainer().resolve(Greeter)


def test_builtins_are_not_autowired():
    with pytest.raises(DependencyNotFoundError):
        DependencyContainer().resolve(str)


def test_circular_dependencies_are_detected():
    with pytest.raises(DependencyCircularReferenceError, match="Chicken -> Egg -> Chicken"):
        DependencyContainer().resolve(Chicken)


def test_container_recovers_after_failed_resolve():
    container = DependencyContainer()
    with pytest.raises(DependencyNotFoundError):
        container.resolve(Greeter)

    container.register_singleton(Clock, FixedClock)

    assert isinstance(container.resolve(Greeter), Greeter)
