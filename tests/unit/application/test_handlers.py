"""Tests for handler references, the conventional lookup and the registry."""

import logging
from unittest.mock import Mock

import pytest

from courier import Command, HandlerNotFound, HandlerResolutionFailed, InvalidHandler
from courier.application import (
    FactoryHandler,
    HandlerConvention,
    HandlerReference,
    HandlerRegistry,
    InlineHandler,
    InstanceHandler,
)
from tests.fixtures.widgets import CreateWidget, CreateWidgetHandler


class PlaceOrder(Command[str]):
    sku: str


class PlaceOrderHandler:
    def handle(self, command: PlaceOrder) -> str:
        return f"ordered {command.sku}"


class CancelOrder(Command[None]):
    pass


# Named like a handler but without a handle() method
class CancelOrderHandler:
    pass


class ArchiveOrder(Command[None]):
    pass


class TestHandlerReference:
    def test_classes_become_factories(self):
        assert isinstance(HandlerReference.of(PlaceOrderHandler), FactoryHandler)

    def test_objects_with_handle_become_instances(self):
        assert isinstance(HandlerReference.of(PlaceOrderHandler()), InstanceHandler)

    def test_plain_callables_become_inline_handlers(self):
        assert isinstance(HandlerReference.of(lambda command: None), InlineHandler)

    def test_other_values_are_kept_as_instances(self):
        assert isinstance(HandlerReference.of(42), InstanceHandler)

    def test_references_pass_through(self):
        reference = FactoryHandler(PlaceOrderHandler)

        assert HandlerReference.of(reference) is reference

    def test_factory_resolves_through_resolver(self):
        instance = PlaceOrderHandler()
        resolver = Mock(return_value=instance)

        handler = FactoryHandler(PlaceOrderHandler).resolve(PlaceOrder, resolver)

        assert handler is instance
        resolver.assert_called_once_with(PlaceOrderHandler)

    def test_factory_without_resolver_default_constructs(self):
        first = FactoryHandler(PlaceOrderHandler).resolve(PlaceOrder, None)
        second = FactoryHandler(PlaceOrderHandler).resolve(PlaceOrder, None)

        assert isinstance(first, PlaceOrderHandler)
        assert first is not second

    def test_factory_wraps_resolver_errors(self):
        error = RuntimeError("no database")

        def resolver(cls):
            raise error

        with pytest.raises(HandlerResolutionFailed) as exc_info:
            FactoryHandler(PlaceOrderHandler).resolve(PlaceOrder, resolver)

        assert exc_info.value.__cause__ is error
        assert exc_info.value.message_type is PlaceOrder
        assert "PlaceOrderHandler" in str(exc_info.value)

    def test_factory_rejects_instances_without_handle(self):
        with pytest.raises(InvalidHandler):
            FactoryHandler(CancelOrderHandler).resolve(CancelOrder, None)

    def test_instance_without_handle_is_invalid(self):
        with pytest.raises(InvalidHandler) as exc_info:
            InstanceHandler(object()).resolve(PlaceOrder, None)

        assert isinstance(exc_info.value, TypeError)

    def test_inline_handler_calls_function(self):
        handler = InlineHandler(lambda command: command.sku.upper())

        assert handler.resolve(PlaceOrder, None).handle(PlaceOrder(sku="abc")) == "ABC"


class TestHandlerConvention:
    def test_finds_handler_in_message_module(self):
        assert HandlerConvention().find(PlaceOrder) is PlaceOrderHandler

    def test_ignores_classes_without_handle(self):
        assert HandlerConvention().find(CancelOrder) is None

    def test_missing_handler_returns_none(self):
        assert HandlerConvention().find(ArchiveOrder) is None

    def test_custom_suffix(self):
        convention = HandlerConvention(suffix="Processor")

        assert convention.handler_name(PlaceOrder) == "PlaceOrderProcessor"
        assert convention.find(PlaceOrder) is None

    def test_searches_extra_modules(self):
        convention = HandlerConvention(modules=["tests.fixtures.widgets.handlers"])

        assert convention.find(CreateWidget) is CreateWidgetHandler

    def test_unimportable_module_is_skipped_with_warning(self, caplog):
        convention = HandlerConvention(modules=["tests.fixtures.does_not_exist"])

        with caplog.at_level(logging.WARNING):
            assert convention.find(ArchiveOrder) is None

        assert "Handler module could not be imported" in caplog.text

    def test_unimportable_module_is_warned_about_once(self, caplog):
        convention = HandlerConvention(modules=["tests.fixtures.does_not_exist"])

        with caplog.at_level(logging.WARNING, logger="courier.application.handlers"):
            convention.find(ArchiveOrder)
            convention.find(ArchiveOrder)

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert warnings[0].module_name == "tests.fixtures.does_not_exist"

    def test_failing_module_import_propagates(self):
        convention = HandlerConvention(modules=["tests.fixtures.broken_handlers"])

        with pytest.raises(RuntimeError, match="failed at import"):
            convention.find(ArchiveOrder)


class TestHandlerRegistry:
    def test_lookup_returns_explicit_registration(self):
        registry = HandlerRegistry("command")
        registry.register(PlaceOrder, PlaceOrderHandler)

        assert isinstance(registry.lookup(PlaceOrder), FactoryHandler)
        assert PlaceOrder in registry

    def test_last_registration_wins(self):
        registry = HandlerRegistry("command")
        first, second = PlaceOrderHandler(), PlaceOrderHandler()

        registry.register(PlaceOrder, first)
        registry.register(PlaceOrder, second)

        assert registry.resolve(PlaceOrder) is second
        assert len(registry.registrations()) == 1

    def test_lookup_without_convention_raises_not_found(self):
        registry = HandlerRegistry("command")

        with pytest.raises(HandlerNotFound) as exc_info:
            registry.lookup(PlaceOrder)

        assert str(exc_info.value) == "No handler registered for command PlaceOrder"
        assert isinstance(exc_info.value, LookupError)

    def test_lookup_wraps_failing_module_import(self):
        convention = HandlerConvention(modules=["tests.fixtures.broken_handlers"])
        registry = HandlerRegistry("command", convention=convention)

        with pytest.raises(HandlerResolutionFailed) as exc_info:
            registry.lookup(ArchiveOrder)

        assert exc_info.value.message_type is ArchiveOrder
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert ArchiveOrder not in registry

    def test_conventional_handler_is_cached_as_registration(self, caplog):
        registry = HandlerRegistry("command", convention=HandlerConvention())

        with caplog.at_level(logging.DEBUG, logger="courier.application.handlers"):
            reference = registry.lookup(PlaceOrder)

        assert isinstance(reference, FactoryHandler)
        assert reference.handler_type is PlaceOrderHandler
        assert registry.registrations() == {PlaceOrder: reference}
        assert registry.lookup(PlaceOrder) is reference
        assert "Resolved handler by convention" in caplog.text

    def test_explicit_registration_beats_convention(self):
        registry = HandlerRegistry("command", convention=HandlerConvention())
        registry.register(PlaceOrder, lambda command: "inline")

        assert registry.resolve(PlaceOrder).handle(PlaceOrder(sku="x")) == "inline"

    def test_lookup_is_by_exact_type(self):
        class PlaceUrgentOrder(PlaceOrder):
            pass

        registry = HandlerRegistry("command")
        registry.register(PlaceOrder, PlaceOrderHandler)

        with pytest.raises(HandlerNotFound):
            registry.lookup(PlaceUrgentOrder)
