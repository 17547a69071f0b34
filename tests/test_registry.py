"""Tests for switchyard.registry — named factories and container resolution."""

import pytest

from switchyard.errors import ConfigurationError
from switchyard.registry import Registry, Resolver
from switchyard.validation.rules import BUILTIN_VALIDATORS, Required


class Widget:
    pass


class TestRegistry:
    def test_default_has_builtin_validators(self) -> None:
        registry = Registry.default()
        assert set(registry.names("validator")) == set(BUILTIN_VALIDATORS)
        assert isinstance(registry.create("validator", "required"), Required)

    def test_empty_registry(self) -> None:
        assert Registry().names("validator") == ()

    def test_register_and_create(self) -> None:
        registry = Registry()
        registry.register("controller", "widgets", Widget)
        assert ("controller", "widgets") in registry
        assert ("middleware", "widgets") not in registry
        assert isinstance(registry.create("controller", "widgets"), Widget)

    def test_new_instance_each_time(self) -> None:
        registry = Registry()
        registry.register("controller", "widgets", Widget)
        assert registry.create("controller", "widgets") is not registry.create(
            "controller", "widgets"
        )

    def test_decorators(self) -> None:
        registry = Registry()

        @registry.middleware("noop")
        class Noop:
            def handle(self, handler, vars, data):
                return None

        assert registry.factory("middleware", "noop") is Noop

    def test_callable_identifier_used_directly(self) -> None:
        assert isinstance(Registry().create("controller", Widget), Widget)

    def test_unknown_name(self) -> None:
        with pytest.raises(ConfigurationError, match="No controller registered under 'nope'"):
            Registry().create("controller", "nope")

    def test_unresolvable_identifier(self) -> None:
        with pytest.raises(ConfigurationError, match="Cannot resolve"):
            Registry().factory("controller", 42)

    def test_unknown_kind(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown kind"):
            Registry().register("service", "x", Widget)  # type: ignore[arg-type]

    def test_non_callable_factory(self) -> None:
        with pytest.raises(ConfigurationError, match="must be callable"):
            Registry().register("controller", "x", "Widget")  # type: ignore[arg-type]


class FakeContainer:
    def __init__(self) -> None:
        self.requests: list[object] = []

    def get(self, identifier: object) -> object:
        self.requests.append(identifier)
        if identifier == "missing":
            raise LookupError("not bound")
        return Widget()


class TestResolver:
    def test_registry_without_container(self) -> None:
        registry = Registry()
        registry.register("controller", "widgets", Widget)
        assert isinstance(Resolver(registry)("controller", "widgets"), Widget)

    def test_container_builds_controllers_and_middleware(self) -> None:
        container = FakeContainer()
        resolve = Resolver(Registry(), container)
        resolve("controller", "widgets")
        resolve("middleware", "auth")
        assert container.requests == ["widgets", "auth"]

    def test_validators_bypass_container(self) -> None:
        container = FakeContainer()
        resolve = Resolver(Registry.default(), container)
        assert isinstance(resolve("validator", "required"), Required)
        assert container.requests == []

    def test_container_lookup_error(self) -> None:
        resolve = Resolver(Registry(), FakeContainer())
        with pytest.raises(ConfigurationError, match="not bound"):
            resolve("controller", "missing")
