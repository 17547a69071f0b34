"""Identifier resolution for controllers, middleware, and validators.

Route tables name their collaborators either by registry name or by
passing the factory (usually the class) directly::

    registry = Registry.default()

    @registry.controller("products")
    class ProductController(Controller):
        ...

    registry.register("middleware", "csrf", CsrfMiddleware)

A fresh instance is built on every resolution. Nothing is cached.

An optional ``Container`` takes over controller and middleware
construction when configured. Validators always come from the registry.
"""

from collections.abc import Callable
from typing import Any, Literal, Protocol, TypeAlias

from switchyard.errors import ConfigurationError

Kind: TypeAlias = Literal["controller", "middleware", "validator"]
Factory: TypeAlias = Callable[[], Any]

KINDS: tuple[Kind, ...] = ("controller", "middleware", "validator")


class Container(Protocol):
    """Anything that builds an object from an identifier."""

    def get(self, identifier: Any) -> Any: ...


class Registry:
    """Named factories, one namespace per kind."""

    __slots__ = ("_factories",)

    def __init__(self) -> None:
        self._factories: dict[str, dict[str, Factory]] = {kind: {} for kind in KINDS}

    @classmethod
    def default(cls) -> "Registry":
        """A registry pre-loaded with the built-in validators."""
        from switchyard.validation.rules import BUILTIN_VALIDATORS

        registry = cls()
        for name, factory in BUILTIN_VALIDATORS.items():
            registry.register("validator", name, factory)
        return registry

    def register(self, kind: Kind, name: str, factory: Factory) -> None:
        """Bind *name* to *factory*. Re-registering a name replaces it."""
        if kind not in self._factories:
            msg = f"Unknown kind {kind!r}; expected one of {', '.join(KINDS)}"
            raise ConfigurationError(msg)
        if not callable(factory):
            msg = f"Factory for {kind} {name!r} must be callable."
            raise ConfigurationError(msg)
        self._factories[kind][name] = factory

    def controller(self, name: str) -> Callable[[Factory], Factory]:
        return self._decorator("controller", name)

    def middleware(self, name: str) -> Callable[[Factory], Factory]:
        return self._decorator("middleware", name)

    def validator(self, name: str) -> Callable[[Factory], Factory]:
        return self._decorator("validator", name)

    def _decorator(self, kind: Kind, name: str) -> Callable[[Factory], Factory]:
        def decorator(factory: Factory) -> Factory:
            self.register(kind, name, factory)
            return factory

        return decorator

    def names(self, kind: Kind) -> tuple[str, ...]:
        return tuple(self._factories[kind])

    def __contains__(self, key: tuple[Kind, str]) -> bool:
        kind, name = key
        return name in self._factories.get(kind, {})

    def factory(self, kind: Kind, identifier: Any) -> Factory:
        """Return the factory behind *identifier* without calling it."""
        if isinstance(identifier, str):
            try:
                return self._factories[kind][identifier]
            except KeyError:
                msg = f"No {kind} registered under {identifier!r}."
                raise ConfigurationError(msg) from None
        if callable(identifier):
            return identifier
        msg = f"Cannot resolve {kind} identifier {identifier!r}."
        raise ConfigurationError(msg)

    def create(self, kind: Kind, identifier: Any) -> Any:
        """Build a new instance for *identifier*."""
        return self.factory(kind, identifier)()


class Resolver:
    """Registry + optional container, as used by one dispatcher."""

    __slots__ = ("container", "registry")

    def __init__(self, registry: Registry, container: Container | None = None) -> None:
        self.registry = registry
        self.container = container

    def __call__(self, kind: Kind, identifier: Any) -> Any:
        if self.container is not None and kind != "validator":
            try:
                return self.container.get(identifier)
            except LookupError as exc:
                msg = f"Container cannot build {kind} {identifier!r}: {exc}"
                raise ConfigurationError(msg) from exc
        return self.registry.create(kind, identifier)
