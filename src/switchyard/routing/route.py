"""Route, HandlerDescriptor, and RouteMatch frozen dataclasses."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TypeAlias

# A registry name or a callable factory (usually a class)
Identifier: TypeAlias = str | Callable[..., Any]


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class ValidationRule:
    """One validator applied to one field.

    ``message`` may contain ``{{key}}`` tokens filled from ``params``.
    """

    validator: Identifier
    params: Mapping[str, Any] = field(default_factory=dict)
    message: str = "Validation error"


@dataclass(frozen=True, slots=True)
class HandlerDescriptor:
    """Static metadata for a matched route.

    Built once when the route table is compiled, read-only afterwards.
    """

    controller: Identifier
    action: str
    is_public: bool = False
    template: str | None = None
    accept: tuple[str, ...] = ()
    validations: Mapping[str, tuple[ValidationRule, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    middlewares: tuple[Identifier, ...] = ()

    @property
    def name(self) -> str:
        """``Controller.action`` label for logs and route listings."""
        controller = self.controller
        if not isinstance(controller, str):
            controller = getattr(controller, "__qualname__", repr(controller))
        return f"{controller}.{self.action}"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created by the table builder, compiled into the router.
    """

    path: str
    handler: HandlerDescriptor
    methods: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]

    @property
    def handler(self) -> HandlerDescriptor:
        return self.route.handler
