"""Ordered middleware execution for a matched route."""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from switchyard.errors import ConfigurationError
from switchyard.events import EventBus, MiddlewareEvent, is_abort, snapshot
from switchyard.routing.route import HandlerDescriptor, Identifier

logger = logging.getLogger("switchyard.dispatch")


@dataclass(frozen=True, slots=True)
class ChainResult:
    """Outcome of ``run_chain``.

    Falsy when a middleware aborted; ``middleware`` then names it.
    ``data`` is the request data after every merge that happened.
    """

    data: dict[str, Any] = field(default_factory=dict)
    aborted: bool = False
    middleware: Identifier | None = None

    def __bool__(self) -> bool:
        return not self.aborted


def run_chain(
    middlewares: Sequence[Identifier],
    handler: HandlerDescriptor,
    vars: Mapping[str, str],
    data: Mapping[str, Any],
    *,
    bus: EventBus,
    resolve: Callable[[str, Any], Any],
) -> ChainResult:
    """Run *middlewares* in declared order.

    Fires ``route.middleware`` before each one (observation only), then
    calls its ``handle(handler, vars, data)``. A ``False`` result stops
    the chain; a mapping is merged into a new data dict.

    Raises ``ConfigurationError`` when an identifier cannot be resolved
    or the resolved object has no ``handle`` method.
    """
    current = dict(data)
    for identifier in middlewares:
        bus.fire(MiddlewareEvent(identifier, handler, snapshot(vars), snapshot(current)))

        instance = resolve("middleware", identifier)
        handle = getattr(instance, "handle", None)
        if not callable(handle):
            msg = f"Middleware {identifier!r} does not implement handle()."
            raise ConfigurationError(msg)

        result = handle(handler, snapshot(vars), dict(current))
        if is_abort(result):
            logger.debug("Middleware %r aborted %s", identifier, handler.name)
            return ChainResult(data=current, aborted=True, middleware=identifier)
        if isinstance(result, Mapping):
            current = {**current, **result}

    return ChainResult(data=current)
