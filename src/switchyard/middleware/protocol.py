"""Middleware protocol.

A middleware is any object with a ``handle`` method::

    class RequireJson:
        def handle(self, handler, vars, data):
            ...

No base class required. The chain checks the shape, not the lineage.

``handle`` returns one of:

- ``False`` -- abort the chain; the request is answered with 403.
- a mapping -- merged over the request data for the next stage.
- ``None`` or ``True`` -- continue with the data unchanged.
"""

from collections.abc import Mapping
from typing import Any, Protocol, TypeAlias

from switchyard.routing.route import HandlerDescriptor

# What ``handle`` may return
MiddlewareResult: TypeAlias = bool | Mapping[str, Any] | None


class Middleware(Protocol):
    """Protocol for per-route middleware."""

    def handle(
        self,
        handler: HandlerDescriptor,
        vars: Mapping[str, str],
        data: Mapping[str, Any],
    ) -> MiddlewareResult: ...
