"""Switchyard exception hierarchy.

Shared across Router, Dispatcher, middleware chain, and validation so every
module raises and catches the same types.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when the route table or an identifier is invalid.

    Never converted into a response: a controller, middleware, or
    validator that cannot be resolved means the route table is broken.
    """


@dataclass(frozen=True, slots=True)
class RoutingError(SwitchyardError):
    """A match failure that maps directly to an HTTP status code.

    Raised by the router. The dispatcher catches these and turns them
    into a ``Response``.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(RoutingError):  # noqa: N818
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(RoutingError):  # noqa: N818
    """405 — route exists but not for this HTTP method.

    ``allowed`` keeps the methods in the order they were registered.
    """

    allowed: tuple[str, ...]

    def __init__(self, allowed: tuple[str, ...] | list[str], detail: str = "") -> None:
        allowed = tuple(allowed)
        default_detail = f"Allowed methods: {', '.join(allowed)}"
        super().__init__(status=405, detail=detail or default_detail)
        object.__setattr__(self, "allowed", allowed)


class HardStop(SwitchyardError):  # noqa: N818
    """A pipeline exit that bypasses the normal response channel.

    Only raised when ``DispatcherConfig.hard_stop`` is enabled. The
    transport is expected to catch it and emit its own output.
    """


class NotAuthenticated(HardStop):
    """A non-public route was hit without an authenticated session."""

    def __init__(self, method: str, path: str) -> None:
        super().__init__(f"Not Authenticated: {method} {path}")
        self.method = method
        self.path = path


class ValidationFailed(HardStop):
    """Submitted data failed validation; the client should be redirected."""

    def __init__(
        self,
        errors: Mapping[str, str],
        form_data: Mapping[str, Any],
        location: str,
    ) -> None:
        fields = ", ".join(errors)
        super().__init__(f"Validation failed for: {fields}")
        self.errors = dict(errors)
        self.form_data = dict(form_data)
        self.location = location
