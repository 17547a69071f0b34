"""Dispatch hooks — typed events and an ordered listener bus.

Every pipeline stage fires one event. Listeners are called in
registration order with the event's fixed positional arguments::

    dispatcher.on("route.before", lambda handler, vars, data: None)
    dispatcher.on(NotFoundEvent, lambda path: {"code": 404, "message": "Gone"})

Returning ``False`` (``ABORT``) from a listener vetoes the stage and
skips the remaining listeners. Otherwise the last non-``None`` result
wins, and ``None`` means "no opinion".

Request data and path variables reach listeners as read-only snapshots.
A listener cannot change what the controller receives.

Thread safety:
    Registration is not synchronized. Register during setup; the
    dispatcher freezes its bus on the first dispatch so late
    registration fails loudly instead of racing ``fire()``.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Any, ClassVar, TypeAlias

from switchyard.routing.route import HandlerDescriptor

ABORT = False

Listener: TypeAlias = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class Event:
    """Base for dispatch events. Subclasses set ``name``."""

    name: ClassVar[str] = ""

    def args(self) -> tuple[Any, ...]:
        """Positional arguments passed to each listener, in field order."""
        return tuple(getattr(self, f.name) for f in fields(self))


@dataclass(frozen=True, slots=True)
class DispatchEvent(Event):
    name: ClassVar[str] = "route.dispatch"

    method: str
    path: str
    data: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class NotFoundEvent(Event):
    name: ClassVar[str] = "route.notFound"

    path: str


@dataclass(frozen=True, slots=True)
class MatchedEvent(Event):
    name: ClassVar[str] = "route.matched"

    handler: HandlerDescriptor
    vars: Mapping[str, str]
    path: str


@dataclass(frozen=True, slots=True)
class MiddlewareEvent(Event):
    name: ClassVar[str] = "route.middleware"

    middleware: Any
    handler: HandlerDescriptor
    vars: Mapping[str, str]
    data: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class BeforeEvent(Event):
    name: ClassVar[str] = "route.before"

    handler: HandlerDescriptor
    vars: Mapping[str, str]
    data: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class AfterEvent(Event):
    name: ClassVar[str] = "route.after"

    response: Any
    handler: HandlerDescriptor
    vars: Mapping[str, str]


@dataclass(frozen=True, slots=True)
class ErrorEvent(Event):
    name: ClassVar[str] = "route.error"

    exception: Exception
    handler: HandlerDescriptor
    vars: Mapping[str, str]


HOOKS: dict[str, type[Event]] = {
    cls.name: cls
    for cls in (
        DispatchEvent,
        NotFoundEvent,
        MatchedEvent,
        MiddlewareEvent,
        BeforeEvent,
        AfterEvent,
        ErrorEvent,
    )
}


def snapshot(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    """Read-only copy of *mapping* for listeners; later stages never see their edits."""
    return MappingProxyType(dict(mapping))


def is_abort(result: Any) -> bool:
    """True only for the ``False`` sentinel (not for falsy values like ``{}``)."""
    return result is False


def has_opinion(result: Any) -> bool:
    """True when a hook result should replace the pipeline's own outcome."""
    return result is not None and result is not False


class EventBus:
    """Named hooks with ordered, append-only listener lists."""

    __slots__ = ("_frozen", "_listeners")

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Reject further registration."""
        self._frozen = True

    def on(self, event: str | type[Event], listener: Listener) -> None:
        """Append *listener* to *event*. Duplicates are called once per registration."""
        if self._frozen:
            msg = "Cannot register listeners after the dispatcher has started dispatching."
            raise RuntimeError(msg)
        if not callable(listener):
            msg = f"Listener for {event!r} must be callable, got {type(listener).__name__}"
            raise TypeError(msg)
        name = event if isinstance(event, str) else event.name
        self._listeners.setdefault(name, []).append(listener)

    def listeners(self, event: str | type[Event]) -> tuple[Listener, ...]:
        name = event if isinstance(event, str) else event.name
        return tuple(self._listeners.get(name, ()))

    def fire(self, event: Event) -> Any:
        """Call every listener for *event*; see ``trigger``."""
        return self.trigger(event.name, *event.args())

    def trigger(self, name: str, *args: Any) -> Any:
        """Call listeners registered under *name* with *args*.

        Returns ``ABORT`` as soon as a listener returns it. Otherwise
        returns the last non-``None`` result, or ``None``.
        """
        result = None
        for listener in self._listeners.get(name, ()):
            outcome = listener(*args)
            if is_abort(outcome):
                return ABORT
            if outcome is not None:
                result = outcome
        return result
