"""Switchyard — an HTTP request-dispatch pipeline.

Declarative route table in, structured response out, with an auth gate,
per-route validation and middleware, and ordered lifecycle hooks along
the way.

Basic usage::

    from switchyard import Controller, Dispatcher

    class Home(Controller):
        def index(self):
            return {"code": 200, "message": "Hello, World!"}

    dispatcher = Dispatcher({
        "/": [{"method": "GET", "uri": "/", "controller": Home,
               "action": "index", "is_public": True}],
    })
    dispatcher.dispatch("GET", "/")
"""

__version__ = "0.1.0"
__all__ = [
    "ABORT",
    "ConfigurationError",
    "Controller",
    "Dispatcher",
    "DispatcherConfig",
    "EventBus",
    "HandlerDescriptor",
    "MemorySession",
    "MethodNotAllowed",
    "NotAuthenticated",
    "NotFound",
    "Registry",
    "Response",
    "SessionContext",
    "SignedCookieSession",
    "SwitchyardError",
    "ValidationFailed",
    "ValidationRule",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    if name == "Dispatcher":
        from switchyard.dispatcher import Dispatcher

        return Dispatcher

    if name == "DispatcherConfig":
        from switchyard.config import DispatcherConfig

        return DispatcherConfig

    if name == "Controller":
        from switchyard.controller import Controller

        return Controller

    if name == "Response":
        from switchyard.response import Response

        return Response

    if name == "Registry":
        from switchyard.registry import Registry

        return Registry

    if name in ("ABORT", "EventBus"):
        from switchyard import events as _events

        return getattr(_events, name)

    if name in ("HandlerDescriptor", "ValidationRule"):
        from switchyard.routing import route as _route

        return getattr(_route, name)

    if name in ("MemorySession", "SessionContext", "SignedCookieSession"):
        from switchyard import session as _session

        return getattr(_session, name)

    if name in (
        "ConfigurationError",
        "MethodNotAllowed",
        "NotAuthenticated",
        "NotFound",
        "SwitchyardError",
        "ValidationFailed",
    ):
        from switchyard import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
