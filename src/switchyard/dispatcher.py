"""The dispatcher — one request in, one response out.

Owns the full request lifecycle. Every stage is a possible exit point
and exactly one terminal outcome is reached per call::

    route.dispatch  ->  match  ->  route.matched  ->  auth gate
        ->  validation  ->  middleware (route.middleware each)
        ->  route.before  ->  controller action  ->  route.after
                                        \\->  route.error on exception

Usage::

    dispatcher = Dispatcher(ROUTES, registry=registry, session=session)
    dispatcher.on("route.notFound", lambda path: {"code": 404, "message": f"No {path}"})
    response = dispatcher.dispatch("GET", "/products/42?ref=home")

Thread safety:
    The compiled router and handler descriptors are frozen. Listener
    registration happens during setup; the first ``dispatch()`` freezes
    the event bus (Lock + double-check) so a shared dispatcher never
    mutates while concurrent calls are firing hooks. Request data, path
    variables, and error maps are per-call values.
"""

import logging
import threading
from collections.abc import Mapping
from typing import Any
from urllib.parse import unquote

from switchyard import response as responses
from switchyard.audit import emit_security_event
from switchyard.config import DispatcherConfig
from switchyard.controller import SupportsData
from switchyard.errors import (
    ConfigurationError,
    MethodNotAllowed,
    NotAuthenticated,
    NotFound,
    ValidationFailed,
)
from switchyard.events import (
    AfterEvent,
    BeforeEvent,
    DispatchEvent,
    ErrorEvent,
    Event,
    EventBus,
    Listener,
    MatchedEvent,
    NotFoundEvent,
    has_opinion,
    is_abort,
    snapshot,
)
from switchyard.middleware.chain import run_chain
from switchyard.registry import Container, Registry, Resolver
from switchyard.routing.route import HandlerDescriptor, RouteMatch
from switchyard.routing.router import Router
from switchyard.routing.table import build_router
from switchyard.session import SessionContext
from switchyard.validation import validate

logger = logging.getLogger("switchyard.dispatch")


def normalize_path(path: str) -> str:
    """Drop the query string and percent-decode the path."""
    path = path.split("?", 1)[0]
    return unquote(path)


class Dispatcher:
    """HTTP request-dispatch pipeline over a compiled route table.

    Args:
        routes: A route-table mapping (``{prefix: [definition, ...]}``)
            or an already-built ``Router``.
        registry: Named factories for controllers, middleware, and
            validators. Defaults to ``Registry.default()``.
        container: Optional object with ``get(identifier)``; when given,
            it builds controllers and middleware instead of the registry.
        session: Default ``SessionContext`` for calls that don't pass one.
        config: ``DispatcherConfig``; defaults apply when omitted.
    """

    __slots__ = (
        "_events",
        "_freeze_lock",
        "_frozen",
        "_registry",
        "_resolve",
        "_router",
        "_session",
        "config",
    )

    def __init__(
        self,
        routes: Mapping[str, Any] | Router,
        *,
        registry: Registry | None = None,
        container: Container | None = None,
        session: SessionContext | None = None,
        config: DispatcherConfig | None = None,
    ) -> None:
        self.config: DispatcherConfig = config or DispatcherConfig()
        if isinstance(routes, Router):
            router = routes
            if not router.compiled:
                router.compile()
        else:
            router = build_router(
                routes, default_message=self.config.default_validation_message
            )
        self._router = router
        self._registry = registry if registry is not None else Registry.default()
        self._resolve = Resolver(self._registry, container)
        self._session = session
        self._events = EventBus()
        self._freeze_lock = threading.Lock()
        self._frozen = False

    # -- Setup --

    @property
    def router(self) -> Router:
        return self._router

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def container(self) -> Container | None:
        return self._resolve.container

    @property
    def events(self) -> EventBus:
        return self._events

    def on(self, event: str | type[Event], listener: Listener) -> None:
        """Register *listener* for a hook name (``"route.before"``) or event class."""
        self._events.on(event, listener)

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            if self.config.freeze_listeners:
                self._events.freeze()
            self._frozen = True

    # -- Dispatch --

    def dispatch(
        self,
        method: str,
        path: str,
        data: Mapping[str, Any] | None = None,
        *,
        session: SessionContext | None = None,
        referrer: str | None = None,
    ) -> Any:
        """Run the request through the pipeline and return its response.

        The result is a ``Response`` for every outcome the dispatcher
        produces itself, or whatever the controller action or a hook
        returned.

        Raises:
            ConfigurationError: an identifier in the matched route cannot
                be resolved.
            NotAuthenticated, ValidationFailed: only with
                ``config.hard_stop``.
        """
        self._ensure_frozen()
        method = method.upper()
        path = normalize_path(path)
        data = dict(data or {})

        self._events.fire(DispatchEvent(method, path, snapshot(data)))

        try:
            match = self._router.match(method, path)
        except NotFound:
            return self._handle_not_found(method, path)
        except MethodNotAllowed as exc:
            logger.debug("405 %s %s — %s", method, path, exc.detail)
            return responses.method_not_allowed(exc.allowed)

        return self._handle_found(
            match,
            method,
            path,
            data,
            session=session if session is not None else self._session,
            referrer=referrer,
        )

    def _handle_not_found(self, method: str, path: str) -> Any:
        custom = self._events.fire(NotFoundEvent(path))
        if has_opinion(custom):
            return custom
        logger.debug("404 %s %s", method, path)
        return responses.not_found()

    def _handle_found(
        self,
        match: RouteMatch,
        method: str,
        path: str,
        data: dict[str, Any],
        *,
        session: SessionContext | None,
        referrer: str | None,
    ) -> Any:
        handler = match.handler
        vars = match.path_params

        matched = self._events.fire(MatchedEvent(handler, snapshot(vars), path))
        if self.config.matched_veto and is_abort(matched):
            logger.debug("403 %s %s — vetoed by route.matched", method, path)
            return responses.forbidden("Forbidden by matched event")

        if not handler.is_public and not (session is not None and session.is_authenticated()):
            return self._unauthenticated(method, path)

        if data and handler.validations:
            errors = validate(handler.accept, handler.validations, data, resolve=self._resolve)
            if errors:
                return self._validation_failed(method, path, data, errors, session, referrer)

        if handler.middlewares:
            chain = run_chain(
                handler.middlewares,
                handler,
                vars,
                data,
                bus=self._events,
                resolve=self._resolve,
            )
            if not chain:
                logger.debug("403 %s %s — aborted by %r", method, path, chain.middleware)
                return responses.forbidden("Forbidden by middleware")
            data = chain.data

        before = self._events.fire(BeforeEvent(handler, snapshot(vars), snapshot(data)))
        if is_abort(before):
            logger.debug("403 %s %s — vetoed by route.before", method, path)
            return responses.forbidden("Forbidden by before event")
        if isinstance(before, Mapping):
            return before

        return self._invoke(handler, vars, data, method, path)

    def _unauthenticated(self, method: str, path: str) -> Any:
        logger.warning("401 %s %s — not authenticated", method, path)
        emit_security_event("auth.unauthenticated", method=method, path=path)
        if self.config.hard_stop:
            raise NotAuthenticated(method, path)
        return responses.unauthenticated(self.config.unauthenticated_message)

    def _validation_failed(
        self,
        method: str,
        path: str,
        data: dict[str, Any],
        errors: dict[str, str],
        session: SessionContext | None,
        referrer: str | None,
    ) -> Any:
        location = referrer or self.config.redirect_fallback
        logger.info("Validation failed for %s %s: %s", method, path, ", ".join(errors))
        if session is not None:
            session.store_validation_errors(errors)
            session.store_form_data(data)
            session.redirect(location)
        emit_security_event(
            "validation.failed",
            method=method,
            path=path,
            details={"fields": sorted(errors)},
        )
        if self.config.hard_stop:
            raise ValidationFailed(errors, data, location)
        return responses.validation_redirect(location, errors)

    def _invoke(
        self,
        handler: HandlerDescriptor,
        vars: dict[str, str],
        data: dict[str, Any],
        method: str,
        path: str,
    ) -> Any:
        """Build the controller, call its action, and run after/error hooks."""
        try:
            controller = self._resolve("controller", handler.controller)

            if not isinstance(controller, SupportsData):
                msg = f"Controller for {handler.name} does not implement set_data()."
                raise ConfigurationError(msg)
            controller.set_data(data)

            set_template = getattr(controller, "set_template", None)
            if handler.template is not None and callable(set_template):
                set_template(handler.template)

            action = getattr(controller, handler.action, None)
            if not callable(action):
                msg = f"Controller for {handler.name} has no action {handler.action!r}."
                raise ConfigurationError(msg)

            response = action(*vars.values())

            after = self._events.fire(AfterEvent(response, handler, snapshot(vars)))
            if has_opinion(after):
                response = after
            return response
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.exception("500 %s %s — %s", method, path, handler.name)
            result = self._events.fire(ErrorEvent(exc, handler, snapshot(vars)))
            if has_opinion(result):
                return result
            return responses.internal_error(exc)
