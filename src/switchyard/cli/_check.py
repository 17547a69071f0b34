"""``switchyard check`` — route-table resolution check.

Resolves every controller, middleware, and validator identifier named in
the compiled route table without building anything. Exits with code 1
if any identifier fails to resolve or a controller lacks its action.
"""

import argparse

from switchyard.cli._resolve import load_or_exit
from switchyard.dispatcher import Dispatcher
from switchyard.errors import ConfigurationError
from switchyard.registry import Registry
from switchyard.routing.route import HandlerDescriptor


def _check_controller(registry: Registry, handler: HandlerDescriptor, where: str) -> list[str]:
    try:
        controller = registry.factory("controller", handler.controller)
    except ConfigurationError as exc:
        return [f"{where}: {exc}"]
    if isinstance(controller, type) and not callable(getattr(controller, handler.action, None)):
        return [f"{where}: controller has no action {handler.action!r}."]
    return []


def check_dispatcher(dispatcher: Dispatcher) -> list[str]:
    """Return one message per unresolvable identifier (empty when clean)."""
    registry = dispatcher.registry
    # A container builds controllers and middleware itself; only validators
    # can be checked against the registry then.
    containerized = dispatcher.container is not None
    problems: list[str] = []

    for route in dispatcher.router.routes:
        handler = route.handler
        where = f"{', '.join(route.methods)} {route.path}"

        if not containerized:
            problems.extend(_check_controller(registry, handler, where))
            for identifier in handler.middlewares:
                try:
                    registry.factory("middleware", identifier)
                except ConfigurationError as exc:
                    problems.append(f"{where}: {exc}")

        for field_name, rules in handler.validations.items():
            for rule in rules:
                try:
                    registry.factory("validator", rule.validator)
                except ConfigurationError as exc:
                    problems.append(f"{where} [{field_name}]: {exc}")

    return problems


def run_check(args: argparse.Namespace) -> None:
    dispatcher = load_or_exit(args.dispatcher)

    problems = check_dispatcher(dispatcher)
    routes = len(dispatcher.router.routes)
    if problems:
        for problem in problems:
            print(f"  ✗ {problem}")
        print(f"\n{len(problems)} problem(s) in {routes} route(s).")
        raise SystemExit(1)

    print(f"✓ {routes} route(s) resolve cleanly.")
