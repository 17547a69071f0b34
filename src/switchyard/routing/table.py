"""Route table compilation.

Turns the declarative route table into a compiled ``Router``::

    ROUTES = {
        "/": [
            {"method": "get", "uri": "/", "controller": "home", "action": "index",
             "is_public": True},
        ],
        "/admin": [
            {"method": "POST", "uri": "/products", "controller": ProductController,
             "action": "store", "accept": ["name", "price"],
             "validations": {
                 "price": {"min": {"params": {"min": 0},
                                   "message": "Price must be at least {{min}}"}},
             },
             "middlewares": ["csrf"]},
        ],
    }

Group prefixes are joined to each member ``uri`` exactly once; the
``"/"`` prefix is never prepended.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from switchyard.errors import ConfigurationError
from switchyard.routing.route import HandlerDescriptor, Route, ValidationRule
from switchyard.routing.router import Router

logger = logging.getLogger("switchyard.routing")

DEFAULT_VALIDATION_MESSAGE = "Validation error"

_REQUIRED_KEYS = ("method", "uri", "controller", "action")


def join_prefix(prefix: str, uri: str) -> str:
    """Full URI for a route inside a group."""
    if prefix == "/":
        return uri
    return prefix + uri


def build_router(
    table: Mapping[str, Sequence[Mapping[str, Any]]],
    *,
    default_message: str = DEFAULT_VALIDATION_MESSAGE,
) -> Router:
    """Compile a route table into a frozen ``Router``.

    Raises ``ConfigurationError`` for malformed definitions and for a
    method + path pair registered twice.
    """
    router = Router()
    count = 0
    for prefix, group in table.items():
        for definition in group:
            router.add(build_route(prefix, definition, default_message=default_message))
            count += 1
    router.compile()
    logger.debug("Compiled %d routes in %d groups", count, len(table))
    return router


def build_route(
    prefix: str,
    definition: Mapping[str, Any],
    *,
    default_message: str = DEFAULT_VALIDATION_MESSAGE,
) -> Route:
    """Build one ``Route`` from a route definition inside group *prefix*."""
    missing = [key for key in _REQUIRED_KEYS if key not in definition]
    if missing:
        msg = f"Route definition in group {prefix!r} is missing: {', '.join(missing)}"
        raise ConfigurationError(msg)

    raw_methods = definition["method"]
    if isinstance(raw_methods, str):
        raw_methods = [raw_methods]
    methods = tuple(dict.fromkeys(m.upper() for m in raw_methods))
    if not methods:
        msg = f"Route {definition['uri']!r} in group {prefix!r} declares no method."
        raise ConfigurationError(msg)

    descriptor = HandlerDescriptor(
        controller=definition["controller"],
        action=definition["action"],
        is_public=bool(definition.get("is_public", False)),
        template=definition.get("template"),
        accept=tuple(definition.get("accept") or ()),
        validations=normalize_validations(
            definition.get("validations") or {}, default_message=default_message
        ),
        middlewares=tuple(definition.get("middlewares") or ()),
    )
    return Route(
        path=join_prefix(prefix, definition["uri"]),
        handler=descriptor,
        methods=methods,
    )


def normalize_validations(
    validations: Mapping[str, Any],
    *,
    default_message: str = DEFAULT_VALIDATION_MESSAGE,
) -> Mapping[str, tuple[ValidationRule, ...]]:
    """Normalize per-field rules into ordered ``ValidationRule`` tuples.

    Each field accepts either a mapping ``validator -> {"params", "message"}``
    or a sequence of ``ValidationRule`` / ``(validator, params, message)``
    tuples / ``{"validator", "params", "message"}`` mappings.
    """
    normalized: dict[str, tuple[ValidationRule, ...]] = {}
    for field_name, rules in validations.items():
        if isinstance(rules, Mapping):
            items: Iterable[Any] = (
                _rule_from_config(validator, config, default_message)
                for validator, config in rules.items()
            )
        elif isinstance(rules, (str, bytes)):
            msg = f"Rules for field {field_name!r} must be a mapping or a sequence."
            raise ConfigurationError(msg)
        else:
            items = (_coerce_rule(rule, default_message) for rule in rules)
        normalized[field_name] = tuple(items)
    return MappingProxyType(normalized)


def _rule_from_config(validator: Any, config: Any, default_message: str) -> ValidationRule:
    config = config or {}
    if not isinstance(config, Mapping):
        msg = f"Config for validator {validator!r} must be a mapping."
        raise ConfigurationError(msg)
    return ValidationRule(
        validator=validator,
        params=MappingProxyType(dict(config.get("params") or {})),
        message=config.get("message") or default_message,
    )


def _coerce_rule(rule: Any, default_message: str) -> ValidationRule:
    if isinstance(rule, ValidationRule):
        return rule
    if isinstance(rule, Mapping):
        if "validator" not in rule:
            msg = f"Rule mapping {rule!r} has no 'validator' key."
            raise ConfigurationError(msg)
        return _rule_from_config(rule["validator"], rule, default_message)
    if isinstance(rule, tuple) and 1 <= len(rule) <= 3:
        validator, params, message = (*rule, None, None)[:3]
        return ValidationRule(
            validator=validator,
            params=MappingProxyType(dict(params or {})),
            message=message or default_message,
        )
    # A bare validator identifier
    return ValidationRule(validator=rule, message=default_message)
