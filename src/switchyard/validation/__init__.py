"""Request validation — per-field rules, first failure wins.

Usage::

    from switchyard.validation import validate

    errors = validate(
        accept=("name", "price"),
        rules={"price": (ValidationRule("min", {"min": 0},
                                        "Price must be at least {{min}}"),)},
        data={"name": "Lamp", "price": "-3"},
        resolve=registry.create,
    )
    # errors == {"price": "Price must be at least 0"}
"""

import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from switchyard.routing.route import ValidationRule
from switchyard.validation.rules import (
    BUILTIN_VALIDATORS,
    Email,
    Integer,
    Matches,
    Max,
    MaxLength,
    Min,
    MinLength,
    Number,
    OneOf,
    Required,
    Url,
    Validator,
)

__all__ = [
    "BUILTIN_VALIDATORS",
    "Email",
    "Integer",
    "Matches",
    "Max",
    "MaxLength",
    "Min",
    "MinLength",
    "Number",
    "OneOf",
    "Required",
    "Url",
    "Validator",
    "render_message",
    "validate",
]

_TOKEN_RE = re.compile(r"\{\{([^{}]+)\}\}")


def render_message(template: str, params: Mapping[str, Any]) -> str:
    """Replace each ``{{key}}`` with ``str(params[key])``.

    Tokens without a matching parameter are left as written.
    """

    def substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in params:
            return str(params[key])
        return match.group(0)

    return _TOKEN_RE.sub(substitute, template)


def validate(
    accept: Sequence[str],
    rules: Mapping[str, Sequence[ValidationRule]],
    data: Mapping[str, Any],
    *,
    resolve: Callable[[str, Any], Any],
) -> dict[str, str]:
    """Validate accepted fields and return ``field -> message`` for failures.

    Args:
        accept: Fields to validate, in order. Fields not listed here are
            never checked, even if they have rules.
        rules: Per-field ``ValidationRule`` sequences, evaluated in order.
        data: Submitted request data. Missing fields validate as ``None``.
        resolve: ``resolve("validator", identifier)`` builds a fresh
            validator instance for each rule evaluation.

    Returns:
        An empty dict when everything passes, or when ``rules`` or ``data``
        is empty (no validator is built in that case).
    """
    errors: dict[str, str] = {}
    if not rules or not data:
        return errors

    for field_name in accept:
        field_rules = rules.get(field_name)
        if not field_rules:
            continue
        value = data.get(field_name)
        for rule in field_rules:
            validator: Validator = resolve("validator", rule.validator)
            if not validator.validate(value, rule.params):
                errors[field_name] = render_message(rule.message, rule.params)
                break

    return errors
