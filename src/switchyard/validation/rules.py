"""Built-in validators.

Each validator is a class with the shape::

    class Rule:
        def validate(self, value: Any, params: Mapping[str, Any]) -> bool: ...

Validators are pure: they only inspect ``value`` and ``params``. Any
object matching the protocol works with ``validate()``.

Except for ``Required``, every rule accepts a missing (``None``) or empty
value, so optional fields only fail when something was submitted.
"""

import re
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from switchyard.errors import ConfigurationError


class Validator(Protocol):
    """Protocol for field validators."""

    def validate(self, value: Any, params: Mapping[str, Any]) -> bool: ...


def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _param(params: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        if name in params:
            return params[name]
    msg = f"Validator is missing required parameter {names[0]!r}."
    raise ConfigurationError(msg)


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


class Required:
    """Field must be present and non-empty."""

    def validate(self, value: Any, params: Mapping[str, Any]) -> bool:
        if _blank(value):
            return False
        if isinstance(value, (list, tuple, dict, set)):
            return bool(value)
        return True


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


class MaxLength:
    """String must be at most ``params["max"]`` characters."""

    def validate(self, value: Any, params: Mapping[str, Any]) -> bool:
        if _blank(value):
            return True
        return len(str(value)) <= int(_param(params, "max", "length"))


class MinLength:
    """String must be at least ``params["min"]`` characters."""

    def validate(self, value: Any, params: Mapping[str, Any]) -> bool:
        if _blank(value):
            return True
        return len(str(value)) >= int(_param(params, "min", "length"))


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

# Structure only, not deliverability
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")

# http(s) scheme plus a host
_URL_RE = re.compile(r"^https?://[^\s/$.?#].\S*$", re.IGNORECASE)


class Email:
    """Value must be a valid email address (basic format check)."""

    def validate(self, value: Any, params: Mapping[str, Any]) -> bool:
        if _blank(value):
            return True
        return bool(_EMAIL_RE.match(str(value)))


class Url:
    """Value must be a valid URL (http/https)."""

    def validate(self, value: Any, params: Mapping[str, Any]) -> bool:
        if _blank(value):
            return True
        return bool(_URL_RE.match(str(value)))


class Matches:
    """Value must match ``params["pattern"]``."""

    def validate(self, value: Any, params: Mapping[str, Any]) -> bool:
        if _blank(value):
            return True
        return re.match(_param(params, "pattern"), str(value)) is not None


# ---------------------------------------------------------------------------
# Choice
# ---------------------------------------------------------------------------


class OneOf:
    """Value must be one of ``params["choices"]``."""

    def validate(self, value: Any, params: Mapping[str, Any]) -> bool:
        if _blank(value):
            return True
        choices = _param(params, "choices")
        if isinstance(choices, str):
            choices = [c.strip() for c in choices.split(",")]
        return str(value) in {str(c) for c in choices}


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class Integer:
    """Value must be a whole number."""

    def validate(self, value: Any, params: Mapping[str, Any]) -> bool:
        if _blank(value):
            return True
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return True
        try:
            int(str(value).strip())
        except ValueError:
            return False
        return True


class Number:
    """Value must be a number (int or float)."""

    def validate(self, value: Any, params: Mapping[str, Any]) -> bool:
        if _blank(value):
            return True
        return _to_number(value) is not None


class Min:
    """Numeric value must be at least ``params["min"]``."""

    def validate(self, value: Any, params: Mapping[str, Any]) -> bool:
        if _blank(value):
            return True
        number = _to_number(value)
        return number is not None and number >= float(_param(params, "min"))


class Max:
    """Numeric value must be at most ``params["max"]``."""

    def validate(self, value: Any, params: Mapping[str, Any]) -> bool:
        if _blank(value):
            return True
        number = _to_number(value)
        return number is not None and number <= float(_param(params, "max"))


BUILTIN_VALIDATORS: dict[str, Callable[[], Validator]] = {
    "required": Required,
    "min_length": MinLength,
    "max_length": MaxLength,
    "email": Email,
    "url": Url,
    "matches": Matches,
    "one_of": OneOf,
    "integer": Integer,
    "number": Number,
    "min": Min,
    "max": Max,
}
