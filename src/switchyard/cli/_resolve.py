"""Locate the dispatcher a ``switchyard`` subcommand works on.

The target is ``"package.module:name"``; ``name`` defaults to
``dispatcher``. It may point at a ``Dispatcher``, a compiled or uncompiled
``Router``, or a bare route table (``{prefix: [definition, ...]}``). The
last two are wrapped in a ``Dispatcher`` with the default registry.
"""

import importlib
import sys
from collections.abc import Mapping

from switchyard.dispatcher import Dispatcher
from switchyard.errors import ConfigurationError
from switchyard.routing.router import Router

DEFAULT_ATTRIBUTE = "dispatcher"


def resolve_dispatcher(target: str) -> Dispatcher:
    """Import *target* and return a ``Dispatcher`` for it.

    Raises:
        ModuleNotFoundError: the module part cannot be imported.
        AttributeError: the module has no such name.
        TypeError: the name is bound to something that is not a
            dispatcher, router, or route table.
        ConfigurationError: a route table found at *target* is malformed.
    """
    module_name, _, attribute = target.partition(":")
    found = getattr(importlib.import_module(module_name), attribute or DEFAULT_ATTRIBUTE)

    match found:
        case Dispatcher():
            return found
        case Router() | Mapping():
            return Dispatcher(found)
    msg = (
        f"{target!r} is a {type(found).__name__}; expected a switchyard.Dispatcher, "
        "a Router, or a route table"
    )
    raise TypeError(msg)


def load_or_exit(target: str) -> Dispatcher:
    """``resolve_dispatcher`` for the CLI: print the problem and exit 1."""
    try:
        return resolve_dispatcher(target)
    except (ImportError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
