"""``switchyard dispatch`` — run one request through a dispatcher.

Prints the response as JSON. Useful for poking at a route table without
a transport in front of it.
"""

import argparse
import json
import sys
from collections.abc import Mapping
from typing import Any

from switchyard.cli._resolve import load_or_exit
from switchyard.errors import HardStop
from switchyard.session import MemorySession


def parse_fields(pairs: list[str]) -> dict[str, str]:
    """``["a=1", "b=x=y"]`` -> ``{"a": "1", "b": "x=y"}``."""
    fields: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            msg = f"Expected KEY=VALUE, got {pair!r}"
            raise ValueError(msg)
        fields[key] = value
    return fields


def _jsonable(result: Any) -> Any:
    if hasattr(result, "to_dict"):
        return result.to_dict()
    if isinstance(result, Mapping):
        return dict(result)
    return result


def run_dispatch(args: argparse.Namespace) -> None:
    dispatcher = load_or_exit(args.dispatcher)

    try:
        data = parse_fields(args.data)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    session = MemorySession()
    if args.user is not None:
        session.login(args.user)

    try:
        result = dispatcher.dispatch(
            args.method,
            args.path,
            data,
            session=session,
            referrer=args.referrer,
        )
    except HardStop as exc:
        print(f"Halted: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    print(json.dumps(_jsonable(result), indent=2, default=str))
