"""Switchyard CLI — route listing, route-table checks, and one-off dispatch.

Entry point registered as ``switchyard`` in ``pyproject.toml``::

    [project.scripts]
    switchyard = "switchyard.cli:main"
"""

import argparse
import sys

_TARGET_HELP = "module:name of a Dispatcher, Router, or route table (name defaults to dispatcher)"


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``switchyard`` command."""
    parser = argparse.ArgumentParser(
        prog="switchyard",
        description="Switchyard — HTTP request-dispatch pipeline.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- switchyard routes ------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List compiled routes")
    routes_parser.add_argument("dispatcher", help=_TARGET_HELP)

    # -- switchyard check -------------------------------------------------
    check_parser = subparsers.add_parser(
        "check", help="Verify every controller, middleware, and validator resolves"
    )
    check_parser.add_argument("dispatcher", help=_TARGET_HELP)

    # -- switchyard dispatch ----------------------------------------------
    dispatch_parser = subparsers.add_parser("dispatch", help="Dispatch one request and print it")
    dispatch_parser.add_argument("dispatcher", help=_TARGET_HELP)
    dispatch_parser.add_argument("method", help="HTTP method (e.g. GET)")
    dispatch_parser.add_argument("path", help="Request path, query string allowed")
    dispatch_parser.add_argument(
        "-d",
        "--data",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Request data field (repeatable)",
    )
    dispatch_parser.add_argument(
        "--user",
        default=None,
        help="Dispatch with an authenticated session for this user id",
    )
    dispatch_parser.add_argument("--referrer", default=None, help="Referring location")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from switchyard.cli._routes import run_routes

        run_routes(args)
    elif args.command == "check":
        from switchyard.cli._check import run_check

        run_check(args)
    elif args.command == "dispatch":
        from switchyard.cli._dispatch import run_dispatch

        run_dispatch(args)
