"""``switchyard routes`` — list compiled routes.

Prints a table of METHOD, PATH, HANDLER, and FLAGS (public, middleware
count, validated fields).
"""

import argparse

from switchyard.cli._resolve import load_or_exit


def run_routes(args: argparse.Namespace) -> None:
    dispatcher = load_or_exit(args.dispatcher)

    routes = dispatcher.router.routes
    if not routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str, str]] = []
    for route in routes:
        handler = route.handler
        flags: list[str] = []
        if handler.is_public:
            flags.append("public")
        if handler.middlewares:
            flags.append(f"mw={len(handler.middlewares)}")
        if handler.validations:
            flags.append(f"validates={','.join(handler.validations)}")
        rows.append((", ".join(route.methods), route.path, handler.name, " ".join(flags)))

    max_methods = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_path = max(max(len(r[1]) for r in rows), 4)  # "PATH" header
    max_handler = max(max(len(r[2]) for r in rows), 7)  # "HANDLER" header

    fmt = f"{{:<{max_methods}}}  {{:<{max_path}}}  {{:<{max_handler}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "HANDLER", "FLAGS").rstrip())
    print("-" * min(max_methods + max_path + max_handler + 11, 80))
    for row in rows:
        print(fmt.format(*row).rstrip())
