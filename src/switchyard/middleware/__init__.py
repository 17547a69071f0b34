"""Middleware — Protocol-based, no inheritance required.

A middleware is any object exposing:
    handle(handler, vars, data) -> False | Mapping | None | True

Routes list middleware identifiers; the dispatcher runs them in
declared order through ``run_chain``.
"""

from switchyard.middleware.chain import ChainResult, run_chain
from switchyard.middleware.protocol import Middleware, MiddlewareResult

__all__ = [
    "ChainResult",
    "Middleware",
    "MiddlewareResult",
    "run_chain",
]
