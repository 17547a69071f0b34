"""Routing — route table compilation and O(path-depth) matching.

Routes are compiled into an immutable trie before the first dispatch.
"""

from switchyard.routing.route import HandlerDescriptor, Route, RouteMatch, ValidationRule
from switchyard.routing.router import Router
from switchyard.routing.table import build_router

__all__ = [
    "HandlerDescriptor",
    "Route",
    "RouteMatch",
    "Router",
    "ValidationRule",
    "build_router",
]
