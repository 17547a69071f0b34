"""Compiled router with trie-based path matching.

Routes are registered while the route table is built and compiled into
an immutable lookup structure before the first dispatch.
"""

import re
from dataclasses import dataclass
from typing import TypeAlias

from switchyard.errors import ConfigurationError, MethodNotAllowed, NotFound
from switchyard.routing.route import PathSegment, Route, RouteMatch

# Named converters for ``{name:type}`` segments. Any other type string is
# used as a raw regex, so ``{id:\d+}`` works as well as ``{id:int}``.
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/{id}"     -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
        "/users/{id:int}" -> [PathSegment("{id:int}", is_param=True, param_type="int")]
        "/files/{path:path}" -> [PathSegment("{path:path}", is_param=True, param_type="path")]
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("<") and part.endswith(">"):
            msg = (
                f"Route {path!r} uses <param> syntax. "
                "Path parameters are written as {param} or {param:type}."
            )
            raise ConfigurationError(msg)
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if ":" in inner:
                param_name, param_type = inner.split(":", 1)
            else:
                param_name = inner
                param_type = "str"
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    param_type=param_type,
                )
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


def _segment_regex(seg: PathSegment) -> re.Pattern[str]:
    pattern = CONVERTERS.get(seg.param_type, seg.param_type)
    try:
        return re.compile(f"^(?:{pattern})$")
    except re.error as exc:
        msg = f"Invalid pattern {seg.param_type!r} in segment {seg.value!r}: {exc}"
        raise ConfigurationError(msg) from exc


class _TrieNode:
    """A node in the route trie. Mutable until the router is compiled."""

    __slots__ = ("catch_all", "params", "routes", "static")

    def __init__(self) -> None:
        self.static: dict[str, _TrieNode] = {}
        # Tried in registration order after the static children
        self.params: list[_ParamEdge] = []
        self.catch_all: _CatchAllEdge | None = None
        # HTTP method -> route, in registration order
        self.routes: dict[str, Route] = {}


@dataclass(slots=True)
class _ParamEdge:
    name: str
    type: str
    regex: re.Pattern[str]
    node: _TrieNode


@dataclass(slots=True)
class _CatchAllEdge:
    """A ``{name:path}`` edge; swallows the rest of the path."""

    name: str
    routes: dict[str, Route]


_Candidate: TypeAlias = tuple[dict[str, Route], dict[str, str]]


def _register(routes: dict[str, Route], route: Route) -> None:
    for method in route.methods:
        if method in routes:
            msg = f"Duplicate route: {method} {route.path!r} is already registered."
            raise ConfigurationError(msg)
        routes[method] = route


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()
        router.add(Route("/users", descriptor, ("GET",)))
        router.add(Route("/users/{id:int}", descriptor, ("GET",)))
        router.compile()
        match = router.match("GET", "/users/42")

    Static segments win over parameters, and parameters over a
    trailing ``{name:path}`` catch-all.
    Empty segments are dropped, so ``/users`` and ``/users/`` are the same
    route both when registering and when matching.
    """

    __slots__ = ("_compiled", "_root", "_routes")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._routes: list[Route] = []
        self._compiled = False

    @property
    def compiled(self) -> bool:
        return self._compiled

    @property
    def routes(self) -> list[Route]:
        """Registered routes in registration order."""
        return list(self._routes)

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        node = self._root
        for seg in parse_path(route.path):
            if seg.is_param and seg.param_type == "path":
                if node.catch_all is None:
                    node.catch_all = _CatchAllEdge(name=seg.param_name or "path", routes={})
                _register(node.catch_all.routes, route)
                self._routes.append(route)
                return
            node = self._child(node, seg)

        _register(node.routes, route)
        self._routes.append(route)

    @staticmethod
    def _child(node: _TrieNode, seg: PathSegment) -> _TrieNode:
        if not seg.is_param:
            return node.static.setdefault(seg.value, _TrieNode())
        name = seg.param_name or ""
        for edge in node.params:
            if edge.name == name and edge.type == seg.param_type:
                return edge.node
        edge = _ParamEdge(
            name=name, type=seg.param_type, regex=_segment_regex(seg), node=_TrieNode()
        )
        node.params.append(edge)
        return edge.node

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against compiled routes.

        Returns a ``RouteMatch`` on success. ``HEAD`` falls back to the
        ``GET`` route when no explicit ``HEAD`` route exists.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        method = method.upper()
        parts = [p for p in path.strip("/").split("/") if p]
        found = self._find(self._root, parts, {})
        if found is None:
            raise NotFound(f"No route matches {method} {path!r}")

        routes, params = found
        route = routes.get(method)
        if route is None and method == "HEAD":
            route = routes.get("GET")
        if route is None:
            raise MethodNotAllowed(tuple(routes))
        return RouteMatch(route=route, path_params=params)

    def _find(
        self,
        node: _TrieNode,
        parts: list[str],
        params: dict[str, str],
    ) -> _Candidate | None:
        """Depth-first search with backtracking; first full match wins."""
        if not parts:
            return (node.routes, params) if node.routes else None

        head, rest = parts[0], parts[1:]

        child = node.static.get(head)
        if child is not None:
            found = self._find(child, rest, params)
            if found is not None:
                return found

        for edge in node.params:
            if edge.regex.match(head) is None:
                continue
            found = self._find(edge.node, rest, {**params, edge.name: head})
            if found is not None:
                return found

        if node.catch_all is not None:
            return node.catch_all.routes, {**params, node.catch_all.name: "/".join(parts)}

        return None
