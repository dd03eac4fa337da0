"""Compiled router with trie-based path matching.

Routes and middleware scopes are registered during setup and compiled
into an immutable lookup structure when the app freezes.  Paths use
``:name`` for dynamic segments, the form the mounter produces for
``[name]`` directories.
"""

import re
from dataclasses import replace

from roost._internal.types import Handler
from roost.errors import ConfigurationError, MethodNotAllowed, NotFound
from roost.routing.route import MiddlewareScope, PathSegment, Route, RouteMatch

_PARAM_NAME_RE = re.compile(r"^[^/:]+$")


def split_path(path: str) -> list[str]:
    """``"/users/42/"`` -> ``["users", "42"]``."""
    return [part for part in path.strip("/").split("/") if part]


def normalize_path(path: str) -> str:
    """``""`` -> ``"/"``; ``"users/"`` -> ``"/users"``."""
    return "/" + "/".join(split_path(path))


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"         -> [PathSegment("users")]
        "/users/:id"     -> [PathSegment("users"), PathSegment(":id", is_param=True, ...)]
        "/"              -> []
    """
    segments: list[PathSegment] = []
    for part in split_path(path):
        if part.startswith("{") and part.endswith("}"):
            msg = (
                f"Route path {path!r} uses {{param}} syntax. "
                f"Dynamic segments are written :param (from [param] directories)."
            )
            raise ConfigurationError(msg)
        if part.startswith(":"):
            param_name = part[1:]
            if not _PARAM_NAME_RE.match(param_name):
                msg = f"Route path {path!r} has an invalid parameter segment {part!r}."
                raise ConfigurationError(msg)
            segments.append(PathSegment(value=part, is_param=True, param_name=param_name))
        else:
            segments.append(PathSegment(value=part))
    return segments


class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    __slots__ = ("children", "param_children", "routes_by_method")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Parameter children by name, tried in registration order
        self.param_children: dict[str, _TrieNode] = {}
        # Routes at this node, keyed by HTTP method
        self.routes_by_method: dict[str, Route] = {}


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()
        router.add(Route("/users/:id", handler, frozenset({"GET"}), middleware=(auth,)))
        router.add_scope("/users", (logger_mw,))
        router.compile()
        match = router.match("GET", "/users/42")
        chain = router.scoped_middleware("/users/42", route_path=match.route.path)
    """

    __slots__ = ("_compiled", "_root", "_scopes")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._scopes: list[MiddlewareScope] = []
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        self._check_not_compiled()

        route = replace(route, path=normalize_path(route.path))
        node = self._root
        for seg in parse_path(route.path):
            if seg.is_param:
                name = seg.param_name or ""
                node = node.param_children.setdefault(name, _TrieNode())
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        for method in route.methods:
            node.routes_by_method[method] = route

    def add_scope(self, path: str, middleware: tuple[Handler, ...]) -> None:
        """Apply *middleware* to every request at or below *path*."""
        self._check_not_compiled()
        path = normalize_path(path)
        self._scopes.append(
            MiddlewareScope(path=path, middleware=middleware, segments=tuple(parse_path(path)))
        )

    @property
    def routes(self) -> list[Route]:
        """All registered routes, collected depth-first from the trie."""
        seen: set[int] = set()
        result: list[Route] = []
        self._collect_routes(self._root, seen, result)
        return result

    @property
    def scopes(self) -> tuple[MiddlewareScope, ...]:
        return tuple(self._scopes)

    def _collect_routes(self, node: _TrieNode, seen: set[int], result: list[Route]) -> None:
        for route in node.routes_by_method.values():
            if id(route) not in seen:
                seen.add(id(route))
                result.append(route)
        for child in node.children.values():
            self._collect_routes(child, seen, result)
        for child in node.param_children.values():
            self._collect_routes(child, seen, result)

    def compile(self) -> None:
        """Freeze the router. No more routes or scopes can be added."""
        self._compiled = True

    def _check_not_compiled(self) -> None:
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

    # -- Matching --

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against compiled routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = split_path(path)
        result = self._match_node(self._root, parts, 0, {})
        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")

        node, params = result
        if method in node.routes_by_method:
            return RouteMatch(route=node.routes_by_method[method], path_params=params)
        raise MethodNotAllowed(frozenset(node.routes_by_method))

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[_TrieNode, dict[str, str]] | None:
        """Recursively match path parts; static children win over parameters."""
        if index == len(parts):
            if node.routes_by_method:
                return node, params
            return None

        part = parts[index]

        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, params)
            if result is not None:
                return result

        for name, child in node.param_children.items():
            result = self._match_node(child, parts, index + 1, {**params, name: part})
            if result is not None:
                return result

        return None

    def scoped_middleware(self, path: str, *, route_path: str | None = None) -> tuple[Handler, ...]:
        """Middleware of every scope covering *path*, in registration order.

        A scope registered at exactly *route_path* is left out: a route
        already carries its own directory's middleware.
        """
        parts = split_path(path)
        skip = normalize_path(route_path) if route_path is not None else None
        chain: list[Handler] = []
        for scope in self._scopes:
            if scope.path == skip:
                continue
            if _covers(scope.segments, parts):
                chain.extend(scope.middleware)
        return tuple(chain)


def _covers(segments: tuple[PathSegment, ...], parts: list[str]) -> bool:
    """True if *segments* match the leading parts of a request path."""
    if len(segments) > len(parts):
        return False
    return all(seg.is_param or seg.value == part for seg, part in zip(segments, parts, strict=False))
