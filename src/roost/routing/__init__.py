"""Routing — compiled route table with O(path-depth) matching.

Routes and middleware scopes are registered during setup and compiled
into an immutable lookup structure when the app freezes.
"""

from roost.routing.route import MiddlewareScope, PathSegment, Route, RouteMatch
from roost.routing.router import Router, normalize_path, parse_path

__all__ = [
    "MiddlewareScope",
    "PathSegment",
    "Route",
    "RouteMatch",
    "Router",
    "normalize_path",
    "parse_path",
]
