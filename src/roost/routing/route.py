"""Route, MiddlewareScope and RouteMatch frozen dataclasses."""

from dataclasses import dataclass

from roost._internal.types import Handler


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/:id``    (is_param=True, param_name="id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``middleware`` is the route's own chain, run in order before
    ``handler``.
    """

    path: str
    handler: Handler
    methods: frozenset[str]
    middleware: tuple[Handler, ...] = ()


@dataclass(frozen=True, slots=True)
class MiddlewareScope:
    """Middleware applied to every request at or below ``path``."""

    path: str
    middleware: tuple[Handler, ...]
    segments: tuple[PathSegment, ...] = ()


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
