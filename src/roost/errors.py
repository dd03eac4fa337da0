"""Roost exception hierarchy.

Build-time errors are raised while turning a directory into a structure
tree.  HTTP errors are raised by the router and handlers while serving.
Every module raises and catches these types.
"""

from dataclasses import dataclass
from pathlib import Path


class RoostError(Exception):
    """Base for all roost-specific errors."""


class ConfigurationError(RoostError):
    """Raised when the app or a route registration is invalid.

    Typically raised during ``App._freeze()`` or while mounting.
    """


# -- Build-time ---------------------------------------------------------------


class BuildError(RoostError):
    """A structure tree could not be built.

    The build aborts as a whole; no partial tree is returned.
    """

    def __init__(self, message: str, *, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = str(path) if path is not None else None


class DirectoryReadError(BuildError):
    """A directory could not be listed."""


class LoadError(BuildError):
    """A handler file exists but does not export a usable handler."""


class InvalidLeafNameError(BuildError):
    """A leaf name does not fit the kind it was created with."""


class MiddlewareOrdinalCollisionError(BuildError):
    """Two middleware files in one directory resolve to the same ordinal."""

    def __init__(
        self,
        ordinal: int,
        *,
        existing: str,
        incoming: str,
        path: str | Path | None = None,
    ) -> None:
        where = f" in {path}" if path is not None else ""
        super().__init__(
            f"Middleware ordinal {ordinal} already taken by {existing!r}; "
            f"cannot assign it to {incoming!r}{where}",
            path=path,
        )
        self.ordinal = ordinal
        self.existing = existing
        self.incoming = incoming


# -- HTTP ---------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HTTPError(RoostError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, middleware, or handlers.  The ASGI pipeline
    catches these and answers with the matching status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — a route exists at the path but not for this HTTP method.

    Carries an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
