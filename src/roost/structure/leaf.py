"""Structure leaves — one per handler file.

A leaf binds a file's handler to its role in the directory's node:
an HTTP method, a middleware slot, or a special (not-found / error)
handler.  Leaves are frozen and built through the factory functions
below, which enforce the naming rules and wrap special handlers.
"""

import functools
from dataclasses import dataclass, field
from typing import Any

from roost._internal.invoke import invoke
from roost._internal.types import Handler
from roost.errors import InvalidLeafNameError
from roost.http.response import Redirect, Response
from roost.server.negotiation import negotiate
from roost.structure.naming import (
    ERROR,
    METHOD_NAMES,
    NOT_FOUND,
    SPECIAL_NAMES,
    LeafKind,
    parse_middleware_name,
)


def join_path(parent: str, name: str) -> str:
    """``("/", "users")`` -> ``"/users"``; ``("/users", "id")`` -> ``"/users/id"``."""
    return f"{parent.rstrip('/')}/{name}"


@dataclass(frozen=True, slots=True)
class StructureLeaf:
    """A terminal handler binding.

    Attributes:
        name: File name with the extension stripped (``"1-logger"``).
        kind: Role of the handler in its node.
        handler: The callable loaded from the file.  Special handlers are
            stored already wrapped.  Not part of equality: two builds of
            the same tree compare equal.
        ordinal: Middleware slot; ``None`` for methods and specials.
        label: Display name (``"logger"`` for ``"1-logger"``).
        path: Location in the tree (``"/users/get"``).
    """

    name: str
    kind: LeafKind
    handler: Handler = field(compare=False)
    ordinal: int | None = None
    label: str = ""
    path: str = ""

    def __post_init__(self) -> None:
        if self.kind is LeafKind.METHOD and self.name not in METHOD_NAMES:
            msg = f"{self.name!r} is not a method leaf name (expected one of {METHOD_NAMES})"
            raise InvalidLeafNameError(msg, path=self.path or None)
        if self.kind is LeafKind.SPECIAL and self.name not in SPECIAL_NAMES:
            msg = f"{self.name!r} is not a special leaf name (expected one of {SPECIAL_NAMES})"
            raise InvalidLeafNameError(msg, path=self.path or None)
        if self.kind is LeafKind.MIDDLEWARE and (self.ordinal is None or self.ordinal < 0):
            msg = f"Middleware leaf {self.name!r} needs a non-negative ordinal, got {self.ordinal!r}"
            raise InvalidLeafNameError(msg, path=self.path or None)
        if not self.label:
            object.__setattr__(self, "label", self.name)


# -- Factories ----------------------------------------------------------------


def method_leaf(name: str, handler: Handler, *, parent_path: str = "/") -> StructureLeaf:
    """Leaf for ``get`` / ``post`` / ``put`` / ``delete``."""
    return StructureLeaf(
        name=name,
        kind=LeafKind.METHOD,
        handler=handler,
        path=join_path(parent_path, name),
    )


def middleware_leaf(
    name: str,
    handler: Handler,
    ordinal: int,
    *,
    parent_path: str = "/",
) -> StructureLeaf:
    """Leaf for a middleware file, already placed at *ordinal*."""
    _, label = parse_middleware_name(name)
    return StructureLeaf(
        name=name,
        kind=LeafKind.MIDDLEWARE,
        handler=handler,
        ordinal=ordinal,
        label=label or name,
        path=join_path(parent_path, name),
    )


def not_found_leaf(handler: Handler, *, parent_path: str = "/") -> StructureLeaf:
    """Leaf for ``404``; the stored handler answers with status 404."""
    return StructureLeaf(
        name=NOT_FOUND,
        kind=LeafKind.SPECIAL,
        handler=with_default_status(handler, 404),
        path=join_path(parent_path, NOT_FOUND),
    )


def error_leaf(handler: Handler, *, parent_path: str = "/") -> StructureLeaf:
    """Leaf for ``error``; the stored handler answers with status 500."""
    return StructureLeaf(
        name=ERROR,
        kind=LeafKind.SPECIAL,
        handler=with_default_status(handler, 500),
        path=join_path(parent_path, ERROR),
    )


def special_leaf(name: str, handler: Handler, *, parent_path: str = "/") -> StructureLeaf:
    """Dispatch to :func:`not_found_leaf` or :func:`error_leaf` by name."""
    if name == NOT_FOUND:
        return not_found_leaf(handler, parent_path=parent_path)
    if name == ERROR:
        return error_leaf(handler, parent_path=parent_path)
    msg = f"{name!r} is not a special leaf name (expected one of {SPECIAL_NAMES})"
    raise InvalidLeafNameError(msg, path=join_path(parent_path, name))


def with_default_status(handler: Handler, status: int) -> Handler:
    """Wrap *handler* so its response carries *status*.

    Every result gets *status*, ``None`` included, unless the handler
    chose a non-200 status itself: a ``Response`` or ``Redirect`` with
    one, or a ``(value, status)`` / ``(value, status, headers)`` tuple.
    """

    @functools.wraps(handler)
    async def wrapper(*args: Any) -> Response:
        value = await invoke(handler, *args)
        response = negotiate(value)
        if not _chose_status(value):
            response = response.with_status(status)
        return response

    return wrapper


def _chose_status(value: Any) -> bool:
    match value:
        case Response(status=chosen) | Redirect(status=chosen):
            return chosen != 200
        case (_, int() as chosen) | (_, int() as chosen, dict()):
            return chosen != 200
        case _:
            return False
