"""File-naming conventions of a handler tree.

A handler tree is described entirely by file and directory names:

    api/
      0-cors.py          # middleware, ordinal 0
      auth.py            # middleware, next free ordinal
      get.py             # GET /
      404.py             # not-found handler
      error.py           # error handler (request, exc)
      _shared.py         # ignored
      users/
        post.py          # POST /users
        [id]/
          get.py         # GET /users/:id

Everything here is pure string handling; nothing touches the filesystem.
"""

import re
from dataclasses import dataclass
from enum import StrEnum
from pathlib import PurePath

# Method leaf names, in the order routes are registered
METHOD_NAMES: tuple[str, ...] = ("get", "post", "put", "delete")

NOT_FOUND = "404"
ERROR = "error"
SPECIAL_NAMES: tuple[str, ...] = (NOT_FOUND, ERROR)

# Leading "<ordinal>-" of a middleware name; non-negative decimal only
_ORDINAL_RE = re.compile(r"^(\d+)-(.*)$", re.ASCII)


class LeafKind(StrEnum):
    """What a handler file contributes to its directory's node."""

    METHOD = "method"
    MIDDLEWARE = "middleware"
    SPECIAL = "special"


@dataclass(frozen=True, slots=True)
class Segment:
    """A directory name resolved to a path segment.

    ``[id]`` -> ``Segment(name="id", dynamic=True)``
    ``users`` -> ``Segment(name="users", dynamic=False)``
    """

    name: str
    dynamic: bool = False


def strip_extension(filename: str) -> str:
    """``get.py`` -> ``get``; ``1-logger.py`` -> ``1-logger``."""
    return PurePath(filename).stem


def is_ignored(name: str) -> bool:
    """Underscore-prefixed names are helpers; dot-prefixed names are hidden."""
    return name.startswith(("_", "."))


def parse_segment(raw: str) -> Segment:
    """Resolve a directory name, stripping ``[...]`` from dynamic segments."""
    if len(raw) > 2 and raw.startswith("[") and raw.endswith("]"):
        return Segment(name=raw[1:-1], dynamic=True)
    return Segment(name=raw)


def parse_middleware_name(name: str) -> tuple[int | None, str]:
    """Split a middleware name into ``(explicit ordinal, label)``.

    ``"0-cors"`` -> ``(0, "cors")``; ``"1-rate-limit"`` -> ``(1, "rate-limit")``;
    ``"auth"`` -> ``(None, "auth")``; ``"v2-auth"`` -> ``(None, "v2-auth")``.
    """
    match = _ORDINAL_RE.match(name)
    if match is None:
        return None, name
    return int(match.group(1)), match.group(2)


def classify(name: str) -> LeafKind:
    """Classify a stripped base name: method first, then special, else middleware."""
    if name in METHOD_NAMES:
        return LeafKind.METHOD
    if name in SPECIAL_NAMES:
        return LeafKind.SPECIAL
    return LeafKind.MIDDLEWARE
