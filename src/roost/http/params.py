"""Read-only multi-value mappings for request headers and query strings.

Both are decoded once, when the request is created, into
``name -> [values]``.  Indexing returns the first value; ``get_list``
returns them all in the order they were sent.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from urllib.parse import parse_qsl


class MultiValueMapping(Mapping[str, str]):
    """Immutable ``str -> list[str]`` store exposed as a ``str -> str`` Mapping."""

    __slots__ = ("_values",)

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        values: dict[str, list[str]] = {}
        for key, value in pairs:
            values.setdefault(self._key(key), []).append(value)
        self._values = values

    @staticmethod
    def _key(key: str) -> str:
        return key

    def __getitem__(self, key: str) -> str:
        return self._values[self._key(key)][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._key(key) in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"

    def get_list(self, key: str) -> list[str]:
        """Every value sent for *key*; empty if there were none."""
        return list(self._values.get(self._key(key), ()))


class Headers(MultiValueMapping):
    """Request headers; names are case-insensitive and iterate lowercased."""

    __slots__ = ()

    @classmethod
    def from_asgi(cls, raw: Iterable[tuple[bytes, bytes]]) -> Headers:
        return cls((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)

    @staticmethod
    def _key(key: str) -> str:
        return key.lower()


class QueryParams(MultiValueMapping):
    """Query string parameters; blank values are kept as ``""``."""

    __slots__ = ()

    @classmethod
    def from_query_string(cls, query_string: bytes) -> QueryParams:
        return cls(parse_qsl(query_string.decode("latin-1"), keep_blank_values=True))
