"""Structure tree — one node per directory of a handler tree.

A node's children are a sum type: each entry is either a
:class:`StructureLeaf` (a handler file) or a nested
:class:`StructureTree` (a sub-directory).  Code that walks the tree
matches on the two classes::

    for child in tree.children.values():
        match child:
            case StructureLeaf():
                ...
            case StructureTree():
                ...

Nodes are mutable while the builder fills them and frozen afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from roost.errors import MiddlewareOrdinalCollisionError
from roost.structure.leaf import StructureLeaf, join_path
from roost.structure.naming import METHOD_NAMES, LeafKind, parse_segment

logger = logging.getLogger("roost.discovery")

type Child = StructureLeaf | StructureTree

ROOT_PATH = "/"


class StructureTree:
    """A directory level of the handler tree.

    Attributes:
        raw_name: Directory name as found on disk (``"[id]"``).
        name: Path segment with brackets stripped (``"id"``).
        dynamic: True when the directory was bracket-wrapped.
        path: Accumulated path from the root (``"/users/id"``); the root
            node has an empty name and path ``"/"``.
    """

    __slots__ = ("_children", "_frozen", "dynamic", "name", "path", "raw_name")

    def __init__(self, raw_name: str = "", parent_path: str | None = None) -> None:
        segment = parse_segment(raw_name)
        self.raw_name = raw_name
        self.name = segment.name
        self.dynamic = segment.dynamic
        if parent_path is None:
            self.path = ROOT_PATH if not self.name else join_path(ROOT_PATH, self.name)
        else:
            self.path = join_path(parent_path, self.name)
        self._children: dict[str, Child] = {}
        self._frozen = False

    def __repr__(self) -> str:
        kind = "dynamic " if self.dynamic else ""
        return f"<StructureTree {kind}{self.path!r} children={list(self._children)}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StructureTree):
            return NotImplemented
        return (
            self.name == other.name
            and self.dynamic == other.dynamic
            and self.path == other.path
            and self._children == other._children
        )

    __hash__ = None  # type: ignore[assignment]

    # -- Construction --

    def add_child(self, child: Child) -> None:
        """Attach a leaf or sub-tree under its name.

        A later child with the same name replaces the earlier one.
        Middleware leaves must not reuse an ordinal already held by a
        sibling.
        """
        if self._frozen:
            msg = f"Cannot add children to {self.path!r} after it is frozen."
            raise RuntimeError(msg)

        if isinstance(child, StructureLeaf) and child.kind is LeafKind.MIDDLEWARE:
            holder = self.middleware_by_ordinal.get(child.ordinal)  # type: ignore[arg-type]
            if holder is not None and holder.name != child.name:
                raise MiddlewareOrdinalCollisionError(
                    child.ordinal,  # type: ignore[arg-type]
                    existing=holder.name,
                    incoming=child.name,
                    path=self.path,
                )

        if child.name in self._children:
            logger.warning(
                "%s: %r replaces an existing child of the same name",
                self.path,
                child.name,
            )
        self._children[child.name] = child

    def next_ordinal(self) -> int:
        """First free middleware slot at or after the current chain length."""
        taken = self.middleware_by_ordinal
        ordinal = len(taken)
        while ordinal in taken:
            ordinal += 1
        return ordinal

    def freeze(self) -> None:
        """Make the node read-only.  Idempotent."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -- Queries --

    @property
    def children(self) -> Mapping[str, Child]:
        """Read-only view of the children, in insertion order."""
        return MappingProxyType(self._children)

    def leaves(self, kind: LeafKind | None = None) -> list[StructureLeaf]:
        """All leaves of this node, optionally restricted to one kind."""
        return [
            child
            for child in self._children.values()
            if isinstance(child, StructureLeaf) and (kind is None or child.kind is kind)
        ]

    def leaf(self, name: str) -> StructureLeaf | None:
        child = self._children.get(name)
        return child if isinstance(child, StructureLeaf) else None

    def subtrees(self) -> list[StructureTree]:
        return [child for child in self._children.values() if isinstance(child, StructureTree)]

    def subtree(self, name: str) -> StructureTree | None:
        child = self._children.get(name)
        return child if isinstance(child, StructureTree) else None

    @property
    def methods(self) -> list[StructureLeaf]:
        """Method leaves present, in ``get, post, put, delete`` order."""
        found = []
        for method in METHOD_NAMES:
            leaf = self.leaf(method)
            if leaf is not None and leaf.kind is LeafKind.METHOD:
                found.append(leaf)
        return found

    @property
    def middleware_by_ordinal(self) -> dict[int, StructureLeaf]:
        """Middleware leaves keyed by ordinal."""
        return {
            leaf.ordinal: leaf  # type: ignore[misc]
            for leaf in self.leaves(LeafKind.MIDDLEWARE)
        }

    @property
    def middleware(self) -> list[StructureLeaf]:
        """Middleware chain sorted by ordinal; gaps are compacted."""
        by_ordinal = self.middleware_by_ordinal
        return [by_ordinal[ordinal] for ordinal in sorted(by_ordinal)]

    @property
    def specials(self) -> list[StructureLeaf]:
        return self.leaves(LeafKind.SPECIAL)

    def walk(self) -> Iterator[StructureTree]:
        """Depth-first, pre-order iteration over this node and its sub-trees."""
        yield self
        for subtree in self.subtrees():
            yield from subtree.walk()

    def to_dict(self) -> dict[str, Any]:
        """Handler-free description of the node and everything below it."""
        children: dict[str, Any] = {}
        for key, child in self._children.items():
            match child:
                case StructureLeaf():
                    entry: dict[str, Any] = {"kind": str(child.kind)}
                    if child.ordinal is not None:
                        entry["ordinal"] = child.ordinal
                        entry["label"] = child.label
                    children[key] = entry
                case StructureTree():
                    children[key] = child.to_dict()
        return {
            "name": self.name,
            "path": self.path,
            "dynamic": self.dynamic,
            "children": children,
        }
