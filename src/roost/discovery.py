"""Handler tree discovery — builds a StructureTree from a directory.

Walks the directory depth-first and, for every entry:

- skips ``_helper.py``-style and hidden names,
- turns sub-directories into nested :class:`StructureTree` nodes
  (``[param]`` directories become dynamic segments),
- turns handler files into leaves classified by name: ``get`` / ``post``
  / ``put`` / ``delete`` methods, ``404`` / ``error`` specials, and
  middleware for everything else.

Every node is frozen before it is attached to its parent, so the tree
handed back is complete and read-only.  Any build error aborts the whole
walk unless ``tolerant=True`` was requested.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from roost._internal.invoke import accepts_positional
from roost._internal.types import Handler
from roost.errors import BuildError, DirectoryReadError, LoadError
from roost.sources import FilesystemSource, TreeSource
from roost.structure.leaf import StructureLeaf, method_leaf, middleware_leaf, special_leaf
from roost.structure.naming import (
    ERROR,
    LeafKind,
    classify,
    is_ignored,
    parse_middleware_name,
    strip_extension,
)
from roost.structure.tree import StructureTree

logger = logging.getLogger("roost.discovery")

# A middleware file waiting for an implicit ordinal: (name, handler, file path)
type _Implicit = tuple[str, Handler, Path]


def build_tree(
    directory: str | Path,
    *,
    source: TreeSource | None = None,
    tolerant: bool = False,
) -> StructureTree:
    """Build the structure tree for a handler directory.

    Args:
        directory: Root of the handler tree.
        source: Directory lister and handler loader.  Defaults to a
            :class:`FilesystemSource` reading ``.py`` files.
        tolerant: Log and skip entries that fail to build instead of
            aborting.  The root directory must always be readable.

    Returns:
        The frozen root node (empty name, path ``"/"``).

    Raises:
        DirectoryReadError: A directory could not be listed.
        LoadError: A handler file could not be loaded.
        MiddlewareOrdinalCollisionError: Two middleware in one directory
            claim the same ordinal.
    """
    return TreeBuilder(source, tolerant=tolerant).build(directory)


class TreeBuilder:
    """Reusable builder bound to a source and an error policy."""

    __slots__ = ("source", "tolerant")

    def __init__(self, source: TreeSource | None = None, *, tolerant: bool = False) -> None:
        self.source: TreeSource = source or FilesystemSource()
        self.tolerant = tolerant

    def build(self, directory: str | Path) -> StructureTree:
        root_dir = Path(directory)
        if not self.source.is_directory(root_dir):
            msg = f"Handler directory not found: {root_dir}"
            raise DirectoryReadError(msg, path=root_dir)

        root = StructureTree()
        self._fill(root, root_dir)
        root.freeze()
        logger.debug("Built handler tree from %s", root_dir)
        return root

    # -- Walk --

    def _fill(self, node: StructureTree, directory: Path) -> None:
        """Populate *node* from the entries of *directory*.

        Middleware without an explicit ordinal is attached last, in listing
        order, so it only ever takes slots no explicit ordinal claims.
        """
        implicit: list[_Implicit] = []
        for entry in self.source.list_entries(directory):
            entry_path = directory / entry
            pending = self._guarded(entry_path, self._add_entry, node, entry, entry_path)
            if pending is not None:
                implicit.append(pending)

        for name, handler, entry_path in implicit:
            self._guarded(entry_path, self._add_implicit_middleware, node, name, handler)

    def _guarded(
        self,
        entry_path: Path,
        step: Callable[..., _Implicit | None],
        *args: Any,
    ) -> _Implicit | None:
        """Run one build step; in tolerant mode a BuildError skips the entry."""
        try:
            return step(*args)
        except BuildError as exc:
            if not self.tolerant:
                raise
            logger.warning("Skipping %s: %s", entry_path, exc)
            return None

    def _add_entry(self, node: StructureTree, entry: str, entry_path: Path) -> _Implicit | None:
        if self.source.is_directory(entry_path):
            self._add_directory(node, entry, entry_path)
            return None

        name = strip_extension(entry)
        if is_ignored(name):
            return None
        handler = self.source.load_handler(entry_path)
        if classify(name) is LeafKind.MIDDLEWARE and parse_middleware_name(name)[0] is None:
            return name, handler, entry_path
        self._attach(node, self._make_leaf(node, name, handler, entry_path))
        return None

    def _add_directory(self, node: StructureTree, entry: str, entry_path: Path) -> None:
        if is_ignored(entry):
            return
        child = StructureTree(entry, node.path)
        self._fill(child, entry_path)
        child.freeze()
        node.add_child(child)

    def _add_implicit_middleware(self, node: StructureTree, name: str, handler: Handler) -> None:
        leaf = middleware_leaf(name, handler, node.next_ordinal(), parent_path=node.path)
        self._attach(node, leaf)

    def _attach(self, node: StructureTree, leaf: StructureLeaf) -> None:
        node.add_child(leaf)
        logger.debug("%s: %s leaf %r", node.path, leaf.kind, leaf.name)

    def _make_leaf(
        self,
        node: StructureTree,
        name: str,
        handler: Handler,
        entry_path: Path,
    ) -> StructureLeaf:
        kind = classify(name)
        if kind is LeafKind.METHOD:
            return method_leaf(name, handler, parent_path=node.path)
        if kind is LeafKind.SPECIAL:
            if name == ERROR and not accepts_positional(handler, 2):
                msg = f"{entry_path}: error handler must accept (request, exc)"
                raise LoadError(msg, path=entry_path)
            return special_leaf(name, handler, parent_path=node.path)

        ordinal, _ = parse_middleware_name(name)
        assert ordinal is not None
        return middleware_leaf(name, handler, ordinal, parent_path=node.path)
