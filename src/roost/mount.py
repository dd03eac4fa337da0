"""Mount a structure tree onto a router.

Walks a built :class:`StructureTree` depth-first and tells a
:class:`RouteTarget` what to register, in a fixed order per node:

1. one route per method leaf (``get, post, put, delete``), carrying the
   node's middleware chain ahead of the method handler;
2. the node's middleware chain as path-scoped middleware;
3. each sub-tree, at ``path/name`` or ``path/:name`` for ``[name]``
   directories.

The ``404`` and ``error`` leaves of the mounted tree are installed as the
not-found and error handlers.  This module never touches the filesystem.
"""

import logging
from typing import Protocol

from roost._internal.types import ErrorHandler, Handler
from roost.structure.naming import ERROR, NOT_FOUND
from roost.structure.tree import StructureTree

logger = logging.getLogger("roost.mount")


class RouteTarget(Protocol):
    """The router operations the mounter uses.

    :class:`roost.app.App` implements this; anything else that does can
    receive a tree too.
    """

    def register_route(self, method: str, path: str, *handlers: Handler) -> None:
        """Register a route; the last handler is the endpoint, the rest run before it."""
        ...

    def register_path_middleware(self, path: str, *middleware: Handler) -> None: ...

    def register_not_found(self, handler: Handler) -> None: ...

    def register_error_handler(self, handler: ErrorHandler) -> None: ...


def mount_tree(tree: StructureTree, target: RouteTarget, path: str = "") -> None:
    """Register everything in *tree* on *target* under *path*.

    Args:
        tree: A built (frozen) structure tree.
        target: The router collaborator to register on.
        path: Mount point; ``""`` mounts the tree at the root.
    """
    for special in tree.specials:
        if special.name == NOT_FOUND:
            target.register_not_found(special.handler)
        elif special.name == ERROR:
            target.register_error_handler(special.handler)
        logger.debug("Installed %s handler from %s", special.name, special.path)

    _mount_node(tree, target, path)


def _mount_node(node: StructureTree, target: RouteTarget, path: str) -> None:
    route_path = path or "/"
    chain = tuple(leaf.handler for leaf in node.middleware)

    for leaf in node.methods:
        target.register_route(leaf.name.upper(), route_path, *chain, leaf.handler)
        logger.debug("%s %s (%d middleware)", leaf.name.upper(), route_path, len(chain))

    if chain:
        target.register_path_middleware(route_path, *chain)

    for subtree in node.subtrees():
        for special in subtree.specials:
            logger.warning(
                "%s is only honoured at the root of a mounted tree; ignoring it",
                special.path,
            )
        if subtree.dynamic:
            child_path = f"{path}/:{subtree.name}"
        else:
            child_path = f"{path}/{subtree.name}"
        _mount_node(subtree, target, child_path)
