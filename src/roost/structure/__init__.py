"""In-memory structure of a handler tree.

``StructureTree`` nodes mirror directories; ``StructureLeaf`` entries
mirror handler files.  Built by :mod:`roost.discovery`, consumed by
:mod:`roost.mount`.
"""

from roost.structure.leaf import (
    StructureLeaf,
    error_leaf,
    method_leaf,
    middleware_leaf,
    not_found_leaf,
    special_leaf,
)
from roost.structure.naming import LeafKind, Segment
from roost.structure.tree import Child, StructureTree

__all__ = [
    "Child",
    "LeafKind",
    "Segment",
    "StructureLeaf",
    "StructureTree",
    "error_leaf",
    "method_leaf",
    "middleware_leaf",
    "not_found_leaf",
    "special_leaf",
]
