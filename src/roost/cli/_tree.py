"""``roost tree`` — print the structure tree of a handler directory."""

import argparse
import json

from roost.cli._common import config_from_args, configure_logging, exit_with_error
from roost.discovery import build_tree
from roost.errors import BuildError
from roost.sources import FilesystemSource
from roost.structure.leaf import StructureLeaf
from roost.structure.tree import StructureTree


def run_tree(args: argparse.Namespace) -> None:
    """Build the tree and print it indented, or as JSON with ``--json``."""
    config = config_from_args(args)
    configure_logging(config)
    source = FilesystemSource(handler_attr=config.handler_attr, extensions=config.extensions)
    try:
        tree = build_tree(config.api_dir, source=source, tolerant=config.tolerant)
    except BuildError as exc:
        exit_with_error(exc)

    if args.json:
        print(json.dumps(tree.to_dict(), indent=2))
        return
    for line in format_tree(tree):
        print(line)


def format_tree(tree: StructureTree, depth: int = 0) -> list[str]:
    """Render *tree* as indented lines, one per node and leaf."""
    indent = "  " * depth
    label = f"[{tree.name}]" if tree.dynamic else (tree.name or "/")
    lines = [f"{indent}{label}/" if tree.name else f"{indent}{label}"]
    for child in tree.children.values():
        match child:
            case StructureLeaf():
                detail = str(child.kind)
                if child.ordinal is not None:
                    detail = f"{detail} #{child.ordinal} {child.label}"
                lines.append(f"{indent}  {child.name}  ({detail})")
            case StructureTree():
                lines.extend(format_tree(child, depth + 1))
    return lines
