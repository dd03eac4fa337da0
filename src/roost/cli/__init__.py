"""Roost CLI — inspect and serve handler trees.

Entry point registered as ``roost`` in ``pyproject.toml``::

    [project.scripts]
    roost = "roost.cli:main"
"""

import argparse
import sys


def _add_tree_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "directory",
        nargs="?",
        default=None,
        help="Handler directory (default: ./api)",
    )
    parser.add_argument(
        "--attr",
        default=None,
        help="Module attribute holding each file's handler (default: handler)",
    )
    parser.add_argument(
        "--tolerant",
        action="store_true",
        help="Skip entries that fail to build instead of aborting",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["debug", "info", "warning", "error"],
        help="Logging level (default: info)",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``roost`` command."""
    parser = argparse.ArgumentParser(
        prog="roost",
        description="Roost — filesystem-driven route trees for ASGI.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- roost tree -------------------------------------------------------
    tree_parser = subparsers.add_parser("tree", help="Print the structure tree")
    _add_tree_options(tree_parser)
    tree_parser.add_argument("--json", action="store_true", help="Print the tree as JSON")

    # -- roost routes -----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List the routes a tree mounts")
    _add_tree_options(routes_parser)
    routes_parser.add_argument("--prefix", default=None, help="Mount point (e.g. /api)")

    # -- roost run --------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Serve a handler tree")
    _add_tree_options(run_parser)
    run_parser.add_argument("--prefix", default=None, help="Mount point (e.g. /api)")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--debug",
        action="store_true",
        help="Include tracebacks in 500 responses",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "tree":
        from roost.cli._tree import run_tree

        run_tree(args)
    elif args.command == "routes":
        from roost.cli._routes import run_routes

        run_routes(args)
    elif args.command == "run":
        from roost.cli._run import run_server

        run_server(args)
