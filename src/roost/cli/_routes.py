"""``roost routes`` — list the routes a handler tree mounts.

Builds the tree, mounts it on an App and prints METHOD, PATH and the
handler files that run for each route, then the path-scoped middleware.
"""

import argparse
import inspect
from pathlib import Path

from roost.cli._common import config_from_args, configure_logging, mounted_app


def describe_handler(handler: object, root: Path) -> str:
    """Handler file relative to *root* (``users/[id]/get.py``), else its name."""
    target = inspect.unwrap(handler)  # type: ignore[arg-type]
    try:
        source = Path(inspect.getfile(target)).resolve()
    except TypeError:
        return getattr(target, "__qualname__", repr(target))
    try:
        return source.relative_to(root.resolve()).as_posix()
    except ValueError:
        return source.name


def run_routes(args: argparse.Namespace) -> None:
    """Print the route table of the configured handler tree."""
    config = config_from_args(args)
    configure_logging(config)
    app = mounted_app(config)
    router = app.router
    root = Path(config.api_dir)

    routes = router.routes
    if not routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str]] = []
    for route in routes:
        methods_str = ", ".join(sorted(route.methods))
        chain = " -> ".join(describe_handler(h, root) for h in (*route.middleware, route.handler))
        rows.append((methods_str, route.path, chain))

    max_methods = max(6, *(len(r[0]) for r in rows))  # "METHOD" header
    max_path = max(4, *(len(r[1]) for r in rows))  # "PATH" header

    fmt = f"{{:<{max_methods}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "CHAIN"))
    sep_len = max_methods + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for methods_str, path, chain in rows:
        print(fmt.format(methods_str, path, chain))

    if router.scopes:
        print()
        print("Path-scoped middleware:")
        for scope in router.scopes:
            names = ", ".join(describe_handler(h, root) for h in scope.middleware)
            print(f"  {scope.path}  {names}")
