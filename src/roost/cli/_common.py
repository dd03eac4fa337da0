"""Shared helpers for CLI commands: config from flags, logging, build errors."""

import argparse
import logging
import sys
from dataclasses import replace
from typing import NoReturn

from roost.app import App
from roost.config import RoostConfig
from roost.errors import RoostError


def config_from_args(args: argparse.Namespace) -> RoostConfig:
    """Overlay command-line flags on the default configuration."""
    config = RoostConfig()
    overrides: dict[str, object] = {}
    if args.directory is not None:
        overrides["api_dir"] = args.directory
    if args.attr is not None:
        overrides["handler_attr"] = args.attr
    if args.tolerant:
        overrides["tolerant"] = True
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    for flag in ("prefix", "host", "port"):
        value = getattr(args, flag, None)
        if value is not None:
            overrides[flag] = value
    if getattr(args, "debug", False):
        overrides["debug"] = True
    return replace(config, **overrides)


def configure_logging(config: RoostConfig) -> None:
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )


def mounted_app(config: RoostConfig) -> App:
    """Build and mount the configured tree, exiting with status 1 on failure.

    Build errors and routes the router rejects (a ``{id}`` directory, say)
    both end the command.
    """
    app = App(config)
    try:
        app.mount()
    except RoostError as exc:
        exit_with_error(exc)
    return app


def exit_with_error(exc: Exception) -> NoReturn:
    print(f"Error: {exc}", file=sys.stderr)
    raise SystemExit(1) from exc
