"""``roost run`` — build, mount and serve a handler tree."""

import argparse

from roost.cli._common import config_from_args, configure_logging, exit_with_error, mounted_app
from roost.errors import ConfigurationError


def run_server(args: argparse.Namespace) -> None:
    """Serve the configured handler tree with the development server."""
    config = config_from_args(args)
    configure_logging(config)
    app = mounted_app(config)
    try:
        app.run()
    except ConfigurationError as exc:
        # pounce is not installed
        exit_with_error(exc)
