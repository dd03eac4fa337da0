"""Development server.

Starts a pounce ASGI server with the live roost App object
(``pip install roost[server]``).
"""

from roost.errors import ConfigurationError


def run_dev_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
) -> None:
    """Serve *app* with a single pounce worker.

    Pounce's ``run()`` takes an import string, but roost builds its App at
    runtime from a directory, so ``pounce.Server`` is used directly with
    the ASGI callable.
    """
    try:
        from pounce.config import ServerConfig
        from pounce.server import Server
    except ImportError as exc:
        msg = "Serving requires the pounce ASGI server. Install it with: pip install roost[server]"
        raise ConfigurationError(msg) from exc

    config = ServerConfig(host=host, port=port, workers=1, reload=reload)
    server = Server(config, app)
    server.run()
