"""Roost — filesystem-driven route trees for ASGI.

Lay out handlers as files, get routes::

    api/
      get.py            GET /
      post.py           POST /
      0-auth.py         middleware for / and below
      404.py            not-found handler
      [id]/
        get.py          GET /:id

Each handler file defines a ``handler`` callable.  Build and serve::

    from roost import App

    app = App()
    app.mount("api")
    app.run()

Serving needs the pounce ASGI server (``pip install roost[server]``);
any other ASGI server can run ``app`` directly.
"""

__version__ = "0.1.0-dev"
__all__ = [
    "App",
    "BuildError",
    "ConfigurationError",
    "DirectoryReadError",
    "HTTPError",
    "InvalidLeafNameError",
    "LeafKind",
    "LoadError",
    "MethodNotAllowed",
    "Middleware",
    "MiddlewareOrdinalCollisionError",
    "Next",
    "NotFound",
    "Redirect",
    "Request",
    "Response",
    "RoostConfig",
    "RoostError",
    "RouteTarget",
    "StructureLeaf",
    "StructureTree",
    "TreeBuilder",
    "build_tree",
    "mount_tree",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import roost`` fast while providing a clean top-level API.
    """
    if name == "App":
        from roost.app import App

        return App

    if name == "RoostConfig":
        from roost.config import RoostConfig

        return RoostConfig

    if name in ("TreeBuilder", "build_tree"):
        from roost import discovery as _discovery

        return getattr(_discovery, name)

    if name in ("RouteTarget", "mount_tree"):
        from roost import mount as _mount

        return getattr(_mount, name)

    if name in ("StructureTree", "StructureLeaf", "LeafKind"):
        from roost import structure as _structure

        return getattr(_structure, name)

    if name == "Request":
        from roost.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from roost.http import response as _resp

        return getattr(_resp, name)

    if name in ("Middleware", "Next"):
        from roost.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in (
        "BuildError",
        "ConfigurationError",
        "DirectoryReadError",
        "HTTPError",
        "InvalidLeafNameError",
        "LoadError",
        "MethodNotAllowed",
        "MiddlewareOrdinalCollisionError",
        "NotFound",
        "RoostError",
    ):
        from roost import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
