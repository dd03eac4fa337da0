"""Roost application class.

Mutable during setup (mounting a handler tree, manual registration).
Frozen at runtime when ``__call__()`` is first invoked.
"""

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from roost._internal.asgi import Receive, Scope, Send
from roost._internal.types import ErrorHandler, Handler
from roost.config import RoostConfig
from roost.discovery import TreeBuilder
from roost.errors import ConfigurationError
from roost.mount import mount_tree
from roost.routing.route import Route
from roost.routing.router import Router, parse_path
from roost.server.handler import handle_request
from roost.sources import FilesystemSource, TreeSource
from roost.structure.tree import StructureTree

logger = logging.getLogger("roost.app")


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    method: str
    path: str
    handler: Handler
    middleware: tuple[Handler, ...]


@dataclass(slots=True)
class _PendingScope:
    """Path-scoped middleware waiting to be compiled."""

    path: str
    middleware: tuple[Handler, ...]


class App:
    """The roost application.

    Builds a structure tree from a handler directory, mounts it, and
    serves it over ASGI::

        app = App(RoostConfig(api_dir="api", prefix="/api"))
        app.mount()

    ``App`` implements the :class:`roost.mount.RouteTarget` protocol, so
    any tree can also be mounted onto it explicitly with
    :func:`roost.mount.mount_tree`.

    Thread safety:
        Setup is single-threaded.  The freeze transition uses a Lock +
        double-check so exactly one thread compiles the route table, even
        when several ASGI workers receive their first request at once.
    """

    __slots__ = (
        "_error_handler",
        "_freeze_lock",
        "_frozen",
        "_not_found",
        "_pending_routes",
        "_pending_scopes",
        "_router",
        "_trees",
        "config",
    )

    def __init__(self, config: RoostConfig | None = None) -> None:
        self.config: RoostConfig = config or RoostConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._pending_scopes: list[_PendingScope] = []
        self._not_found: Handler | None = None
        self._error_handler: ErrorHandler | None = None
        self._trees: list[StructureTree] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._router: Router | None = None

    # -- Handler trees --

    def mount(
        self,
        directory: str | Path | None = None,
        *,
        prefix: str | None = None,
        source: TreeSource | None = None,
    ) -> StructureTree:
        """Build the handler tree in *directory* and mount it.

        Args:
            directory: Handler directory.  Defaults to ``config.api_dir``.
            prefix: Mount point.  Defaults to ``config.prefix``.
            source: Tree source override (tests, custom loaders).

        Returns:
            The mounted structure tree.
        """
        self._check_not_frozen()
        directory = directory if directory is not None else self.config.api_dir
        prefix = prefix if prefix is not None else self.config.prefix
        source = source or FilesystemSource(
            handler_attr=self.config.handler_attr,
            extensions=self.config.extensions,
        )

        tree = TreeBuilder(source, tolerant=self.config.tolerant).build(directory)
        mount_tree(tree, self, prefix)
        self._trees.append(tree)
        logger.debug("Mounted %s at %r", directory, prefix or "/")
        return tree

    @property
    def trees(self) -> tuple[StructureTree, ...]:
        """Trees mounted with :meth:`mount`, in mount order."""
        return tuple(self._trees)

    # -- RouteTarget --

    def register_route(self, method: str, path: str, *handlers: Handler) -> None:
        """Register *handlers* for ``method path``; the last one is the endpoint."""
        self._check_not_frozen()
        if not handlers:
            msg = f"register_route({method!r}, {path!r}) needs at least one handler."
            raise ConfigurationError(msg)
        parse_path(path)
        *middleware, handler = handlers
        self._pending_routes.append(
            _PendingRoute(method.upper(), path, handler, tuple(middleware))
        )

    def register_path_middleware(self, path: str, *middleware: Handler) -> None:
        """Run *middleware* for every request at or below *path*."""
        self._check_not_frozen()
        parse_path(path)
        if middleware:
            self._pending_scopes.append(_PendingScope(path, tuple(middleware)))

    def register_not_found(self, handler: Handler) -> None:
        """Answer unmatched paths with *handler*, used as given.

        Tree ``404`` leaves arrive already wrapped to answer 404; see
        :func:`roost.structure.leaf.with_default_status`.
        """
        self._check_not_frozen()
        if self._not_found is not None:
            logger.warning("Replacing the registered not-found handler")
        self._not_found = handler

    def register_error_handler(self, handler: ErrorHandler) -> None:
        """Answer unhandled exceptions with ``handler(request, exc)``, used as given."""
        self._check_not_frozen()
        if self._error_handler is not None:
            logger.warning("Replacing the registered error handler")
        self._error_handler = handler

    # -- Runtime --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve the app with the development server."""
        from roost.server.dev import run_dev_server

        self._ensure_frozen()
        run_dev_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=False,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._router is not None
        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            not_found=self._not_found,
            error_handler=self._error_handler,
            debug=self.config.debug,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                self._ensure_frozen()
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    @property
    def router(self) -> Router:
        """The compiled router (compiles on first access)."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the route table.

        MUST only be called while holding _freeze_lock.
        """
        router = Router()
        for pending in self._pending_routes:
            router.add(
                Route(
                    path=pending.path,
                    handler=pending.handler,
                    methods=frozenset({pending.method}),
                    middleware=pending.middleware,
                )
            )
        for scope in self._pending_scopes:
            router.add_scope(scope.path, scope.middleware)
        router.compile()
        self._router = router
        self._frozen = True
        logger.debug(
            "Compiled %d routes and %d middleware scopes",
            len(self._pending_routes),
            len(self._pending_scopes),
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify the app after it has started handling requests."
            raise ConfigurationError(msg)
