"""ASGI handler — translates ASGI scope/messages to roost types.

The only component that touches raw ASGI directly.  Converts the scope to
a Request, runs it through the path-scoped and route middleware chains to
the matched handler, and sends the Response back through ASGI send().
"""

import inspect
from collections.abc import Callable
from typing import Any

from roost._internal.asgi import Receive, Scope, Send
from roost._internal.invoke import invoke
from roost._internal.types import ErrorHandler, Handler
from roost.errors import HTTPError, NotFound
from roost.http.request import Request
from roost.http.response import Response
from roost.middleware.protocol import Next
from roost.routing.route import RouteMatch
from roost.routing.router import Router
from roost.server.errors import handle_http_error, handle_internal_error
from roost.server.negotiation import negotiate
from roost.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    not_found: Handler | None,
    error_handler: ErrorHandler | None,
    debug: bool,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        response = await _dispatch(request, router, not_found)
    except HTTPError as exc:
        response = await handle_http_error(exc, request, not_found)
    except Exception as exc:
        response = await handle_internal_error(exc, request, error_handler, debug)

    await send_response(response, send)


async def _dispatch(request: Request, router: Router, not_found: Handler | None) -> Response:
    """Match the request and run the middleware chain around its endpoint."""
    try:
        match = router.match(request.method, request.path)
    except NotFound:
        if not_found is None:
            raise
        # Middleware scoped above the missing path still runs before the 404
        chain = router.scoped_middleware(request.path)
        return await run_chain(chain, request, _not_found_endpoint(not_found))

    request = request.with_path_params(match.path_params)
    chain = (
        *router.scoped_middleware(request.path, route_path=match.route.path),
        *match.route.middleware,
    )
    return await run_chain(chain, request, _route_endpoint(match))


async def run_chain(
    middleware: tuple[Handler, ...],
    request: Request,
    endpoint: Next,
) -> Response:
    """Run *middleware* in order, each calling ``next`` into the following one."""
    handler = endpoint
    for mw in reversed(middleware):
        outer = handler

        async def make_next(req: Request, _mw: Any = mw, _next: Next = outer) -> Response:
            return negotiate(await invoke(_mw, req, _next))

        handler = make_next

    return await handler(request)


def _route_endpoint(match: RouteMatch) -> Next:
    async def endpoint(request: Request) -> Response:
        kwargs = _build_handler_kwargs(match.route.handler, request)
        return negotiate(await invoke(match.route.handler, **kwargs))

    return endpoint


def _not_found_endpoint(not_found: Handler) -> Next:
    async def endpoint(request: Request) -> Response:
        return negotiate(await invoke(not_found, request))

    return endpoint


def _build_handler_kwargs(handler: Callable[..., Any], request: Request) -> dict[str, Any]:
    """Inspect the handler signature and build kwargs from the request.

    Resolution order:
    1. ``request`` parameter (by name or ``Request`` annotation)
    2. Path parameters (by name, converted to the annotated type if possible)
    """
    sig = inspect.signature(handler, eval_str=True)
    kwargs: dict[str, Any] = {}

    for name, param in sig.parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name in request.path_params:
            value = request.path_params[name]
            if param.annotation is not inspect.Parameter.empty:
                try:
                    kwargs[name] = param.annotation(value)
                except (ValueError, TypeError):
                    kwargs[name] = value
            else:
                kwargs[name] = value

    return kwargs
