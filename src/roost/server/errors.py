"""Error handling pipeline for roost requests.

Maps HTTPError exceptions and unexpected failures to Response objects,
using the tree's ``404`` / ``error`` handlers when they were mounted.
"""

import logging
import traceback

from roost._internal.invoke import invoke
from roost._internal.types import ErrorHandler, Handler
from roost.errors import HTTPError, NotFound
from roost.http.request import Request
from roost.http.response import Response
from roost.server.negotiation import negotiate

logger = logging.getLogger("roost.server")


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    not_found: Handler | None,
) -> Response:
    """Map an HTTPError to a Response.

    ``NotFound`` goes to the mounted not-found handler when there is one;
    every other status gets a plain-text default.
    """
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)

    if isinstance(exc, NotFound) and not_found is not None:
        return negotiate(await invoke(not_found, request))

    resp = Response(body=exc.detail or f"Error {exc.status}", content_type="text/plain; charset=utf-8")
    resp = resp.with_status(exc.status)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handler: ErrorHandler | None,
    debug: bool,
) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)

    if error_handler is not None:
        try:
            return negotiate(await invoke(error_handler, request, exc))
        except Exception:
            logger.exception("Error handler failed for %s %s", request.method, request.path)

    body = "Internal Server Error"
    if debug:
        body = "".join(traceback.format_exception(exc))
    return Response(body=body, status=500, content_type="text/plain; charset=utf-8")
