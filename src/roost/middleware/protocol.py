"""Middleware protocol and Next type alias.

A middleware file exports any callable matching::

    async def handler(request: Request, next: Next) -> Response: ...

No base class required.  Middleware of a directory runs, in ordinal
order, for every route in that directory and below it.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from roost.http.request import Request
from roost.http.response import Response

# The next handler in the middleware chain
type Next = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for roost middleware.

    Accepts both functions and callable objects::

        # 0-timing.py
        async def handler(request: Request, next: Next) -> Response:
            start = time.monotonic()
            response = await next(request)
            return response.with_header("X-Time", f"{time.monotonic() - start:.3f}")
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...
