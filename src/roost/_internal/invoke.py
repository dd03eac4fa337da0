"""Invoke helpers — call sync or async handlers uniformly.

Handler files may define ``def`` or ``async def`` handlers.  Any code that
calls a user-provided handler goes through :func:`invoke` so the
sync/async check lives in exactly one place.

Usage::

    from roost._internal.invoke import invoke

    result = await invoke(handler, request)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def accepts_positional(handler: Any, count: int) -> bool:
    """True if *handler* can be called with exactly *count* positional arguments.

    Parameters with defaults may be left out and ``*args`` takes any surplus.
    Handlers whose signature cannot be inspected are accepted.
    """
    try:
        sig = inspect.signature(handler)
    except (TypeError, ValueError):
        return True
    try:
        sig.bind(*range(count))
    except TypeError:
        return False
    return True
