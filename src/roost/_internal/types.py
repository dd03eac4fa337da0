"""Shared type aliases used across roost modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Handler loaded from a tree file: method, middleware or special
Handler: TypeAlias = Callable[..., Any]

# Error handler: receives (request, exc) and returns a response value
ErrorHandler: TypeAlias = Callable[..., Any]
