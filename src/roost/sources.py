"""Tree sources — where the builder gets directory listings and handlers.

The tree builder never touches the filesystem itself.  It asks a
:class:`TreeSource` to list directories, tell files from directories and
load a file's handler.  :class:`FilesystemSource` is the real thing;
tests pass an in-memory source instead.
"""

import importlib.util
import itertools
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from roost._internal.types import Handler
from roost.errors import DirectoryReadError, LoadError

# Module names for loaded handler files; never collide with real packages
_module_ids = itertools.count()


@runtime_checkable
class TreeSource(Protocol):
    """What the tree builder needs from the filesystem and module loader."""

    def list_entries(self, path: Path) -> Sequence[str]:
        """Names of the entries in directory *path*.

        Raises ``DirectoryReadError`` if the directory cannot be listed.
        """
        ...

    def is_directory(self, path: Path) -> bool: ...

    def load_handler(self, path: Path) -> Handler:
        """Load the handler exported by the file at *path*.

        Raises ``LoadError`` if the file cannot be loaded or exports no
        callable handler.
        """
        ...


class FilesystemSource:
    """Reads handler trees from disk and loads ``.py`` files as modules.

    Each handler file exports its handler as a module attribute,
    ``handler`` by default::

        # api/users/[id]/get.py
        async def handler(request):
            return {"id": request.path_params["id"]}

    Only directories and files with one of *extensions* are listed, sorted
    by name so that implicit middleware ordinals are reproducible.
    """

    __slots__ = ("extensions", "handler_attr")

    def __init__(
        self,
        *,
        handler_attr: str = "handler",
        extensions: tuple[str, ...] = (".py",),
    ) -> None:
        self.handler_attr = handler_attr
        self.extensions = extensions

    def list_entries(self, path: Path) -> list[str]:
        try:
            names = os.listdir(path)
        except OSError as exc:
            msg = f"Cannot list directory {path}: {exc.strerror or exc}"
            raise DirectoryReadError(msg, path=path) from exc
        return sorted(name for name in names if self._is_listed(path / name))

    def is_directory(self, path: Path) -> bool:
        return path.is_dir()

    def load_handler(self, path: Path) -> Handler:
        module_name = f"_roost_handler_{path.stem}_{next(_module_ids)}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            msg = f"Cannot load {path} as a Python module"
            raise LoadError(msg, path=path)

        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            msg = f"Error while loading {path}: {type(exc).__name__}: {exc}"
            raise LoadError(msg, path=path) from exc

        handler = getattr(module, self.handler_attr, None)
        if handler is None or not callable(handler):
            msg = f"{path} does not export a callable {self.handler_attr!r}"
            raise LoadError(msg, path=path)
        return handler

    def _is_listed(self, path: Path) -> bool:
        if path.is_dir():
            return True
        return path.is_file() and path.suffix in self.extensions
