"""Shared fixtures: in-memory handler trees and on-disk handler trees."""

from collections.abc import Callable
from pathlib import Path
from textwrap import dedent
from typing import Any

import pytest

from roost.errors import DirectoryReadError, LoadError

MEMORY_ROOT = Path("/mem/api")


class MemorySource:
    """TreeSource over a nested dict: dicts are directories, anything else a file.

    File values are the handler itself, or an exception instance that
    loading the file raises.  Keys are full entry names (``"get.py"``);
    ``sort=False`` lists them in dict order instead of by name.
    """

    def __init__(self, files: dict[str, Any], root: Path = MEMORY_ROOT, *, sort: bool = True) -> None:
        self.files = files
        self.root = root
        self.sort = sort
        self.loaded: list[Path] = []

    def _lookup(self, path: Path) -> Any:
        node: Any = self.files
        for part in path.relative_to(self.root).parts:
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def list_entries(self, path: Path) -> list[str]:
        node = self._lookup(path)
        if not isinstance(node, dict):
            raise DirectoryReadError(f"Cannot list {path}", path=path)
        return sorted(node) if self.sort else list(node)

    def is_directory(self, path: Path) -> bool:
        return isinstance(self._lookup(path), dict)

    def load_handler(self, path: Path) -> Any:
        self.loaded.append(path)
        value = self._lookup(path)
        if isinstance(value, Exception):
            raise LoadError(f"Cannot load {path}: {value}", path=path) from value
        return value


@pytest.fixture
def memory_source() -> Callable[[dict[str, Any]], MemorySource]:
    return MemorySource


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[dict[str, Any]], Path]:
    """Write a nested dict of ``name -> source | dict`` under ``tmp_path/api``."""

    def write(files: dict[str, Any], root: Path | None = None) -> Path:
        base = root or tmp_path / "api"
        base.mkdir(parents=True, exist_ok=True)
        for name, content in files.items():
            target = base / name
            if isinstance(content, dict):
                write(content, target)
            else:
                target.write_text(dedent(content))
        return base

    return write
