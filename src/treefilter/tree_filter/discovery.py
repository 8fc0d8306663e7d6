"""Locating and reading filter config files."""

from __future__ import annotations

import glob
from pathlib import Path
from typing import Protocol

from treefilter.tree_filter.matcher import to_posix


class ConfigDiscovery(Protocol):
    """Finds config files for a glob and reads their contents."""

    def discover(self, pattern: str) -> list[str]:
        """Existing file paths matching `pattern`; empty if there are none."""
        ...

    def read_text(self, path: str) -> str: ...


class FileSystemDiscovery:
    """
    Discovers config files on disk. `root_dir` makes relative globs resolve
    against a directory other than the current one; returned paths stay
    relative to it, as `glob.glob` reports them.
    """

    def __init__(self, root_dir: str | Path | None = None) -> None:
        self._root_dir: Path | None = Path(root_dir) if root_dir is not None else None

    def discover(self, pattern: str) -> list[str]:
        found = glob.glob(pattern, root_dir=self._root_dir, recursive=True)
        return [to_posix(p) for p in found if self._path(p).is_file()]

    def read_text(self, path: str) -> str:
        return self._path(path).read_text(encoding="utf-8")

    def _path(self, path: str) -> Path:
        p = Path(path)
        if self._root_dir is not None and not p.is_absolute():
            return self._root_dir / p
        return p
