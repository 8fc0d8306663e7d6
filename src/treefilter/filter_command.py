"""
Stream adapter that keeps or drops items of a file pipeline according to a
`TreeFilter`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import TypeVar

from treefilter.config import PLUGIN_NAME, PluginConfig
from treefilter.errors import PipelineItemError
from treefilter.tree_filter import ConfigDiscovery, MatchVerdict, TreeFilter

logger = logging.getLogger(__name__)

_Item = TypeVar("_Item", bound="str | os.PathLike[str]")


class FilterCommand:
    """
    Filters the paths flowing through a pipeline, as defined by config files
    placed within the folder tree.
    """

    def __init__(
        self,
        config: PluginConfig,
        discovery: ConfigDiscovery | None = None,
        plugin_name: str = PLUGIN_NAME,
        cwd: str | Path | None = None,
    ) -> None:
        self._config = config
        self._discovery = discovery
        self._plugin_name = plugin_name
        self._cwd = Path(cwd) if cwd is not None else None

    def create(self) -> Callable[[Iterable[_Item | None]], Iterator[_Item]]:
        """
        Load the config files and return the filtering transform. Raises
        `ConfigParseError` here, before any item is processed, if a config
        file is invalid.
        """
        tree_filter = TreeFilter(self._config.config_file_glob, self._discovery)

        def transform(items: Iterable[_Item | None]) -> Iterator[_Item]:
            for item in items:
                # Drop empty items; there is nothing to filter.
                if item is None:
                    continue
                relative_path = self._relative_path(item)
                try:
                    keep = self._process(tree_filter, relative_path)
                except Exception as e:
                    raise PipelineItemError(self._plugin_name, relative_path, e) from e
                if keep:
                    yield item

        return transform

    def filter(self, items: Iterable[_Item | None]) -> Iterator[_Item]:
        """Filter `items`, yielding only those that are included."""
        return self.create()(items)

    def explain(
        self, items: Iterable[_Item | None]
    ) -> Iterator[tuple[_Item, str, MatchVerdict | None]]:
        """
        Yield `(item, relative_path, verdict)` for every item, kept or not.
        Paths are made relative to the working directory the same way as in
        `filter()`, and `verdict` is `None` when no config file decided.
        """
        tree_filter = TreeFilter(self._config.config_file_glob, self._discovery)
        for item in items:
            if item is None:
                continue
            relative_path = self._relative_path(item)
            try:
                verdict = tree_filter.match(relative_path)
            except Exception as e:
                raise PipelineItemError(self._plugin_name, relative_path, e) from e
            yield item, relative_path, verdict

    def _relative_path(self, item: str | os.PathLike[str]) -> str:
        path = Path(item)
        if path.is_absolute():
            base = self._cwd if self._cwd is not None else Path.cwd()
            return os.path.relpath(path, base).replace("\\", "/")
        return path.as_posix()

    def _process(self, tree_filter: TreeFilter, relative_path: str) -> bool:
        debug = self._config.debug
        if debug:
            logger.debug("Processing ./%s", relative_path)

        verdict: MatchVerdict | None = tree_filter.match(relative_path)

        if verdict is not None:
            if debug:
                action = "Included" if verdict.is_included else "Excluded"
                logger.debug("%s by ./%s", action, verdict.folder_path)
            return verdict.is_included

        if debug:
            action = "Included" if self._config.include_by_default else "Excluded"
            logger.debug("%s by default", action)
        return self._config.include_by_default
