"""
TreeFilter: resolves whether a path is included or excluded, as defined by
config files placed throughout a folder tree.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from treefilter.errors import ConfigParseError
from treefilter.tree_filter.discovery import ConfigDiscovery, FileSystemDiscovery
from treefilter.tree_filter.matcher import DEFAULT_MATCHER, GlobMatcher
from treefilter.tree_filter.rule import Rule, folder_of, normalize_query_path, parse_rule
from treefilter.tree_filter.types import MatchVerdict

logger = logging.getLogger(__name__)


class TreeFilter:
    """
    Loads every config file matching a discovery glob, once, and answers
    include/exclude queries for paths in the tree.

    Rules are kept in lexicographic order of config file path and applied in
    that order, so a later rule (normally a deeper folder) overrides an
    earlier one. Note this is string order, not depth: a sibling folder that
    sorts after a nested one can still come later.
    """

    def __init__(
        self,
        config_file_glob: str,
        discovery: ConfigDiscovery | None = None,
        matcher: GlobMatcher | None = None,
    ) -> None:
        discovery = discovery if discovery is not None else FileSystemDiscovery()
        matcher = matcher if matcher is not None else DEFAULT_MATCHER
        config_paths = sorted(discovery.discover(config_file_glob))

        rules: list[Rule] = []
        for config_path in config_paths:
            try:
                contents = discovery.read_text(config_path)
            except (OSError, UnicodeDecodeError) as e:
                raise ConfigParseError(folder_of(config_path), e) from e
            rules.append(parse_rule(config_path, contents, matcher))

        self._rules: tuple[Rule, ...] = tuple(rules)
        logger.debug("Loaded %d filter config(s) matching %s", len(self._rules), config_file_glob)

    @classmethod
    def from_rules(cls, rules: Iterable[Rule]) -> TreeFilter:
        """Create a filter from rules that are already parsed, kept in the given order."""
        instance = cls.__new__(cls)
        instance._rules = tuple(rules)
        return instance

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def match(self, path: str) -> MatchVerdict | None:
        """
        Determine whether a file or folder path is included or excluded.

        Returns the verdict of the last applicable rule that had an opinion, or
        `None` if no rule scoped to the path (or its ancestors) matched it.
        """
        path = normalize_query_path(path)

        result: MatchVerdict | None = None
        for rule in self._rules:
            if not rule.applies_to(path):
                continue
            verdict = rule.match(path)
            if verdict is not None:
                result = verdict
        return result

    def is_included(self, path: str, default: bool = False) -> bool:
        """Like `match()`, but falls back to `default` when no rule has an opinion."""
        verdict = self.match(path)
        return verdict.is_included if verdict is not None else default
