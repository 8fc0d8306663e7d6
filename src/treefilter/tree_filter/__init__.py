"""
Hierarchical include/exclude filtering driven by config files placed in a
folder tree.

Each config file (JSON) applies to its own folder and everything beneath it:
`true` includes everything, `false` excludes everything, and an object lists
`include` and/or `exclude` globs relative to the folder. Rules from deeper
folders override rules from their ancestors.

Usage::

    from treefilter.tree_filter import TreeFilter

    tree_filter = TreeFilter("**/_filter.json")
    verdict = tree_filter.match("docs/readme.md")
    if verdict is not None and verdict.is_included:
        ...
"""

from treefilter.tree_filter.discovery import ConfigDiscovery, FileSystemDiscovery
from treefilter.tree_filter.matcher import GlobMatcher, WcMatchGlobMatcher
from treefilter.tree_filter.resolver import TreeFilter
from treefilter.tree_filter.rule import Rule, parse_filter_config, parse_rule
from treefilter.tree_filter.types import (
    ExcludeAll,
    FilterConfig,
    IncludeAll,
    MatchVerdict,
    PatternConfig,
)

__all__ = [
    "ConfigDiscovery",
    "ExcludeAll",
    "FileSystemDiscovery",
    "FilterConfig",
    "GlobMatcher",
    "IncludeAll",
    "MatchVerdict",
    "PatternConfig",
    "Rule",
    "TreeFilter",
    "WcMatchGlobMatcher",
    "parse_filter_config",
    "parse_rule",
]
