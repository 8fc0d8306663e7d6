"""
A single filter config file, parsed into include/exclude globs scoped to the
folder that contains it.
"""

from __future__ import annotations

import json
import posixpath
from dataclasses import dataclass, field
from typing import Any, cast

from treefilter.errors import ConfigParseError
from treefilter.tree_filter.matcher import DEFAULT_MATCHER, GlobMatcher, to_posix
from treefilter.tree_filter.types import (
    ExcludeAll,
    FilterConfig,
    IncludeAll,
    MatchVerdict,
    PatternConfig,
)

# Folder path of a config file in the current directory; scopes the whole relative tree.
_CURRENT_DIR = "."


def folder_of(config_file_path: str) -> str:
    """Forward-slash folder path of a config file, `.` for a file in the current directory."""
    return posixpath.dirname(to_posix(config_file_path)) or _CURRENT_DIR


def normalize_query_path(path: str) -> str:
    """Convert separators to `/` and drop any leading `./`."""
    path = to_posix(path)
    while path.startswith("./"):
        path = path[2:]
    return path


def join_pattern(folder_path: str, pattern: str) -> str:
    """
    Join a glob onto its rule's folder, normalizing the result like a POSIX
    path join. A leading `/` on the pattern still means the rule's folder, and
    a trailing `/` is kept. Backslashes are glob escapes and are left alone.
    """
    joined = posixpath.normpath(posixpath.join(folder_path, pattern.lstrip("/")))
    if pattern.endswith("/") and not joined.endswith("/"):
        joined += "/"
    return joined


def _string_list(data: dict[str, Any], key: str) -> tuple[str, ...] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list of glob patterns, got {type(value).__name__}")
    items = cast(list[Any], value)
    for item in items:
        if not isinstance(item, str):
            raise ValueError(f"'{key}' must contain only strings, got {item!r}")
    return tuple(cast(list[str], items))


def parse_filter_config(data: Any) -> FilterConfig:
    """
    Validate deserialized config contents into a `FilterConfig`. Raises
    `ValueError` for any shape other than `true`, `false`, or an object
    with optional `include` and `exclude` lists.
    """
    if data is True:
        return IncludeAll()
    if data is False:
        return ExcludeAll()
    if isinstance(data, dict):
        obj = cast(dict[str, Any], data)
        return PatternConfig(
            include=_string_list(obj, "include"), exclude=_string_list(obj, "exclude")
        )
    raise ValueError(
        "The contents of the file must represent the value true, false, or a valid config object"
    )


@dataclass(frozen=True)
class Rule:
    """
    Include and exclude globs declared by one config file, each already joined
    with `folder_path` so they are relative to the tree rather than the folder.

    If `include_patterns` is declared (even empty) it alone decides the result
    at this scope; `exclude_patterns` is only consulted when it is not.
    """

    folder_path: str
    include_patterns: tuple[str, ...] | None = None
    exclude_patterns: tuple[str, ...] | None = None
    matcher: GlobMatcher = field(default=DEFAULT_MATCHER, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            for pattern in (*(self.include_patterns or ()), *(self.exclude_patterns or ())):
                self.matcher.validate(pattern)
        except ValueError as e:
            raise ConfigParseError(self.folder_path, e) from e

    @classmethod
    def from_config(
        cls, folder_path: str, config: FilterConfig, matcher: GlobMatcher = DEFAULT_MATCHER
    ) -> Rule:
        """Build a rule from a validated config. Raises `ConfigParseError` for bad globs."""
        include: tuple[str, ...] | None = None
        exclude: tuple[str, ...] | None = None
        if isinstance(config, IncludeAll):
            include = (join_pattern(folder_path, "**"),)
        elif isinstance(config, ExcludeAll):
            include = ()
        else:
            if config.include is not None:
                include = tuple(join_pattern(folder_path, p) for p in config.include)
            if config.exclude is not None:
                exclude = tuple(join_pattern(folder_path, p) for p in config.exclude)
        return cls(
            folder_path=folder_path,
            include_patterns=include,
            exclude_patterns=exclude,
            matcher=matcher,
        )

    def applies_to(self, path: str) -> bool:
        """True if `path` is this rule's folder or lies beneath it."""
        path = normalize_query_path(path)
        folder = self.folder_path
        if folder == _CURRENT_DIR:
            return not path.startswith("/") and path != ".." and not path.startswith("../")
        if path == folder:
            return True
        prefix = folder if folder.endswith("/") else folder + "/"
        return path.startswith(prefix)

    def match(self, path: str) -> MatchVerdict | None:
        """
        Match a path against this rule alone. Returns `None` if no include
        list is declared and no exclude glob matched.

        Raises `ConfigParseError` if the matcher fails on one of the patterns.
        """
        path = normalize_query_path(path)

        if self.include_patterns is not None:
            return MatchVerdict(
                is_included=self._any_match(path, self.include_patterns),
                folder_path=self.folder_path,
            )

        if self.exclude_patterns and self._any_match(path, self.exclude_patterns):
            return MatchVerdict(is_included=False, folder_path=self.folder_path)

        return None

    def _any_match(self, path: str, patterns: tuple[str, ...]) -> bool:
        try:
            return any(self.matcher.matches(path, pattern) for pattern in patterns)
        except ValueError as e:
            raise ConfigParseError(self.folder_path, e) from e


def parse_rule(
    config_file_path: str, contents: str, matcher: GlobMatcher = DEFAULT_MATCHER
) -> Rule:
    """
    Parse the JSON contents of the config file at `config_file_path`.
    Raises `ConfigParseError` if the contents are not valid JSON or not a
    valid config shape.
    """
    folder_path = folder_of(config_file_path)
    try:
        config = parse_filter_config(json.loads(contents))
    except ValueError as e:
        # json.JSONDecodeError is a ValueError too.
        raise ConfigParseError(folder_path, e) from e
    return Rule.from_config(folder_path, config, matcher)
