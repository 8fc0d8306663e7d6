"""Shell-glob matching of whole forward-slash paths using wcmatch."""

from __future__ import annotations

from typing import Protocol

from wcmatch import glob

# `*` stops at `/`, `**` spans folders, `{a,b}` and `@(a|b)` expand. Leading
# dots are only matched explicitly, and `\` always escapes.
GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.EXTGLOB | glob.FORCEUNIX


class GlobMatcher(Protocol):
    """Tests paths against single glob patterns."""

    def validate(self, pattern: str) -> None:
        """Raise `ValueError` if `pattern` cannot be used."""
        ...

    def matches(self, path: str, pattern: str) -> bool: ...


def to_posix(path: str) -> str:
    return path.replace("\\", "/")


def _tree_relative(path: str) -> str:
    # Absolute and relative forms of the same tree path match alike.
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


class WcMatchGlobMatcher:
    """
    Matches the whole path against the pattern, so `src/*.d` matches the
    folder `src/x.d` but nothing inside it. A pattern ending in `/**` also
    matches the folder it names.
    """

    def validate(self, pattern: str) -> None:
        try:
            glob.translate(_tree_relative(pattern), flags=GLOB_FLAGS)
        except (ValueError, TypeError) as e:
            raise ValueError(f"Invalid glob pattern {pattern!r}: {e}") from e

    def matches(self, path: str, pattern: str) -> bool:
        path = _tree_relative(to_posix(path))
        pattern = _tree_relative(pattern)
        if glob.globmatch(path, pattern, flags=GLOB_FLAGS):
            return True
        if pattern.endswith("/**"):
            return glob.globmatch(path, pattern[:-3], flags=GLOB_FLAGS)
        return False


DEFAULT_MATCHER: GlobMatcher = WcMatchGlobMatcher()


def matches(path: str, pattern: str) -> bool:
    """Test a single path against a single pattern with the default matcher."""
    return DEFAULT_MATCHER.matches(path, pattern)
