"""Config shapes and match results for tree filtering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class IncludeAll:
    """A config file containing `true`: everything under the folder is included."""


@dataclass(frozen=True)
class ExcludeAll:
    """A config file containing `false`: everything under the folder is excluded."""


@dataclass(frozen=True)
class PatternConfig:
    """
    A config object with explicit globs, relative to the config file's folder.

    `include=None` means no include list was declared; an empty tuple includes
    nothing. `exclude=None` and an empty tuple both exclude nothing.
    """

    include: tuple[str, ...] | None = None
    exclude: tuple[str, ...] | None = None


FilterConfig = Union[IncludeAll, ExcludeAll, PatternConfig]


@dataclass(frozen=True)
class MatchVerdict:
    """Whether a path is included, and the folder of the rule that decided it."""

    is_included: bool
    folder_path: str
