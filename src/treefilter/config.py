"""
Options for the filter command, plus TOML-based settings file loading.

Settings are searched for in `.treefilter.toml`, `treefilter.toml`, or
`pyproject.toml [tool.treefilter]`, walking up from the current directory.
Settings values are merged with CLI flags using three-way precedence:
explicit CLI flags > settings file > built-in defaults.
"""

from __future__ import annotations

import sys
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

from treefilter.errors import PluginConfigError

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


PLUGIN_NAME = "treefilter"

# Accepted spellings of each option key, mapped to the field name.
_OPTION_ALIASES: dict[str, str] = {
    "config_file_glob": "config_file_glob",
    "config-file-glob": "config_file_glob",
    "configFileGlob": "config_file_glob",
    "config_glob": "config_file_glob",
    "config-glob": "config_file_glob",
    "include_by_default": "include_by_default",
    "include-by-default": "include_by_default",
    "includeByDefault": "include_by_default",
    "debug": "debug",
}


@dataclass(frozen=True)
class PluginConfig:
    """
    Validated options for the filter command.

    `config_file_glob` locates the config files defining include and exclude
    globs. `include_by_default` decides paths that no config file has an
    opinion on. `debug` enables per-path debug logging.
    """

    config_file_glob: str
    include_by_default: bool = False
    debug: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.config_file_glob, str) or not self.config_file_glob:
            raise PluginConfigError("The 'config_file_glob' option is required.")
        for name in ("include_by_default", "debug"):
            if not isinstance(getattr(self, name), bool):
                raise PluginConfigError(f"The '{name}' option must be true or false.")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> PluginConfig:
        """
        Create a config from a plain mapping, as read from a settings file or
        passed by a caller. Keys may be snake_case, kebab-case, or camelCase;
        `None` values are treated as unset.
        """
        if options is None:
            raise PluginConfigError("The plugin options are required.")

        values: dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key)
            if name is not None and value is not None:
                values[name] = value

        if "config_file_glob" not in values:
            raise PluginConfigError("The 'config_file_glob' option is required.")
        return cls(**values)


@dataclass
class TreeFilterSettings:
    """
    Parsed settings from a TOML file. Fields are `None` when not set, so the
    merge logic can distinguish "not configured" from "explicitly set to the
    default value".
    """

    config_file_glob: str | None = None
    include_by_default: bool | None = None
    debug: bool | None = None


# Settings file names, in the order they are tried within each directory.
_SETTINGS_FILENAMES = (".treefilter.toml", "treefilter.toml", "pyproject.toml")

_VALID_FIELDS = {f.name for f in fields(TreeFilterSettings)}


def _read_settings_table(path: Path) -> dict[str, Any] | None:
    """
    The treefilter table of a settings file: the whole document, or only
    `[tool.treefilter]` for `pyproject.toml` (`None` if it has none).
    """
    data = tomllib.loads(path.read_text())
    if path.name != "pyproject.toml":
        return data
    table = data.get("tool", {}).get(PLUGIN_NAME)
    return cast(dict[str, Any], table) if isinstance(table, dict) else None


def find_settings_file(start_dir: Path) -> Path | None:
    """
    Return the nearest settings file in `start_dir` or one of its parents.
    A `pyproject.toml` only counts if it has a `[tool.treefilter]` table, and
    one that cannot be read or parsed is skipped.
    """
    start = start_dir.resolve()
    for directory in (start, *start.parents):
        candidates = (directory / name for name in _SETTINGS_FILENAMES)
        for candidate in filter(Path.is_file, candidates):
            if candidate.name != "pyproject.toml":
                return candidate
            try:
                if _read_settings_table(candidate) is not None:
                    return candidate
            except (tomllib.TOMLDecodeError, OSError):
                continue
    return None


def load_settings(settings_path: Path) -> TreeFilterSettings:
    """
    Load `TreeFilterSettings` from a TOML file. Raises `PluginConfigError` if
    the file is not valid TOML.
    """
    try:
        table = _read_settings_table(settings_path)
    except tomllib.TOMLDecodeError as e:
        raise PluginConfigError(f"Invalid settings file {settings_path}: {e}") from e
    return _parse_settings_data(table or {})


def _parse_settings_data(data: dict[str, Any]) -> TreeFilterSettings:
    mapped: dict[str, Any] = {}
    for key, value in data.items():
        name = _OPTION_ALIASES.get(key, key.replace("-", "_"))
        if name in _VALID_FIELDS:
            mapped[name] = value
    return TreeFilterSettings(**mapped)


_T = TypeVar("_T")


def merge_cli_with_settings(
    cli_opts: _T,
    settings: TreeFilterSettings | None,
    explicit_flags: set[str],
) -> _T:
    """
    Copy every option set in `settings` onto `cli_opts`, except those the
    user passed explicitly on the command line.
    """
    if settings is not None:
        for name, value in vars(settings).items():
            if value is not None and name not in explicit_flags and hasattr(cli_opts, name):
                setattr(cli_opts, name, value)
    return cli_opts
