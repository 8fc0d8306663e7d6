#!/usr/bin/env python3
"""
treefilter: Include or exclude paths using config files placed in a folder tree

Common usage:
  treefilter --config-glob '**/_filter.json' src/a.py src/b.py
  git ls-files | treefilter --config-glob '**/_filter.json'
  find . -type f | treefilter --config-glob '**/_filter.json' --include-by-default --explain

Each config file applies to its folder and everything beneath it, and contains
`true`, `false`, or {"include": [...], "exclude": [...]} with globs relative to
the folder. Deeper config files override their ancestors.

Options may also be set in `.treefilter.toml`, `treefilter.toml`, or
`[tool.treefilter]` in `pyproject.toml`.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from treefilter.config import (
    PluginConfig,
    find_settings_file,
    load_settings,
    merge_cli_with_settings,
)
from treefilter.errors import ConfigParseError, PipelineItemError, PluginConfigError
from treefilter.filter_command import FilterCommand


@dataclass
class Options:
    """Command-line options for the treefilter tool."""

    paths: list[str]
    config_file_glob: str | None
    include_by_default: bool
    debug: bool
    stdin: bool
    explain: bool
    version: bool


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns `(options, explicit_flags)`, where `explicit_flags` holds the
    option names the user actually passed (for settings merge precedence).
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=str,
        default=[],
        help="Candidate paths to filter (read from stdin, one per line, if none are given)",
    )
    parser.add_argument(
        "-g",
        "--config-glob",
        type=str,
        default=None,
        dest="config_file_glob",
        metavar="GLOB",
        help="Glob locating the filter config files (e.g., '**/_filter.json')",
    )
    parser.add_argument(
        "--include-by-default",
        action="store_true",
        dest="include_by_default",
        help="Keep paths that no config file has an opinion on (default: drop them)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log each path and the config folder that decided it to stderr",
    )
    parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read candidate paths from stdin in addition to any given as arguments",
    )
    parser.add_argument(
        "--explain",
        action="store_true",
        help="Print every path with its verdict and deciding folder instead of only kept paths",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    # Re-parse with sentinel defaults to detect which flags were actually supplied.
    _SENTINEL = object()
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    sentinel_parser.add_argument(
        "-g", "--config-glob", dest="config_file_glob", default=_SENTINEL
    )
    sentinel_parser.add_argument(
        "--include-by-default", dest="include_by_default", action="store_true", default=_SENTINEL
    )
    sentinel_parser.add_argument("--debug", action="store_true", default=_SENTINEL)
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])

    explicit_flags: set[str] = {
        name
        for name in ("config_file_glob", "include_by_default", "debug")
        if getattr(sentinel_opts, name, _SENTINEL) is not _SENTINEL
    }

    return (
        Options(
            paths=opts.paths,
            config_file_glob=opts.config_file_glob,
            include_by_default=opts.include_by_default,
            debug=opts.debug,
            stdin=opts.stdin,
            explain=opts.explain,
            version=opts.version,
        ),
        explicit_flags,
    )


_CLI_HANDLER_NAME = "treefilter-cli"


def _setup_logging(debug: bool) -> None:
    """Send debug logging from the package to the current stderr."""
    if not debug:
        return
    pkg_logger = logging.getLogger("treefilter")
    pkg_logger.setLevel(logging.DEBUG)
    for existing in [h for h in pkg_logger.handlers if h.get_name() == _CLI_HANDLER_NAME]:
        pkg_logger.removeHandler(existing)
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_CLI_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s"))
    pkg_logger.addHandler(handler)


def _read_paths(options: Options) -> list[str]:
    paths = list(options.paths)
    if options.stdin or not paths:
        paths.extend(line.strip() for line in sys.stdin if line.strip())
    return paths


def _explain(config: PluginConfig, paths: list[str]) -> None:
    for path, _relative_path, verdict in FilterCommand(config).explain(paths):
        if verdict is not None:
            state = "included" if verdict.is_included else "excluded"
            print(f"{path}\t{state}\t{verdict.folder_path}")
        else:
            state = "included" if config.include_by_default else "excluded"
            print(f"{path}\t{state}\tdefault")


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the treefilter CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for usage or config errors, 2 for errors
        while filtering a path)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("treefilter")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    try:
        settings_path = find_settings_file(Path.cwd())
        if settings_path:
            merge_cli_with_settings(options, load_settings(settings_path), explicit_flags)

        if options.config_file_glob is None:
            print(
                "Error: No config glob specified. Use --config-glob or set `config-glob`"
                " in a settings file. Use --help for more options.",
                file=sys.stderr,
            )
            return 1

        config = PluginConfig(
            config_file_glob=options.config_file_glob,
            include_by_default=options.include_by_default,
            debug=options.debug,
        )
    except PluginConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _setup_logging(config.debug)
    paths = _read_paths(options)

    try:
        if options.explain:
            _explain(config, paths)
        else:
            for path in FilterCommand(config).filter(paths):
                print(path)
    except ConfigParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except PipelineItemError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
