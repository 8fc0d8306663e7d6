"""Exceptions raised by treefilter."""

from __future__ import annotations


class TreeFilterError(Exception):
    """Base user-facing treefilter error."""


class ConfigParseError(TreeFilterError):
    """A filter config file could not be read, parsed, or validated."""

    def __init__(self, folder_path: str, cause: BaseException | str) -> None:
        self.folder_path = folder_path
        self.cause = cause
        super().__init__(f"Could not parse the config in {folder_path or '.'}:\n{cause}")


class PluginConfigError(TreeFilterError):
    """The filter command options are missing or invalid."""


class PipelineItemError(TreeFilterError):
    def __init__(self, plugin_name: str, path: str, cause: BaseException) -> None:
        self.plugin_name = plugin_name
        self.path = path
        self.cause = cause
        super().__init__(f"Error while processing file ./{path}:\n{cause}")
