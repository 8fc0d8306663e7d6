from treefilter.config import PLUGIN_NAME, PluginConfig
from treefilter.errors import (
    ConfigParseError,
    PipelineItemError,
    PluginConfigError,
    TreeFilterError,
)
from treefilter.filter_command import FilterCommand
from treefilter.tree_filter import MatchVerdict, Rule, TreeFilter

__all__ = [
    "PLUGIN_NAME",
    "ConfigParseError",
    "FilterCommand",
    "MatchVerdict",
    "PipelineItemError",
    "PluginConfig",
    "PluginConfigError",
    "Rule",
    "TreeFilter",
    "TreeFilterError",
]
