"""Configuration trees and the three-level report configuration merge."""

from report_exec.configuration.merger import as_node, merge_configuration
from report_exec.configuration.node import ConfigurationNode, merge_nodes

__all__ = [
    "ConfigurationNode",
    "as_node",
    "merge_configuration",
    "merge_nodes",
]
