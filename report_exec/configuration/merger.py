"""Three-level configuration merge for report goals.

Precedence, highest first:
1. Scope-level configuration (the report set, or the plugin's default reports)
2. Plugin-level configuration (the reporting plugin declaration)
3. The goal's own default configuration from its descriptor

The merged tree is then cleaned so that only parameters the goal declares
reach its runtime configuration.
"""

import logging
from typing import Any, Iterable, Optional, Union

from report_exec.configuration.node import ConfigurationNode, merge_nodes

logger = logging.getLogger(__name__)

ROOT_NAME = "configuration"

ConfigurationSource = Union[ConfigurationNode, dict[str, Any], None]


def as_node(source: ConfigurationSource, name: str = ROOT_NAME) -> Optional[ConfigurationNode]:
    """Convert a plugin-neutral configuration into a tree (None stays None)."""
    if source is None:
        return None
    if isinstance(source, ConfigurationNode):
        return source
    return ConfigurationNode.from_mapping(name, source)


def merge_configuration(
    goal_default: ConfigurationSource,
    plugin_level: ConfigurationSource,
    scope_level: ConfigurationSource,
    parameters: Iterable[str],
) -> ConfigurationNode:
    """Merge the three configuration levels of a report goal.

    Args:
        goal_default: The goal's own default configuration
        plugin_level: Configuration declared on the reporting plugin
        scope_level: Configuration of the report set (or default reports)
        parameters: Parameter names the goal declares

    Returns:
        The merged configuration. When neither plugin-level nor scope-level
        configuration is given, the goal default is returned unfiltered.
    """
    goal_config = as_node(goal_default) or ConfigurationNode(name=ROOT_NAME)

    if plugin_level is None and scope_level is None:
        return goal_config

    plugin_config = as_node(plugin_level) or ConfigurationNode(name=ROOT_NAME)

    # Report set configuration must win over the plugin configuration
    with_scope = merge_nodes(as_node(scope_level), plugin_config)
    merged = merge_nodes(with_scope, goal_config)

    allowed = set(parameters)
    cleaned = ConfigurationNode(
        name=ROOT_NAME,
        children=[c for c in merged.children if c.name in allowed],
    )

    logger.debug(f"Merged configuration: {merged}")
    logger.debug(f"Cleaned configuration: {cleaned}")
    return cleaned
