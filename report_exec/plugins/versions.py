"""Report plugin version resolution.

Steps stop at the first one that yields a version:
1. the version declared on the report plugin itself,
2. a plugin with the same group and artifact id in the build plugins,
3. the same search in the build plugin management,
4. the fallback VersionResolver, after warning that the version is missing.
"""

import logging
from typing import Iterable, Optional, Protocol

from report_exec.errors import ResolutionError
from report_exec.executor.schemas import BuildSession
from report_exec.plugins.registry import PluginDescriptorRegistry
from report_exec.plugins.schemas import BuildPlugin, ProjectModel, ReportPlugin

logger = logging.getLogger(__name__)


class VersionResolver(Protocol):
    """Fallback resolver asked when no version is declared anywhere."""

    def resolve(self, plugin: ReportPlugin, session: BuildSession) -> str: ...


class RegistryVersionResolver:
    """Resolves to the newest version known to a descriptor registry."""

    def __init__(self, registry: PluginDescriptorRegistry):
        self.registry = registry

    def resolve(self, plugin: ReportPlugin, session: BuildSession) -> str:
        versions = self.registry.versions(plugin.group_id, plugin.artifact_id)
        if not versions:
            raise ResolutionError(f"No version available for plugin {plugin.key}")
        return versions[-1]


def find_plugin(report_plugin: ReportPlugin, plugins: Optional[Iterable[BuildPlugin]]) -> Optional[BuildPlugin]:
    """First plugin with the same group and artifact id as ``report_plugin``."""
    if plugins is None:
        return None
    for plugin in plugins:
        if plugin.artifact_id == report_plugin.artifact_id and plugin.group_id == report_plugin.group_id:
            return plugin
    return None


def resolve_plugin_version(
    report_plugin: ReportPlugin,
    project: ProjectModel,
    session: BuildSession,
    resolver: VersionResolver,
) -> str:
    """Determine the version of a report plugin.

    Args:
        report_plugin: The plugin from the reporting section
        project: Project whose build section is searched
        session: Current build session, passed to the fallback resolver
        resolver: Fallback resolver, only consulted when nothing is declared

    Returns:
        The plugin version

    Raises:
        ResolutionError: If the fallback resolver cannot find a version
    """
    key = report_plugin.key
    logger.debug(f"Resolving version for {key}")

    if report_plugin.version is not None:
        logger.debug(f"Resolved {key} version from the reporting plugins section: {report_plugin.version}")
        return report_plugin.version

    build = project.build
    if build is not None:
        plugin = find_plugin(report_plugin, build.plugins)
        if plugin is not None and plugin.version is not None:
            logger.debug(f"Resolved {key} version from the build plugins section: {plugin.version}")
            return plugin.version

        if build.plugin_management is not None:
            plugin = find_plugin(report_plugin, build.plugin_management.plugins)
            if plugin is not None and plugin.version is not None:
                logger.debug(
                    f"Resolved {key} version from the build plugin management section: {plugin.version}"
                )
                return plugin.version

    logger.warning(f"Report plugin {key} has an empty version.")
    logger.warning("")
    logger.warning("It is highly recommended to fix these problems because they threaten the stability of your build.")
    logger.warning("")
    logger.warning("For this reason, future versions might no longer support building such malformed projects.")

    try:
        version = resolver.resolve(report_plugin, session)
    except ResolutionError:
        raise
    except Exception as e:
        raise ResolutionError(f"Failed to resolve version for plugin {key}: {e}") from e

    logger.debug(f"Resolved {key} version from repository: {version}")
    return version
