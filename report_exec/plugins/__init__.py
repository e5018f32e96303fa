"""Plugin declarations, descriptors, realms and the descriptor registry."""

from report_exec.plugins.realms import HOST_REALM, PluginRealm, get_current_realm, realm_scope
from report_exec.plugins.registry import PluginDescriptorRegistry, get_plugin_registry
from report_exec.plugins.schemas import (
    BuildPlugin,
    BuildSection,
    Dependency,
    GoalDescriptor,
    ParameterDescriptor,
    PluginDescriptor,
    PluginManagement,
    ProjectModel,
    ReportPlugin,
    ReportSet,
    ResolvedPlugin,
)

__all__ = [
    "BuildPlugin",
    "BuildSection",
    "Dependency",
    "GoalDescriptor",
    "HOST_REALM",
    "ParameterDescriptor",
    "PluginDescriptor",
    "PluginDescriptorRegistry",
    "PluginManagement",
    "PluginRealm",
    "ProjectModel",
    "ReportPlugin",
    "ReportSet",
    "ResolvedPlugin",
    "get_current_realm",
    "get_plugin_registry",
    "realm_scope",
]
