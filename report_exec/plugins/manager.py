"""Plugin manager - descriptors, realms and configured task instances.

PluginManager is the seam the report executor talks to. LocalPluginManager
serves it from a PluginDescriptorRegistry, building one PluginRealm per
plugin from the import roots its descriptor declares.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Protocol

from report_exec.errors import (
    ContainerError,
    ImplementationNotFoundError,
    LegacyIncompatibilityError,
    ResolutionError,
    TypeMismatchError,
)
from report_exec.executor.schemas import BuildSession, GoalExecution
from report_exec.plugins.realms import PluginRealm, realm_scope
from report_exec.plugins.registry import PluginDescriptorRegistry
from report_exec.plugins.schemas import PluginDescriptor, ResolvedPlugin

logger = logging.getLogger(__name__)

# Facilities removed from the host; old plugins still import them at load time
REMOVED_FACILITY_MODULES = frozenset({"report_exec.plugin_registry"})


class PluginManager(Protocol):
    """What the report executor needs from the plugin registry."""

    def get_plugin_descriptor(self, plugin: ResolvedPlugin, session: BuildSession) -> PluginDescriptor: ...

    def setup_plugin_realm(
        self,
        descriptor: PluginDescriptor,
        session: BuildSession,
        parent: PluginRealm,
        imports: Iterable[str],
        excludes: Iterable[str],
    ) -> None: ...

    def get_configured_task(self, capability: type, session: BuildSession, execution: GoalExecution) -> Any: ...


def is_removed_facility(module_name: Optional[str]) -> bool:
    if not module_name:
        return False
    return any(
        module_name == removed or module_name.startswith(removed + ".")
        for removed in REMOVED_FACILITY_MODULES
    )


class LocalPluginManager:
    """PluginManager backed by descriptor files on disk."""

    def __init__(self, registry: PluginDescriptorRegistry):
        self.registry = registry

    def get_plugin_descriptor(self, plugin: ResolvedPlugin, session: BuildSession) -> PluginDescriptor:
        """Get a fresh copy of the descriptor for a resolved plugin.

        Dependencies carried by ``plugin`` (declared on the build plugin) are
        added to the copy unless the descriptor already declares them.

        Raises:
            ResolutionError: If no descriptor exists for that version
        """
        descriptor = self.registry.get(plugin.group_id, plugin.artifact_id, plugin.version)
        if descriptor is None:
            known = self.registry.versions(plugin.group_id, plugin.artifact_id)
            raise ResolutionError(
                f"Plugin {plugin.id} could not be resolved. Known versions: {known}"
            )
        descriptor = descriptor.model_copy(deep=True)

        declared = {d.key for d in descriptor.dependencies}
        for dependency in plugin.dependencies:
            if dependency.key not in declared:
                descriptor.dependencies.append(dependency.model_copy())
                declared.add(dependency.key)
                logger.debug(f"Added build dependency {dependency.key} to {descriptor.id}")
        return descriptor

    def setup_plugin_realm(
        self,
        descriptor: PluginDescriptor,
        session: BuildSession,
        parent: PluginRealm,
        imports: Iterable[str],
        excludes: Iterable[str],
    ) -> None:
        """Create the plugin's realm and attach it to the descriptor.

        Dependencies whose artifact id is in ``excludes`` contribute no import
        root; the names in ``imports`` resolve through ``parent`` instead.

        Raises:
            ContainerError: If a declared import root does not exist
        """
        if descriptor.realm is not None:
            return

        excluded = set(excludes)
        base_dir = descriptor.source_file.parent if descriptor.source_file else Path.cwd()

        roots: list[str] = []
        if descriptor.source:
            roots.append(descriptor.source)
        for dependency in descriptor.dependencies:
            if dependency.artifact_id in excluded:
                logger.debug(f"Excluding {dependency.key} from realm of {descriptor.id}")
                continue
            if dependency.path:
                roots.append(dependency.path)

        search_paths: list[str] = []
        for root in roots:
            path = (base_dir / root).resolve()
            if not path.is_dir():
                raise ContainerError(
                    f"Import root '{root}' of plugin {descriptor.id} does not exist: {path}"
                )
            search_paths.append(str(path))

        realm = PluginRealm(
            realm_id=f"plugin>{descriptor.id}",
            parent=parent,
            imports=imports,
            search_paths=search_paths,
        )
        descriptor.attach_realm(realm)
        logger.debug(f"Set up realm {realm.realm_id} with roots {search_paths}")

    def get_configured_task(self, capability: type, session: BuildSession, execution: GoalExecution) -> Any:
        """Instantiate a goal's implementation and apply its merged configuration.

        Raises:
            LegacyIncompatibilityError: The implementation imports a removed facility
            TypeMismatchError: The instance does not satisfy ``capability``
            ContainerError: Any other load or construction failure
        """
        realm: Optional[PluginRealm] = execution.realm
        if realm is None:
            raise ContainerError(f"No realm set up for {execution.plugin.id}")

        implementation = execution.descriptor.implementation
        with realm_scope(realm):
            try:
                task_class = realm.load_class(implementation)
            except ImplementationNotFoundError as e:
                if is_removed_facility(e.missing_module):
                    raise LegacyIncompatibilityError(
                        f"{implementation} requires removed module {e.missing_module}"
                    ) from e
                raise ContainerError(str(e)) from e

            try:
                task = task_class()
            except ImportError as e:
                if is_removed_facility(e.name):
                    raise LegacyIncompatibilityError(
                        f"{implementation} requires removed module {e.name}"
                    ) from e
                raise ContainerError(
                    f"Unable to instantiate {implementation} for goal '{execution.goal}': {e}"
                ) from e
            except Exception as e:
                raise ContainerError(
                    f"Unable to instantiate {implementation} for goal '{execution.goal}': {e}"
                ) from e

            parameters = execution.configuration.as_parameters() if execution.configuration else {}
            for name, value in parameters.items():
                try:
                    setattr(task, name, value)
                except (AttributeError, TypeError, ValueError) as e:
                    raise ContainerError(
                        f"Cannot set parameter '{name}' on {implementation}: {e}"
                    ) from e

            if not isinstance(task, capability):
                raise TypeMismatchError(
                    f"{implementation} cannot be used as {getattr(capability, '__name__', capability)}"
                )
        return task
