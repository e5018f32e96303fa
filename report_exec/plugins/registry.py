"""Plugin descriptor registry - loads and serves descriptors from YAML files."""

import logging
from pathlib import Path
from typing import Optional

import yaml

from report_exec.plugins.schemas import PluginDescriptor

logger = logging.getLogger(__name__)


def version_sort_key(version: str) -> tuple:
    """Ordering key for version strings: numeric parts compare as numbers.

    A qualifier ("-SNAPSHOT", "-beta1") sorts before the release it qualifies.
    """
    release, _, qualifier = version.partition("-")
    parts = tuple(
        (0, int(p), "") if p.isdigit() else (1, 0, p)
        for p in release.split(".")
    )
    return (parts, (0 if qualifier else 1, qualifier))


class PluginDescriptorRegistry:
    """Registry of plugin descriptors loaded from YAML files.

    Descriptors are loaded from <definitions_dir>/*.yaml (and *.yml) on first
    use. Each file contains one PluginDescriptor; several versions of the
    same plugin may be present side by side.
    """

    def __init__(self, definitions_dir: Path):
        self.definitions_dir = Path(definitions_dir)
        self._descriptors: dict[tuple[str, str, str], PluginDescriptor] = {}
        self._loaded = False

    def load(self) -> None:
        """Load all plugin descriptors from YAML files."""
        if self._loaded:
            return

        if not self.definitions_dir.exists():
            logger.warning(f"Definitions directory not found: {self.definitions_dir}")
            self._loaded = True
            return

        files = sorted(self.definitions_dir.glob("*.yaml")) + sorted(self.definitions_dir.glob("*.yml"))
        for yaml_file in files:
            try:
                with open(yaml_file, "r") as f:
                    data = yaml.safe_load(f)
                descriptor = PluginDescriptor.model_validate(data)
                descriptor.source_file = yaml_file
                coordinates = (descriptor.group_id, descriptor.artifact_id, descriptor.version)
                if coordinates in self._descriptors:
                    previous = self._descriptors[coordinates].source_file
                    logger.warning(f"Plugin descriptor {descriptor.id} in {yaml_file} replaces the one in {previous}")
                self._descriptors[coordinates] = descriptor
                logger.debug(f"Loaded plugin descriptor: {descriptor.id}")
            except Exception as e:
                logger.error(f"Failed to load plugin descriptor from {yaml_file}: {e}")

        self._loaded = True
        logger.info(f"Loaded {len(self._descriptors)} plugin descriptors")

    def get(self, group_id: str, artifact_id: str, version: str) -> Optional[PluginDescriptor]:
        """Get a descriptor by plugin coordinates."""
        self.load()
        return self._descriptors.get((group_id, artifact_id, version))

    def versions(self, group_id: str, artifact_id: str) -> list[str]:
        """Known versions of a plugin, oldest first."""
        self.load()
        found = [
            version
            for (group, artifact, version) in self._descriptors
            if group == group_id and artifact == artifact_id
        ]
        return sorted(found, key=version_sort_key)

    def list_all(self) -> list[PluginDescriptor]:
        """List all plugin descriptors."""
        self.load()
        return list(self._descriptors.values())

    def list_keys(self) -> list[str]:
        """List all plugin ids (group:artifact:version)."""
        self.load()
        return [d.id for d in self._descriptors.values()]

    def count(self) -> int:
        """Get total number of descriptors."""
        self.load()
        return len(self._descriptors)

    def reload(self) -> None:
        """Force reload all descriptors."""
        self._descriptors.clear()
        self._loaded = False
        self.load()


# Global registry instance
_registry: Optional[PluginDescriptorRegistry] = None


def get_plugin_registry() -> PluginDescriptorRegistry:
    """Get the global plugin descriptor registry, rooted at the configured directory."""
    global _registry
    if _registry is None:
        from report_exec.settings import load_settings

        _registry = PluginDescriptorRegistry(load_settings().definitions_dir)
    return _registry
