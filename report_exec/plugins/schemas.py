"""Plugin and project declaration schemas.

Two families of models live here:
- What the project declares: build plugins, plugin management, and the
  reporting section (report plugins with reports and report sets).
- What a plugin ships: its descriptor, listing goals with their declared
  parameters and default configuration.
"""

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class Dependency(BaseModel):
    """A dependency declared on a plugin."""

    group_id: str
    artifact_id: str
    version: Optional[str] = None
    path: Optional[str] = Field(
        default=None,
        description="Import root shipped by this dependency, relative to the descriptor file",
    )

    @property
    def key(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"


class BuildPlugin(BaseModel):
    """A plugin declared in the build section (or plugin management)."""

    group_id: str
    artifact_id: str
    version: Optional[str] = None
    dependencies: list[Dependency] = Field(default_factory=list)
    configuration: Optional[dict[str, Any]] = None

    @property
    def key(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"


class PluginManagement(BaseModel):
    """Plugin declarations that only pin versions and defaults."""

    plugins: list[BuildPlugin] = Field(default_factory=list)


class BuildSection(BaseModel):
    """The build section of a project."""

    plugins: list[BuildPlugin] = Field(default_factory=list)
    plugin_management: Optional[PluginManagement] = None


class ReportSet(BaseModel):
    """A named subset of a plugin's report goals with its own configuration."""

    id: str = Field(default="default", description="Report set identifier")
    reports: list[str] = Field(default_factory=list, description="Goal names, in order")
    configuration: Optional[dict[str, Any]] = None


class ReportPlugin(BaseModel):
    """A plugin requested in the reporting section."""

    group_id: str
    artifact_id: str
    version: Optional[str] = Field(
        default=None,
        description="Pinned version; resolved from the build when omitted",
    )
    reports: list[str] = Field(
        default_factory=list,
        description="Default report goals, sharing the plugin-level configuration",
    )
    configuration: Optional[dict[str, Any]] = Field(
        default=None, description="Plugin-level configuration"
    )
    report_sets: list[ReportSet] = Field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"


class ProjectModel(BaseModel):
    """The parts of a project model report preparation reads."""

    group_id: str = ""
    artifact_id: str = ""
    version: Optional[str] = None
    build: Optional[BuildSection] = None
    reporting: list[ReportPlugin] = Field(default_factory=list)

    @classmethod
    def from_yaml(cls, path: Path) -> "ProjectModel":
        """Load a project model from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)


class ResolvedPlugin(BaseModel):
    """A report plugin with its version settled. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    group_id: str
    artifact_id: str
    version: str
    dependencies: tuple[Dependency, ...] = ()

    @property
    def key(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    @property
    def id(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


class ParameterDescriptor(BaseModel):
    """A parameter a goal declares."""

    name: str
    required: bool = False
    description: str = ""


class GoalDescriptor(BaseModel):
    """Metadata for one executable goal of a plugin."""

    goal: str = Field(..., description="Goal name, unique within the plugin")
    implementation: str = Field(
        ...,
        description="Implementation class as 'module:Class' or 'module.Class'",
        examples=["sample_reports.tasks:LintReport"],
    )
    description: str = ""
    parameters: list[ParameterDescriptor] = Field(default_factory=list)
    configuration: Optional[dict[str, Any]] = Field(
        default=None, description="The goal's default configuration"
    )
    execute_phase: Optional[str] = Field(
        default=None, description="Lifecycle phase to fork before this goal runs"
    )
    execute_goal: Optional[str] = Field(
        default=None, description="Goal to fork before this goal runs"
    )

    @property
    def parameter_names(self) -> set[str]:
        return {p.name for p in self.parameters}


class PluginDescriptor(BaseModel):
    """Everything a plugin ships about itself.

    The realm is runtime-only state attached by the plugin manager once the
    plugin's isolated environment has been set up.
    """

    group_id: str
    artifact_id: str
    version: str
    goal_prefix: Optional[str] = None
    source: Optional[str] = Field(
        default=None,
        description="Import root of the plugin's own code, relative to the descriptor file",
    )
    dependencies: list[Dependency] = Field(default_factory=list)
    goals: list[GoalDescriptor] = Field(default_factory=list)
    source_file: Optional[Path] = Field(default=None, exclude=True)

    _realm: Any = PrivateAttr(default=None)

    @property
    def key(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    @property
    def id(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    @property
    def realm(self) -> Any:
        return self._realm

    def attach_realm(self, realm: Any) -> None:
        """Attach the isolated realm prepared for this plugin."""
        self._realm = realm

    def get_goal(self, goal: str) -> Optional[GoalDescriptor]:
        """Look up a goal descriptor by name."""
        for descriptor in self.goals:
            if descriptor.goal == goal:
                return descriptor
        return None
