"""Executor-side schemas: the request, per-goal working state, and results.

GoalWithConfig, GoalSelection and GoalExecution only live for the duration
of one plugin's processing. PreparedExecution is the output unit handed to
the rendering stage.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from report_exec.configuration.node import ConfigurationNode
from report_exec.plugins.schemas import GoalDescriptor, ProjectModel, ReportPlugin, ResolvedPlugin


class BuildSession(BaseModel):
    """The running build, as seen by collaborators."""

    execution_root: Optional[str] = None
    offline: bool = False
    properties: dict[str, str] = Field(default_factory=dict)


class ReportExecutionRequest(BaseModel):
    """Input to ReportExecutor.build_report_executions()."""

    session: BuildSession = Field(default_factory=BuildSession)
    project: ProjectModel
    report_plugins: Optional[list[ReportPlugin]] = Field(
        default=None,
        description="Report plugins in declaration order (None means nothing to prepare)",
    )


class GoalWithConfig(BaseModel):
    """A goal name paired with the scope-level configuration it was requested with."""

    goal: str
    configuration: Optional[dict[str, Any]] = None


class GoalSelection(BaseModel):
    """Result of goal selection for one report plugin."""

    goals: list[GoalWithConfig] = Field(default_factory=list)
    implicit: bool = Field(
        default=False,
        description="True when no reports were declared and the whole goal catalog applies",
    )


class ForkedExecution(BaseModel):
    """A secondary execution a goal requires before it runs."""

    phase: Optional[str] = None
    goal: Optional[str] = None

    def describe(self) -> str:
        if self.goal:
            return f"goal {self.goal}"
        return f"phase {self.phase}"


class GoalExecution(BaseModel):
    """One goal of one resolved plugin, being prepared as a report."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    plugin: ResolvedPlugin
    goal: str
    execution_id: str
    descriptor: GoalDescriptor
    realm: Any = None
    configuration: Optional[ConfigurationNode] = None
    forked_executions: list[ForkedExecution] = Field(default_factory=list)

    @classmethod
    def for_report(cls, plugin: ResolvedPlugin, descriptor: GoalDescriptor, realm: Any) -> "GoalExecution":
        return cls(
            plugin=plugin,
            goal=descriptor.goal,
            execution_id=f"report:{descriptor.goal}",
            descriptor=descriptor,
            realm=realm,
        )


class PreparedExecution(BaseModel):
    """A configured report task ready for the rendering stage."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    plugin: ResolvedPlugin
    goal: str
    report: Any = Field(..., description="Configured ReportTask instance")
    realm: Any = Field(..., description="PluginRealm the report must run under")
    configuration: Optional[ConfigurationNode] = None

    def summary(self) -> dict[str, Any]:
        """JSON-friendly description of this execution."""
        return {
            "plugin": self.plugin.id,
            "goal": self.goal,
            "realm": getattr(self.realm, "realm_id", None),
            "configuration": self.configuration.as_parameters() if self.configuration else {},
        }
