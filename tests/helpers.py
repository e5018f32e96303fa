"""Fakes and builders shared by the test modules."""

from pathlib import Path
from typing import Any, Optional

from report_exec.errors import ImplementationNotFoundError, ResolutionError
from report_exec.executor.schemas import BuildSession, ForkedExecution, ReportExecutionRequest
from report_exec.plugins.realms import HOST_REALM, PluginRealm, get_current_realm
from report_exec.plugins.schemas import (
    GoalDescriptor,
    ParameterDescriptor,
    PluginDescriptor,
    ProjectModel,
    ReportPlugin,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"

FAKE_REPORT = "fake.reports:XReport"
NOT_A_REPORT = "fake.reports:NotAReport"


# ── Report implementations served by DictRealm ───────────────────────


class FakeReport:
    """Satisfies ReportTask structurally; records the realm it was asked in."""

    enabled = True

    def __init__(self):
        self.asked_in_realm: Optional[PluginRealm] = None

    def can_generate_report(self):
        self.asked_in_realm = get_current_realm()
        return bool(self.enabled)

    def generate(self, sink, locale):
        sink.paragraph("fake")

    def get_output_name(self):
        return "fake"

    def get_name(self, locale):
        return "Fake"

    def get_description(self, locale):
        return "Fake report"

    def get_category_name(self):
        return "Project Reports"

    def is_external_report(self):
        return False


class NotAReport:
    def execute(self):
        return None


class DictRealm(PluginRealm):
    """A realm whose implementations come from a dict instead of imports."""

    def __init__(self, realm_id: str, classes: dict[str, Any], parent=HOST_REALM, imports=()):
        super().__init__(realm_id, parent=parent, imports=imports)
        self.classes = classes

    def load_class(self, name: str) -> Any:
        if self.parent is not None and name in self.imports:
            return self.parent.load_class(name)
        try:
            return self.classes[name]
        except KeyError:
            raise ImplementationNotFoundError(name, f"No class {name} in realm {self.realm_id}") from None


# ── Collaborators ────────────────────────────────────────────────────


class FakePluginManager:
    """In-memory PluginManager recording how it was called."""

    def __init__(self, descriptors: list[PluginDescriptor], classes: dict[str, Any], failures=None):
        self.descriptors = {d.id: d for d in descriptors}
        self.classes = classes
        self.failures: dict[str, Exception] = failures or {}
        self.realm_setups: list[tuple] = []
        self.configured: list = []

    def get_plugin_descriptor(self, plugin, session):
        descriptor = self.descriptors.get(plugin.id)
        if descriptor is None:
            raise ResolutionError(f"No descriptor for {plugin.id}")
        return descriptor.model_copy(deep=True)

    def setup_plugin_realm(self, descriptor, session, parent, imports, excludes):
        self.realm_setups.append((descriptor.id, tuple(imports), tuple(excludes)))
        descriptor.attach_realm(
            DictRealm(f"plugin>{descriptor.id}", self.classes, parent=parent, imports=imports)
        )

    def get_configured_task(self, capability, session, execution):
        self.configured.append(execution)
        if execution.goal in self.failures:
            raise self.failures[execution.goal]
        task = execution.realm.load_class(execution.descriptor.implementation)()
        if execution.configuration is not None:
            for name, value in execution.configuration.as_parameters().items():
                setattr(task, name, value)
        return task


class RecordingLifecycle:
    """LifecycleExecutor with fixed forks per goal."""

    def __init__(self, forks: Optional[dict[str, list[ForkedExecution]]] = None, failure=None):
        self.forks = forks or {}
        self.failure = failure
        self.events: list[tuple[str, str]] = []

    def calculate_forked_executions(self, execution, session):
        self.events.append(("calculate", execution.goal))
        execution.forked_executions = list(self.forks.get(execution.goal, []))

    def execute_forked_executions(self, execution, session):
        self.events.append(("execute", execution.goal))
        if self.failure is not None:
            raise self.failure


class StaticVersionResolver:
    def __init__(self, version: str = "9.9.9", failure: Optional[Exception] = None):
        self.version = version
        self.failure = failure
        self.calls: list[str] = []

    def resolve(self, plugin, session):
        self.calls.append(plugin.key)
        if self.failure is not None:
            raise self.failure
        return self.version


# ── Builders ─────────────────────────────────────────────────────────


def goal(name: str, implementation: str, parameters=(), configuration=None, **kwargs) -> GoalDescriptor:
    return GoalDescriptor(
        goal=name,
        implementation=implementation,
        parameters=[ParameterDescriptor(name=p) for p in parameters],
        configuration=configuration,
        **kwargs,
    )


def descriptor(*goals: GoalDescriptor, group_id="g", artifact_id="a", version="1.0") -> PluginDescriptor:
    return PluginDescriptor(group_id=group_id, artifact_id=artifact_id, version=version, goals=list(goals))


def request_for(*plugins: ReportPlugin, project: Optional[ProjectModel] = None) -> ReportExecutionRequest:
    return ReportExecutionRequest(
        session=BuildSession(),
        project=project or ProjectModel(group_id="org.example", artifact_id="app"),
        report_plugins=list(plugins),
    )


# ── On-disk plugins ──────────────────────────────────────────────────

REPORT_METHODS = '''
    def generate(self, sink, locale):
        sink.paragraph(self.get_name(locale))

    def get_output_name(self):
        return "{name}"

    def get_name(self, locale):
        return "{name}"

    def get_description(self, locale):
        return "{name} report"

    def get_category_name(self):
        return "Project Reports"

    def is_external_report(self):
        return False
'''


def write_plugin(root: Path, artifact_id: str, module: str, body: str, goal_name: str, version: str = "1.0") -> Path:
    """Write a one-goal plugin under ``root`` and return its definitions directory.

    ``body`` is the module source; the goal's implementation is ``module:Report``.
    """
    src = root / "src"
    src.mkdir(parents=True, exist_ok=True)
    (src / f"{module}.py").write_text(body + REPORT_METHODS.format(name=goal_name))

    definitions = root / "definitions"
    definitions.mkdir(parents=True, exist_ok=True)
    (definitions / f"{artifact_id}-{version}.yaml").write_text(
        f"group_id: org.example\n"
        f"artifact_id: {artifact_id}\n"
        f"version: '{version}'\n"
        f"source: ../src\n"
        f"goals:\n"
        f"  - goal: {goal_name}\n"
        f"    implementation: {module}:Report\n"
    )
    return definitions
