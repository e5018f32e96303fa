"""Report executor - builds prepared report executions from report plugins.

For each report plugin, in declaration order:

1. Resolve its version (see report_exec.plugins.versions)
2. Inherit dependencies from a matching build plugin declaration
3. Get the plugin descriptor and set up the plugin realm, importing the
   report contracts from the caller's realm
4. Select goals (default reports, report sets, or the whole goal catalog)
5. Per goal: check it is a report, merge its configuration, get a configured
   task, run forked executions, and keep it if it can generate its report

Any failure while processing one plugin aborts the whole call and is wrapped
in an ExecutionError naming that plugin. Only two goal-level failures are
recovered: a task that turns out not to be a report, and a task that depends
on a removed facility.
"""

import logging
from typing import Optional

from report_exec.configuration.merger import merge_configuration
from report_exec.errors import (
    ExecutionError,
    GoalNotFoundError,
    LegacyIncompatibilityError,
    TypeMismatchError,
)
from report_exec.executor.capability import can_generate_report, is_report_capable
from report_exec.executor.goal_selector import expand_implicit, select_goals
from report_exec.executor.schemas import (
    GoalExecution,
    PreparedExecution,
    ReportExecutionRequest,
)
from report_exec.lifecycle.executor import LifecycleExecutor
from report_exec.plugins.manager import PluginManager
from report_exec.plugins.realms import get_current_realm
from report_exec.plugins.schemas import ReportPlugin, ResolvedPlugin
from report_exec.plugins.versions import VersionResolver, find_plugin, resolve_plugin_version
from report_exec.reporting.api import REPORT_EXCLUDES, REPORT_IMPORTS, ReportTask

logger = logging.getLogger(__name__)


class ReportExecutor:
    """Prepares report executions for the rendering stage.

    Usage:
        executor = ReportExecutor(plugin_manager, lifecycle_executor, version_resolver)
        executions = executor.build_report_executions(request)
    """

    def __init__(
        self,
        plugin_manager: PluginManager,
        lifecycle_executor: LifecycleExecutor,
        version_resolver: VersionResolver,
    ):
        self.plugin_manager = plugin_manager
        self.lifecycle_executor = lifecycle_executor
        self.version_resolver = version_resolver

    def build_report_executions(self, request: ReportExecutionRequest) -> list[PreparedExecution]:
        """Build the report executions, running forked executions where needed.

        Args:
            request: Session, project and report plugins to prepare

        Returns:
            Prepared executions across all report plugins, in declaration order

        Raises:
            ExecutionError: If any report plugin fails; wraps the original error
        """
        if request.report_plugins is None:
            return []
        logger.debug("Building report executions")

        plugin_keys: set[str] = set()
        executions: list[PreparedExecution] = []

        plugin_key = ""
        try:
            for report_plugin in request.report_plugins:
                plugin_key = report_plugin.key
                if plugin_key in plugin_keys:
                    logger.info(f"Plugin {plugin_key} will be executed more than one time")
                plugin_keys.add(plugin_key)

                executions.extend(self.build_report_plugin(request, report_plugin))
        except Exception as e:
            raise ExecutionError(f"failed to get report for {plugin_key}", plugin_key=plugin_key) from e

        return executions

    def build_report_plugin(
        self,
        request: ReportExecutionRequest,
        report_plugin: ReportPlugin,
    ) -> list[PreparedExecution]:
        """Prepare the report executions of a single report plugin."""
        session = request.session
        plugin = self.resolve_plugin(request, report_plugin)
        logger.info(f"Configuring report plugin {plugin.id}")

        descriptor = self.plugin_manager.get_plugin_descriptor(plugin, session)
        self.plugin_manager.setup_plugin_realm(
            descriptor, session, get_current_realm(), REPORT_IMPORTS, REPORT_EXCLUDES
        )
        realm = descriptor.realm

        selection = select_goals(report_plugin)
        goals = expand_implicit(descriptor) if selection.implicit else selection.goals
        user_defined_reports = not selection.implicit

        reports: list[PreparedExecution] = []
        for goal_with_config in goals:
            goal_descriptor = descriptor.get_goal(goal_with_config.goal)
            if goal_descriptor is None:
                raise GoalNotFoundError(goal_with_config.goal, descriptor.id)

            execution = GoalExecution.for_report(plugin, goal_descriptor, realm)

            if not is_report_capable(execution, realm):
                if user_defined_reports:
                    # Reports were explicitly listed in the project
                    logger.warning(
                        f"Ignoring {plugin.id}:{execution.goal} goal since it is not a report: "
                        f"should be removed from reporting configuration"
                    )
                continue

            execution.configuration = merge_configuration(
                goal_descriptor.configuration,
                report_plugin.configuration,
                goal_with_config.configuration,
                goal_descriptor.parameter_names,
            )

            report = self._get_configured_report(execution, request)
            if report is None:
                continue

            prepared = PreparedExecution(
                plugin=plugin,
                goal=execution.goal,
                report=report,
                realm=realm,
                configuration=execution.configuration,
            )

            self.lifecycle_executor.calculate_forked_executions(execution, session)
            if execution.forked_executions:
                self.lifecycle_executor.execute_forked_executions(execution, session)

            if can_generate_report(report, realm):
                reports.append(prepared)
            else:
                logger.debug(f"{plugin.id}:{execution.goal} cannot generate its report, skipped")

        return reports

    def resolve_plugin(self, request: ReportExecutionRequest, report_plugin: ReportPlugin) -> ResolvedPlugin:
        """Settle the version and inherited dependencies of a report plugin."""
        version = resolve_plugin_version(
            report_plugin, request.project, request.session, self.version_resolver
        )

        # Dependencies declared on the same plugin in the build section apply to reports too
        dependencies = ()
        build = request.project.build
        configured = find_plugin(report_plugin, build.plugins) if build is not None else None
        if configured is not None and configured.dependencies:
            dependencies = tuple(configured.dependencies)

        return ResolvedPlugin(
            group_id=report_plugin.group_id,
            artifact_id=report_plugin.artifact_id,
            version=version,
            dependencies=dependencies,
        )

    def _get_configured_report(
        self,
        execution: GoalExecution,
        request: ReportExecutionRequest,
    ) -> Optional[ReportTask]:
        try:
            return self.plugin_manager.get_configured_task(ReportTask, request.session, execution)
        except TypeMismatchError as e:
            logger.warning(f"Skip {execution.plugin.id}:{execution.goal}, not a report task: {e}")
            return None
        except LegacyIncompatibilityError as e:
            logger.warning(f"Skip {execution.plugin.id}:{execution.goal}, depends on a removed facility")
            logger.debug(str(e), exc_info=True)
            return None
