"""Goal selection for a report plugin.

Expands a plugin's default reports and report sets into a flat, ordered list
of (goal, configuration) pairs. Duplicates are dropped within one list only:
the same goal may legitimately appear in the default reports and in a report
set, and then runs once per occurrence with that list's configuration.
"""

import logging
from typing import Any, Iterable, Optional

from report_exec.executor.schemas import GoalSelection, GoalWithConfig
from report_exec.plugins.schemas import PluginDescriptor, ReportPlugin

logger = logging.getLogger(__name__)


def _unique_goals(
    reports: Iterable[str],
    configuration: Optional[dict[str, Any]],
    container: str,
) -> list[GoalWithConfig]:
    seen: set[str] = set()
    selected: list[GoalWithConfig] = []
    for report in reports:
        if report in seen:
            logger.warning(f"{report} report is declared twice in {container}")
            continue
        seen.add(report)
        selected.append(GoalWithConfig(goal=report, configuration=configuration))
    return selected


def select_goals(report_plugin: ReportPlugin) -> GoalSelection:
    """Select the goals requested for a report plugin.

    With neither default reports nor report sets the selection is implicit:
    it carries no goals and is expanded with expand_implicit() once the
    plugin descriptor is available.
    """
    if not report_plugin.reports and not report_plugin.report_sets:
        return GoalSelection(implicit=True)

    goals = _unique_goals(report_plugin.reports, report_plugin.configuration, "default reports")
    for report_set in report_plugin.report_sets:
        goals.extend(
            _unique_goals(report_set.reports, report_set.configuration, f"{report_set.id} reportSet")
        )
    return GoalSelection(goals=goals)


def expand_implicit(descriptor: PluginDescriptor) -> list[GoalWithConfig]:
    """Every goal of the plugin, each with its own default configuration."""
    return [
        GoalWithConfig(goal=goal.goal, configuration=goal.configuration)
        for goal in descriptor.goals
    ]
