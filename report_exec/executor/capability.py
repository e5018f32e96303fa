"""Report capability checks, run inside the plugin's own realm.

Both the goal implementation and the ReportTask contract are resolved through
the plugin realm, so the subclass test compares objects from the same
universe. is_report_capable never raises: a goal that cannot be checked is not a
report, so one broken plugin cannot stop the others. The exception is an
implementation that imports a removed facility; it passes here so that task
configuration reports it as a legacy incompatibility.
"""

import logging
from typing import Any

from report_exec.errors import ImplementationNotFoundError
from report_exec.executor.schemas import GoalExecution
from report_exec.plugins.manager import is_removed_facility
from report_exec.plugins.realms import PluginRealm, realm_scope
from report_exec.reporting.api import REPORT_TASK

logger = logging.getLogger(__name__)


def is_report_capable(execution: GoalExecution, realm: PluginRealm) -> bool:
    """Whether the goal's implementation satisfies the ReportTask contract."""
    implementation = execution.descriptor.implementation

    with realm_scope(realm):
        try:
            task_class = realm.load_class(implementation)
            report_contract = realm.load_class(REPORT_TASK)
        except ImplementationNotFoundError as e:
            if is_removed_facility(e.missing_module):
                # Classified as a legacy incompatibility when the task is configured
                logger.debug(f"Goal '{execution.goal}' needs removed module {e.missing_module}")
                return True
            logger.warning(f"Skip goal '{execution.goal}', implementation not found: {e}")
            return False
        except Exception as e:
            logger.warning(f"Skip goal '{execution.goal}', implementation failed to load: {e!r}")
            return False

    with realm_scope(realm):
        try:
            capable = isinstance(task_class, type) and issubclass(task_class, report_contract)
        except TypeError as e:
            logger.warning(f"Skip goal '{execution.goal}', incompatible implementation: {e}")
            return False

    logger.debug(f"Class {implementation} is report: {capable}")
    if not capable:
        logger.debug(f"Skip non report goal {execution.plugin.id}:{execution.goal}")
    return capable


def can_generate_report(report: Any, realm: PluginRealm) -> bool:
    """Ask a configured report whether it has anything to generate."""
    with realm_scope(realm):
        return bool(report.can_generate_report())
