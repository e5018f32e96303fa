"""Forked lifecycle executions for report goals.

A goal may declare that a lifecycle phase or another goal must run before it
(execute_phase / execute_goal in its descriptor). The lifecycle executor
computes those forks onto the GoalExecution and runs them synchronously.
"""

import logging
from typing import Callable, Protocol

from report_exec.errors import ExecutionError
from report_exec.executor.schemas import BuildSession, ForkedExecution, GoalExecution

logger = logging.getLogger(__name__)

ForkRunner = Callable[[ForkedExecution, GoalExecution, BuildSession], None]


class LifecycleExecutor(Protocol):
    """What the report executor needs from the lifecycle engine."""

    def calculate_forked_executions(self, execution: GoalExecution, session: BuildSession) -> None: ...

    def execute_forked_executions(self, execution: GoalExecution, session: BuildSession) -> None: ...


def log_fork(fork: ForkedExecution, execution: GoalExecution, session: BuildSession) -> None:
    """ForkRunner that only reports what would run."""
    logger.info(f"Forked {fork.describe()} for {execution.plugin.key}:{execution.goal}")


class ForkingLifecycleExecutor:
    """LifecycleExecutor driven by the forks declared in goal descriptors."""

    def __init__(self, runner: ForkRunner = log_fork):
        self.runner = runner

    def calculate_forked_executions(self, execution: GoalExecution, session: BuildSession) -> None:
        """Populate ``execution.forked_executions`` from its goal descriptor."""
        descriptor = execution.descriptor
        forks: list[ForkedExecution] = []
        if descriptor.execute_goal:
            forks.append(ForkedExecution(goal=descriptor.execute_goal))
        elif descriptor.execute_phase:
            forks.append(ForkedExecution(phase=descriptor.execute_phase))
        execution.forked_executions = forks
        if forks:
            logger.debug(
                f"{execution.execution_id} forks {[f.describe() for f in forks]}"
            )

    def execute_forked_executions(self, execution: GoalExecution, session: BuildSession) -> None:
        """Run every computed fork, in order.

        Raises:
            ExecutionError: If a fork fails
        """
        for fork in execution.forked_executions:
            logger.info(f"Executing forked {fork.describe()} for {execution.execution_id}")
            try:
                self.runner(fork, execution, session)
            except ExecutionError:
                raise
            except Exception as e:
                raise ExecutionError(
                    f"Forked {fork.describe()} failed for {execution.plugin.id}:{execution.goal}: {e}"
                ) from e
