"""Forked lifecycle executions required by report goals."""

from report_exec.lifecycle.executor import ForkingLifecycleExecutor, LifecycleExecutor, log_fork

__all__ = [
    "ForkingLifecycleExecutor",
    "LifecycleExecutor",
    "log_fork",
]
