"""Error types raised while preparing report executions."""

from typing import Optional


class ReportExecError(Exception):
    """Base error for report-exec."""


class ResolutionError(ReportExecError):
    """Raised when a plugin version or descriptor cannot be determined."""


class GoalNotFoundError(ReportExecError):
    """Raised when a declared goal does not exist in the resolved plugin."""

    def __init__(self, goal: str, plugin_key: str):
        super().__init__(f"Could not find goal '{goal}' in plugin {plugin_key}")
        self.goal = goal
        self.plugin_key = plugin_key


class ImplementationNotFoundError(ReportExecError):
    """Raised when an implementation name cannot be loaded inside a realm."""

    def __init__(self, name: str, message: str, missing_module: Optional[str] = None):
        super().__init__(message)
        self.name = name
        self.missing_module = missing_module


class ContainerError(ReportExecError):
    """Raised when a realm cannot be set up or a task cannot be instantiated."""


class TypeMismatchError(ContainerError):
    """Raised when a configured instance does not satisfy the requested capability."""


class LegacyIncompatibilityError(ContainerError):
    """Raised when an implementation depends on a removed facility module."""


class ExecutionError(ReportExecError):
    """Raised when a forked execution fails, or report preparation as a whole fails."""

    def __init__(self, message: str, plugin_key: Optional[str] = None):
        super().__init__(message)
        self.plugin_key = plugin_key
