"""Report capability contracts shared with plugin realms."""

from report_exec.reporting.api import (
    REPORT_EXCLUDES,
    REPORT_IMPORTS,
    REPORT_TASK,
    Log,
    LogEnabled,
    MultiPageReportTask,
    Renderer,
    ReportTask,
    Sink,
    SinkFactory,
)

__all__ = [
    "Log",
    "LogEnabled",
    "MultiPageReportTask",
    "REPORT_EXCLUDES",
    "REPORT_IMPORTS",
    "REPORT_TASK",
    "Renderer",
    "ReportTask",
    "Sink",
    "SinkFactory",
]
