"""Contracts shared between the host and every plugin realm.

A report goal's implementation satisfies ReportTask. The rendering stage
drives it through a Sink (or a SinkFactory for multi-page reports) and a
Renderer. These names are imported into each plugin realm from the host, so
a plugin never carries its own copy of them.
"""

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class Log(Protocol):
    """Logging sink handed to report implementations."""

    def debug(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


@runtime_checkable
class LogEnabled(Protocol):
    def enable_logging(self, log: Log) -> None: ...


@runtime_checkable
class Sink(Protocol):
    """Output stream of structural rendering events."""

    def section(self, level: int, title: str) -> None: ...

    def paragraph(self, text: str) -> None: ...

    def table(self, rows: list[list[Any]]) -> None: ...

    def flush(self) -> None: ...

    def close(self) -> None: ...


@runtime_checkable
class SinkFactory(Protocol):
    def create_sink(self, output_directory: str, output_name: str) -> Sink: ...


@runtime_checkable
class Renderer(Protocol):
    def render(self, sink: Sink, report: "ReportTask", locale: str) -> None: ...


@runtime_checkable
class ReportTask(Protocol):
    """The report capability: a goal that can render itself into a sink."""

    def can_generate_report(self) -> bool: ...

    def generate(self, sink: Sink, locale: str) -> None: ...

    def get_output_name(self) -> str: ...

    def get_name(self, locale: str) -> str: ...

    def get_description(self, locale: str) -> str: ...

    def get_category_name(self) -> str: ...

    def is_external_report(self) -> bool: ...


@runtime_checkable
class MultiPageReportTask(ReportTask, Protocol):
    def generate_pages(self, sink: Sink, sink_factory: Optional[SinkFactory], locale: str) -> None: ...


CATEGORY_PROJECT_REPORTS = "Project Reports"

REPORT_TASK = "report_exec.reporting.api:ReportTask"

# Contract names every plugin realm imports from the host
REPORT_IMPORTS: tuple[str, ...] = (
    REPORT_TASK,
    "report_exec.reporting.api:MultiPageReportTask",
    "report_exec.reporting.api:Renderer",
    "report_exec.reporting.api:SinkFactory",
    "report_exec.reporting.api:Sink",
    "report_exec.reporting.api:LogEnabled",
    "report_exec.reporting.api:Log",
)

# Artifacts shipping the contracts above; never resolved into a plugin realm
REPORT_EXCLUDES: tuple[str, ...] = (
    "report-exec-site-renderer",
    "report-exec-sink-api",
    "report-exec-reporting-api",
)
