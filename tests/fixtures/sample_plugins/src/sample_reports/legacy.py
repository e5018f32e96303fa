"""A report written against a facility the host no longer ships."""

from sample_reports.tasks import BaseReport


class LegacyReport(BaseReport):
    output_name = "legacy"

    def __init__(self):
        from report_exec.plugin_registry import PluginRegistry

        self.registry = PluginRegistry()
