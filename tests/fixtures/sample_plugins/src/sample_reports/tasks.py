"""Report and non-report goals of the sample plugin."""

from report_exec.reporting.api import CATEGORY_PROJECT_REPORTS


class BaseReport:
    output_name = "report"
    title = "Report"
    enabled = True

    def can_generate_report(self):
        return bool(self.enabled)

    def generate(self, sink, locale):
        sink.section(1, self.get_name(locale))
        sink.paragraph(self.get_description(locale))

    def get_output_name(self):
        return self.output_name

    def get_name(self, locale):
        return self.title

    def get_description(self, locale):
        return f"{self.title} for this project"

    def get_category_name(self):
        return CATEGORY_PROJECT_REPORTS

    def is_external_report(self):
        return False


class LintReport(BaseReport):
    output_name = "lint"
    title = "Lint"
    output_dir = "target/site"
    severity = "error"


class CoverageReport(BaseReport):
    output_name = "coverage"
    title = "Coverage"
    threshold = 0


class CleanTask:
    force = False

    def execute(self):
        return None
