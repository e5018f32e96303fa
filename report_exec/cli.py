"""Command-line entry point.

Usage:
    report-exec plan path/to/project.yaml [--definitions plugins/] [--log-level DEBUG]

Prepares the report executions declared in the project's reporting section
against the plugin descriptors in the definitions directory, and prints a
JSON summary. Forked executions are logged, not run.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import yaml

from report_exec.errors import ReportExecError
from report_exec.executor.report_executor import ReportExecutor
from report_exec.executor.schemas import BuildSession, ReportExecutionRequest
from report_exec.lifecycle.executor import ForkingLifecycleExecutor
from report_exec.plugins.manager import LocalPluginManager
from report_exec.plugins.registry import PluginDescriptorRegistry
from report_exec.plugins.schemas import ProjectModel
from report_exec.plugins.versions import RegistryVersionResolver
from report_exec.settings import configure_logging, load_settings

logger = logging.getLogger(__name__)


def build_executor(registry: PluginDescriptorRegistry) -> ReportExecutor:
    """Wire a ReportExecutor against a local descriptor registry."""
    return ReportExecutor(
        plugin_manager=LocalPluginManager(registry),
        lifecycle_executor=ForkingLifecycleExecutor(),
        version_resolver=RegistryVersionResolver(registry),
    )


def plan(project_file: Path, definitions_dir: Path, offline: bool = False) -> list[dict]:
    """Prepare the project's reports and return their summaries."""
    project = ProjectModel.from_yaml(project_file)
    registry = PluginDescriptorRegistry(definitions_dir)
    executor = build_executor(registry)

    request = ReportExecutionRequest(
        session=BuildSession(execution_root=str(project_file.parent), offline=offline),
        project=project,
        report_plugins=project.reporting,
    )
    executions = executor.build_report_executions(request)
    logger.info(f"Prepared {len(executions)} report executions")
    return [e.summary() for e in executions]


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="report-exec", description="Prepare report plugin executions")
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan_parser = subparsers.add_parser("plan", help="Prepare the reports declared by a project")
    plan_parser.add_argument("project", type=Path, help="Path to the project YAML file")
    plan_parser.add_argument(
        "--definitions",
        type=Path,
        help="Directory of plugin descriptor YAML files (default: $REPORT_EXEC_DEFINITIONS_DIR or ./plugins)",
    )
    plan_parser.add_argument("--log-level", help="Logging level (default: $REPORT_EXEC_LOG_LEVEL or INFO)")
    plan_parser.add_argument("--offline", action="store_true", help="Mark the build session offline")

    args = parser.parse_args(argv)
    settings = load_settings(definitions_dir=args.definitions, log_level=args.log_level)
    configure_logging(settings)

    try:
        summaries = plan(args.project, settings.definitions_dir, offline=args.offline)
    except (ReportExecError, OSError, ValueError, yaml.YAMLError) as e:
        cause = f": {e.__cause__}" if e.__cause__ else ""
        print(f"error: {e}{cause}", file=sys.stderr)
        return 1

    print(json.dumps(summaries, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
