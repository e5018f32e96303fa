"""Shared fixtures: the on-disk sample plugin and in-memory collaborators."""

from pathlib import Path

import pytest

from helpers import (
    FAKE_REPORT,
    FIXTURES_DIR,
    NOT_A_REPORT,
    FakePluginManager,
    FakeReport,
    NotAReport,
    RecordingLifecycle,
    StaticVersionResolver,
)
from report_exec.executor.report_executor import ReportExecutor
from report_exec.plugins.manager import LocalPluginManager
from report_exec.plugins.registry import PluginDescriptorRegistry


@pytest.fixture
def fake_classes():
    return {
        FAKE_REPORT: FakeReport,
        NOT_A_REPORT: NotAReport,
    }


@pytest.fixture
def make_executor(fake_classes):
    """Build (executor, manager, lifecycle, resolver) around fake collaborators."""

    def _make(*descriptors, failures=None, forks=None, lifecycle_failure=None, resolver=None):
        manager = FakePluginManager(list(descriptors), fake_classes, failures=failures)
        lifecycle = RecordingLifecycle(forks=forks, failure=lifecycle_failure)
        resolver = resolver or StaticVersionResolver(version="1.0")
        return ReportExecutor(manager, lifecycle, resolver), manager, lifecycle, resolver

    return _make


@pytest.fixture
def definitions_dir() -> Path:
    return FIXTURES_DIR / "definitions"


@pytest.fixture
def registry(definitions_dir) -> PluginDescriptorRegistry:
    return PluginDescriptorRegistry(definitions_dir)


@pytest.fixture
def local_manager(registry) -> LocalPluginManager:
    return LocalPluginManager(registry)
