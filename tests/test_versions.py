"""Tests for report plugin version resolution."""

import logging

import pytest

from helpers import StaticVersionResolver
from report_exec.errors import ResolutionError
from report_exec.executor.schemas import BuildSession
from report_exec.plugins.registry import version_sort_key
from report_exec.plugins.schemas import (
    BuildPlugin,
    BuildSection,
    PluginManagement,
    ProjectModel,
    ReportPlugin,
)
from report_exec.plugins.versions import RegistryVersionResolver, find_plugin, resolve_plugin_version


def project(plugins=(), managed=None) -> ProjectModel:
    management = PluginManagement(plugins=list(managed)) if managed is not None else None
    return ProjectModel(build=BuildSection(plugins=list(plugins), plugin_management=management))


REPORT = ReportPlugin(group_id="g", artifact_id="a")


class TestResolvePluginVersion:
    def test_explicit_version_wins_without_consulting_anything(self):
        resolver = StaticVersionResolver(failure=AssertionError("must not be called"))
        report = ReportPlugin(group_id="g", artifact_id="a", version="2.0")
        proj = project(plugins=[BuildPlugin(group_id="g", artifact_id="a", version="1.0")])

        assert resolve_plugin_version(report, proj, BuildSession(), resolver) == "2.0"
        assert resolver.calls == []

    def test_build_plugins_section(self):
        resolver = StaticVersionResolver()
        proj = project(
            plugins=[
                BuildPlugin(group_id="other", artifact_id="a", version="0.1"),
                BuildPlugin(group_id="g", artifact_id="a", version="1.0"),
            ],
            managed=[BuildPlugin(group_id="g", artifact_id="a", version="3.0")],
        )

        assert resolve_plugin_version(REPORT, proj, BuildSession(), resolver) == "1.0"
        assert resolver.calls == []

    def test_plugin_management_when_build_plugin_has_no_version(self):
        proj = project(
            plugins=[BuildPlugin(group_id="g", artifact_id="a")],
            managed=[BuildPlugin(group_id="g", artifact_id="a", version="3.0")],
        )
        assert resolve_plugin_version(REPORT, proj, BuildSession(), StaticVersionResolver()) == "3.0"

    def test_plugin_management_when_no_build_match(self):
        proj = project(managed=[BuildPlugin(group_id="g", artifact_id="a", version="3.0")])
        assert resolve_plugin_version(REPORT, proj, BuildSession(), StaticVersionResolver()) == "3.0"

    def test_fallback_resolver_warns(self, caplog):
        resolver = StaticVersionResolver(version="4.2")

        with caplog.at_level(logging.WARNING):
            version = resolve_plugin_version(REPORT, ProjectModel(), BuildSession(), resolver)

        assert version == "4.2"
        assert resolver.calls == ["g:a"]
        assert "Report plugin g:a has an empty version." in caplog.text
        assert "future versions might no longer support" in caplog.text

    def test_fallback_resolution_error_propagates(self):
        resolver = StaticVersionResolver(failure=ResolutionError("offline"))
        with pytest.raises(ResolutionError, match="offline"):
            resolve_plugin_version(REPORT, project(), BuildSession(), resolver)

    def test_unexpected_fallback_failure_becomes_resolution_error(self):
        resolver = StaticVersionResolver(failure=ConnectionError("repository down"))
        with pytest.raises(ResolutionError) as exc:
            resolve_plugin_version(REPORT, project(), BuildSession(), resolver)
        assert isinstance(exc.value.__cause__, ConnectionError)


class TestFindPlugin:
    def test_first_match(self):
        first = BuildPlugin(group_id="g", artifact_id="a", version="1")
        second = BuildPlugin(group_id="g", artifact_id="a", version="2")
        assert find_plugin(REPORT, [first, second]) is first

    def test_none_and_no_match(self):
        assert find_plugin(REPORT, None) is None
        assert find_plugin(REPORT, [BuildPlugin(group_id="g", artifact_id="b")]) is None


class TestRegistryVersionResolver:
    def test_newest_known_version(self, registry):
        report = ReportPlugin(group_id="org.example", artifact_id="sample-reports")
        assert RegistryVersionResolver(registry).resolve(report, BuildSession()) == "1.1.0"

    def test_unknown_plugin(self, registry):
        with pytest.raises(ResolutionError):
            RegistryVersionResolver(registry).resolve(REPORT, BuildSession())


def test_version_ordering():
    versions = ["1.10.0", "1.2", "1.2.1", "1.2-SNAPSHOT", "1.9.3"]
    assert sorted(versions, key=version_sort_key) == ["1.2-SNAPSHOT", "1.2", "1.2.1", "1.9.3", "1.10.0"]
