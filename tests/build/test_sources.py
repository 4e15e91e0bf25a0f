"""Unit tests for build/sources.py and build/build_info.py."""

import pytest

from pedant.build.build_info import render_build_info, write_build_info
from pedant.build.sources import (
    audit_globs,
    package_ownership,
    select_build_globs,
)
from pedant.exceptions import UnknownPackageError
from pedant.models import BUILD_INFO_PATH

LIB_A = ".pedant/p/lib-a-1.0.0/src/**/*.purs"
LIB_B = ".pedant/p/lib-b-2.0.0/src/**/*.purs"


class TestSelectBuildGlobs:
    def test_whole_workspace(self, two_package_workspace):
        globs = select_build_globs(two_package_workspace)
        assert globs == {
            "p1/src/**/*.purs",
            "p2/src/**/*.purs",
            LIB_A,
            LIB_B,
            BUILD_INFO_PATH,
        }

    def test_selected_package(self, two_package_workspace):
        globs = select_build_globs(two_package_workspace, selected="p1")
        assert "p1/src/**/*.purs" in globs
        assert BUILD_INFO_PATH in globs

    def test_deps_only_with_selected_package(self, two_package_workspace):
        globs = select_build_globs(two_package_workspace, selected="p1", deps_only=True)
        assert "p1/src/**/*.purs" not in globs
        assert {LIB_A, LIB_B, BUILD_INFO_PATH} <= globs

    def test_deps_only_without_selection_keeps_workspace_sources(self, two_package_workspace):
        assert select_build_globs(two_package_workspace, deps_only=True) == select_build_globs(
            two_package_workspace
        )

    def test_unknown_selection(self, two_package_workspace):
        with pytest.raises(UnknownPackageError):
            select_build_globs(two_package_workspace, selected="p9")


class TestAuditGlobs:
    def test_includes_self_dependencies_and_build_info(self, two_package_workspace):
        p1 = two_package_workspace.get_package("p1")
        globs = audit_globs(two_package_workspace, p1)
        assert {"p1/src/**/*.purs", LIB_A, LIB_B, BUILD_INFO_PATH} <= globs


class TestPackageOwnership:
    def test_roots(self, two_package_workspace):
        ownership = package_ownership(two_package_workspace)
        assert ownership.owner_of_path("p2/src/P2/Main.purs") == "p2"
        assert ownership.owner_of_path(".pedant/p/lib-b-2.0.0/src/Lib/B.purs") == "lib-b"
        assert ownership.owner_of_path(BUILD_INFO_PATH) is None
        assert len(ownership) == 4


class TestBuildInfo:
    def test_render_lists_sorted_packages(self):
        content = render_build_info(["zed", "app"], pedant_version="1.2.3")
        assert "module Pedant.Generated.BuildInfo where" in content
        assert content.index('"app"') < content.index('"zed"')
        assert 'pedantVersion = "1.2.3"' in content

    def test_render_without_packages(self):
        assert "  []" in render_build_info([])

    def test_write_is_idempotent(self, tmp_path):
        path = write_build_info(tmp_path, ["app"])
        assert path == tmp_path / BUILD_INFO_PATH
        mtime = path.stat().st_mtime_ns
        write_build_info(tmp_path, ["app"])
        assert path.stat().st_mtime_ns == mtime
