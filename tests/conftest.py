"""Shared test fixtures: fake compiler/backend collaborators and sample graphs."""

import pytest

from pedant.config import BuildSettings, WorkspaceConfig
from pedant.exceptions import BackendError, CompileError, GraphDecodeError
from pedant.models import ImportGraph, WorkspacePackage


class FakeCompiler:
    """Records every call; returns `default_graph` for graph requests."""

    def __init__(self, fail_on_call=None, default_graph=None):
        self.calls = []
        self.graph_calls = []
        self.fail_on_call = fail_on_call
        self.default_graph = default_graph

    def compile(self, source_globs, extra_args):
        self.calls.append((frozenset(source_globs), list(extra_args)))
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise CompileError("compiler reported errors", exit_code=1)

    def graph(self, source_globs, extra_args):
        self.graph_calls.append((frozenset(source_globs), list(extra_args)))
        if self.default_graph is None:
            raise GraphDecodeError("no graph configured")
        return self.default_graph


class FakeBackend:
    def __init__(self, exit_code=0):
        self.calls = []
        self.exit_code = exit_code

    def exec(self, command, args):
        self.calls.append((command, list(args)))
        if self.exit_code != 0:
            raise BackendError(command, "exited with a failure", exit_code=self.exit_code)


@pytest.fixture
def fake_compiler():
    return FakeCompiler()


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def make_compiler():
    return FakeCompiler


@pytest.fixture
def make_backend():
    return FakeBackend


@pytest.fixture
def app_graph():
    """app imports lib-a only; lib-a imports lib-b.

    App.Main -> App.Util (self), Lib.A
    App.Util -> Lib.A.Internal
    Lib.A    -> Lib.B
    """
    return ImportGraph.from_imports(
        owners={
            "App.Main": "app",
            "App.Util": "app",
            "Lib.A": "lib-a",
            "Lib.A.Internal": "lib-a",
            "Lib.B": "lib-b",
        },
        imports={
            "App.Main": ["App.Util", "Lib.A"],
            "App.Util": ["Lib.A.Internal"],
            "Lib.A": ["Lib.B"],
        },
    )


@pytest.fixture
def two_package_workspace(tmp_path):
    """Workspace with p1 (declares lib-a, uses lib-b) and p2."""
    return WorkspaceConfig(
        packages=(
            WorkspacePackage("p1", path="p1", dependencies=frozenset({"lib-a"})),
            WorkspacePackage("p2", path="p2", dependencies=frozenset({"lib-a"})),
        ),
        dependencies={
            "lib-a": ".pedant/p/lib-a-1.0.0",
            "lib-b": ".pedant/p/lib-b-2.0.0",
        },
        root=tmp_path,
    )


@pytest.fixture
def settings():
    return BuildSettings()
