"""Tests for the `pedant build` command."""

import importlib

import pytest
from typer.testing import CliRunner

from pedant import __version__
from pedant.cli import app
from pedant.models import ImportGraph

build_cli = importlib.import_module("pedant.cli.build")

WORKSPACE_TOML = """
[[workspace.packages]]
name = "app"
path = "app"
dependencies = ["lib-a", "lib-b"]

[dependencies]
lib-a = ".pedant/p/lib-a"
lib-b = ".pedant/p/lib-b"
lib-c = ".pedant/p/lib-c"
"""

GRAPH = ImportGraph.from_imports(
    owners={"App.Main": "app", "Lib.A": "lib-a", "Lib.B": "lib-b", "Lib.C": "lib-c"},
    imports={"App.Main": ["Lib.A", "Lib.C"]},
)

runner = CliRunner()


@pytest.fixture
def project(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    root = tmp_path / "project"
    root.mkdir()
    (root / "pedant.toml").write_text(WORKSPACE_TOML)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("PEDANT_PEDANTIC_PACKAGES", raising=False)
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def collaborators(monkeypatch, make_compiler, make_backend):
    compiler = make_compiler(default_graph=GRAPH)
    backend = make_backend()
    monkeypatch.setattr(build_cli, "PursCompiler", lambda ownership, command, cwd: compiler)
    monkeypatch.setattr(build_cli, "SubprocessBackend", lambda cwd: backend)
    return compiler, backend


class TestBuildCommand:
    def test_plain_build_succeeds(self, project, collaborators):
        compiler, _ = collaborators
        result = runner.invoke(app, ["build", "--quiet"])

        assert result.exit_code == 0
        assert len(compiler.calls) == 1
        assert compiler.graph_calls == []
        assert (project / ".pedant" / "BuildInfo.purs").exists()

    def test_pedantic_packages_reports_violations(self, project, collaborators):
        result = runner.invoke(app, ["build", "--quiet", "--pedantic-packages"])

        assert result.exit_code == 1
        assert "declares unused dependencies" in result.output
        assert "  - lib-b" in result.output
        assert "spago install -p app lib-c" in result.output

    def test_json_errors(self, project, collaborators):
        result = runner.invoke(app, ["build", "--quiet", "--pedantic-packages", "--json-errors"])

        assert result.exit_code == 1
        assert '"unused_dependency"' in result.output
        assert '"transitive_dependency"' in result.output

    def test_reserved_flag_fails_build(self, project, collaborators):
        compiler, _ = collaborators
        result = runner.invoke(app, ["build", "--quiet", "--purs-args=--output=dist"])

        assert result.exit_code == 1
        assert compiler.calls == []

    def test_unknown_package(self, project, collaborators):
        result = runner.invoke(app, ["build", "--quiet", "-p", "ghost"])

        assert result.exit_code == 1
        assert "ghost" in result.output

    def test_clean_audit(self, project, collaborators, monkeypatch):
        clean = ImportGraph.from_imports(
            owners={"App.Main": "app", "Lib.A": "lib-a", "Lib.B": "lib-b"},
            imports={"App.Main": ["Lib.A", "Lib.B"]},
        )
        compiler, _ = collaborators
        compiler.default_graph = clean
        result = runner.invoke(app, ["build", "--quiet", "--pedantic-packages"])

        assert result.exit_code == 0
        assert "look right" in result.output


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
