"""Unit tests for graph/decoder.py."""

import json

import pytest

from pedant.exceptions import GraphDecodeError
from pedant.graph.decoder import PackageOwnership, build_import_graph, decode_import_graph
from pedant.models import ImportEdge


@pytest.fixture
def ownership():
    return PackageOwnership(
        {
            "app/src": "app",
            ".pedant/p/lib-a-1.0.0/src": "lib-a",
            ".pedant/p/lib-a-1.0.0/src/Vendored": "vendored",
        }
    )


class TestPackageOwnership:
    def test_file_under_root(self, ownership):
        assert ownership.owner_of_path("app/src/App/Main.purs") == "app"

    def test_leading_dot_slash(self, ownership):
        assert ownership.owner_of_path("./app/src/App/Main.purs") == "app"

    def test_windows_separators(self, ownership):
        assert ownership.owner_of_path("app\\src\\App\\Main.purs") == "app"

    def test_longest_root_wins(self, ownership):
        path = ".pedant/p/lib-a-1.0.0/src/Vendored/Thing.purs"
        assert ownership.owner_of_path(path) == "vendored"

    def test_sibling_prefix_is_not_a_parent(self, ownership):
        assert ownership.owner_of_path("app/srcgen/Main.purs") is None

    def test_unowned_path(self, ownership):
        assert ownership.owner_of_path(".pedant/BuildInfo.purs") is None


class TestDecodeImportGraph:
    def test_decodes_modules_and_edges(self, ownership):
        raw = json.dumps(
            {
                "App.Main": {"path": "app/src/App/Main.purs", "depends": ["Lib.A"]},
                "Lib.A": {"path": ".pedant/p/lib-a-1.0.0/src/Lib/A.purs", "depends": []},
            }
        )
        graph = decode_import_graph(raw, ownership)
        assert graph.owner_of("App.Main") == "app"
        assert graph.owner_of("Lib.A") == "lib-a"
        assert graph.edges == {ImportEdge("App.Main", "Lib.A")}

    def test_unowned_modules_and_their_edges_are_dropped(self, ownership):
        data = {
            "App.Main": {
                "path": "app/src/App/Main.purs",
                "depends": ["Pedant.Generated.BuildInfo", "Prim"],
            },
            "Pedant.Generated.BuildInfo": {"path": ".pedant/BuildInfo.purs", "depends": []},
        }
        graph = build_import_graph(data, ownership)
        assert set(graph.owners) == {"App.Main"}
        assert graph.edges == frozenset()

    def test_missing_depends_defaults_to_empty(self, ownership):
        graph = build_import_graph({"App.Main": {"path": "app/src/App/Main.purs"}}, ownership)
        assert graph.imports_of("App.Main") == frozenset()

    def test_invalid_json(self, ownership):
        with pytest.raises(GraphDecodeError, match="invalid JSON"):
            decode_import_graph("{not json", ownership)

    def test_top_level_must_be_object(self, ownership):
        with pytest.raises(GraphDecodeError):
            decode_import_graph("[]", ownership)

    def test_module_without_path(self, ownership):
        with pytest.raises(GraphDecodeError, match="path"):
            build_import_graph({"App.Main": {"depends": []}}, ownership)

    def test_depends_must_be_strings(self, ownership):
        data = {"App.Main": {"path": "app/src/App/Main.purs", "depends": [1, 2]}}
        with pytest.raises(GraphDecodeError, match="depends"):
            build_import_graph(data, ownership)
