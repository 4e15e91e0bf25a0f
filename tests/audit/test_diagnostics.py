"""Unit tests for audit/diagnostics.py."""

from pedant.audit.diagnostics import (
    fix_command,
    report_diagnostics,
    transitive_diagnostic,
    unused_diagnostic,
)
from pedant.models import DiagnosticKind, UsageReport


class TestUnusedDiagnostic:
    def test_clean_report_has_none(self):
        assert unused_diagnostic("app", UsageReport()) is None

    def test_lists_every_unused_dependency_sorted(self):
        report = UsageReport(unused=frozenset({"zeta", "alpha", "mid"}))
        diagnostic = unused_diagnostic("app", report)

        assert diagnostic.kind is DiagnosticKind.UNUSED
        assert diagnostic.package == "app"
        assert diagnostic.dependencies == ("alpha", "mid", "zeta")
        assert diagnostic.message.splitlines() == [
            "Sources for package 'app' declares unused dependencies - "
            "please remove them from the project config:",
            "  - alpha",
            "  - mid",
            "  - zeta",
        ]
        assert diagnostic.fix_command is None


class TestTransitiveDiagnostic:
    def test_message_and_fix_command(self):
        report = UsageReport(
            transitive={
                "lib-d": {"App.Main": frozenset({"Lib.D"})},
                "lib-c": {
                    "App.Util": frozenset({"Lib.C.Y", "Lib.C.X"}),
                    "App.Main": frozenset({"Lib.C"}),
                },
            }
        )
        diagnostic = transitive_diagnostic("app", report)

        assert diagnostic.kind is DiagnosticKind.TRANSITIVE
        assert diagnostic.dependencies == ("lib-c", "lib-d")
        assert diagnostic.fix_command == "spago install -p app lib-c lib-d"
        assert diagnostic.modules == {
            "lib-c": {"App.Main": ("Lib.C",), "App.Util": ("Lib.C.X", "Lib.C.Y")},
            "lib-d": {"App.Main": ("Lib.D",)},
        }
        assert diagnostic.message.splitlines() == [
            "Sources for package 'app' import the following transitive dependencies - "
            "please add them to the project dependencies, or remove the imports:",
            "  lib-c",
            "    from `App.Main`, which imports:",
            "      Lib.C",
            "    from `App.Util`, which imports:",
            "      Lib.C.X",
            "      Lib.C.Y",
            "  lib-d",
            "    from `App.Main`, which imports:",
            "      Lib.D",
            "Run the following command to install them all:",
            "  spago install -p app lib-c lib-d",
        ]

    def test_custom_install_command(self):
        report = UsageReport(transitive={"lib-c": {"App.Main": frozenset({"Lib.C"})}})
        diagnostic = transitive_diagnostic("app", report, install_command="pkg add")
        assert diagnostic.fix_command == "pkg add -p app lib-c"


class TestReportDiagnostics:
    def test_unused_precedes_transitive(self):
        report = UsageReport(
            unused=frozenset({"lib-b"}),
            transitive={"lib-c": {"App.Main": frozenset({"Lib.C"})}},
        )
        kinds = [d.kind for d in report_diagnostics("app", report)]
        assert kinds == [DiagnosticKind.UNUSED, DiagnosticKind.TRANSITIVE]

    def test_clean_report_is_empty(self):
        assert report_diagnostics("app", UsageReport()) == []

    def test_fix_command_sorts(self):
        assert fix_command("app", ("b", "a")) == "spago install -p app a b"

    def test_to_json(self):
        report = UsageReport(
            unused=frozenset({"lib-b"}),
            transitive={"lib-c": {"App.Main": frozenset({"Lib.C"})}},
        )
        unused, transitive = report_diagnostics("app", report)
        assert unused.to_json() == {
            "kind": "unused_dependency",
            "package": "app",
            "message": unused.message,
            "dependencies": ["lib-b"],
        }
        data = transitive.to_json()
        assert data["modules"] == {"lib-c": {"App.Main": ["Lib.C"]}}
        assert data["fix_command"] == "spago install -p app lib-c"
