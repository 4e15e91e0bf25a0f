"""Turn UsageReports into Diagnostics with stable, sorted wording."""

from __future__ import annotations

from typing import Optional

from ..models import (
    Diagnostic,
    DiagnosticKind,
    ModuleName,
    PackageName,
    UsageReport,
)

DEFAULT_INSTALL_COMMAND = "spago install"


def report_diagnostics(
    package: PackageName,
    report: UsageReport,
    install_command: str = DEFAULT_INSTALL_COMMAND,
) -> list[Diagnostic]:
    """Unused first, then transitive. Empty for a clean report."""
    diagnostics = []
    unused = unused_diagnostic(package, report)
    if unused is not None:
        diagnostics.append(unused)
    transitive = transitive_diagnostic(package, report, install_command)
    if transitive is not None:
        diagnostics.append(transitive)
    return diagnostics


def unused_diagnostic(package: PackageName, report: UsageReport) -> Optional[Diagnostic]:
    if not report.unused:
        return None

    dependencies = tuple(sorted(report.unused))
    lines = [
        f"Sources for package '{package}' declares unused dependencies - "
        "please remove them from the project config:"
    ]
    lines.extend(f"  - {dep}" for dep in dependencies)

    return Diagnostic(
        kind=DiagnosticKind.UNUSED,
        package=package,
        message="\n".join(lines),
        dependencies=dependencies,
    )


def transitive_diagnostic(
    package: PackageName,
    report: UsageReport,
    install_command: str = DEFAULT_INSTALL_COMMAND,
) -> Optional[Diagnostic]:
    if not report.transitive:
        return None

    dependencies = tuple(sorted(report.transitive))
    modules: dict[PackageName, dict[ModuleName, tuple[ModuleName, ...]]] = {
        dep: {
            local: tuple(sorted(imported))
            for local, imported in sorted(report.transitive[dep].items())
        }
        for dep in dependencies
    }
    command = fix_command(package, dependencies, install_command)

    lines = [
        f"Sources for package '{package}' import the following transitive dependencies - "
        "please add them to the project dependencies, or remove the imports:"
    ]
    for dep in dependencies:
        lines.append(f"  {dep}")
        for local, imported in modules[dep].items():
            lines.append(f"    from `{local}`, which imports:")
            lines.extend(f"      {target}" for target in imported)
    lines.append("Run the following command to install them all:")
    lines.append(f"  {command}")

    return Diagnostic(
        kind=DiagnosticKind.TRANSITIVE,
        package=package,
        message="\n".join(lines),
        dependencies=dependencies,
        modules=modules,
        fix_command=command,
    )


def fix_command(
    package: PackageName,
    dependencies: tuple[PackageName, ...],
    install_command: str = DEFAULT_INSTALL_COMMAND,
) -> str:
    return f"{install_command} -p {package} {' '.join(sorted(dependencies))}"
