"""Run the dependency audit over one or all workspace packages.

Each package is audited against a graph of its own sources plus every
dependency source. A graph that cannot be obtained only skips that package;
findings are collected for every package before anything is reported.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from ..exceptions import GraphDecodeError, UnknownPackageError
from ..graph.analyzer import DependencyGraphAnalyzer
from ..logging_config import get_logger
from ..models import (
    AllPackages,
    AuditScope,
    Diagnostic,
    GlobPattern,
    ImportGraph,
    PackageName,
    SinglePackage,
    WorkspacePackage,
)
from .diagnostics import DEFAULT_INSTALL_COMMAND, report_diagnostics

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuditContext:
    """What the audit needs from the rest of the system, and nothing else.

    Attributes:
        packages: Workspace packages in configuration order
        declared_of: Declared dependencies of a workspace package
        graph_source: Import graph for a set of source globs
        globs_for: Source globs to graph when auditing a package
        install_command: Prefix of the suggested remediation command
    """

    packages: Sequence[WorkspacePackage]
    declared_of: Callable[[PackageName], frozenset]
    graph_source: Callable[[frozenset], ImportGraph]
    globs_for: Callable[[WorkspacePackage], frozenset]
    install_command: str = DEFAULT_INSTALL_COMMAND


class AuditRunner:
    """Drives DependencyGraphAnalyzer once per package in scope."""

    def __init__(
        self,
        context: AuditContext,
        analyzer: Optional[DependencyGraphAnalyzer] = None,
        max_workers: int = 1,
    ):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.context = context
        self.analyzer = analyzer or DependencyGraphAnalyzer()
        self.max_workers = max_workers

    def run(self, scope: AuditScope) -> list[Diagnostic]:
        packages = self._packages_in(scope)
        logger.info("Looking for unused and undeclared transitive dependencies...")

        if self.max_workers == 1 or len(packages) < 2:
            per_package = [self.audit_package(p) for p in packages]
        else:
            # Collected by index, not completion order
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                per_package = list(executor.map(self.audit_package, packages))

        diagnostics = [d for found in per_package for d in found]
        if not diagnostics:
            logger.info("No problems found in dependency usage")
        return diagnostics

    def audit_package(self, package: WorkspacePackage) -> list[Diagnostic]:
        globs: frozenset[GlobPattern] = self.context.globs_for(package)
        try:
            graph = self.context.graph_source(globs)
        except GraphDecodeError as e:
            logger.warning(
                "Could not decode the import graph for package %s, skipping its audit: %s",
                package.name,
                e.reason,
            )
            return []

        declared = self.context.declared_of(package.name)
        report = self.analyzer.analyze(graph, package.name, declared)
        return report_diagnostics(package.name, report, self.context.install_command)

    def _packages_in(self, scope: AuditScope) -> list[WorkspacePackage]:
        if isinstance(scope, AllPackages):
            return list(self.context.packages)
        if isinstance(scope, SinglePackage):
            for package in self.context.packages:
                if package.name == scope.name:
                    return [package]
            raise UnknownPackageError(scope.name, [p.name for p in self.context.packages])
        raise TypeError(f"Unsupported audit scope: {scope!r}")


def run_audit(
    scope: AuditScope,
    context: AuditContext,
    max_workers: int = 1,
) -> list[Diagnostic]:
    """Audit `scope` and return every Diagnostic found, in package order."""
    return AuditRunner(context, max_workers=max_workers).run(scope)
