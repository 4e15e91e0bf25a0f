"""Declared-versus-used dependency analysis over an import graph.

A package *uses* another package when one of its own modules directly imports
a module owned by that package. Only one hop is considered: what a module's
imports import in turn is the business of their own package, which is exactly
what the compiler requires a declared dependency for.

From that used set:
    unused      = declared - used
    transitive  = used - declared - {self}, attributed to the local module and
                  the imported modules that caused it
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from ..logging_config import get_logger
from ..models import (
    ImportGraph,
    ModuleName,
    PackageName,
    UsageReport,
    normalize_package_name,
)

logger = get_logger(__name__)


class DependencyGraphAnalyzer:
    """Computes a UsageReport for one package. Stateless; safe to share."""

    def analyze(
        self,
        graph: ImportGraph,
        self_package: PackageName,
        declared: Iterable[PackageName],
    ) -> UsageReport:
        self_package = normalize_package_name(self_package)
        declared_set = frozenset(normalize_package_name(d) for d in declared)

        local_modules = graph.modules_of(self_package)

        # package -> local module -> imported modules of that package
        usage: dict[PackageName, dict[ModuleName, set[ModuleName]]] = defaultdict(
            lambda: defaultdict(set)
        )
        for edge in graph.edges:
            if edge.source not in local_modules:
                continue
            owner = graph.owner_of(edge.target)
            if owner is None or owner == self_package:
                continue
            usage[owner][edge.source].add(edge.target)

        used = frozenset(usage)
        unused = declared_set - used
        undeclared = used - declared_set - {self_package}

        transitive = {
            pkg: {module: frozenset(targets) for module, targets in usage[pkg].items()}
            for pkg in sorted(undeclared)
        }

        logger.debug(
            "Package %s: %d local modules, %d used packages, %d unused, %d undeclared",
            self_package,
            len(local_modules),
            len(used),
            len(unused),
            len(undeclared),
        )
        return UsageReport(unused=unused, transitive=transitive)


def analyze_usage(
    graph: ImportGraph, self_package: PackageName, declared: Iterable[PackageName]
) -> UsageReport:
    """Convenience wrapper around DependencyGraphAnalyzer().analyze."""
    return DependencyGraphAnalyzer().analyze(graph, self_package, declared)
