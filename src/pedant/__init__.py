"""
pedant - workspace build orchestration with a dependency usage audit.

Compiles a workspace through an external compiler (and optional backend), then
checks every audited package's declared dependencies against what its modules
actually import: unused declarations and undeclared (transitive) imports are
reported together, with the command that would fix them.
"""

__version__ = "0.3.0"

from .graph import DependencyGraphAnalyzer, analyze_usage  # noqa: E402
from .models import (  # noqa: E402
    AllPackages,
    Diagnostic,
    ImportEdge,
    ImportGraph,
    SinglePackage,
    UsageReport,
)

__all__ = [
    "DependencyGraphAnalyzer",
    "analyze_usage",
    "AllPackages",
    "SinglePackage",
    "Diagnostic",
    "ImportEdge",
    "ImportGraph",
    "UsageReport",
]
