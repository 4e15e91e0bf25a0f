"""Module import graphs: decoding compiler output and auditing package usage."""

from .analyzer import DependencyGraphAnalyzer, analyze_usage
from .decoder import PackageOwnership, build_import_graph, decode_import_graph

__all__ = [
    "DependencyGraphAnalyzer",
    "analyze_usage",
    "PackageOwnership",
    "build_import_graph",
    "decode_import_graph",
]
