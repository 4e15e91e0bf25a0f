"""Data models shared by the build pipeline and the dependency audit.

Levels:
  Graph: ImportEdge, ImportGraph (module ownership + direct imports)
  Audit: UsageReport (per package), Diagnostic (per violation)
  Build: BackendSpec, AuditScope, WorkspacePackage
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Union

PackageName = str
ModuleName = str
GlobPattern = str

# Every compiled or graphed source set includes this generated module.
BUILD_INFO_PATH = ".pedant/BuildInfo.purs"
BUILD_INFO_MODULE = "Pedant.Generated.BuildInfo"


def normalize_package_name(name: str) -> PackageName:
    """Canonical form used for every package-name comparison."""
    return name.strip().lower()


# ── Graph ──────────────────────────────────────────────────────────


@dataclass(frozen=True, order=True)
class ImportEdge:
    """`source` directly imports `target`."""

    source: ModuleName
    target: ModuleName


@dataclass(frozen=True)
class ImportGraph:
    """Snapshot of module ownership and direct import edges.

    Built once per audit request and never mutated. Every edge endpoint must
    have an owner.
    """

    owners: Mapping[ModuleName, PackageName]
    edges: frozenset[ImportEdge] = frozenset()

    def __post_init__(self) -> None:
        owners = {module: normalize_package_name(pkg) for module, pkg in self.owners.items()}
        object.__setattr__(self, "owners", MappingProxyType(owners))
        object.__setattr__(self, "edges", frozenset(self.edges))

        for edge in self.edges:
            for module in (edge.source, edge.target):
                if module not in owners:
                    raise ValueError(f"Import edge {edge.source} -> {edge.target} references unowned module {module}")

    @classmethod
    def from_imports(
        cls,
        owners: Mapping[ModuleName, PackageName],
        imports: Mapping[ModuleName, Iterable[ModuleName]],
    ) -> ImportGraph:
        """Build a graph from an adjacency mapping (module -> imported modules)."""
        edges = frozenset(
            ImportEdge(source, target) for source, targets in imports.items() for target in targets
        )
        return cls(owners=owners, edges=edges)

    def owner_of(self, module: ModuleName) -> Optional[PackageName]:
        return self.owners.get(module)

    def modules_of(self, package: PackageName) -> frozenset[ModuleName]:
        package = normalize_package_name(package)
        return frozenset(m for m, owner in self.owners.items() if owner == package)

    def imports_of(self, module: ModuleName) -> frozenset[ModuleName]:
        return frozenset(e.target for e in self.edges if e.source == module)

    @property
    def packages(self) -> frozenset[PackageName]:
        return frozenset(self.owners.values())


# ── Audit ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class UsageReport:
    """Outcome of auditing one package.

    transitive maps an undeclared package to {local module: imported modules}.
    """

    unused: frozenset[PackageName] = frozenset()
    transitive: dict[PackageName, dict[ModuleName, frozenset[ModuleName]]] = field(
        default_factory=dict
    )

    @property
    def is_clean(self) -> bool:
        return not self.unused and not self.transitive


class DiagnosticKind(str, Enum):
    UNUSED = "unused_dependency"
    TRANSITIVE = "transitive_dependency"


@dataclass(frozen=True)
class Diagnostic:
    """One audit violation for one package, ready for display.

    Attributes:
        kind: Which rule was violated
        package: The audited workspace package
        message: Human-readable multi-line description
        dependencies: Offending package names, sorted
        modules: TRANSITIVE only - {package: {local module: imported modules}}
        fix_command: TRANSITIVE only - command that adds the missing dependencies
    """

    kind: DiagnosticKind
    package: PackageName
    message: str
    dependencies: tuple[PackageName, ...] = ()
    modules: dict[PackageName, dict[ModuleName, tuple[ModuleName, ...]]] = field(
        default_factory=dict
    )
    fix_command: Optional[str] = None

    def to_json(self) -> dict[str, Any]:
        """Machine-readable form for --json-errors."""
        data: dict[str, Any] = {
            "kind": self.kind.value,
            "package": self.package,
            "message": self.message,
            "dependencies": list(self.dependencies),
        }
        if self.kind is DiagnosticKind.TRANSITIVE:
            data["modules"] = {
                pkg: {mod: list(targets) for mod, targets in by_module.items()}
                for pkg, by_module in self.modules.items()
            }
            data["fix_command"] = self.fix_command
        return data


@dataclass(frozen=True)
class SinglePackage:
    name: PackageName

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", normalize_package_name(self.name))


@dataclass(frozen=True)
class AllPackages:
    pass


AuditScope = Union[SinglePackage, AllPackages]


# ── Build ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class NoBackend:
    pass


@dataclass(frozen=True)
class Backend:
    """External code generator fed with the compiler's corefn output."""

    command: str
    args: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.command.strip():
            raise ValueError("backend command must not be empty")
        object.__setattr__(self, "args", tuple(self.args))


BackendSpec = Union[NoBackend, Backend]


@dataclass(frozen=True)
class WorkspacePackage:
    """A locally developed package: sources live under `<path>/src`."""

    name: PackageName
    path: str = "."
    dependencies: frozenset[PackageName] = frozenset()
    pedantic_packages: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", normalize_package_name(self.name))
        object.__setattr__(
            self,
            "dependencies",
            frozenset(normalize_package_name(d) for d in self.dependencies),
        )

    @property
    def source_root(self) -> str:
        return _join(self.path, "src")

    @property
    def source_glob(self) -> GlobPattern:
        return _join(self.source_root, "**/*.purs")


def dependency_source_root(directory: str) -> str:
    """Module root of an unpacked external dependency."""
    return _join(directory, "src")


def dependency_source_glob(directory: str) -> GlobPattern:
    return _join(dependency_source_root(directory), "**/*.purs")


def _join(base: str, tail: str) -> str:
    base = base.replace("\\", "/").rstrip("/")
    if base in ("", "."):
        return tail
    return f"{base}/{tail}"
