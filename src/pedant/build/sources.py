"""Source glob selection for builds and audits."""

from __future__ import annotations

from typing import Optional

from ..config import WorkspaceConfig
from ..logging_config import get_logger
from ..models import (
    BUILD_INFO_PATH,
    GlobPattern,
    PackageName,
    WorkspacePackage,
    dependency_source_glob,
    dependency_source_root,
    normalize_package_name,
)
from ..graph.decoder import PackageOwnership

logger = get_logger(__name__)


def dependency_globs(workspace: WorkspaceConfig) -> frozenset[GlobPattern]:
    """Globs of every external dependency's sources."""
    return frozenset(dependency_source_glob(d) for d in workspace.dependencies.values())


def select_build_globs(
    workspace: WorkspaceConfig,
    selected: Optional[PackageName] = None,
    deps_only: bool = False,
) -> frozenset[GlobPattern]:
    """Globs compiled by a build.

    With a selected package: that package (unless deps_only) plus every other
    workspace package and external dependency it may import. Without one:
    every workspace package, whether or not deps_only is set.
    """
    globs = set(dependency_globs(workspace))
    globs.add(BUILD_INFO_PATH)

    if selected is None:
        if deps_only:
            # Workspace sources stay in when no package is selected. Known to
            # differ from what --deps-only promises; kept until the flag's
            # intended behavior is settled.
            logger.debug("--deps-only without a selected package still builds workspace sources")
        globs.update(p.source_glob for p in workspace.packages)
        return frozenset(globs)

    package = workspace.get_package(selected)
    for other in workspace.packages:
        if other.name != package.name:
            globs.add(other.source_glob)
    if not deps_only:
        globs.add(package.source_glob)
    return frozenset(globs)


def audit_globs(workspace: WorkspaceConfig, package: WorkspacePackage) -> frozenset[GlobPattern]:
    """Globs graphed when auditing `package`: its own sources plus all dependency sources."""
    globs = set(dependency_globs(workspace))
    globs.update(p.source_glob for p in workspace.packages)
    globs.add(package.source_glob)
    globs.add(BUILD_INFO_PATH)
    return frozenset(globs)


def package_ownership(workspace: WorkspaceConfig) -> PackageOwnership:
    """Module roots of every workspace package and external dependency."""
    pairs: list[tuple[str, PackageName]] = [
        (dependency_source_root(directory), normalize_package_name(name))
        for name, directory in workspace.dependencies.items()
    ]
    pairs.extend((p.source_root, p.name) for p in workspace.packages)
    return PackageOwnership.from_pairs(pairs)
