"""One `pedant build`: compile, then audit dependency usage if enabled."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Optional

from ..audit.runner import AuditContext, AuditRunner
from ..compiler import BackendRunner, Compiler
from ..config import BuildSettings, WorkspaceConfig
from ..exceptions import FlagConflictError
from ..logging_config import get_logger
from ..models import (
    AllPackages,
    AuditScope,
    Diagnostic,
    GlobPattern,
    PackageName,
    SinglePackage,
    WorkspacePackage,
    normalize_package_name,
)
from .build_info import write_build_info
from .flags import validate_compiler_args
from .pipeline import BuildPipeline, BuildRequest, BuildResult
from .sources import audit_globs, select_build_globs

logger = get_logger(__name__)


@dataclass(frozen=True)
class BuildReport:
    result: BuildResult
    diagnostics: list[Diagnostic] = field(default_factory=list)
    audited: tuple[PackageName, ...] = ()

    @property
    def ok(self) -> bool:
        return self.result.succeeded and not self.diagnostics


def audit_plan(
    workspace: WorkspaceConfig,
    settings: BuildSettings,
    selected: Optional[PackageName] = None,
) -> tuple[Optional[AuditScope], list[WorkspacePackage]]:
    """Decide what to audit. Returns (None, []) when the audit is off."""
    candidates = workspace.pedantic_packages(settings.pedantic_packages)

    if selected is not None:
        package = workspace.get_package(selected)
        if package not in candidates:
            return None, []
        return SinglePackage(package.name), [package]

    if not candidates:
        return None, []
    return AllPackages(), candidates


def run_build(
    workspace: WorkspaceConfig,
    settings: BuildSettings,
    compiler: Compiler,
    backend_runner: BackendRunner,
    selected: Optional[PackageName] = None,
    deps_only: bool = False,
    write_info: bool = True,
) -> BuildReport:
    """Build the workspace; audit only after a successful build."""
    if selected is not None:
        selected = normalize_package_name(selected)
        workspace.get_package(selected)

    if write_info and _flags_accepted(settings):
        write_build_info(workspace.root, workspace.package_names)

    request = BuildRequest(
        source_globs=select_build_globs(workspace, selected, deps_only),
        compiler_args=settings.compiler_args,
        output=settings.output,
        backend=settings.backend,
    )
    result = BuildPipeline(compiler, backend_runner).run(request)
    if not result.succeeded:
        return BuildReport(result=result)

    scope, packages = audit_plan(workspace, settings, selected)
    if scope is None:
        return BuildReport(result=result)

    context = AuditContext(
        packages=packages,
        declared_of=workspace.get_declared_dependencies,
        graph_source=partial(_graph, compiler, settings.compiler_args),
        globs_for=partial(audit_globs, workspace),
        install_command=settings.install_command,
    )
    diagnostics = AuditRunner(context, max_workers=settings.jobs).run(scope)
    return BuildReport(
        result=result,
        diagnostics=diagnostics,
        audited=tuple(p.name for p in packages),
    )


def _graph(compiler: Compiler, compiler_args: tuple[str, ...], globs: frozenset[GlobPattern]):
    return compiler.graph(globs, list(compiler_args))


def _flags_accepted(settings: BuildSettings) -> bool:
    # The pipeline reports the conflict; nothing is written for a rejected run
    try:
        validate_compiler_args(settings.compiler_args, settings.backend)
    except FlagConflictError:
        return False
    return True
