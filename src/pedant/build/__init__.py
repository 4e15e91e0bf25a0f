"""Build orchestration: flag validation, compilation, backend, then audit."""

from .orchestrator import BuildReport, audit_plan, run_build
from .pipeline import BuildPipeline, BuildRequest, BuildResult, PipelineState

__all__ = [
    "BuildPipeline",
    "BuildRequest",
    "BuildResult",
    "PipelineState",
    "BuildReport",
    "audit_plan",
    "run_build",
]
