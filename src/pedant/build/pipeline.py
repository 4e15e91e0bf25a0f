"""Build pipeline state machine.

    IDLE -> VALIDATING_FLAGS -> COMPILING -> SUCCEEDED
                                   |
                                   +-> COMPILING_INTERMEDIATE -> INVOKING_BACKEND -> SUCCEEDED
    (any step) -> FAILED

The backend branch is taken only when a Backend is configured. A pipeline
runs once; its terminal state is final.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..compiler import BackendRunner, Compiler
from ..exceptions import BuildError, PipelineStateError
from ..logging_config import get_logger
from ..models import Backend, BackendSpec, GlobPattern, NoBackend
from .flags import intermediate_args, output_args, validate_compiler_args


class PipelineState(str, Enum):
    IDLE = "idle"
    VALIDATING_FLAGS = "validating_flags"
    COMPILING = "compiling"
    COMPILING_INTERMEDIATE = "compiling_intermediate"
    INVOKING_BACKEND = "invoking_backend"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineState.SUCCEEDED, PipelineState.FAILED)


@dataclass(frozen=True)
class BuildRequest:
    """Everything one pipeline run compiles.

    Attributes:
        source_globs: Workspace, dependency and build-info sources
        compiler_args: Caller-supplied compiler arguments, passed through
        output: Output directory from configuration (None = compiler default)
        backend: Optional backend for the corefn output
    """

    source_globs: frozenset[GlobPattern]
    compiler_args: tuple[str, ...] = ()
    output: Optional[str] = None
    backend: BackendSpec = field(default_factory=NoBackend)

    def __post_init__(self) -> None:
        object.__setattr__(self, "source_globs", frozenset(self.source_globs))
        object.__setattr__(self, "compiler_args", tuple(self.compiler_args))


@dataclass(frozen=True)
class BuildResult:
    state: PipelineState
    error: Optional[BuildError] = None

    @property
    def succeeded(self) -> bool:
        return self.state is PipelineState.SUCCEEDED


class BuildPipeline:
    """Runs flag validation, compilation and the optional backend once."""

    def __init__(
        self,
        compiler: Compiler,
        backend_runner: BackendRunner,
        logger: Optional[logging.Logger] = None,
    ):
        self.compiler = compiler
        self.backend_runner = backend_runner
        self.logger = logger or get_logger(__name__)
        self.state = PipelineState.IDLE
        self.history: list[PipelineState] = [PipelineState.IDLE]
        self.result: Optional[BuildResult] = None

    def run(self, request: BuildRequest) -> BuildResult:
        if self.state is not PipelineState.IDLE:
            raise PipelineStateError(self.state.value)

        try:
            self._transition(PipelineState.VALIDATING_FLAGS)
            validate_compiler_args(request.compiler_args, request.backend)

            out_args = output_args(request.output)
            globs = request.source_globs

            self._transition(PipelineState.COMPILING)
            self.logger.info("Building...")
            self.compiler.compile(globs, [*request.compiler_args, *out_args])

            if isinstance(request.backend, Backend):
                self._run_backend(request, request.backend, out_args)
        except BuildError as e:
            self.logger.error("%s", e)
            return self._finish(PipelineState.FAILED, e)

        self.logger.info("Build succeeded.")
        return self._finish(PipelineState.SUCCEEDED)

    def _run_backend(self, request: BuildRequest, backend: Backend, out_args: list[str]) -> None:
        self._transition(PipelineState.COMPILING_INTERMEDIATE)
        self.logger.info("Compiling corefn for backend %s...", backend.command)
        self.compiler.compile(
            request.source_globs,
            [*request.compiler_args, *intermediate_args(), *out_args],
        )

        self._transition(PipelineState.INVOKING_BACKEND)
        self.logger.info("Building with backend %s...", backend.command)
        self.backend_runner.exec(backend.command, [*backend.args, *out_args])

    def _transition(self, state: PipelineState) -> None:
        self.logger.debug("Pipeline %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _finish(self, state: PipelineState, error: Optional[BuildError] = None) -> BuildResult:
        self._transition(state)
        self.result = BuildResult(state=state, error=error)
        return self.result
