"""Build exceptions: reserved flags, compiler failures, backend failures."""

from typing import List, Optional

from .base import PedantError


class BuildError(PedantError):
    """Base class for errors that end a build pipeline run."""

    pass


class FlagConflictError(BuildError):
    """Raised when caller-supplied compiler arguments use a reserved flag."""

    def __init__(self, flag: str, reason: str):
        super().__init__(
            f"Can't pass `{flag}` to the compiler: {reason}",
            details={"flag": flag},
        )
        self.flag = flag
        self.reason = reason


class CompileError(BuildError):
    """Raised when the compiler reports a failure."""

    def __init__(self, reason: str, exit_code: Optional[int] = None, args: Optional[List[str]] = None):
        details = {"reason": reason}
        if exit_code is not None:
            details["exit_code"] = str(exit_code)

        super().__init__("Failed to build", details=details)
        self.reason = reason
        self.exit_code = exit_code
        self.compiler_args = list(args or [])


class BackendError(BuildError):
    """Raised when the backend command cannot be spawned or exits non-zero."""

    def __init__(self, command: str, reason: str, exit_code: Optional[int] = None):
        details = {"command": command, "reason": reason}
        if exit_code is not None:
            details["exit_code"] = str(exit_code)

        super().__init__(f"Failed to build with backend {command}", details=details)
        self.command = command
        self.reason = reason
        self.exit_code = exit_code


class PipelineStateError(BuildError):
    """Raised when a finished pipeline is asked to run again."""

    def __init__(self, state: str):
        super().__init__(
            "Build pipeline has already finished and cannot be reused",
            details={"state": state},
        )
        self.state = state
