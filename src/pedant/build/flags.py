"""Reserved compiler flags.

The output directory belongs to pedant's configuration and the codegen target
is implied by whether a backend is configured, so neither may be passed
through by the caller.
"""

from __future__ import annotations

from typing import Sequence

from ..exceptions import FlagConflictError
from ..models import Backend, BackendSpec, NoBackend

OUTPUT_FLAGS = ("--output", "-o")
CODEGEN_FLAGS = ("--codegen", "-g")

INTERMEDIATE_CODEGEN = "corefn"


def _matches(arg: str, flags: Sequence[str]) -> bool:
    return any(arg == flag or arg.startswith(f"{flag}=") for flag in flags)


def validate_compiler_args(args: Sequence[str], backend: BackendSpec = NoBackend()) -> None:
    """Raise FlagConflictError on the first reserved flag in `args`."""
    for arg in args:
        if _matches(arg, OUTPUT_FLAGS):
            raise FlagConflictError(
                arg,
                "the output path is set by the `output` setting in the build configuration",
            )
        if isinstance(backend, Backend) and _matches(arg, CODEGEN_FLAGS):
            raise FlagConflictError(
                arg,
                f"the codegen target is implied by the configured backend `{backend.command}`",
            )


def output_args(output: str | None) -> list[str]:
    if output is None:
        return []
    return ["--output", output]


def intermediate_args() -> list[str]:
    return ["--codegen", INTERMEDIATE_CODEGEN]
