"""Exception hierarchy for pedant."""

from .base import PedantError
from .build import (
    BackendError,
    BuildError,
    CompileError,
    FlagConflictError,
    PipelineStateError,
)
from .config import (
    ConfigurationError,
    InvalidConfigError,
    UnknownPackageError,
)
from .graph import GraphDecodeError

__all__ = [
    "PedantError",
    "BuildError",
    "FlagConflictError",
    "CompileError",
    "BackendError",
    "PipelineStateError",
    "ConfigurationError",
    "InvalidConfigError",
    "UnknownPackageError",
    "GraphDecodeError",
]
