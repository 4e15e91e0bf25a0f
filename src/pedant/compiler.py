"""Compiler and backend collaborators.

The build pipeline and the audit only see the `Compiler` and `BackendRunner`
protocols. `PursCompiler` and `SubprocessBackend` implement them by running
the external tools through subprocess and blocking until they exit.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Iterable, Optional, Protocol, Sequence

from .exceptions import BackendError, CompileError, GraphDecodeError
from .graph.decoder import PackageOwnership, decode_import_graph
from .logging_config import get_logger
from .models import GlobPattern, ImportGraph

logger = get_logger(__name__)


class Compiler(Protocol):
    def compile(self, source_globs: Iterable[GlobPattern], extra_args: Sequence[str]) -> None:
        """Compile the sources. Raises CompileError on failure."""
        ...

    def graph(self, source_globs: Iterable[GlobPattern], extra_args: Sequence[str]) -> ImportGraph:
        """Return the direct import graph. Raises GraphDecodeError on failure."""
        ...


class BackendRunner(Protocol):
    def exec(self, command: str, args: Sequence[str]) -> None:
        """Run the backend. Raises BackendError on spawn failure or non-zero exit."""
        ...


class PursCompiler:
    """Runs `<command> compile` and `<command> graph`."""

    def __init__(
        self,
        ownership: PackageOwnership,
        command: str = "purs",
        timeout: Optional[float] = None,
        cwd: Optional[Path] = None,
    ):
        self.ownership = ownership
        self.command = command
        self.timeout = timeout
        self.cwd = cwd

    def compile(self, source_globs: Iterable[GlobPattern], extra_args: Sequence[str]) -> None:
        cmd = [self.command, "compile", *sorted(source_globs), *extra_args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            # Compiler errors stream straight to the user's terminal
            result = subprocess.run(cmd, cwd=self.cwd, timeout=self.timeout)
        except (FileNotFoundError, PermissionError) as e:
            raise CompileError(
                f"could not run compiler '{self.command}': {e}", args=list(extra_args)
            )
        except subprocess.TimeoutExpired:
            raise CompileError(f"compiler timed out after {self.timeout}s", args=list(extra_args))

        if result.returncode != 0:
            raise CompileError(
                "compiler reported errors", exit_code=result.returncode, args=list(extra_args)
            )

    def graph(self, source_globs: Iterable[GlobPattern], extra_args: Sequence[str]) -> ImportGraph:
        cmd = [self.command, "graph", *sorted(source_globs), *extra_args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, cwd=self.cwd, capture_output=True, timeout=self.timeout)
        except (FileNotFoundError, PermissionError) as e:
            raise GraphDecodeError(f"could not run compiler '{self.command}': {e}")
        except subprocess.TimeoutExpired:
            raise GraphDecodeError(f"`{self.command} graph` timed out after {self.timeout}s")

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise GraphDecodeError(
                f"`{self.command} graph` exited with code {result.returncode}: {stderr}"
            )
        try:
            stdout = result.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise GraphDecodeError(f"output is not valid UTF-8: {e}")
        return decode_import_graph(stdout, self.ownership)


class SubprocessBackend:
    """Spawns the configured backend command."""

    def __init__(self, timeout: Optional[float] = None, cwd: Optional[Path] = None):
        self.timeout = timeout
        self.cwd = cwd

    def exec(self, command: str, args: Sequence[str]) -> None:
        cmd = [command, *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, cwd=self.cwd, timeout=self.timeout)
        except (FileNotFoundError, PermissionError) as e:
            raise BackendError(command, f"could not spawn: {e}")
        except subprocess.TimeoutExpired:
            raise BackendError(command, f"timed out after {self.timeout}s")

        if result.returncode != 0:
            raise BackendError(command, "exited with a failure", exit_code=result.returncode)
