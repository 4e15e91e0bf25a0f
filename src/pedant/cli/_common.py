"""Shared CLI helpers."""

import json
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from ..config import BuildSettings, load_settings
from ..models import Backend, Diagnostic, DiagnosticKind

console = Console()
err_console = Console(stderr=True)


def resolve_settings(
    config: Optional[Path] = None,
    pedantic_packages: bool = False,
    compiler_args: Optional[List[str]] = None,
    backend_args: Optional[List[str]] = None,
    jobs: Optional[int] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> BuildSettings:
    """Build settings from CLI options."""
    overrides: dict = {"verbose": verbose, "quiet": quiet}
    if pedantic_packages:
        overrides["pedantic_packages"] = True
    if jobs is not None:
        overrides["jobs"] = jobs
    settings = load_settings(config_file=config, **overrides)

    if compiler_args:
        settings = replace(settings, compiler_args=(*settings.compiler_args, *compiler_args))
    if backend_args:
        backend = settings.backend
        if isinstance(backend, Backend):
            settings = replace(
                settings, backend=Backend(backend.command, (*backend.args, *backend_args))
            )
        else:
            err_console.print("[yellow]--backend-args ignored: no backend is configured[/yellow]")
    return settings


def print_diagnostics(diagnostics: List[Diagnostic]) -> None:
    for diagnostic in diagnostics:
        color = "yellow" if diagnostic.kind is DiagnosticKind.UNUSED else "red"
        console.print(f"[bold {color}]✘[/bold {color}] ", end="")
        console.print(diagnostic.message, markup=False, highlight=False, soft_wrap=True)
        console.print()


def print_diagnostics_json(diagnostics: List[Diagnostic]) -> None:
    console.print_json(json.dumps([d.to_json() for d in diagnostics]))
