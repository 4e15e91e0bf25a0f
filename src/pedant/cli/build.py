"""Build command — compile the workspace, then audit dependency usage."""

from pathlib import Path
from typing import List, Optional

import typer

from . import app
from ._common import console, err_console, print_diagnostics, print_diagnostics_json, resolve_settings
from ..build import run_build
from ..build.sources import package_ownership
from ..compiler import PursCompiler, SubprocessBackend
from ..config import load_workspace
from ..exceptions import PedantError
from ..logging_config import setup_logging


@app.command()
def build(
    package: Optional[str] = typer.Option(
        None, "--package", "-p",
        help="Select a single workspace package to build (and audit)",
    ),
    deps_only: bool = typer.Option(
        False, "--deps-only",
        help="Build only the dependencies of the selected package",
    ),
    pedantic_packages: bool = typer.Option(
        False, "--pedantic-packages",
        help="Check every workspace package for unused and undeclared dependencies",
    ),
    purs_args: Optional[List[str]] = typer.Option(
        None, "--purs-args",
        help="Argument passed through to the compiler (repeatable)",
    ),
    backend_args: Optional[List[str]] = typer.Option(
        None, "--backend-args",
        help="Argument passed through to the backend (repeatable)",
    ),
    jobs: Optional[int] = typer.Option(
        None, "--jobs", "-j",
        help="Packages audited in parallel",
        min=1, max=32,
    ),
    json_errors: bool = typer.Option(
        False, "--json-errors",
        help="Print audit diagnostics as JSON",
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Configuration file (TOML)",
        exists=True, file_okay=True, dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Show debug logging",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Suppress logging",
    ),
):
    """
    Compile the workspace and, when enabled, audit dependency usage.

    The audit runs after a successful build, for every package with
    --pedantic-packages or for packages that set pedantic_packages = true.

    [bold cyan]Examples:[/bold cyan]

      pedant build

      pedant build -p app --pedantic-packages

      pedant build --purs-args=--strict --json-errors
    """
    setup_logging(verbose=verbose, quiet=quiet)

    try:
        settings = resolve_settings(
            config=config,
            pedantic_packages=pedantic_packages,
            compiler_args=purs_args,
            backend_args=backend_args,
            jobs=jobs,
            verbose=verbose,
            quiet=quiet,
        )
        workspace = load_workspace(config if config is not None else Path.cwd())
        compiler = PursCompiler(
            package_ownership(workspace), command=settings.compiler, cwd=workspace.root
        )

        report = run_build(
            workspace,
            settings,
            compiler,
            SubprocessBackend(cwd=workspace.root),
            selected=package,
            deps_only=deps_only,
        )
    except PedantError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not report.result.succeeded:
        raise typer.Exit(1)

    if json_errors:
        print_diagnostics_json(report.diagnostics)
    elif report.diagnostics:
        print_diagnostics(report.diagnostics)

    if report.diagnostics:
        err_console.print(
            f"[red]Found {len(report.diagnostics)} dependency problem(s) "
            f"in {len({d.package for d in report.diagnostics})} package(s).[/red]"
        )
        raise typer.Exit(1)

    if not json_errors and report.audited:
        console.print(f"[green]✓[/green] Dependencies of {', '.join(report.audited)} look right.")
