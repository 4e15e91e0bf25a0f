"""Configuration loading and management for pedant.

Two things are read from configuration:

    BuildSettings    how to build (compiler, output, backend, audit switches)
    WorkspaceConfig  what to build (workspace packages and dependency sources)

Settings sources are merged in priority order:
    1. Defaults (defined in BuildSettings)
    2. Global config (~/.pedant.toml, [build] table)
    3. Project config (./pedant.toml, [build] table)
    4. Explicit config file
    5. Environment variables (PEDANT_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> settings = load_settings(pedantic_packages=True, jobs=4)
    >>> settings.jobs
    4

A project config looks like:

    [build]
    output = "output"
    backend = { cmd = "purs-backend-es", args = ["build"] }

    [[workspace.packages]]
    name = "app"
    path = "app"
    dependencies = ["prelude", "lib-a"]
    pedantic_packages = true

    [dependencies]
    prelude = ".pedant/p/prelude-6.0.1"
    lib-a = ".pedant/p/lib-a-1.2.0"
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import InvalidConfigError, PedantError, UnknownPackageError
from .models import (
    Backend,
    BackendSpec,
    NoBackend,
    PackageName,
    WorkspacePackage,
    normalize_package_name,
)

Verbosity = Literal["quiet", "normal", "verbose"]

CONFIG_FILENAME = "pedant.toml"


@dataclass(frozen=True)
class BuildSettings:
    """How a build runs.

    Attributes:
        pedantic_packages: Audit every workspace package after a successful build
        jobs: Parallel workers for the audit (1 = sequential)
        output: Compiler output directory (None = compiler default)
        compiler: Compiler executable
        compiler_args: Extra arguments passed through to the compiler
        backend: Optional backend run on the compiler's corefn output
        install_command: Command suggested to add missing dependencies
        verbosity: Logging verbosity level
    """

    pedantic_packages: bool = False
    jobs: int = 1
    output: Optional[str] = None
    compiler: str = "purs"
    compiler_args: tuple[str, ...] = ()
    backend: BackendSpec = field(default_factory=NoBackend)
    install_command: str = "spago install"
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        for name in ("compiler", "install_command"):
            if not isinstance(getattr(self, name), str):
                raise TypeError(f"{name} must be a string, got {getattr(self, name)!r}")
        if self.output is not None and not isinstance(self.output, str):
            raise TypeError(f"output must be a string, got {self.output!r}")
        if self.jobs < 1:
            raise ValueError("jobs must be at least 1")
        if not self.compiler.strip():
            raise ValueError("compiler must not be empty")
        if self.output is not None and not self.output.strip():
            raise ValueError("output must not be empty")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError(f"verbosity must be quiet, normal or verbose, got {self.verbosity!r}")
        object.__setattr__(self, "compiler_args", tuple(self.compiler_args))


def load_settings(config_file: Optional[Path] = None, **overrides) -> BuildSettings:
    """Load build settings with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Raises:
        PedantError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".pedant.toml"
    if global_config.exists():
        merged.update(_build_table(global_config))

    project_config = Path.cwd() / CONFIG_FILENAME
    if project_config.exists():
        merged.update(_build_table(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise PedantError(f"Config file not found: {config_file}")
        merged.update(_build_table(config_file))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    if "backend" in merged:
        merged["backend"] = _parse_backend(merged["backend"])

    try:
        return BuildSettings(**merged)
    except (TypeError, ValueError) as e:
        raise PedantError(f"Invalid configuration: {e}")


def _build_table(path: Path) -> dict:
    try:
        data = _load_toml_file(path)
    except PedantError:
        raise
    except Exception as e:
        raise PedantError(f"Invalid config file '{path}': {e}")
    table = data.get("build", {})
    if not isinstance(table, dict):
        raise InvalidConfigError("build", table, "expected a table", source=path)
    return dict(table)


def _parse_backend(value: Any) -> BackendSpec:
    if isinstance(value, (Backend, NoBackend)):
        return value
    if value is None:
        return NoBackend()
    if isinstance(value, dict):
        cmd = value.get("cmd")
        args = value.get("args", [])
        if not isinstance(cmd, str) or not cmd.strip():
            raise InvalidConfigError("backend.cmd", cmd, "expected a non-empty command")
        if not isinstance(args, list) or not all(isinstance(a, str) for a in args):
            raise InvalidConfigError("backend.args", args, "expected a list of strings")
        return Backend(command=cmd, args=tuple(args))
    raise InvalidConfigError("backend", value, "expected a table with `cmd` and `args`")


def _load_env_vars() -> dict[str, Any]:
    """Load settings from PEDANT_* environment variables.

    Supported environment variables:
        PEDANT_PEDANTIC_PACKAGES: bool (true/false/1/0)
        PEDANT_JOBS: int
        PEDANT_OUTPUT: str
        PEDANT_COMPILER: str
        PEDANT_INSTALL_COMMAND: str
        PEDANT_VERBOSITY: quiet/normal/verbose
    """
    type_hints = get_type_hints(BuildSettings)

    result: dict[str, Any] = {}

    for field_name in BuildSettings.__dataclass_fields__:
        env_key = f"PEDANT_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise PedantError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Returns None for types that can't be expressed in an env var.
    """
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]

    origin = getattr(type_hint, "__origin__", None)

    if origin in (tuple, list) or type_hint in (tuple, list):
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise PedantError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)


# ── Workspace ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class WorkspaceConfig:
    """Workspace packages (in declaration order) and external dependency sources.

    Attributes:
        packages: Workspace packages, in the order the config declares them
        dependencies: External dependency name -> unpacked source directory
        root: Directory the config was loaded from
    """

    packages: tuple[WorkspacePackage, ...] = ()
    dependencies: dict[PackageName, str] = field(default_factory=dict)
    root: Path = Path(".")

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for package in self.packages:
            if package.name in seen:
                raise InvalidConfigError("workspace.packages", package.name, "duplicate package name")
            seen.add(package.name)
        object.__setattr__(self, "packages", tuple(self.packages))
        object.__setattr__(
            self,
            "dependencies",
            {normalize_package_name(k): v for k, v in self.dependencies.items()},
        )

    def get_workspace_packages(self) -> list[WorkspacePackage]:
        return list(self.packages)

    def get_package(self, name: PackageName) -> WorkspacePackage:
        name = normalize_package_name(name)
        for package in self.packages:
            if package.name == name:
                return package
        raise UnknownPackageError(name, self.package_names)

    def get_declared_dependencies(self, name: PackageName) -> frozenset[PackageName]:
        return self.get_package(name).dependencies

    @property
    def package_names(self) -> list[PackageName]:
        return [p.name for p in self.packages]

    def pedantic_packages(self, enabled_globally: bool) -> list[WorkspacePackage]:
        """Packages to audit: all of them with the global switch, else the opted-in ones."""
        if enabled_globally:
            return list(self.packages)
        return [p for p in self.packages if p.pedantic_packages]


def load_workspace(path: Optional[Path] = None) -> WorkspaceConfig:
    """Read the workspace section of a pedant.toml.

    Args:
        path: Config file or the directory holding it (default: cwd)

    Raises:
        PedantError: If the file is missing or malformed
    """
    if path is None:
        path = Path.cwd()
    if path.is_dir():
        path = path / CONFIG_FILENAME
    if not path.exists():
        raise PedantError(f"Config file not found: {path}")

    try:
        data = _load_toml_file(path)
    except PedantError:
        raise
    except Exception as e:
        raise PedantError(f"Invalid config file '{path}': {e}")

    return parse_workspace(data, root=path.parent, source=path)


def parse_workspace(data: dict, root: Path = Path("."), source: Optional[Path] = None) -> WorkspaceConfig:
    workspace = data.get("workspace", {})
    if not isinstance(workspace, dict):
        raise InvalidConfigError("workspace", workspace, "expected a table", source=source)

    raw_packages = workspace.get("packages", [])
    if not isinstance(raw_packages, list):
        raise InvalidConfigError("workspace.packages", raw_packages, "expected an array of tables", source=source)

    packages = []
    for entry in raw_packages:
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
            raise InvalidConfigError("workspace.packages", entry, "each package needs a `name`", source=source)
        deps = entry.get("dependencies", [])
        if not isinstance(deps, list) or not all(isinstance(d, str) for d in deps):
            raise InvalidConfigError(
                f"workspace.packages.{entry['name']}.dependencies",
                deps,
                "expected a list of package names",
                source=source,
            )
        packages.append(
            WorkspacePackage(
                name=entry["name"],
                path=str(entry.get("path", ".")),
                dependencies=frozenset(deps),
                pedantic_packages=bool(entry.get("pedantic_packages", False)),
            )
        )

    dependencies = data.get("dependencies", {})
    if not isinstance(dependencies, dict) or not all(isinstance(v, str) for v in dependencies.values()):
        raise InvalidConfigError(
            "dependencies", dependencies, "expected a table of name = source directory", source=source
        )

    return WorkspaceConfig(packages=tuple(packages), dependencies=dict(dependencies), root=root)
