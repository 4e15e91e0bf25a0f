"""Decode the compiler's `graph` output into an ImportGraph.

The compiler prints one JSON object keyed by module name:

    {"App.Main": {"path": "app/src/App/Main.purs", "depends": ["Lib.A"]}, ...}

Ownership is decided by path: each package contributes a module root
(e.g. `app/src`, `.pedant/p/lib-a/src`) and a module belongs to the package
with the longest root containing its path. Modules outside every root (the
generated build-info module, compiler built-ins) are dropped together with
the edges pointing at them.
"""

from __future__ import annotations

import json
from pathlib import PurePosixPath
from typing import Any, Iterable, Mapping, Optional

from ..exceptions import GraphDecodeError
from ..logging_config import get_logger
from ..models import ImportGraph, ModuleName, PackageName, normalize_package_name

logger = get_logger(__name__)


class PackageOwnership:
    """Maps source file paths to the package whose module root contains them."""

    def __init__(self, roots: Mapping[str, PackageName]):
        self._roots: dict[PurePosixPath, PackageName] = {}
        for root, package in roots.items():
            self._roots[_as_posix(root)] = normalize_package_name(package)
        # Longest root first so nested roots win
        self._ordered = sorted(self._roots, key=lambda p: len(p.parts), reverse=True)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, PackageName]]) -> PackageOwnership:
        return cls(dict(pairs))

    def owner_of_path(self, path: str) -> Optional[PackageName]:
        candidate = _as_posix(path)
        for root in self._ordered:
            if root == PurePosixPath(".") or candidate == root or root in candidate.parents:
                return self._roots[root]
        return None

    def __len__(self) -> int:
        return len(self._roots)


def decode_import_graph(raw: str, ownership: PackageOwnership) -> ImportGraph:
    """Parse raw compiler output into an ImportGraph.

    Raises:
        GraphDecodeError: If the output is not the expected JSON shape.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise GraphDecodeError(f"invalid JSON: {e}")

    return build_import_graph(data, ownership)


def build_import_graph(data: Any, ownership: PackageOwnership) -> ImportGraph:
    """Build an ImportGraph from already-parsed graph JSON."""
    if not isinstance(data, dict):
        raise GraphDecodeError(f"expected an object of modules, got {type(data).__name__}")

    owners: dict[ModuleName, PackageName] = {}
    depends: dict[ModuleName, list[ModuleName]] = {}

    for module, entry in data.items():
        if not isinstance(entry, dict):
            raise GraphDecodeError(f"module {module}: expected an object, got {type(entry).__name__}")
        path = entry.get("path")
        deps = entry.get("depends", [])
        if not isinstance(path, str):
            raise GraphDecodeError(f"module {module}: missing or invalid 'path'")
        if not isinstance(deps, list) or not all(isinstance(d, str) for d in deps):
            raise GraphDecodeError(f"module {module}: 'depends' must be a list of module names")

        owner = ownership.owner_of_path(path)
        if owner is None:
            logger.debug("Module %s (%s) has no owning package, ignoring", module, path)
            continue
        owners[module] = owner
        depends[module] = deps

    imports = {
        module: [d for d in deps if d in owners]
        for module, deps in depends.items()
    }
    return ImportGraph.from_imports(owners, imports)


def _as_posix(path: str) -> PurePosixPath:
    cleaned = path.replace("\\", "/")
    while cleaned.startswith("./"):
        cleaned = cleaned[2:]
    return PurePosixPath(cleaned or ".")
