"""Generated build-info module, included in every compiled source set."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .. import __version__
from ..logging_config import get_logger
from ..models import BUILD_INFO_MODULE, BUILD_INFO_PATH, PackageName

logger = get_logger(__name__)


def render_build_info(packages: Iterable[PackageName], pedant_version: str = __version__) -> str:
    names = sorted(packages)
    if names:
        listing = "\n  , ".join(f'"{name}"' for name in names)
        packages_value = f"[ {listing}\n  ]"
    else:
        packages_value = "[]"

    return (
        f"-- @inline export packages always\n"
        f"module {BUILD_INFO_MODULE} where\n"
        f"\n"
        f"packages :: Array String\n"
        f"packages =\n"
        f"  {packages_value}\n"
        f"\n"
        f"pedantVersion :: String\n"
        f'pedantVersion = "{pedant_version}"\n'
    )


def write_build_info(root: Path, packages: Iterable[PackageName]) -> Path:
    """Write the module under `root`, skipping the write when unchanged."""
    path = root / BUILD_INFO_PATH
    content = render_build_info(packages)
    if path.exists() and path.read_text(encoding="utf-8") == content:
        return path

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.debug("Wrote %s", path)
    return path
