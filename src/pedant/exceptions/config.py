"""Configuration exceptions: settings files, workspace layout, package lookup."""

from pathlib import Path
from typing import Any, Optional

from .base import PedantError


class ConfigurationError(PedantError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str, source: Optional[Path] = None):
        details = {"key": key, "value": str(value), "reason": reason}
        if source is not None:
            details["source"] = str(source)

        super().__init__(f"Invalid configuration for {key}: {value}", details=details)
        self.key = key
        self.value = value
        self.reason = reason
        self.source = source


class UnknownPackageError(ConfigurationError):
    """Raised when a package name does not belong to the workspace."""

    def __init__(self, package: str, available: list):
        super().__init__(
            f"Package '{package}' is not part of the workspace",
            details={"package": package, "available": ", ".join(available) or "<none>"},
        )
        self.package = package
        self.available = available
