"""Import graph exceptions."""

from typing import Optional

from .base import PedantError


class GraphDecodeError(PedantError):
    """Raised when the compiler's import graph cannot be obtained or parsed.

    Not fatal to a build: the audit skips the affected package.
    """

    def __init__(self, reason: str, package: Optional[str] = None):
        details = {"reason": reason}
        if package is not None:
            details["package"] = package

        super().__init__("Could not decode the module import graph", details=details)
        self.reason = reason
        self.package = package
