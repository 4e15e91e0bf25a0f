"""Dependency usage audit: unused and undeclared (transitive) dependencies."""

from .diagnostics import fix_command, report_diagnostics
from .runner import AuditContext, AuditRunner, run_audit

__all__ = [
    "AuditContext",
    "AuditRunner",
    "run_audit",
    "report_diagnostics",
    "fix_command",
]
