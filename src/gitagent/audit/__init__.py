"""
Audit Package

Human-readable compliance audit reports.
"""

from gitagent.audit.models import AuditLine, AuditLineKind
from gitagent.audit.report import AuditReportFormatter, format_audit_report, retention_years

__all__ = [
    "AuditLine",
    "AuditLineKind",
    "AuditReportFormatter",
    "format_audit_report",
    "retention_years",
]
