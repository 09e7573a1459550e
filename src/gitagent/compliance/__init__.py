"""
Compliance Package

Rule-based compliance validation for agent manifests.
"""

from gitagent.compliance.checks import ComplianceChecker, evaluate
from gitagent.compliance.constraints import format_constraints_block, render_compliance_constraints
from gitagent.compliance.facts import ComplianceFacts
from gitagent.compliance.models import (
    ComplianceViolation,
    RuleGroup,
    ValidationResult,
)
from gitagent.compliance.sod import SegregationOfDutiesChecker

__all__ = [
    "ComplianceChecker",
    "ComplianceFacts",
    "ComplianceViolation",
    "RuleGroup",
    "SegregationOfDutiesChecker",
    "ValidationResult",
    "evaluate",
    "format_constraints_block",
    "render_compliance_constraints",
]
