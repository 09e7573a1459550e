"""
Compliance Models

Data models for compliance validation results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class RuleGroup(str, Enum):
    """Rule groups evaluated by the compliance checker."""
    MANIFEST = "manifest"
    RISK_TIER = "risk_tier"
    ELEVATED_RISK = "elevated_risk"
    FRAMEWORK = "framework"
    ARTIFACTS = "artifacts"
    VENDOR_MANAGEMENT = "vendor_management"
    MULTI_AGENT = "multi_agent"
    SEGREGATION_OF_DUTIES = "segregation_of_duties"


@dataclass
class ComplianceViolation:
    """A single compliance finding, blocking (error) or advisory (warning)."""

    message: str
    rule_id: Optional[str] = None  # e.g. "FINRA 3110", "SR 11-7", "SOD"
    blocking: bool = True
    group: RuleGroup = RuleGroup.FRAMEWORK

    @property
    def text(self) -> str:
        """Message with its bracketed rule tag, as shown to users."""
        if self.rule_id:
            return f"[{self.rule_id}] {self.message}"
        return self.message

    @property
    def severity(self) -> str:
        return "error" if self.blocking else "warning"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "rule_id": self.rule_id,
            "message": self.text,
            "severity": self.severity,
            "blocking": self.blocking,
            "group": self.group.value,
        }


def error(message: str, rule_id: Optional[str] = None, group: RuleGroup = RuleGroup.FRAMEWORK) -> ComplianceViolation:
    return ComplianceViolation(message=message, rule_id=rule_id, blocking=True, group=group)


def warning(message: str, rule_id: Optional[str] = None, group: RuleGroup = RuleGroup.FRAMEWORK) -> ComplianceViolation:
    return ComplianceViolation(message=message, rule_id=rule_id, blocking=False, group=group)


@dataclass
class ValidationResult:
    """Outcome of a validation pass: blocking errors and advisory warnings."""

    valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    violations: list[ComplianceViolation] = field(default_factory=list)

    @classmethod
    def from_violations(cls, violations: list[ComplianceViolation]) -> "ValidationResult":
        result = cls()
        for violation in violations:
            result.add_violation(violation)
        return result

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def add_violation(self, violation: ComplianceViolation):
        """Add a violation; blocking violations invalidate the result."""
        self.violations.append(violation)
        if violation.blocking:
            self.valid = False
            self.errors.append(violation.text)
        else:
            self.warnings.append(violation.text)

    def add_error(self, message: str):
        """Add a blocking error that has no rule tag."""
        self.add_violation(ComplianceViolation(message=message, blocking=True, group=RuleGroup.MANIFEST))

    def add_warning(self, message: str):
        """Add a non-blocking warning that has no rule tag."""
        self.add_violation(ComplianceViolation(message=message, blocking=False, group=RuleGroup.MANIFEST))

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "valid": self.valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "violations": [v.to_dict() for v in self.violations],
        }
