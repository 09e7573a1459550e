"""
Compliance Checks

Rule groups that cross-check a manifest's compliance section against the
requirements of its declared risk tier and regulatory frameworks.
"""

import logging
from typing import Callable, Optional

from gitagent.compliance.facts import ComplianceFacts
from gitagent.compliance.models import (
    ComplianceViolation,
    RuleGroup,
    ValidationResult,
    error,
    warning,
)
from gitagent.compliance.sod import SegregationOfDutiesChecker
from gitagent.models.manifest import AgentManifest, ComplianceConfig

logger = logging.getLogger(__name__)

INFREQUENT_VALIDATION_CADENCES = ("annual", "semi_annual")
SUPERVISED_HITL_MODES = ("always", "conditional")
VENDOR_REGULATED_FRAMEWORKS = ("finra", "federal_reserve")


class ComplianceChecker:
    """
    Evaluates the compliance rule groups for an agent manifest.

    Each check_* method returns its own list of violations; evaluate()
    merges them into a single ValidationResult. Every group always runs.

    Example:
        >>> checker = ComplianceChecker()
        >>> result = checker.evaluate(manifest, ComplianceFacts.from_directory("."))
        >>> result.valid
        True
    """

    def __init__(self, sod_checker: Optional[SegregationOfDutiesChecker] = None):
        """Initialize the compliance checker."""
        self.sod_checker = sod_checker or SegregationOfDutiesChecker()

        self.framework_checks: dict[str, Callable[[ComplianceConfig], list[ComplianceViolation]]] = {
            "finra": self.check_finra,
            "federal_reserve": self.check_federal_reserve,
            "sec": self.check_sec,
            "cfpb": self.check_cfpb,
        }

    def check_risk_tier(self, c: ComplianceConfig) -> list[ComplianceViolation]:
        """A compliance section must declare its risk tier."""
        if not c.risk_tier:
            return [error(
                "compliance.risk_tier is required when compliance section is present",
                group=RuleGroup.RISK_TIER,
            )]
        return []

    def check_elevated_risk(self, c: ComplianceConfig) -> list[ComplianceViolation]:
        """
        Requirements for high and critical risk tiers.

        Args:
            c: The compliance section

        Returns:
            HITL and audit logging errors, validation cadence warning
        """
        if not c.is_elevated_risk:
            return []

        violations = []
        hitl = c.supervision.human_in_the_loop if c.supervision else None
        if hitl not in SUPERVISED_HITL_MODES:
            violations.append(error(
                f'Risk tier "{c.risk_tier}" requires supervision.human_in_the_loop to be '
                f'"always" or "conditional", got "{hitl if hitl is not None else "unset"}"',
                rule_id="FINRA 3110",
                group=RuleGroup.ELEVATED_RISK,
            ))

        if not (c.recordkeeping and c.recordkeeping.audit_logging):
            violations.append(error(
                f'Risk tier "{c.risk_tier}" requires recordkeeping.audit_logging to be true',
                rule_id="FINRA 4511",
                group=RuleGroup.ELEVATED_RISK,
            ))

        cadence = c.model_risk.validation_cadence if c.model_risk else None
        if cadence in INFREQUENT_VALIDATION_CADENCES:
            violations.append(warning(
                f'Risk tier "{c.risk_tier}" recommends validation_cadence of "quarterly" '
                f'or more frequent, got "{cadence}"',
                rule_id="SR 11-7",
                group=RuleGroup.ELEVATED_RISK,
            ))

        return violations

    def check_finra(self, c: ComplianceConfig) -> list[ComplianceViolation]:
        """FINRA Rules 2210, 3110 and 4511."""
        violations = []
        comms = c.communications

        if not (comms and comms.fair_balanced is True):
            violations.append(error(
                'Framework "finra" requires communications.fair_balanced to be true', rule_id="FINRA 2210"
            ))
        if not (comms and comms.no_misleading is True):
            violations.append(error(
                'Framework "finra" requires communications.no_misleading to be true', rule_id="FINRA 2210"
            ))
        if c.supervision is None:
            violations.append(warning(
                'Framework "finra" recommends configuring supervision section', rule_id="FINRA 3110"
            ))
        if c.recordkeeping is None:
            violations.append(warning(
                'Framework "finra" recommends configuring recordkeeping section', rule_id="FINRA 4511"
            ))

        return violations

    def check_federal_reserve(self, c: ComplianceConfig) -> list[ComplianceViolation]:
        """SR 11-7 model risk management."""
        if c.model_risk is None:
            return [error('Framework "federal_reserve" requires model_risk section', rule_id="SR 11-7")]

        if c.model_risk.ongoing_monitoring is not True:
            return [error(
                'Framework "federal_reserve" requires model_risk.ongoing_monitoring to be true',
                rule_id="SR 11-7",
            )]
        return []

    def check_sec(self, c: ComplianceConfig) -> list[ComplianceViolation]:
        """SEC 17a-4 recordkeeping and Reg S-P privacy."""
        violations = []

        if not (c.recordkeeping and c.recordkeeping.audit_logging):
            violations.append(warning(
                'Framework "sec" recommends audit_logging for recordkeeping compliance', rule_id="SEC 17a-4"
            ))
        if c.data_governance and c.data_governance.pii_handling == "allow":
            violations.append(warning(
                'Framework "sec" with pii_handling "allow" may conflict with customer privacy requirements',
                rule_id="Reg S-P",
            ))

        return violations

    def check_cfpb(self, c: ComplianceConfig) -> list[ComplianceViolation]:
        if not (c.data_governance and c.data_governance.bias_testing):
            return [warning('Framework "cfpb" recommends data_governance.bias_testing to be true', rule_id="CFPB")]
        return []

    def check_frameworks(self, c: ComplianceConfig) -> list[ComplianceViolation]:
        """Run the rules of every declared framework, in declaration order."""
        violations = []
        for framework in c.framework_list():
            check = self.framework_checks.get(framework)
            if check is None:
                logger.debug(f"No rules registered for framework '{framework}'")
                continue
            violations.extend(check(c))
        return violations

    def check_artifacts(self, c: ComplianceConfig, facts: ComplianceFacts) -> list[ComplianceViolation]:
        """Compliance documents recommended for high and critical risk agents."""
        if not c.is_elevated_risk:
            return []

        expected = [
            ("compliance/ directory", facts.compliance_dir),
            ("compliance/risk-assessment.md", facts.risk_assessment),
            ("compliance/regulatory-map.yaml", facts.regulatory_map),
            ("compliance/validation-schedule.yaml", facts.validation_schedule),
        ]
        return [
            warning(f"{artifact} recommended for high/critical risk agents", group=RuleGroup.ARTIFACTS)
            for artifact, present in expected
            if not present
        ]

    def check_vendor_management(self, manifest: AgentManifest, c: ComplianceConfig) -> list[ComplianceViolation]:
        """Regulated agents need vendor_management metadata on every dependency."""
        if not manifest.dependencies:
            return []
        if not any(c.has_framework(name) for name in VENDOR_REGULATED_FRAMEWORKS):
            return []

        return [
            warning(
                f'Dependency "{dep.name}" has no vendor_management metadata — required for regulated agents',
                rule_id="SR 23-4",
                group=RuleGroup.VENDOR_MANAGEMENT,
            )
            for dep in manifest.dependencies
            if dep.vendor_management is None
        ]

    def check_multi_agent(self, manifest: AgentManifest, c: ComplianceConfig) -> list[ComplianceViolation]:
        if c.segregation_of_duties is not None:
            return []
        if manifest.agents and len(manifest.agents) >= 2 and c.is_elevated_risk:
            return [warning(
                "Multi-agent system with high/critical risk tier — consider configuring segregation_of_duties",
                rule_id="SOD",
                group=RuleGroup.MULTI_AGENT,
            )]
        return []

    def check_segregation_of_duties(self, manifest: AgentManifest, c: ComplianceConfig) -> list[ComplianceViolation]:
        if c.segregation_of_duties is None:
            return []
        return self.sod_checker.check(c.segregation_of_duties, manifest.agents, c.risk_tier)

    def run_all_checks(
            self,
            manifest: AgentManifest,
            facts: Optional[ComplianceFacts] = None,
    ) -> list[ComplianceViolation]:
        """
        Run all compliance rule groups on a manifest.

        Args:
            manifest: The loaded agent manifest
            facts: Filesystem facts (all absent if not provided)

        Returns:
            List of violations, errors and warnings interleaved in rule order
        """
        c = manifest.compliance
        if c is None:
            return [warning("No compliance section in agent.yaml", group=RuleGroup.MANIFEST)]

        facts = facts or ComplianceFacts()
        violations = []

        groups = [
            self.check_risk_tier(c),
            self.check_elevated_risk(c),
            self.check_frameworks(c),
            self.check_artifacts(c, facts),
            self.check_vendor_management(manifest, c),
            self.check_multi_agent(manifest, c),
            self.check_segregation_of_duties(manifest, c),
        ]

        for group in groups:
            violations.extend(group)

        return violations

    def evaluate(
            self,
            manifest: AgentManifest,
            facts: Optional[ComplianceFacts] = None,
    ) -> ValidationResult:
        """Evaluate a manifest and fold the violations into a ValidationResult."""
        result = ValidationResult.from_violations(self.run_all_checks(manifest, facts))
        logger.info(
            f"Compliance evaluation for {manifest.display_name}: "
            f"{len(result.errors)} errors, {len(result.warnings)} warnings"
        )
        return result


def evaluate(manifest: AgentManifest, facts: Optional[ComplianceFacts] = None) -> ValidationResult:
    """Evaluate a manifest with the default checker."""
    return ComplianceChecker().evaluate(manifest, facts)
