"""
Segregation of Duties Checks

Treats the segregation_of_duties section as a small graph: roles are nodes,
conflicts are edges and assignments map each agent to a subset of nodes.
No agent may hold both ends of a conflict edge.
"""

import logging
from typing import Mapping, Optional

from gitagent.compliance.models import ComplianceViolation, RuleGroup
from gitagent.models.manifest import ELEVATED_RISK_TIERS, SegregationOfDuties

logger = logging.getLogger(__name__)

SOD_RULE = "SOD"


def _error(message: str) -> ComplianceViolation:
    return ComplianceViolation(
        message=message, rule_id=SOD_RULE, blocking=True, group=RuleGroup.SEGREGATION_OF_DUTIES
    )


def _warning(message: str) -> ComplianceViolation:
    return ComplianceViolation(
        message=message, rule_id=SOD_RULE, blocking=False, group=RuleGroup.SEGREGATION_OF_DUTIES
    )


class SegregationOfDutiesChecker:
    """
    Checks a segregation_of_duties configuration for consistency.

    Example:
        >>> checker = SegregationOfDutiesChecker()
        >>> violations = checker.check(sod, agents={"alice": None}, risk_tier="high")
    """

    def check_roles(self, sod: SegregationOfDuties) -> list[ComplianceViolation]:
        """At least two roles, with unique ids."""
        violations = []
        role_ids = sod.role_ids()

        if not sod.roles or len(sod.roles) < 2:
            violations.append(_error("segregation_of_duties.roles must define at least 2 roles"))

        if len(role_ids) != len(set(role_ids)):
            violations.append(_error("segregation_of_duties.roles contains duplicate role IDs"))

        return violations

    def check_conflicts(self, sod: SegregationOfDuties) -> list[ComplianceViolation]:
        """Every conflict pair names two different, defined roles."""
        violations = []
        role_ids = sod.role_ids()
        defined = ", ".join(role_ids)

        for pair in sod.conflicts or []:
            if len(pair) != 2:
                violations.append(_error(f"Conflict {pair} must name exactly 2 roles"))
                continue

            for role_id in pair:
                if role_id not in role_ids:
                    violations.append(_error(
                        f'Conflict references undefined role "{role_id}". Defined roles: {defined}'
                    ))

            if pair[0] == pair[1]:
                violations.append(_error(f'Role "{pair[0]}" cannot conflict with itself'))

        return violations

    def check_assignments(
            self,
            sod: SegregationOfDuties,
            agents: Optional[Mapping[str, object]] = None,
    ) -> list[ComplianceViolation]:
        """
        Check agent-to-role assignments.

        Args:
            sod: The segregation_of_duties section
            agents: The manifest's agents map, used for a cross-reference warning

        Returns:
            Undefined-role errors, conflict violations and unknown-agent warnings
        """
        violations = []
        role_ids = sod.role_ids()
        pairs = [pair for pair in sod.conflicts or [] if len(pair) == 2]

        for agent_name, assigned_roles in (sod.assignments or {}).items():
            for role_id in assigned_roles:
                if role_id not in role_ids:
                    violations.append(_error(f'Agent "{agent_name}" assigned undefined role "{role_id}"'))

            for role_a, role_b in pairs:
                if role_a in assigned_roles and role_b in assigned_roles:
                    message = f'Agent "{agent_name}" holds conflicting roles: "{role_a}" and "{role_b}"'
                    if sod.is_advisory:
                        violations.append(_warning(message))
                    else:
                        violations.append(_error(message))

            if agents is not None and agent_name not in agents:
                violations.append(_warning(f'Agent "{agent_name}" in assignments not found in agents section'))

        return violations

    def check_handoffs(self, sod: SegregationOfDuties) -> list[ComplianceViolation]:
        """Handoffs reference defined roles and span at least two of them."""
        violations = []
        role_ids = sod.role_ids()

        for handoff in sod.handoffs or []:
            for role_id in handoff.required_roles:
                if role_id not in role_ids:
                    violations.append(_error(
                        f'Handoff for "{handoff.action}" references undefined role "{role_id}"'
                    ))

            if len(set(handoff.required_roles)) < 2:
                violations.append(_error(
                    f'Handoff for "{handoff.action}" must require at least 2 distinct roles'
                ))

        return violations

    def check_risk_tier(self, sod: SegregationOfDuties, risk_tier: Optional[str]) -> list[ComplianceViolation]:
        """Stricter settings recommended for high and critical risk agents."""
        if risk_tier not in ELEVATED_RISK_TIERS:
            return []

        violations = []
        if sod.enforcement is not None and sod.enforcement != "strict":
            violations.append(_warning(
                f'Risk tier "{risk_tier}" recommends enforcement: "strict", got "{sod.enforcement}"'
            ))

        isolation = sod.isolation
        if isolation is None or isolation.state != "full":
            violations.append(_warning(
                f'Risk tier "{risk_tier}" recommends isolation.state: "full" for full state segregation'
            ))
        if isolation is None or isolation.credentials != "separate":
            violations.append(_warning(
                f'Risk tier "{risk_tier}" recommends isolation.credentials: "separate"'
            ))

        return violations

    def check_conflicts_defined(self, sod: SegregationOfDuties) -> list[ComplianceViolation]:
        if not sod.conflicts:
            return [_warning(
                "No conflicts defined — segregation_of_duties without conflict rules has no enforcement value"
            )]
        return []

    def check_unassigned_roles(self, sod: SegregationOfDuties) -> list[ComplianceViolation]:
        """Roles no agent holds."""
        if sod.assignments is None or sod.roles is None:
            return []

        assigned = {role_id for roles in sod.assignments.values() for role_id in roles}
        return [
            _warning(f'Role "{role.id}" is defined but not assigned to any agent')
            for role in sod.roles
            if role.id not in assigned
        ]

    def check(
            self,
            sod: SegregationOfDuties,
            agents: Optional[Mapping[str, object]] = None,
            risk_tier: Optional[str] = None,
    ) -> list[ComplianceViolation]:
        """
        Run every segregation-of-duties check.

        Args:
            sod: The segregation_of_duties section
            agents: The manifest's agents map (None when the manifest has none)
            risk_tier: The manifest's compliance.risk_tier

        Returns:
            Violations in a fixed order: roles, conflicts, assignments,
            handoffs, risk tier recommendations, missing conflicts, unassigned roles
        """
        violations = []
        violations.extend(self.check_roles(sod))
        violations.extend(self.check_conflicts(sod))
        violations.extend(self.check_assignments(sod, agents))
        violations.extend(self.check_handoffs(sod))
        violations.extend(self.check_risk_tier(sod, risk_tier))
        violations.extend(self.check_conflicts_defined(sod))
        violations.extend(self.check_unassigned_roles(sod))

        logger.debug(
            f"Segregation of duties: {sum(v.blocking for v in violations)} errors, "
            f"{sum(not v.blocking for v in violations)} warnings"
        )
        return violations
