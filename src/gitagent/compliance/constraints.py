"""
Compliance Constraints

Renders a manifest's compliance settings as plain-language instructions that
adapters append to an agent's system prompt.
"""

from typing import Optional

from gitagent.models.manifest import AgentManifest

CONSTRAINTS_HEADING = "## Compliance Constraints"


def render_compliance_constraints(manifest: AgentManifest) -> list[str]:
    """
    Build the list of constraint lines for a manifest.

    Args:
        manifest: The loaded agent manifest

    Returns:
        Markdown bullet lines, empty when nothing applies
    """
    c = manifest.compliance
    if c is None:
        return []

    constraints: list[str] = []

    if c.supervision and c.supervision.human_in_the_loop == "always":
        constraints.append("- All decisions require human approval before execution")
    if c.supervision and c.supervision.escalation_triggers is not None:
        constraints.append("- Escalate to human supervisor when:")
        for trigger in c.supervision.escalation_triggers:
            for key, value in trigger.items():
                constraints.append(f"  - {key}: {value}")

    if c.communications and c.communications.fair_balanced:
        constraints.append("- All communications must be fair and balanced (FINRA 2210)")
    if c.communications and c.communications.no_misleading:
        constraints.append("- Never make misleading, exaggerated, or promissory statements")

    pii = c.data_governance.pii_handling if c.data_governance else None
    if pii == "redact":
        constraints.append("- Redact all PII from outputs and intermediate reasoning")
    elif pii == "prohibit":
        constraints.append("- Do not process any personally identifiable information")

    sod = c.segregation_of_duties
    if sod is not None:
        constraints.append("- Segregation of duties is enforced:")
        for agent_name, roles in (sod.assignments or {}).items():
            constraints.append(f'  - Agent "{agent_name}" has role(s): {", ".join(roles)}')

        if sod.conflicts is not None:
            constraints.append("- Duty separation rules (no single agent may hold both):")
            for pair in sod.conflicts:
                constraints.append(f"  - {' and '.join(pair)}")

        if sod.handoffs is not None:
            constraints.append("- The following actions require multi-agent handoff:")
            for handoff in sod.handoffs:
                approval = " (approval required)" if handoff.approval_required is not False else ""
                chain = " → ".join(handoff.required_roles)
                constraints.append(f"  - {handoff.action}: must pass through roles {chain}{approval}")

        if sod.isolation and sod.isolation.state == "full":
            constraints.append(
                "- Agent state/memory is fully isolated per role — do not access another agent's state"
            )
        if sod.isolation and sod.isolation.credentials == "separate":
            constraints.append(
                "- Credentials are segregated per role — use only credentials assigned to your role"
            )
        if sod.enforcement == "strict":
            constraints.append("- SOD enforcement is STRICT — violations will block execution")

    return constraints


def format_constraints_block(manifest: AgentManifest) -> Optional[str]:
    """Return the constraints as a Markdown section, or None if there are none."""
    constraints = render_compliance_constraints(manifest)
    if not constraints:
        return None
    return CONSTRAINTS_HEADING + "\n" + "\n".join(constraints)
