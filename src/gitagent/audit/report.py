"""
Audit Report

Builds the nine-section compliance audit report for an agent manifest. The
report is advisory: it never fails, it only marks each check as passed or
needing attention.
"""

import logging
import re
from datetime import date
from typing import Optional

from gitagent.audit.models import AuditLine, AuditLineKind
from gitagent.compliance.facts import ComplianceFacts
from gitagent.models.manifest import AgentManifest, ComplianceConfig

logger = logging.getLogger(__name__)

RETENTION_PATTERN = re.compile(r"([0-9]+)([ymd])")

# Minimum retention in years per framework
RETENTION_MINIMUMS = [
    ("finra", 6, "FINRA 4511"),
    ("sec", 3, "SEC 17a-4"),
]

LOG_CONTENT_CHECKS = [
    ("Prompt/response logging", "prompts_and_responses"),
    ("Tool call logging", "tool_calls"),
    ("Decision pathway logging", "decision_pathways"),
    ("Model version tracking", "model_version"),
    ("Timestamp logging", "timestamps"),
]


def retention_years(period: str) -> Optional[float]:
    """
    Convert a retention period such as '7y', '84m' or '2555d' to years.

    Returns None for strings that do not match <int><y|m|d>.
    """
    match = RETENTION_PATTERN.fullmatch(period)
    if not match:
        return None

    value = int(match.group(1))
    unit = match.group(2)
    if unit == "y":
        return float(value)
    if unit == "m":
        return value / 12
    return value / 365


class AuditReportFormatter:
    """
    Produces audit report lines for a manifest.

    Example:
        >>> formatter = AuditReportFormatter()
        >>> for line in formatter.format(manifest, facts):
        ...     print(line.render())
    """

    def __init__(self):
        self._lines: list[AuditLine] = []

    def _heading(self, text: str):
        self._lines.append(AuditLine(AuditLineKind.BLANK))
        self._lines.append(AuditLine(AuditLineKind.HEADING, text))

    def _label(self, key: str, value: str):
        self._lines.append(AuditLine(AuditLineKind.LABEL, f"{key}: {value}"))

    def _check(self, description: str, passed: bool):
        self._lines.append(AuditLine(AuditLineKind.CHECK, description, passed=bool(passed), indent=1))

    def _warn(self, text: str):
        self._lines.append(AuditLine(AuditLineKind.WARN, text, indent=1))

    def _error(self, text: str):
        self._lines.append(AuditLine(AuditLineKind.ERROR, text, indent=1))

    def _info(self, text: str, indent: int = 0):
        self._lines.append(AuditLine(AuditLineKind.INFO, text, indent=indent))

    def _divider(self):
        self._lines.append(AuditLine(AuditLineKind.DIVIDER))

    def _risk_classification(self, c: ComplianceConfig):
        self._heading("1. Risk Classification")
        self._label("Risk Tier", (c.risk_tier or "unspecified").upper())
        self._label("Frameworks", ", ".join(c.frameworks) if c.frameworks is not None else "none")

    def _supervision(self, c: ComplianceConfig):
        self._heading("2. Supervision (FINRA Rule 3110)")
        s = c.supervision
        if s is None:
            self._warn("Supervision section not configured")
            return

        self._check("Designated supervisor assigned", bool(s.designated_supervisor))
        self._check("Review cadence defined", bool(s.review_cadence))
        self._check("Human-in-the-loop configured", bool(s.human_in_the_loop) and s.human_in_the_loop != "none")
        self._check("Escalation triggers defined", bool(s.escalation_triggers))
        self._check("Override capability enabled", s.override_capability is True)
        self._check("Kill switch enabled", s.kill_switch is True)

        if c.is_elevated_risk:
            self._check(
                'HITL is "always" or "conditional" for high/critical risk',
                s.human_in_the_loop in ("always", "conditional"),
            )

    def _recordkeeping(self, c: ComplianceConfig):
        self._heading("3. Recordkeeping (FINRA Rule 4511 / SEC 17a-4)")
        r = c.recordkeeping
        if r is None:
            self._warn("Recordkeeping section not configured")
            return

        contents = r.log_contents or []
        self._check("Audit logging enabled", r.audit_logging is True)
        self._check("Log format specified", bool(r.log_format))
        self._check("Retention period defined", bool(r.retention_period))
        for description, tag in LOG_CONTENT_CHECKS:
            self._check(description, tag in contents)
        self._check("Immutable logs", r.immutable is True)

        if r.retention_period:
            years = retention_years(r.retention_period)
            if years is None:
                logger.debug(f"Ignoring unparseable retention period '{r.retention_period}'")
                return
            for framework, minimum, rule in RETENTION_MINIMUMS:
                if c.has_framework(framework) and years < minimum:
                    self._warn(
                        f"Retention {r.retention_period} may be below {rule} minimum ({minimum} years)"
                    )

    def _model_risk(self, c: ComplianceConfig):
        self._heading("4. Model Risk Management (SR 11-7)")
        m = c.model_risk
        if m is None:
            self._warn("Model risk section not configured")
            if c.has_framework("federal_reserve"):
                self._error("REQUIRED: Federal Reserve framework requires model_risk section (SR 11-7)")
            return

        self._check("Model inventory ID assigned", bool(m.inventory_id))
        self._check("Validation cadence defined", bool(m.validation_cadence))
        self._check("Validation type specified", bool(m.validation_type))
        self._check("Conceptual soundness documented", bool(m.conceptual_soundness))
        self._check("Ongoing monitoring enabled", m.ongoing_monitoring is True)
        self._check("Outcomes analysis enabled", m.outcomes_analysis is True)
        self._check("Drift detection enabled", m.drift_detection is True)

    def _data_governance(self, c: ComplianceConfig):
        self._heading("5. Data Governance (Reg S-P, CFPB)")
        d = c.data_governance
        if d is None:
            self._warn("Data governance section not configured")
            return

        self._check("PII handling policy defined", bool(d.pii_handling))
        self._check("PII handling is restrictive", d.pii_handling != "allow")
        self._check("Data classification set", bool(d.data_classification))
        self._check("Consent requirement configured", d.consent_required is not None)
        self._check("Cross-border assessment done", d.cross_border is not None)
        self._check("Bias testing enabled", d.bias_testing is True)
        self._check("LDA search configured", d.lda_search is not None)

    def _communications(self, c: ComplianceConfig):
        self._heading("6. Communications Compliance (FINRA Rule 2210)")
        comm = c.communications
        if comm is None:
            self._warn("Communications section not configured")
            if c.has_framework("finra"):
                self._warn("Recommended: FINRA framework agents should configure communications section")
            return

        self._check("Communication type classified", bool(comm.type))
        self._check("Fair and balanced enforced", comm.fair_balanced is True)
        self._check("No misleading enforced", comm.no_misleading is True)
        self._check("Pre-review requirement assessed", comm.pre_review_required is not None)
        self._check("Disclosure requirements assessed", comm.disclosures_required is not None)

        if comm.type == "retail" and not comm.pre_review_required:
            self._warn("Retail communications typically require principal pre-review (FINRA 2210(b)(1))")

    def _vendor_management(self, manifest: AgentManifest, c: ComplianceConfig):
        self._heading("7. Vendor Management (SR 23-4)")
        v = c.vendor_management
        if v is not None:
            self._check("Due diligence complete", v.due_diligence_complete is True)
            self._check("SOC report requirement assessed", v.soc_report_required is not None)
            self._check("Vendor AI notification required", v.vendor_ai_notification is True)
            self._check("Subcontractor assessment done", v.subcontractor_assessment is True)
        elif manifest.dependencies:
            self._warn("Vendor management section not configured but dependencies exist")
            self._warn("Consider adding vendor_management per SR 23-4 requirements")
        else:
            self._info("No vendor dependencies — vendor management not required", indent=1)

    def _artifacts(self, facts: ComplianceFacts):
        self._heading("8. Compliance Artifacts")
        self._check("compliance/ directory exists", facts.compliance_dir)
        self._check("regulatory-map.yaml exists", facts.regulatory_map)
        self._check("validation-schedule.yaml exists", facts.validation_schedule)
        self._check("risk-assessment.md exists", facts.risk_assessment)
        self._check("RULES.md exists", facts.rules_md)

    def _hooks(self, facts: ComplianceFacts):
        self._heading("9. Audit Hooks")
        self._check("hooks/hooks.yaml exists", facts.hooks_file)
        if facts.hooks_file:
            self._check("Compliance hooks configured", facts.hooks_compliance)

    def format(
            self,
            manifest: AgentManifest,
            facts: Optional[ComplianceFacts] = None,
            report_date: Optional[date] = None,
    ) -> list[AuditLine]:
        """
        Build the audit report.

        Args:
            manifest: The loaded agent manifest
            facts: Filesystem facts (all absent if not provided)
            report_date: Date printed in the header (defaults to today)

        Returns:
            Ordered report lines
        """
        self._lines = []
        facts = facts or ComplianceFacts()
        report_date = report_date or date.today()

        self._lines.append(AuditLine(AuditLineKind.HEADING, "Compliance Audit Report"))
        self._label("Agent", manifest.display_name)
        self._label("Date", report_date.isoformat())
        self._divider()

        c = manifest.compliance
        if c is None:
            self._warn("No compliance configuration found in agent.yaml")
            self._info("Add a compliance section to enable regulatory audit checks")
            return self._lines

        self._risk_classification(c)
        self._supervision(c)
        self._recordkeeping(c)
        self._model_risk(c)
        self._data_governance(c)
        self._communications(c)
        self._vendor_management(manifest, c)
        self._artifacts(facts)
        self._hooks(facts)

        self._divider()
        self._lines.append(AuditLine(AuditLineKind.BLANK))
        self._info("This audit report is for informational purposes only.")
        self._info("Consult with legal and compliance teams for definitive assessments.")

        logger.info(f"Audit report for {manifest.display_name}: {len(self._lines)} lines")
        return self._lines


def format_audit_report(
        manifest: AgentManifest,
        facts: Optional[ComplianceFacts] = None,
        report_date: Optional[date] = None,
) -> list[str]:
    """Build the audit report as plain printable lines."""
    lines = AuditReportFormatter().format(manifest, facts, report_date)
    return [line.render() for line in lines]
