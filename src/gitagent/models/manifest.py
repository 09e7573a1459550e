"""
Agent manifest models.

Typed representation of ``agent.yaml``. Every field is optional and defaults
to ``None`` so that an absent value stays distinguishable from an explicit
``false`` or empty string; compliance rules depend on that difference.
Unknown keys are kept rather than rejected.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool

ELEVATED_RISK_TIERS = ("high", "critical")


class ManifestModel(BaseModel):
    """Base for all manifest sections."""

    model_config = ConfigDict(extra="allow", protected_namespaces=())


class ModelConstraints(ManifestModel):
    """Sampling constraints for the preferred model."""

    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    stop_sequences: Optional[list[str]] = None
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None


class ModelPreferences(ManifestModel):
    """Preferred model, fallbacks and constraints."""

    preferred: Optional[str] = None
    fallback: Optional[list[str]] = None
    constraints: Optional[ModelConstraints] = None


class RuntimeConfig(ManifestModel):
    max_turns: Optional[int] = None
    temperature: Optional[float] = None
    timeout: Optional[int] = None


class DependencyVendorManagement(ManifestModel):
    """Per-dependency third-party risk record (SR 23-4)."""

    due_diligence_date: Optional[str] = None
    soc_report: Optional[StrictBool] = None
    risk_assessment: Optional[str] = None


class Dependency(ManifestModel):
    """An agent this agent mounts or extends."""

    name: Optional[str] = None
    source: Optional[str] = None
    version: Optional[str] = None
    mount: Optional[str] = None
    vendor_management: Optional[DependencyVendorManagement] = None


class SubAgentDelegation(ManifestModel):
    mode: Optional[str] = None
    triggers: Optional[list[str]] = None


class SubAgent(ManifestModel):
    """Entry of the ``agents`` map."""

    description: Optional[str] = None
    delegation: Optional[SubAgentDelegation] = None


class Supervision(ManifestModel):
    """Supervisory controls (FINRA Rule 3110)."""

    designated_supervisor: Optional[str] = None
    review_cadence: Optional[str] = None
    human_in_the_loop: Optional[str] = Field(default=None, description="none, conditional or always")
    escalation_triggers: Optional[list[dict[str, Any]]] = None
    override_capability: Optional[StrictBool] = None
    kill_switch: Optional[StrictBool] = None


class Recordkeeping(ManifestModel):
    """Books and records settings (FINRA Rule 4511 / SEC 17a-4)."""

    audit_logging: Optional[StrictBool] = None
    log_format: Optional[str] = None
    retention_period: Optional[str] = Field(default=None, description="e.g. '7y', '84m', '2555d'")
    log_contents: Optional[list[str]] = None
    immutable: Optional[StrictBool] = None


class ModelRisk(ManifestModel):
    """Model risk management settings (SR 11-7)."""

    inventory_id: Optional[str] = None
    validation_cadence: Optional[str] = None
    validation_type: Optional[str] = None
    conceptual_soundness: Optional[str] = None
    ongoing_monitoring: Optional[StrictBool] = None
    outcomes_analysis: Optional[StrictBool] = None
    drift_detection: Optional[StrictBool] = None
    parallel_testing: Optional[StrictBool] = None


class DataGovernance(ManifestModel):
    """Privacy and fair-lending controls (Reg S-P, CFPB)."""

    pii_handling: Optional[str] = Field(default=None, description="allow, redact or prohibit")
    data_classification: Optional[str] = None
    consent_required: Optional[StrictBool] = None
    cross_border: Optional[StrictBool] = None
    bias_testing: Optional[StrictBool] = None
    lda_search: Optional[StrictBool] = None


class Communications(ManifestModel):
    """Communications with the public (FINRA Rule 2210)."""

    type: Optional[str] = None
    pre_review_required: Optional[StrictBool] = None
    fair_balanced: Optional[StrictBool] = None
    no_misleading: Optional[StrictBool] = None
    disclosures_required: Optional[StrictBool] = None


class VendorManagement(ManifestModel):
    """Third-party risk management (SR 23-4)."""

    due_diligence_complete: Optional[StrictBool] = None
    soc_report_required: Optional[StrictBool] = None
    vendor_ai_notification: Optional[StrictBool] = None
    subcontractor_assessment: Optional[StrictBool] = None


class SoDRole(ManifestModel):
    id: str
    description: Optional[str] = None
    permissions: Optional[list[str]] = None


class SoDHandoff(ManifestModel):
    """An action that must pass through several distinct roles."""

    action: str
    required_roles: list[str] = Field(default_factory=list)
    approval_required: Optional[StrictBool] = None


class SoDIsolation(ManifestModel):
    state: Optional[str] = Field(default=None, description="none, partial or full")
    credentials: Optional[str] = Field(default=None, description="shared or separate")


class SegregationOfDuties(ManifestModel):
    """Roles, conflicting role pairs, agent assignments and handoffs."""

    roles: Optional[list[SoDRole]] = None
    conflicts: Optional[list[list[str]]] = None
    assignments: Optional[dict[str, list[str]]] = None
    handoffs: Optional[list[SoDHandoff]] = None
    isolation: Optional[SoDIsolation] = None
    enforcement: Optional[str] = Field(default=None, description="strict (default) or advisory")

    def role_ids(self) -> list[str]:
        """Role ids in declaration order, duplicates included."""
        return [role.id for role in self.roles or []]

    @property
    def is_advisory(self) -> bool:
        return self.enforcement == "advisory"


class ComplianceConfig(ManifestModel):
    """The ``compliance`` section of the manifest."""

    risk_tier: Optional[str] = Field(default=None, description="standard, high or critical")
    frameworks: Optional[list[str]] = None
    supervision: Optional[Supervision] = None
    recordkeeping: Optional[Recordkeeping] = None
    model_risk: Optional[ModelRisk] = None
    data_governance: Optional[DataGovernance] = None
    communications: Optional[Communications] = None
    vendor_management: Optional[VendorManagement] = None
    segregation_of_duties: Optional[SegregationOfDuties] = None

    @property
    def is_elevated_risk(self) -> bool:
        """True for the high and critical risk tiers."""
        return self.risk_tier in ELEVATED_RISK_TIERS

    def framework_list(self) -> list[str]:
        """Declared frameworks, de-duplicated, in declaration order."""
        seen: list[str] = []
        for framework in self.frameworks or []:
            if framework not in seen:
                seen.append(framework)
        return seen

    def has_framework(self, name: str) -> bool:
        return name in (self.frameworks or [])


class AgentManifest(ManifestModel):
    """A complete ``agent.yaml`` document."""

    spec_version: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    author: Optional[str] = None
    license: Optional[str] = None
    model: Optional[ModelPreferences] = None
    extends: Optional[str] = None
    dependencies: Optional[list[Dependency]] = None
    skills: Optional[list[str]] = None
    tools: Optional[list[str]] = None
    agents: Optional[dict[str, Optional[SubAgent]]] = None
    delegation: Optional[dict[str, Any]] = None
    runtime: Optional[RuntimeConfig] = None
    a2a: Optional[dict[str, Any]] = None
    compliance: Optional[ComplianceConfig] = None
    tags: Optional[list[str]] = None
    metadata: Optional[dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AgentManifest":
        """Build a manifest from a parsed YAML mapping."""
        return cls.model_validate(data)

    @property
    def display_name(self) -> str:
        return f"{self.name or 'unnamed'} v{self.version or '0.0.0'}"
