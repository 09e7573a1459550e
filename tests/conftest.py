"""Test configuration and fixtures."""

import pytest
import yaml

from gitagent.models.manifest import AgentManifest


def _build_manifest(compliance=None, **fields) -> AgentManifest:
    data = {"name": "test-agent", "version": "1.0.0", "description": "Test agent"}
    data.update(fields)
    if compliance is not None:
        data["compliance"] = compliance
    return AgentManifest.from_dict(data)


@pytest.fixture
def build_manifest():
    """Factory building a manifest from keyword fields and an optional compliance mapping."""
    return _build_manifest


@pytest.fixture
def make_agent(tmp_path):
    """Factory writing an agent repository into a temporary directory."""

    def _make(manifest=None, soul="# Soul\n\nA careful research assistant.\n", files=None):
        agent_dir = tmp_path / "agent"
        agent_dir.mkdir(exist_ok=True)

        data = {"name": "test-agent", "version": "1.0.0", "description": "Test agent"}
        data.update(manifest or {})
        (agent_dir / "agent.yaml").write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")

        if soul is not None:
            (agent_dir / "SOUL.md").write_text(soul, encoding="utf-8")

        for relative, content in (files or {}).items():
            path = agent_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

        return agent_dir

    return _make


@pytest.fixture
def elevated_compliance():
    """A critical-tier compliance section that passes every blocking rule."""
    return {
        "risk_tier": "critical",
        "frameworks": ["finra", "sec", "federal_reserve"],
        "supervision": {
            "designated_supervisor": "compliance@example.com",
            "review_cadence": "daily",
            "human_in_the_loop": "always",
            "escalation_triggers": [{"confidence_below": 0.8}],
            "override_capability": True,
            "kill_switch": True,
        },
        "recordkeeping": {
            "audit_logging": True,
            "log_format": "structured_json",
            "retention_period": "7y",
            "log_contents": [
                "prompts_and_responses",
                "tool_calls",
                "decision_pathways",
                "model_version",
                "timestamps",
            ],
            "immutable": True,
        },
        "model_risk": {
            "inventory_id": "MRM-2024-001",
            "validation_cadence": "quarterly",
            "validation_type": "full",
            "conceptual_soundness": "docs/soundness.md",
            "ongoing_monitoring": True,
            "outcomes_analysis": True,
            "drift_detection": True,
        },
        "data_governance": {
            "pii_handling": "redact",
            "data_classification": "confidential",
            "consent_required": True,
            "cross_border": False,
            "bias_testing": True,
            "lda_search": True,
        },
        "communications": {
            "type": "institutional",
            "pre_review_required": True,
            "fair_balanced": True,
            "no_misleading": True,
            "disclosures_required": True,
        },
    }
