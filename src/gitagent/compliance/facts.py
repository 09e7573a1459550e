"""
Compliance Facts

Filesystem facts the compliance rules need but cannot read from the manifest.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

COMPLIANCE_HOOK_MARKER = "compliance: true"


@dataclass(frozen=True)
class ComplianceFacts:
    """Existence checks for compliance artifacts and audit hooks."""

    compliance_dir: bool = False
    risk_assessment: bool = False
    regulatory_map: bool = False
    validation_schedule: bool = False
    rules_md: bool = False
    hooks_file: bool = False
    hooks_compliance: bool = False  # hooks.yaml text contains "compliance: true"

    @classmethod
    def from_directory(cls, agent_dir: Union[str, Path]) -> "ComplianceFacts":
        """Gather facts from an agent repository on disk."""
        root = Path(agent_dir).resolve()
        compliance = root / "compliance"
        hooks_path = root / "hooks" / "hooks.yaml"

        hooks_file = hooks_path.exists()
        hooks_compliance = False
        if hooks_file:
            hooks_text = hooks_path.read_text(encoding="utf-8", errors="replace")
            hooks_compliance = COMPLIANCE_HOOK_MARKER in hooks_text

        facts = cls(
            compliance_dir=compliance.is_dir(),
            risk_assessment=(compliance / "risk-assessment.md").exists(),
            regulatory_map=(compliance / "regulatory-map.yaml").exists(),
            validation_schedule=(compliance / "validation-schedule.yaml").exists(),
            rules_md=(root / "RULES.md").exists(),
            hooks_file=hooks_file,
            hooks_compliance=hooks_compliance,
        )
        logger.debug(f"Compliance facts for {root}: {facts}")
        return facts
