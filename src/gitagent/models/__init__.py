"""Data models for gitagent manifests."""

from gitagent.models.manifest import (
    AgentManifest,
    Communications,
    ComplianceConfig,
    DataGovernance,
    Dependency,
    DependencyVendorManagement,
    ModelPreferences,
    ModelRisk,
    Recordkeeping,
    RuntimeConfig,
    SegregationOfDuties,
    SoDHandoff,
    SoDIsolation,
    SoDRole,
    SubAgent,
    Supervision,
    VendorManagement,
)

__all__ = [
    "AgentManifest",
    "Communications",
    "ComplianceConfig",
    "DataGovernance",
    "Dependency",
    "DependencyVendorManagement",
    "ModelPreferences",
    "ModelRisk",
    "Recordkeeping",
    "RuntimeConfig",
    "SegregationOfDuties",
    "SoDHandoff",
    "SoDIsolation",
    "SoDRole",
    "SubAgent",
    "Supervision",
    "VendorManagement",
]
