"""
Validation Package

Structural validation of agent repositories.
"""

from gitagent.validation.models import SectionResult, ValidationReport
from gitagent.validation.schema import SchemaValidator, load_schema
from gitagent.validation.structure import RepositoryValidator

__all__ = [
    "RepositoryValidator",
    "SchemaValidator",
    "SectionResult",
    "ValidationReport",
    "load_schema",
]
