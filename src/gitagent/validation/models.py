"""
Validation Models

Per-file section results and the overall repository validation report.
"""

from dataclasses import dataclass, field

from gitagent.compliance.models import ValidationResult


@dataclass
class SectionResult:
    """Validation result for one part of an agent repository (a file or directory)."""

    name: str
    result: ValidationResult = field(default_factory=ValidationResult)

    @property
    def valid(self) -> bool:
        return self.result.valid

    @property
    def errors(self) -> list[str]:
        return self.result.errors

    @property
    def warnings(self) -> list[str]:
        return self.result.warnings

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"name": self.name, **self.result.to_dict()}


@dataclass
class ValidationReport:
    """Complete validation report for an agent repository."""

    agent_dir: str
    sections: list[SectionResult] = field(default_factory=list)

    def add_section(self, section: SectionResult):
        self.sections.append(section)

    def get_section(self, name: str) -> SectionResult:
        for section in self.sections:
            if section.name == name:
                return section
        raise KeyError(name)

    @property
    def valid(self) -> bool:
        return all(section.valid for section in self.sections)

    @property
    def total_errors(self) -> int:
        return sum(len(section.errors) for section in self.sections)

    @property
    def total_warnings(self) -> int:
        return sum(len(section.warnings) for section in self.sections)

    def get_summary(self) -> str:
        """Get a one-line summary."""
        warnings = f"{self.total_warnings} warning{'s' if self.total_warnings != 1 else ''}"
        if self.valid:
            return f"Validation passed ({warnings})"
        errors = f"{self.total_errors} error{'s' if self.total_errors != 1 else ''}"
        return f"Validation failed: {errors}, {warnings}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "agent_dir": self.agent_dir,
            "valid": self.valid,
            "total_errors": self.total_errors,
            "total_warnings": self.total_warnings,
            "sections": [section.to_dict() for section in self.sections],
        }
