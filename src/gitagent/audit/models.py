"""
Audit Models

Line items of a compliance audit report.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AuditLineKind(str, Enum):
    """Types of audit report lines."""
    HEADING = "heading"
    LABEL = "label"
    CHECK = "check"  # Pass/advisory check
    WARN = "warn"  # Advisory note
    ERROR = "error"  # Required item missing
    INFO = "info"
    DIVIDER = "divider"
    BLANK = "blank"


MARKERS = {
    AuditLineKind.WARN: "!",
    AuditLineKind.ERROR: "✗",
    AuditLineKind.INFO: "i",
}

DIVIDER_WIDTH = 60


@dataclass(frozen=True)
class AuditLine:
    """A single line of the audit report."""

    kind: AuditLineKind
    text: str = ""
    passed: Optional[bool] = None  # Only set for CHECK lines
    indent: int = 0

    @property
    def marker(self) -> str:
        if self.kind == AuditLineKind.CHECK:
            return "✓" if self.passed else "!"
        return MARKERS.get(self.kind, "")

    def render(self) -> str:
        """Render the line as plain text."""
        pad = "  " * self.indent
        if self.kind == AuditLineKind.DIVIDER:
            return "─" * DIVIDER_WIDTH
        if self.kind == AuditLineKind.BLANK:
            return ""
        if self.kind == AuditLineKind.HEADING:
            return self.text
        if self.kind == AuditLineKind.LABEL:
            return f"  {self.text}"
        return f"{self.marker} {pad}{self.text}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "text": self.text,
            "passed": self.passed,
            "indent": self.indent,
        }
