"""gitagent - validation, compliance checks and audit reports for agent definitions."""

__version__ = "0.1.0"
