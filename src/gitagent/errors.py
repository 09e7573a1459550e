"""Exceptions raised by gitagent."""


class GitAgentError(RuntimeError):
    """Base class for gitagent errors."""


class ManifestLoadError(GitAgentError):
    """Raised when agent.yaml is missing, unreadable or cannot be modelled.

    Load errors are fatal: no rule is evaluated against a manifest that
    failed to load.
    """


class SkillParseError(GitAgentError):
    """Raised when a SKILL.md file has no usable front matter."""


class SchemaNotFoundError(GitAgentError):
    """Raised when a bundled JSON schema cannot be found."""
