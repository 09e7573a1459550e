"""
Skill Loader

Parses SKILL.md files: YAML front matter followed by Markdown instructions.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

import yaml

from gitagent.errors import SkillParseError

logger = logging.getLogger(__name__)

FRONTMATTER_PATTERN = re.compile(r"^---\n(.*?)\n---\n*(.*)$", re.DOTALL)


@dataclass
class ParsedSkill:
    """A SKILL.md file split into front matter and instructions."""

    frontmatter: dict[str, Any]
    instructions: str
    directory: Path
    has_scripts: bool = False
    has_references: bool = False
    has_assets: bool = False
    has_agents: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return str(self.frontmatter.get("name", ""))

    @property
    def description(self) -> str:
        return str(self.frontmatter.get("description", ""))

    @property
    def allowed_tools(self) -> list[str]:
        """Tools from the space-delimited 'allowed-tools' field."""
        tools = self.frontmatter.get("allowed-tools") or ""
        return str(tools).split()


def parse_skill_md(file_path: Union[str, Path]) -> ParsedSkill:
    """
    Parse a SKILL.md file.

    Raises:
        SkillParseError: If the front matter is missing, malformed, or lacks
            a name or description
    """
    path = Path(file_path)
    content = path.read_text(encoding="utf-8", errors="replace")

    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        raise SkillParseError(f"SKILL.md at {path} is missing YAML frontmatter (---)")

    try:
        frontmatter = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise SkillParseError(f"SKILL.md at {path} has invalid YAML frontmatter: {e}") from e

    if not isinstance(frontmatter, dict) or not frontmatter.get("name") or not frontmatter.get("description"):
        raise SkillParseError(f"SKILL.md at {path} is missing required fields: name, description")

    directory = path.parent
    return ParsedSkill(
        frontmatter=frontmatter,
        instructions=match.group(2).strip(),
        directory=directory,
        has_scripts=(directory / "scripts").exists(),
        has_references=(directory / "references").exists(),
        has_assets=(directory / "assets").exists(),
        has_agents=(directory / "agents").exists(),
        metadata=dict(frontmatter.get("metadata") or {}),
    )


def iter_skill_files(skills_dir: Union[str, Path]) -> list[Path]:
    """SKILL.md paths of every skill directory, sorted by directory name."""
    skills_dir = Path(skills_dir)
    if not skills_dir.is_dir():
        return []
    return [
        entry / "SKILL.md"
        for entry in sorted(skills_dir.iterdir())
        if entry.is_dir() and (entry / "SKILL.md").exists()
    ]


def load_all_skills(skills_dir: Union[str, Path]) -> list[ParsedSkill]:
    """Load every parseable skill; skills that fail to parse are logged and skipped."""
    skills = []
    for skill_file in iter_skill_files(skills_dir):
        try:
            skills.append(parse_skill_md(skill_file))
        except SkillParseError as e:
            logger.warning(f"Skipping skill: {e}")
    return skills
