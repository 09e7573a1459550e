"""
Repository Validation

Checks an agent repository's files: agent.yaml against its schema and the
skills, tools and sub-agents it references, SOUL.md, hooks, tools, skills
and, on request, the compliance rules.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Union

import yaml

from gitagent.compliance.checks import ComplianceChecker
from gitagent.compliance.facts import ComplianceFacts
from gitagent.config import Settings, settings as default_settings
from gitagent.errors import ManifestLoadError, SkillParseError
from gitagent.loader import load_manifest_data, parse_manifest
from gitagent.skills import iter_skill_files, parse_skill_md
from gitagent.validation.models import SectionResult, ValidationReport
from gitagent.validation.schema import SchemaValidator

logger = logging.getLogger(__name__)

HEADING_LINE = re.compile(r"^#.*$", re.MULTILINE)


class RepositoryValidator:
    """
    Validates an agent repository on disk.

    Example:
        >>> report = RepositoryValidator("./my-agent").run(include_compliance=True)
        >>> report.valid
        True
    """

    def __init__(
            self,
            agent_dir: Union[str, Path],
            settings: Optional[Settings] = None,
            compliance_checker: Optional[ComplianceChecker] = None,
    ):
        self.agent_dir = Path(agent_dir).resolve()
        self.settings = settings or default_settings
        self.compliance_checker = compliance_checker or ComplianceChecker()

    def _schema(self, name: str) -> SchemaValidator:
        return SchemaValidator(name, self.settings.schema_dir)

    def validate_agent_yaml(self) -> SectionResult:
        """Schema-check agent.yaml and resolve its skill, tool and sub-agent references."""
        section = SectionResult(self.settings.manifest_file)
        result = section.result

        try:
            data = load_manifest_data(self.agent_dir, self.settings.manifest_file)
        except ManifestLoadError as e:
            result.add_error(str(e))
            return section

        for message in self._schema("agent-yaml").errors(data):
            result.add_error(f"{self.settings.manifest_file} {message}")

        try:
            manifest = parse_manifest(data, source=self.settings.manifest_file)
        except ManifestLoadError as e:
            result.add_error(str(e))
            return section

        for skill in manifest.skills or []:
            skill_dir = self.agent_dir / "skills" / skill
            if not skill_dir.exists():
                result.add_error(f'Referenced skill "{skill}" not found at skills/{skill}/')
            elif not (skill_dir / "SKILL.md").exists():
                result.add_warning(f'Skill "{skill}" directory exists but SKILL.md is missing')

        for tool in manifest.tools or []:
            if not (self.agent_dir / "tools" / f"{tool}.yaml").exists():
                result.add_error(f'Referenced tool "{tool}" not found at tools/{tool}.yaml')

        for agent_name in manifest.agents or {}:
            agents_dir = self.agent_dir / "agents"
            if not (agents_dir / agent_name).exists() and not (agents_dir / f"{agent_name}.md").exists():
                result.add_error(
                    f'Referenced agent "{agent_name}" not found at agents/{agent_name}/ or agents/{agent_name}.md'
                )

        return section

    def validate_soul_md(self) -> SectionResult:
        """SOUL.md must exist and hold at least one paragraph of content."""
        section = SectionResult("SOUL.md")
        soul_path = self.agent_dir / "SOUL.md"

        if not soul_path.exists():
            section.result.add_error("SOUL.md is required but not found")
            return section

        content = soul_path.read_text(encoding="utf-8", errors="replace").strip()
        if not content:
            section.result.add_error("SOUL.md is empty — must contain at least one paragraph")
        elif not HEADING_LINE.sub("", content).strip():
            section.result.add_error(
                "SOUL.md contains only headings — must contain at least one paragraph of content"
            )

        return section

    def validate_hooks(self) -> Optional[SectionResult]:
        """Validate hooks/hooks.yaml and the scripts it points to, if present."""
        hooks_path = self.agent_dir / "hooks" / "hooks.yaml"
        if not hooks_path.exists():
            return None

        section = SectionResult("hooks/hooks.yaml")
        result = section.result

        try:
            config = yaml.safe_load(hooks_path.read_text(encoding="utf-8", errors="replace"))
        except yaml.YAMLError:
            result.add_error("hooks/hooks.yaml is not valid YAML")
            return section

        for message in self._schema("hooks").errors(config):
            result.add_error(f"hooks.yaml {message}")

        hooks = config.get("hooks") if isinstance(config, dict) else None
        if isinstance(hooks, dict):
            for event, entries in hooks.items():
                if not isinstance(entries, list):
                    continue
                for entry in entries:
                    script = entry.get("script") if isinstance(entry, dict) else None
                    if script and not (self.agent_dir / "hooks" / script).exists():
                        result.add_error(f'Hook script "{script}" for event "{event}" not found')

        return section

    def validate_tools(self) -> list[SectionResult]:
        """Tool definitions; problems here are warnings only."""
        tools_dir = self.agent_dir / "tools"
        if not tools_dir.is_dir():
            return []

        sections = []
        validator = self._schema("tool")
        for tool_file in sorted(tools_dir.glob("*.yaml")):
            section = SectionResult(f"tools/{tool_file.name}")
            try:
                config = yaml.safe_load(tool_file.read_text(encoding="utf-8", errors="replace"))
            except yaml.YAMLError:
                section.result.add_warning("not valid YAML")
            else:
                for message in validator.errors(config):
                    section.result.add_warning(message)
            sections.append(section)

        return sections

    def validate_skills(self) -> Optional[SectionResult]:
        """Validate every skills/<name>/SKILL.md against the Agent Skills constraints."""
        skills_dir = self.agent_dir / "skills"
        if not skills_dir.is_dir():
            return None

        section = SectionResult("skills/")
        result = section.result
        validator = self._schema("skill")

        for skill_file in iter_skill_files(skills_dir):
            dir_name = skill_file.parent.name
            prefix = f"skills/{dir_name}/SKILL.md"

            try:
                skill = parse_skill_md(skill_file)
            except SkillParseError as e:
                result.add_error(f"{prefix}: {e}")
                continue

            for message in validator.errors(skill.frontmatter):
                result.add_error(f"{prefix} frontmatter {message}")

            name = skill.name
            if name != dir_name:
                result.add_warning(f'{prefix}: name "{name}" does not match directory "{dir_name}"')
            if len(name) > self.settings.skill_name_max_length:
                result.add_error(f"{prefix}: name exceeds {self.settings.skill_name_max_length} characters")
            if "--" in name:
                result.add_error(f"{prefix}: name contains consecutive hyphens (--)")
            if name.startswith("-") or name.endswith("-"):
                result.add_error(f"{prefix}: name has leading or trailing hyphen")

            if len(skill.description) > self.settings.skill_description_max_length:
                result.add_error(
                    f"{prefix}: description exceeds {self.settings.skill_description_max_length} characters"
                )

            if len(skill.instructions) > self.settings.skill_instructions_warn_chars:
                result.add_warning(
                    f"{prefix}: instructions are very long (~{round(len(skill.instructions) / 4)} tokens). "
                    f"Agent Skills standard recommends <5000 tokens."
                )

        return section

    def validate_compliance(self) -> SectionResult:
        """Run the compliance rule engine; a load failure is a single fatal error."""
        section = SectionResult("compliance")
        try:
            data = load_manifest_data(self.agent_dir, self.settings.manifest_file)
            manifest = parse_manifest(data, source=self.settings.manifest_file)
        except ManifestLoadError as e:
            section.result.add_error(str(e))
            return section

        facts = ComplianceFacts.from_directory(self.agent_dir)
        section.result = self.compliance_checker.evaluate(manifest, facts)
        return section

    def run(self, include_compliance: bool = False) -> ValidationReport:
        """
        Validate the whole repository.

        Args:
            include_compliance: Also run the regulatory compliance rules

        Returns:
            ValidationReport with one section per validated file or directory
        """
        report = ValidationReport(agent_dir=str(self.agent_dir))

        report.add_section(self.validate_agent_yaml())
        report.add_section(self.validate_soul_md())

        hooks = self.validate_hooks()
        if hooks is not None:
            report.add_section(hooks)

        for tool_section in self.validate_tools():
            report.add_section(tool_section)

        skills = self.validate_skills()
        if skills is not None:
            report.add_section(skills)

        if include_compliance:
            report.add_section(self.validate_compliance())

        logger.info(f"Validated {self.agent_dir}: {report.get_summary()}")
        return report
