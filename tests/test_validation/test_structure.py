"""Tests for repository validation."""

import pytest
import yaml

from gitagent.compliance import ComplianceFacts
from gitagent.config import Settings
from gitagent.validation import RepositoryValidator, SchemaValidator


def _skill(name, description="Summarises quarterly filings.", body="Read the filing and summarise it.\n"):
    return f"---\nname: {name}\ndescription: {description}\n---\n\n{body}"


class TestRepositoryValidator:
    """Test cases for RepositoryValidator."""

    def test_minimal_repository_is_valid(self, make_agent):
        """Test that agent.yaml plus SOUL.md validates cleanly."""
        report = RepositoryValidator(make_agent()).run()

        assert report.valid
        assert [s.name for s in report.sections] == ["agent.yaml", "SOUL.md"]
        assert report.get_summary() == "Validation passed (0 warnings)"

    def test_missing_manifest(self, tmp_path):
        """Test that a directory without agent.yaml fails."""
        (tmp_path / "SOUL.md").write_text("# Soul\n\nHelpful.\n", encoding="utf-8")

        section = RepositoryValidator(tmp_path).validate_agent_yaml()

        assert not section.valid
        assert "agent.yaml not found" in section.errors[0]

    def test_schema_errors(self, make_agent):
        """Test that schema violations are reported against agent.yaml."""
        agent_dir = make_agent({"name": "Bad Name", "compliance": {"risk_tier": "extreme"}})

        section = RepositoryValidator(agent_dir).validate_agent_yaml()

        assert not section.valid
        assert all(e.startswith("agent.yaml /") for e in section.errors)
        assert any("/name" in e for e in section.errors)
        assert any("/compliance/risk_tier" in e for e in section.errors)

    def test_missing_required_field(self, tmp_path):
        """Test that agent.yaml must declare version and description."""
        (tmp_path / "agent.yaml").write_text("name: test-agent\n", encoding="utf-8")

        section = RepositoryValidator(tmp_path).validate_agent_yaml()

        assert any("'version' is a required property" in e for e in section.errors)
        assert any("'description' is a required property" in e for e in section.errors)

    def test_unloadable_manifest(self, make_agent):
        """Test that a manifest the models cannot hold is reported, not raised."""
        agent_dir = make_agent({"compliance": {"supervision": "always"}})

        section = RepositoryValidator(agent_dir).validate_agent_yaml()

        assert not section.valid
        assert any("agent.yaml cannot be loaded" in e for e in section.errors)

    def test_referenced_skill_missing(self, make_agent):
        """Test that a referenced skill directory must exist."""
        agent_dir = make_agent({"skills": ["summarise"]})

        section = RepositoryValidator(agent_dir).validate_agent_yaml()

        assert section.errors == ['Referenced skill "summarise" not found at skills/summarise/']

    def test_referenced_skill_without_skill_md(self, make_agent):
        """Test that a skill directory without SKILL.md is a warning."""
        agent_dir = make_agent({"skills": ["summarise"]}, files={"skills/summarise/notes.txt": "draft"})

        section = RepositoryValidator(agent_dir).validate_agent_yaml()

        assert section.valid
        assert section.warnings == ['Skill "summarise" directory exists but SKILL.md is missing']

    def test_referenced_tool_missing(self, make_agent):
        """Test that a referenced tool definition must exist."""
        agent_dir = make_agent({"tools": ["search"]})

        section = RepositoryValidator(agent_dir).validate_agent_yaml()

        assert section.errors == ['Referenced tool "search" not found at tools/search.yaml']

    def test_referenced_sub_agents(self, make_agent):
        """Test that sub-agents resolve to a directory or a Markdown file."""
        agent_dir = make_agent(
            {"agents": {"drafter": {"description": "Drafts"}, "reviewer": {}, "auditor": {}}},
            files={
                "agents/drafter/agent.yaml": "name: drafter\n",
                "agents/reviewer.md": "# Reviewer\n",
            },
        )

        section = RepositoryValidator(agent_dir).validate_agent_yaml()

        assert section.errors == [
            'Referenced agent "auditor" not found at agents/auditor/ or agents/auditor.md',
        ]

    @pytest.mark.parametrize("soul,expected", [
        (None, "SOUL.md is required but not found"),
        ("   \n", "SOUL.md is empty — must contain at least one paragraph"),
        ("# Soul\n\n## Values\n", "SOUL.md contains only headings — must contain at least one paragraph of content"),
    ])
    def test_soul_md_errors(self, make_agent, soul, expected):
        """Test the SOUL.md content requirements."""
        section = RepositoryValidator(make_agent(soul=soul)).validate_soul_md()

        assert section.errors == [expected]

    def test_hooks_absent(self, make_agent):
        """Test that hooks are optional."""
        assert RepositoryValidator(make_agent()).validate_hooks() is None

    def test_hooks_valid(self, make_agent):
        """Test a hooks.yaml whose scripts exist."""
        agent_dir = make_agent(files={
            "hooks/hooks.yaml": yaml.safe_dump({"hooks": {"on_session_start": [{"script": "audit.sh"}]}}),
            "hooks/audit.sh": "#!/bin/sh\n",
        })

        section = RepositoryValidator(agent_dir).validate_hooks()

        assert section.valid
        assert section.errors == []

    def test_hook_script_missing(self, make_agent):
        """Test that hook scripts must exist next to hooks.yaml."""
        agent_dir = make_agent(files={
            "hooks/hooks.yaml": yaml.safe_dump({"hooks": {"pre_tool_use": [{"script": "guard.sh"}]}}),
        })

        section = RepositoryValidator(agent_dir).validate_hooks()

        assert section.errors == ['Hook script "guard.sh" for event "pre_tool_use" not found']

    def test_hooks_schema_error(self, make_agent):
        """Test that hooks.yaml must have a hooks mapping."""
        agent_dir = make_agent(files={"hooks/hooks.yaml": "events: []\n"})

        section = RepositoryValidator(agent_dir).validate_hooks()

        assert not section.valid
        assert section.errors[0].startswith("hooks.yaml /")

    def test_hooks_invalid_yaml(self, make_agent):
        """Test that unparseable hooks.yaml is reported."""
        agent_dir = make_agent(files={"hooks/hooks.yaml": "hooks: [unclosed\n"})

        section = RepositoryValidator(agent_dir).validate_hooks()

        assert section.errors == ["hooks/hooks.yaml is not valid YAML"]

    def test_tool_problems_are_warnings(self, make_agent):
        """Test that tool definitions only produce warnings."""
        agent_dir = make_agent(files={
            "tools/search.yaml": "name: search\ndescription: Web search\n",
            "tools/broken.yaml": "name: broken\n",
        })

        report = RepositoryValidator(agent_dir).run()

        assert report.valid
        broken = report.get_section("tools/broken.yaml")
        assert broken.errors == []
        assert any("'description' is a required property" in w for w in broken.warnings)
        assert report.get_section("tools/search.yaml").warnings == []

    def test_valid_skill(self, make_agent):
        """Test a well-formed skill."""
        agent_dir = make_agent(files={"skills/summarise/SKILL.md": _skill("summarise")})

        section = RepositoryValidator(agent_dir).validate_skills()

        assert section.valid
        assert section.warnings == []

    def test_skill_without_frontmatter(self, make_agent):
        """Test that a SKILL.md without front matter is an error."""
        agent_dir = make_agent(files={"skills/summarise/SKILL.md": "# Summarise\n"})

        section = RepositoryValidator(agent_dir).validate_skills()

        assert len(section.errors) == 1
        assert section.errors[0].startswith("skills/summarise/SKILL.md: ")
        assert "missing YAML frontmatter" in section.errors[0]

    def test_skill_name_mismatch(self, make_agent):
        """Test that a name differing from its directory is a warning."""
        agent_dir = make_agent(files={"skills/summarise/SKILL.md": _skill("summarize")})

        section = RepositoryValidator(agent_dir).validate_skills()

        assert section.valid
        assert section.warnings == [
            'skills/summarise/SKILL.md: name "summarize" does not match directory "summarise"',
        ]

    def test_skill_name_rules(self, make_agent):
        """Test the skill name length and hyphen rules."""
        long_name = "a" * 65
        agent_dir = make_agent(files={
            "skills/a--b/SKILL.md": _skill("a--b"),
            "skills/x-/SKILL.md": _skill("x-"),
            f"skills/{long_name}/SKILL.md": _skill(long_name),
        })

        section = RepositoryValidator(agent_dir).validate_skills()

        assert section.errors == [
            "skills/a--b/SKILL.md: name contains consecutive hyphens (--)",
            f"skills/{long_name}/SKILL.md: name exceeds 64 characters",
            "skills/x-/SKILL.md: name has leading or trailing hyphen",
        ]

    def test_skill_description_too_long(self, make_agent):
        """Test the description length limit."""
        agent_dir = make_agent(files={"skills/summarise/SKILL.md": _skill("summarise", description="d" * 1025)})

        section = RepositoryValidator(agent_dir).validate_skills()

        assert section.errors == ["skills/summarise/SKILL.md: description exceeds 1024 characters"]

    def test_skill_long_instructions(self, make_agent):
        """Test that very long instructions are a warning."""
        settings = Settings(skill_instructions_warn_chars=100)
        agent_dir = make_agent(files={"skills/summarise/SKILL.md": _skill("summarise", body="x" * 400)})

        section = RepositoryValidator(agent_dir, settings=settings).validate_skills()

        assert section.valid
        assert section.warnings == [
            "skills/summarise/SKILL.md: instructions are very long (~100 tokens). "
            "Agent Skills standard recommends <5000 tokens.",
        ]

    def test_compliance_section_only_on_request(self, make_agent):
        """Test that compliance rules run only when asked for."""
        agent_dir = make_agent({"compliance": {"frameworks": ["finra"]}})
        validator = RepositoryValidator(agent_dir)

        without = validator.run()
        with_compliance = validator.run(include_compliance=True)

        assert without.valid
        assert "compliance" not in [s.name for s in without.sections]
        assert not with_compliance.valid
        assert (
            "compliance.risk_tier is required when compliance section is present"
            in with_compliance.get_section("compliance").errors
        )

    def test_compliance_uses_repository_facts(self, make_agent, elevated_compliance):
        """Test that compliance artifacts on disk silence the artifact warnings."""
        agent_dir = make_agent({"compliance": elevated_compliance}, files={
            "compliance/risk-assessment.md": "# Risk\n",
            "compliance/regulatory-map.yaml": "finra: []\n",
            "compliance/validation-schedule.yaml": "quarterly: []\n",
        })

        section = RepositoryValidator(agent_dir).validate_compliance()

        assert section.valid
        assert section.warnings == []

    def test_report_to_dict(self, make_agent):
        """Test the serialised report."""
        report = RepositoryValidator(make_agent(soul=None)).run()

        data = report.to_dict()

        assert data["valid"] is False
        assert data["total_errors"] == 1
        assert data["sections"][1] == {
            "name": "SOUL.md",
            "valid": False,
            "errors": ["SOUL.md is required but not found"],
            "warnings": [],
            "violations": [{
                "rule_id": None,
                "message": "SOUL.md is required but not found",
                "severity": "error",
                "blocking": True,
                "group": "manifest",
            }],
        }
        assert report.get_summary() == "Validation failed: 1 error, 0 warnings"


class TestSchemaValidator:
    """Test cases for SchemaValidator."""

    def test_bundled_schemas_load(self):
        """Test that every bundled schema can be loaded."""
        for name in ("agent-yaml", "hooks", "tool", "skill"):
            assert SchemaValidator(name).validator.schema["type"] == "object"

    def test_sod_conflict_pairs(self):
        """Test that conflict pairs must have exactly two entries."""
        validator = SchemaValidator("agent-yaml")
        data = {
            "name": "test-agent",
            "version": "1.0.0",
            "description": "Test agent",
            "compliance": {"segregation_of_duties": {"conflicts": [["a", "b", "c"]]}},
        }

        errors = validator.errors(data)

        assert len(errors) == 1
        assert errors[0].startswith("/compliance/segregation_of_duties/conflicts/0:")


class TestUndecodableContent:
    """Test cases for files containing invalid UTF-8."""

    def test_soul_md_with_invalid_bytes(self, make_agent):
        """Test that SOUL.md content is checked even with undecodable bytes."""
        agent_dir = make_agent()
        (agent_dir / "SOUL.md").write_bytes(b"# Soul\n\nCaf\xe9 assistant.\n")

        section = RepositoryValidator(agent_dir).validate_soul_md()

        assert section.valid

    def test_tool_with_invalid_bytes(self, make_agent):
        """Test that an undecodable tool file is still validated."""
        agent_dir = make_agent()
        (agent_dir / "tools").mkdir()
        (agent_dir / "tools" / "search.yaml").write_bytes(b"name: search\ndescription: Caf\xe9 search\n")

        sections = RepositoryValidator(agent_dir).validate_tools()

        assert [s.name for s in sections] == ["tools/search.yaml"]
        assert sections[0].warnings == []

    def test_hooks_facts_with_invalid_bytes(self, make_agent):
        """Test that the compliance hook marker is found around undecodable bytes."""
        agent_dir = make_agent()
        (agent_dir / "hooks").mkdir()
        (agent_dir / "hooks" / "hooks.yaml").write_bytes(b"hooks:\n  # \xff\xfe\n  compliance: true\n")

        facts = ComplianceFacts.from_directory(agent_dir)

        assert facts.hooks_file
        assert facts.hooks_compliance
