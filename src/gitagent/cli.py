"""
gitagent CLI

Command-line interface for validating and auditing agent repositories.
"""

import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from gitagent import __version__
from gitagent.audit.models import AuditLine, AuditLineKind
from gitagent.audit.report import AuditReportFormatter
from gitagent.compliance.constraints import format_constraints_block
from gitagent.compliance.facts import ComplianceFacts
from gitagent.config import settings
from gitagent.errors import ManifestLoadError
from gitagent.loader import load_agent_manifest, load_file_if_exists
from gitagent.models.manifest import AgentManifest
from gitagent.skills import load_all_skills
from gitagent.validation.structure import RepositoryValidator

console = Console()

DIVIDER = "─" * 60


def _success(msg: str):
    console.print(f"[green]✓[/green] {escape(msg)}")


def _error(msg: str):
    console.print(f"[red]✗[/red] {escape(msg)}")


def _warn(msg: str):
    console.print(f"[yellow]![/yellow] {escape(msg)}")


def _info(msg: str):
    console.print(f"[blue]i[/blue] {escape(msg)}")


def _heading(msg: str):
    console.print(f"\n[bold]{escape(msg)}[/bold]")


def _label(key: str, value: str):
    console.print(f"  [bright_black]{escape(key)}:[/bright_black] {escape(value)}")


def _divider():
    console.print(f"[bright_black]{DIVIDER}[/bright_black]")


def _load_or_exit(agent_dir: Path) -> AgentManifest:
    try:
        return load_agent_manifest(agent_dir)
    except ManifestLoadError as e:
        _error(str(e))
        sys.exit(1)


def print_audit_line(line: AuditLine):
    """Render one audit report line with colour."""
    text = escape(line.render())
    if line.kind == AuditLineKind.HEADING:
        console.print(f"[bold]{text}[/bold]")
    elif line.kind == AuditLineKind.DIVIDER:
        console.print(f"[bright_black]{text}[/bright_black]")
    elif line.kind == AuditLineKind.CHECK:
        color = "green" if line.passed else "yellow"
        console.print(f"[{color}]{text}[/{color}]")
    elif line.kind == AuditLineKind.WARN:
        console.print(f"[yellow]{text}[/yellow]")
    elif line.kind == AuditLineKind.ERROR:
        console.print(f"[red]{text}[/red]")
    elif line.kind == AuditLineKind.INFO:
        console.print(f"[blue]{text}[/blue]")
    else:
        console.print(text)


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default=None, help="Logging level (default: GITAGENT_LOG_LEVEL or WARNING)")
def cli(log_level: Optional[str]):
    """gitagent CLI

    Validate, audit and inspect portable agent definitions.
    """
    level = (log_level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@cli.command()
@click.option("--dir", "-d", "agent_dir", default=".", type=click.Path(file_okay=False), help="Agent directory")
@click.option("--compliance", "-c", is_flag=True, help="Include regulatory compliance validation")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
def validate(agent_dir: str, compliance: bool, as_json: bool):
    """Validate an agent repository."""
    validator = RepositoryValidator(agent_dir)
    report = validator.run(include_compliance=compliance)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(0 if report.valid else 1)

    _heading("Validating gitagent")
    _info(f"Directory: {report.agent_dir}")
    _divider()

    for section in report.sections:
        if section.name == "compliance":
            _divider()
            _heading("Compliance Validation")
            label = "Compliance configuration"
        else:
            label = section.name

        if section.valid:
            _success(f"{label} — valid")
        else:
            _error(f"{label} — invalid")
            for message in section.errors:
                _error(f"  {message}")
        for message in section.warnings:
            _warn(f"  {message}")

    _divider()
    if report.valid:
        _success(report.get_summary())
    else:
        _error(report.get_summary())
        sys.exit(1)


@cli.command()
@click.option("--dir", "-d", "agent_dir", default=".", type=click.Path(file_okay=False), help="Agent directory")
@click.option("--date", "report_date", default=None, type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Report date (default: today)")
def audit(agent_dir: str, report_date):
    """Generate a compliance audit report."""
    path = Path(agent_dir).resolve()
    manifest = _load_or_exit(path)
    facts = ComplianceFacts.from_directory(path)

    lines = AuditReportFormatter().format(
        manifest,
        facts,
        report_date.date() if report_date else date.today(),
    )
    for line in lines:
        print_audit_line(line)
    console.print()


@cli.command()
@click.option("--dir", "-d", "agent_dir", default=".", type=click.Path(file_okay=False), help="Agent directory")
def constraints(agent_dir: str):
    """Print the compliance constraints adapters add to the system prompt."""
    manifest = _load_or_exit(Path(agent_dir).resolve())

    block = format_constraints_block(manifest)
    if block is None:
        _info("No compliance constraints apply to this agent")
        return
    console.print(escape(block))


@cli.command()
@click.option("--dir", "-d", "agent_dir", default=".", type=click.Path(file_okay=False), help="Agent directory")
def info(agent_dir: str):
    """Display an agent summary."""
    path = Path(agent_dir).resolve()
    manifest = _load_or_exit(path)

    _heading(manifest.display_name)
    console.print(f"  {escape(manifest.description or '')}")
    _divider()

    if manifest.author:
        _label("Author", manifest.author)
    if manifest.license:
        _label("License", manifest.license)

    if manifest.model:
        _heading("Model")
        if manifest.model.preferred:
            _label("Preferred", manifest.model.preferred)
        if manifest.model.fallback:
            _label("Fallback", ", ".join(manifest.model.fallback))
        if manifest.model.constraints:
            for key, value in manifest.model.constraints.model_dump(exclude_none=True).items():
                _label(f"  {key}", str(value))

    skills = load_all_skills(path / "skills")
    if skills:
        _heading("Skills")
        for skill in skills:
            _info(f"  {skill.name}: {skill.description}")

    tools_dir = path / "tools"
    tools = sorted(f.stem for f in tools_dir.glob("*.yaml")) if tools_dir.is_dir() else []
    if tools:
        _heading("Tools")
        for tool in tools:
            _info(f"  {tool}")

    agents_dir = path / "agents"
    sub_agents = []
    if agents_dir.is_dir():
        sub_agents = [d.name for d in sorted(agents_dir.iterdir()) if d.is_dir()]
        sub_agents += [f.stem for f in sorted(agents_dir.glob("*.md"))]
    if sub_agents:
        _heading("Sub-Agents")
        for agent_name in sub_agents:
            _info(f"  {agent_name}")

    if manifest.runtime:
        _heading("Runtime")
        if manifest.runtime.max_turns:
            _label("Max turns", str(manifest.runtime.max_turns))
        if manifest.runtime.temperature is not None:
            _label("Temperature", str(manifest.runtime.temperature))
        if manifest.runtime.timeout:
            _label("Timeout", f"{manifest.runtime.timeout}s")

    c = manifest.compliance
    if c:
        _heading("Compliance")
        if c.risk_tier:
            _label("Risk Tier", c.risk_tier.upper())
        if c.frameworks:
            _label("Frameworks", ", ".join(c.frameworks))
        if c.supervision and c.supervision.human_in_the_loop:
            _label("Human-in-the-loop", c.supervision.human_in_the_loop)
        if c.supervision and c.supervision.designated_supervisor:
            _label("Supervisor", c.supervision.designated_supervisor)
        if c.recordkeeping and c.recordkeeping.audit_logging:
            _label("Audit Logging", "enabled")
        if c.recordkeeping and c.recordkeeping.retention_period:
            _label("Retention", c.recordkeeping.retention_period)
        if c.model_risk and c.model_risk.inventory_id:
            _label("Model Inventory ID", c.model_risk.inventory_id)
        if c.model_risk and c.model_risk.validation_cadence:
            _label("Validation Cadence", c.model_risk.validation_cadence)
        if c.data_governance and c.data_governance.pii_handling:
            _label("PII Handling", c.data_governance.pii_handling)
        if c.data_governance and c.data_governance.data_classification:
            _label("Data Classification", c.data_governance.data_classification)

    if manifest.tags:
        _heading("Tags")
        console.print(f"  {escape(', '.join(manifest.tags))}")

    soul = load_file_if_exists(path / "SOUL.md")
    if soul:
        _heading("Soul (preview)")
        soul_lines = soul.split("\n")
        for line in soul_lines[:5]:
            console.print(f"  {escape(line)}")
        if len(soul_lines) > 5:
            console.print("  ...")

    console.print()


if __name__ == "__main__":
    cli()
