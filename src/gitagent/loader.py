"""
Manifest Loader

Reads agent.yaml and the optional files that sit next to it.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from gitagent.config import settings
from gitagent.errors import ManifestLoadError
from gitagent.models.manifest import AgentManifest

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def manifest_path(agent_dir: PathLike, manifest_file: Optional[str] = None) -> Path:
    """Return the absolute path of the manifest inside an agent directory."""
    return Path(agent_dir).resolve() / (manifest_file or settings.manifest_file)


def load_manifest_data(agent_dir: PathLike, manifest_file: Optional[str] = None) -> dict[str, Any]:
    """
    Load the raw agent.yaml mapping.

    Args:
        agent_dir: Agent repository directory
        manifest_file: Manifest file name (defaults to settings.manifest_file)

    Returns:
        The parsed YAML mapping

    Raises:
        ManifestLoadError: If the file is missing, unreadable or not a mapping
    """
    path = manifest_path(agent_dir, manifest_file)
    if not path.exists():
        raise ManifestLoadError(f"{path.name} not found in {path.parent}")

    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ManifestLoadError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ManifestLoadError(f"{path.name} is not valid YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ManifestLoadError(f"{path.name} must contain a mapping, got {type(data).__name__}")

    logger.debug(f"Loaded manifest data from {path}")
    return data


def parse_manifest(data: dict[str, Any], source: str = "agent.yaml") -> AgentManifest:
    """Model a parsed mapping, turning model errors into a load error."""
    try:
        return AgentManifest.from_dict(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ManifestLoadError(f"{source} cannot be loaded: {problems}") from e


def load_agent_manifest(agent_dir: PathLike, manifest_file: Optional[str] = None) -> AgentManifest:
    """Load and model agent.yaml from an agent directory."""
    data = load_manifest_data(agent_dir, manifest_file)
    manifest = parse_manifest(data, source=manifest_file or settings.manifest_file)
    logger.info(f"Loaded agent manifest {manifest.display_name}")
    return manifest


def load_file_if_exists(path: PathLike) -> Optional[str]:
    """Return a file's text, or None when it does not exist."""
    path = Path(path)
    if path.exists():
        return path.read_text(encoding="utf-8", errors="replace")
    return None

