"""
gitagent Configuration

Centralized settings for validation and reporting.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BUNDLED_SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"


@dataclass
class Settings:
    """Settings read from the environment (or a .env file)."""

    log_level: str = field(default_factory=lambda: os.getenv("GITAGENT_LOG_LEVEL", "WARNING"))
    schema_dir: Path = field(
        default_factory=lambda: Path(os.getenv("GITAGENT_SCHEMA_DIR", str(BUNDLED_SCHEMA_DIR)))
    )

    # Repository layout
    manifest_file: str = field(default_factory=lambda: os.getenv("GITAGENT_MANIFEST_FILE", "agent.yaml"))

    # Agent Skills limits
    skill_name_max_length: int = 64
    skill_description_max_length: int = 1024
    skill_instructions_warn_chars: int = field(
        default_factory=lambda: int(os.getenv("GITAGENT_SKILL_INSTRUCTIONS_WARN_CHARS", "20000"))
    )


# Global settings instance
settings = Settings()
