"""
Schema Validation

Structural validation of YAML documents against the bundled JSON schemas.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Optional

from jsonschema import Draft202012Validator

from gitagent.config import settings
from gitagent.errors import SchemaNotFoundError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _load_schema(schema_path: Path) -> dict[str, Any]:
    if not schema_path.exists():
        raise SchemaNotFoundError(f"Schema missing at {schema_path}")
    return json.loads(schema_path.read_text(encoding="utf-8"))


def load_schema(name: str, schema_dir: Optional[Path] = None) -> dict[str, Any]:
    """Load '<name>.schema.json' from the schema directory."""
    schema_dir = Path(schema_dir or settings.schema_dir)
    return _load_schema((schema_dir / f"{name}.schema.json").resolve())


class SchemaValidator:
    """
    Validates documents against one named schema.

    Example:
        >>> SchemaValidator("hooks").errors({"hooks": {}})
        []
    """

    def __init__(self, name: str, schema_dir: Optional[Path] = None):
        self.name = name
        self.validator = Draft202012Validator(load_schema(name, schema_dir))

    def _iter_error_messages(self, data: Any) -> Iterable[str]:
        for error in sorted(self.validator.iter_errors(data), key=lambda e: list(map(str, e.path))):
            path = "/" + "/".join(str(part) for part in error.path)
            yield f"{path}: {error.message}"

    def errors(self, data: Any) -> list[str]:
        """All schema errors for a document, sorted by path."""
        messages = list(self._iter_error_messages(data))
        if messages:
            logger.debug(f"{self.name}: {len(messages)} schema errors")
        return messages

    def is_valid(self, data: Any) -> bool:
        return self.validator.is_valid(data)
