"""
Configuration for the Registrar records engine.

A ``RegistrarConfig`` is built once at process start and handed to the services
that need it. It is frozen, so one instance can be shared freely.
"""

import logging
import os
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)

# properties key -> field name
PROPERTY_KEYS = {
    "max.credits.per.semester": "max_credits_per_semester",
    "max.course.enrollment": "max_course_enrollment",
    "data.directory": "data_directory",
    "backup.directory": "backup_directory",
}


class RegistrarConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_credits_per_semester: int = Field(default=24, gt=0)
    max_course_enrollment: int = Field(default=50, gt=0)
    data_directory: str = Field(default="data", min_length=1)
    backup_directory: str = Field(default="backups", min_length=1)


def parse_properties(text: str) -> Dict[str, str]:
    """Parse ``key=value`` / ``key: value`` lines, skipping blanks and ``#``/``!`` comments."""
    properties: Dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line[0] in "#!":
            continue
        positions = [pos for pos in (line.find("="), line.find(":")) if pos != -1]
        if not positions:
            properties[line] = ""
            continue
        split_at = min(positions)
        properties[line[:split_at].strip()] = line[split_at + 1:].strip()
    return properties


def load_config(path: Optional[str] = None) -> RegistrarConfig:
    """
    Build a config from a properties file.

    Unknown keys are ignored. A missing file, or values that fail validation,
    fall back to the defaults with a logged warning.
    """
    if path is None:
        return RegistrarConfig()

    if not os.path.isfile(path):
        logger.warning("Configuration file %s not found, using defaults", path)
        return RegistrarConfig()

    with open(path, "r", encoding="utf-8") as f:
        properties = parse_properties(f.read())

    values = {field: properties[key] for key, field in PROPERTY_KEYS.items() if key in properties}
    try:
        return RegistrarConfig(**values)
    except PydanticValidationError as e:
        logger.warning("Could not load configuration from %s: %s", path, e)
        logger.warning("Using default configuration values")
        return RegistrarConfig()
