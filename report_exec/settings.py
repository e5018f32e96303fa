"""Runtime settings and logging setup.

Settings come from the environment:
- REPORT_EXEC_DEFINITIONS_DIR: directory of plugin descriptor YAML files (default ./plugins)
- REPORT_EXEC_LOG_LEVEL: logging level name (default INFO)
"""

import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ExecutorSettings(BaseModel):
    """Settings for report preparation."""

    definitions_dir: Path = Field(
        default=Path("plugins"),
        description="Directory holding plugin descriptor YAML files",
    )
    log_level: str = Field(default="INFO", description="Logging level name")
    log_format: str = LOG_FORMAT

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


def load_settings(**overrides) -> ExecutorSettings:
    """Build settings from the environment, with explicit overrides on top.

    Overrides whose value is None are ignored, so argparse results can be
    passed straight through.
    """
    values: dict = {}
    definitions_dir = os.environ.get("REPORT_EXEC_DEFINITIONS_DIR")
    if definitions_dir:
        values["definitions_dir"] = Path(definitions_dir)
    log_level = os.environ.get("REPORT_EXEC_LOG_LEVEL")
    if log_level:
        values["log_level"] = log_level
    values.update({k: v for k, v in overrides.items() if v is not None})
    return ExecutorSettings(**values)


def configure_logging(settings: Optional[ExecutorSettings] = None) -> None:
    """Configure root logging once for command-line use."""
    settings = settings or load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format=settings.log_format,
    )
