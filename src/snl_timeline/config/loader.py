"""YAML configuration loader for the timeline store.

A config file is optional; when present it looks like::

    timeline:
      database: timeline
      partition_scheme: flat
      retention_days: 30
    logging:
      verbose: true

Values given in the file take precedence over environment variables.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from snl_timeline.config.exceptions import ConfigurationError
from snl_timeline.config.settings import LoggingSettings, Settings, TimelineSettings
from snl_timeline.config.validators import FieldValidator
from snl_timeline.logging_config import get_logger

__all__ = ["load_config", "load_yaml_file"]

logger = get_logger(__name__)

_SECTIONS = ("timeline", "logging")


def load_yaml_file(path: Path, label: str = "Config file") -> Any:
    """Load a YAML file and return the parsed document.

    Args:
        path: Path to the YAML file.
        label: Human-readable label for error messages.

    Returns:
        The parsed YAML document.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the file is empty or contains invalid YAML.

    """
    if not path.exists():
        raise FileNotFoundError(f"{label} not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML file {path}: {e}") from e

    if data is None:
        raise ConfigurationError(f"Empty YAML file: {path}")

    return data


def load_config(path: Path | str) -> Settings:
    """Load settings from a YAML config file.

    Args:
        path: Path to the YAML file.

    Returns:
        Settings built from the file, falling back to environment
        variables and defaults for anything the file leaves out.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the file is malformed or holds invalid values.

    """
    path = Path(path)
    v = FieldValidator(load_yaml_file(path), str(path))
    v.reject_unknown(_SECTIONS)

    timeline_data = v.section("timeline", TimelineSettings)
    logging_data = v.section("logging", LoggingSettings)

    try:
        settings = Settings(
            timeline=TimelineSettings(**timeline_data),
            logging=LoggingSettings(**logging_data),
        )
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

    logger.debug(
        "config_loaded",
        path=str(path),
        partition_scheme=settings.timeline.partition_scheme.value,
    )
    return settings
