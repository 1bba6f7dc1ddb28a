"""Run configuration loaded from YAML."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError


class ConfigError(ValueError):
    """The configuration file is missing or invalid."""


class RunConfig(BaseModel):
    """Settings for one allocation run. Command-line options override these."""

    model_config = ConfigDict(extra="forbid")

    files_path: Optional[Path] = None
    nodes_path: Optional[Path] = None
    output_path: Optional[Path] = None
    verify_order: bool = False
    summary: bool = False
    metrics_json: Optional[Path] = None
    metrics_csv: Optional[Path] = None
    notify: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"


def load_config(path: Path | str) -> RunConfig:
    """
    Load a RunConfig from a YAML mapping. An empty file gives the defaults.

    Raises:
        ConfigError: If the file cannot be read, is not a mapping, or has
            invalid or unknown keys
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text())
    except OSError as exc:
        raise ConfigError(f"Cannot read config file '{path}' ({exc.strerror})") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config file '{path}': {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file '{path}' must contain a mapping")

    try:
        return RunConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file '{path}': {exc}") from exc
