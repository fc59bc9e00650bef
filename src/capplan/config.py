"""Configuration loading for capplan.

A single optional YAML file (capplan_config.yaml) controls where the planner
state is stored, the load warning band and the default timeline width.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from . import context
from .exceptions import ConfigError
from .load import DEFAULT_WARNING_RATIO

CONFIG_FILENAME = "capplan_config.yaml"

# Key under which the snapshot blob is kept in the key-value store
STORAGE_KEY = "gantt_capacity_planner_v1"

MIN_WEEKS_TO_SHOW = 2
MAX_WEEKS_TO_SHOW = 5


class StorageConfig(BaseModel):
    """Where the planner state blob lives."""

    path: Path = Path("capplan_store.json")
    key: str = STORAGE_KEY


class LoadConfig(BaseModel):
    """Load status classification settings."""

    warning_ratio: float = Field(default=DEFAULT_WARNING_RATIO, gt=0)


class TimelineConfig(BaseModel):
    """Default visible timeline window."""

    weeks_to_show: int = 3

    @field_validator("weeks_to_show")
    @classmethod
    def validate_weeks(cls, v: int) -> int:
        """Ensure the window width is within the supported range."""
        if not MIN_WEEKS_TO_SHOW <= v <= MAX_WEEKS_TO_SHOW:
            raise ValueError(
                f"weeks_to_show must be between {MIN_WEEKS_TO_SHOW} and {MAX_WEEKS_TO_SHOW}"
            )
        return v


class PlannerConfig(BaseModel):
    """Complete capplan configuration."""

    storage: StorageConfig = StorageConfig()
    load: LoadConfig = LoadConfig()
    timeline: TimelineConfig = TimelineConfig()


def load_config(config_path: Path | str) -> PlannerConfig:
    """Load configuration from a YAML file.

    Relative storage paths are resolved against the config file's directory.

    Raises:
        ConfigError: If the file is missing, is not valid YAML, or fails validation
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with config_path.open() as f:
            data: dict[str, Any] | None = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    try:
        config = PlannerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {config_path}: {e}") from e

    if not config.storage.path.is_absolute():
        config.storage.path = config_path.parent / config.storage.path
    return config


def discover_config(config_path: Path | None = None) -> PlannerConfig:
    """Find and load the configuration, falling back to defaults.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. Current directory / capplan_config.yaml
    """
    if config_path is not None:
        return load_config(config_path)

    ctx_config = context.get_config_path()
    if ctx_config is not None:
        return load_config(ctx_config)

    cwd_config = Path(CONFIG_FILENAME)
    if cwd_config.exists():
        return load_config(cwd_config)

    return PlannerConfig()
