"""Configuration file loading (leadtime_config.yaml)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from . import context
from .engine.config import EngineConfig

CONFIG_FILENAME = "leadtime_config.yaml"


def load_config(config_path: Path | str) -> EngineConfig:
    """Load engine configuration from a YAML file.

    Args:
        config_path: Path to leadtime_config.yaml

    Returns:
        EngineConfig with calendar and capacity settings

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the config is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open(encoding="utf-8") as f:
        data: Any = yaml.safe_load(f)

    if data is None:
        raise ValueError("Empty configuration file")
    if not isinstance(data, dict):
        raise ValueError("Configuration must be a mapping")

    unknown = set(data) - {"calendar", "capacity"}  # type: ignore[arg-type]
    if unknown:
        raise ValueError(f"Unknown configuration section(s): {', '.join(sorted(unknown))}")

    try:
        return EngineConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ValueError(f"Invalid configuration in {config_path}: {e}") from e


def discover_config(
    task_path: Path | None = None,
    config_path: Path | None = None,
) -> EngineConfig:
    """Find and load configuration, falling back to defaults.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. task file directory / leadtime_config.yaml
    4. Current directory / leadtime_config.yaml
    """
    if config_path is not None:
        return load_config(config_path)

    ctx_config = context.get_config_path()
    if ctx_config is not None:
        return load_config(ctx_config)

    if task_path is not None:
        dir_config = Path(task_path).parent / CONFIG_FILENAME
        if dir_config.exists():
            return load_config(dir_config)

    cwd_config = Path(CONFIG_FILENAME)
    if cwd_config.exists():
        return load_config(cwd_config)

    return EngineConfig()
