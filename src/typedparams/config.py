"""Configuration loading for typedparams.

The active configuration is process-wide. It is read when a caster is created,
so it should be set once at startup, before request handling begins.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import ParamsConfigModel

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TYPEDPARAMS_CONFIG"
DEFAULT_CONFIG_FILENAME = "typedparams.yaml"

_active_config: ParamsConfigModel | None = None


def load_config(config_path: Path | str | None = None) -> ParamsConfigModel:
    """Load configuration from a YAML or JSON file.

    Args:
        config_path: Optional path to the config file.
                    If not provided, looks for:
                    1. TYPEDPARAMS_CONFIG environment variable
                    2. ./typedparams.yaml

    Returns:
        ParamsConfigModel with the loaded settings, or the defaults when no
        file is found

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist
        ValueError: If the file cannot be parsed or the config is invalid
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            config_path = Path(env_path)
        else:
            candidate = Path.cwd() / DEFAULT_CONFIG_FILENAME
            if not candidate.exists():
                logger.info("No typedparams config file found, using defaults")
                return ParamsConfigModel()
            config_path = candidate

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"typedparams config file not found at {config_path}")

    logger.debug(f"Loading typedparams config from: {config_path}")
    raw_config = _read_config_file(config_path)

    if not raw_config:
        logger.info(f"Empty config file {config_path}, using defaults")
        return ParamsConfigModel()
    if not isinstance(raw_config, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    # Accept either a bare mapping or one nested under a "typedparams" key
    section = raw_config.get("typedparams", raw_config)

    try:
        config = ParamsConfigModel.model_validate(section)
    except ValidationError as e:
        raise ValueError(f"Invalid typedparams config: {e}") from e

    logger.debug(f"Loaded typedparams config: {config}")
    return config


def _read_config_file(config_path: Path) -> Any:
    suffix = config_path.suffix.lower()
    content = config_path.read_text(encoding="utf-8")
    if suffix in (".yaml", ".yml"):
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML config file {config_path}: {e}") from e
    elif suffix == ".json":
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse JSON config file {config_path}: {e}") from e
    else:
        raise ValueError(
            f"Unsupported config file extension: {config_path.suffix}. Use .yaml, .yml, or .json"
        )


def get_config() -> ParamsConfigModel:
    """Return the active configuration, creating the defaults on first use."""
    global _active_config
    if _active_config is None:
        _active_config = ParamsConfigModel()
    return _active_config


def set_config(config: ParamsConfigModel) -> None:
    """Replace the active configuration."""
    global _active_config
    _active_config = config
    logger.info(f"typedparams config set: {config}")


def reset_config() -> None:
    """Drop the active configuration so the defaults apply again."""
    global _active_config
    _active_config = None
