"""
Configuration loader for fiducial_odom.

Handles YAML loading, schema construction and cross-field validation.
"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from fiducial_odom.config.schema import FiducialOdomConfig
from fiducial_odom.config.validation import ConfigurationError, validate_config
from fiducial_odom.utils.io import load_yaml, save_yaml


def load_config(config_path: Path) -> FiducialOdomConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Validated FiducialOdomConfig instance.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        ConfigurationError: If the configuration is invalid.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        raw_config = load_yaml(config_path)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

    try:
        config = FiducialOdomConfig(**raw_config)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e

    validate_config(config)

    return config


def save_config(config: FiducialOdomConfig, output_path: Path) -> None:
    """
    Save configuration to a YAML file.

    Args:
        config: FiducialOdomConfig instance to save.
        output_path: Path to the output YAML file.
    """
    save_yaml(config.model_dump(mode="json"), Path(output_path))


def get_default_config() -> FiducialOdomConfig:
    """
    Get default configuration with all default values.

    Returns:
        FiducialOdomConfig instance with defaults.
    """
    return FiducialOdomConfig()
