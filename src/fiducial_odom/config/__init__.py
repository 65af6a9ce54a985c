"""Configuration module for fiducial_odom."""

from fiducial_odom.config.schema import (
    DetectorConfig,
    FiducialOdomConfig,
    FramesConfig,
    LogLevel,
    OutputConfig,
    ProjectConfig,
    StaticTransformConfig,
    TransformsConfig,
)
from fiducial_odom.config.loader import get_default_config, load_config, save_config
from fiducial_odom.config.validation import ConfigurationError, validate_config

__all__ = [
    "DetectorConfig",
    "FiducialOdomConfig",
    "FramesConfig",
    "LogLevel",
    "OutputConfig",
    "ProjectConfig",
    "StaticTransformConfig",
    "TransformsConfig",
    "get_default_config",
    "load_config",
    "save_config",
    "ConfigurationError",
    "validate_config",
]
