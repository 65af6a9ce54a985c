"""
Pydantic configuration schema for fiducial_odom.

This module defines all configuration models with strict validation,
enum fields and default values.
"""

from enum import Enum
from pathlib import Path
from typing import Optional
import uuid

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Log level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# ============================================================================
# Sub-configuration Models
# ============================================================================


class ProjectConfig(BaseModel):
    """Project-level configuration."""

    name: str = Field(default="fiducial-odom", description="Project name")
    run_id: str = Field(
        default="auto", description="Run identifier (auto generates UUID)"
    )
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    json_logs: bool = Field(default=False, description="Emit JSON log lines")

    @field_validator("run_id", mode="before")
    @classmethod
    def generate_run_id(cls, v: str) -> str:
        """Generate UUID if run_id is 'auto'."""
        if v == "auto":
            return str(uuid.uuid4())[:8]
        return v


class FramesConfig(BaseModel):
    """Reference frame names."""

    camera_frame: str = Field(
        default="camera_link", description="Reference frame of the camera"
    )
    footprint_frame: str = Field(
        default="footprint", description="Reference frame of the platform footprint"
    )
    bin_frame: str = Field(
        default="bin_link", description="Reference frame of the bin (target)"
    )
    odometry_frame: str = Field(default="odom", description="Reference frame of odom")


class DetectorConfig(BaseModel):
    """Detector request configuration."""

    timeout_s: Optional[float] = Field(
        default=5.0, gt=0, description="Max wait per detection request (None = forever)"
    )


class StaticTransformConfig(BaseModel):
    """Static transform seeded into the frame buffer."""

    frame_id: str = Field(description="Parent (target) frame")
    child_frame_id: str = Field(description="Child (source) frame")
    translation: list[float] = Field(
        default=[0.0, 0.0, 0.0], min_length=3, max_length=3, description="x, y, z"
    )
    rotation: list[float] = Field(
        default=[0.0, 0.0, 0.0, 1.0],
        min_length=4,
        max_length=4,
        description="Quaternion x, y, z, w",
    )


class TransformsConfig(BaseModel):
    """Frame lookup configuration."""

    backoff_s: float = Field(
        default=1.0, ge=0, description="Pause after a failed lookup"
    )
    cache_time_s: float = Field(
        default=10.0, gt=0, description="Age after which dynamic transforms expire"
    )
    static: list[StaticTransformConfig] = Field(
        default_factory=list, description="Static transforms"
    )


class OutputConfig(BaseModel):
    """Estimate output configuration."""

    odometry_path: Optional[Path] = Field(
        default=None, description="JSON lines file for odometry estimates"
    )
    broadcast_transform: bool = Field(
        default=True, description="Mirror each estimate as a transform broadcast"
    )


# ============================================================================
# Root Configuration Model
# ============================================================================


class FiducialOdomConfig(BaseModel):
    """Root configuration model for fiducial_odom."""

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    frames: FramesConfig = Field(default_factory=FramesConfig)
    detector: DetectorConfig = Field(default_factory=DetectorConfig)
    transforms: TransformsConfig = Field(default_factory=TransformsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    model_config = {"extra": "forbid"}
