"""
Configuration validation for fiducial_odom.

Provides cross-field checks beyond Pydantic schema validation.
"""

from fiducial_odom.config.schema import FiducialOdomConfig


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


def validate_config(config: FiducialOdomConfig) -> None:
    """
    Perform cross-field validation on configuration.

    Args:
        config: FiducialOdomConfig instance to validate.

    Raises:
        ConfigurationError: If validation fails.
    """
    errors: list[str] = []

    errors.extend(_validate_frames(config))
    errors.extend(_validate_transforms(config))

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(
            f"  - {e}" for e in errors
        )
        raise ConfigurationError(error_msg)


def _validate_frames(config: FiducialOdomConfig) -> list[str]:
    """Validate frame names."""
    errors: list[str] = []
    frames = config.frames

    named = {
        "camera_frame": frames.camera_frame,
        "footprint_frame": frames.footprint_frame,
        "bin_frame": frames.bin_frame,
        "odometry_frame": frames.odometry_frame,
    }
    for key, value in named.items():
        if not value.strip():
            errors.append(f"frames.{key} must not be empty")

    # The estimate is published from bin to footprint using a camera lookup
    core = [frames.camera_frame, frames.footprint_frame, frames.bin_frame]
    if len(set(core)) != len(core):
        errors.append(
            "frames.camera_frame, frames.footprint_frame and frames.bin_frame must differ"
        )

    return errors


def _validate_transforms(config: FiducialOdomConfig) -> list[str]:
    """Validate static transforms."""
    errors: list[str] = []

    for index, static in enumerate(config.transforms.static):
        if static.frame_id == static.child_frame_id:
            errors.append(
                f"transforms.static[{index}] links frame '{static.frame_id}' to itself"
            )
        if all(v == 0.0 for v in static.rotation):
            errors.append(f"transforms.static[{index}].rotation must be non-zero")

    return errors
