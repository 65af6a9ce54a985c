"""Unit tests for configuration schema and loader."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from fiducial_odom.config.loader import get_default_config, load_config, save_config
from fiducial_odom.config.schema import (
    DetectorConfig,
    FiducialOdomConfig,
    LogLevel,
    ProjectConfig,
    StaticTransformConfig,
)
from fiducial_odom.config.validation import ConfigurationError, validate_config


class TestConfigSchema:
    """Tests for configuration schema validation."""

    def test_default_config(self) -> None:
        """Test that default config is valid."""
        config = FiducialOdomConfig()
        assert config.frames.camera_frame == "camera_link"
        assert config.frames.footprint_frame == "footprint"
        assert config.frames.bin_frame == "bin_link"
        assert config.frames.odometry_frame == "odom"
        assert config.detector.timeout_s == 5.0
        assert config.transforms.backoff_s == 1.0
        assert config.output.broadcast_transform is True

    def test_run_id_auto(self) -> None:
        """Test auto run_id generation."""
        config = ProjectConfig(run_id="auto")
        assert config.run_id != "auto"
        assert len(config.run_id) == 8

    def test_log_level_enum(self) -> None:
        """Test log level parsing."""
        assert ProjectConfig(log_level="DEBUG").log_level == LogLevel.DEBUG

    def test_extra_fields_forbidden(self) -> None:
        """Test unknown top-level keys are rejected."""
        with pytest.raises(ValidationError):
            FiducialOdomConfig(unknown_field="value")

    def test_timeout_positive(self) -> None:
        """Test detector timeout must be positive."""
        with pytest.raises(ValidationError):
            DetectorConfig(timeout_s=0.0)
        assert DetectorConfig(timeout_s=None).timeout_s is None

    def test_static_rotation_length(self) -> None:
        """Test static transform rotation needs four components."""
        with pytest.raises(ValidationError):
            StaticTransformConfig(
                frame_id="camera_link", child_frame_id="footprint", rotation=[0, 0, 1]
            )


class TestConfigValidation:
    """Tests for cross-field validation."""

    def test_default_valid(self) -> None:
        """Test defaults pass validation."""
        validate_config(get_default_config())

    def test_duplicate_frames(self) -> None:
        """Test camera, footprint and bin frames must differ."""
        config = FiducialOdomConfig(frames={"bin_frame": "footprint"})
        with pytest.raises(ConfigurationError, match="must differ"):
            validate_config(config)

    def test_empty_frame_name(self) -> None:
        """Test frame names must be non-empty."""
        config = FiducialOdomConfig(frames={"odometry_frame": " "})
        with pytest.raises(ConfigurationError, match="odometry_frame"):
            validate_config(config)

    def test_zero_rotation(self) -> None:
        """Test static transforms need a non-zero rotation."""
        config = FiducialOdomConfig(
            transforms={
                "static": [
                    {
                        "frame_id": "camera_link",
                        "child_frame_id": "footprint",
                        "rotation": [0.0, 0.0, 0.0, 0.0],
                    }
                ]
            }
        )
        with pytest.raises(ConfigurationError, match="non-zero"):
            validate_config(config)


class TestConfigLoader:
    """Tests for YAML loading."""

    def test_load_repo_default(self) -> None:
        """Test the shipped default configuration loads."""
        path = Path(__file__).parents[2] / "configs" / "default.yaml"
        config = load_config(path)
        assert len(config.transforms.static) == 1
        assert config.transforms.static[0].child_frame_id == "footprint"

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        """Test list root is rejected."""
        path = tmp_path / "config.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_schema_error_wrapped(self, tmp_path: Path) -> None:
        """Test schema violations surface as ConfigurationError."""
        path = tmp_path / "config.yaml"
        path.write_text("transforms:\n  backoff_s: -1\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_save_and_load(self, tmp_path: Path) -> None:
        """Test saved configuration loads back."""
        config = FiducialOdomConfig(
            project={"run_id": "fixed"}, detector={"timeout_s": 2.5}
        )
        path = tmp_path / "saved.yaml"
        save_config(config, path)

        loaded = load_config(path)
        assert loaded.project.run_id == "fixed"
        assert loaded.detector.timeout_s == 2.5
