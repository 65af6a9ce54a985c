"""
Camera input types for fiducial_odom.

A detection request pairs one captured image with the calibration of the
camera that produced it.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np
from numpy.typing import NDArray

from fiducial_odom.utils.io import load_yaml


@dataclass
class CameraFrame:
    """
    Single camera frame with metadata.

    Attributes:
        image: Image as numpy array, shape (H, W) or (H, W, C).
        timestamp_s: Capture timestamp in seconds.
        frame_id: Sequential frame identifier.
        meta: Additional metadata dictionary.
    """

    image: NDArray[Any]
    timestamp_s: float
    frame_id: int
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def height(self) -> int:
        """Image height in pixels."""
        return int(self.image.shape[0])

    @property
    def width(self) -> int:
        """Image width in pixels."""
        return int(self.image.shape[1])


@dataclass
class CameraCalibration:
    """
    Camera intrinsic calibration paired with each frame.

    Attributes:
        K: 3x3 camera matrix.
        dist_coeffs: Distortion coefficients (k1, k2, p1, p2, k3, ...).
        width: Image width.
        height: Image height.
    """

    K: NDArray[np.float64]
    dist_coeffs: NDArray[np.float64]
    width: int
    height: int

    @classmethod
    def from_yaml(cls, path: Path) -> "CameraCalibration":
        """
        Load calibration from YAML file.

        Expected format:
            camera_matrix: [[fx, 0, cx], [0, fy, cy], [0, 0, 1]]
            dist_coeffs: [k1, k2, p1, p2, k3]
            image_width: 1280
            image_height: 720

        Args:
            path: Path to YAML file.

        Returns:
            CameraCalibration instance.
        """
        data = load_yaml(path)

        K = np.array(data["camera_matrix"], dtype=np.float64)
        dist_coeffs = np.array(
            data.get("dist_coeffs", [0, 0, 0, 0, 0]), dtype=np.float64
        )
        width = int(data.get("image_width", 1280))
        height = int(data.get("image_height", 720))

        return cls(K=K, dist_coeffs=dist_coeffs, width=width, height=height)

    @classmethod
    def default(cls, width: int = 1280, height: int = 720) -> "CameraCalibration":
        """
        Create default calibration (approximate, for testing and replay).

        Args:
            width: Image width.
            height: Image height.

        Returns:
            CameraCalibration with a pinhole model and no distortion.
        """
        fx = fy = width
        cx, cy = width / 2, height / 2

        K = np.array(
            [
                [fx, 0, cx],
                [0, fy, cy],
                [0, 0, 1],
            ],
            dtype=np.float64,
        )

        return cls(
            K=K,
            dist_coeffs=np.zeros(5, dtype=np.float64),
            width=width,
            height=height,
        )
