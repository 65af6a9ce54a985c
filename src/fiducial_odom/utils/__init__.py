"""Utility modules for fiducial_odom."""

from fiducial_odom.utils.time import Clock, Timer, get_timestamp_s
from fiducial_odom.utils.math3d import (
    IDENTITY_QUATERNION,
    is_zero_quaternion,
    normalize_quaternion,
    quaternion_inverse,
    quaternion_multiply,
    quaternion_from_rpy,
    quaternion_to_rpy,
    quaternion_to_rotation_matrix,
    rotation_matrix_to_quaternion,
    rotation_matrix_to_rpy,
    rpy_to_rotation_matrix,
)
from fiducial_odom.utils.io import ensure_dir, load_yaml, save_yaml

__all__ = [
    "Clock",
    "Timer",
    "get_timestamp_s",
    "IDENTITY_QUATERNION",
    "is_zero_quaternion",
    "normalize_quaternion",
    "quaternion_inverse",
    "quaternion_multiply",
    "quaternion_from_rpy",
    "quaternion_to_rpy",
    "quaternion_to_rotation_matrix",
    "rotation_matrix_to_quaternion",
    "rotation_matrix_to_rpy",
    "rpy_to_rotation_matrix",
    "ensure_dir",
    "load_yaml",
    "save_yaml",
]
