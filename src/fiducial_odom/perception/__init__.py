"""Perception module for fiducial_odom."""

from fiducial_odom.perception.camera import CameraCalibration, CameraFrame

__all__ = ["CameraCalibration", "CameraFrame"]
