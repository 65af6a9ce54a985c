"""Odometry estimation module for fiducial_odom."""

from fiducial_odom.odometry.corrector import PoseCorrector
from fiducial_odom.odometry.velocity import VelocityEstimator, uninitialized_pose
from fiducial_odom.odometry.assembler import (
    COVARIANCE_DIAGONAL,
    AssemblyResult,
    EstimatorState,
    OdometryAssembler,
    OdometryEstimate,
    Skipped,
    SkipReason,
    fixed_covariance,
)
from fiducial_odom.odometry.publishers import (
    IOdometryPublisher,
    InMemoryOdometryPublisher,
    JsonLinesPublisher,
)
from fiducial_odom.odometry.node import FiducialOdometryNode

__all__ = [
    "PoseCorrector",
    "VelocityEstimator",
    "uninitialized_pose",
    "COVARIANCE_DIAGONAL",
    "AssemblyResult",
    "EstimatorState",
    "OdometryAssembler",
    "OdometryEstimate",
    "Skipped",
    "SkipReason",
    "fixed_covariance",
    "IOdometryPublisher",
    "InMemoryOdometryPublisher",
    "JsonLinesPublisher",
    "FiducialOdometryNode",
]
