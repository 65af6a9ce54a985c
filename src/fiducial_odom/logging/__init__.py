"""Logging module for fiducial_odom."""

from fiducial_odom.logging.setup import configure_logging, get_logger
from fiducial_odom.logging.telemetry import CycleTelemetry, TelemetryCollector

__all__ = [
    "configure_logging",
    "get_logger",
    "CycleTelemetry",
    "TelemetryCollector",
]
