"""Version information for fiducial_odom."""

__version__ = "0.1.0"
