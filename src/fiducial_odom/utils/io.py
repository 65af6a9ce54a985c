"""
I/O utilities for fiducial_odom.

Provides YAML loading/saving and path helpers.
"""

from pathlib import Path
from typing import Any

import yaml


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Args:
        path: Directory path.

    Returns:
        The same path for chaining.
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def load_yaml(path: Path) -> Any:
    """
    Load YAML file.

    Args:
        path: Path to YAML file.

    Returns:
        Parsed YAML content (empty dict for an empty file).

    Raises:
        FileNotFoundError: If file doesn't exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return {} if data is None else data


def save_yaml(data: Any, path: Path) -> None:
    """
    Save data to YAML file.

    Args:
        data: Data to save.
        path: Output path.
    """
    path = Path(path)
    ensure_dir(path.parent)

    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
