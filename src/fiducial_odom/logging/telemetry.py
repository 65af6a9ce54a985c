"""
Telemetry data collection for fiducial_odom.

Records the outcome of every odometry cycle and reports runtime statistics.
"""

from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class CycleTelemetry:
    """Telemetry for one processed camera frame."""

    timestamp_s: float
    outcome: str
    latency_ms: float
    frame_id: int = 0
    pose_x: Optional[float] = None
    pose_y: Optional[float] = None
    pose_z: Optional[float] = None
    speed_mps: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "timestamp_s": self.timestamp_s,
            "outcome": self.outcome,
            "latency_ms": round(self.latency_ms, 2),
            "frame_id": self.frame_id,
            "pose": {
                "x": round(self.pose_x, 4) if self.pose_x is not None else None,
                "y": round(self.pose_y, 4) if self.pose_y is not None else None,
                "z": round(self.pose_z, 4) if self.pose_z is not None else None,
            },
            "speed_mps": round(self.speed_mps, 4) if self.speed_mps is not None else None,
        }


@dataclass
class TelemetryCollector:
    """
    Collects and aggregates cycle telemetry.

    Outcome counts cover the whole run; latency statistics use a sliding
    window of recent cycles.
    """

    window_size: int = 100
    _data: deque[CycleTelemetry] = field(default_factory=deque)
    _outcomes: Counter[str] = field(default_factory=Counter)

    def __post_init__(self) -> None:
        """Initialize deque with correct maxlen."""
        if self.window_size < 1:
            raise ValueError("window_size must be at least 1")
        self._data = deque(maxlen=self.window_size)

    def record(self, data: CycleTelemetry) -> None:
        """Record a cycle."""
        self._data.append(data)
        self._outcomes[data.outcome] += 1

    @property
    def total_cycles(self) -> int:
        """Number of cycles recorded since the last clear."""
        return sum(self._outcomes.values())

    def count(self, outcome: str) -> int:
        """Number of cycles that ended with the given outcome."""
        return self._outcomes[outcome]

    def get_latency_stats(self) -> dict[str, float]:
        """
        Calculate latency statistics over the window.

        Returns:
            Dictionary with mean, min, max latency in ms.
        """
        if not self._data:
            return {"mean": 0.0, "min": 0.0, "max": 0.0}

        latencies = [d.latency_ms for d in self._data]
        return {
            "mean": sum(latencies) / len(latencies),
            "min": min(latencies),
            "max": max(latencies),
        }

    def get_summary(self) -> dict[str, Any]:
        """
        Get summary of collected telemetry.

        Returns:
            Summary dictionary.
        """
        total = self.total_cycles
        emitted = self._outcomes["emitted"]
        return {
            "cycles": total,
            "outcomes": dict(self._outcomes),
            "emission_ratio": round(emitted / total, 3) if total else 0.0,
            "latency": self.get_latency_stats(),
            "latest_outcome": self._data[-1].outcome if self._data else None,
        }

    def clear(self) -> None:
        """Clear all collected data."""
        self._data.clear()
        self._outcomes.clear()
