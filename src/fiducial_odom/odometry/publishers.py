"""
Odometry output for fiducial_odom.

Publishers receive every emitted estimate.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Optional

from fiducial_odom.odometry.assembler import OdometryEstimate


class IOdometryPublisher(ABC):
    """Abstract odometry publisher."""

    @abstractmethod
    def publish(self, estimate: OdometryEstimate) -> None:
        """
        Publish an estimate.

        Args:
            estimate: Odometry estimate to publish.
        """
        pass

    def close(self) -> None:
        """Release publisher resources."""


class InMemoryOdometryPublisher(IOdometryPublisher):
    """Keeps published estimates in a list."""

    def __init__(self) -> None:
        self._published: list[OdometryEstimate] = []

    def publish(self, estimate: OdometryEstimate) -> None:
        self._published.append(estimate)

    @property
    def published(self) -> list[OdometryEstimate]:
        """Estimates published so far."""
        return list(self._published)


class JsonLinesPublisher(IOdometryPublisher):
    """Writes one JSON object per estimate to a file or stream."""

    def __init__(
        self,
        path: Optional[Path] = None,
        stream: Optional[IO[str]] = None,
    ) -> None:
        """
        Initialize JSON lines publisher.

        Args:
            path: Output file (created or truncated).
            stream: Already open text stream. Used when path is None.
        """
        if (path is None) == (stream is None):
            raise ValueError("exactly one of path or stream is required")

        self._owns_stream = path is not None
        if path is not None:
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._stream: IO[str] = open(path, "w", encoding="utf-8")
        else:
            self._stream = stream  # type: ignore[assignment]
        self._count = 0

    def publish(self, estimate: OdometryEstimate) -> None:
        self._stream.write(json.dumps(estimate.to_dict()) + "\n")
        self._stream.flush()
        self._count += 1

    def close(self) -> None:
        if self._owns_stream and not self._stream.closed:
            self._stream.close()

    def __enter__(self) -> "JsonLinesPublisher":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def count(self) -> int:
        """Number of estimates written."""
        return self._count
