"""
Transform broadcasting for fiducial_odom.

Consumers that work on the frame graph rather than on odometry messages
receive each estimate as a transform from the bin frame to the footprint frame.
"""

from abc import ABC, abstractmethod
from typing import Optional

from fiducial_odom.perception.pose.frames import RigidTransform
from fiducial_odom.tf.buffer import FrameBuffer


class ITransformBroadcaster(ABC):
    """Abstract transform broadcaster."""

    @abstractmethod
    def send_transform(self, transform: RigidTransform) -> None:
        """
        Broadcast a stamped transform.

        Args:
            transform: Transform with frame_id and child_frame_id set.
        """
        pass


class RecordingBroadcaster(ITransformBroadcaster):
    """
    Broadcaster that keeps every sent transform.

    Optionally forwards transforms into a FrameBuffer so they become
    available to later lookups.
    """

    def __init__(self, buffer: Optional[FrameBuffer] = None) -> None:
        self._buffer = buffer
        self._sent: list[RigidTransform] = []

    def send_transform(self, transform: RigidTransform) -> None:
        self._sent.append(transform)
        if self._buffer is not None:
            self._buffer.set_transform(transform)

    @property
    def sent(self) -> list[RigidTransform]:
        """Transforms broadcast so far."""
        return list(self._sent)

    @property
    def latest(self) -> Optional[RigidTransform]:
        """Most recently broadcast transform."""
        return self._sent[-1] if self._sent else None
