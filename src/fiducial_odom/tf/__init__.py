"""Frame graph lookup and broadcasting for fiducial_odom."""

from fiducial_odom.tf.buffer import FrameBuffer, IFrameQuery
from fiducial_odom.tf.broadcaster import ITransformBroadcaster, RecordingBroadcaster

__all__ = [
    "FrameBuffer",
    "IFrameQuery",
    "ITransformBroadcaster",
    "RecordingBroadcaster",
]
