"""
Frame lookup for fiducial_odom.

IFrameQuery is the interface the odometry node uses to obtain the transform
between two named frames. FrameBuffer is a small in-memory implementation
holding static transforms and recent dynamic transforms for direct
parent/child pairs.
"""

from abc import ABC, abstractmethod
from collections import deque
from threading import Lock
from typing import Optional

from fiducial_odom.errors import TransformUnavailable
from fiducial_odom.perception.pose.frames import RigidTransform
from fiducial_odom.utils.time import Clock, get_timestamp_s


class IFrameQuery(ABC):
    """Abstract frame graph query."""

    @abstractmethod
    def lookup_transform(
        self,
        target_frame: str,
        source_frame: str,
        at: Optional[float] = None,
    ) -> RigidTransform:
        """
        Look up the transform that maps data from source_frame into target_frame.

        Args:
            target_frame: Frame the data should be expressed in.
            source_frame: Frame the data is currently expressed in.
            at: Query time in seconds; None means the latest available.

        Returns:
            Transform with frame_id=target_frame, child_frame_id=source_frame.

        Raises:
            TransformUnavailable: If a frame is unknown or the data expired.
        """
        pass


class FrameBuffer(IFrameQuery):
    """
    In-memory transform storage.

    Static transforms never expire. Dynamic transforms keep a short history
    per parent/child pair and are valid for cache_time_s seconds.
    """

    def __init__(
        self,
        cache_time_s: float = 10.0,
        history: int = 100,
        clock: Clock = get_timestamp_s,
    ) -> None:
        """
        Initialize frame buffer.

        Args:
            cache_time_s: Maximum age of a dynamic transform.
            history: Samples kept per dynamic parent/child pair.
            clock: Time source used for "latest" expiry checks.
        """
        if cache_time_s <= 0:
            raise ValueError("cache_time_s must be positive")

        self._cache_time_s = cache_time_s
        self._history = history
        self._clock = clock
        self._static: dict[tuple[str, str], RigidTransform] = {}
        self._dynamic: dict[tuple[str, str], deque[RigidTransform]] = {}
        self._lock = Lock()

    def set_transform(self, transform: RigidTransform, static: bool = False) -> None:
        """
        Store a transform.

        Args:
            transform: Transform with frame_id (parent) and child_frame_id set.
            static: If True, the transform never expires.
        """
        if not transform.frame_id or not transform.child_frame_id:
            raise ValueError("transform must name both frame_id and child_frame_id")
        if transform.frame_id == transform.child_frame_id:
            raise ValueError("transform must link two different frames")

        key = (transform.frame_id, transform.child_frame_id)
        with self._lock:
            if static:
                self._static[key] = transform
                return
            samples = self._dynamic.setdefault(key, deque(maxlen=self._history))
            if samples and transform.stamp < samples[-1].stamp:
                raise ValueError(
                    f"out-of-order transform for {key}: "
                    f"{transform.stamp} < {samples[-1].stamp}"
                )
            samples.append(transform)

    def lookup_transform(
        self,
        target_frame: str,
        source_frame: str,
        at: Optional[float] = None,
    ) -> RigidTransform:
        if target_frame == source_frame:
            return RigidTransform.identity(
                target_frame, source_frame, stamp=self._clock() if at is None else at
            )

        with self._lock:
            direct = self._find(target_frame, source_frame, at)
            if direct is not None:
                return direct
            inverse = self._find(source_frame, target_frame, at)
            if inverse is not None:
                return inverse.inverse()

            known = self._known_frames()

        if target_frame not in known or source_frame not in known:
            missing = target_frame if target_frame not in known else source_frame
            reason = f"frame '{missing}' does not exist"
        else:
            reason = "no recent transform links these frames"
        raise TransformUnavailable(target_frame, source_frame, reason)

    def _find(
        self, parent: str, child: str, at: Optional[float]
    ) -> Optional[RigidTransform]:
        key = (parent, child)
        if key in self._static:
            return self._static[key]

        samples = self._dynamic.get(key)
        if not samples:
            return None

        reference = self._clock() if at is None else at
        if at is None:
            candidate = samples[-1]
        else:
            candidate = min(samples, key=lambda s: abs(s.stamp - at))

        if abs(reference - candidate.stamp) > self._cache_time_s:
            return None
        return candidate

    def _known_frames(self) -> set[str]:
        frames: set[str] = set()
        for parent, child in list(self._static) + list(self._dynamic):
            frames.add(parent)
            frames.add(child)
        return frames

    @property
    def frames(self) -> set[str]:
        """Names of all frames with at least one stored transform."""
        with self._lock:
            return self._known_frames()
