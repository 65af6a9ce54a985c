"""
Time utilities for fiducial_odom.

Provides clocks and a timing context manager.
"""

import time
from typing import Callable

Clock = Callable[[], float]


def get_timestamp_s() -> float:
    """
    Get current timestamp in seconds (UTC epoch).

    Returns:
        Seconds since Unix epoch.
    """
    return time.time()


class Timer:
    """
    Context manager for timing code blocks.

    Example:
        with Timer() as t:
            node.process(frame, calibration)
        print(f"Elapsed: {t.elapsed_ms:.2f} ms")
    """

    def __init__(self) -> None:
        self._start: float = 0.0
        self._end: float = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args: object) -> None:
        self._end = time.perf_counter()

    @property
    def elapsed_s(self) -> float:
        """Elapsed time in seconds."""
        if self._end == 0.0:
            return time.perf_counter() - self._start
        return self._end - self._start

    @property
    def elapsed_ms(self) -> float:
        """Elapsed time in milliseconds."""
        return self.elapsed_s * 1000.0
