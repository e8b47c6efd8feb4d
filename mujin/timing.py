"""Frame rate limiting and measurement."""

from __future__ import annotations

import time
from collections import deque
from typing import Callable, Optional

__all__ = ["FPSLimiter"]

_NUM_SAMPLES = 10
_FALLBACK_FPS = 60.0


def _ticks_ms() -> float:
    return time.monotonic() * 1000.0


def _sleep_ms(ms: int) -> None:
    time.sleep(ms / 1000.0)


class FPSLimiter:
    """Caps the frame rate and reports a running average of the FPS.

    ``clock`` returns the time in milliseconds; ``sleep`` waits a number
    of milliseconds.
    """

    def __init__(
        self,
        max_fps: float = 60.0,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[int], None]] = None,
    ) -> None:
        self._max_fps = float(max_fps)
        self._clock = clock or _ticks_ms
        self._sleep = sleep or _sleep_ms
        self._start_ticks = 0.0
        self._prev_ticks: Optional[float] = None
        self._samples: deque[float] = deque(maxlen=_NUM_SAMPLES)
        self._frame_time = 0.0
        self._fps = 0.0

    @property
    def max_fps(self) -> float:
        return self._max_fps

    @property
    def fps(self) -> float:
        return self._fps

    @property
    def frame_time(self) -> float:
        return self._frame_time

    def set_max_fps(self, max_fps: float) -> None:
        self._max_fps = float(max_fps)

    def begin(self) -> None:
        """Mark the start of a frame."""
        self._start_ticks = self._clock()

    def end(self) -> float:
        """Finish the frame, sleeping off any time left; return the FPS."""
        self._calculate_fps()
        frame_ticks = self._clock() - self._start_ticks
        budget = 1000.0 / self._max_fps
        if budget > frame_ticks:
            self._sleep(int(budget - frame_ticks))
        return self._fps

    def _calculate_fps(self) -> None:
        current = self._clock()
        if self._prev_ticks is None:
            self._prev_ticks = current
        self._frame_time = current - self._prev_ticks
        self._prev_ticks = current
        self._samples.append(self._frame_time)

        average = sum(self._samples) / len(self._samples)
        self._fps = 1000.0 / average if average > 0 else _FALLBACK_FPS