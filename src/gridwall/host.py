"""HostLoop — fixed-rate frame driver standing in for a game loop.

Each frame calls ``controller.tick()`` once, measures how long the engine
held the frame, then sleeps out the rest of the frame period.  Runs on
the caller's thread until the session leaves GENERATING.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

from .placement.session import SessionController


@dataclass
class FrameStats:
    """Per-run frame timing collected by HostLoop."""

    frames: int = 0
    work_seconds: list[float] = field(default_factory=list)

    @property
    def longest_frame(self) -> float:
        return max(self.work_seconds, default=0.0)

    @property
    def total_work(self) -> float:
        return sum(self.work_seconds)

    def to_dict(self) -> dict:
        return {
            "frames": self.frames,
            "longest_frame_ms": round(self.longest_frame * 1000.0, 3),
            "total_work_ms": round(self.total_work * 1000.0, 3),
        }


class HostLoop:
    """Ticks a SessionController at ``tick_rate_hz`` until it finishes."""

    def __init__(
        self,
        controller: SessionController,
        tick_rate_hz: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if tick_rate_hz <= 0:
            raise ValueError(f"tick_rate_hz must be > 0, got {tick_rate_hz}")
        self._controller = controller
        self._period = 1.0 / tick_rate_hz
        self._clock = clock
        self._sleep = sleep

    def run(self, max_frames: int | None = None) -> FrameStats:
        stats = FrameStats()
        while self._controller.is_generating():
            if max_frames is not None and stats.frames >= max_frames:
                break
            frame_start = self._clock()
            self._controller.tick()
            worked = self._clock() - frame_start
            stats.frames += 1
            stats.work_seconds.append(worked)
            if self._controller.is_generating() and worked < self._period:
                self._sleep(self._period - worked)
        return stats
