"""Time-to-angle animation for a wheel spin.

A spin is fully described by its start angle, target angle, start time
and duration; the angle at any frame timestamp is a pure function of
those. Tick detection compares slice indices of the current angle and
the angle at the last tick.
"""

import math
import random
from dataclasses import dataclass
from typing import Optional

from luckywheel.animation.easing import Easing, interpolate

DEFAULT_DURATION_MS = 8000.0
MIN_EXTRA_ROTATIONS = 12.0
EXTRA_ROTATION_SPREAD = 5.0


def pick_target_angle(
    current_angle: float,
    rng: Optional[random.Random] = None,
    min_rotations: float = MIN_EXTRA_ROTATIONS,
    rotation_spread: float = EXTRA_ROTATION_SPREAD,
) -> float:
    """Choose where a spin starting at current_angle will stop.

    Adds between min_rotations and min_rotations + rotation_spread full
    turns (upper bound excluded) plus a uniform offset in [0, 360).
    """
    rng = rng or random.Random()
    rotations = min_rotations + rng.random() * rotation_spread
    offset = rng.random() * 360.0
    return current_angle + rotations * 360.0 + offset


@dataclass(frozen=True)
class RotationFrame:
    """Wheel state at one frame timestamp."""

    angle: float
    progress: float
    ticked: bool = False

    @property
    def done(self) -> bool:
        return self.progress >= 1.0


@dataclass(frozen=True)
class SpinAnimation:
    """One spin from start_angle to target_angle.

    Attributes:
        token: Spin this animation belongs to
        start_angle: Cumulative rotation when the spin began
        target_angle: Cumulative rotation where it will stop
        start_time: Frame clock timestamp (ms) at spin start
        duration_ms: Total spin time in milliseconds
        easing: Deceleration curve
    """

    token: int
    start_angle: float
    target_angle: float
    start_time: float
    duration_ms: float = DEFAULT_DURATION_MS
    easing: Easing = Easing.EASE_OUT_QUART

    def progress_at(self, now: float) -> float:
        """Normalized progress in [0, 1]."""
        if self.duration_ms <= 0:
            return 1.0
        return max(0.0, min(1.0, (now - self.start_time) / self.duration_ms))

    def angle_at(self, now: float) -> float:
        """Wheel rotation at a frame timestamp."""
        progress = self.progress_at(now)
        if progress >= 1.0:
            return self.target_angle
        return interpolate(self.start_angle, self.target_angle, progress, self.easing)


class TickDetector:
    """Reports when the wheel has crossed a slice boundary.

    At most one tick is reported per check, even if several boundaries
    were crossed since the previous one.
    """

    def __init__(self, slice_count: int = 1, last_tick_angle: float = 0.0) -> None:
        self.slice_count = slice_count
        self.last_tick_angle = last_tick_angle

    def check(self, angle: float) -> bool:
        """Return True if angle is past a boundary since the last tick."""
        if self.slice_count < 1:
            return False
        width = 360.0 / self.slice_count
        if math.floor(angle / width) > math.floor(self.last_tick_angle / width):
            self.last_tick_angle = angle
            return True
        return False


def advance(animation: SpinAnimation, detector: TickDetector, now: float) -> RotationFrame:
    """Compute the frame for timestamp now and run tick detection."""
    progress = animation.progress_at(now)
    angle = animation.angle_at(now)
    ticked = detector.check(angle)
    return RotationFrame(angle=angle, progress=progress, ticked=ticked)
