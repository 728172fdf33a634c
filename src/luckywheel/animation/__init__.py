"""Animation module for LuckyWheel."""

from luckywheel.animation.easing import Easing, get_easing, interpolate
from luckywheel.animation.rotation import (
    RotationFrame,
    SpinAnimation,
    TickDetector,
    advance,
    pick_target_angle,
)

__all__ = [
    # Easing
    "Easing",
    "get_easing",
    "interpolate",
    # Rotation
    "RotationFrame",
    "SpinAnimation",
    "TickDetector",
    "advance",
    "pick_target_angle",
]
