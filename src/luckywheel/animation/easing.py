"""Easing curves for the wheel.

A curve maps normalized time in [0, 1] to normalized distance in [0, 1].
"""

from enum import Enum
from typing import Callable

EasingFunc = Callable[[float], float]


class Easing(Enum):
    """Curve names, usable from configuration."""

    LINEAR = "linear"
    EASE_OUT_QUART = "ease_out_quart"


def linear(t: float) -> float:
    return t


def ease_out_quart(t: float) -> float:
    """Quartic deceleration: fast start, long slow finish."""
    return 1 - (1 - t) ** 4


_CURVES: dict[Easing, EasingFunc] = {
    Easing.LINEAR: linear,
    Easing.EASE_OUT_QUART: ease_out_quart,
}


def get_easing(easing: Easing | str) -> EasingFunc:
    """Look up a curve by enum member or name.

    Raises:
        ValueError: Unknown curve name
    """
    if not isinstance(easing, Easing):
        easing = Easing(easing.lower())
    return _CURVES[easing]


def interpolate(start: float, end: float, t: float, easing: Easing | str = Easing.LINEAR) -> float:
    """Value between start and end at progress t (clamped to [0, 1])."""
    t = min(1.0, max(0.0, t))
    return start + (end - start) * get_easing(easing)(t)
