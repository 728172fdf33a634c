import pytest

from luckywheel.animation.easing import Easing, ease_out_quart, get_easing, interpolate
from luckywheel.animation.rotation import (
    SpinAnimation,
    TickDetector,
    advance,
    pick_target_angle,
)

from conftest import FixedRandom


def test_ease_out_quart_values():
    assert ease_out_quart(0.0) == 0.0
    assert ease_out_quart(0.5) == pytest.approx(0.9375)
    assert ease_out_quart(1.0) == 1.0


def test_get_easing_by_name():
    assert get_easing("ease_out_quart") is ease_out_quart
    assert get_easing(Easing.LINEAR)(0.3) == 0.3
    with pytest.raises(ValueError):
        get_easing("bounce")


def test_interpolate_clamps_progress():
    assert interpolate(10.0, 20.0, 1.5) == 20.0
    assert interpolate(10.0, 20.0, -1.0) == 10.0


def test_target_adds_at_least_twelve_turns():
    low = pick_target_angle(100.0, FixedRandom(0.0))
    high = pick_target_angle(100.0, FixedRandom(0.999999))
    assert low == pytest.approx(100.0 + 12 * 360)
    assert 100.0 + 12 * 360 <= high < 100.0 + 18 * 360


def test_target_respects_overrides():
    angle = pick_target_angle(0.0, FixedRandom(0.5), min_rotations=2.0, rotation_spread=0.0)
    assert angle == pytest.approx(2 * 360 + 180)


def test_angle_follows_quartic_curve():
    spin = SpinAnimation(token=1, start_angle=0.0, target_angle=1000.0, start_time=500.0)
    assert spin.angle_at(500.0) == 0.0
    assert spin.angle_at(500.0 + 4000.0) == pytest.approx(937.5)
    assert spin.angle_at(500.0 + 8000.0) == 1000.0
    assert spin.angle_at(500.0 + 20000.0) == 1000.0


def test_progress_clamped_before_start():
    spin = SpinAnimation(token=1, start_angle=0.0, target_angle=360.0, start_time=1000.0)
    assert spin.progress_at(0.0) == 0.0
    assert spin.angle_at(0.0) == 0.0


def test_zero_duration_finishes_immediately():
    spin = SpinAnimation(token=1, start_angle=0.0, target_angle=720.0, start_time=0.0, duration_ms=0)
    assert spin.progress_at(0.0) == 1.0
    assert spin.angle_at(0.0) == 720.0


def test_angle_never_decreases():
    spin = SpinAnimation(token=1, start_angle=45.0, target_angle=5000.0, start_time=0.0)
    angles = [spin.angle_at(t) for t in range(0, 8200, 16)]
    assert angles == sorted(angles)


def test_tick_detector_fires_on_boundary_crossing():
    detector = TickDetector(slice_count=4)
    assert detector.check(45.0) is False
    assert detector.check(95.0) is True
    assert detector.check(100.0) is False
    assert detector.check(181.0) is True


def test_tick_detector_reports_once_for_several_boundaries():
    detector = TickDetector(slice_count=4)
    assert detector.check(400.0) is True
    assert detector.last_tick_angle == 400.0
    assert detector.check(401.0) is False


def test_tick_detector_without_slices():
    assert TickDetector(slice_count=0).check(720.0) is False


def test_advance_reports_frame():
    spin = SpinAnimation(token=7, start_angle=0.0, target_angle=1000.0, start_time=0.0, duration_ms=100)
    detector = TickDetector(slice_count=10)
    frame = advance(spin, detector, 50.0)
    assert frame.progress == pytest.approx(0.5)
    assert frame.angle == pytest.approx(937.5)
    assert frame.ticked is True
    assert not frame.done
    assert advance(spin, detector, 100.0).done
