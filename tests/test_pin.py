"""Tests for the pin/scrub controller."""
import pytest

from scrollscene.controller.pin import PinScrubController
from scrollscene.model.state import ProgressState

from conftest import run_until


@pytest.fixture()
def pin():
    controller = PinScrubController(ProgressState(), scene_duration=10.0, pin_distance=5000.0, scrub_rate=0.1)
    controller.refresh(900.0)
    return controller


def test_scroll_range_covers_pin_distance(pin):
    assert pin.max_offset == pytest.approx(5000.0)
    assert pin.content_height == pytest.approx(5900.0)


def test_raw_progress_is_clamped(pin):
    pin.set_scroll(-250.0)
    assert pin.progress.raw_progress == 0.0
    pin.set_scroll(2500.0)
    assert pin.progress.raw_progress == pytest.approx(0.5)
    pin.set_scroll(99999.0)
    assert pin.progress.raw_progress == 1.0


def test_smoothing_lags_then_converges(pin):
    pin.set_scroll(2500.0)
    first = pin.step()
    assert 0.0 < first < 5.0
    assert pin.progress.smoothed_progress == pytest.approx(0.05)

    run_until(lambda: pin.is_settled, pin.step)
    assert pin.progress.smoothed_time == 5.0


def test_smoothing_never_overshoots(pin):
    pin.set_scroll(5000.0)
    previous = 0.0
    for _ in range(300):
        current = pin.step()
        assert previous <= current <= 10.0
        previous = current
    assert current == 10.0


def test_invalid_rate_is_rejected():
    with pytest.raises(ValueError):
        PinScrubController(ProgressState(), scrub_rate=0.0)
    with pytest.raises(ValueError):
        PinScrubController(ProgressState(), scrub_rate=1.5)


def test_refresh_keeps_smoothed_time(pin):
    pin.set_scroll(2500.0)
    pin.jump()
    assert pin.progress.smoothed_time == 5.0

    pin.refresh(600.0, pin_start=1000.0)
    assert pin.progress.smoothed_time == 5.0
    assert pin.progress.raw_progress == pytest.approx(0.3)


def test_pin_translation():
    controller = PinScrubController(ProgressState(), pin_distance=5000.0)
    controller.refresh(900.0, pin_start=1000.0)
    assert controller.pin_translation(400.0) == pytest.approx(600.0)
    assert controller.pin_translation(3000.0) == 0.0
    assert controller.is_pinned(3000.0)
    assert controller.pin_translation(6500.0) == pytest.approx(-500.0)
    assert not controller.is_pinned(6500.0)


def test_rapid_reversal_is_absorbed_by_smoothing(pin):
    pin.set_scroll(4000.0)
    for _ in range(5):
        pin.step()

    pin.set_scroll(500.0)
    target_time = pin.progress.raw_progress * pin.scene_duration
    previous = pin.progress.smoothed_time
    for _ in range(300):
        gap = abs(pin.progress.raw_progress - pin.progress.smoothed_progress)
        current = pin.step()
        # one frame closes at most scrub_rate of the gap, except the final epsilon snap
        step_limit = max(pin.scrub_rate * gap, pin.epsilon) * pin.scene_duration
        assert abs(current - previous) <= step_limit + 1e-9
        if not pin.is_settled:
            assert current != target_time
        previous = current

    assert pin.progress.smoothed_time == 1.0
