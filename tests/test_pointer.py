"""Tests for the pointer follower."""
import pytest

from scrollscene.controller.pointer import PointerFollower
from scrollscene.model.scene import TargetProperty
from scrollscene.model.state import PointerState

from conftest import make_registry


@pytest.fixture()
def follower():
    return PointerFollower(PointerState(), "cursor", rate=0.12)


def test_activation_centers_element(follower):
    follower.activate(1600.0, 900.0)
    assert (follower.pointer.current_x, follower.pointer.current_y) == (800.0, 450.0)
    follower.pointer.current_x = 10.0
    follower.activate(1600.0, 900.0)
    assert follower.pointer.current_x == 10.0


def test_converges_without_overshoot(follower):
    targets, recorded = make_registry("cursor")
    follower.activate(1600.0, 900.0)
    follower.set_target(400.0, 300.0)

    xs = []
    for _ in range(120):
        follower.step(targets)
        xs.append(recorded["cursor"].values[TargetProperty.X])

    assert all(b <= a for a, b in zip(xs, xs[1:]))
    assert min(xs) >= 400.0
    assert follower.distance_to_target < 1.0

    for _ in range(30):
        follower.step(targets)
        assert follower.distance_to_target < 1.0


def test_no_movement_without_new_target(follower):
    targets, recorded = make_registry("cursor")
    follower.activate(1600.0, 900.0)
    for _ in range(20):
        follower.step(targets)
    assert recorded["cursor"].values[TargetProperty.X] == 800.0
    assert recorded["cursor"].values[TargetProperty.Y] == 450.0


def test_inactive_follower_does_nothing(follower):
    targets, recorded = make_registry("cursor")
    follower.set_target(400.0, 300.0)
    follower.step(targets)
    assert recorded["cursor"].writes == []


def test_rate_must_be_in_unit_interval():
    with pytest.raises(ValueError):
        PointerFollower(PointerState(), "cursor", rate=0.0)
