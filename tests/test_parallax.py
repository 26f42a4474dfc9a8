"""Tests for layer parallax."""
import numpy as np
import pytest

from scrollscene.controller.parallax import ParallaxModel, position
from scrollscene.model.scene import Layer, TargetProperty

from conftest import make_registry


@pytest.fixture()
def layers():
    return [
        Layer(id="moon", velocity_coefficient=0.04),
        Layer(id="world", velocity_coefficient=1.0),
        Layer(id="reeds", velocity_coefficient=1.5),
    ]


def test_position_is_zero_at_start(layers):
    for layer in layers:
        assert position(layer, 0.0) == 0.0


def test_position_is_monotonic_in_time(layers):
    times = np.linspace(0.0, 10.0, 50)
    for layer in layers:
        travelled = [position(layer, t) for t in times]
        assert all(b > a for a, b in zip(travelled, travelled[1:]))


def test_world_travels_four_viewports(layers):
    assert position(layers[1], 10.0) == pytest.approx(4.0)


def test_faster_layers_travel_further(layers):
    model = ParallaxModel(layers)
    moon, world, reeds = model.positions(6.0)
    assert moon < world < reeds


def test_positions_depend_only_on_time(layers):
    model = ParallaxModel(layers)
    first = model.positions(3.3, 1600.0).copy()
    model.positions(9.0, 1600.0)
    model.positions(0.5, 1600.0)
    np.testing.assert_array_equal(model.positions(3.3, 1600.0), first)


def test_container_offset_is_negative_once_moving(layers):
    model = ParallaxModel(layers)
    assert model.container_offset("world", 0.0) == 0.0
    assert model.container_offset("world", 5.0) == pytest.approx(-2.0)


def test_apply_writes_pixel_offsets(layers):
    registry, recorded = make_registry("moon", "world", "reeds")
    ParallaxModel(layers).apply(5.0, registry, 1600.0)
    assert recorded["world"].values[TargetProperty.X] == pytest.approx(-2.0 * 1600.0)
    assert recorded["reeds"].values[TargetProperty.X] == pytest.approx(-3.0 * 1600.0)
