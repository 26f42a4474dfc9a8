"""Tests for the easing registry."""
import numpy as np
import pytest

from scrollscene.model.easing import DEFAULT_EASING, EASINGS, get_easing


@pytest.mark.parametrize("name", sorted(EASINGS))
def test_every_easing_is_exact_at_endpoints(name):
    curve = get_easing(name)
    assert curve(0.0) == 0.0
    assert curve(1.0) == 1.0


def test_input_outside_unit_interval_is_clipped():
    curve = get_easing("power2.out")
    assert curve(-3.0) == 0.0
    assert curve(7.5) == 1.0


def test_bare_power_name_is_the_out_variant():
    assert get_easing("power2") is get_easing("power2.out")


def test_none_resolves_to_default():
    assert get_easing(None) is get_easing(DEFAULT_EASING)


def test_unknown_name_raises():
    with pytest.raises(ValueError, match="bounce"):
        get_easing("bounce.out")


def test_vectorized_matches_scalar():
    curve = get_easing("sine.inOut")
    t = np.linspace(0.0, 1.0, 11)
    values = curve(t)
    assert isinstance(values, np.ndarray)
    for ti, vi in zip(t, values):
        assert vi == pytest.approx(curve(float(ti)))


def test_power_out_midpoint():
    # power1.out is quadratic: 1 - (1 - t)^2
    assert get_easing("power1.out")(0.5) == pytest.approx(0.75)
