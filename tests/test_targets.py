"""Tests for the render target registry."""
from scrollscene.controller.targets import TargetRegistry
from scrollscene.model.scene import TargetProperty

from conftest import RecordingTarget


def test_apply_writes_to_live_target():
    target = RecordingTarget()
    registry = TargetRegistry({"orb1": target})
    assert registry.apply("orb1", TargetProperty.SCALE, 1.2)
    assert target.values == {TargetProperty.SCALE: 1.2}


def test_missing_target_is_skipped():
    registry = TargetRegistry()
    assert not registry.apply("ghost", TargetProperty.X, 1.0)
    assert registry.get("ghost") is None


def test_dead_target_is_skipped_and_reported_once(caplog):
    caplog.set_level("DEBUG", logger="scrollscene")
    target = RecordingTarget()
    target.alive = False
    registry = TargetRegistry({"orb1": target})

    for _ in range(3):
        assert not registry.apply("orb1", TargetProperty.X, 1.0)
    assert target.writes == []
    assert caplog.text.count("orb1") == 1


def test_register_and_clear():
    registry = TargetRegistry()
    registry.register("a", RecordingTarget())
    assert "a" in registry
    registry.unregister("a")
    assert "a" not in registry
    registry.register("b", RecordingTarget())
    registry.clear()
    assert len(registry) == 0
