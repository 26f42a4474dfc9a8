"""Tests for timeline evaluation, continuity checks and ambient loops."""
import pytest

from scrollscene.controller.timeline import (
    AmbientLoopPlayer,
    TimelineScheduler,
    check_continuity,
    evaluate_segment,
)
from scrollscene.model.easing import get_easing
from scrollscene.model.scene import AmbientLoop, TargetProperty, TimelineSegment

from conftest import make_registry

OPACITY = TargetProperty.OPACITY
Y = TargetProperty.Y


@pytest.fixture()
def fade_in():
    return TimelineSegment("text1", OPACITY, 2.6, 4.0, 0.0, 1.0)


def test_segment_is_exact_at_boundaries(fade_in):
    assert evaluate_segment(fade_in, 2.6) == 0.0
    assert evaluate_segment(fade_in, 4.0) == 1.0


def test_segment_holds_outside_its_range(fade_in):
    assert evaluate_segment(fade_in, 0.0) == 0.0
    assert evaluate_segment(fade_in, 9.9) == 1.0


def test_segment_midpoint_is_eased(fade_in):
    expected = get_easing("power1.out")(0.5)
    assert evaluate_segment(fade_in, 3.3) == pytest.approx(expected)


def test_track_holds_between_segments():
    scheduler = TimelineScheduler([
        TimelineSegment("text1", OPACITY, 2.6, 3.1, 0.0, 1.0),
        TimelineSegment("text1", OPACITY, 4.0, 4.5, 1.0, 0.0),
    ])
    assert scheduler.value_at("text1", OPACITY, 1.0) == 0.0
    assert scheduler.value_at("text1", OPACITY, 3.5) == 1.0
    assert scheduler.value_at("text1", OPACITY, 4.5) == 0.0
    assert scheduler.value_at("text1", OPACITY, 10.0) == 0.0


def test_scrubbing_back_restores_values(default_scene):
    scheduler = TimelineScheduler(default_scene.segments)
    registry, recorded = make_registry("text1", "text2", "text3", "text4", "cta")

    scheduler.apply(3.0, registry)
    before = {key: dict(target.values) for key, target in recorded.items()}

    scheduler.apply(8.0, registry)
    assert recorded["text3"].values[OPACITY] != before["text3"][OPACITY]

    scheduler.apply(3.0, registry)
    after = {key: dict(target.values) for key, target in recorded.items()}
    assert after == before


def test_jumping_matches_stepping(default_scene):
    scheduler = TimelineScheduler(default_scene.segments)
    direct = scheduler.evaluate(6.7)
    for i in range(100):
        scheduler.evaluate(i * 0.1)
    assert scheduler.evaluate(6.7) == direct


def test_apply_skips_unregistered_targets(fade_in):
    registry, recorded = make_registry("other")
    TimelineScheduler([fade_in]).apply(3.0, registry)
    assert recorded["other"].writes == []


def test_default_scene_is_continuous(default_scene):
    assert check_continuity(default_scene.segments) == []


def test_snap_is_reported():
    issues = check_continuity([
        TimelineSegment("text1", OPACITY, 1.0, 2.0, 0.0, 1.0),
        TimelineSegment("text1", OPACITY, 3.0, 4.0, 0.5, 0.0),
    ])
    assert [issue.kind for issue in issues] == ["snap"]
    assert "snap" in str(issues[0])


def test_overlap_is_reported():
    issues = check_continuity([
        TimelineSegment("text1", Y, 1.0, 3.0, 10.0, 0.0),
        TimelineSegment("text1", Y, 2.0, 4.0, 0.0, -10.0),
    ])
    assert [issue.kind for issue in issues] == ["overlap"]


def test_different_tracks_do_not_interact():
    issues = check_continuity([
        TimelineSegment("text1", OPACITY, 1.0, 3.0, 0.0, 1.0),
        TimelineSegment("text1", Y, 2.0, 4.0, 10.0, 0.0),
        TimelineSegment("text2", OPACITY, 2.0, 4.0, 0.0, 1.0),
    ])
    assert issues == []


def test_continuity_problem_is_logged(caplog):
    TimelineScheduler([
        TimelineSegment("text1", OPACITY, 1.0, 2.0, 0.0, 1.0),
        TimelineSegment("text1", OPACITY, 3.0, 4.0, 0.2, 0.0),
    ])
    assert "continuity" in caplog.text


class TestAmbientLoop:
    loop = AmbientLoop(target="girl", property=Y, amplitude=-15.0, period=3.0)

    def test_yoyo_shape(self):
        assert AmbientLoopPlayer.value_at(self.loop, 0.0) == 0.0
        assert AmbientLoopPlayer.value_at(self.loop, 3.0) == pytest.approx(-15.0)
        assert AmbientLoopPlayer.value_at(self.loop, 6.0) == pytest.approx(0.0, abs=1e-9)

    def test_second_leg_mirrors_first(self):
        first = AmbientLoopPlayer.value_at(self.loop, 1.0)
        mirrored = AmbientLoopPlayer.value_at(self.loop, 5.0)
        assert mirrored == pytest.approx(first)

    def test_advance_accumulates_wall_clock(self):
        registry, recorded = make_registry("girl")
        player = AmbientLoopPlayer([self.loop])
        for _ in range(15):
            player.advance(0.1, registry)
        assert player.elapsed == pytest.approx(1.5)
        assert recorded["girl"].values[Y] == pytest.approx(-7.5)

        player.reset()
        assert player.elapsed == 0.0
