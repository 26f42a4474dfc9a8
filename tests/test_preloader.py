"""Tests for the preloader sequencer and asset tracking."""
import pytest

from scrollscene.controller.assets import AssetTracker
from scrollscene.controller.preloader import COUNTER, CONTENT, OVERLAY, TITLE, PreloaderSequencer
from scrollscene.model.scene import Asset, TargetProperty
from scrollscene.model.state import PreloaderStage, SceneStore

from conftest import FakeAssetGate, make_registry, run_until

NINE_ASSETS = [Asset(f"pictures/{i}.png") for i in range(9)]


@pytest.fixture()
def store():
    return SceneStore()


@pytest.fixture()
def registry():
    return make_registry(COUNTER, TITLE, OVERLAY, CONTENT)


def run_to_ready(sequencer, store, dt=0.05):
    return run_until(lambda: store.is_ready, lambda: sequencer.tick(dt))


def test_all_assets_failing_still_reaches_ready_once(store, registry):
    targets, _ = registry
    ready_calls = []
    signal_calls = []
    store.ready.connect(lambda: signal_calls.append(1))

    sequencer = PreloaderSequencer(store, targets, NINE_ASSETS)
    gate = FakeAssetGate(fail=True)
    sequencer.start(gate, lambda: ready_calls.append(1))
    run_to_ready(sequencer, store)

    for _ in range(50):
        sequencer.tick(0.1)
    assert len(gate.requested) == 9
    assert sequencer.tracker.failed == {a.uri for a in NINE_ASSETS}
    assert ready_calls == [1]
    assert signal_calls == [1]


def test_phases_run_in_order(store, registry):
    targets, _ = registry
    stages = []
    store.stage_changed.connect(lambda value: stages.append(value))

    sequencer = PreloaderSequencer(store, targets, NINE_ASSETS)
    sequencer.start(FakeAssetGate(), lambda: None)
    run_to_ready(sequencer, store)

    assert stages == [
        PreloaderStage.COUNTER_TWEEN,
        PreloaderStage.NAME_REVEAL,
        PreloaderStage.FADE_OUT,
        PreloaderStage.READY,
    ]


def test_loading_waits_for_every_asset(store, registry):
    targets, _ = registry
    gate = FakeAssetGate(deferred=True)
    sequencer = PreloaderSequencer(store, targets, NINE_ASSETS)
    sequencer.start(gate, lambda: None)

    for _ in range(100):
        sequencer.tick(0.1)
    assert sequencer.stage == PreloaderStage.LOADING

    gate.release()
    sequencer.tick(0.1)
    assert sequencer.stage == PreloaderStage.COUNTER_TWEEN


def test_counter_shows_whole_percentages(store, registry):
    targets, recorded = registry
    sequencer = PreloaderSequencer(store, targets, NINE_ASSETS)
    sequencer.start(FakeAssetGate(), lambda: None)
    sequencer.tick(0.0)
    assert sequencer.stage == PreloaderStage.COUNTER_TWEEN

    for _ in range(13):
        sequencer.tick(0.07)
    texts = [value for prop, value in recorded[COUNTER].writes if prop == TargetProperty.TEXT]
    assert texts[0] == 0.0
    assert all(value == int(value) for value in texts)
    assert texts == sorted(texts)
    assert 0 < sequencer.counter_percent < 100


def test_counter_ends_at_hundred_before_fading(store, registry):
    targets, recorded = registry
    sequencer = PreloaderSequencer(store, targets, NINE_ASSETS)
    sequencer.start(FakeAssetGate(), lambda: None)
    run_until(lambda: sequencer.stage == PreloaderStage.NAME_REVEAL, lambda: sequencer.tick(0.05))

    assert recorded[COUNTER].values[TargetProperty.TEXT] == 100.0
    assert recorded[COUNTER].values[TargetProperty.OPACITY] == 0.0


def test_fade_out_reveals_content(store, registry):
    targets, recorded = registry
    sequencer = PreloaderSequencer(store, targets, NINE_ASSETS)
    sequencer.start(FakeAssetGate(), lambda: None)
    assert recorded[CONTENT].values[TargetProperty.OPACITY] == 0.0

    run_to_ready(sequencer, store)
    assert recorded[OVERLAY].values[TargetProperty.OPACITY] == 0.0
    assert recorded[CONTENT].values[TargetProperty.OPACITY] == 1.0


def test_second_start_is_ignored(store, registry, caplog):
    targets, _ = registry
    gate = FakeAssetGate()
    sequencer = PreloaderSequencer(store, targets, NINE_ASSETS)
    sequencer.start(gate, lambda: None)
    sequencer.start(gate, lambda: None)
    assert len(gate.requested) == 9
    assert "already started" in caplog.text


def test_tracker_counts_duplicates_once():
    tracker = AssetTracker([Asset("a.png"), Asset("a.png"), Asset("b.png")])
    assert tracker.total == 2
    assert not tracker.all_settled

    tracker.start(FakeAssetGate())
    assert tracker.settled_count == 2
    assert tracker.all_settled


def test_empty_asset_list_settles_immediately(store, registry):
    targets, _ = registry
    sequencer = PreloaderSequencer(store, targets, [])
    sequencer.start(FakeAssetGate(), lambda: None)
    sequencer.tick(0.0)
    assert sequencer.stage == PreloaderStage.COUNTER_TWEEN
