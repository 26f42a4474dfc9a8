"""Shared fixtures for scrollscene tests.

Everything below the view layer runs headless: render targets, asset
loading and audio playback are replaced with small recording fakes.
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Tuple

import pytest
from PySide6.QtCore import QCoreApplication, QObject, Signal

from scrollscene.controller.targets import TargetRegistry
from scrollscene.model.io import IOManager
from scrollscene.model.scene import (
    Asset,
    AmbientLoop,
    Layer,
    SceneConfig,
    TargetProperty,
    TimelineSegment,
    TriggerZone,
)

DEFAULT_SCENE = Path(__file__).resolve().parent.parent / "assets" / "scene_default.json"


@pytest.fixture(scope="session", autouse=True)
def qt_core():
    """Signals need a core application instance for the lifetime of the run."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


class RecordingTarget:
    """Render target that remembers every value written to it."""

    def __init__(self) -> None:
        self.values: Dict[TargetProperty, float] = {}
        self.writes: List[Tuple[TargetProperty, float]] = []
        self.alive = True

    def set_property(self, prop: TargetProperty, value: float) -> None:
        self.values[prop] = value
        self.writes.append((prop, value))

    def is_alive(self) -> bool:
        return self.alive


class FakeAssetGate:
    """Settles every asset synchronously, or holds them until release()."""

    def __init__(self, fail: bool = False, deferred: bool = False) -> None:
        self.fail = fail
        self.deferred = deferred
        self.requested: List[str] = []
        self._pending: List[Tuple[str, Callable[[str, bool], None]]] = []

    def load(self, asset: Asset, on_settled: Callable[[str, bool], None]) -> None:
        self.requested.append(asset.uri)
        if self.deferred:
            self._pending.append((asset.uri, on_settled))
        else:
            on_settled(asset.uri, not self.fail)

    def release(self) -> None:
        pending, self._pending = self._pending, []
        for uri, on_settled in pending:
            on_settled(uri, not self.fail)


class FakeAudioTransport:
    def __init__(self, accept: bool = True) -> None:
        self.accept = accept
        self.playing = False
        self.play_calls = 0

    def play(self, on_result: Callable[[bool, str], None]) -> None:
        self.play_calls += 1
        if self.accept:
            self.playing = True
            on_result(True, "")
        else:
            on_result(False, "playback blocked")

    def pause(self) -> None:
        self.playing = False

    def is_playing(self) -> bool:
        return self.playing


class FakeHost(QObject):
    scroll_changed = Signal(float)
    pointer_moved = Signal(float, float)
    key_pressed = Signal(str)
    resized = Signal(float, float)
    user_interacted = Signal()

    def __init__(self, width: float = 1600.0, height: float = 900.0) -> None:
        super().__init__()
        self.size = (width, height)

    def viewport_size(self) -> Tuple[float, float]:
        return self.size


def make_registry(*target_ids: str) -> Tuple[TargetRegistry, Dict[str, RecordingTarget]]:
    recorded = {target_id: RecordingTarget() for target_id in target_ids}
    return TargetRegistry(dict(recorded)), recorded


@pytest.fixture()
def small_scene() -> SceneConfig:
    """Two layers, one text cue, one orb and a bobbing loop."""
    scene = SceneConfig(
        title="Test",
        follower="cursor",
        layers=[
            Layer(id="sky", velocity_coefficient=0.2, width=2.0),
            Layer(id="world", velocity_coefficient=1.0, width=5.0),
        ],
        segments=[
            TimelineSegment("text1", TargetProperty.OPACITY, 2.6, 4.0, 0.0, 1.0),
            TimelineSegment("text1", TargetProperty.OPACITY, 5.0, 6.0, 1.0, 0.0),
        ],
        triggers=[TriggerZone(target="orb1", container="world", element_x=1.0, element_width=0.1)],
        loops=[AmbientLoop(target="girl", property=TargetProperty.Y, amplitude=-15.0, period=3.0)],
        assets=[Asset("a.png"), Asset("b.png"), Asset("c.png")],
    )
    scene.validate()
    return scene


@pytest.fixture()
def default_scene() -> SceneConfig:
    return IOManager.load_scene(str(DEFAULT_SCENE))


@pytest.fixture()
def gate() -> FakeAssetGate:
    return FakeAssetGate()


@pytest.fixture()
def host() -> FakeHost:
    return FakeHost()


def run_until(predicate: Callable[[], bool], step: Callable[[], None], limit: int = 2000) -> int:
    """Call step until predicate holds; returns the number of calls."""
    for count in range(limit):
        if predicate():
            return count
        step()
    raise AssertionError("condition not reached")
