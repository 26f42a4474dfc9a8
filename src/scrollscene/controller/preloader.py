"""
Preloader Sequencer
===================
Runs the startup sequence exactly once:

    LOADING -> COUNTER_TWEEN -> NAME_REVEAL -> FADE_OUT -> READY

LOADING waits for every asset to settle. The later phases are decorative
wall-clock tweens (the counter does not follow real load progress). Only
opacity is animated in FADE_OUT; the pinned viewport's coordinate frame must
not be transformed. A phase only starts after the previous one settled, and
reaching READY is the single point where the rest of the engine is armed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from scrollscene.controller.assets import AssetGate, AssetTracker
from scrollscene.controller.targets import TargetRegistry
from scrollscene.model.easing import get_easing
from scrollscene.model.scene import Asset, TargetProperty
from scrollscene.model.state import PreloaderStage, SceneStore
from scrollscene.utils import lerp

logger = logging.getLogger(__name__)

COUNTER = "preloader.counter"
TITLE = "preloader.title"
OVERLAY = "preloader"
CONTENT = "content"

COUNTER_DURATION = 2.0
COUNTER_FADE = 0.5
NAME_FADE_IN = 1.5
NAME_HOLD = 1.5
NAME_FADE_OUT = 1.0
OVERLAY_FADE = 1.5
CONTENT_FADE = 2.0


@dataclass
class Tween:
    """Wall-clock tween of one property, started after an optional delay."""
    target: str
    property: TargetProperty
    from_value: float
    to_value: float
    duration: float
    easing: str = "power1.out"
    delay: float = 0.0
    elapsed: float = 0.0

    @property
    def started(self) -> bool:
        return self.elapsed >= self.delay

    @property
    def finished(self) -> bool:
        return self.elapsed >= self.delay + self.duration

    def value(self) -> float:
        local = (self.elapsed - self.delay) / self.duration
        return lerp(self.from_value, self.to_value, get_easing(self.easing)(local))

    def advance(self, dt: float) -> float:
        self.elapsed += dt
        return self.value()


@dataclass
class PreloaderPhase:
    index: int
    stage: PreloaderStage
    predicate: Callable[[], bool]
    action: Callable[[], None] = lambda: None
    on_complete: Optional[Callable[[], None]] = None
    tweens: List[Tween] = field(default_factory=list)


class PreloaderSequencer:
    def __init__(
        self,
        store: SceneStore,
        targets: TargetRegistry,
        assets: Sequence[Asset],
    ) -> None:
        self.store = store
        self.targets = targets
        self.tracker = AssetTracker(assets)
        self.phases: List[PreloaderPhase] = self._build_phases()
        self._current: int = -1
        self._gate: Optional[AssetGate] = None
        self._on_ready: Optional[Callable[[], None]] = None
        self._ready_fired = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def started(self) -> bool:
        return self._current >= 0

    @property
    def stage(self) -> PreloaderStage:
        return self.store.stage

    @property
    def counter_percent(self) -> int:
        """Percentage currently shown by the counter (whole percent)."""
        tween = self.phases[1].tweens[0]
        if self._current < 1:
            return 0
        return int(round(tween.value()))

    def start(self, gate: AssetGate, on_ready: Callable[[], None]) -> None:
        if self.started:
            logger.warning("Preloader already started; ignoring second start.")
            return
        self._gate = gate
        self._on_ready = on_ready
        self._enter(0)

    def tick(self, dt: float) -> None:
        """Advance the current phase by dt wall-clock seconds."""
        if not self.started or self.store.is_ready:
            return

        phase = self.phases[self._current]
        for tween in phase.tweens:
            value = tween.advance(dt)
            if not tween.started:
                continue
            if tween.property == TargetProperty.TEXT:
                value = float(round(value))
            self.targets.apply(tween.target, tween.property, value)

        if phase.predicate():
            if phase.on_complete is not None:
                phase.on_complete()
            self._enter(self._current + 1)

    # ------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------

    def _enter(self, index: int) -> None:
        self._current = index
        phase = self.phases[index]
        self.store.set_stage(phase.stage)
        logger.info(f"Preloader phase {phase.index}: {phase.stage.name}")
        phase.action()

    def _tweens_done(self, index: int) -> Callable[[], bool]:
        return lambda: all(t.finished for t in self.phases[index].tweens)

    def _start_loading(self) -> None:
        self.targets.apply(COUNTER, TargetProperty.TEXT, 0.0)
        self.targets.apply(TITLE, TargetProperty.OPACITY, 0.0)
        self.targets.apply(CONTENT, TargetProperty.OPACITY, 0.0)
        self.tracker.start(self._gate)

    def _loading_complete(self) -> None:
        logger.info(
            f"All assets settled ({len(self.tracker.loaded)} loaded, {len(self.tracker.failed)} failed)."
        )

    def _fire_ready(self) -> None:
        if self._ready_fired:
            return
        self._ready_fired = True
        logger.info("Scene ready.")
        self.store.ready.emit()
        if self._on_ready is not None:
            self._on_ready()

    def _build_phases(self) -> List[PreloaderPhase]:
        phases = [
            PreloaderPhase(
                index=0,
                stage=PreloaderStage.LOADING,
                predicate=lambda: self.tracker.all_settled,
                action=self._start_loading,
                on_complete=self._loading_complete,
            ),
            PreloaderPhase(
                index=1,
                stage=PreloaderStage.COUNTER_TWEEN,
                predicate=self._tweens_done(1),
                tweens=[
                    Tween(COUNTER, TargetProperty.TEXT, 0.0, 100.0, COUNTER_DURATION, "power2.out"),
                    Tween(COUNTER, TargetProperty.OPACITY, 1.0, 0.0, COUNTER_FADE, delay=COUNTER_DURATION),
                ],
            ),
            PreloaderPhase(
                index=2,
                stage=PreloaderStage.NAME_REVEAL,
                predicate=self._tweens_done(2),
                tweens=[
                    Tween(TITLE, TargetProperty.OPACITY, 0.0, 1.0, NAME_FADE_IN, "power2.inOut"),
                    Tween(TITLE, TargetProperty.OPACITY, 1.0, 0.0, NAME_FADE_OUT, "power2.inOut",
                          delay=NAME_FADE_IN + NAME_HOLD),
                ],
            ),
            PreloaderPhase(
                index=3,
                stage=PreloaderStage.FADE_OUT,
                predicate=self._tweens_done(3),
                tweens=[
                    Tween(OVERLAY, TargetProperty.OPACITY, 1.0, 0.0, OVERLAY_FADE, "power2.inOut"),
                    Tween(CONTENT, TargetProperty.OPACITY, 0.0, 1.0, CONTENT_FADE, "power2.out"),
                ],
            ),
            PreloaderPhase(
                index=4,
                stage=PreloaderStage.READY,
                predicate=lambda: False,
                action=self._fire_ready,
            ),
        ]
        return phases
