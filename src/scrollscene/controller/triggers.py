"""
Cue Trigger System
==================
Highlight effects bound to where an element sits inside its scrubbed
container, rather than to the global clock.

The element's position is derived from the container layer's own parallax
offset, so a zone fires at the same visual moment whatever the scroll speed.
Each zone owns exactly one effect instance: entering plays it forward,
leaving (on either side) plays the same instance in reverse.
"""
from __future__ import annotations

import logging
from enum import StrEnum
from typing import Dict, List, Sequence, Tuple

from scrollscene.controller.parallax import ParallaxModel
from scrollscene.controller.targets import TargetRegistry
from scrollscene.model.easing import get_easing
from scrollscene.model.scene import TargetProperty, TriggerEffect, TriggerZone
from scrollscene.utils import clamp, lerp

logger = logging.getLogger(__name__)


class ZoneState(StrEnum):
    BEFORE = "before"
    ENTERING = "entering"
    INSIDE = "inside"
    EXITING = "exiting"


class EffectPlayback:
    """A reversible, wall-clock driven instance of a TriggerEffect."""

    def __init__(self, effect: TriggerEffect) -> None:
        self.effect = effect
        self.progress: float = 0.0
        self.direction: int = -1
        self._ease = get_easing(effect.easing)

    def play(self) -> None:
        self.direction = 1

    def reverse(self) -> None:
        self.direction = -1

    def advance(self, dt: float) -> None:
        step = max(0.0, dt) / self.effect.duration
        self.progress = clamp(self.progress + self.direction * step, 0.0, 1.0)

    def values(self) -> Dict[TargetProperty, float]:
        eased = self._ease(self.progress)
        return {p.property: lerp(p.from_value, p.to_value, eased) for p in self.effect.properties}

    @property
    def state(self) -> ZoneState:
        if self.direction > 0:
            return ZoneState.INSIDE if self.progress >= 1.0 else ZoneState.ENTERING
        return ZoneState.BEFORE if self.progress <= 0.0 else ZoneState.EXITING


class CueTriggerSystem:
    """Evaluates every TriggerZone once per frame."""

    def __init__(self, zones: Sequence[TriggerZone], parallax: ParallaxModel, visible_extent: float = 1.0) -> None:
        self.zones = tuple(zones)
        self.parallax = parallax
        self.visible_extent = visible_extent
        self._playbacks: List[EffectPlayback] = [EffectPlayback(zone.effect) for zone in self.zones]
        self._last_time: float | None = None

    def edges(self, zone: TriggerZone, smoothed_time: float) -> Tuple[float, float]:
        """Leading and trailing edge of the element as fractions of the container's visible extent."""
        offset = self.parallax.container_offset(zone.container, smoothed_time)
        leading = (zone.element_x + offset) / self.visible_extent
        trailing = (zone.element_x + zone.element_width + offset) / self.visible_extent
        return leading, trailing

    def is_inside(self, zone: TriggerZone, smoothed_time: float) -> bool:
        leading, trailing = self.edges(zone, smoothed_time)
        return leading <= zone.enter_threshold and trailing > zone.exit_threshold

    def state_of(self, target: str) -> ZoneState:
        return self._playback_for(target).state

    def playback_for(self, target: str) -> EffectPlayback:
        return self._playback_for(target)

    def _playback_for(self, target: str) -> EffectPlayback:
        for zone, playback in zip(self.zones, self._playbacks):
            if zone.target == target:
                return playback
        raise KeyError(target)

    def update(self, smoothed_time: float, dt: float, targets: TargetRegistry) -> None:
        moving = "forward"
        if self._last_time is not None and smoothed_time < self._last_time:
            moving = "backward"
        self._last_time = smoothed_time

        for zone, playback in zip(self.zones, self._playbacks):
            if not self.parallax.has_layer(zone.container):
                continue
            inside = self.is_inside(zone, smoothed_time)
            if inside and playback.direction < 0:
                logger.debug(f"Zone '{zone.target}' entered while scrolling {moving} (t={smoothed_time:.3f})")
                playback.play()
            elif not inside and playback.direction > 0:
                logger.debug(f"Zone '{zone.target}' left while scrolling {moving} (t={smoothed_time:.3f})")
                playback.reverse()
            playback.advance(dt)

            for prop, value in playback.values().items():
                targets.apply(zone.target, prop, value)

    def reset(self) -> None:
        self._playbacks = [EffectPlayback(zone.effect) for zone in self.zones]
        self._last_time = None
