"""
Viewport Pin / Scrub Controller
===============================
Pins the scene viewport for a fixed scroll distance and turns the scroll
offset inside that distance into the virtual clock.

raw_progress follows the scroll offset immediately. smoothed_progress chases
it by a fixed fraction per frame (not per second), which keeps the lag
independent of the frame rate's jitter and absorbs rapid scroll reversals.
"""
from __future__ import annotations

import logging

from scrollscene import config
from scrollscene.model.state import ProgressState
from scrollscene.utils import clamp

logger = logging.getLogger(__name__)


class PinScrubController:
    def __init__(
        self,
        progress: ProgressState,
        scene_duration: float = config.SCENE_DURATION,
        pin_distance: float = config.PIN_DISTANCE,
        scrub_rate: float = config.SCRUB_RATE,
        epsilon: float = config.SCRUB_EPSILON,
    ) -> None:
        if not 0.0 < scrub_rate <= 1.0:
            raise ValueError(f"scrub_rate must be in (0, 1], got {scrub_rate}")
        self.progress = progress
        self.scene_duration = scene_duration
        self.pin_distance = pin_distance
        self.scrub_rate = scrub_rate
        self.epsilon = epsilon

        self.pin_start: float = 0.0
        self.viewport_height: float = 0.0
        self._offset: float = 0.0

    # ------------------------------------------------------------------
    # Boundaries
    # ------------------------------------------------------------------

    @property
    def pin_end(self) -> float:
        return self.pin_start + self.pin_distance

    @property
    def content_height(self) -> float:
        """Total document height: the pinned viewport plus its scroll spacer."""
        return self.pin_start + self.viewport_height + self.pin_distance

    @property
    def max_offset(self) -> float:
        return max(0.0, self.content_height - self.viewport_height)

    def refresh(self, viewport_height: float, pin_start: float = 0.0) -> float:
        """
        Recompute pin boundaries after a resize or a layout change.

        The smoothed clock is left untouched so the scene does not jump;
        only raw_progress is re-derived from the current offset.

        Returns:
            The new maximum scroll offset.
        """
        self.viewport_height = max(0.0, float(viewport_height))
        self.pin_start = max(0.0, float(pin_start))
        self._offset = clamp(self._offset, 0.0, self.max_offset)
        self.progress.raw_progress = self.raw_progress_for(self._offset)
        logger.debug(
            f"Pin refreshed: start={self.pin_start:.0f}, end={self.pin_end:.0f}, "
            f"viewport={self.viewport_height:.0f}, max offset={self.max_offset:.0f}"
        )
        return self.max_offset

    # ------------------------------------------------------------------
    # Scroll input
    # ------------------------------------------------------------------

    def raw_progress_for(self, offset: float) -> float:
        return clamp((offset - self.pin_start) / self.pin_distance, 0.0, 1.0)

    def set_scroll(self, offset: float) -> None:
        self._offset = float(offset)
        self.progress.raw_progress = self.raw_progress_for(self._offset)

    def is_pinned(self, offset: float) -> bool:
        return self.pin_start <= offset <= self.pin_end

    def pin_translation(self, offset: float) -> float:
        """
        On-screen top edge of the viewport for a scroll offset.

        Zero while pinned; outside the pin the viewport scrolls with the page.
        """
        if offset < self.pin_start:
            return self.pin_start - offset
        if offset > self.pin_end:
            return self.pin_end - offset
        return 0.0

    # ------------------------------------------------------------------
    # Per-frame smoothing
    # ------------------------------------------------------------------

    def step(self) -> float:
        """Advance the smoothed clock by one frame and return smoothed_time."""
        state = self.progress
        delta = state.raw_progress - state.smoothed_progress
        if abs(delta) <= self.epsilon:
            state.smoothed_progress = state.raw_progress
        else:
            state.smoothed_progress += delta * self.scrub_rate
        state.smoothed_time = state.smoothed_progress * self.scene_duration
        return state.smoothed_time

    def jump(self) -> float:
        """Make the smoothed clock catch up instantly (used when restoring a position)."""
        self.progress.smoothed_progress = self.progress.raw_progress
        self.progress.smoothed_time = self.progress.smoothed_progress * self.scene_duration
        return self.progress.smoothed_time

    @property
    def is_settled(self) -> bool:
        return self.progress.smoothed_progress == self.progress.raw_progress
