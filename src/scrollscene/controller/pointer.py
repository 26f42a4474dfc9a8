"""
Pointer Follower
================
Relaxes a tracked element toward the latest pointer position by a fixed
fraction per frame. With a rate in (0, 1] the motion never overshoots.
Runs on its own, independent of the virtual clock.
"""
from __future__ import annotations

import logging
from typing import Optional

from scrollscene import config
from scrollscene.controller.targets import TargetRegistry
from scrollscene.model.scene import TargetProperty
from scrollscene.model.state import PointerState

logger = logging.getLogger(__name__)


class PointerFollower:
    def __init__(
        self,
        pointer: PointerState,
        target_id: Optional[str],
        rate: float = config.POINTER_RATE,
        epsilon: float = 0.01,
    ) -> None:
        if not 0.0 < rate <= 1.0:
            raise ValueError(f"Pointer rate must be in (0, 1], got {rate}")
        self.pointer = pointer
        self.target_id = target_id
        self.rate = rate
        self.epsilon = epsilon

    def activate(self, viewport_width: float, viewport_height: float) -> None:
        """Center the element. Only the first activation has an effect."""
        if self.pointer.active:
            return
        cx, cy = viewport_width / 2.0, viewport_height / 2.0
        self.pointer.target_x = self.pointer.current_x = cx
        self.pointer.target_y = self.pointer.current_y = cy
        self.pointer.active = True
        logger.debug(f"Pointer follower activated at ({cx:.0f}, {cy:.0f})")

    def set_target(self, x: float, y: float) -> None:
        self.pointer.target_x = float(x)
        self.pointer.target_y = float(y)

    def step(self, targets: TargetRegistry) -> None:
        p = self.pointer
        if not p.active:
            return
        p.current_x = self._relax(p.current_x, p.target_x)
        p.current_y = self._relax(p.current_y, p.target_y)
        if self.target_id is not None:
            targets.apply(self.target_id, TargetProperty.X, p.current_x)
            targets.apply(self.target_id, TargetProperty.Y, p.current_y)

    def _relax(self, current: float, target: float) -> float:
        delta = target - current
        if abs(delta) <= self.epsilon:
            return target
        return current + delta * self.rate

    @property
    def distance_to_target(self) -> float:
        p = self.pointer
        return ((p.target_x - p.current_x) ** 2 + (p.target_y - p.current_y) ** 2) ** 0.5
