"""
Page Scroll & Keyboard Navigation
=================================
The document scroll offset the pin controller reads from. Direct input
(scrollbar, wheel) sets it immediately; the keyboard bindings move it by a
fixed step, gliding there over a few frames.
"""
from __future__ import annotations

import logging
from enum import StrEnum
from typing import Dict, Optional

from scrollscene import config
from scrollscene.utils import clamp

logger = logging.getLogger(__name__)


class NavKey(StrEnum):
    FORWARD = "forward"
    BACK = "back"


class PageScroll:
    def __init__(self, key_step: float = config.KEY_STEP, smooth_rate: float = 0.2, snap: float = 0.5) -> None:
        self.key_step = key_step
        self.smooth_rate = smooth_rate
        self.snap = snap
        self.max_offset: float = 0.0
        self.offset: float = 0.0
        self._glide_to: Optional[float] = None

    @property
    def is_gliding(self) -> bool:
        return self._glide_to is not None

    def set_range(self, max_offset: float) -> None:
        self.max_offset = max(0.0, float(max_offset))
        self.offset = clamp(self.offset, 0.0, self.max_offset)
        if self._glide_to is not None:
            self._glide_to = clamp(self._glide_to, 0.0, self.max_offset)

    def scroll_to(self, offset: float) -> float:
        """Jump to offset (user dragged or wheeled). Cancels any glide."""
        self._glide_to = None
        self.offset = clamp(float(offset), 0.0, self.max_offset)
        return self.offset

    def scroll_by(self, delta: float, smooth: bool = True) -> None:
        base = self._glide_to if self._glide_to is not None else self.offset
        destination = clamp(base + delta, 0.0, self.max_offset)
        if smooth:
            self._glide_to = destination
        else:
            self.scroll_to(destination)

    def navigate(self, key: NavKey) -> None:
        step = self.key_step if key == NavKey.FORWARD else -self.key_step
        self.scroll_by(step, smooth=True)

    def advance(self) -> bool:
        """Move one frame toward the glide destination. Returns True if the offset changed."""
        if self._glide_to is None:
            return False
        delta = self._glide_to - self.offset
        if abs(delta) <= self.snap:
            self.offset = self._glide_to
            self._glide_to = None
        else:
            self.offset += delta * self.smooth_rate
        return True


# Qt key names -> navigation direction
KEY_BINDINGS: Dict[str, NavKey] = {
    "Right": NavKey.FORWARD,
    "Left": NavKey.BACK,
}
