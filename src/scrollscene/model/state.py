"""
Scene State (Runtime Data Model)
================================
Mutable per-frame state of the mounted scene, plus the signal hub the view
listens to.

ProgressState is written only by the pin/scrub controller and PointerState
only by the pointer follower. Everything else reads them.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from PySide6.QtCore import QObject, Signal


class PreloaderStage(IntEnum):
    """Linear startup phases."""
    LOADING = 0
    COUNTER_TWEEN = 1
    NAME_REVEAL = 2
    FADE_OUT = 3
    READY = 4


@dataclass
class ProgressState:
    raw_progress: float = 0.0       # [0, 1], from the pinned scroll offset
    smoothed_progress: float = 0.0  # [0, 1], lagged copy of raw_progress
    smoothed_time: float = 0.0      # [0, scene_duration]


@dataclass
class PointerState:
    target_x: float = 0.0
    target_y: float = 0.0
    current_x: float = 0.0
    current_y: float = 0.0
    active: bool = False


class SceneStore(QObject):
    """Central signal hub shared by the engine and the view."""
    stage_changed = Signal(int)
    ready = Signal()
    progress_changed = Signal(float)        # smoothed_time
    scroll_range_changed = Signal(float)    # max scroll offset
    scroll_changed = Signal(float)          # applied scroll offset
    sound_state_changed = Signal(bool)      # True while audio is actually playing

    def __init__(self) -> None:
        super().__init__()
        self.stage = PreloaderStage.LOADING
        self.progress = ProgressState()
        self.pointer = PointerState()

    def set_stage(self, stage: PreloaderStage) -> None:
        if stage != self.stage:
            self.stage = stage
            self.stage_changed.emit(int(stage))

    @property
    def is_ready(self) -> bool:
        return self.stage == PreloaderStage.READY
