"""
Scene Engine
============
Owns every controller of one mounted scene and drives them from a single
frame tick, in a fixed order:

    1. Preloader (the gate; nothing else runs until READY)
    2. Scroll glide + pin/scrub progress
    3. Parallax, timeline and cue triggers (each reads only smoothed_time)
    4. Ambient loops and the pointer follower (wall-clock, independent)

Input from the host (scroll, pointer, keys, resize) is coalesced: only the
latest value seen before a tick is applied. All host connections live in one
ListenerGroup, so unmount() releases everything in a single step.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Protocol, Tuple

from scrollscene import config
from scrollscene.controller.assets import AssetGate
from scrollscene.controller.audio import AudioController
from scrollscene.controller.parallax import ParallaxModel
from scrollscene.controller.pin import PinScrubController
from scrollscene.controller.pointer import PointerFollower
from scrollscene.controller.preloader import PreloaderSequencer
from scrollscene.controller.scroll import KEY_BINDINGS, PageScroll
from scrollscene.controller.targets import TargetRegistry
from scrollscene.controller.timeline import AmbientLoopPlayer, TimelineScheduler
from scrollscene.controller.triggers import CueTriggerSystem
from scrollscene.model.scene import SceneConfig
from scrollscene.model.state import SceneStore

logger = logging.getLogger(__name__)


class SceneHost(Protocol):
    """What the engine needs from the window it is mounted in."""
    scroll_changed: Any         # Signal(float): absolute scroll offset
    pointer_moved: Any          # Signal(float, float)
    key_pressed: Any            # Signal(str): Qt key name, e.g. "Right"
    resized: Any                # Signal(float, float)
    user_interacted: Any        # Signal()

    def viewport_size(self) -> Tuple[float, float]: ...


class ListenerGroup:
    """Connections acquired together and released together."""

    def __init__(self) -> None:
        self._connections: List[Tuple[Any, Callable]] = []

    def connect(self, signal: Any, slot: Callable) -> None:
        signal.connect(slot)
        self._connections.append((signal, slot))

    def detach_all(self) -> int:
        count = len(self._connections)
        while self._connections:
            signal, slot = self._connections.pop()
            signal.disconnect(slot)
        return count

    def __len__(self) -> int:
        return len(self._connections)


class SceneEngine:
    def __init__(
        self,
        scene: SceneConfig,
        targets: TargetRegistry,
        store: Optional[SceneStore] = None,
        audio: Optional[AudioController] = None,
    ) -> None:
        self.scene = scene
        self.targets = targets
        self.store = store or SceneStore()
        self.audio = audio

        self.preloader = PreloaderSequencer(self.store, targets, scene.assets)
        self.pin = PinScrubController(
            self.store.progress,
            scene_duration=scene.scene_duration,
            pin_distance=scene.pin_distance,
            scrub_rate=scene.scrub_rate,
        )
        self.scroll = PageScroll(key_step=scene.key_step)
        self.parallax = ParallaxModel(scene.layers, scene.scene_duration, scene.travel_viewports)
        self.timeline = TimelineScheduler(scene.segments)
        self.triggers = CueTriggerSystem(scene.triggers, self.parallax)
        self.loops = AmbientLoopPlayer(scene.loops)
        self.pointer = PointerFollower(self.store.pointer, scene.follower, scene.pointer_rate)

        self.viewport: Tuple[float, float] = (0.0, 0.0)
        self.mounted = False
        self._listeners = ListenerGroup()
        self._pending_scroll: Optional[float] = None
        self._pending_pointer: Optional[Tuple[float, float]] = None
        self._last_time: Optional[float] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self, host: SceneHost, gate: AssetGate) -> None:
        if self.mounted:
            logger.warning("Scene already mounted; ignoring.")
            return
        self.mounted = True

        self._listeners.connect(host.scroll_changed, self._on_scroll)
        self._listeners.connect(host.pointer_moved, self._on_pointer)
        self._listeners.connect(host.key_pressed, self._on_key)
        self._listeners.connect(host.resized, self._on_resize)
        if self.audio is not None:
            self.audio.bind_interaction(host.user_interacted)

        self.viewport = tuple(map(float, host.viewport_size()))
        self.refresh_layout()
        self.timeline.apply(0.0, self.targets)
        logger.info(f"Scene '{self.scene.title}' mounted ({self.viewport[0]:.0f}x{self.viewport[1]:.0f}).")

        self.preloader.start(gate, self._on_ready)

    def unmount(self) -> None:
        """Detach every listener and stop all per-frame work. Safe to call twice."""
        if not self.mounted:
            return
        self.mounted = False
        detached = self._listeners.detach_all()
        if self.audio is not None:
            self.audio.shutdown()
        self.targets.clear()
        self._pending_scroll = None
        self._pending_pointer = None
        logger.info(f"Scene unmounted; {detached} listeners detached.")

    def refresh_layout(self) -> None:
        """Recompute the pinned range; smoothed time is preserved."""
        max_offset = self.pin.refresh(self.viewport[1])
        self.scroll.set_range(max_offset)
        self.pin.set_scroll(self.scroll.offset)
        self.store.scroll_range_changed.emit(max_offset)

    # ------------------------------------------------------------------
    # Frame tick
    # ------------------------------------------------------------------

    def tick(self, dt: float) -> None:
        if not self.mounted:
            return
        dt = min(max(0.0, dt), config.MAX_FRAME_DT)

        self.preloader.tick(dt)
        if not self.mounted or not self.store.is_ready:
            return

        self._apply_scroll_input()
        t = self.pin.step()

        width = self.viewport[0]
        self.parallax.apply(t, self.targets, width)
        self.timeline.apply(t, self.targets)
        self.triggers.update(t, dt, self.targets)

        self.loops.advance(dt, self.targets)
        if self._pending_pointer is not None:
            self.pointer.set_target(*self._pending_pointer)
            self._pending_pointer = None
        self.pointer.step(self.targets)

        if t != self._last_time:
            self._last_time = t
            self.store.progress_changed.emit(t)

    def _apply_scroll_input(self) -> None:
        if self._pending_scroll is not None:
            self.scroll.scroll_to(self._pending_scroll)
            self._pending_scroll = None
            self.pin.set_scroll(self.scroll.offset)
        elif self.scroll.advance():
            self.pin.set_scroll(self.scroll.offset)
            self.store.scroll_changed.emit(self.scroll.offset)

    # ------------------------------------------------------------------
    # Host events
    # ------------------------------------------------------------------

    def _on_ready(self) -> None:
        # Layout may have changed while hidden behind the preloader
        self.refresh_layout()
        self.pointer.activate(*self.viewport)
        if self.audio is not None:
            self.audio.start()

    def _on_scroll(self, offset: float) -> None:
        self._pending_scroll = float(offset)

    def _on_pointer(self, x: float, y: float) -> None:
        self._pending_pointer = (float(x), float(y))

    def _on_key(self, key_name: str) -> None:
        if not self.store.is_ready:
            return
        key = KEY_BINDINGS.get(key_name)
        if key is not None:
            self.scroll.navigate(key)

    def _on_resize(self, width: float, height: float) -> None:
        self.viewport = (float(width), float(height))
        self.refresh_layout()
