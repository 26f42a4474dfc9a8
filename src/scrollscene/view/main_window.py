"""
Main Application Window
=======================
Hosts the scene view and a page scrollbar, owns the frame timer and wires the
window's input into the SceneEngine.

The window is the engine's SceneHost: it re-emits scroll, pointer, key and
resize input as plain signals. Closing the window unmounts the scene, which
detaches every one of those connections at once.
"""
from __future__ import annotations

import logging
from typing import Tuple

from PySide6.QtCore import QElapsedTimer, Qt, QTimer, QUrl, Signal
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import QGraphicsScene, QHBoxLayout, QMainWindow, QPushButton, QScrollBar, QWidget

from scrollscene import config
from scrollscene.app.application import music_muted, remember_music_muted
from scrollscene.controller.audio import AudioController
from scrollscene.controller.engine import SceneEngine
from scrollscene.controller.targets import TargetRegistry
from scrollscene.model.scene import SceneConfig
from scrollscene.model.state import PreloaderStage, SceneStore
from scrollscene.view.asset_loader import QtAssetGate
from scrollscene.view.audio_transport import QtAudioTransport
from scrollscene.view.scene_builder import SceneBuilder
from scrollscene.view.scene_view import SceneView

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    # SceneHost signals
    scroll_changed = Signal(float)
    pointer_moved = Signal(float, float)
    key_pressed = Signal(str)
    resized = Signal(float, float)
    user_interacted = Signal()

    def __init__(self, scene: SceneConfig) -> None:
        super().__init__()
        self.scene_config = scene
        self.setWindowTitle(scene.title)
        self.resize(1280, 720)

        # --- MODEL & ENGINE ---
        self.store = SceneStore()
        self.targets = TargetRegistry()
        self.gate = QtAssetGate(self)
        self.audio = AudioController(QtAudioTransport(scene.music, parent=self), self.store, muted=music_muted())
        self.engine = SceneEngine(scene, self.targets, self.store, self.audio)

        # --- LAYOUT ---
        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        layout = QHBoxLayout(main_widget)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.graphics = QGraphicsScene(self)
        self.view = SceneView(self.graphics)
        layout.addWidget(self.view, 1)

        self.scrollbar = QScrollBar(Qt.Vertical)
        self.scrollbar.setSingleStep(int(scene.key_step))
        self.scrollbar.setPageStep(int(config.LOGICAL_HEIGHT))
        layout.addWidget(self.scrollbar)

        self.btn_sound = QPushButton(self.view)
        self.btn_sound.setFlat(True)
        self.btn_sound.setFocusPolicy(Qt.NoFocus)
        self.btn_sound.setStyleSheet(
            "QPushButton { color: white; letter-spacing: 3px; font-size: 11px; padding: 6px; }"
        )
        self.btn_sound.move(24, 24)
        self._update_sound_button(False)

        self.builder = SceneBuilder(scene, self.graphics, self.targets, config.LOGICAL_WIDTH, config.LOGICAL_HEIGHT)
        self.builder.build_preloader()

        # --- SIGNAL CONNECTIONS ---
        # 1. Raw view input -> host signals
        self.view.wheel_scrolled.connect(self.on_wheel)
        self.view.pointer_moved.connect(self.pointer_moved)
        self.view.key_pressed.connect(self.key_pressed)
        self.view.user_interacted.connect(self.user_interacted)
        self.view.viewport_resized.connect(self.resized)
        self.scrollbar.valueChanged.connect(self.on_scrollbar_changed)

        # 2. Engine state -> widgets
        self.store.stage_changed.connect(self.on_stage_changed)
        self.store.scroll_range_changed.connect(self.on_scroll_range_changed)
        self.store.scroll_changed.connect(self.on_engine_scrolled)
        self.store.sound_state_changed.connect(self._update_sound_button)
        self.btn_sound.clicked.connect(self.on_sound_clicked)

        # 3. Frame loop
        self.clock = QElapsedTimer()
        self.frame_timer = QTimer(self)
        self.frame_timer.setInterval(config.FRAME_INTERVAL_MS)
        self.frame_timer.timeout.connect(self.on_frame)

        self.engine.mount(self, self.gate)
        self.clock.start()
        self.frame_timer.start()
        self.view.setFocus()

    # ------------------------------------------------------------------
    # SceneHost
    # ------------------------------------------------------------------

    def viewport_size(self) -> Tuple[float, float]:
        return config.LOGICAL_WIDTH, config.LOGICAL_HEIGHT

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------

    def on_frame(self) -> None:
        dt = self.clock.restart() / 1000.0
        self.engine.tick(dt)

    def on_wheel(self, delta: float) -> None:
        self.scrollbar.setValue(self.scrollbar.value() + int(delta))

    def on_scrollbar_changed(self, value: int) -> None:
        if self.builder.content is not None:
            self.builder.content.setY(self.engine.pin.pin_translation(value))
        self.scroll_changed.emit(float(value))

    def on_engine_scrolled(self, offset: float) -> None:
        # Keyboard glide: mirror the offset without feeding it back as user input
        self.scrollbar.blockSignals(True)
        self.scrollbar.setValue(int(round(offset)))
        self.scrollbar.blockSignals(False)

    def on_scroll_range_changed(self, max_offset: float) -> None:
        self.scrollbar.blockSignals(True)
        self.scrollbar.setRange(0, int(max_offset))
        self.scrollbar.blockSignals(False)

    def on_stage_changed(self, stage: int) -> None:
        if stage == PreloaderStage.COUNTER_TWEEN and self.builder.content is None:
            self.builder.build_content(self.gate.images, self.on_cta_clicked)

    def on_sound_clicked(self) -> None:
        self.audio.toggle()
        remember_music_muted(self.audio.muted)

    def on_cta_clicked(self) -> None:
        if self.scene_config.cta_url:
            logger.info(f"Opening {self.scene_config.cta_url}")
            QDesktopServices.openUrl(QUrl(self.scene_config.cta_url))

    def _update_sound_button(self, playing: bool) -> None:
        self.btn_sound.setText("● SOUND ON" if playing else "○ SOUND OFF")
        self.btn_sound.adjustSize()

    def closeEvent(self, event) -> None:
        self.frame_timer.stop()
        self.engine.unmount()
        super().closeEvent(event)
