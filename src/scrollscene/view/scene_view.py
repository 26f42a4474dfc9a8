"""
Scene View
==========
QGraphicsView showing the fixed logical scene rectangle scaled to the window.
It converts Qt input events into the plain signals the engine listens to.
"""
from __future__ import annotations

from PySide6.QtCore import QRectF, Qt, Signal
from PySide6.QtGui import QKeySequence, QPainter
from PySide6.QtWidgets import QGraphicsScene, QGraphicsView, QWidget

from scrollscene import config


class SceneView(QGraphicsView):
    wheel_scrolled = Signal(float)          # pixels, positive = forward
    pointer_moved = Signal(float, float)    # scene coordinates
    key_pressed = Signal(str)
    user_interacted = Signal()
    viewport_resized = Signal(float, float)

    def __init__(self, scene: QGraphicsScene, parent: QWidget | None = None) -> None:
        super().__init__(scene, parent)
        self.logical_rect = QRectF(0, 0, config.LOGICAL_WIDTH, config.LOGICAL_HEIGHT)
        scene.setSceneRect(self.logical_rect)

        self.setRenderHints(QPainter.Antialiasing | QPainter.SmoothPixmapTransform)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setFrameShape(QGraphicsView.NoFrame)
        self.setBackgroundBrush(Qt.black)
        self.setViewportUpdateMode(QGraphicsView.FullViewportUpdate)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self.fitInView(self.logical_rect, Qt.KeepAspectRatio)
        self.viewport_resized.emit(self.logical_rect.width(), self.logical_rect.height())

    def wheelEvent(self, event) -> None:
        # 120 units per notch; scroll 100 px per notch like a browser page
        delta = -event.angleDelta().y() / 120.0 * 100.0
        if delta:
            self.wheel_scrolled.emit(delta)
            self.user_interacted.emit()
        event.accept()

    def mouseMoveEvent(self, event) -> None:
        pos = self.mapToScene(event.position().toPoint())
        self.pointer_moved.emit(pos.x(), pos.y())
        super().mouseMoveEvent(event)

    def mousePressEvent(self, event) -> None:
        self.user_interacted.emit()
        super().mousePressEvent(event)

    def keyPressEvent(self, event) -> None:
        name = QKeySequence(event.key()).toString()
        if name:
            self.key_pressed.emit(name)
        self.user_interacted.emit()
        super().keyPressEvent(event)
