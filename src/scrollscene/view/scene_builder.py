"""
Scene Builder
=============
Turns the static SceneConfig into QGraphicsItems and registers a
GraphicsTarget for every element the engine animates.

Item tree (opacity propagates to children; nothing above the layers is ever
scaled or moved, so the pinned frame stays put):

    content                       background, fades in after the preloader
      layer items (by z)          moved along X by the parallax model
        decorations / orbs        carried by their layer
      cue blocks, CTA, follower
    preloader                     overlay with counter and title
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Dict, Mapping, Optional

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QFont, QImage, QLinearGradient, QPen, QPixmap, QRadialGradient, QTransform
from PySide6.QtWidgets import (
    QGraphicsEllipseItem, QGraphicsItem, QGraphicsPixmapItem, QGraphicsProxyWidget,
    QGraphicsRectItem, QGraphicsScene, QGraphicsSimpleTextItem, QPushButton
)

from scrollscene.controller.preloader import CONTENT, COUNTER, OVERLAY, TITLE
from scrollscene.controller.targets import TargetRegistry
from scrollscene.model.scene import Cue, Decoration, Layer, SceneConfig, TriggerZone
from scrollscene.view.targets import GraphicsTarget

logger = logging.getLogger(__name__)

BACKGROUND_TOP = "#020024"
BACKGROUND_BOTTOM = "#1a1a40"
FONT_FAMILY = "Cormorant Garamond"

Z_CUES = 50
Z_FOLLOWER = 60
Z_PRELOADER = 100


def _bare_rect(rect: QRectF, parent: Optional[QGraphicsItem] = None) -> QGraphicsRectItem:
    item = QGraphicsRectItem(rect, parent)
    item.setPen(QPen(Qt.NoPen))
    return item


class SceneBuilder:
    def __init__(
        self,
        scene: SceneConfig,
        graphics: QGraphicsScene,
        targets: TargetRegistry,
        width: float,
        height: float,
    ) -> None:
        self.scene = scene
        self.graphics = graphics
        self.targets = targets
        self.width = width
        self.height = height
        self.content: Optional[QGraphicsRectItem] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build_preloader(self) -> None:
        overlay = _bare_rect(QRectF(0, 0, self.width, self.height))
        overlay.setBrush(QBrush(QColor(BACKGROUND_TOP)))
        overlay.setZValue(Z_PRELOADER)
        # The overlay must not swallow input once it has faded out
        overlay.setAcceptedMouseButtons(Qt.NoButton)
        self.graphics.addItem(overlay)

        counter = QGraphicsSimpleTextItem("0%", overlay)
        counter.setFont(QFont(FONT_FAMILY, 20, QFont.Light))
        counter.setBrush(QColor(255, 255, 255, 128))
        counter.setPos(self.width - 120, self.height - 70)

        title = QGraphicsSimpleTextItem(self.scene.title.upper(), overlay)
        title.setFont(QFont(FONT_FAMILY, 72))
        title.setBrush(QColor(255, 255, 255, 230))
        self._center(title, self.width / 2, self.height / 2)
        title.setOpacity(0.0)

        self.targets.register(OVERLAY, GraphicsTarget(overlay))
        self.targets.register(COUNTER, GraphicsTarget(counter))
        self.targets.register(TITLE, GraphicsTarget(title))

    def build_content(self, images: Mapping[str, QImage], on_cta: Callable[[], None]) -> None:
        """Create the scene proper. Called once, after the assets settled."""
        content = _bare_rect(QRectF(0, 0, self.width, self.height))
        gradient = QLinearGradient(0, 0, 0, self.height)
        gradient.setColorAt(0.0, QColor(BACKGROUND_TOP))
        gradient.setColorAt(1.0, QColor(BACKGROUND_BOTTOM))
        content.setBrush(QBrush(gradient))
        content.setFlag(QGraphicsItem.ItemClipsChildrenToShape, True)
        content.setOpacity(0.0)
        self.graphics.addItem(content)
        self.content = content
        self.targets.register(CONTENT, GraphicsTarget(content))

        layer_items: Dict[str, QGraphicsItem] = {}
        for layer in sorted(self.scene.layers, key=lambda l: l.z):
            layer_items[layer.id] = self._build_layer(layer, images, content)

        for deco in self.scene.decorations:
            self._build_decoration(deco, images, layer_items[deco.layer])
        for zone in self.scene.triggers:
            self._build_orb(zone, images, layer_items[zone.container])
        for cue in self.scene.cues:
            self._build_cue(cue, content)

        self._build_cta(on_cta, content)
        if self.scene.follower:
            self._build_follower(content)

        logger.info(f"Scene content built: {len(self.targets)} targets registered.")

    # ------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------

    def _pixmap(self, images: Mapping[str, QImage], uri: Optional[str], height: float) -> Optional[QPixmap]:
        if uri is None or uri not in images:
            return None
        return QPixmap.fromImage(images[uri]).scaledToHeight(int(height), Qt.SmoothTransformation)

    def _placeholder(self, rect: QRectF, parent: QGraphicsItem, color: QColor) -> QGraphicsRectItem:
        item = _bare_rect(rect, parent)
        item.setBrush(QBrush(color))
        return item

    def _build_layer(self, layer: Layer, images: Mapping[str, QImage], parent: QGraphicsItem) -> QGraphicsItem:
        w, h = self.width, self.height
        top, height = layer.y * h, layer.height * h
        container = _bare_rect(QRectF(0, 0, layer.width * w, h), parent)
        container.setPos(layer.x * w, 0.0)
        container.setZValue(layer.z)
        container.setOpacity(layer.opacity)

        if layer.image is not None:
            pixmap = self._pixmap(images, layer.image, height)
            tiles = max(1, math.ceil(layer.width)) if layer.width > 1.0 else 1
            for i in range(tiles):
                if pixmap is not None:
                    tile_pixmap = pixmap.scaled(int(w), int(height)) if tiles > 1 else pixmap
                    if i % 2 == 1 and tiles > 1:
                        tile_pixmap = tile_pixmap.transformed(QTransform().scale(-1, 1))
                    item = QGraphicsPixmapItem(tile_pixmap, container)
                    item.setPos(i * w, top)
                else:
                    tile_width = w if tiles > 1 else layer.width * w
                    self._placeholder(QRectF(i * w, top, tile_width, height), container, QColor(255, 255, 255, 18))

        self.targets.register(layer.id, GraphicsTarget(container))
        return container

    def _build_decoration(self, deco: Decoration, images: Mapping[str, QImage], layer_item: QGraphicsItem) -> None:
        height = deco.height * self.height
        pixmap = self._pixmap(images, deco.image, height)
        x = deco.x * layer_item.boundingRect().width()
        if pixmap is not None:
            if deco.mirrored:
                pixmap = pixmap.transformed(QTransform().scale(-1, 1))
            item = QGraphicsPixmapItem(pixmap, layer_item)
        else:
            item = self._placeholder(QRectF(0, 0, height * 0.4, height), layer_item, QColor(200, 200, 255, 40))
        # y is the bottom edge of the picture
        item.setPos(x, deco.y * self.height - item.boundingRect().height())
        item.setOpacity(deco.opacity)

    def _build_orb(self, zone: TriggerZone, images: Mapping[str, QImage], layer_item: QGraphicsItem) -> None:
        size = zone.element_width * self.width
        pixmap = self._pixmap(images, zone.image, size)
        if pixmap is not None:
            item = QGraphicsPixmapItem(pixmap, layer_item)
        else:
            item = QGraphicsEllipseItem(QRectF(0, 0, size, size), layer_item)
            item.setPen(QPen(Qt.NoPen))
            gradient = QRadialGradient(QPointF(size / 2, size / 2), size / 2)
            gradient.setColorAt(0.0, QColor(255, 255, 255, 230))
            gradient.setColorAt(1.0, QColor(180, 180, 255, 0))
            item.setBrush(QBrush(gradient))
        item.setPos(zone.element_x * self.width, zone.y * self.height)

        target = GraphicsTarget(item)
        for prop_range in zone.effect.properties:
            target.set_property(prop_range.property, prop_range.from_value)
        self.targets.register(zone.target, target)

    def _build_cue(self, cue: Cue, parent: QGraphicsItem) -> None:
        block = _bare_rect(QRectF(0, 0, 0, 0), parent)
        block.setZValue(Z_CUES)

        heading = QGraphicsSimpleTextItem(cue.heading, block)
        heading.setFont(QFont(FONT_FAMILY, 34, QFont.Light))
        heading.setBrush(QColor("white"))
        body = QGraphicsSimpleTextItem(cue.body, block)
        body.setFont(QFont(FONT_FAMILY, 18, QFont.Light, True))
        body.setBrush(QColor(255, 255, 255, 204))

        self._center(heading, 0.0, -24.0)
        self._center(body, 0.0, 30.0)
        block.setPos(self.width / 2, self.height / 2)
        block.setOpacity(0.0)
        self.targets.register(cue.id, GraphicsTarget(block))

    def _build_cta(self, on_cta: Callable[[], None], parent: QGraphicsItem) -> None:
        button = QPushButton("WAITING FOR YOUR ANSWER")
        button.setCursor(Qt.PointingHandCursor)
        button.setStyleSheet(
            "QPushButton { color: rgba(255,255,255,230); background: rgba(255,255,255,13);"
            " border: 1px solid rgba(255,255,255,51); border-radius: 20px; padding: 10px 24px;"
            " letter-spacing: 3px; }"
            "QPushButton:hover { background: rgba(255,255,255,38); border-color: rgba(255,255,255,102); }"
        )
        button.clicked.connect(on_cta)

        proxy = QGraphicsProxyWidget(parent)
        proxy.setWidget(button)
        proxy.setZValue(Z_CUES)
        size = proxy.size()
        proxy.setPos(self.width / 2 - size.width() / 2, self.height - 48 - size.height())
        proxy.setOpacity(0.0)
        proxy.setVisible(False)
        self.targets.register("cta", GraphicsTarget(proxy))

    def _build_follower(self, parent: QGraphicsItem) -> None:
        size = 36.0
        item = QGraphicsEllipseItem(QRectF(0, 0, size, size), parent)
        item.setPen(QPen(Qt.NoPen))
        gradient = QRadialGradient(QPointF(size / 2, size / 2), size / 2)
        gradient.setColorAt(0.0, QColor(255, 255, 255, 160))
        gradient.setColorAt(1.0, QColor(255, 255, 255, 0))
        item.setBrush(QBrush(gradient))
        item.setZValue(Z_FOLLOWER)
        item.setAcceptedMouseButtons(Qt.NoButton)
        self.targets.register(self.scene.follower, GraphicsTarget(item, absolute=True))

    @staticmethod
    def _center(item: QGraphicsSimpleTextItem, cx: float, cy: float) -> None:
        rect = item.boundingRect()
        item.setPos(cx - rect.width() / 2, cy - rect.height() / 2)
