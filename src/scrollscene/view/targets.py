"""
Graphics Targets
================
Adapters that let the engine drive QGraphicsItems through the Target protocol.

X and Y are offsets from the item's laid-out base position, except for
absolute targets (the pointer follower), where they are scene coordinates of
the item's center.
"""
from __future__ import annotations

from typing import Optional

import shiboken6
from PySide6.QtCore import QPointF
from PySide6.QtGui import QColor
from PySide6.QtWidgets import QGraphicsDropShadowEffect, QGraphicsItem, QGraphicsSimpleTextItem

from scrollscene.model.scene import TargetProperty

GLOW_RADIUS = 25.0


class GraphicsTarget:
    def __init__(self, item: QGraphicsItem, absolute: bool = False) -> None:
        self.item = item
        self.absolute = absolute
        self.base = QPointF(item.pos())
        self._dx = 0.0
        self._dy = 0.0
        self._glow: Optional[QGraphicsDropShadowEffect] = None

    def is_alive(self) -> bool:
        return shiboken6.isValid(self.item) and self.item.scene() is not None

    def set_property(self, prop: TargetProperty, value: float) -> None:
        if prop == TargetProperty.X:
            self._dx = value
            self._place()
        elif prop == TargetProperty.Y:
            self._dy = value
            self._place()
        elif prop == TargetProperty.OPACITY:
            self.item.setOpacity(value)
            # fully transparent items stop taking input too
            self.item.setVisible(value > 0.0)
        elif prop == TargetProperty.SCALE:
            self.item.setTransformOriginPoint(self.item.boundingRect().center())
            self.item.setScale(value)
        elif prop == TargetProperty.GLOW:
            self._set_glow(value)
        elif prop == TargetProperty.TEXT and isinstance(self.item, QGraphicsSimpleTextItem):
            self.item.setText(f"{int(value)}%")

    def _place(self) -> None:
        if self.absolute:
            center = self.item.boundingRect().center()
            self.item.setPos(self._dx - center.x(), self._dy - center.y())
        else:
            self.item.setPos(self.base.x() + self._dx, self.base.y() + self._dy)

    def _set_glow(self, amount: float) -> None:
        if amount <= 0.0:
            if self._glow is not None:
                self.item.setGraphicsEffect(None)  # deletes the effect
                self._glow = None
            return
        if self._glow is None:
            self._glow = QGraphicsDropShadowEffect()
            self._glow.setOffset(0.0, 0.0)
            self.item.setGraphicsEffect(self._glow)
        self._glow.setBlurRadius(GLOW_RADIUS * amount)
        self._glow.setColor(QColor(255, 255, 255, int(255 * min(1.0, amount))))
