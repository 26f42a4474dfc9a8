"""
Qt Asset Loader
===============
AssetGate implementation that decodes pictures with QImageReader on the next
event-loop turn, so loading never blocks the startup sequence.
"""
from __future__ import annotations

import logging
import os
from typing import Dict, Optional

from PySide6.QtCore import QObject, QTimer
from PySide6.QtGui import QImage, QImageReader

from scrollscene.controller.assets import SettledCallback
from scrollscene.model.scene import Asset, AssetKind

logger = logging.getLogger(__name__)


class QtAssetGate(QObject):
    """Decoded images are kept so the scene builder can reuse them."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.images: Dict[str, QImage] = {}

    def load(self, asset: Asset, on_settled: SettledCallback) -> None:
        QTimer.singleShot(0, self, lambda: self._load_now(asset, on_settled))

    def _load_now(self, asset: Asset, on_settled: SettledCallback) -> None:
        if asset.kind == AssetKind.AUDIO:
            # Audio is decoded by the media backend; only check it is reachable
            ok = os.path.isfile(asset.uri)
            if not ok:
                logger.warning(f"Audio asset not found: {asset.uri}")
            on_settled(asset.uri, ok)
            return

        reader = QImageReader(asset.uri)
        image = reader.read()
        if image.isNull():
            logger.warning(f"Failed to load image '{asset.uri}': {reader.errorString()}")
            on_settled(asset.uri, False)
            return
        self.images[asset.uri] = image
        on_settled(asset.uri, True)
