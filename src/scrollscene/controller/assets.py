"""
Asset Readiness Gate
====================
The preloader only needs to know when every asset has settled. A failed
asset counts as settled: the startup sequence must never hang on a single
bad file.

Classes:
    AssetGate: Protocol every loader implements (see view.asset_loader).
    AssetTracker: Counts settled assets for the preloader.
"""
from __future__ import annotations

import logging
from typing import Callable, Iterable, Protocol

from scrollscene.model.scene import Asset

logger = logging.getLogger(__name__)

SettledCallback = Callable[[str, bool], None]


class AssetGate(Protocol):
    def load(self, asset: Asset, on_settled: SettledCallback) -> None: ...


class AssetTracker:
    """Tracks which assets have settled, successfully or not."""

    def __init__(self, assets: Iterable[Asset]) -> None:
        self.assets = list(assets)
        self.loaded: set[str] = set()
        self.failed: set[str] = set()
        self._started = False

    @property
    def total(self) -> int:
        return len({a.uri for a in self.assets})

    @property
    def settled_count(self) -> int:
        return len(self.loaded | self.failed)

    @property
    def all_settled(self) -> bool:
        return self._started and self.settled_count >= self.total

    def start(self, gate: AssetGate) -> None:
        if self._started:
            logger.warning("Asset loading already started; ignoring.")
            return
        self._started = True
        logger.info(f"Loading {self.total} assets...")
        for asset in self.assets:
            gate.load(asset, self._on_settled)

    def _on_settled(self, uri: str, ok: bool) -> None:
        if uri in self.loaded or uri in self.failed:
            return
        if ok:
            self.loaded.add(uri)
        else:
            logger.warning(f"Asset '{uri}' failed to load; continuing without it.")
            self.failed.add(uri)
        logger.debug(f"Assets settled: {self.settled_count}/{self.total}")
