"""
Render Targets
==============
The engine never touches widgets directly. Every animated element is reached
through the small Target protocol, so controllers can run headless in tests
and a destroyed element simply drops out of the frame.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional, Protocol

from scrollscene.model.scene import TargetProperty

logger = logging.getLogger(__name__)


class Target(Protocol):
    def set_property(self, prop: TargetProperty, value: float) -> None: ...
    def is_alive(self) -> bool: ...


class TargetRegistry:
    """Id -> Target lookup that skips missing or dead targets for the frame."""

    def __init__(self, targets: Optional[Dict[str, Target]] = None) -> None:
        self._targets: Dict[str, Target] = dict(targets or {})
        self._reported: set[str] = set()

    def register(self, target_id: str, target: Target) -> None:
        self._targets[target_id] = target
        self._reported.discard(target_id)

    def unregister(self, target_id: str) -> None:
        self._targets.pop(target_id, None)

    def clear(self) -> None:
        self._targets.clear()
        self._reported.clear()

    def get(self, target_id: str) -> Optional[Target]:
        target = self._targets.get(target_id)
        if target is None or not target.is_alive():
            if target_id not in self._reported:
                logger.debug(f"Target '{target_id}' is missing or unmounted; skipping its updates.")
                self._reported.add(target_id)
            return None
        return target

    def apply(self, target_id: str, prop: TargetProperty, value: float) -> bool:
        """Write one property. Returns False when the target was skipped."""
        target = self.get(target_id)
        if target is None:
            return False
        target.set_property(prop, value)
        return True

    def __contains__(self, target_id: str) -> bool:
        return target_id in self._targets

    def __len__(self) -> int:
        return len(self._targets)
