"""
Layer Parallax Model
====================
Maps the virtual clock to each layer's horizontal travel. Pure: the same
smoothed_time always produces the same positions, which is what makes
reverse scrolling retrace the forward path exactly.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Sequence

import numpy as np

from scrollscene import config
from scrollscene.controller.targets import TargetRegistry
from scrollscene.model.scene import Layer, TargetProperty

if TYPE_CHECKING:
    import numpy.typing as npt


def position(
    layer: Layer,
    smoothed_time: float,
    scene_duration: float = config.SCENE_DURATION,
    travel_distance: float = config.TRAVEL_VIEWPORTS,
) -> float:
    """Distance the layer has travelled at smoothed_time (positive = scrolled left)."""
    return layer.velocity_coefficient * smoothed_time / scene_duration * travel_distance


class ParallaxModel:
    """Evaluates every layer's position once per frame."""

    def __init__(
        self,
        layers: Sequence[Layer],
        scene_duration: float = config.SCENE_DURATION,
        travel_viewports: float = config.TRAVEL_VIEWPORTS,
    ) -> None:
        self.layers = tuple(layers)
        self.scene_duration = scene_duration
        self.travel_viewports = travel_viewports
        self._index: Dict[str, int] = {layer.id: i for i, layer in enumerate(self.layers)}
        self._coefficients: npt.NDArray[np.float64] = np.array(
            [layer.velocity_coefficient for layer in self.layers], dtype=np.float64
        )

    def positions(self, smoothed_time: float, viewport_width: float = 1.0) -> npt.NDArray[np.float64]:
        """Travel of all layers, in pixels when viewport_width is given, else in viewport widths."""
        travel = self.travel_viewports * viewport_width
        return self._coefficients * (smoothed_time / self.scene_duration) * travel

    def container_offset(self, layer_id: str, smoothed_time: float) -> float:
        """On-screen left edge of a layer in viewport widths: its resting x minus the distance travelled."""
        layer = self.layers[self._index[layer_id]]
        return layer.x - position(layer, smoothed_time, self.scene_duration, self.travel_viewports)

    def has_layer(self, layer_id: str) -> bool:
        return layer_id in self._index

    def apply(self, smoothed_time: float, targets: TargetRegistry, viewport_width: float) -> None:
        offsets = -self.positions(smoothed_time, viewport_width)
        for layer, offset in zip(self.layers, offsets):
            targets.apply(layer.id, TargetProperty.X, float(offset))
