"""
Scene Description (Static Configuration)
========================================
Declarative data the engine is built from: parallax layers, keyframed
timeline segments, container-relative trigger zones and ambient loops.

Everything here is created once when the scene is constructed and never
mutated afterwards. The controllers evaluate these records every frame.

Classes:
    Layer: A parallax layer and its velocity coefficient.
    TimelineSegment: One keyframed property change on the virtual clock.
    TriggerZone: A highlight effect bound to an element's on-screen position.
    AmbientLoop: A wall-clock yoyo tween (idle motion).
    SceneConfig: The root container.
"""
from __future__ import annotations

from dataclasses import dataclass, field, asdict
from enum import StrEnum
from typing import Any, Dict, List, Optional
import logging

from scrollscene import config
from scrollscene.model.easing import get_easing

logger = logging.getLogger(__name__)


class SceneConfigError(ValueError):
    """Raised when a scene description violates an authoring invariant."""


class TargetProperty(StrEnum):
    X = "x"
    Y = "y"
    OPACITY = "opacity"
    SCALE = "scale"
    GLOW = "glow"
    TEXT = "text"


class AssetKind(StrEnum):
    IMAGE = "image"
    AUDIO = "audio"


@dataclass(frozen=True)
class Layer:
    """
    A horizontally travelling layer.

    velocity_coefficient is the fraction of the world's travel this layer
    experiences (0.04 = near-static sky, 1.0 = world, 1.5 = foreground reeds).
    """
    id: str
    velocity_coefficient: float
    image: Optional[str] = None
    width: float = 1.0      # in viewport widths
    z: int = 0
    x: float = 0.0          # left edge, viewport widths
    y: float = 0.0          # top edge, viewport heights
    height: float = 1.0     # viewport heights
    opacity: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Layer:
        return Layer(
            id=data["id"],
            velocity_coefficient=float(data["velocity_coefficient"]),
            image=data.get("image"),
            width=float(data.get("width", 1.0)),
            z=int(data.get("z", 0)),
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            height=float(data.get("height", 1.0)),
            opacity=float(data.get("opacity", 1.0)),
        )


@dataclass(frozen=True)
class TimelineSegment:
    """A keyframed change of one property of one target on the virtual clock."""
    target: str
    property: TargetProperty
    start: float
    end: float
    from_value: float
    to_value: float
    easing: str = "power1.out"

    @property
    def duration(self) -> float:
        return self.end - self.start

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["property"] = self.property.value
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> TimelineSegment:
        return TimelineSegment(
            target=data["target"],
            property=TargetProperty(data["property"]),
            start=float(data["start"]),
            end=float(data["end"]),
            from_value=float(data["from_value"]),
            to_value=float(data["to_value"]),
            easing=data.get("easing", "power1.out"),
        )


@dataclass(frozen=True)
class PropertyRange:
    property: TargetProperty
    from_value: float
    to_value: float


@dataclass(frozen=True)
class TriggerEffect:
    """
    Tagged effect descriptor played on wall-clock time when a zone is entered.
    """
    duration: float = 0.8
    easing: str = "power2.out"
    properties: tuple[PropertyRange, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "duration": self.duration,
            "easing": self.easing,
            "properties": {
                p.property.value: [p.from_value, p.to_value] for p in self.properties
            },
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> TriggerEffect:
        ranges = tuple(
            PropertyRange(TargetProperty(name), float(values[0]), float(values[1]))
            for name, values in data.get("properties", {}).items()
        )
        return TriggerEffect(
            duration=float(data.get("duration", 0.8)),
            easing=data.get("easing", "power2.out"),
            properties=ranges,
        )


# Orb highlight: grows from 0.9 to 1.3, becomes opaque and gains its glow
DEFAULT_HIGHLIGHT = TriggerEffect(
    duration=0.8,
    easing="power2.out",
    properties=(
        PropertyRange(TargetProperty.SCALE, 0.9, 1.3),
        PropertyRange(TargetProperty.OPACITY, 0.5, 1.0),
        PropertyRange(TargetProperty.GLOW, 0.0, 1.0),
    ),
)


@dataclass(frozen=True)
class TriggerZone:
    """
    Highlight zone for an element carried by a scrubbed container layer.

    element_x / element_width are measured inside the container, in viewport
    widths. Thresholds are fractions of the container's visible extent:
    the zone is entered when the element's leading edge passes enter_threshold
    and left when its trailing edge passes exit_threshold.
    """
    target: str
    container: str
    element_x: float
    element_width: float
    enter_threshold: float = 0.22
    exit_threshold: float = 0.05
    effect: TriggerEffect = DEFAULT_HIGHLIGHT
    y: float = 0.5          # vertical placement, fraction of viewport height
    image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["effect"] = self.effect.to_dict()
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> TriggerZone:
        return TriggerZone(
            target=data["target"],
            container=data["container"],
            element_x=float(data["element_x"]),
            element_width=float(data["element_width"]),
            enter_threshold=float(data.get("enter_threshold", 0.22)),
            exit_threshold=float(data.get("exit_threshold", 0.05)),
            effect=TriggerEffect.from_dict(data["effect"]) if "effect" in data else DEFAULT_HIGHLIGHT,
            y=float(data.get("y", 0.5)),
            image=data.get("image"),
        )


@dataclass(frozen=True)
class AmbientLoop:
    """Infinite yoyo tween: property swings from 0 to amplitude and back."""
    target: str
    property: TargetProperty
    amplitude: float
    period: float           # seconds for one direction
    easing: str = "sine.inOut"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["property"] = self.property.value
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> AmbientLoop:
        return AmbientLoop(
            target=data["target"],
            property=TargetProperty(data["property"]),
            amplitude=float(data["amplitude"]),
            period=float(data["period"]),
            easing=data.get("easing", "sine.inOut"),
        )


@dataclass(frozen=True)
class Cue:
    """Narrative text block; its timing lives in the timeline segments."""
    id: str
    heading: str
    body: str = ""


@dataclass(frozen=True)
class Decoration:
    """Static picture carried by a layer. Positions are fractions of the layer / viewport."""
    layer: str
    image: Optional[str]
    x: float
    y: float
    height: float
    opacity: float = 1.0
    mirrored: bool = False


@dataclass(frozen=True)
class Asset:
    uri: str
    kind: AssetKind = AssetKind.IMAGE


@dataclass
class SceneConfig:
    """Root of the static scene description."""
    title: str = "Untitled"
    scene_duration: float = config.SCENE_DURATION
    pin_distance: float = config.PIN_DISTANCE
    travel_viewports: float = config.TRAVEL_VIEWPORTS
    scrub_rate: float = config.SCRUB_RATE
    pointer_rate: float = config.POINTER_RATE
    key_step: float = config.KEY_STEP
    cta_url: str = ""
    music: Optional[str] = None
    follower: Optional[str] = None

    layers: List[Layer] = field(default_factory=list)
    segments: List[TimelineSegment] = field(default_factory=list)
    triggers: List[TriggerZone] = field(default_factory=list)
    loops: List[AmbientLoop] = field(default_factory=list)
    cues: List[Cue] = field(default_factory=list)
    decorations: List[Decoration] = field(default_factory=list)
    assets: List[Asset] = field(default_factory=list)

    def layer(self, layer_id: str) -> Layer:
        for layer in self.layers:
            if layer.id == layer_id:
                return layer
        raise KeyError(layer_id)

    def validate(self) -> None:
        """Check authoring invariants. Raises SceneConfigError on the first violation."""
        if self.scene_duration <= 0:
            raise SceneConfigError("scene_duration must be positive.")
        if self.pin_distance <= 0:
            raise SceneConfigError("pin_distance must be positive.")
        for name in ("scrub_rate", "pointer_rate"):
            rate = getattr(self, name)
            if not 0.0 < rate <= 1.0:
                raise SceneConfigError(f"{name} must be in (0, 1], got {rate}.")

        layer_ids = [layer.id for layer in self.layers]
        if len(set(layer_ids)) != len(layer_ids):
            raise SceneConfigError("Layer ids must be unique.")

        for seg in self.segments:
            if seg.start >= seg.end:
                raise SceneConfigError(
                    f"Segment {seg.target}.{seg.property} has start {seg.start} >= end {seg.end}."
                )
            if seg.start < 0 or seg.end > self.scene_duration:
                raise SceneConfigError(
                    f"Segment {seg.target}.{seg.property} [{seg.start}, {seg.end}] "
                    f"lies outside [0, {self.scene_duration}]."
                )
            self._check_easing(seg.easing)

        for zone in self.triggers:
            if zone.container not in layer_ids:
                raise SceneConfigError(f"Trigger {zone.target} references unknown container '{zone.container}'.")
            for threshold in (zone.enter_threshold, zone.exit_threshold):
                if not 0.0 <= threshold <= 1.0:
                    raise SceneConfigError(f"Trigger {zone.target} threshold {threshold} outside [0, 1].")
            if zone.exit_threshold >= zone.enter_threshold:
                raise SceneConfigError(
                    f"Trigger {zone.target}: exit threshold must lie before the enter threshold."
                )
            if zone.effect.duration <= 0:
                raise SceneConfigError(f"Trigger {zone.target} effect duration must be positive.")
            self._check_easing(zone.effect.easing)

        for deco in self.decorations:
            if deco.layer not in layer_ids:
                raise SceneConfigError(f"Decoration {deco.image} references unknown layer '{deco.layer}'.")

        for loop in self.loops:
            if loop.period <= 0:
                raise SceneConfigError(f"Loop on {loop.target} must have a positive period.")
            self._check_easing(loop.easing)

    @staticmethod
    def _check_easing(name: str) -> None:
        try:
            get_easing(name)
        except ValueError as e:
            raise SceneConfigError(str(e)) from None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "scene_duration": self.scene_duration,
            "pin_distance": self.pin_distance,
            "travel_viewports": self.travel_viewports,
            "scrub_rate": self.scrub_rate,
            "pointer_rate": self.pointer_rate,
            "key_step": self.key_step,
            "cta_url": self.cta_url,
            "music": self.music,
            "follower": self.follower,
            "layers": [layer.to_dict() for layer in self.layers],
            "segments": [seg.to_dict() for seg in self.segments],
            "triggers": [zone.to_dict() for zone in self.triggers],
            "loops": [loop.to_dict() for loop in self.loops],
            "cues": [asdict(cue) for cue in self.cues],
            "decorations": [asdict(d) for d in self.decorations],
            "assets": [{"uri": a.uri, "kind": a.kind.value} for a in self.assets],
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> SceneConfig:
        try:
            scene = SceneConfig(
                title=data.get("title", "Untitled"),
                scene_duration=float(data.get("scene_duration", config.SCENE_DURATION)),
                pin_distance=float(data.get("pin_distance", config.PIN_DISTANCE)),
                travel_viewports=float(data.get("travel_viewports", config.TRAVEL_VIEWPORTS)),
                scrub_rate=float(data.get("scrub_rate", config.SCRUB_RATE)),
                pointer_rate=float(data.get("pointer_rate", config.POINTER_RATE)),
                key_step=float(data.get("key_step", config.KEY_STEP)),
                cta_url=data.get("cta_url", ""),
                music=data.get("music"),
                follower=data.get("follower"),
                layers=[Layer.from_dict(d) for d in data.get("layers", [])],
                segments=[TimelineSegment.from_dict(d) for d in data.get("segments", [])],
                triggers=[TriggerZone.from_dict(d) for d in data.get("triggers", [])],
                loops=[AmbientLoop.from_dict(d) for d in data.get("loops", [])],
                cues=[Cue(**d) for d in data.get("cues", [])],
                decorations=[Decoration(**d) for d in data.get("decorations", [])],
                assets=[
                    Asset(uri=d["uri"], kind=AssetKind(d.get("kind", AssetKind.IMAGE)))
                    for d in data.get("assets", [])
                ],
            )
        except (KeyError, TypeError) as e:
            raise SceneConfigError(f"Malformed scene description: missing or invalid field {e}.") from e
        except ValueError as e:
            raise SceneConfigError(f"Malformed scene description: {e}") from e

        scene.validate()
        return scene
