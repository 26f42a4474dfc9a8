"""
Timeline Scheduler
==================
Evaluates the keyframed segments of the scene against the virtual clock.

Every segment is a pure function of smoothed_time: before its start it holds
from_value, after its end it holds to_value. Scrubbing backwards, forwards or
jumping straight to any point therefore lands on the same values.

Segments sharing a (target, property) form a track. At any time the track's
value comes from the latest segment that has started; before the first one
it is that segment's from_value.
"""
from __future__ import annotations

import bisect
import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from scrollscene.controller.targets import TargetRegistry
from scrollscene.model.easing import get_easing
from scrollscene.model.scene import AmbientLoop, TargetProperty, TimelineSegment
from scrollscene.utils import clamp, lerp

logger = logging.getLogger(__name__)

TrackKey = Tuple[str, TargetProperty]


def local_time(segment: TimelineSegment, t: float) -> float:
    return clamp((t - segment.start) / (segment.end - segment.start), 0.0, 1.0)


def evaluate_segment(segment: TimelineSegment, t: float) -> float:
    eased = get_easing(segment.easing)(local_time(segment, t))
    return lerp(segment.from_value, segment.to_value, eased)


@dataclass(frozen=True)
class ContinuityIssue:
    target: str
    property: TargetProperty
    kind: str               # "snap" or "overlap"
    earlier: TimelineSegment
    later: TimelineSegment

    def __str__(self) -> str:
        if self.kind == "overlap":
            return (f"{self.target}.{self.property}: segment [{self.later.start}, {self.later.end}] "
                    f"overlaps [{self.earlier.start}, {self.earlier.end}]")
        return (f"{self.target}.{self.property}: snap at t={self.later.start} "
                f"({self.earlier.to_value} -> {self.later.from_value})")


def check_continuity(segments: Iterable[TimelineSegment]) -> List[ContinuityIssue]:
    """
    Find authoring mistakes between consecutive segments of the same track.

    A later segment must start from the value the earlier one ended on and
    the two ranges must not overlap.
    """
    issues: List[ContinuityIssue] = []
    for (target, prop), track in _group_tracks(segments).items():
        for earlier, later in zip(track, track[1:]):
            if later.start < earlier.end:
                issues.append(ContinuityIssue(target, prop, "overlap", earlier, later))
            elif later.from_value != earlier.to_value:
                issues.append(ContinuityIssue(target, prop, "snap", earlier, later))
    return issues


def _group_tracks(segments: Iterable[TimelineSegment]) -> Dict[TrackKey, List[TimelineSegment]]:
    tracks: Dict[TrackKey, List[TimelineSegment]] = defaultdict(list)
    for seg in segments:
        tracks[(seg.target, seg.property)].append(seg)
    for track in tracks.values():
        track.sort(key=lambda s: s.start)
    return dict(tracks)


class _Track:
    __slots__ = ("segments", "starts")

    def __init__(self, segments: List[TimelineSegment]) -> None:
        self.segments = segments
        self.starts = [s.start for s in segments]

    def value_at(self, t: float) -> float:
        i = bisect.bisect_right(self.starts, t) - 1
        if i < 0:
            return self.segments[0].from_value
        return evaluate_segment(self.segments[i], t)


class TimelineScheduler:
    """Holds the full ordered set of segments and writes their values each frame."""

    def __init__(self, segments: Sequence[TimelineSegment]) -> None:
        self.segments: Tuple[TimelineSegment, ...] = tuple(sorted(segments, key=lambda s: s.start))
        self._tracks: Dict[TrackKey, _Track] = {
            key: _Track(track) for key, track in _group_tracks(self.segments).items()
        }
        for issue in check_continuity(self.segments):
            logger.warning(f"Timeline continuity problem: {issue}")

    @property
    def track_keys(self) -> List[TrackKey]:
        return list(self._tracks)

    def value_at(self, target: str, prop: TargetProperty, t: float) -> float:
        return self._tracks[(target, prop)].value_at(t)

    def evaluate(self, t: float) -> Dict[TrackKey, float]:
        return {key: track.value_at(t) for key, track in self._tracks.items()}

    def apply(self, t: float, targets: TargetRegistry) -> None:
        for (target, prop), track in self._tracks.items():
            if target in targets:
                targets.apply(target, prop, track.value_at(t))


class AmbientLoopPlayer:
    """
    Plays AmbientLoops on wall-clock time: 0 -> amplitude -> 0 -> ... forever.
    Independent of scroll.
    """

    def __init__(self, loops: Sequence[AmbientLoop]) -> None:
        self.loops = tuple(loops)
        self.elapsed: float = 0.0

    @staticmethod
    def value_at(loop: AmbientLoop, elapsed: float) -> float:
        cycle = elapsed / loop.period
        leg = math.floor(cycle)
        phase = cycle - leg
        if leg % 2 == 1:
            phase = 1.0 - phase
        return loop.amplitude * get_easing(loop.easing)(phase)

    def advance(self, dt: float, targets: TargetRegistry) -> None:
        self.elapsed += max(0.0, dt)
        for loop in self.loops:
            targets.apply(loop.target, loop.property, self.value_at(loop, self.elapsed))

    def reset(self) -> None:
        self.elapsed = 0.0
