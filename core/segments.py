"""
Segmentation - Overlapping context tags for per-situation learning.

Every observation of the opponent is described by a small set of categorical
tags drawn from two orthogonal axes plus an always-on baseline:

- Distance: CLOSE / FAR
- Velocity: FAST / SLOW
- NONE: the baseline tag, active for every observation

Each simple tag owns its own row of scores, so a single observation updates
(and is scored by) several rows at once.
"""

from enum import IntFlag
from typing import Dict, List, Tuple


class Segment(IntFlag):
    NONE = 1
    # Distance
    DISTANCE_CLOSE = 2
    DISTANCE_FAR = 4
    # Velocity
    VELOCITY_FAST = 8
    VELOCITY_SLOW = 16


# Static axis -> tag table. Exactly one tag per axis is active per observation.
SEGMENT_AXES: Dict[str, Tuple[Segment, ...]] = {
    'distance': (Segment.DISTANCE_CLOSE, Segment.DISTANCE_FAR),
    'velocity': (Segment.VELOCITY_FAST, Segment.VELOCITY_SLOW),
}

SIMPLE_SEGMENTS: Tuple[Segment, ...] = (
    Segment.NONE,
    Segment.DISTANCE_CLOSE,
    Segment.DISTANCE_FAR,
    Segment.VELOCITY_FAST,
    Segment.VELOCITY_SLOW,
)

ALL_SEGMENTS = (Segment.NONE
                | Segment.DISTANCE_CLOSE | Segment.DISTANCE_FAR
                | Segment.VELOCITY_FAST | Segment.VELOCITY_SLOW)


def expand_segments(segments: Segment) -> List[Segment]:
    """Split a compound flag set into the simple tags it contains."""
    return [s for s in SIMPLE_SEGMENTS if segments & s]


def segment_label(segment: Segment) -> str:
    """Readable name for a simple tag or a compound set."""
    names = [s.name for s in expand_segments(segment)]
    return '|'.join(names) if names else '-'


class SegmentClassifier:
    """
    Maps a (distance, velocity) observation to its active segment set.

    The result always holds the NONE baseline plus one tag from each axis.
    """

    def __init__(self, max_velocity: float = 8.0, far_distance: float = 150.0):
        self.max_velocity = max_velocity
        self.far_distance = far_distance

    def classify(self, distance: float, velocity: float) -> Segment:
        if abs(velocity) > self.max_velocity / 2:
            velocity_segment = Segment.VELOCITY_FAST
        else:
            velocity_segment = Segment.VELOCITY_SLOW

        if abs(distance) > self.far_distance:
            distance_segment = Segment.DISTANCE_FAR
        else:
            distance_segment = Segment.DISTANCE_CLOSE

        return Segment.NONE | velocity_segment | distance_segment
