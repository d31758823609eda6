"""
Feedback Correlation - Ties delayed hit/miss events back to fired shots.

Hit and miss events arrive many ticks after the aiming decision and carry
only the bullet's power and heading. Shots are matched by near-equality of
those two values; there is no shot identifier, so two in-flight shots with
the same power and heading are indistinguishable.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional

from .learning import LearningEngine
from .scale import action_for_guess_factor
from .segments import Segment

logger = logging.getLogger(__name__)

MATCH_EPSILON = 1e-4


@dataclass
class ShotRecord:
    """
    A shot decision: where in the escape range it aimed and in which context.

    The heading is bound once, when the gun has stopped turning and the
    bullet actually leaves the turret.
    """
    guess_factor: float
    power: float
    segments: Segment
    heading: Optional[float] = None

    def bind_heading(self, heading: float):
        if self.heading is not None:
            raise RuntimeError("shot heading is already bound")
        self.heading = heading

    @property
    def is_fired(self) -> bool:
        return self.heading is not None

    def matches(self, power: float, heading: float,
                epsilon: float = MATCH_EPSILON) -> bool:
        if self.heading is None:
            return False
        return (abs(self.power - power) < epsilon
                and abs(self.heading - heading) < epsilon)


class ShotLog:
    """In-flight shot records, oldest first."""

    def __init__(self):
        self._records: List[ShotRecord] = []

    def append(self, record: ShotRecord):
        self._records.append(record)

    def find(self, power: float, heading: float,
             epsilon: float = MATCH_EPSILON) -> Optional[ShotRecord]:
        for record in self._records:
            if record.matches(power, heading, epsilon):
                return record
        return None

    def remove(self, record: ShotRecord):
        # Identity, not equality: two records may compare equal field-wise
        for i, existing in enumerate(self._records):
            if existing is record:
                del self._records[i]
                return

    def discard_unfired(self):
        """Drop decisions whose bullet never left the gun."""
        self._records = [r for r in self._records if r.is_fired]

    def clear(self):
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ShotRecord]:
        return iter(self._records)


@dataclass
class FeedbackResult:
    """A matched shot and the learning update it produced."""
    record: ShotRecord
    action: int
    hit: bool


class FeedbackCorrelator:
    """
    Matches hit/miss events to the shot log and feeds the learning engine.

    Unmatched events are dropped: late or foreign events are an expected
    consequence of matching without identifiers.
    """

    def __init__(self, shot_log: ShotLog, engine: LearningEngine,
                 epsilon: float = MATCH_EPSILON):
        self.shot_log = shot_log
        self.engine = engine
        self.epsilon = epsilon

        self.matched = 0
        self.unmatched = 0

    def on_hit(self, event) -> Optional[FeedbackResult]:
        return self._resolve(event, hit=True)

    def on_miss(self, event) -> Optional[FeedbackResult]:
        return self._resolve(event, hit=False)

    def _resolve(self, event, hit: bool) -> Optional[FeedbackResult]:
        bullet = event.bullet
        record = self.shot_log.find(bullet.power, bullet.heading, self.epsilon)
        if record is None:
            self.unmatched += 1
            logger.debug(f"No in-flight shot for power={bullet.power:.4f} "
                         f"heading={bullet.heading:.4f}, ignoring")
            return None

        action = action_for_guess_factor(record.guess_factor,
                                         self.engine.table.num_actions)
        self.engine.apply_outcome(record.segments, action, hit)
        self.shot_log.remove(record)
        self.matched += 1

        return FeedbackResult(record=record, action=action, hit=hit)
