"""
Aim Controller - Turns an observation into a firing offset and shot record.

Decision pipeline:
1. Classify the observation into its segment set
2. Ask the policy selector for an action (an angle bucket)
3. Draw a uniform offset inside that bucket of the escape range
4. Record the offset as a guess factor for later feedback

Randomizing inside the bucket keeps coverage continuous instead of
collapsing each bucket to a single angle.
"""

import logging
import random
from typing import Optional, Tuple

from core.feedback import ShotLog, ShotRecord
from core.scale import action_bucket, guess_factor
from core.segments import SegmentClassifier
from core.selection import PolicySelector

logger = logging.getLogger(__name__)


class AimController:
    """Chooses where inside the escape range to fire."""

    def __init__(self, classifier: SegmentClassifier, selector: PolicySelector,
                 shot_log: ShotLog, fire_randomly: bool = False,
                 rng: Optional[random.Random] = None):
        self.classifier = classifier
        self.selector = selector
        self.shot_log = shot_log
        self.fire_randomly = fire_randomly
        self.rng = rng or random.Random()

    def decide(self, observation, firepower: float,
               max_escape_angle: float) -> Tuple[float, ShotRecord]:
        """
        Pick a gun offset (radians from head-on) for the observed opponent.

        observation: anything with `distance` and `velocity`
            (e.g. a ScannedRobotEvent)
        max_escape_angle: bound of the legal offset range for this firepower
        """
        segments = self.classifier.classify(observation.distance,
                                            observation.velocity)

        if self.fire_randomly:
            # Baseline: ignore the policy entirely
            offset = self.rng.uniform(-max_escape_angle, max_escape_angle)
        else:
            action = self.selector.select(segments)
            lo, hi = action_bucket(action, self.selector.num_actions,
                                   max_escape_angle)
            offset = self.rng.uniform(lo, hi)

        record = ShotRecord(
            guess_factor=guess_factor(offset, max_escape_angle),
            power=firepower,
            segments=segments,
        )
        self.shot_log.append(record)

        logger.debug(f"Aim decision: offset={offset:.4f} "
                     f"gf={record.guess_factor:.3f} power={firepower:.2f}")
        return offset, record
