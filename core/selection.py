"""
Policy Selection - Picks an aiming action from averaged segment scores.

Two selection rules are supported:

SUM_PROBABILITY
    Each score is divided by the sum of all scores and the result is used as
    a probability mass. This over-weights nothing by rank: with scores
    [.25, .25, 1, .25, .25] the standout action is picked only half of the
    time, and the effect grows with the number of actions.

BOLTZMANN
    Scores are first mapped through exp(score / temperature). A low
    temperature sharpens the distribution towards the best action; the
    temperature is lowered a step on every confirmed hit.
"""

import logging
import math
import random
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from .score_table import ScoreTable
from .segments import Segment

logger = logging.getLogger(__name__)

# Temperatures at or below this are treated as zero (raw scores pass through)
TEMPERATURE_EPSILON = 1e-9


class SelectionMode(Enum):
    SUM_PROBABILITY = "sum_probability"
    BOLTZMANN = "boltzmann"


def random_index(rng: random.Random, num_actions: int) -> int:
    """Uniform index in [0, num_actions - 1]."""
    return rng.randint(0, num_actions - 1)


def sum_probability_index(scores: Sequence[float], draw: float,
                          rng: random.Random) -> int:
    """
    Walk the actions accumulating score / sum(scores) until the running
    total exceeds `draw`. Falls back to a uniform pick when the row has no
    usable mass (zero or non-finite sum, or the draw is never passed).
    """
    scores = np.asarray(scores, dtype=np.float64)
    total = float(np.sum(scores))

    if total != 0.0 and math.isfinite(total):
        running = 0.0
        for i, score in enumerate(scores):
            running += score / total
            if draw < running:
                return i

    return random_index(rng, len(scores))


def boltzmann_weights(scores: Sequence[float],
                      temperature: float) -> np.ndarray:
    """
    exp(score / temperature) for every score.

    Scores are shifted by their maximum first; the shift cancels out once
    the weights are normalized but keeps exp() from overflowing at low
    temperatures. A temperature of ~0 returns the raw scores.
    """
    scores = np.asarray(scores, dtype=np.float64)
    if temperature <= TEMPERATURE_EPSILON:
        return scores.copy()
    return np.exp((scores - np.max(scores)) / temperature)


class PolicySelector:
    """
    Chooses an action index for a segment set.

    Temperature only matters in BOLTZMANN mode. It is decreased by a fixed
    step on each confirmed hit and never drops below `min_temperature`.
    """

    def __init__(self, table: ScoreTable,
                 mode: SelectionMode = SelectionMode.BOLTZMANN,
                 temperature: float = 10.0,
                 min_temperature: float = 0.01,
                 temperature_step: float = 0.0,
                 rng: Optional[random.Random] = None):
        self.table = table
        self.mode = mode
        self.initial_temperature = temperature
        self.temperature = temperature
        self.min_temperature = min_temperature
        self.temperature_step = temperature_step
        self.rng = rng or random.Random()
        # Separate generator for the degenerate fallback pick
        self.fallback_rng = random.Random(self.rng.random())

    @property
    def num_actions(self) -> int:
        return self.table.num_actions

    def action_weights(self, segments: Segment) -> np.ndarray:
        """Unnormalized selection weights for the segment set."""
        scores = self.table.average_scores(segments)
        if self.mode == SelectionMode.BOLTZMANN:
            return boltzmann_weights(scores, self.temperature)
        return scores

    def select(self, segments: Segment) -> int:
        weights = self.action_weights(segments)
        action = sum_probability_index(weights, self.rng.random(),
                                       self.fallback_rng)
        logger.debug(f"Selected action {action} for {segments!r} "
                     f"(mode={self.mode.value}, T={self.temperature:.4f})")
        return action

    def decrease_temperature(self):
        self.temperature -= self.temperature_step
        if self.temperature < self.min_temperature:
            self.temperature = self.min_temperature

    def increase_temperature(self, amount: float):
        """Re-heat, e.g. when the opponent may have changed its movement."""
        self.temperature += amount

    def reset_temperature(self):
        self.temperature = self.initial_temperature
