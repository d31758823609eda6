"""
Learning Updates - Revises segment scores from hit/miss feedback.

Two scoring schemes share the same ScoreTable:

Ratio mode
    A cell's score is the empirical hit rate favorable / total. Only the
    favorable count is stored; the total is recovered from the current ratio.

Additive mode
    All scores are discounted (recent evidence dominates) and the chosen
    cell is then moved by a reward or set to a value.

The table does not stop a caller from mixing both; the scheme is picked once
through the ScoringMode passed to the LearningEngine.
"""

import logging
import random
from enum import Enum
from typing import Optional

from .score_table import ScoreTable
from .segments import Segment, ALL_SEGMENTS
from .selection import PolicySelector, SelectionMode

logger = logging.getLogger(__name__)


class ScoringMode(Enum):
    RATIO = "ratio"
    ADDITIVE = "additive"


def implied_total(favorable: int, ratio: float) -> int:
    """Total actions implied by a favorable count and its ratio."""
    if ratio == 0.0:
        return 0
    return int(round(favorable / ratio))


class LearningEngine:
    """Applies discounting and feedback updates to a ScoreTable."""

    def __init__(self, table: ScoreTable,
                 scoring_mode: ScoringMode = ScoringMode.RATIO,
                 discount_factor: float = 0.98,
                 hit_reward: float = 1.0,
                 miss_penalty: float = 1.0):
        self.table = table
        self.scoring_mode = scoring_mode
        self.discount_factor = discount_factor
        self.hit_reward = hit_reward
        self.miss_penalty = miss_penalty

    # Ratio updates

    def record_hit(self, segments: Segment, action: int):
        """One more favorable action (and one more total action)."""
        self.table._check_action(action)
        for counts, ratios in self.table.favorable_counts_for(segments):
            total = implied_total(int(counts[action]), float(ratios[action]))
            counts[action] += 1
            ratios[action] = int(counts[action]) / float(total + 1)

    def record_miss(self, segments: Segment, action: int):
        """One more total action; the favorable count is unchanged."""
        self.table._check_action(action)
        for counts, ratios in self.table.favorable_counts_for(segments):
            total = implied_total(int(counts[action]), float(ratios[action]))
            ratios[action] = int(counts[action]) / float(total + 1)

    def reset_favorable_counts(self, value: int):
        self.table.reset_favorable_counts(value)

    # Additive updates

    def apply_discount(self, segments: Optional[Segment] = None):
        self.table.apply_discount(self.discount_factor, segments)

    def reward(self, segments: Segment, action: int, amount: float):
        self.apply_discount()
        self.table.adjust_score(segments, action, amount)

    def assign(self, segments: Segment, action: int, value: float):
        self.apply_discount()
        self.table.set_score(segments, action, value)

    def apply_outcome(self, segments: Segment, action: int, hit: bool):
        """Route a resolved shot to the configured scoring scheme."""
        if self.scoring_mode == ScoringMode.RATIO:
            if hit:
                self.record_hit(segments, action)
            else:
                self.record_miss(segments, action)
        else:
            amount = self.hit_reward if hit else -self.miss_penalty
            self.reward(segments, action, amount)


class LearningState:
    """
    The learner's long-lived state: score table, selector and update engine.

    Owned by whoever runs the rounds and handed to each new bot. The first
    `begin_round()` initializes the scores; later rounds only re-heat the
    temperature, since the opponent may have changed how it moves.
    """

    def __init__(self, num_actions: int = 9,
                 segments: Segment = ALL_SEGMENTS,
                 min_score: float = 0.0,
                 initial_score: float = 1.0,
                 initial_favorable: int = 1,
                 selection_mode: SelectionMode = SelectionMode.BOLTZMANN,
                 temperature: float = 0.2,
                 min_temperature: float = 0.005,
                 temperature_step: float = 0.01,
                 reheat_amount: float = 0.05,
                 scoring_mode: ScoringMode = ScoringMode.RATIO,
                 discount_factor: float = 1.0,
                 hit_reward: float = 1.0,
                 miss_penalty: float = 1.0,
                 rng: Optional[random.Random] = None):
        self.initial_score = initial_score
        self.initial_favorable = initial_favorable
        self.reheat_amount = reheat_amount

        self.table = ScoreTable(segments, num_actions, min_score=min_score)
        self.selector = PolicySelector(
            self.table,
            mode=selection_mode,
            temperature=temperature,
            min_temperature=min_temperature,
            temperature_step=temperature_step,
            rng=rng,
        )
        self.engine = LearningEngine(
            self.table,
            scoring_mode=scoring_mode,
            discount_factor=discount_factor,
            hit_reward=hit_reward,
            miss_penalty=miss_penalty,
        )

        self.rounds_started = 0

    @property
    def num_actions(self) -> int:
        return self.table.num_actions

    def reset(self):
        """Start positive so repeated misses pull scores down."""
        self.table.fill(self.initial_score)
        self.table.reset_favorable_counts(self.initial_favorable)
        self.selector.reset_temperature()
        self.rounds_started = 0

    def begin_round(self):
        if self.rounds_started == 0:
            self.reset()
        else:
            self.selector.increase_temperature(self.reheat_amount)
            logger.debug(f"Temperature re-heated to "
                         f"{self.selector.temperature:.4f}")
        self.rounds_started += 1
