"""
Score Table - Per-segment action scores for the aiming learner.

One row of N scores per simple segment tag. Rows are independent numpy
arrays; a compound segment set reads and writes every row it covers.

When scores are used as hit ratios, an index-aligned row of favorable-action
counters is kept next to each score row.
"""

from typing import Dict, List, Optional, Tuple

import numpy as np

from .segments import Segment, expand_segments, segment_label


class ScoreTable:
    """
    Holds scores[segment][action] and favorable[segment][action].

    Scores pushed through adjust_score/set_score never drop below
    `min_score`, so every action keeps a nonzero selection probability.
    """

    def __init__(self, segments: Segment, num_actions: int,
                 min_score: float = 0.0):
        if num_actions < 1:
            raise ValueError(f"num_actions must be positive, got {num_actions}")

        self.num_actions = num_actions
        self.min_score = min_score

        self.scores: Dict[Segment, np.ndarray] = {}
        self.favorable: Dict[Segment, np.ndarray] = {}
        for segment in expand_segments(segments):
            self.scores[segment] = np.zeros(num_actions, dtype=np.float64)
            self.favorable[segment] = np.zeros(num_actions, dtype=np.int64)

    @property
    def segments(self) -> List[Segment]:
        return list(self.scores.keys())

    def _check_action(self, action: int):
        if not 0 <= action < self.num_actions:
            raise IndexError(
                f"action {action} outside [0, {self.num_actions})")

    def scores_for(self, segments: Segment) -> List[np.ndarray]:
        """Rows for every simple tag in `segments` that the table knows."""
        return [self.scores[s] for s in expand_segments(segments)
                if s in self.scores]

    def favorable_counts_for(self, segments: Segment
                             ) -> List[Tuple[np.ndarray, np.ndarray]]:
        """(favorable counts, score row) pairs for the matching segments."""
        return [(self.favorable[s], self.scores[s])
                for s in expand_segments(segments)
                if s in self.scores and s in self.favorable]

    def average_scores(self, segments: Segment) -> np.ndarray:
        rows = self.scores_for(segments)
        if not rows:
            return np.zeros(self.num_actions, dtype=np.float64)
        return np.mean(np.stack(rows), axis=0)

    def apply_discount(self, factor: float,
                       segments: Optional[Segment] = None):
        """Scale rows by `factor`; every row unless a filter is given."""
        rows = (list(self.scores.values()) if segments is None
                else self.scores_for(segments))
        for row in rows:
            row *= factor

    def adjust_score(self, segments: Segment, action: int, delta: float):
        self._check_action(action)
        for row in self.scores_for(segments):
            row[action] += delta
            if row[action] < self.min_score:
                row[action] = self.min_score

    def set_score(self, segments: Segment, action: int, value: float):
        self._check_action(action)
        for row in self.scores_for(segments):
            row[action] = value
            if row[action] < self.min_score:
                row[action] = self.min_score

    def fill(self, value: float):
        """Set every score of every row to `value`."""
        for row in self.scores.values():
            row[:] = value

    def shift_all(self, amount: float):
        """Add `amount` to every score of every row."""
        for row in self.scores.values():
            row += amount

    def reset_favorable_counts(self, value: int):
        for counts in self.favorable.values():
            counts[:] = value

    def snapshot(self) -> Dict[str, List[float]]:
        """Plain copy of the score rows keyed by segment name."""
        return {segment_label(s): row.tolist()
                for s, row in self.scores.items()}
