"""
Adaptive Aim - Learning Core

An online learner that picks a firing angle against a moving opponent and
adapts from delayed hit/miss feedback:

- Segmentation - overlapping distance/velocity context tags
- Score table - one row of action scores per tag
- Policy selection - sum-of-probabilities or Boltzmann sampling
- Learning updates - hit-ratio or discounted additive scoring
- Feedback correlation - matching late events back to fired shots
"""

from .segments import (
    Segment, SegmentClassifier, SEGMENT_AXES, SIMPLE_SEGMENTS, ALL_SEGMENTS,
    expand_segments,
)
from .score_table import ScoreTable
from .selection import (
    PolicySelector, SelectionMode, boltzmann_weights, sum_probability_index,
)
from .learning import LearningEngine, LearningState, ScoringMode, implied_total
from .feedback import FeedbackCorrelator, FeedbackResult, ShotLog, ShotRecord
from .scale import (
    map_to_new_scale, action_bucket, action_for_guess_factor, guess_factor,
)

__all__ = [
    'Segment',
    'SegmentClassifier',
    'SEGMENT_AXES',
    'SIMPLE_SEGMENTS',
    'ALL_SEGMENTS',
    'expand_segments',
    'ScoreTable',
    'PolicySelector',
    'SelectionMode',
    'boltzmann_weights',
    'sum_probability_index',
    'LearningEngine',
    'LearningState',
    'ScoringMode',
    'implied_total',
    'FeedbackCorrelator',
    'FeedbackResult',
    'ShotLog',
    'ShotRecord',
    'map_to_new_scale',
    'action_bucket',
    'action_for_guess_factor',
    'guess_factor',
]
