"""
Scale mapping between action indices, aim angles and guess factors.

An action index i in [0, N) selects the angle bucket obtained by mapping i
and i + 1 from [0, N] onto [-max_escape_angle, +max_escape_angle]. A guess
factor is the fired offset normalized to [-1, 1].
"""

from typing import Tuple


def map_to_new_scale(value: float, low: float, high: float,
                     new_low: float, new_high: float) -> float:
    """Linearly map `value` from [low, high] to [new_low, new_high]."""
    numerator = (new_high - new_low) * (value - low)
    return numerator / (high - low) + new_low


def action_bucket(action: int, num_actions: int,
                  max_escape_angle: float) -> Tuple[float, float]:
    """Angle sub-range [lo, hi) covered by an action."""
    lo = map_to_new_scale(action, 0, num_actions,
                          -max_escape_angle, max_escape_angle)
    hi = map_to_new_scale(action + 1, 0, num_actions,
                          -max_escape_angle, max_escape_angle)
    return lo, hi


def guess_factor(offset: float, max_escape_angle: float) -> float:
    return offset / max_escape_angle


def action_for_guess_factor(factor: float, num_actions: int) -> int:
    """Inverse mapping of a guess factor back to an action index."""
    return int(round(map_to_new_scale(factor, -1.0, 1.0,
                                      0.0, num_actions - 1)))
