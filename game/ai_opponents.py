"""
Scripted Opponents - Movement profiles the targeting bot trains against.

Each mover drives the opponent's distance, lateral velocity and energy, and
decides where inside the escape range it will be when a bullet arrives
(its escape factor, in [-1, 1]):

- StationaryMover: sits still, always hit head-on
- RandomMover: wanders, escape factor uniform over the whole range
- PatternMover: strong single preference, easiest to learn
- SegmentedMover: preference depends on distance and speed, so only a
  context-aware learner can track it
"""

import math
import random

from game import rules


def _clip_factor(value: float) -> float:
    return max(-1.0, min(1.0, value))


class BaseMover:
    """Base class for scripted opponent movement."""

    name = "base"

    def __init__(self, start_distance: float = 300.0,
                 fire_interval: int = 0, fire_power: float = 1.0):
        self.start_distance = start_distance
        self.fire_interval = fire_interval
        self.fire_power = fire_power

        self.distance = start_distance
        self.velocity = 0.0
        self.heading = 0.0
        self.energy = rules.START_ENERGY

    def reset(self, rng: random.Random):
        self.distance = self.start_distance
        self.velocity = 0.0
        self.heading = rng.uniform(0.0, 2.0 * math.pi)
        self.energy = rules.START_ENERGY

    def step(self, tick: int, rng: random.Random):
        """Advance one tick of movement."""
        self._move(tick, rng)
        if (self.fire_interval and tick > 0
                and tick % self.fire_interval == 0
                and self.energy > self.fire_power):
            self.energy -= self.fire_power

    def _move(self, tick: int, rng: random.Random):
        pass

    def escape_factor(self, distance: float, velocity: float,
                      rng: random.Random) -> float:
        return 0.0


class StationaryMover(BaseMover):
    name = "stationary"


class RandomMover(BaseMover):
    name = "random"

    def _move(self, tick: int, rng: random.Random):
        self.velocity = max(-rules.MAX_VELOCITY, min(
            rules.MAX_VELOCITY, self.velocity + rng.uniform(-2.0, 2.0)))
        self.distance = max(60.0, min(
            500.0, self.distance + rng.uniform(-5.0, 5.0)))

    def escape_factor(self, distance: float, velocity: float,
                      rng: random.Random) -> float:
        return rng.uniform(-1.0, 1.0)


class PatternMover(BaseMover):
    """Always ends up near the same escape factor."""

    name = "pattern"

    def __init__(self, preferred_factor: float = 0.6, spread: float = 0.1,
                 **kwargs):
        super().__init__(**kwargs)
        self.preferred_factor = preferred_factor
        self.spread = spread

    def _move(self, tick: int, rng: random.Random):
        self.velocity = rules.MAX_VELOCITY
        self.distance = self.start_distance + 100.0 * math.sin(tick / 50.0)

    def escape_factor(self, distance: float, velocity: float,
                      rng: random.Random) -> float:
        return _clip_factor(rng.gauss(self.preferred_factor, self.spread))


class SegmentedMover(BaseMover):
    """
    Escape preference switches with context: close range, far and fast,
    far and slow. Distance sweeps in and out; speed alternates in phases.
    """

    name = "segmented"

    def __init__(self, close_factor: float = -0.5, far_fast_factor: float = 0.7,
                 far_slow_factor: float = 0.1, spread: float = 0.1,
                 phase_ticks: int = 120, **kwargs):
        kwargs.setdefault('start_distance', 250.0)
        super().__init__(**kwargs)
        self.close_factor = close_factor
        self.far_fast_factor = far_fast_factor
        self.far_slow_factor = far_slow_factor
        self.spread = spread
        self.phase_ticks = phase_ticks

    def _move(self, tick: int, rng: random.Random):
        fast_phase = (tick // self.phase_ticks) % 2 == 0
        self.velocity = rules.MAX_VELOCITY if fast_phase else 2.0
        self.distance = self.start_distance + 170.0 * math.sin(tick / 70.0)

    def escape_factor(self, distance: float, velocity: float,
                      rng: random.Random) -> float:
        if distance <= 150.0:
            center = self.close_factor
        elif abs(velocity) > rules.MAX_VELOCITY / 2:
            center = self.far_fast_factor
        else:
            center = self.far_slow_factor
        return _clip_factor(rng.gauss(center, self.spread))


MOVERS = {
    'stationary': StationaryMover,
    'random': RandomMover,
    'pattern': PatternMover,
    'segmented': SegmentedMover,
}


def create_mover(name: str, **kwargs) -> BaseMover:
    if name not in MOVERS:
        raise ValueError(f"Unknown mover '{name}', "
                         f"expected one of {sorted(MOVERS)}")
    return MOVERS[name](**kwargs)
