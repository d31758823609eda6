"""
Host Events - What the simulation delivers to a robot each tick.
"""

from dataclasses import dataclass


@dataclass
class ScannedRobotEvent:
    """The radar swept over the opponent."""
    distance: float
    bearing: float          # Relative to our body heading (radians)
    heading: float          # Opponent's absolute heading (radians)
    velocity: float
    energy: float
    time: int = 0


@dataclass(frozen=True)
class Bullet:
    """A bullet as the host reports it: only its power and heading."""
    power: float
    heading: float


@dataclass
class BulletHitEvent:
    bullet: Bullet
    time: int = 0


@dataclass
class BulletMissedEvent:
    bullet: Bullet
    time: int = 0


@dataclass
class RoundEndedEvent:
    round_number: int
    turns: int
    winner: str = ""
