"""
Duel Host for Adaptive Aim

The collaborators around the learning core:

- Simulation rules: bullet speed, escape angle, angle normalization
- Event records delivered to the robot (scan, bullet hit/miss, round end)
- The host robot interface and the movement/gun/radar servo helpers
- A minimal tick-driven duel engine with scripted opponent movers
- Text rendering of learned scores
"""

from game.events import (
    ScannedRobotEvent, Bullet, BulletHitEvent, BulletMissedEvent,
    RoundEndedEvent,
)
from game.robot import RobotHost, RobotController, brake_distance
from game.engine import DuelEngine, DuelRobot
from game.ai_opponents import (
    StationaryMover, RandomMover, PatternMover, SegmentedMover, create_mover,
)
from game.renderer import ScoreRenderer

__all__ = [
    "ScannedRobotEvent", "Bullet", "BulletHitEvent", "BulletMissedEvent",
    "RoundEndedEvent",
    "RobotHost", "RobotController", "brake_distance",
    "DuelEngine", "DuelRobot",
    "StationaryMover", "RandomMover", "PatternMover", "SegmentedMover",
    "create_mover",
    "ScoreRenderer",
]
