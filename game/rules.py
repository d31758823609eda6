"""
Simulation Rules - Constants and formulas shared by the host and the bot.

Angles are in radians, measured clockwise from north (0 = up), so a point at
absolute bearing `a` and distance `d` lies at (x + sin(a) * d, y + cos(a) * d).
"""

import math
from typing import Tuple

# Movement
MAX_VELOCITY = 8.0
ACCELERATION = 1.0
DECELERATION = 2.0
MAX_TURN_RATE = math.radians(10.0)

# Gun and radar
GUN_TURN_RATE = math.radians(20.0)
RADAR_TURN_RATE = math.radians(45.0)
GUN_COOLING_RATE = 0.1
MIN_BULLET_POWER = 0.1
MAX_BULLET_POWER = 3.0

# Bodies
ROBOT_SIZE = 36.0
START_ENERGY = 100.0


def bullet_speed(power: float) -> float:
    return 20.0 - 3.0 * power


def bullet_damage(power: float) -> float:
    damage = 4.0 * power
    if power > 1.0:
        damage += 2.0 * (power - 1.0)
    return damage


def gun_heat(power: float) -> float:
    """Heat generated by firing a bullet of the given power."""
    return 1.0 + power / 5.0


def max_escape_angle(power: float, max_velocity: float = MAX_VELOCITY) -> float:
    """
    Largest angle offset from head-on that a target moving at full speed
    could reach before a bullet of this power arrives.
    """
    return math.asin(max_velocity / bullet_speed(power))


def normal_relative_angle(angle: float) -> float:
    """Normalize to [-pi, pi)."""
    return (angle + math.pi) % (2.0 * math.pi) - math.pi


def normal_absolute_angle(angle: float) -> float:
    """Normalize to [0, 2*pi)."""
    return angle % (2.0 * math.pi)


def project(x: float, y: float, angle: float,
            distance: float) -> Tuple[float, float]:
    return x + math.sin(angle) * distance, y + math.cos(angle) * distance


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x2 - x1, y2 - y1)
