"""
Robot Interface - What a host exposes to a robot brain, plus servo helpers.

RobotHost is the boundary between the targeting bot and whatever simulation
runs it. RobotController wraps a host with the movement, gun and radar
routines the bot uses every tick.
"""

import math
import random
from typing import Optional

from game import rules
from game.events import Bullet


class RobotHost:
    """
    The host-side robot body.

    Readable state (plain attributes or properties on subclasses):
        x, y, heading, velocity, energy, time
        gun_heading, gun_heat, gun_turn_remaining, gun_cooling_rate
        radar_heading
        width, height, battlefield_width, battlefield_height

    Commands are "set" calls that take effect when the host advances a tick.
    """

    width = rules.ROBOT_SIZE
    height = rules.ROBOT_SIZE
    gun_cooling_rate = rules.GUN_COOLING_RATE

    def set_ahead(self, distance: float):
        raise NotImplementedError

    def set_turn_right(self, radians: float):
        raise NotImplementedError

    def set_turn_gun_right(self, radians: float):
        raise NotImplementedError

    def set_turn_radar_right(self, radians: float):
        raise NotImplementedError

    def set_fire(self, power: float) -> Optional[Bullet]:
        """Fire now; returns the bullet, or None if the gun is still hot."""
        raise NotImplementedError


def brake_distance(velocity: float) -> float:
    """
    Distance covered while braking from `velocity` down to a stop,
    decelerating by rules.DECELERATION each tick.
    """
    total = 0.0
    while abs(velocity) >= 1e-4:
        total += velocity
        remaining = abs(velocity - rules.DECELERATION)
        if 0.0 < remaining < rules.DECELERATION:
            break
        velocity = remaining
    return total


class RobotController:
    """Movement, dodging, gun and radar routines on top of a RobotHost."""

    def __init__(self, robot: RobotHost, rng: Optional[random.Random] = None):
        self.robot = robot
        self.rng = rng or random.Random()
        self.moving_direction = 1.0

    def set_move_to_wall_and_back(self):
        """Drive along the current heading, reversing before hitting a wall."""
        if not self.set_move_ahead(self.moving_direction):
            self.set_move_ahead(-self.moving_direction)
            self.moving_direction = -self.moving_direction

    def set_move_ahead(self, direction: float) -> bool:
        """
        Move ahead if no wall is within braking distance.

        direction: 1 or -1
        """
        r = self.robot
        max_x = r.battlefield_width - r.width / 2
        max_y = r.battlefield_height - r.height / 2

        stopping = brake_distance(abs(r.velocity)) * direction + direction
        x = round(r.x + math.sin(r.heading) * stopping)
        y = round(r.y + math.cos(r.heading) * stopping)

        if x >= max_x or x <= r.width / 2 or y >= max_y or y <= r.height / 2:
            return False

        r.set_ahead(direction * 30)
        return True

    def random_dodge(self):
        turn = self.rng.uniform(-17.0, 17.0)
        if abs(turn) < 5.0:
            turn *= 2.5
        self.robot.set_turn_right(math.radians(turn))

        # Occasionally reverse
        if self.rng.random() < 0.1:
            self.moving_direction = -self.moving_direction

    def check_fire(self, power: float) -> bool:
        """Fire only once the gun has stopped turning and cooled down."""
        r = self.robot
        if abs(r.gun_turn_remaining) < 0.01 and r.gun_heat <= 0.0:
            return r.set_fire(power) is not None
        return False

    def set_move_gun_to_desired_bearing(self, absolute_bearing: float):
        turn = rules.normal_relative_angle(
            absolute_bearing - self.robot.gun_heading)
        self.robot.set_turn_gun_right(turn)

    def set_turn_gun_to_robot(self, target_bearing: float) -> float:
        """Point the gun at the target; returns the absolute gun bearing."""
        desired = self.robot.heading + target_bearing
        self.robot.set_turn_gun_right(
            rules.normal_relative_angle(desired - self.robot.gun_heading))
        return desired

    def set_turn_multiplier_radar_lock(self, target_bearing: float):
        """Overshoot the radar by 2x so the lock survives the target moving."""
        radar_turn = (self.robot.heading + target_bearing
                      - self.robot.radar_heading)
        self.robot.set_turn_radar_right(
            2.0 * rules.normal_relative_angle(radar_turn))
