"""
Duel Engine - Minimal tick-driven host for one targeting bot vs one mover.

Handles:
- Gun, body and radar turning at their per-tick rate limits
- Gun heat and cooling
- Body movement with acceleration/deceleration inside the battlefield
- Bullet flight time and hit resolution
- Energy bookkeeping and round end

The opponent is not simulated physically. When a bullet is fired, the mover
decides where inside the escape range it will be on arrival (its escape
factor); the bullet hits if its heading passes within half a robot width of
that point.
"""

import math
import random
from dataclasses import dataclass
from typing import Dict, List, Optional

from game import rules
from game.ai_opponents import BaseMover
from game.events import (
    Bullet, BulletHitEvent, BulletMissedEvent, RoundEndedEvent,
    ScannedRobotEvent,
)
from game.robot import RobotHost


def _clamp(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))


class DuelRobot(RobotHost):
    """Host-side body of the learning bot."""

    def __init__(self, battlefield_width: float, battlefield_height: float,
                 x: float, y: float, heading: float = 0.0):
        self.battlefield_width = battlefield_width
        self.battlefield_height = battlefield_height
        self.x = x
        self.y = y
        self.heading = heading
        self.velocity = 0.0
        self.energy = rules.START_ENERGY
        self.time = 0

        self.gun_heading = heading
        self.gun_heat = 3.0
        self.gun_turn_remaining = 0.0
        self.radar_heading = heading
        self.radar_turn_remaining = 0.0
        self.turn_remaining = 0.0
        self.distance_remaining = 0.0

        self.fired: List[Bullet] = []

    def set_ahead(self, distance: float):
        self.distance_remaining = distance

    def set_turn_right(self, radians: float):
        self.turn_remaining = radians

    def set_turn_gun_right(self, radians: float):
        self.gun_turn_remaining = radians

    def set_turn_radar_right(self, radians: float):
        self.radar_turn_remaining = radians

    def set_fire(self, power: float) -> Optional[Bullet]:
        if self.gun_heat > 0.0 or self.energy < power:
            return None
        power = max(rules.MIN_BULLET_POWER, min(rules.MAX_BULLET_POWER, power))
        bullet = Bullet(power=power, heading=self.gun_heading)
        self.gun_heat += rules.gun_heat(power)
        self.energy -= power
        self.fired.append(bullet)
        return bullet

    def advance(self):
        """Apply pending turn/move commands for one tick."""
        step = _clamp(self.turn_remaining, rules.MAX_TURN_RATE)
        self.heading = rules.normal_absolute_angle(self.heading + step)
        self.turn_remaining -= step

        step = _clamp(self.gun_turn_remaining, rules.GUN_TURN_RATE)
        self.gun_heading = rules.normal_absolute_angle(self.gun_heading + step)
        self.gun_turn_remaining -= step

        step = _clamp(self.radar_turn_remaining, rules.RADAR_TURN_RATE)
        self.radar_heading = rules.normal_absolute_angle(
            self.radar_heading + step)
        self.radar_turn_remaining -= step

        self.gun_heat = max(0.0, self.gun_heat - self.gun_cooling_rate)
        self._advance_velocity()

    def _advance_velocity(self):
        desired = _clamp(self.distance_remaining, rules.MAX_VELOCITY)
        v = self.velocity
        if v < desired:
            v = min(desired, v + (rules.ACCELERATION if v >= 0
                                  else rules.DECELERATION))
        elif v > desired:
            v = max(desired, v - (rules.ACCELERATION if v <= 0
                                  else rules.DECELERATION))

        half = self.width / 2
        x = self.x + math.sin(self.heading) * v
        y = self.y + math.cos(self.heading) * v
        clamped_x = max(half, min(self.battlefield_width - half, x))
        clamped_y = max(half, min(self.battlefield_height - half, y))
        if clamped_x != x or clamped_y != y:
            v = 0.0  # Hit a wall

        self.x, self.y = clamped_x, clamped_y
        self.velocity = v
        self.distance_remaining -= v


@dataclass
class BulletInFlight:
    bullet: Bullet
    ticks_left: int
    fire_bearing: float      # Absolute bearing to the opponent when fired
    distance: float
    escape_factor: float     # Where the opponent will be, in [-1, 1]
    max_escape_angle: float

    def is_hit(self) -> bool:
        target_angle = (self.fire_bearing
                        + self.escape_factor * self.max_escape_angle)
        error = abs(rules.normal_relative_angle(self.bullet.heading
                                                - target_angle))
        return error * self.distance <= rules.ROBOT_SIZE / 2


class DuelEngine:
    """
    Runs rounds between a targeting bot and a scripted mover.
    Provides a reset/step interface; play_round drives a whole round.
    """

    def __init__(self, mover: BaseMover, battlefield_width: float = 800.0,
                 battlefield_height: float = 600.0, max_ticks: int = 2000,
                 rng: Optional[random.Random] = None):
        self.mover = mover
        self.battlefield_width = battlefield_width
        self.battlefield_height = battlefield_height
        self.max_ticks = max_ticks
        self.rng = rng or random.Random()

        self.robot: Optional[DuelRobot] = None
        self.in_flight: List[BulletInFlight] = []
        self.enemy_bearing = 0.0
        self.tick = 0
        self.round_number = 0
        self.done = False
        self.hits = 0
        self.misses = 0

    def reset(self) -> DuelRobot:
        """Start a new round and return the bot's host body."""
        self.robot = DuelRobot(
            self.battlefield_width, self.battlefield_height,
            x=self.battlefield_width / 2, y=self.battlefield_height / 2,
            heading=self.rng.uniform(0.0, 2.0 * math.pi),
        )
        self.mover.reset(self.rng)
        self.in_flight = []
        self.enemy_bearing = self.rng.uniform(0.0, 2.0 * math.pi)
        self.tick = 0
        self.done = False
        self.hits = 0
        self.misses = 0
        return self.robot

    def step(self, bot) -> Dict:
        """
        One tick: move the opponent, deliver the scan, run the bot,
        advance the host body and resolve arriving bullets.
        """
        if self.robot is None:
            raise RuntimeError("Call reset() before step()")

        robot = self.robot
        robot.time = self.tick

        self.mover.step(self.tick, self.rng)
        self.enemy_bearing = rules.normal_absolute_angle(
            self.enemy_bearing + self.mover.velocity / max(self.mover.distance, 1.0))

        bot.on_scanned_robot(ScannedRobotEvent(
            distance=self.mover.distance,
            bearing=rules.normal_relative_angle(
                self.enemy_bearing - robot.heading),
            heading=self.mover.heading,
            velocity=self.mover.velocity,
            energy=self.mover.energy,
            time=self.tick,
        ))
        bot.run_tick()

        self._launch_fired_bullets()
        robot.advance()
        self._resolve_bullets(bot)

        self.tick += 1
        if self.mover.energy <= 0.0 or self.tick >= self.max_ticks:
            self.done = True

        return {
            'tick': self.tick,
            'done': self.done,
            'hits': self.hits,
            'misses': self.misses,
            'in_flight': len(self.in_flight),
            'enemy_energy': self.mover.energy,
            'energy': robot.energy,
        }

    def play_round(self, bot) -> Dict:
        """Run ticks until the round ends, then notify the bot."""
        if self.robot is None:
            raise RuntimeError("Call reset() before play_round()")

        info = {}
        while not self.done:
            info = self.step(bot)

        winner = "bot" if self.mover.energy <= 0.0 else ""
        report = bot.on_round_ended(RoundEndedEvent(
            round_number=self.round_number, turns=self.tick, winner=winner))
        self.round_number += 1
        info['report'] = report
        return info

    def _launch_fired_bullets(self):
        robot = self.robot
        distance = self.mover.distance
        for bullet in robot.fired:
            speed = rules.bullet_speed(bullet.power)
            self.in_flight.append(BulletInFlight(
                bullet=bullet,
                ticks_left=max(1, int(math.ceil(distance / speed))),
                fire_bearing=self.enemy_bearing,
                distance=distance,
                escape_factor=self.mover.escape_factor(
                    distance, self.mover.velocity, self.rng),
                max_escape_angle=rules.max_escape_angle(bullet.power),
            ))
        robot.fired.clear()

    def _resolve_bullets(self, bot):
        still_flying = []
        for shot in self.in_flight:
            shot.ticks_left -= 1
            if shot.ticks_left > 0:
                still_flying.append(shot)
                continue

            if shot.is_hit():
                self.hits += 1
                self.mover.energy -= rules.bullet_damage(shot.bullet.power)
                self.robot.energy += 3.0 * shot.bullet.power
                bot.on_bullet_hit(BulletHitEvent(shot.bullet, time=self.tick))
            else:
                self.misses += 1
                bot.on_bullet_missed(BulletMissedEvent(shot.bullet,
                                                       time=self.tick))
        self.in_flight = still_flying
