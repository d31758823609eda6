"""
Aim Bot - Event-driven targeting robot built on the learning core.

Wires host events to the learner:
- Scan: track the opponent, decide a shot when the gun is nearly cool
- Tick: servo the gun, dodge, move, fire the pending shot once the gun stops
- Bullet hit/miss: correlate with the shot log and update scores
- Round end: report scores and accuracy

The learning state is passed in and outlives the bot; a new bot is built for
every round while the scores carry over.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from core.feedback import FeedbackCorrelator, FeedbackResult, ShotLog, ShotRecord
from core.learning import LearningState
from core.segments import SegmentClassifier
from game import rules
from game.events import (
    BulletHitEvent, BulletMissedEvent, RoundEndedEvent, ScannedRobotEvent,
)
from game.renderer import ScoreRenderer
from game.robot import RobotController, RobotHost

from aim_ai.config import AimConfig
from aim_ai.controller import AimController

logger = logging.getLogger(__name__)


@dataclass
class EnemyInfo:
    """What we last saw of the opponent."""
    last_energy: float = rules.START_ENERGY
    last_x: float = 0.0
    last_y: float = 0.0
    recorded_time: int = 0
    last_distance: float = 0.0
    fired: bool = False


@dataclass
class RoundReport:
    round_number: int
    accuracy: float
    hits: int
    shots: int
    temperature: float
    scores: Dict[str, List[float]] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            'round_number': self.round_number,
            'accuracy': self.accuracy,
            'hits': self.hits,
            'shots': self.shots,
            'temperature': self.temperature,
            'scores': self.scores,
        }


class AimBot:
    """
    Targeting bot for one round.

    Shots are fired with slightly randomized power so that concurrent
    bullets are easier to tell apart when their feedback comes back.
    """

    def __init__(self, robot: RobotHost, learning: LearningState,
                 config: AimConfig = None,
                 rng: Optional[random.Random] = None):
        self.config = config or AimConfig()
        self.robot = robot
        self.learning = learning
        self.rng = rng or random.Random()

        self.servo = RobotController(robot, rng=random.Random(self.rng.random()))
        self.shot_log = ShotLog()
        self.classifier = SegmentClassifier(
            max_velocity=self.config.max_velocity,
            far_distance=self.config.far_distance,
        )
        self.aim = AimController(
            self.classifier,
            learning.selector,
            self.shot_log,
            fire_randomly=self.config.fire_randomly,
            rng=random.Random(self.rng.random()),
        )
        self.correlator = FeedbackCorrelator(
            self.shot_log, learning.engine, epsilon=self.config.match_epsilon)
        self.fire_power_rng = random.Random(self.rng.random())

        self.enemy = EnemyInfo()
        self.is_aiming = False
        self.desired_gun_bearing: Optional[float] = None
        self.pending_shot: Optional[ShotRecord] = None
        self.scanless_time = 0

        self.shots_fired = 0
        self.shots_hit = 0

        self.base_fire_power = 0.0
        self.max_base_fire_power = 0.0
        self.reset_fire_power_levels()

    @property
    def accuracy(self) -> float:
        # Nothing fired yet counts as perfect
        if self.shots_fired == 0:
            return 1.0
        return self.shots_hit / self.shots_fired

    def reset_fire_power_levels(self):
        if rules.MIN_BULLET_POWER > 1.1:
            self.base_fire_power = rules.MIN_BULLET_POWER
        else:
            self.base_fire_power = self.config.base_fire_power
        self.max_base_fire_power = min(rules.MAX_BULLET_POWER,
                                       self.config.max_base_fire_power)

    def increase_min_fire_power(self, amount: float):
        if self.base_fire_power > self.max_base_fire_power:
            return
        self.base_fire_power += amount

    def is_gun_ready(self) -> bool:
        """True a few ticks before the gun is cool, so it has time to turn."""
        return (self.robot.gun_heat
                <= self.robot.gun_cooling_rate * self.config.aim_prepare_time)

    def is_allowed_fire(self) -> bool:
        return (self.robot.energy > self.config.min_energy_to_fire
                or self.enemy.last_distance < self.config.allowable_fire_radius)

    def choose_fire_power(self) -> float:
        if self.enemy.last_distance < self.config.allowable_fire_radius:
            return self.config.close_fire_power
        return self.fire_power_rng.uniform(
            self.base_fire_power,
            self.base_fire_power + self.config.fire_power_spread)

    # Host events

    def on_scanned_robot(self, event: ScannedRobotEvent):
        self.enemy.fired = False
        energy_drop = abs(self.enemy.last_energy - event.energy)
        if rules.MIN_BULLET_POWER <= energy_drop <= rules.MAX_BULLET_POWER:
            self.enemy.fired = True

        self._update_enemy_info(event)
        self.scanless_time = 0

        if (self.is_gun_ready() and not self.is_aiming
                and event.energy > 0 and self.is_allowed_fire()):
            firepower = self.choose_fire_power()
            escape_angle = rules.max_escape_angle(firepower,
                                                  self.config.max_velocity)
            offset, record = self.aim.decide(event, firepower, escape_angle)

            self.pending_shot = record
            self.desired_gun_bearing = (self.robot.heading + event.bearing
                                        + offset)
            self.servo.set_move_gun_to_desired_bearing(self.desired_gun_bearing)
            self.is_aiming = True

        if not self.is_aiming:
            self.servo.set_turn_gun_to_robot(event.bearing)

        self.servo.set_turn_multiplier_radar_lock(event.bearing)

    def run_tick(self):
        """Body of the per-tick control loop."""
        self.scanless_time += 1

        self._move_gun()

        if self.enemy.fired:
            self.servo.random_dodge()

        self.servo.set_move_to_wall_and_back()

        if self.is_aiming and self.servo.check_fire(self.pending_shot.power):
            self.is_aiming = False
            self.desired_gun_bearing = None
            self.pending_shot.bind_heading(self.robot.gun_heading)
            self.pending_shot = None

        # Finish off a disabled opponent
        if self.enemy.last_energy <= 0.0:
            self.servo.check_fire(rules.MIN_BULLET_POWER)

        if self.scanless_time > self.config.scanless_radar_ticks:
            self.robot.set_turn_radar_right(math.inf)

    def on_bullet_hit(self, event: BulletHitEvent) -> Optional[FeedbackResult]:
        result = self.correlator.on_hit(event)
        if result is None:
            return None

        self.learning.selector.decrease_temperature()
        self.shots_fired += 1
        self.shots_hit += 1
        self.increase_min_fire_power(self.config.fire_power_increase)
        return result

    def on_bullet_missed(self, event: BulletMissedEvent
                         ) -> Optional[FeedbackResult]:
        result = self.correlator.on_miss(event)
        if result is None:
            return None

        self.shots_fired += 1
        return result

    def on_round_ended(self, event: RoundEndedEvent) -> RoundReport:
        table = self.learning.table
        report = RoundReport(
            round_number=event.round_number,
            accuracy=self.accuracy,
            hits=self.shots_hit,
            shots=self.shots_fired,
            temperature=self.learning.selector.temperature,
            scores=table.snapshot(),
        )

        logger.info(f"Round {event.round_number} ended after {event.turns} "
                    f"turns: accuracy {report.accuracy:.2f} "
                    f"({report.hits}/{report.shots}), "
                    f"T={report.temperature:.4f}")
        logger.debug("\n" + ScoreRenderer.render_report(
            table, report.accuracy, report.hits, report.shots))

        self.shot_log.clear()
        self.pending_shot = None
        self.is_aiming = False
        return report

    # Internals

    def _move_gun(self):
        if self.desired_gun_bearing is None:
            return

        if abs(self.robot.gun_turn_remaining) < 0.01:
            self.desired_gun_bearing = None
            return

        self.servo.set_move_gun_to_desired_bearing(self.desired_gun_bearing)

    def _update_enemy_info(self, event: ScannedRobotEvent):
        absolute_bearing = rules.normal_absolute_angle(
            self.robot.heading + event.bearing)
        x, y = rules.project(self.robot.x, self.robot.y,
                             absolute_bearing, event.distance)

        self.enemy.last_x = x
        self.enemy.last_y = y
        self.enemy.recorded_time = event.time
        self.enemy.last_distance = event.distance
        self.enemy.last_energy = event.energy
