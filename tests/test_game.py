"""
Tests for the duel host.

Tests cover:
- Simulation rules and angle helpers
- Braking distance and the servo helpers
- Host robot body mechanics
- Scripted movers
- Duel engine ticks and rounds
- Score rendering
"""

import sys
import os
import math
import random

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from core.score_table import ScoreTable
from core.segments import ALL_SEGMENTS, Segment
from game import rules
from game.robot import RobotController, brake_distance
from game.events import Bullet
from game.engine import BulletInFlight, DuelEngine, DuelRobot
from game.ai_opponents import (
    MOVERS, PatternMover, RandomMover, SegmentedMover, StationaryMover,
    create_mover,
)
from game.renderer import ScoreRenderer


class AimAtEnemyBot:
    """Host-level bot: points the gun at the scan and fires when aligned."""

    def __init__(self, robot):
        self.robot = robot
        self.scans = []
        self.events = []
        self.ended = None

    def on_scanned_robot(self, event):
        self.scans.append(event)
        r = self.robot
        r.set_turn_gun_right(rules.normal_relative_angle(
            r.heading + event.bearing - r.gun_heading))

    def run_tick(self):
        r = self.robot
        if abs(r.gun_turn_remaining) < 0.01 and r.gun_heat <= 0.0:
            r.set_fire(1.0)

    def on_bullet_hit(self, event):
        self.events.append(('hit', event))

    def on_bullet_missed(self, event):
        self.events.append(('miss', event))

    def on_round_ended(self, event):
        self.ended = event
        return 'report'


class TestRules:
    def test_bullet_speed(self):
        assert rules.bullet_speed(1.0) == pytest.approx(17.0)
        assert rules.bullet_speed(3.0) == pytest.approx(11.0)

    def test_bullet_damage(self):
        assert rules.bullet_damage(1.0) == pytest.approx(4.0)
        assert rules.bullet_damage(3.0) == pytest.approx(16.0)

    def test_gun_heat(self):
        assert rules.gun_heat(2.0) == pytest.approx(1.4)

    def test_max_escape_angle(self):
        assert rules.max_escape_angle(1.0) == pytest.approx(math.asin(8.0 / 17.0))
        # Slower bullets leave more room to escape
        assert rules.max_escape_angle(3.0) > rules.max_escape_angle(0.1)

    def test_angle_normalization(self):
        assert rules.normal_relative_angle(1.5 * math.pi) == \
            pytest.approx(-0.5 * math.pi)
        assert rules.normal_relative_angle(math.pi) == pytest.approx(-math.pi)
        assert rules.normal_absolute_angle(-0.5 * math.pi) == \
            pytest.approx(1.5 * math.pi)

    def test_project_and_distance(self):
        x, y = rules.project(100.0, 100.0, math.pi / 2, 50.0)
        assert x == pytest.approx(150.0)
        assert y == pytest.approx(100.0)
        assert rules.distance(0.0, 0.0, 3.0, 4.0) == pytest.approx(5.0)


class TestRobotController:
    def test_brake_distance(self):
        assert brake_distance(8.0) == pytest.approx(20.0)
        assert brake_distance(3.0) == pytest.approx(3.0)
        assert brake_distance(1.0) == pytest.approx(1.0)
        assert brake_distance(0.0) == 0.0

    def test_move_ahead_in_open_field(self):
        robot = DuelRobot(800.0, 600.0, x=400.0, y=300.0)
        servo = RobotController(robot, rng=random.Random(0))
        assert servo.set_move_ahead(1.0)
        assert robot.distance_remaining == 30.0

    def test_move_ahead_blocked_by_wall(self):
        robot = DuelRobot(800.0, 600.0, x=18.0, y=300.0,
                          heading=1.5 * math.pi)
        servo = RobotController(robot, rng=random.Random(0))
        assert not servo.set_move_ahead(1.0)

    def test_wall_and_back_reverses(self):
        robot = DuelRobot(800.0, 600.0, x=18.0, y=300.0,
                          heading=1.5 * math.pi)
        servo = RobotController(robot, rng=random.Random(0))
        servo.set_move_to_wall_and_back()
        assert servo.moving_direction == -1.0
        assert robot.distance_remaining == -30.0

    def test_turn_gun_to_robot(self):
        robot = DuelRobot(800.0, 600.0, x=400.0, y=300.0)
        servo = RobotController(robot)
        desired = servo.set_turn_gun_to_robot(0.5)
        assert desired == pytest.approx(0.5)
        assert robot.gun_turn_remaining == pytest.approx(0.5)

    def test_gun_takes_short_way_round(self):
        robot = DuelRobot(800.0, 600.0, x=400.0, y=300.0)
        servo = RobotController(robot)
        servo.set_move_gun_to_desired_bearing(1.5 * math.pi)
        assert robot.gun_turn_remaining == pytest.approx(-0.5 * math.pi)

    def test_radar_lock_overshoots(self):
        robot = DuelRobot(800.0, 600.0, x=400.0, y=300.0)
        servo = RobotController(robot)
        servo.set_turn_multiplier_radar_lock(0.3)
        assert robot.radar_turn_remaining == pytest.approx(0.6)

    def test_check_fire_waits_for_cool_gun(self):
        robot = DuelRobot(800.0, 600.0, x=400.0, y=300.0)
        servo = RobotController(robot)
        assert not servo.check_fire(1.0)
        robot.gun_heat = 0.0
        robot.gun_turn_remaining = 0.2
        assert not servo.check_fire(1.0)
        robot.gun_turn_remaining = 0.0
        assert servo.check_fire(1.0)
        assert robot.gun_heat == pytest.approx(1.2)

    def test_random_dodge_turns(self):
        robot = DuelRobot(800.0, 600.0, x=400.0, y=300.0)
        servo = RobotController(robot, rng=random.Random(4))
        for _ in range(20):
            servo.random_dodge()
            assert abs(robot.turn_remaining) <= math.radians(17.0) + 1e-9
        assert servo.moving_direction in (1.0, -1.0)


class TestDuelRobot:
    def test_fire_only_when_cool(self):
        robot = DuelRobot(800.0, 600.0, x=400.0, y=300.0)
        assert robot.set_fire(1.0) is None
        robot.gun_heat = 0.0
        bullet = robot.set_fire(2.0)
        assert bullet == Bullet(power=2.0, heading=robot.gun_heading)
        assert robot.energy == pytest.approx(98.0)
        assert robot.set_fire(2.0) is None

    def test_gun_turn_rate_limited(self):
        robot = DuelRobot(800.0, 600.0, x=400.0, y=300.0)
        robot.set_turn_gun_right(1.0)
        robot.advance()
        assert robot.gun_heading == pytest.approx(rules.GUN_TURN_RATE)
        assert robot.gun_turn_remaining == pytest.approx(
            1.0 - rules.GUN_TURN_RATE)

    def test_acceleration_and_cooling(self):
        robot = DuelRobot(800.0, 600.0, x=400.0, y=300.0)
        robot.set_ahead(100.0)
        robot.advance()
        assert robot.velocity == pytest.approx(rules.ACCELERATION)
        assert robot.y == pytest.approx(301.0)
        assert robot.gun_heat == pytest.approx(2.9)
        for _ in range(20):
            robot.advance()
        assert robot.velocity <= rules.MAX_VELOCITY

    def test_wall_stops_robot(self):
        robot = DuelRobot(800.0, 600.0, x=400.0, y=581.0)
        robot.velocity = 8.0
        robot.set_ahead(30.0)
        robot.advance()
        assert robot.y == pytest.approx(600.0 - robot.height / 2)
        assert robot.velocity == 0.0


class TestMovers:
    def test_create_mover(self):
        for name in MOVERS:
            assert create_mover(name).name == name
        with pytest.raises(ValueError):
            create_mover('teleporter')

    def test_stationary_head_on(self):
        mover = StationaryMover()
        mover.reset(random.Random(0))
        mover.step(5, random.Random(0))
        assert mover.velocity == 0.0
        assert mover.escape_factor(300.0, 0.0, random.Random(0)) == 0.0

    def test_random_mover_bounds(self):
        mover = RandomMover()
        rng = random.Random(1)
        mover.reset(rng)
        for tick in range(200):
            mover.step(tick, rng)
            assert 60.0 <= mover.distance <= 500.0
            assert abs(mover.velocity) <= rules.MAX_VELOCITY
            assert -1.0 <= mover.escape_factor(mover.distance,
                                               mover.velocity, rng) <= 1.0

    def test_pattern_preference(self):
        mover = PatternMover()
        rng = random.Random(2)
        factors = [mover.escape_factor(300.0, 8.0, rng) for _ in range(200)]
        assert all(-1.0 <= f <= 1.0 for f in factors)
        assert sum(factors) / len(factors) == pytest.approx(0.6, abs=0.05)

    def test_segmented_preference(self):
        mover = SegmentedMover(spread=0.0)
        rng = random.Random(0)
        assert mover.escape_factor(100.0, 8.0, rng) == pytest.approx(-0.5)
        assert mover.escape_factor(300.0, 8.0, rng) == pytest.approx(0.7)
        assert mover.escape_factor(300.0, 2.0, rng) == pytest.approx(0.1)

    def test_segmented_phases(self):
        mover = SegmentedMover(phase_ticks=10)
        rng = random.Random(0)
        mover.step(0, rng)
        assert mover.velocity == rules.MAX_VELOCITY
        mover.step(10, rng)
        assert mover.velocity == 2.0

    def test_firing_drains_energy(self):
        mover = StationaryMover(fire_interval=5, fire_power=2.0)
        mover.reset(random.Random(0))
        for tick in range(11):
            mover.step(tick, random.Random(0))
        assert mover.energy == pytest.approx(rules.START_ENERGY - 4.0)


class TestDuelEngine:
    def test_step_requires_reset(self):
        engine = DuelEngine(StationaryMover())
        with pytest.raises(RuntimeError):
            engine.step(None)
        with pytest.raises(RuntimeError):
            engine.play_round(None)

    def test_reset(self):
        engine = DuelEngine(StationaryMover(), rng=random.Random(0))
        robot = engine.reset()
        assert isinstance(robot, DuelRobot)
        assert (robot.x, robot.y) == (400.0, 300.0)
        assert engine.tick == 0
        assert not engine.done

    def test_step_delivers_scan(self):
        engine = DuelEngine(StationaryMover(), rng=random.Random(0))
        bot = AimAtEnemyBot(engine.reset())
        info = engine.step(bot)
        assert info['tick'] == 1
        assert len(bot.scans) == 1
        assert bot.scans[0].distance == pytest.approx(300.0)

    def test_aimed_shots_hit_stationary(self):
        mover = StationaryMover()
        engine = DuelEngine(mover, max_ticks=150, rng=random.Random(0))
        bot = AimAtEnemyBot(engine.reset())
        info = engine.play_round(bot)

        assert info['done']
        assert info['report'] == 'report'
        assert bot.ended.turns == 150
        assert len(bot.scans) == 150
        assert engine.hits >= 1
        assert engine.misses == 0
        assert len(bot.events) == engine.hits
        assert mover.energy < rules.START_ENERGY
        assert engine.round_number == 1

    def test_bullet_in_flight_hit_test(self):
        shot = BulletInFlight(bullet=Bullet(1.0, 1.0), ticks_left=1,
                              fire_bearing=1.0, distance=300.0,
                              escape_factor=0.0, max_escape_angle=0.5)
        assert shot.is_hit()
        shot = BulletInFlight(bullet=Bullet(1.0, 1.5), ticks_left=1,
                              fire_bearing=1.0, distance=300.0,
                              escape_factor=0.0, max_escape_angle=0.5)
        assert not shot.is_hit()
        shot = BulletInFlight(bullet=Bullet(1.0, 1.5), ticks_left=1,
                              fire_bearing=1.0, distance=300.0,
                              escape_factor=1.0, max_escape_angle=0.5)
        assert shot.is_hit()


class TestScoreRenderer:
    def test_render_table(self):
        table = ScoreTable(Segment.NONE | Segment.DISTANCE_FAR, 3)
        table.fill(1.0)
        text = ScoreRenderer.render_table(table)
        assert "Segment NONE:" in text
        assert "Segment DISTANCE_FAR:" in text
        assert "1.00 | 1.00 | 1.00 |" in text

    def test_render_bars(self):
        table = ScoreTable(ALL_SEGMENTS, 4)
        table.set_score(Segment.NONE, 2, 2.0)
        lines = ScoreRenderer.render_bars(table).splitlines()
        assert len(lines) == 5
        assert "[  @ ]" in lines[0]

    def test_render_bars_empty(self):
        table = ScoreTable(Segment.NONE, 3)
        assert ScoreRenderer.render_bars(table).endswith("[...]")

    def test_render_report(self):
        table = ScoreTable(Segment.NONE, 2)
        text = ScoreRenderer.render_report(table, 0.5, 1, 2)
        assert "Accuracy: 0.50 (1/2)" in text
