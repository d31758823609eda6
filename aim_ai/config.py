"""
Aim Configuration - Tunables for the learner and the targeting bot.

Defaults reproduce the tuned bot: 9 aiming buckets, Boltzmann selection
starting at temperature 0.2 and cooling in 20 hit-steps, hit-ratio scoring
seeded with one favorable action per cell.
"""

from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Optional
import json
import os
import random

from core.learning import LearningState, ScoringMode
from core.segments import ALL_SEGMENTS
from core.selection import SelectionMode


@dataclass
class AimConfig:
    """Master configuration for the aiming learner and bot"""
    # Action space
    num_actions: int = 9

    # Score table
    min_score: float = 0.0
    initial_score: float = 1.0
    initial_favorable: int = 1

    # Selection
    selection_mode: str = SelectionMode.BOLTZMANN.value
    temperature: float = 0.2
    min_temperature: float = 0.005
    temperature_steps: int = 20      # Hits needed to cool from start to ~0
    reheat_amount: float = 0.05      # Added at the start of each later round

    # Learning updates
    scoring_mode: str = ScoringMode.RATIO.value
    discount_factor: float = 1.0
    hit_reward: float = 2.5
    miss_penalty: float = 1.0

    # Segmentation
    max_velocity: float = 8.0
    far_distance: float = 150.0

    # Shot correlation
    match_epsilon: float = 1e-4

    # Firing
    fire_randomly: bool = False
    base_fire_power: float = 1.0
    fire_power_spread: float = 0.3
    max_base_fire_power: float = 1.6
    fire_power_increase: float = 0.05
    close_fire_power: float = 3.0
    min_energy_to_fire: float = 20.0
    allowable_fire_radius: float = 75.0
    aim_prepare_time: int = 1
    scanless_radar_ticks: int = 3

    @property
    def temperature_step(self) -> float:
        return self.temperature / self.temperature_steps

    def validate(self):
        if self.num_actions < 1:
            raise ValueError(f"num_actions must be >= 1, got {self.num_actions}")
        if self.temperature_steps < 1:
            raise ValueError("temperature_steps must be >= 1")
        if self.min_temperature < 0 or self.temperature < self.min_temperature:
            raise ValueError("temperature must be >= min_temperature >= 0")
        if not 0.0 < self.discount_factor <= 1.0:
            raise ValueError(
                f"discount_factor must be in (0, 1], got {self.discount_factor}")
        if self.match_epsilon <= 0:
            raise ValueError("match_epsilon must be positive")
        SelectionMode(self.selection_mode)
        ScoringMode(self.scoring_mode)

    def build_learning_state(self, rng: Optional[random.Random] = None
                             ) -> LearningState:
        """Create a fresh learner sized and tuned by this config."""
        self.validate()
        return LearningState(
            num_actions=self.num_actions,
            segments=ALL_SEGMENTS,
            min_score=self.min_score,
            initial_score=self.initial_score,
            initial_favorable=self.initial_favorable,
            selection_mode=SelectionMode(self.selection_mode),
            temperature=self.temperature,
            min_temperature=self.min_temperature,
            temperature_step=self.temperature_step,
            reheat_amount=self.reheat_amount,
            scoring_mode=ScoringMode(self.scoring_mode),
            discount_factor=self.discount_factor,
            hit_reward=self.hit_reward,
            miss_penalty=self.miss_penalty,
            rng=rng,
        )

    @classmethod
    def from_env(cls) -> 'AimConfig':
        """Load overrides from AIM_* environment variables"""
        overrides = {}
        for f in fields(cls):
            raw = os.getenv(f"AIM_{f.name.upper()}")
            if raw is None:
                continue
            if f.type in (bool, 'bool'):
                overrides[f.name] = raw.lower() in ('1', 'true', 'yes')
            elif f.type in (int, 'int'):
                overrides[f.name] = int(raw)
            elif f.type in (float, 'float'):
                overrides[f.name] = float(raw)
            else:
                overrides[f.name] = raw
        return cls(**overrides)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AimConfig':
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def save(self, filepath: str):
        """Save configuration to file"""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> 'AimConfig':
        """Load configuration from file"""
        with open(filepath, 'r') as f:
            return cls.from_dict(json.load(f))
