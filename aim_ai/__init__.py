"""
Aim AI - Learning targeting bot on top of the adaptive aim core.

Architecture:
- AimController: segment classification -> policy action -> angle bucket
  -> random offset inside the bucket -> shot record
- AimBot: host event handling, firepower management, feedback routing
- AimConfig: tunables, loadable from env vars or JSON
- train: multi-round sessions against scripted movers
"""

from aim_ai.config import AimConfig
from aim_ai.controller import AimController
from aim_ai.agent import AimBot, EnemyInfo, RoundReport

__all__ = [
    "AimConfig",
    "AimController",
    "AimBot",
    "EnemyInfo",
    "RoundReport",
]
