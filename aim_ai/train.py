"""
Training Script - Train the aiming learner against a scripted mover.

Usage:
    python -m aim_ai.train                         # Train with defaults
    python -m aim_ai.train --rounds 50             # Custom round count
    python -m aim_ai.train --mover segmented       # Specific opponent
    python -m aim_ai.train --selection sum_probability
    python -m aim_ai.train --fire-randomly         # Random-fire baseline
    python -m aim_ai.train --save-path results/    # Write final_results.json
"""

import argparse
import json
import os
import random
import time
from typing import Dict, Optional

import numpy as np

from game.ai_opponents import MOVERS, create_mover
from game.engine import DuelEngine
from game.renderer import ScoreRenderer
from aim_ai.agent import AimBot
from aim_ai.config import AimConfig


def run_session(config: AimConfig, mover_name: str = 'pattern',
                rounds: int = 10, max_ticks: int = 2000, seed: int = 42,
                log_interval: int = 1, verbose: bool = True) -> Dict:
    """
    Play `rounds` rounds against one mover with a single learning state.

    Returns per-round accuracy and the final scores.
    """
    rng = random.Random(seed)
    learning = config.build_learning_state(rng=random.Random(rng.random()))
    engine = DuelEngine(create_mover(mover_name), max_ticks=max_ticks,
                        rng=random.Random(rng.random()))

    accuracies = []
    total_hits = 0
    total_shots = 0

    for round_num in range(1, rounds + 1):
        learning.begin_round()
        robot = engine.reset()
        bot = AimBot(robot, learning, config=config,
                     rng=random.Random(rng.random()))

        info = engine.play_round(bot)
        report = info['report']

        accuracies.append(report.accuracy)
        total_hits += report.hits
        total_shots += report.shots

        if verbose and round_num % log_interval == 0:
            print(f"Round {round_num}/{rounds} | "
                  f"Ticks: {info['tick']} | "
                  f"Hits: {report.hits}/{report.shots} | "
                  f"Accuracy: {report.accuracy:.1%} | "
                  f"Temperature: {report.temperature:.4f}")

    recent = accuracies[-10:]
    return {
        'rounds': rounds,
        'mover': mover_name,
        'total_hits': total_hits,
        'total_shots': total_shots,
        'overall_accuracy': total_hits / total_shots if total_shots else 1.0,
        'recent_accuracy': float(np.mean(recent)) if recent else 1.0,
        'round_accuracies': accuracies,
        'final_temperature': learning.selector.temperature,
        'scores': learning.table.snapshot(),
        'table': learning.table,
    }


def compare(config: AimConfig, mover_name: str, rounds: int,
            max_ticks: int = 2000, seed: int = 42) -> Dict:
    """Learned aim vs the random-fire baseline on identical seeds."""
    learned = run_session(config, mover_name, rounds, max_ticks, seed,
                          verbose=False)
    baseline_config = AimConfig.from_dict({**config.to_dict(),
                                           'fire_randomly': True})
    baseline = run_session(baseline_config, mover_name, rounds, max_ticks,
                           seed, verbose=False)
    return {
        'mover': mover_name,
        'rounds': rounds,
        'learned_accuracy': learned['overall_accuracy'],
        'random_accuracy': baseline['overall_accuracy'],
        'improvement': (learned['overall_accuracy']
                        - baseline['overall_accuracy']),
    }


def train(args) -> Dict:
    """Main training function."""
    print("=" * 70)
    print("ADAPTIVE AIM - Guess Factor Training")
    print("=" * 70)

    config = AimConfig.load(args.config) if args.config else AimConfig.from_env()
    if args.selection:
        config.selection_mode = args.selection
    if args.scoring:
        config.scoring_mode = args.scoring
    if args.fire_randomly:
        config.fire_randomly = True

    print(f"\nOpponent: {args.mover}")
    print(f"Rounds: {args.rounds}, max ticks/round: {args.max_ticks}")
    print(f"Actions: {config.num_actions}, selection: {config.selection_mode}, "
          f"scoring: {config.scoring_mode}")

    start_time = time.time()
    results = run_session(config, args.mover, rounds=args.rounds,
                          max_ticks=args.max_ticks, seed=args.seed,
                          log_interval=args.log_interval)
    elapsed = time.time() - start_time

    print("\n" + "=" * 70)
    print("TRAINING COMPLETE")
    print("=" * 70)
    print(f"  Shots resolved:    {results['total_shots']}")
    print(f"  Overall accuracy:  {results['overall_accuracy']:.1%}")
    print(f"  Recent accuracy:   {results['recent_accuracy']:.1%}")
    print(f"  Final temperature: {results['final_temperature']:.4f}")
    print(f"  Elapsed time:      {elapsed:.1f}s")
    print("\nLearned scores:")
    print(ScoreRenderer.render_bars(results['table']))

    if args.save_path:
        os.makedirs(args.save_path, exist_ok=True)
        summary = {k: v for k, v in results.items() if k != 'table'}
        with open(os.path.join(args.save_path, 'final_results.json'), 'w') as f:
            json.dump({
                'results': summary,
                'config': config.to_dict(),
                'elapsed_seconds': elapsed,
            }, f, indent=2)
        print(f"\nResults saved to: {args.save_path}")

    return results


def add_training_arguments(parser: argparse.ArgumentParser):
    parser.add_argument('--rounds', type=int, default=20,
                        help='Rounds to play (default: 20)')
    parser.add_argument('--max-ticks', type=int, default=2000,
                        help='Max ticks per round (default: 2000)')
    parser.add_argument('--mover', type=str, default='segmented',
                        choices=sorted(MOVERS),
                        help='Opponent movement (default: segmented)')
    parser.add_argument('--selection', type=str, default=None,
                        choices=['boltzmann', 'sum_probability'],
                        help='Override selection mode')
    parser.add_argument('--scoring', type=str, default=None,
                        choices=['ratio', 'additive'],
                        help='Override scoring mode')
    parser.add_argument('--config', type=str, default=None,
                        help='JSON config file (default: AIM_* env vars)')
    parser.add_argument('--seed', type=int, default=42,
                        help='Random seed (default: 42)')


def main(argv: Optional[list] = None):
    parser = argparse.ArgumentParser(
        description='Train the adaptive aiming learner'
    )
    add_training_arguments(parser)
    parser.add_argument('--fire-randomly', action='store_true',
                        help='Ignore the policy (baseline)')
    parser.add_argument('--save-path', type=str, default=None,
                        help='Directory for final_results.json')
    parser.add_argument('--log-interval', type=int, default=1,
                        help='Log every N rounds (default: 1)')

    args = parser.parse_args(argv)
    train(args)


if __name__ == '__main__':
    main()
