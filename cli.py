#!/usr/bin/env python3
"""
Adaptive Aim - Command Line Interface

Train the aiming learner and compare it against the random-fire baseline.

Usage:
    python cli.py train --rounds 30 --mover segmented
    python cli.py compare --rounds 20 --mover pattern
    python cli.py config --output aim.json
"""

import argparse
import json
import logging
import sys

from aim_ai.config import AimConfig
from aim_ai.train import add_training_arguments, compare, train


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='adaptive-aim',
        description='Online guess-factor aiming learner'
    )
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Train command
    train_parser = subparsers.add_parser('train', help='Train against a mover')
    add_training_arguments(train_parser)
    train_parser.add_argument('--fire-randomly', action='store_true',
                              help='Ignore the policy (baseline)')
    train_parser.add_argument('--save-path', type=str, default=None,
                              help='Directory for final_results.json')
    train_parser.add_argument('--log-interval', type=int, default=1,
                              help='Log every N rounds (default: 1)')

    # Compare command
    compare_parser = subparsers.add_parser(
        'compare', help='Learned aim vs random fire')
    add_training_arguments(compare_parser)

    # Config command
    config_parser = subparsers.add_parser(
        'config', help='Write the effective configuration')
    config_parser.add_argument('--output', '-o', type=str, default=None,
                               help='Output file (default: stdout)')

    return parser


def cmd_compare(args):
    """Run learned and baseline sessions on identical seeds"""
    config = AimConfig.load(args.config) if args.config else AimConfig.from_env()
    if args.selection:
        config.selection_mode = args.selection
    if args.scoring:
        config.scoring_mode = args.scoring

    print(f"Comparing against '{args.mover}' over {args.rounds} rounds...")
    result = compare(config, args.mover, args.rounds,
                     max_ticks=args.max_ticks, seed=args.seed)

    print(f"  Learned accuracy: {result['learned_accuracy']:.1%}")
    print(f"  Random accuracy:  {result['random_accuracy']:.1%}")
    print(f"  Improvement:      {result['improvement']:+.1%}")
    return result


def cmd_config(args):
    """Dump the configuration resolved from the environment"""
    config = AimConfig.from_env()
    config.validate()
    if args.output:
        config.save(args.output)
        print(f"Configuration written to {args.output}")
    else:
        print(json.dumps(config.to_dict(), indent=2))


def main(argv=None):
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )

    if args.command == 'train':
        train(args)
    elif args.command == 'compare':
        cmd_compare(args)
    elif args.command == 'config':
        cmd_config(args)
    else:
        parser.print_help()
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
