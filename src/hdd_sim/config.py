"""
config.py: Run-time options for a drilling session.
"""

import argparse
from typing import Optional

from .constants import DEFAULT_RANDOMNESS, MIN_SEED, MAX_SEED


class SimConfig:
    def __init__(
        self,
        seed: Optional[int] = None,
        randomness: float = DEFAULT_RANDOMNESS,
        fog: bool = True,
        steering_limits: bool = True,
        debug: bool = False,
    ):
        if seed is not None and not MIN_SEED <= seed <= MAX_SEED:
            raise ValueError(f"Seed must be between {MIN_SEED} and {MAX_SEED}, got {seed}")
        if not 0.0 <= randomness <= 100.0:
            raise ValueError(f"Randomness is a percentage, got {randomness}")
        self.seed = seed
        self.randomness = randomness
        self.fog = fog
        self.steering_limits = steering_limits
        self.debug = debug

    @classmethod
    def from_args(cls, args=None):
        if args is None:
            return cls()
        return cls(
            seed=args.seed,
            randomness=args.randomness,
            fog=not args.no_fog,
            steering_limits=not args.no_steering_limits,
            debug=args.debug,
        )


def build_parser() -> argparse.ArgumentParser:
    # Run the tool with the -h option to see the complete help
    parser = argparse.ArgumentParser(description='Horizontal directional drilling simulator')
    parser.add_argument('-s', '--seed', type=int, default=None,
                        help=f'Level seed ({MIN_SEED}-{MAX_SEED}), random when omitted')
    parser.add_argument('-r', '--randomness', type=float, default=DEFAULT_RANDOMNESS,
                        help='Drilling imprecision in percent of the steering angle')
    parser.add_argument('--no-fog', action='store_true',
                        help='Show the whole subsurface')
    parser.add_argument('--no-steering-limits', action='store_true',
                        help='Hide the tightest-turn arcs ahead of the bit')
    parser.add_argument('--debug', action='store_true',
                        help='Verbose logging')
    return parser
