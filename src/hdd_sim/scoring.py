"""
scoring.py: End of run reward.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .constants import PIPE_LENGTH, GOAL_CENTER, WIN_REWARD, PARTIAL_REWARD
from .data_models import GameState, SimulationState, Vec2


def cost_multiplier(pipe_length: int, divisor: int, unit: int) -> int:
    return math.ceil(pipe_length / divisor) * unit


def start_multiplier(pipe_length: int = PIPE_LENGTH) -> int:
    return cost_multiplier(pipe_length, 40, 10)


def side_track_multiplier(pipe_length: int = PIPE_LENGTH) -> int:
    return cost_multiplier(pipe_length, 20, 10)


def stuck_multiplier(pipe_length: int = PIPE_LENGTH) -> int:
    return cost_multiplier(pipe_length, 50, 50)


@dataclass(frozen=True)
class ScoreBreakdown:
    won: bool
    base_reward: int
    distance_or_length: int
    drilled_length: int
    start_count: int
    start_multiplier: int
    side_track_count: int
    side_track_multiplier: int
    stuck_count: int
    stuck_multiplier: int

    @property
    def start_cost(self) -> int:
        return self.start_count * self.start_multiplier

    @property
    def side_track_cost(self) -> int:
        return self.side_track_count * self.side_track_multiplier

    @property
    def stuck_cost(self) -> int:
        return self.stuck_count * self.stuck_multiplier

    @property
    def final_score(self) -> int:
        return (self.base_reward
                - self.distance_or_length
                - self.drilled_length
                - self.start_cost
                - self.side_track_cost
                - self.stuck_cost)

    def lines(self) -> List[str]:
        """End of game stats, one line per term, as shown on the results screen."""
        reward_label = "mission reward" if self.won else "partial reward"
        distance_label = "final pipe length" if self.won else "remaining distance"
        return [
            f"{reward_label} = {self.base_reward:5d}+",
            f"{distance_label} = {self.distance_or_length:5d}-",
            f"drilled length = {self.drilled_length:5d}-",
            f"starts: {self.start_count} *{self.start_multiplier} = {self.start_cost:5d}-",
            f"side-tracks: {self.side_track_count} *{self.side_track_multiplier} = {self.side_track_cost:5d}-",
            f"stuck count: {self.stuck_count} *{self.stuck_multiplier} = {self.stuck_cost:5d}-",
            f"FINAL SCORE = {self.final_score:5d} ",
        ]


def compute_score(state: GameState, path_length: int, old_path_lengths: Sequence[int],
                  remaining_distance: float, start_count: int, side_track_count: int,
                  stuck_count: int, pipe_length: int = PIPE_LENGTH) -> ScoreBreakdown:
    """Scores a run from its counters. Any state other than WIN scores as a partial run."""
    won = state is GameState.WIN
    return ScoreBreakdown(
        won=won,
        base_reward=WIN_REWARD if won else PARTIAL_REWARD,
        distance_or_length=path_length if won else math.ceil(remaining_distance),
        drilled_length=path_length + sum(old_path_lengths),
        start_count=start_count,
        start_multiplier=start_multiplier(pipe_length),
        side_track_count=side_track_count,
        side_track_multiplier=side_track_multiplier(pipe_length),
        stuck_count=stuck_count,
        stuck_multiplier=stuck_multiplier(pipe_length),
    )


def score_run(sim: SimulationState, goal_center: Tuple[float, float] = GOAL_CENTER,
              pipe_length: int = PIPE_LENGTH) -> ScoreBreakdown:
    remaining = sim.position.dist(Vec2(*goal_center))
    return compute_score(
        state=sim.state,
        path_length=len(sim.path),
        old_path_lengths=[len(p) for p in sim.old_paths],
        remaining_distance=remaining,
        start_count=sim.start_count,
        side_track_count=sim.side_track_count,
        stuck_count=sim.stuck_count,
        pipe_length=pipe_length,
    )
