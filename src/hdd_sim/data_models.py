"""
data_models.py: Data structures for the drilling state.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from .constants import STARTING_ANGLE, STARTING_X, STARTING_DEPTH, GROUND_LEVEL


class GameState(str, Enum):
    PAUSED = "PAUSED"
    DRILLING = "DRILLING"
    CONNECTION = "CONNECTION"
    STUCK = "STUCK"
    WIN = "WIN"
    LOSE = "LOSE"

    @property
    def is_terminal(self) -> bool:
        return self in (GameState.WIN, GameState.LOSE)


@dataclass(frozen=True)
class Vec2:
    """Immutable 2D vector. Every update produces a new instance."""
    x: float
    y: float

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def rotate(self, angle: float) -> "Vec2":
        c, s = math.cos(angle), math.sin(angle)
        return Vec2(self.x * c - self.y * s, self.x * s + self.y * c)

    def heading(self) -> float:
        return math.atan2(self.y, self.x)

    def dist(self, other: "Vec2") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def scale(self, factor: float) -> "Vec2":
        return Vec2(self.x * factor, self.y * factor)

    @staticmethod
    def from_angle(angle: float, length: float = 1.0) -> "Vec2":
        return Vec2(length * math.cos(angle), length * math.sin(angle))


@dataclass(frozen=True)
class PathSegment:
    """Snapshot of the bit taken once per drilling step."""
    position: Vec2
    direction: Vec2


@dataclass(frozen=True)
class Boulder:
    x: float
    y: float
    r: float


def start_position() -> Vec2:
    return Vec2(float(STARTING_X), float(GROUND_LEVEL + STARTING_DEPTH))


def start_direction() -> Vec2:
    return Vec2.from_angle(STARTING_ANGLE)


@dataclass
class SimulationState:
    """The single owned record of a drilling run."""
    position: Vec2 = field(default_factory=start_position)
    direction: Vec2 = field(default_factory=start_direction)
    bias: int = 1
    state: GameState = GameState.PAUSED

    path: List[PathSegment] = field(default_factory=list)
    old_paths: List[List[PathSegment]] = field(default_factory=list)
    path_position: int = -1

    # Counters, reset only when a new run starts
    stuck_count: int = 0
    start_count: int = 0
    side_track_count: int = 0

    connection_countdown: int = 0

    def to_client_state(self):
        """Prepares a minimal read-only state dictionary for display."""
        return {
            "x": round(self.position.x, 2),
            "y": round(self.position.y, 2),
            "heading": round(self.direction.heading(), 4),
            "bias": self.bias,
            "state": self.state.value,
            "path_length": len(self.path),
            "old_path_lengths": [len(p) for p in self.old_paths],
            "stuck_count": self.stuck_count,
            "start_count": self.start_count,
            "side_track_count": self.side_track_count,
        }
