"""
drill_engine.py: The authoritative drilling session, player actions and ticks.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .constants import DEFAULT_RANDOMNESS, MIN_SEED, MAX_SEED
from .data_models import GameState, SimulationState
from .drill_core import DrillCore
from .fog import FogOfUncertainty
from .path_ledger import register_start, retract
from .reflections import compute_reflections
from .scoring import ScoreBreakdown, score_run
from .terrain import Terrain, generate_terrain

logger = logging.getLogger(__name__)

# States the player may pull back from
_PULL_BACK_STATES = (GameState.PAUSED, GameState.DRILLING, GameState.STUCK)


@dataclass
class DrillEngine(DrillCore):
    """
    The engine managing one drilling session.
    Inherits the drilling rules from DrillCore.
    """
    seed: Optional[int] = None
    randomness: float = DEFAULT_RANDOMNESS
    seed_source: random.Random = field(default_factory=random.Random)
    terrain_factory: Callable[[random.Random], Terrain] = generate_terrain
    tick_count: int = 0

    # Per-run data, rebuilt by start_drill()
    sim: SimulationState = field(init=False)
    terrain: Terrain = field(init=False)
    fog: FogOfUncertainty = field(init=False)
    reflections: List[Tuple[float, float]] = field(init=False)
    rng: random.Random = field(init=False)
    final_score: Optional[ScoreBreakdown] = field(init=False, default=None)

    def __post_init__(self):
        if self.seed is None:
            self.seed = self._draw_seed()
        self.start_drill()

    def _draw_seed(self) -> int:
        return self.seed_source.randint(MIN_SEED, MAX_SEED)

    def start_drill(self):
        """Resets the run for the current seed: terrain, fog, reflections and state."""
        self.rng = random.Random(self.seed)
        self.sim = SimulationState()
        self.terrain = self.terrain_factory(self.rng)
        self.fog = FogOfUncertainty.for_terrain(self.terrain)
        # Reflections are read every frame, build them before the first one
        self.reflections = compute_reflections(
            self.terrain.boulders, self.rng,
            width=self.terrain.width, field_height=self.terrain.height)
        self.final_score = None
        self.tick_count = 0
        logger.info("Run started with seed %d", self.seed)

    def new_run(self):
        self.seed = self._draw_seed()
        self.start_drill()

    # ---------- Player actions ----------

    def toggle_bias(self):
        self.sim.bias *= -1

    def start_or_pause(self):
        state = self.sim.state
        if state in (GameState.PAUSED, GameState.STUCK):
            self.sim.state = GameState.DRILLING
            register_start(self.sim)
        elif state is GameState.DRILLING:
            self.sim.state = GameState.PAUSED
        elif state.is_terminal:
            self.new_run()

    def pull_back(self):
        if self.sim.state not in _PULL_BACK_STATES:
            return
        self.sim.state = GameState.PAUSED
        retract(self.sim, self.PIPE_LENGTH)

    def set_randomness(self, value: float):
        self.randomness = min(max(value, 0.0), 100.0)

    # ---------- Simulation ----------

    def step(self):
        """
        The main simulation tick, one per frame.
        """
        self.tick_count += 1

        if self.sim.state is GameState.DRILLING:
            self.drill(self.sim, self.terrain, self.fog, self.randomness, self.rng)

        self.tick_connection(self.sim)

        if self.sim.state.is_terminal and self.final_score is None:
            self.final_score = score_run(self.sim)
            logger.info("Run with seed %d ended in %s, score %d",
                        self.seed, self.sim.state.value, self.final_score.final_score)

    def score(self) -> ScoreBreakdown:
        """The final score once the run is over, otherwise the score if it ended now."""
        if self.final_score is not None:
            return self.final_score
        return score_run(self.sim)

    # ---------- Display ----------

    def button_label(self) -> str:
        state = self.sim.state
        if state in (GameState.DRILLING, GameState.CONNECTION):
            return "pause"
        if state.is_terminal:
            return "new game"
        if state is GameState.PAUSED and self.sim.start_count == 0 and not self.sim.path:
            return "start"
        return "drill"

    def status_message(self) -> Optional[str]:
        state = self.sim.state
        if state is GameState.CONNECTION:
            return "*pipe handling*"
        if state is GameState.STUCK:
            return f"STUCK! ({self.sim.stuck_count}/{self.MAX_STUCK_TIMES} times)"
        if state is GameState.WIN:
            return "YOU WIN"
        if state is GameState.LOSE:
            return "YOU LOSE"
        return None

    def to_client_state(self):
        """Everything a renderer needs, read-only."""
        data = self.sim.to_client_state()
        data.update({
            "seed": self.seed,
            "randomness": self.randomness,
            "turn_circle_radius": self.turn_circle_radius,
            "button": self.button_label(),
            "status": self.status_message(),
        })
        if self.sim.state.is_terminal:
            data["score"] = self.score().lines()
        return data
