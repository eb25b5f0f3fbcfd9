"""
drill_core.py: The deterministic drilling step, steering and terrain checks.
"""

import logging
import math
import random
from typing import List, Tuple

from .constants import (
    TURN_ANGLE, PIPE_LENGTH, PIPE_OFFSET, MAX_STUCK_TIMES, CONNECTION_TICKS,
    FOG_CLEAR_RADIUS,
)
from .data_models import GameState, SimulationState, Vec2
from .fog import FogOfUncertainty
from .path_ledger import record_segment
from .terrain import Terrain, TerrainClass

logger = logging.getLogger(__name__)

MAX_AIM_ANGLE = math.pi / 4 * 1.8

# Terrain the bit cannot survive
_LOSING_TERRAIN = (TerrainClass.BACKGROUND, TerrainClass.RIVER, TerrainClass.BOUNDARY)


class DrillCore:
    """
    Shared deterministic drilling rules used by the engine.
    """

    TURN_ANGLE = TURN_ANGLE
    PIPE_LENGTH = PIPE_LENGTH
    MAX_STUCK_TIMES = MAX_STUCK_TIMES
    CONNECTION_TICKS = CONNECTION_TICKS

    @property
    def turn_circle_radius(self) -> float:
        """Radius of the tightest circle the bit can drill, in steps."""
        turn_circle_len = (math.pi * 2) / self.TURN_ANGLE
        return turn_circle_len / math.pi / 2

    def steer(self, direction: Vec2, bias: int, randomness: float, rng: random.Random) -> Vec2:
        """
        Turns the bit by the full steering angle, then takes back a random
        fraction of it (up to randomness percent).
        """
        direction = direction.rotate(self.TURN_ANGLE * bias)
        r = rng.uniform(-randomness, 0) * self.TURN_ANGLE * bias / 100
        return direction.rotate(r)

    def out_of_bounds(self, position: Vec2, terrain: Terrain) -> bool:
        return position.x < 0 or position.x > terrain.width or position.y > terrain.height

    def drill(self, sim: SimulationState, terrain: Terrain, fog: FogOfUncertainty,
              randomness: float, rng: random.Random):
        """
        One drilling tick. Mutates the simulation state.
        """
        # 1. Steering
        sim.direction = self.steer(sim.direction, sim.bias, randomness, rng)

        # 2. Record the segment, a full joint of pipe needs a connection
        if record_segment(sim, sim.position, sim.direction, self.PIPE_LENGTH):
            sim.state = GameState.CONNECTION
            sim.connection_countdown = self.CONNECTION_TICKS

        # 3. Reduce uncertainty around the bit
        fog.clear(sim.position.x, sim.position.y, FOG_CLEAR_RADIUS)

        # 4. Advance
        sim.position = sim.position + sim.direction
        if self.out_of_bounds(sim.position, terrain):
            sim.state = GameState.LOSE
            return

        # 5. Terrain under the bit
        kind = terrain.classify(sim.position.x, sim.position.y)
        if kind is TerrainClass.GOAL:
            sim.state = GameState.WIN
        elif kind is TerrainClass.BOULDER:
            sim.state = GameState.STUCK
            sim.stuck_count += 1
            logger.info("Stuck %d/%d times", sim.stuck_count, self.MAX_STUCK_TIMES)
            if sim.stuck_count >= self.MAX_STUCK_TIMES:
                sim.state = GameState.LOSE
        elif kind in _LOSING_TERRAIN:
            sim.state = GameState.LOSE

    def tick_connection(self, sim: SimulationState):
        """Pipe handling countdown. Drilling resumes when it runs out."""
        if sim.state is not GameState.CONNECTION:
            return
        sim.connection_countdown -= 1
        if sim.connection_countdown <= 0:
            sim.state = GameState.DRILLING

    # ---------- Display helpers ----------

    def surface_pipe_length(self, sim: SimulationState) -> int:
        """Length of the current joint still visible above ground."""
        return self.PIPE_LENGTH - len(sim.path) % self.PIPE_LENGTH + PIPE_OFFSET

    def steering_limits(self, sim: SimulationState, max_angle: float = MAX_AIM_ANGLE,
                        samples: int = 24) -> List[List[Tuple[float, float]]]:
        """
        The two arcs of tightest curvature ahead of the bit (upward and
        downward), as polylines in field coordinates.
        """
        radius = self.turn_circle_radius
        heading = sim.direction.heading()
        forward = Vec2.from_angle(heading)
        side = Vec2.from_angle(heading + math.pi / 2)
        arcs = []
        for sign in (-1, 1):
            arc = []
            for i in range(samples + 1):
                phi = max_angle * i / samples
                along = radius * math.sin(phi)
                across = sign * radius * (1 - math.cos(phi))
                p = sim.position + forward.scale(along) + side.scale(across)
                arc.append((p.x, p.y))
            arcs.append(arc)
        return arcs
