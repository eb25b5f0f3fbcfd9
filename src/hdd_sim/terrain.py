"""
terrain.py: Terrain classification grid and its procedural generation.

The drill never looks at rendered pixels. It asks a Terrain for the class of
the cell under the bit, and the renderer builds its picture from the same grid.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .constants import (
    SCREEN_WIDTH, SCREEN_HEIGHT, GROUND_LEVEL, GOAL_X, GOAL_W,
    BOULDER_COUNT, BOULDER_MIN_RADIUS, BOULDER_MAX_RADIUS, BOULDER_MARGIN,
    RIVER_CENTER_X, RIVER_HALF_WIDTH, RIVER_DEPTH,
    GROUND_COLOR, BOULDER_COLOR, RIVER_COLOR, BACKGROUND_COLOR, BOUNDARY_COLOR, GOAL_COLOR,
)
from .data_models import Boulder

logger = logging.getLogger(__name__)


class TerrainClass(IntEnum):
    GROUND = 0
    BOULDER = 1
    GOAL = 2
    RIVER = 3
    BACKGROUND = 4
    BOUNDARY = 5


TERRAIN_PALETTE = {
    TerrainClass.GROUND: GROUND_COLOR,
    TerrainClass.BOULDER: BOULDER_COLOR,
    TerrainClass.GOAL: GOAL_COLOR,
    TerrainClass.RIVER: RIVER_COLOR,
    TerrainClass.BACKGROUND: BACKGROUND_COLOR,
    TerrainClass.BOUNDARY: BOUNDARY_COLOR,
}

# Colors that end a run or stop the bit. Everything else is drillable ground.
_COLOR_CLASSES = {
    GOAL_COLOR: TerrainClass.GOAL,
    BOULDER_COLOR: TerrainClass.BOULDER,
    RIVER_COLOR: TerrainClass.RIVER,
    BACKGROUND_COLOR: TerrainClass.BACKGROUND,
    BOUNDARY_COLOR: TerrainClass.BOUNDARY,
}


def classify_color(color: Sequence[int]) -> TerrainClass:
    """Exact RGB match against the palette. Alpha, if present, is ignored."""
    rgb = tuple(int(c) for c in color[:3])
    return _COLOR_CLASSES.get(rgb, TerrainClass.GROUND)


@dataclass
class Terrain:
    """A (height, width) grid of TerrainClass values plus the boulders it was built from."""
    grid: np.ndarray
    boulders: List[Boulder] = field(default_factory=list)

    def __post_init__(self):
        if self.grid.ndim != 2:
            raise ValueError(f"Terrain grid must be 2D, got shape {self.grid.shape}")

    @property
    def width(self) -> int:
        return self.grid.shape[1]

    @property
    def height(self) -> int:
        return self.grid.shape[0]

    def classify(self, x: float, y: float) -> TerrainClass:
        """Class of the cell containing (x, y). Outside the grid is BOUNDARY."""
        col = math.floor(x)
        row = math.floor(y)
        if not (0 <= col < self.width and 0 <= row < self.height):
            return TerrainClass.BOUNDARY
        return TerrainClass(int(self.grid[row, col]))

    def mask(self, kind: TerrainClass) -> np.ndarray:
        return self.grid == kind

    def to_rgb(self) -> np.ndarray:
        """Palette image of shape (height, width, 3)."""
        lut = np.zeros((len(TerrainClass), 3), dtype=np.uint8)
        for kind, color in TERRAIN_PALETTE.items():
            lut[kind] = color
        return lut[self.grid]

    @classmethod
    def from_rgb(cls, image: np.ndarray, boulders: Optional[List[Boulder]] = None) -> "Terrain":
        """Builds a terrain from an RGB or RGBA image of shape (height, width, 3|4)."""
        if image.ndim != 3 or image.shape[2] not in (3, 4):
            raise ValueError(f"Expected an RGB(A) image, got shape {image.shape}")
        rgb = image[:, :, :3].astype(np.int32)
        grid = np.full(rgb.shape[:2], TerrainClass.GROUND, dtype=np.uint8)
        for color, kind in _COLOR_CLASSES.items():
            grid[np.all(rgb == np.array(color), axis=2)] = kind
        return cls(grid=grid, boulders=list(boulders or []))


def _cell_centers(width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
    ys, xs = np.mgrid[0:height, 0:width]
    return xs + 0.5, ys + 0.5


def _goal_mask(cx: np.ndarray, cy: np.ndarray, ground_level: int) -> np.ndarray:
    # Box overlaps the ground by 2 so the bit can reach it from below
    box = (
        (cx >= GOAL_X - 2) & (cx < GOAL_X + GOAL_W + 2)
        & (cy >= ground_level - GOAL_W - 2) & (cy < ground_level + 2)
    )
    # Roof: apex above the box centre, base 6 wider than the box on each side
    base_y = ground_level - GOAL_W - 2
    apex_x = GOAL_X + GOAL_W / 2
    apex_y = ground_level - GOAL_W * 1.8
    half_base = GOAL_W / 2 + 6
    t = (cy - apex_y) / (base_y - apex_y)
    roof = (t >= 0) & (t <= 1) & (np.abs(cx - apex_x) <= half_base * t)
    return box | roof


def generate_terrain(rng: random.Random,
                     width: int = SCREEN_WIDTH,
                     height: int = SCREEN_HEIGHT,
                     ground_level: int = GROUND_LEVEL,
                     boulder_count: int = BOULDER_COUNT) -> Terrain:
    """
    Generates the classification grid for one run: sky, ground, a river under
    the middle of the field, random boulders and the goal box.
    """
    cx, cy = _cell_centers(width, height)
    grid = np.full((height, width), TerrainClass.GROUND, dtype=np.uint8)

    river = (cy >= ground_level) & (
        ((cx - RIVER_CENTER_X) / RIVER_HALF_WIDTH) ** 2
        + ((cy - ground_level) / RIVER_DEPTH) ** 2 <= 1.0
    )
    grid[river] = TerrainClass.RIVER

    boulders: List[Boulder] = []
    for _ in range(boulder_count):
        r = rng.uniform(BOULDER_MIN_RADIUS, BOULDER_MAX_RADIUS)
        x = rng.uniform(0, width)
        y = rng.uniform(ground_level + BOULDER_MARGIN, height - BOULDER_MARGIN)
        boulders.append(Boulder(x=x, y=y, r=r))
        grid[(cx - x) ** 2 + (cy - y) ** 2 <= r * r] = TerrainClass.BOULDER

    grid[:ground_level, :] = TerrainClass.BACKGROUND
    grid[_goal_mask(cx, cy, ground_level)] = TerrainClass.GOAL

    logger.debug("Generated terrain %dx%d with %d boulders", width, height, len(boulders))
    return Terrain(grid=grid, boulders=boulders)
