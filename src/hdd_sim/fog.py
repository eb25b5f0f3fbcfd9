"""
fog.py: Fog of uncertainty, a visibility mask cleared along the drilled path.
"""

import math

import numpy as np

from .constants import GROUND_LEVEL, GOAL_W
from .terrain import Terrain, TerrainClass


class FogOfUncertainty:
    """
    Visibility mask of shape (height, width) in [0, 1], 1 meaning fully visible.
    The renderer multiplies the scene by it; gameplay never reads it.
    """

    def __init__(self, width: int, height: int, ground_level: int = GROUND_LEVEL,
                 gradient_rows: int = GOAL_W * 2):
        self.width = width
        self.height = height
        self.mask = np.ones((height, width), dtype=np.float32)

        # Fade from the surface into darkness, then black all the way down
        rows = np.arange(height, dtype=np.float32)
        fade = 1.0 - (rows - ground_level) / gradient_rows
        column = np.where(rows < ground_level, 1.0, np.clip(fade, 0.0, 1.0))
        self.mask[:, :] = column[:, np.newaxis]

        ys, xs = np.mgrid[0:height, 0:width]
        self._cx = xs + 0.5
        self._cy = ys + 0.5

    @classmethod
    def for_terrain(cls, terrain: Terrain, ground_level: int = GROUND_LEVEL) -> "FogOfUncertainty":
        """Fog over a terrain; the river is visible from the surface."""
        fog = cls(terrain.width, terrain.height, ground_level)
        fog.mask[terrain.mask(TerrainClass.RIVER)] = 1.0
        return fog

    def clear(self, x: float, y: float, radius: float):
        """Reveals the disc of the given radius around (x, y)."""
        x0 = max(math.floor(x - radius), 0)
        x1 = min(math.floor(x + radius) + 1, self.width)
        y0 = max(math.floor(y - radius), 0)
        y1 = min(math.floor(y + radius) + 1, self.height)
        if x0 >= x1 or y0 >= y1:
            return
        cx = self._cx[y0:y1, x0:x1]
        cy = self._cy[y0:y1, x0:x1]
        disc = (cx - x) ** 2 + (cy - y) ** 2 <= radius * radius
        self.mask[y0:y1, x0:x1][disc] = 1.0

    def visibility(self, x: float, y: float) -> float:
        col, row = math.floor(x), math.floor(y)
        if not (0 <= col < self.width and 0 <= row < self.height):
            return 0.0
        return float(self.mask[row, col])
