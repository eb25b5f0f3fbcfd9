"""
reflections.py: Simulated seismic echoes from boulders, used as visual hints.

A source at x0 and a receiver at x1 sit on the surface. For every boulder the
circumference is sampled and the shortest source -> boulder -> receiver travel
distance among the points lying between x0 and x1 is kept.
"""

import random
from typing import List, Sequence, Tuple

import numpy as np

from .constants import (
    SCREEN_WIDTH, SCREEN_HEIGHT, GROUND_LEVEL,
    REFLECTION_SPACING, REFLECTION_STEP, REFLECTION_ANGLE_STEP_DEG, REFLECTION_NOISE_PERCENT,
)
from .data_models import Boulder


def boulder_surface_points(boulder: Boulder, angle_step_deg: int = REFLECTION_ANGLE_STEP_DEG) -> np.ndarray:
    """Points on the boulder circumference, one every angle_step_deg degrees. Shape (n, 2)."""
    angles = np.deg2rad(np.arange(0, 360, angle_step_deg))
    return np.column_stack((
        boulder.x + boulder.r * np.cos(angles),
        boulder.y + boulder.r * np.sin(angles),
    ))


def min_round_trip_distance(boulders: Sequence[Boulder], x0: float, x1: float,
                            ground_level: float = GROUND_LEVEL,
                            field_height: float = SCREEN_HEIGHT) -> float:
    """
    Shortest (x0, ground) -> boulder point -> (x1, ground) distance over all
    boulder points with x0 <= px <= x1. Returns 2 * field_height when none qualifies.
    """
    best = field_height * 2
    for boulder in boulders:
        points = boulder_surface_points(boulder)
        px, py = points[:, 0], points[:, 1]
        inside = (px >= x0) & (px <= x1)
        if not inside.any():
            continue
        px, py = px[inside], py[inside]
        total = np.hypot(px - x0, py - ground_level) + np.hypot(px - x1, py - ground_level)
        best = min(best, float(total.min()))
    return best


def compute_reflections(boulders: Sequence[Boulder], rng: random.Random,
                        width: int = SCREEN_WIDTH,
                        ground_level: float = GROUND_LEVEL,
                        field_height: float = SCREEN_HEIGHT,
                        spacing: int = REFLECTION_SPACING,
                        step: int = REFLECTION_STEP,
                        noise_percent: float = REFLECTION_NOISE_PERCENT) -> List[Tuple[float, float]]:
    """
    Depth estimate for every sample pair across the field, as (x_mid, y) points
    ready to plot. The half round trip is perturbed by +/- noise_percent.
    """
    points: List[Tuple[float, float]] = []
    for x0 in range(0, width - spacing, step):
        travel = min_round_trip_distance(boulders, x0, x0 + spacing, ground_level, field_height)
        depth = (100 + rng.uniform(-noise_percent, noise_percent)) / 100.0 * travel / 2
        points.append((x0 + spacing / 2, ground_level + depth))
    return points
