import random

import numpy as np
import pytest

from hdd_sim.constants import (
    GROUND_COLOR, BOULDER_COLOR, GOAL_COLOR, RIVER_COLOR, BACKGROUND_COLOR, BOUNDARY_COLOR,
)
from hdd_sim.terrain import Terrain, TerrainClass, classify_color, generate_terrain


def test_outside_the_grid_is_boundary():
    terrain = Terrain(grid=np.zeros((10, 20), dtype=np.uint8))
    assert terrain.classify(5.5, 5.5) is TerrainClass.GROUND
    assert terrain.classify(-0.1, 5) is TerrainClass.BOUNDARY
    assert terrain.classify(20.0, 5) is TerrainClass.BOUNDARY
    assert terrain.classify(5, 10.0) is TerrainClass.BOUNDARY


def test_grid_must_be_2d():
    with pytest.raises(ValueError):
        Terrain(grid=np.zeros((4, 4, 3), dtype=np.uint8))


@pytest.mark.parametrize("color,expected", [
    (GOAL_COLOR, TerrainClass.GOAL),
    (BOULDER_COLOR + (255,), TerrainClass.BOULDER),
    (RIVER_COLOR + (0,), TerrainClass.RIVER),
    (BACKGROUND_COLOR, TerrainClass.BACKGROUND),
    (BOUNDARY_COLOR + (0,), TerrainClass.BOUNDARY),
    (GROUND_COLOR, TerrainClass.GROUND),
    ((120, 80, 40), TerrainClass.GROUND),
    ((252, 238, 34), TerrainClass.GROUND),
])
def test_classify_color_is_an_exact_rgb_match(color, expected):
    assert classify_color(color) is expected


def test_from_rgb_reads_the_palette_ignoring_alpha():
    image = np.zeros((2, 3, 4), dtype=np.uint8)
    image[:, :, 3] = 17
    image[0, 0, :3] = GOAL_COLOR
    image[0, 1, :3] = (10, 200, 10)
    image[1, 2, :3] = RIVER_COLOR
    terrain = Terrain.from_rgb(image)
    assert terrain.grid.tolist() == [
        [TerrainClass.GOAL, TerrainClass.GROUND, TerrainClass.BOUNDARY],
        [TerrainClass.BOUNDARY, TerrainClass.BOUNDARY, TerrainClass.RIVER],
    ]


def test_from_rgb_rejects_other_shapes():
    with pytest.raises(ValueError):
        Terrain.from_rgb(np.zeros((4, 4), dtype=np.uint8))


def test_palette_image_classifies_back_to_the_same_grid():
    terrain = generate_terrain(random.Random(3))
    assert np.array_equal(Terrain.from_rgb(terrain.to_rgb()).grid, terrain.grid)


def test_generated_layout():
    terrain = generate_terrain(random.Random(2022))
    assert (terrain.width, terrain.height) == (600, 400)
    assert len(terrain.boulders) == 10
    for b in terrain.boulders:
        assert 8 <= b.r <= 36
        assert 150 <= b.y <= 350

    sky = terrain.grid[:100]
    assert set(np.unique(sky).tolist()) <= {TerrainClass.BACKGROUND, TerrainClass.GOAL}
    # drill rig sits on ground
    assert terrain.classify(90, 102) is TerrainClass.GROUND
    # goal box and its roof, the box dips below the surface
    assert terrain.classify(550, 90) is TerrainClass.GOAL
    assert terrain.classify(550, 101) is TerrainClass.GOAL
    assert terrain.classify(550, 70) is TerrainClass.GOAL
    assert terrain.classify(534, 70) is TerrainClass.BACKGROUND
    # river under the middle of the field
    assert terrain.classify(345, 110) is TerrainClass.RIVER
    assert terrain.classify(345, 180) is not TerrainClass.RIVER


def test_boulders_are_painted_on_the_grid():
    terrain = generate_terrain(random.Random(8))
    for b in terrain.boulders:
        assert terrain.classify(b.x, b.y) is TerrainClass.BOULDER


def test_generation_is_seeded():
    a = generate_terrain(random.Random(77))
    b = generate_terrain(random.Random(77))
    c = generate_terrain(random.Random(78))
    assert np.array_equal(a.grid, b.grid)
    assert a.boulders == b.boulders
    assert a.boulders != c.boulders
