import random

import numpy as np
import pytest

from hdd_sim.data_models import GameState, Vec2
from hdd_sim.drill_engine import DrillEngine
from hdd_sim.terrain import Terrain, TerrainClass

WIDTH, HEIGHT = 600, 400


def _engine(terrain=None, **kwargs):
    """Engine on a fixed hand-built terrain, no drilling noise."""
    if terrain is None:
        terrain = Terrain(grid=np.full((HEIGHT, WIDTH), TerrainClass.GROUND, dtype=np.uint8))
    kwargs.setdefault("seed", 42)
    kwargs.setdefault("randomness", 0.0)
    return DrillEngine(terrain_factory=lambda rng: terrain, **kwargs)


def _run_until(engine, predicate, limit=5000):
    for _ in range(limit):
        if predicate(engine):
            return
        engine.step()
    raise AssertionError("condition never reached")


def test_new_engine_is_paused_at_the_rig():
    engine = _engine()
    assert engine.sim.state is GameState.PAUSED
    assert engine.sim.position == Vec2(90.0, 102.0)
    assert engine.sim.path == [] and engine.sim.path_position == -1
    assert engine.button_label() == "start"
    assert len(engine.reflections) == WIDTH - 20


def test_paused_engine_does_not_move():
    engine = _engine()
    for _ in range(10):
        engine.step()
    assert engine.sim.path == []
    assert engine.sim.position == Vec2(90.0, 102.0)


def test_start_and_pause_toggle():
    engine = _engine()
    engine.start_or_pause()
    assert engine.sim.state is GameState.DRILLING
    assert engine.sim.start_count == 1
    assert engine.button_label() == "pause"
    engine.step()
    engine.start_or_pause()
    assert engine.sim.state is GameState.PAUSED
    assert engine.button_label() == "drill"
    engine.start_or_pause()
    assert engine.sim.start_count == 2


def test_toggle_bias_flips_sign():
    engine = _engine()
    engine.toggle_bias()
    assert engine.sim.bias == -1
    engine.toggle_bias()
    assert engine.sim.bias == 1


def test_connection_ignores_start_and_pull_back():
    engine = _engine()
    engine.start_or_pause()
    _run_until(engine, lambda e: e.sim.state is GameState.CONNECTION)
    assert len(engine.sim.path) == 68
    assert engine.status_message() == "*pipe handling*"
    engine.start_or_pause()
    engine.pull_back()
    assert engine.sim.state is GameState.CONNECTION
    assert len(engine.sim.path) == 68


def test_connection_pauses_the_bit_for_the_countdown():
    engine = _engine()
    engine.start_or_pause()
    _run_until(engine, lambda e: len(e.sim.path) == 67)
    engine.step()
    # the step that filled the joint already counted one tick down
    assert engine.sim.state is GameState.CONNECTION
    assert engine.sim.connection_countdown == 4
    position = engine.sim.position
    for _ in range(3):
        engine.step()
        assert engine.sim.state is GameState.CONNECTION
    engine.step()
    assert engine.sim.state is GameState.DRILLING
    assert engine.sim.position == position
    assert len(engine.sim.path) == 68


def test_pull_back_then_restart_counts_a_side_track():
    engine = _engine()
    engine.start_or_pause()
    _run_until(engine, lambda e: len(e.sim.path) == 150)
    engine.pull_back()
    assert engine.sim.state is GameState.PAUSED
    assert len(engine.sim.path) == 136
    assert engine.sim.position == engine.sim.path[-1].position
    assert engine.sim.direction == engine.sim.path[-1].direction

    engine.start_or_pause()
    assert engine.sim.side_track_count == 1
    assert engine.sim.start_count == 2


def test_pull_back_near_the_rig_only_pauses():
    engine = _engine()
    engine.start_or_pause()
    _run_until(engine, lambda e: len(e.sim.path) == 30)
    engine.pull_back()
    assert engine.sim.state is GameState.PAUSED
    assert len(engine.sim.path) == 30
    assert engine.sim.old_paths == []


def test_reaching_the_goal_wins_and_scores_once():
    grid = np.full((HEIGHT, WIDTH), TerrainClass.GROUND, dtype=np.uint8)
    grid[:, 120:] = TerrainClass.GOAL
    engine = _engine(Terrain(grid=grid))
    engine.start_or_pause()
    _run_until(engine, lambda e: e.sim.state.is_terminal)
    assert engine.sim.state is GameState.WIN
    score = engine.final_score
    assert score is not None and score.won
    length = len(engine.sim.path)
    assert score.final_score == 5000 - length - length - 20
    engine.step()
    assert engine.final_score is score
    assert engine.to_client_state()["score"][-1].startswith("FINAL SCORE")


def test_third_boulder_hit_loses():
    grid = np.full((HEIGHT, WIDTH), TerrainClass.GROUND, dtype=np.uint8)
    grid[:, 100:] = TerrainClass.BOULDER
    engine = _engine(Terrain(grid=grid))
    engine.start_or_pause()
    _run_until(engine, lambda e: e.sim.state is GameState.STUCK)
    assert engine.sim.stuck_count == 1
    assert engine.status_message() == "STUCK! (1/3 times)"

    engine.start_or_pause()
    engine.step()
    assert engine.sim.state is GameState.STUCK
    assert engine.sim.stuck_count == 2

    engine.start_or_pause()
    engine.step()
    assert engine.sim.state is GameState.LOSE
    assert engine.sim.stuck_count == 3
    assert engine.final_score.stuck_count == 3
    assert engine.final_score.start_count == 3


def test_new_game_after_the_end_draws_a_new_seed():
    grid = np.full((HEIGHT, WIDTH), TerrainClass.GROUND, dtype=np.uint8)
    grid[:, 100:] = TerrainClass.RIVER
    engine = _engine(Terrain(grid=grid), seed_source=random.Random(7))
    engine.start_or_pause()
    _run_until(engine, lambda e: e.sim.state.is_terminal)
    assert engine.button_label() == "new game"

    expected_seed = random.Random(7).randint(1, 999998)
    engine.start_or_pause()
    assert engine.seed == expected_seed
    assert engine.sim.state is GameState.PAUSED
    assert engine.sim.path == []
    assert engine.sim.start_count == 0
    assert engine.final_score is None


def test_seed_reproduces_terrain_and_reflections():
    a = DrillEngine(seed=1234)
    b = DrillEngine(seed=1234)
    assert np.array_equal(a.terrain.grid, b.terrain.grid)
    assert a.terrain.boulders == b.terrain.boulders
    assert a.reflections == b.reflections


def test_seed_reproduces_drilling_noise():
    paths = []
    for _ in range(2):
        engine = _engine(randomness=80.0, seed=99)
        engine.start_or_pause()
        _run_until(engine, lambda e: len(e.sim.path) == 50)
        paths.append(engine.sim.path)
    assert paths[0] == paths[1]


@pytest.mark.parametrize("value,expected", [(-5.0, 0.0), (42.0, 42.0), (250.0, 100.0)])
def test_randomness_is_clamped(value, expected):
    engine = _engine()
    engine.set_randomness(value)
    assert engine.randomness == expected


def test_score_can_be_queried_mid_run():
    engine = _engine()
    engine.start_or_pause()
    engine.step()
    assert engine.final_score is None
    assert not engine.score().won
