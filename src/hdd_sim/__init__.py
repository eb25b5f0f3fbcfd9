from .data_models import GameState, Vec2, PathSegment, Boulder, SimulationState
from .terrain import Terrain, TerrainClass, generate_terrain
from .drill_core import DrillCore
from .drill_engine import DrillEngine
from .scoring import ScoreBreakdown, compute_score, score_run
__all__ = ["GameState", "Vec2", "PathSegment", "Boulder", "SimulationState",
           "Terrain", "TerrainClass", "generate_terrain", "DrillCore", "DrillEngine",
           "ScoreBreakdown", "compute_score", "score_run"]
