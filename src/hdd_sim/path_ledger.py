"""
path_ledger.py: Bookkeeping of the drilled path, pipe connections and pull-backs.
"""

import logging

from .constants import PIPE_LENGTH, SIDE_TRACK_DISTANCE
from .data_models import PathSegment, SimulationState, Vec2

logger = logging.getLogger(__name__)


def record_segment(sim: SimulationState, position: Vec2, direction: Vec2,
                   pipe_length: int = PIPE_LENGTH) -> bool:
    """
    Appends one drilled segment. Returns True when the path just filled a
    whole length of pipe and a new one has to be connected.
    """
    sim.path.append(PathSegment(position=position, direction=direction))
    sim.path_position = len(sim.path) - 1
    return len(sim.path) % pipe_length == 0


def pull_back_boundary(path_position: int, pipe_length: int = PIPE_LENGTH) -> int:
    """Largest pipe-aligned index strictly below path_position."""
    return ((path_position - 1) // pipe_length) * pipe_length


def retract(sim: SimulationState, pipe_length: int = PIPE_LENGTH) -> bool:
    """
    Pulls the string back by one joint of pipe. The retracted segments are
    archived in old_paths and the bit returns to the new last segment.
    Returns False when there is nothing to pull back.
    """
    if not sim.path:
        return False
    boundary = pull_back_boundary(sim.path_position, pipe_length)
    if boundary <= 0:
        return False

    sim.old_paths.append(sim.path[boundary:])
    sim.path = sim.path[:boundary]
    sim.path_position = len(sim.path) - 1
    last = sim.path[sim.path_position]
    sim.position = last.position
    sim.direction = last.direction
    logger.debug("Pulled back to segment %d, %d segments archived",
                 sim.path_position, len(sim.old_paths[-1]))
    return True


def is_side_track(sim: SimulationState, threshold: float = SIDE_TRACK_DISTANCE) -> bool:
    """True when the bit sits next to where the latest abandoned path began."""
    if not sim.old_paths:
        return False
    abandoned = sim.old_paths[-1]
    if not abandoned:
        return False
    return sim.position.dist(abandoned[0].position) < threshold


def register_start(sim: SimulationState, threshold: float = SIDE_TRACK_DISTANCE):
    """Counts a (re)start of drilling and a side-track when branching off an abandoned path."""
    if is_side_track(sim, threshold):
        sim.side_track_count += 1
        logger.info("Side-track count %d", sim.side_track_count)
    sim.start_count += 1
    logger.info("Start count %d", sim.start_count)


def total_drilled(sim: SimulationState) -> int:
    return len(sim.path) + sum(len(p) for p in sim.old_paths)
