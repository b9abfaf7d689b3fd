"""Placement — frame-budgeted wall generation around a moving reference point.

Submodules:
  models     Session config, cell views, records, reports.
  errors     ConfigError / ReentrancyError.
  grid       GridIndex: lattice, exclusion zones, availability.
  cluster    ClusterSampler: biased candidates near existing walls.
  factory    EntityFactory interface and in-memory implementations.
  scheduler  PlacementScheduler: sliced validate/commit loop.
  session    SessionController: Idle/Generating/Complete state machine.
  debug      ASCII overlay of a session.
"""

from .cluster import ClusterSampler
from .debug import render_ascii
from .errors import ConfigError, GridwallError, ReentrancyError
from .factory import CallbackEntityFactory, EntityFactory, RecordingEntityFactory, SpawnedWall
from .grid import GridIndex, grid_to_world, world_to_grid
from .models import (
    GenerationConfig,
    GridCell,
    PlacementRecord,
    PlacementReport,
    SessionState,
    SpawnRequest,
)
from .scheduler import PlacementScheduler
from .session import SessionController

__all__ = [
    "CallbackEntityFactory",
    "ClusterSampler",
    "ConfigError",
    "EntityFactory",
    "GenerationConfig",
    "GridCell",
    "GridIndex",
    "GridwallError",
    "PlacementRecord",
    "PlacementReport",
    "PlacementScheduler",
    "ReentrancyError",
    "RecordingEntityFactory",
    "SessionController",
    "SessionState",
    "SpawnRequest",
    "SpawnedWall",
    "grid_to_world",
    "render_ascii",
    "world_to_grid",
]
