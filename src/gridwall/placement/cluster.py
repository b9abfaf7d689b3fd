"""ClusterSampler — biases new candidates toward existing placements.

Uniform scatter looks artificial; walls read better in loose clumps.  With
probability ``p`` the sampler swaps the scheduler's grid pick for a point
1-3 cells away from a random existing wall, on the side facing the grid
pick.  The result is only a proposal: the scheduler re-validates it
against the grid before using it.
"""

from __future__ import annotations

import math
import random
from typing import Sequence

from .grid import grid_to_world, world_to_grid
from .models import Vec2

# Below this the seed and the base position are treated as coincident
_MIN_DIRECTION = 0.001

CLUSTER_MIN_CELLS = 1
CLUSTER_MAX_CELLS = 3


class ClusterSampler:
    """Proposes clustered candidates.  Never reads or writes the grid."""

    def __init__(
        self,
        origin: Vec2,
        rng: random.Random | None = None,
        force_grid_alignment: bool = True,
    ) -> None:
        self._origin = origin
        self._rng = rng if rng is not None else random.Random()
        self._align = force_grid_alignment

    def next_candidate(
        self,
        base_position: Vec2,
        placed_positions: Sequence[Vec2],
        probability: float,
    ) -> Vec2:
        if not placed_positions:
            return base_position
        if self._rng.random() >= probability:
            return base_position

        seed = placed_positions[self._rng.randrange(len(placed_positions))]
        dx = base_position[0] - seed[0]
        dy = base_position[1] - seed[1]
        length = math.hypot(dx, dy)
        if length < _MIN_DIRECTION:
            angle = self._rng.uniform(0.0, 2.0 * math.pi)
            dx, dy = math.cos(angle), math.sin(angle)
        else:
            dx, dy = dx / length, dy / length

        cells = self._rng.randint(CLUSTER_MIN_CELLS, CLUSTER_MAX_CELLS)
        candidate = (seed[0] + dx * cells, seed[1] + dy * cells)

        if self._align:
            candidate = grid_to_world(self._origin, world_to_grid(self._origin, candidate))
        return candidate
