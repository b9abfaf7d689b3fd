"""PlacementScheduler — frame-budgeted wall placement over a GridIndex.

The scheduler is an explicit state machine rather than a coroutine: all
loop-local state (shuffled candidates, cursor, attempt counter) lives on
the instance, and the host calls ``run_slice()`` once per frame until
``done`` is True.

Per candidate:
    1. pop the next coordinate from the one-time shuffle
    2. maybe swap it for a clustered proposal (kept only if that cell is
       still available)
    3. validate: cell available, point inside the disc and outside the
       safe zone, and >= spacing_unit from every wall
    4. commit via the factory, then block the 3x3 neighbourhood
    5. count the attempt, valid or not

A slice suspends before the next candidate once the slice has run past
``slice_time_budget`` or committed ``max_items_per_slice`` walls.  The
first candidate of a slice always runs, so every slice makes progress.

Stopping early (no candidates left, attempt cap hit) is a normal outcome
reported through PlacementReport.deficiency, never an exception.
"""

from __future__ import annotations

import random
import time
from typing import Callable

from loguru import logger

from .cluster import ClusterSampler
from .factory import EntityFactory
from .grid import GridIndex
from .models import (
    Coord,
    GenerationConfig,
    PlacementRecord,
    PlacementReport,
    SpawnRequest,
    Vec2,
    distance,
)


class PlacementScheduler:
    """Places up to ``config.target_count`` walls, one slice at a time."""

    def __init__(
        self,
        grid: GridIndex,
        sampler: ClusterSampler,
        factory: EntityFactory,
        config: GenerationConfig,
        placements: list[PlacementRecord] | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._grid = grid
        self._sampler = sampler
        self._factory = factory
        self._config = config
        self._clock = clock
        self._rng = rng if rng is not None else random.Random(config.seed)

        # Shared with the SessionController, which owns it
        self.placements: list[PlacementRecord] = placements if placements is not None else []
        self._positions: list[Vec2] = [p.world_position for p in self.placements]

        self._candidates: list[Coord] = grid.available_coords()
        self._rng.shuffle(self._candidates)
        self._cursor = 0

        self._attempts = 0
        self._failures = 0
        self._slices = 0
        self._report: PlacementReport | None = None

    # -- State --------------------------------------------------------------

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def placed_count(self) -> int:
        return len(self._positions)

    @property
    def failures(self) -> int:
        """Candidates dropped because the factory raised."""
        return self._failures

    @property
    def remaining_candidates(self) -> int:
        return len(self._candidates) - self._cursor

    @property
    def slice_count(self) -> int:
        return self._slices

    @property
    def done(self) -> bool:
        return self._report is not None

    @property
    def report(self) -> PlacementReport | None:
        return self._report

    def _stop_reason(self) -> str | None:
        if self.placed_count >= self._config.target_count:
            return "target_reached"
        if self.remaining_candidates <= 0:
            return "candidates_exhausted"
        if self._attempts >= self._config.max_attempts:
            return "attempt_cap"
        return None

    # -- Driving ------------------------------------------------------------

    def run_slice(self) -> list[PlacementRecord]:
        """Do one frame's worth of work.  Returns the walls committed in it."""
        if self._report is not None:
            return []

        slice_start = self._clock()
        committed: list[PlacementRecord] = []
        first = True

        while self._stop_reason() is None:
            if not first:
                if self._clock() - slice_start > self._config.slice_time_budget:
                    break
                if len(committed) >= self._config.max_items_per_slice:
                    break
            first = False

            record = self._try_next()
            if record is not None:
                committed.append(record)

        self._slices += 1
        reason = self._stop_reason()
        if reason is not None:
            self._finish(reason)
        return committed

    def drain(self) -> PlacementReport:
        """Run slices back to back until finished (synchronous callers)."""
        while not self.done:
            self.run_slice()
        return self._report

    # -- Internal -----------------------------------------------------------

    def _try_next(self) -> PlacementRecord | None:
        coord = self._candidates[self._cursor]
        self._cursor += 1
        position = self._grid.grid_to_world(coord)

        clustered = self._sampler.next_candidate(
            position, self._positions, self._config.clustering_probability,
        )
        if clustered != position and self._grid.is_available(
            self._grid.world_to_grid(clustered)
        ):
            position = clustered

        record = None
        if self._validate(position):
            record = self._commit(position)

        self._attempts += 1
        return record

    def _validate(self, position: Vec2) -> bool:
        grid = self._grid
        if not grid.is_available(grid.world_to_grid(position)):
            return False
        # Off-lattice clustered points can round into an available cell
        # while sitting outside the disc or inside the safe zone
        if distance(position, grid.center) > grid.max_radius:
            return False
        if grid.reference is not None and distance(position, grid.reference) < grid.safe_radius:
            return False
        spacing = self._config.spacing_unit
        for placed in self._positions:
            if distance(position, placed) < spacing:
                return False
        return True

    def _commit(self, position: Vec2) -> PlacementRecord | None:
        index = len(self._positions)
        request = SpawnRequest(
            position=position,
            sequence_index=index,
            name=SpawnRequest.make_name(index, position),
            health_range=self._config.health_range,
        )
        try:
            handle = self._factory.create(request)
        except Exception as e:
            self._failures += 1
            logger.error(f"Failed to create wall {request.name}: {e}")
            return None

        record = PlacementRecord(world_position=position, sequence_index=index, handle=handle)
        self.placements.append(record)
        self._positions.append(position)
        self._grid.mark_neighborhood(self._grid.world_to_grid(position))
        return record

    def _finish(self, reason: str) -> None:
        self._report = PlacementReport(
            requested=self._config.target_count,
            placed=self.placed_count,
            attempts=self._attempts,
            slices=self._slices,
            stop_reason=reason,
        )
        if self._report.deficiency > 0:
            logger.warning(
                f"Only placed {self._report.placed}/{self._report.requested} walls "
                f"({reason}, {self._attempts} attempts)"
            )
