"""SessionController — owns one generation session from teardown to complete.

State machine::

    IDLE/COMPLETE --start_session--> GENERATING --(scheduler done)--> COMPLETE
    GENERATING    --abort-->         IDLE

While GENERATING the controller runs two phases, both sliced per host tick:

  teardown   destroy the previous session's walls, newest first, within the
             same time/item budget used for placement
  placing    build the GridIndex (reading the reference point once), then
             run one PlacementScheduler slice per tick

The host drives everything through ``tick()``; nothing here spawns threads.
A second ``start_session()`` while GENERATING raises ReentrancyError and
leaves the running session untouched.

Abort discards the scheduler immediately.  Walls it already committed stay
in the placed list so the next teardown destroys them; teardown pops each
record before destroying its handle, so an interrupted teardown never
destroys the same handle twice.
"""

from __future__ import annotations

import random
import time
from dataclasses import asdict
from typing import Any, Callable

from loguru import logger

from .cluster import ClusterSampler
from .errors import ConfigError, ReentrancyError
from .factory import EntityFactory
from .grid import GridIndex
from .models import (
    GenerationConfig,
    PlacementRecord,
    PlacementReport,
    SessionState,
    Vec2,
)
from .scheduler import PlacementScheduler

PHASE_TEARDOWN = "teardown"
PHASE_PLACING = "placing"


class SessionController:
    """Drives wall generation across host ticks."""

    def __init__(
        self,
        factory: EntityFactory,
        reference_provider: Callable[[], Vec2 | None] | None = None,
        origin: Vec2 = (0.0, 0.0),
        config: GenerationConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._factory = factory
        self._reference_provider = reference_provider
        self._origin = origin
        self._config = config
        self._clock = clock

        self._state = SessionState.IDLE
        self._phase: str | None = None
        self._session_id = 0

        self._placements: list[PlacementRecord] = []
        self._grid: GridIndex | None = None
        self._scheduler: PlacementScheduler | None = None
        self._report: PlacementReport | None = None
        self._rng: random.Random | None = None

    # -- Query surface ------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> str | None:
        return self._phase

    @property
    def session_id(self) -> int:
        return self._session_id

    @property
    def config(self) -> GenerationConfig | None:
        return self._config

    @property
    def grid(self) -> GridIndex | None:
        return self._grid

    @property
    def report(self) -> PlacementReport | None:
        return self._report

    @property
    def placements(self) -> tuple[PlacementRecord, ...]:
        return tuple(self._placements)

    def is_generating(self) -> bool:
        return self._state is SessionState.GENERATING

    def placed_count(self) -> int:
        """Walls placed by the current session.

        Zero while the teardown phase is still clearing the previous
        session's walls.  Outside a session (idle after an abort, or
        complete) this is every wall still tracked for the next teardown.
        """
        if self._phase == PHASE_TEARDOWN:
            return 0
        return len(self._placements)

    # -- Lifecycle ----------------------------------------------------------

    def start_session(self, config: GenerationConfig | None = None) -> None:
        """Begin a new session.  Work happens on subsequent ``tick()`` calls.

        Raises:
            ReentrancyError: a session is already generating.
            ConfigError: the config or factory is unusable; nothing changed.
        """
        if self._state is SessionState.GENERATING:
            raise ReentrancyError(self._state.value)

        config = config if config is not None else (self._config or GenerationConfig())
        config.validate()
        self._check_factory()

        self._config = config
        self._session_id += 1
        self._rng = random.Random(config.seed)
        self._grid = None
        self._scheduler = None
        self._report = None
        self._state = SessionState.GENERATING
        self._phase = PHASE_TEARDOWN

        if config.debug_logs:
            logger.info(
                f"Session {self._session_id}: starting, "
                f"{len(self._placements)} walls to clear first"
            )

    def regenerate(self) -> bool:
        """Start a fresh session with the last config.  False if one is running."""
        if self._state is SessionState.GENERATING:
            logger.warning("Wall generator is still running; wait for it to finish")
            return False
        self.start_session(self._config)
        return True

    def abort(self) -> None:
        """Stop generating now.  Committed walls are left for the next teardown."""
        if self._state is not SessionState.GENERATING:
            return
        logger.info(
            f"Session {self._session_id}: aborted during {self._phase} "
            f"with {len(self._placements)} walls committed"
        )
        self._scheduler = None
        self._phase = None
        self._state = SessionState.IDLE

    def shutdown(self) -> None:
        """Abort and destroy every tracked wall immediately (host is going away)."""
        self.abort()
        while self._placements:
            self._destroy(self._placements.pop())
        self._grid = None
        self._state = SessionState.IDLE

    def tick(self) -> bool:
        """Run one host frame of work.  Returns True while work remains."""
        if self._state is not SessionState.GENERATING:
            return False

        if self._phase == PHASE_TEARDOWN:
            if self._teardown_slice():
                return True
            self._begin_placement()
            return True

        self._scheduler.run_slice()
        if self._scheduler.done:
            self._complete()
            return False
        return True

    def run_until_complete(self, max_ticks: int | None = None) -> int:
        """Tick until the session leaves GENERATING.  Returns ticks used."""
        ticks = 0
        while self.is_generating():
            if max_ticks is not None and ticks >= max_ticks:
                break
            self.tick()
            ticks += 1
        return ticks

    # -- Internal -----------------------------------------------------------

    def _check_factory(self) -> None:
        factory = self._factory
        if factory is None:
            raise ConfigError("factory", "no entity factory assigned")
        for attr in ("create", "destroy"):
            if not callable(getattr(factory, attr, None)):
                raise ConfigError("factory", f"missing callable '{attr}'")

    def _teardown_slice(self) -> bool:
        """Destroy walls within the slice budget.  True if any remain."""
        start = self._clock()
        destroyed = 0
        while self._placements:
            if destroyed:
                if self._clock() - start > self._config.slice_time_budget:
                    return True
                if destroyed >= self._config.max_items_per_slice:
                    return True
            self._destroy(self._placements.pop())
            destroyed += 1
        return False

    def _destroy(self, record: PlacementRecord) -> None:
        try:
            self._factory.destroy(record.handle)
        except Exception as e:
            logger.error(f"Failed to destroy wall #{record.sequence_index}: {e}")

    def _begin_placement(self) -> None:
        config = self._config
        reference = self._reference_provider() if self._reference_provider else None
        center = reference if reference is not None else self._origin

        self._placements.clear()
        self._grid = GridIndex.build(center, config, reference=reference)
        sampler = ClusterSampler(
            self._grid.center, rng=self._rng,
            force_grid_alignment=config.force_grid_alignment,
        )
        self._scheduler = PlacementScheduler(
            self._grid, sampler, self._factory, config,
            placements=self._placements, rng=self._rng, clock=self._clock,
        )
        self._phase = PHASE_PLACING

        if config.debug_logs:
            logger.info(
                f"Grid initialised: {self._grid.available_count}/"
                f"{self._grid.total_cells} cells available around {self._grid.center}"
            )

    def _complete(self) -> None:
        self._report = self._scheduler.report
        self._scheduler = None
        self._phase = None
        self._state = SessionState.COMPLETE
        if self._config.debug_logs:
            logger.info(
                f"Session {self._session_id} complete: "
                f"{self._report.placed}/{self._report.requested} walls"
            )

    def snapshot(self) -> dict[str, Any]:
        """JSON-serialisable view of the session for debugging."""
        return {
            "session_id": self._session_id,
            "state": self._state.value,
            "phase": self._phase,
            "config": asdict(self._config) if self._config is not None else None,
            "grid": self._grid.to_dict() if self._grid is not None else None,
            "placements": [p.to_dict() for p in self._placements],
            "report": self._report.to_dict() if self._report is not None else None,
        }
