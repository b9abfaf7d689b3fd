"""Placement dataclasses: session config, cells, records and reports."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from .errors import ConfigError

if TYPE_CHECKING:
    from gridwall.config import Settings


Vec2 = tuple[float, float]
Coord = tuple[int, int]


class SessionState(Enum):
    """Lifecycle of a generation session."""
    IDLE = "idle"
    GENERATING = "generating"
    COMPLETE = "complete"


# ── Session input ──────────────────────────────────────────────────


@dataclass(frozen=True)
class GenerationConfig:
    """Read-only snapshot of everything one session needs."""

    target_count: int = 15
    grid_radius: int = 20
    spacing_unit: float = 1.0
    safe_radius: float = 5.0
    clustering_probability: float = 0.3
    max_attempts_multiplier: int = 20
    slice_time_budget: float = 0.016       # seconds per host tick
    max_items_per_slice: int = 5
    health_range: tuple[int, int] | None = (25, 60)
    force_grid_alignment: bool = True
    seed: int | None = None
    debug_logs: bool = False

    @property
    def max_attempts(self) -> int:
        return self.target_count * self.max_attempts_multiplier

    @property
    def max_radius(self) -> float:
        """World-space radius of the placement disc."""
        return self.grid_radius * self.spacing_unit

    def validate(self) -> GenerationConfig:
        """Raise ConfigError for the first out-of-range field, else return self."""
        if self.target_count < 1:
            raise ConfigError("target_count", f"must be >= 1, got {self.target_count}")
        if self.grid_radius < 1:
            raise ConfigError("grid_radius", f"must be >= 1, got {self.grid_radius}")
        if not self.spacing_unit > 0:
            raise ConfigError("spacing_unit", f"must be > 0, got {self.spacing_unit}")
        if not self.safe_radius >= 0:
            raise ConfigError("safe_radius", f"must be >= 0, got {self.safe_radius}")
        if not 0.0 <= self.clustering_probability <= 1.0:
            raise ConfigError(
                "clustering_probability",
                f"must be in [0, 1], got {self.clustering_probability}",
            )
        if self.max_attempts_multiplier < 1:
            raise ConfigError(
                "max_attempts_multiplier",
                f"must be >= 1, got {self.max_attempts_multiplier}",
            )
        if not self.slice_time_budget > 0:
            raise ConfigError(
                "slice_time_budget", f"must be > 0, got {self.slice_time_budget}",
            )
        if self.max_items_per_slice < 1:
            raise ConfigError(
                "max_items_per_slice", f"must be >= 1, got {self.max_items_per_slice}",
            )
        if self.health_range is not None:
            lo, hi = self.health_range
            if lo < 0 or hi < lo:
                raise ConfigError(
                    "health_range", f"need 0 <= min <= max, got {self.health_range}",
                )
        return self

    @classmethod
    def from_settings(cls, settings: Settings) -> GenerationConfig:
        """Map environment-level Settings onto a session snapshot."""
        health = (
            (settings.min_health, settings.max_health)
            if settings.randomize_health else None
        )
        return cls(
            target_count=settings.wall_count,
            grid_radius=settings.grid_size,
            spacing_unit=settings.grid_spacing,
            safe_radius=settings.safe_radius,
            clustering_probability=settings.grouping_factor,
            max_attempts_multiplier=settings.max_placement_attempts,
            slice_time_budget=settings.max_generation_time_per_frame,
            max_items_per_slice=settings.max_walls_per_frame,
            health_range=health,
            force_grid_alignment=settings.force_grid_alignment,
            seed=settings.seed,
            debug_logs=settings.debug_logs,
        )


# ── Grid and placement records ─────────────────────────────────────


@dataclass(frozen=True)
class GridCell:
    """One lattice position, materialised from the GridIndex arrays."""

    world_position: Vec2
    grid_coord: Coord
    available: bool
    dist_to_center: float
    dist_to_reference: float


@dataclass(frozen=True)
class SpawnRequest:
    """What the entity factory is asked to create."""

    position: Vec2
    sequence_index: int
    name: str
    health_range: tuple[int, int] | None = None

    @staticmethod
    def make_name(index: int, position: Vec2) -> str:
        return f"GridWall_{index:03d}_({position[0]:.1f},{position[1]:.1f})"


@dataclass
class PlacementRecord:
    """A committed placement.  ``handle`` is kept only for teardown."""

    world_position: Vec2
    sequence_index: int
    handle: Any = field(default=None, compare=False, repr=False)

    def to_dict(self) -> dict:
        return {
            "sequence_index": self.sequence_index,
            "position": list(self.world_position),
        }


@dataclass(frozen=True)
class PlacementReport:
    """Outcome of one placement run."""

    requested: int
    placed: int
    attempts: int
    slices: int
    stop_reason: str   # target_reached, candidates_exhausted, attempt_cap

    @property
    def deficiency(self) -> int:
        return self.requested - self.placed

    @property
    def complete(self) -> bool:
        return self.deficiency == 0

    def to_dict(self) -> dict:
        return {
            "requested": self.requested,
            "placed": self.placed,
            "deficiency": self.deficiency,
            "attempts": self.attempts,
            "slices": self.slices,
            "stop_reason": self.stop_reason,
        }


def distance(a: Vec2, b: Vec2) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])
