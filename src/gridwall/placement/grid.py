"""GridIndex — bounded lattice of candidate cells around a center point.

Layout
------
Cells live in flat numpy arrays of shape ``(2R+1, 2R+1)`` addressed by
``[x + R, y + R]`` for grid offsets ``-R <= x, y <= R``.  Each cell's world
position sits at the *center* of its unit square::

    world = center + (x + 0.5, y + 0.5)

so placements never land on exact grid lines.

Availability
------------
A cell starts available iff it is outside the safe radius around the
reference point and inside the placement disc ``R * spacing_unit`` around
the center.  During a session cells only ever go from available to
unavailable.  An insertion-ordered dict mirrors the available flags so the
scheduler can shuffle the candidates in O(available) and removal stays O(1).

Out-of-bounds coordinates are simply unavailable: callers probe the 3x3
neighbourhood of border cells without checking bounds first.
"""

from __future__ import annotations

from typing import Iterator

import numpy as np

from .models import Coord, GenerationConfig, GridCell, Vec2


def grid_to_world(center: Vec2, coord: Coord) -> Vec2:
    """Cell offset -> world position of the cell center."""
    return (center[0] + coord[0] + 0.5, center[1] + coord[1] + 0.5)


def world_to_grid(center: Vec2, position: Vec2) -> Coord:
    """World position -> nearest cell offset (inverse of grid_to_world)."""
    return (
        int(round(position[0] - center[0] - 0.5)),
        int(round(position[1] - center[1] - 0.5)),
    )


class GridIndex:
    """Authoritative availability state for one session."""

    def __init__(
        self,
        center: Vec2,
        radius: int,
        spacing_unit: float,
        safe_radius: float,
        reference: Vec2 | None = None,
    ) -> None:
        self.center: Vec2 = (float(center[0]), float(center[1]))
        self.radius = int(radius)
        self.spacing_unit = float(spacing_unit)
        self.safe_radius = float(safe_radius)
        self.reference: Vec2 | None = (
            (float(reference[0]), float(reference[1])) if reference is not None else None
        )

        offsets = np.arange(-self.radius, self.radius + 1, dtype=np.int64)
        gx, gy = np.meshgrid(offsets, offsets, indexing="ij")
        self._world_x = self.center[0] + gx + 0.5
        self._world_y = self.center[1] + gy + 0.5

        self._dist_center = np.hypot(
            self._world_x - self.center[0], self._world_y - self.center[1]
        )
        if self.reference is None:
            # No player -> the safe zone excludes nothing
            self._dist_reference = np.full(self._world_x.shape, np.inf)
        else:
            self._dist_reference = np.hypot(
                self._world_x - self.reference[0], self._world_y - self.reference[1]
            )

        self._available = (self._dist_reference >= self.safe_radius) & (
            self._dist_center <= self.radius * self.spacing_unit
        )

        # Scan order: x outer, y inner (row-major over [x+R, y+R])
        self._available_coords: dict[Coord, None] = {
            (int(ix) - self.radius, int(iy) - self.radius): None
            for ix, iy in np.argwhere(self._available)
        }

    @classmethod
    def build(
        cls,
        center: Vec2,
        config: GenerationConfig,
        reference: Vec2 | None = None,
    ) -> GridIndex:
        return cls(
            center,
            radius=config.grid_radius,
            spacing_unit=config.spacing_unit,
            safe_radius=config.safe_radius,
            reference=reference,
        )

    # -- Geometry -----------------------------------------------------------

    @property
    def size(self) -> int:
        """Cells per side (2R+1)."""
        return 2 * self.radius + 1

    @property
    def total_cells(self) -> int:
        return self.size * self.size

    @property
    def max_radius(self) -> float:
        return self.radius * self.spacing_unit

    def in_bounds(self, coord: Coord) -> bool:
        return abs(coord[0]) <= self.radius and abs(coord[1]) <= self.radius

    def grid_to_world(self, coord: Coord) -> Vec2:
        return grid_to_world(self.center, coord)

    def world_to_grid(self, position: Vec2) -> Coord:
        return world_to_grid(self.center, position)

    # -- Availability -------------------------------------------------------

    def is_available(self, coord: Coord) -> bool:
        if not self.in_bounds(coord):
            return False
        return bool(self._available[coord[0] + self.radius, coord[1] + self.radius])

    def mark_unavailable(self, coord: Coord) -> bool:
        """Flip a cell to unavailable.  Returns True if it was available."""
        if not self.is_available(coord):
            return False
        self._available[coord[0] + self.radius, coord[1] + self.radius] = False
        self._available_coords.pop((int(coord[0]), int(coord[1])), None)
        return True

    def mark_neighborhood(self, coord: Coord) -> int:
        """Mark ``coord`` and its 8 neighbours unavailable; returns how many changed."""
        changed = 0
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                if self.mark_unavailable((coord[0] + dx, coord[1] + dy)):
                    changed += 1
        return changed

    def available_coords(self) -> list[Coord]:
        """Currently available coordinates in build scan order."""
        return list(self._available_coords)

    @property
    def available_count(self) -> int:
        return len(self._available_coords)

    # -- Cell views ---------------------------------------------------------

    def cell(self, coord: Coord) -> GridCell:
        if not self.in_bounds(coord):
            raise IndexError(f"Cell {coord} outside grid radius {self.radius}")
        ix, iy = coord[0] + self.radius, coord[1] + self.radius
        return GridCell(
            world_position=(float(self._world_x[ix, iy]), float(self._world_y[ix, iy])),
            grid_coord=(int(coord[0]), int(coord[1])),
            available=bool(self._available[ix, iy]),
            dist_to_center=float(self._dist_center[ix, iy]),
            dist_to_reference=float(self._dist_reference[ix, iy]),
        )

    def cells(self) -> Iterator[GridCell]:
        for x in range(-self.radius, self.radius + 1):
            for y in range(-self.radius, self.radius + 1):
                yield self.cell((x, y))

    def to_dict(self) -> dict:
        """Debug snapshot of the grid (JSON-serialisable)."""
        return {
            "center": list(self.center),
            "reference": list(self.reference) if self.reference is not None else None,
            "radius": self.radius,
            "spacing_unit": self.spacing_unit,
            "safe_radius": self.safe_radius,
            "max_radius": self.max_radius,
            "total_cells": self.total_cells,
            "available_count": self.available_count,
            "available": [list(c) for c in self._available_coords],
        }

    def __repr__(self) -> str:
        return (
            f"GridIndex(center={self.center}, radius={self.radius}, "
            f"available={self.available_count}/{self.total_cells})"
        )
