"""Text overlay of a grid session (terminal counterpart of editor gizmos).

Legend:
    #   placed wall
    .   available cell
    -   blocked (next to a wall, or probed out)
    o   inside the safe radius around the reference point
        (blank) outside the placement disc

Rows are printed north-up: highest y first.
"""

from __future__ import annotations

from typing import Iterable

from .grid import GridIndex
from .models import PlacementRecord

WALL = "#"
OPEN = "."
BLOCKED = "-"
SAFE = "o"
OUTSIDE = " "


def render_ascii(grid: GridIndex, placements: Iterable[PlacementRecord] = ()) -> str:
    walls = {grid.world_to_grid(p.world_position) for p in placements}
    rows = []
    for y in range(grid.radius, -grid.radius - 1, -1):
        row = []
        for x in range(-grid.radius, grid.radius + 1):
            cell = grid.cell((x, y))
            if (x, y) in walls:
                row.append(WALL)
            elif cell.dist_to_center > grid.max_radius:
                row.append(OUTSIDE)
            elif cell.dist_to_reference < grid.safe_radius:
                row.append(SAFE)
            elif cell.available:
                row.append(OPEN)
            else:
                row.append(BLOCKED)
        rows.append("".join(row).rstrip())
    return "\n".join(rows)
