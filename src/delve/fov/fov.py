from __future__ import annotations

import logging
import math
from typing import Any, Tuple

from ..dungeon.tiles import Grid, TileType, in_bounds
from .octants import OCTANTS, Transform

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


def is_blocking(tile: TileType) -> bool:
    """Opacity predicate. Only VOID and WALL stop sight; doors are transparent."""
    return tile == TileType.VOID or tile == TileType.WALL


def reset_visibility(grid: Grid) -> None:
    """Clear transient visibility. Permanently lit cells stay visible; visited is untouched."""
    for row in grid:
        for cell in row:
            cell.visible = cell.always_visible
            if cell.always_visible:
                cell.visited = True


def mark_visible(grid: Grid, x: int, y: int) -> None:
    if not in_bounds(grid, x, y):
        return
    cell = grid[y][x]
    cell.visible = True
    cell.visited = True


def scan_octant(
    grid: Grid,
    origin: Coord,
    radius: int,
    transform: Transform,
    row: int,
    start_slope: float,
    end_slope: float,
) -> None:
    """Recursive shadowcasting over one octant.

    Cells are marked before the opacity test, so the face of an obstacle is lit
    while whatever lies behind it stays dark. Out-of-bounds cells count as
    blocking.
    """
    if row > radius or start_slope < end_slope:
        return

    ox, oy = origin
    prev_blocked = False
    saved_start = start_slope

    col = math.floor(row * start_slope)
    last = math.ceil(row * end_slope)
    while col >= last:
        dx, dy = transform(row, col)
        wx = ox + dx
        wy = oy + dy
        inside = in_bounds(grid, wx, wy)
        if inside:
            mark_visible(grid, wx, wy)
        blocked = not inside or is_blocking(grid[wy][wx].type)

        if prev_blocked:
            if not blocked:
                prev_blocked = False
                saved_start = (col + 0.5) / row
        elif blocked:
            prev_blocked = True
            scan_octant(grid, origin, radius, transform, row + 1, saved_start, (col + 0.5) / row)
        col -= 1

    if not prev_blocked:
        scan_octant(grid, origin, radius, transform, row + 1, saved_start, end_slope)


def compute_fov(grid: Grid, origin: Coord, radius: int) -> None:
    """Recompute visibility from origin.

    Resets visible flags, marks the origin, then scans all eight octants.
    Radius 0 lights only the origin. visited only ever grows.
    """
    reset_visibility(grid)
    mark_visible(grid, origin[0], origin[1])
    for transform in OCTANTS:
        scan_octant(grid, origin, radius, transform, 1, 1.0, 0.0)
    logger.debug("FOV from %s radius %d", origin, radius)


def effective_radius(player: Any, base: int) -> int:
    """Sight radius for this computation; blindness reduces it to 0 without touching state."""
    if player.status.blindness > 0:
        return 0
    return base
