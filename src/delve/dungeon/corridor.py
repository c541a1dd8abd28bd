from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from .room import Point
from .tiles import Grid, TileType, in_bounds, make_cell

SECTOR_COLUMNS = 3
SECTOR_ROWS = 3


@dataclass(frozen=True)
class Corridor:
    """L-shaped connection: horizontal leg start -> bend, vertical leg bend -> end."""

    start: Point
    end: Point
    bend: Point

    def to_dict(self) -> Dict[str, Any]:
        return {"start": list(self.start), "end": list(self.end), "bend": list(self.bend)}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Corridor":
        return Corridor(
            start=(int(data["start"][0]), int(data["start"][1])),
            end=(int(data["end"][0]), int(data["end"][1])),
            bend=(int(data["bend"][0]), int(data["bend"][1])),
        )


def build_corridor_pairs() -> List[Tuple[int, int]]:
    """Grid-adjacency pairs of the 3x3 sector layout (row-major indices).

    Six horizontal pairs followed by six vertical pairs.
    """
    pairs: List[Tuple[int, int]] = []
    for r in range(SECTOR_ROWS):
        for c in range(SECTOR_COLUMNS - 1):
            pairs.append((r * SECTOR_COLUMNS + c, r * SECTOR_COLUMNS + c + 1))
    for r in range(SECTOR_ROWS - 1):
        for c in range(SECTOR_COLUMNS):
            pairs.append((r * SECTOR_COLUMNS + c, (r + 1) * SECTOR_COLUMNS + c))
    return pairs


def is_wall_tile(grid: Grid, x: int, y: int) -> bool:
    if not in_bounds(grid, x, y):
        return False
    return grid[y][x].type == TileType.WALL


def _carve_step(grid: Grid, x: int, y: int) -> None:
    if not in_bounds(grid, x, y):
        return
    tile = grid[y][x].type
    if tile == TileType.VOID:
        grid[y][x] = make_cell(TileType.CORRIDOR)
    elif tile == TileType.WALL:
        grid[y][x] = make_cell(TileType.DOOR)


def carve_corridor(grid: Grid, start: Point, end: Point) -> Corridor:
    """Carve an L path between two points, horizontal leg first.

    VOID becomes CORRIDOR and WALL becomes DOOR; floors, corridors and doors
    already on the path are left as they are.
    """
    sx, sy = start
    ex, ey = end
    bend = (ex, sy)

    step = 1 if ex >= sx else -1
    for x in range(sx, ex + step, step):
        _carve_step(grid, x, sy)
    step = 1 if ey >= sy else -1
    for y in range(sy, ey + step, step):
        _carve_step(grid, ex, y)

    return Corridor(start=start, end=end, bend=bend)
