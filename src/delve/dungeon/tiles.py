from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List


class TileType(IntEnum):
    VOID = 0
    WALL = 1
    FLOOR = 2
    CORRIDOR = 3
    DOOR = 4
    STAIRS_UP = 5
    STAIRS_DOWN = 6


TILE_CHAR: Dict[TileType, str] = {
    TileType.VOID: " ",
    TileType.WALL: "#",
    TileType.FLOOR: ".",
    TileType.CORRIDOR: "+",
    TileType.DOOR: "+",
    TileType.STAIRS_UP: "<",
    TileType.STAIRS_DOWN: ">",
}

WALKABLE = frozenset(
    {
        TileType.FLOOR,
        TileType.CORRIDOR,
        TileType.DOOR,
        TileType.STAIRS_UP,
        TileType.STAIRS_DOWN,
    }
)


def is_walkable(tile: TileType) -> bool:
    """Whether an actor may step onto the tile.

    Independent from fov.is_blocking: a door is walkable and transparent,
    void is neither.
    """
    return tile in WALKABLE


@dataclass
class Cell:
    """One map square.

    - visible: recomputed on every FOV pass.
    - visited: sticky once set.
    - always_visible: permanently lit (illuminated rooms); stays visible
      across every FOV recompute.
    """

    type: TileType
    visible: bool = False
    visited: bool = False
    always_visible: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": int(self.type),
            "visible": self.visible,
            "visited": self.visited,
            "always_visible": self.always_visible,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Cell":
        return Cell(
            type=TileType(int(data["type"])),
            visible=bool(data.get("visible", False)),
            visited=bool(data.get("visited", False)),
            always_visible=bool(data.get("always_visible", False)),
        )


Grid = List[List[Cell]]  # grid[y][x]


def make_cell(tile: TileType) -> Cell:
    return Cell(type=tile)


def create_blank_map(width: int, height: int) -> Grid:
    """A height x width grid of VOID cells, indexed grid[y][x]."""
    return [[make_cell(TileType.VOID) for _ in range(width)] for _ in range(height)]


def in_bounds(grid: Grid, x: int, y: int) -> bool:
    return 0 <= y < len(grid) and 0 <= x < (len(grid[0]) if grid else 0)
