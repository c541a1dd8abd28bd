from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config import TUNING
from ..rng import Rng, create_rng, rand_int
from .corridor import Corridor, build_corridor_pairs, carve_corridor
from .room import Point, Room, build_sectors, carve_room, generate_room
from .tiles import TILE_CHAR, Cell, Grid, TileType, create_blank_map, in_bounds, make_cell

logger = logging.getLogger(__name__)


@dataclass
class Dungeon:
    """One generated level.

    Only the per-cell visibility flags change after generation; a level
    transition replaces the whole object.
    """

    width: int
    height: int
    map: Grid
    rooms: List[Room] = field(default_factory=list)
    corridors: List[Corridor] = field(default_factory=list)
    stairs_up: Point = (0, 0)
    stairs_down: Point = (0, 0)

    def in_bounds(self, x: int, y: int) -> bool:
        return in_bounds(self.map, x, y)

    def tile_at(self, x: int, y: int) -> TileType:
        """Tile type at (x, y); VOID outside the map."""
        if not self.in_bounds(x, y):
            return TileType.VOID
        return self.map[y][x].type

    def cell(self, x: int, y: int) -> Cell:
        return self.map[y][x]

    def render_ascii(self) -> List[str]:
        return ["".join(TILE_CHAR[c.type] for c in row) for row in self.map]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "map": [[c.to_dict() for c in row] for row in self.map],
            "rooms": [r.to_dict() for r in self.rooms],
            "corridors": [c.to_dict() for c in self.corridors],
            "stairs_up": list(self.stairs_up),
            "stairs_down": list(self.stairs_down),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Dungeon":
        return Dungeon(
            width=int(data["width"]),
            height=int(data["height"]),
            map=[[Cell.from_dict(c) for c in row] for row in data["map"]],
            rooms=[Room.from_dict(r) for r in data.get("rooms", [])],
            corridors=[Corridor.from_dict(c) for c in data.get("corridors", [])],
            stairs_up=(int(data["stairs_up"][0]), int(data["stairs_up"][1])),
            stairs_down=(int(data["stairs_down"][0]), int(data["stairs_down"][1])),
        )


def place_stairs(grid: Grid, rooms: Sequence[Room], rng: Rng) -> Tuple[Point, Point]:
    """Stamp STAIRS_UP and STAIRS_DOWN on the centers of two different rooms."""
    up_idx = rand_int(rng, len(rooms))
    down_idx = rand_int(rng, len(rooms))
    while len(rooms) > 1 and down_idx == up_idx:
        down_idx = rand_int(rng, len(rooms))

    stairs_up = rooms[up_idx].center()
    stairs_down = rooms[down_idx].center()
    for (x, y), tile in ((stairs_up, TileType.STAIRS_UP), (stairs_down, TileType.STAIRS_DOWN)):
        if in_bounds(grid, x, y):
            grid[y][x] = make_cell(tile)
    return stairs_up, stairs_down


def generate(
    width: int = TUNING.width,
    height: int = TUNING.height,
    seed: Optional[int] = None,
    dungeon_level: int = 1,
    rng: Optional[Rng] = None,
) -> Dungeon:
    """Generate a complete level: sectors, rooms, corridors, stairs.

    Identical (width, height, seed, dungeon_level) always produce an identical
    dungeon. An explicit rng takes precedence over seed. Degenerate sizes are
    clamped, never rejected.
    """
    if rng is None:
        rng = create_rng(seed)
    width = max(0, width)
    height = max(0, height)
    grid = create_blank_map(width, height)
    sectors = build_sectors(width, height)

    rooms: List[Room] = []
    for sector in sectors:
        room = generate_room(sector, rng, dungeon_level, width, height)
        carve_room(grid, room)
        rooms.append(room)

    corridors: List[Corridor] = []
    for from_idx, to_idx in build_corridor_pairs():
        corridors.append(carve_corridor(grid, rooms[from_idx].center(), rooms[to_idx].center()))

    stairs_up, stairs_down = place_stairs(grid, rooms, rng)
    logger.debug(
        "Generated %dx%d level %d (seed=%s): up=%s down=%s",
        width,
        height,
        dungeon_level,
        seed,
        stairs_up,
        stairs_down,
    )
    return Dungeon(
        width=width,
        height=height,
        map=grid,
        rooms=rooms,
        corridors=corridors,
        stairs_up=stairs_up,
        stairs_down=stairs_down,
    )
