from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config import TUNING
from ..rng import Rng
from .tiles import Grid, TileType, in_bounds, make_cell

logger = logging.getLogger(__name__)


Point = Tuple[int, int]


@dataclass(frozen=True)
class Sector:
    """Map sub-region assigned to exactly one room."""

    x: int
    y: int
    width: int
    height: int


@dataclass
class Room:
    """Interior bounds of a room; its walls are carved one tile outside."""

    x: int
    y: int
    width: int
    height: int
    illuminated: bool = False

    def center(self) -> Point:
        return (self.x + self.width // 2, self.y + self.height // 2)

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "illuminated": self.illuminated,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Room":
        return Room(
            x=int(data["x"]),
            y=int(data["y"]),
            width=int(data["width"]),
            height=int(data["height"]),
            illuminated=bool(data.get("illuminated", False)),
        )


def _split(total: int, weights: Sequence[int]) -> List[int]:
    """Divide total into len(weights) parts proportional to weights, summing exactly to total."""
    weight_sum = sum(weights)
    sizes = [total * w // weight_sum for w in weights[:-1]]
    sizes.append(total - sum(sizes))
    return sizes


def build_sectors(
    map_width: int,
    map_height: int,
    column_weights: Sequence[int] = TUNING.column_weights,
    row_weights: Sequence[int] = TUNING.row_weights,
) -> List[Sector]:
    """Divide the map into a 3x3 grid of sectors, row-major.

    With the default weights an 80x22 map splits into columns 26/26/28 and
    rows 7/7/8.
    """
    widths = _split(max(0, map_width), column_weights)
    heights = _split(max(0, map_height), row_weights)
    sectors: List[Sector] = []
    offset_y = 0
    for row_h in heights:
        offset_x = 0
        for col_w in widths:
            sectors.append(Sector(offset_x, offset_y, col_w, row_h))
            offset_x += col_w
        offset_y += row_h
    return sectors


def illumination_chance(dungeon_level: int, dark_level: int = TUNING.dark_level) -> float:
    """Probability that a room is lit: certain on level 1, none from dark_level on."""
    if dungeon_level <= 1:
        return 1.0
    if dungeon_level >= dark_level:
        return 0.0
    return (dark_level - dungeon_level) / float(dark_level - 1)


def _pick_axis(rng: Rng, start: int, span: int, pad: int, min_interior: int) -> Tuple[int, int]:
    """Choose (origin, size) along one axis of a sector."""
    outer = pad + 1
    max_interior = span - outer * 2
    size = min_interior + math.floor(rng() * (max_interior - min_interior + 1))
    size = max(min_interior, min(size, max_interior))
    min_origin = start + outer
    max_origin = start + span - outer - size
    slack = max(0, max_origin - min_origin)
    origin = min_origin + math.floor(rng() * (slack + 1))
    return origin, size


def generate_room(
    sector: Sector,
    rng: Rng,
    dungeon_level: int = 1,
    map_width: Optional[int] = None,
    map_height: Optional[int] = None,
) -> Room:
    """Generate a random room inside a sector.

    Interior is at least min_room_interior on each axis. Degenerate sectors
    are handled by clamping rather than rejecting. When the map size is given
    the room and its wall are also pulled back inside the map.
    """
    pad = TUNING.room_padding
    min_interior = TUNING.min_room_interior
    x, width = _pick_axis(rng, sector.x, sector.width, pad, min_interior)
    y, height = _pick_axis(rng, sector.y, sector.height, pad, min_interior)

    if map_width is not None:
        x = max(1, min(x, map_width - 1 - width))
    if map_height is not None:
        y = max(1, min(y, map_height - 1 - height))

    illuminated = rng() < illumination_chance(dungeon_level)
    return Room(x, y, width, height, illuminated)


def carve_room(grid: Grid, room: Room) -> None:
    """WALL perimeter + FLOOR interior. Cells outside the perimeter are untouched."""
    for dy in range(-1, room.height + 1):
        for dx in range(-1, room.width + 1):
            mx = room.x + dx
            my = room.y + dy
            if not in_bounds(grid, mx, my):
                continue
            perimeter = dx == -1 or dx == room.width or dy == -1 or dy == room.height
            grid[my][mx] = make_cell(TileType.WALL if perimeter else TileType.FLOOR)


def room_center(room: Room) -> Point:
    return room.center()


def find_room_containing(rooms: Sequence[Room], x: int, y: int) -> Optional[Room]:
    for room in rooms:
        if room.contains(x, y):
            return room
    return None
