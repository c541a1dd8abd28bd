from .tiles import Cell, Grid, TileType, TILE_CHAR, create_blank_map, in_bounds, is_walkable, make_cell
from .room import Room, Sector, build_sectors, carve_room, find_room_containing, generate_room, room_center
from .corridor import Corridor, build_corridor_pairs, carve_corridor, is_wall_tile
from .generator import Dungeon, generate, place_stairs
from .pathfinding import reachable_from, walkable_tiles

__all__ = [
    "Cell",
    "Grid",
    "TileType",
    "TILE_CHAR",
    "create_blank_map",
    "in_bounds",
    "is_walkable",
    "make_cell",
    "Room",
    "Sector",
    "build_sectors",
    "carve_room",
    "find_room_containing",
    "generate_room",
    "room_center",
    "Corridor",
    "build_corridor_pairs",
    "carve_corridor",
    "is_wall_tile",
    "Dungeon",
    "generate",
    "place_stairs",
    "reachable_from",
    "walkable_tiles",
]
