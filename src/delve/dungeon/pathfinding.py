from collections import deque
from typing import List, Set, Tuple

from .generator import Dungeon
from .tiles import is_walkable


def walkable_tiles(dungeon: Dungeon) -> List[Tuple[int, int]]:
    """All walkable coordinates, row-major."""
    return [
        (x, y)
        for y, row in enumerate(dungeon.map)
        for x, cell in enumerate(row)
        if is_walkable(cell.type)
    ]


def reachable_from(dungeon: Dungeon, start: Tuple[int, int]) -> Set[Tuple[int, int]]:
    """4-directional flood fill over walkable tiles; empty if start itself is not walkable."""
    if not is_walkable(dungeon.tile_at(*start)):
        return set()
    seen = {start}
    q = deque([start])
    while q:
        x, y = q.popleft()
        for nx, ny in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
            if (nx, ny) not in seen and is_walkable(dungeon.tile_at(nx, ny)):
                seen.add((nx, ny))
                q.append((nx, ny))
    return seen
