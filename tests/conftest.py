import itertools
import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from delve.dungeon import Dungeon, Room, TileType, carve_room, create_blank_map, make_cell  # noqa: E402
from delve.game.models import GameState  # noqa: E402
from delve.game.player import create_player  # noqa: E402
from delve.rng import Mulberry32  # noqa: E402


class Scripted:
    """Replays a fixed list of draws, cycling when it runs out."""

    def __init__(self, *values):
        self.values = list(values)
        self._it = itertools.cycle(self.values)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return next(self._it)


@pytest.fixture
def seq():
    return Scripted


@pytest.fixture
def make_state():
    """Single open room filling the map with stairs in opposite corners.

    Interior spans (1, 1) to (width - 2, height - 2). No monsters, gold or items.
    """

    def factory(width=20, height=11, player_pos=(5, 5), rng=None):
        grid = create_blank_map(width, height)
        room = Room(1, 1, width - 2, height - 2, illuminated=False)
        carve_room(grid, room)
        grid[1][1] = make_cell(TileType.STAIRS_UP)
        grid[height - 2][width - 2] = make_cell(TileType.STAIRS_DOWN)
        dungeon = Dungeon(
            width=width,
            height=height,
            map=grid,
            rooms=[room],
            stairs_up=(1, 1),
            stairs_down=(width - 2, height - 2),
        )
        rng = rng if rng is not None else Mulberry32(7)
        player = create_player(player_pos[0], player_pos[1], Mulberry32(1))
        return GameState(dungeon=dungeon, player=player, rng=rng)

    return factory
