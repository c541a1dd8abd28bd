import json

import pytest

from delve.dungeon import Dungeon, TileType, generate, reachable_from, walkable_tiles


def _serialized(dungeon):
    return json.dumps(dungeon.to_dict(), sort_keys=True)


def test_same_seed_same_dungeon():
    assert _serialized(generate(seed=1)) == _serialized(generate(seed=1))


def test_different_seeds_differ():
    assert _serialized(generate(seed=1)) != _serialized(generate(seed=2))


def test_default_shape():
    dungeon = generate(seed=5)
    assert (dungeon.width, dungeon.height) == (80, 22)
    assert len(dungeon.map) == 22
    assert all(len(row) == 80 for row in dungeon.map)
    assert len(dungeon.rooms) == 9
    assert len(dungeon.corridors) == 12


@pytest.mark.parametrize("seed", range(1, 41))
def test_every_open_tile_reachable_from_stairs_up(seed):
    dungeon = generate(seed=seed)
    assert reachable_from(dungeon, dungeon.stairs_up) == set(walkable_tiles(dungeon))


@pytest.mark.parametrize("seed", [3, 17, 99])
def test_stairs_sit_on_distinct_room_centers(seed):
    dungeon = generate(seed=seed)
    assert dungeon.stairs_up != dungeon.stairs_down
    assert dungeon.tile_at(*dungeon.stairs_up) == TileType.STAIRS_UP
    assert dungeon.tile_at(*dungeon.stairs_down) == TileType.STAIRS_DOWN
    centers = [r.center() for r in dungeon.rooms]
    assert dungeon.stairs_up in centers
    assert dungeon.stairs_down in centers


def test_corridor_bends_follow_the_l_rule():
    dungeon = generate(seed=8)
    for corridor in dungeon.corridors:
        assert corridor.bend == (corridor.end[0], corridor.start[1])


def test_first_level_fully_lit_deep_levels_dark():
    assert all(r.illuminated for r in generate(seed=4, dungeon_level=1).rooms)
    assert not any(r.illuminated for r in generate(seed=4, dungeon_level=7).rooms)


def test_injected_rng_drives_generation(seq):
    a = generate(rng=seq(0.1, 0.7, 0.3, 0.9))
    b = generate(rng=seq(0.1, 0.7, 0.3, 0.9))
    assert a.to_dict() == b.to_dict()


def test_no_visibility_flags_after_generation():
    dungeon = generate(seed=11)
    assert not any(c.visible or c.visited or c.always_visible for row in dungeon.map for c in row)


@pytest.mark.parametrize("size", [(0, 0), (1, 1), (5, 5), (12, 4), (-4, 10)])
def test_degenerate_sizes_never_raise(size):
    width, height = size
    dungeon = generate(width=width, height=height, seed=3)
    assert len(dungeon.rooms) == 9
    assert dungeon.tile_at(-1, -1) == TileType.VOID


def test_dungeon_from_dict_restores_layout():
    dungeon = generate(seed=21, dungeon_level=3)
    restored = Dungeon.from_dict(json.loads(_serialized(dungeon)))
    assert restored.render_ascii() == dungeon.render_ascii()
    assert restored.rooms == dungeon.rooms
    assert restored.stairs_up == dungeon.stairs_up


def test_tile_at_outside_is_void():
    dungeon = generate(seed=2)
    assert dungeon.tile_at(80, 0) == TileType.VOID
    assert dungeon.tile_at(0, 22) == TileType.VOID
    assert not dungeon.in_bounds(-1, 5)
