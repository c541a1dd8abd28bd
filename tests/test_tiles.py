from delve.dungeon import Cell, TileType, create_blank_map, in_bounds, is_walkable
from delve.fov import is_blocking


def test_blank_map_is_void_and_row_major():
    grid = create_blank_map(5, 3)
    assert len(grid) == 3
    assert all(len(row) == 5 for row in grid)
    assert all(cell.type == TileType.VOID for row in grid for cell in row)
    assert not any(cell.visible or cell.visited or cell.always_visible for row in grid for cell in row)


def test_in_bounds_edges():
    grid = create_blank_map(4, 2)
    assert in_bounds(grid, 0, 0)
    assert in_bounds(grid, 3, 1)
    assert not in_bounds(grid, 4, 0)
    assert not in_bounds(grid, 0, 2)
    assert not in_bounds(grid, -1, 0)
    assert not in_bounds(create_blank_map(0, 0), 0, 0)


def test_walkability_and_opacity_are_independent():
    assert is_walkable(TileType.DOOR)
    assert not is_blocking(TileType.DOOR)
    assert not is_walkable(TileType.WALL)
    assert is_blocking(TileType.WALL)
    assert not is_walkable(TileType.VOID)
    assert is_blocking(TileType.VOID)
    for tile in (TileType.FLOOR, TileType.CORRIDOR, TileType.STAIRS_UP, TileType.STAIRS_DOWN):
        assert is_walkable(tile)
        assert not is_blocking(tile)


def test_cell_to_dict_uses_plain_values():
    cell = Cell(TileType.DOOR, visible=True, visited=True)
    data = cell.to_dict()
    assert data == {"type": 4, "visible": True, "visited": True, "always_visible": False}
    assert Cell.from_dict(data) == cell
