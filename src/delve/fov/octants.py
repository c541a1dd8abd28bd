"""Coordinate transforms for the eight octants of shadowcasting.

Each transform maps octant-local (row, col) to a world offset (dx, dy): row is
the distance along the octant's major axis, col the offset across it.
"""

from typing import Callable, Tuple

Transform = Callable[[int, int], Tuple[int, int]]


def octant0(row: int, col: int) -> Tuple[int, int]:
    return row, -col


def octant1(row: int, col: int) -> Tuple[int, int]:
    return col, -row


def octant2(row: int, col: int) -> Tuple[int, int]:
    return -col, -row


def octant3(row: int, col: int) -> Tuple[int, int]:
    return -row, -col


def octant4(row: int, col: int) -> Tuple[int, int]:
    return -row, col


def octant5(row: int, col: int) -> Tuple[int, int]:
    return -col, row


def octant6(row: int, col: int) -> Tuple[int, int]:
    return col, row


def octant7(row: int, col: int) -> Tuple[int, int]:
    return row, col


OCTANTS: Tuple[Transform, ...] = (
    octant0,
    octant1,
    octant2,
    octant3,
    octant4,
    octant5,
    octant6,
    octant7,
)
