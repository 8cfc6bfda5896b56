from __future__ import annotations

import numpy as np

from .grid import GameGrid
from .pieces import Shape


def is_valid_placement(grid: GameGrid, shape: Shape, row: int, col: int) -> bool:
    """Check that every occupied cell of `shape` offset by (row, col) is
    inside the grid and lands on an empty cell. Never mutates `grid`."""
    rows, cols = np.nonzero(shape)
    for dr, dc in zip(rows, cols):
        r = row + int(dr)
        c = col + int(dc)
        if not grid.is_inside(r, c):
            return False
        if grid.is_filled(r, c):
            return False
    return True
