from __future__ import annotations

from typing import Optional, Tuple

from .collision import is_valid_placement
from .grid import GameGrid
from .pieces import Piece


# Column shifts tried in order when an in-place rotation is blocked.
# A deliberately small table: no row kicks and no per-piece SRS data.
WALL_KICK_OFFSETS: Tuple[int, ...] = (-1, 1, -2, 2)


def try_rotate(grid: GameGrid, piece: Piece) -> Optional[Piece]:
    """Rotate `piece` one step clockwise, kicking sideways if needed.

    Returns the rotated (and possibly shifted) piece, or None when the
    rotation fits nowhere.
    """
    rotated = piece.rotated(1)
    shape = rotated.shape()
    if is_valid_placement(grid, shape, rotated.row, rotated.col):
        return rotated
    for kick in WALL_KICK_OFFSETS:
        if is_valid_placement(grid, shape, rotated.row, rotated.col + kick):
            return rotated.moved(0, kick)
    return None
