from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from .pieces import color_for


Coordinate = Tuple[int, int]  # (row, col)


@dataclass(frozen=True)
class Cell:
    filled: bool
    color: str
    clearing: bool = False


@dataclass
class PlacementResult:
    completed_rows: List[int]
    game_over: bool


class GameGrid:
    """Fixed-size playfield. Row 0 is the top (spawn edge).

    ``cells`` holds 0 for empty cells and the tetromino value of the piece
    that filled the cell otherwise. ``clearing`` flags cells of rows that
    are waiting to be removed. Mutations build new arrays instead of
    writing through ones handed out earlier.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.cells = np.zeros((self.height, self.width), dtype=np.int8)
        self.clearing = np.zeros((self.height, self.width), dtype=np.bool_)

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def is_filled(self, row: int, col: int) -> bool:
        return bool(self.cells[row, col] != 0)

    def cell(self, row: int, col: int) -> Cell:
        value = int(self.cells[row, col])
        return Cell(
            filled=value != 0,
            color=color_for(value),
            clearing=bool(self.clearing[row, col]),
        )

    def place(self, cells: Iterable[Coordinate], value: int) -> PlacementResult:
        """Merge cells with `value` and report the rows that became full.

        Nothing is merged if any cell lies outside the grid (for example
        above row 0) or overlaps a filled cell; that is reported as
        game over.
        """
        cells = list(cells)
        for row, col in cells:
            if not self.is_inside(row, col) or self.cells[row, col] != 0:
                return PlacementResult(completed_rows=[], game_over=True)
        merged = self.cells.copy()
        for row, col in cells:
            merged[row, col] = value
        self.cells = merged
        return PlacementResult(completed_rows=self.full_rows(), game_over=False)

    def full_rows(self) -> List[int]:
        return [int(r) for r in np.where(np.all(self.cells != 0, axis=1))[0]]

    def mark_clearing(self, rows: Sequence[int]) -> None:
        clearing = np.zeros_like(self.clearing)
        for row in rows:
            clearing[row, :] = self.cells[row, :] != 0
        self.clearing = clearing

    def compact(self, rows: Sequence[int]) -> int:
        """Remove `rows` and push empty rows in at the top."""
        if not rows:
            return 0
        num = len(set(rows))
        kept = np.delete(self.cells, list(rows), axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.cells = np.vstack((new_rows, kept))
        self.clearing = np.zeros((self.height, self.width), dtype=np.bool_)
        return num

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.cells != 0, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        return self.height - int(non_empty_rows[0])

    def is_empty(self) -> bool:
        return not bool(np.any(self.cells))

    def clone_state(self) -> np.ndarray:
        return self.cells.copy()


def empty_grid(width: int = 10, height: int = 20) -> GameGrid:
    return GameGrid(width, height)
