from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


def rotate_clockwise(matrix: Shape) -> Shape:
    """Rotate a square shape matrix 90 degrees clockwise.

    new[x, n - 1 - y] == old[y, x]
    """
    return np.ascontiguousarray(np.rot90(matrix, 1, axes=(1, 0)))


BASE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: np.array(
        [[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]], dtype=np.int8
    ),
    TetrominoType.J: np.array([[1, 0, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.L: np.array([[0, 0, 1], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    TetrominoType.S: np.array([[0, 1, 1], [1, 1, 0], [0, 0, 0]], dtype=np.int8),
    TetrominoType.T: np.array([[0, 1, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.Z: np.array([[1, 1, 0], [0, 1, 1], [0, 0, 0]], dtype=np.int8),
}

PIECE_COLORS: Dict[TetrominoType, str] = {
    TetrominoType.I: "cyan",
    TetrominoType.J: "blue",
    TetrominoType.L: "orange",
    TetrominoType.O: "yellow",
    TetrominoType.S: "green",
    TetrominoType.T: "purple",
    TetrominoType.Z: "red",
}


def piece_shape(kind: TetrominoType, rotation: int = 0) -> Shape:
    # Always rebuilt from the base shape so orientations never drift
    shape = BASE_SHAPES[kind].copy()
    for _ in range(rotation % 4):
        shape = rotate_clockwise(shape)
    return shape


def color_for(value: int) -> str:
    if value == 0:
        return ""
    return PIECE_COLORS[TetrominoType(abs(value))]


def random_kind(rng: random.Random) -> TetrominoType:
    return rng.choice(list(TetrominoType))


@dataclass(frozen=True)
class Piece:
    kind: TetrominoType
    rotation: int = 0  # 0..3
    row: int = 0
    col: int = 0

    def shape(self) -> Shape:
        return piece_shape(self.kind, self.rotation)

    @property
    def color(self) -> str:
        return PIECE_COLORS[self.kind]

    def rotated(self, delta: int = 1) -> "Piece":
        return replace(self, rotation=(self.rotation + delta) % 4)

    def moved(self, d_row: int, d_col: int) -> "Piece":
        return replace(self, row=self.row + d_row, col=self.col + d_col)

    def cells(self) -> List[Tuple[int, int]]:
        """Absolute (row, col) of every occupied cell."""
        s = self.shape()
        h, w = s.shape
        cells: List[Tuple[int, int]] = []
        for dy in range(h):
            for dx in range(w):
                if s[dy, dx]:
                    cells.append((self.row + dy, self.col + dx))
        return cells
