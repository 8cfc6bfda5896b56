from __future__ import annotations

import pytest

from blockfall.game import BlockFallGame, GameConfig, Piece, TetrominoType


@pytest.fixture
def game() -> BlockFallGame:
    return BlockFallGame(GameConfig(random_seed=1234))


def fill_row(game: BlockFallGame, row: int, except_cols=(), value: int = int(TetrominoType.T)) -> None:
    for col in range(game.grid.width):
        if col not in except_cols:
            game.grid.cells[row, col] = value


def set_active(game: BlockFallGame, kind: TetrominoType, rotation: int = 0, row: int = 0, col: int = 3) -> Piece:
    game.active = Piece(kind=kind, rotation=rotation, row=row, col=col)
    return game.active
