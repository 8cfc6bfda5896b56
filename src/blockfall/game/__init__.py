"""Game module for Block Fall.

Exports the rules engine and supporting classes:
- GameGrid / Cell: Grid representation, merging and row compaction
- Piece / TetrominoType: Piece catalog with clockwise rotation
- is_valid_placement: Collision check used by every move
- try_rotate: Rotation with the simplified wall-kick table
- ScoringRules: Line-clear, hard-drop and level rules
- BlockFallGame: State machine owning the game state
- GameDriver: Gravity and line-clear timers for an outer loop
"""

from .grid import Cell, GameGrid, empty_grid
from .pieces import Piece, TetrominoType, piece_shape, rotate_clockwise
from .collision import is_valid_placement
from .rotation import WALL_KICK_OFFSETS, try_rotate
from .rules import LINE_CLEAR_ANIMATION_MS, ScoringRules, gravity_interval_ms
from .core import Action, BlockFallGame, GameConfig, GameSnapshot, Phase
from .scheduler import GameDriver

__all__ = [
    "Cell",
    "GameGrid",
    "empty_grid",
    "Piece",
    "TetrominoType",
    "piece_shape",
    "rotate_clockwise",
    "is_valid_placement",
    "WALL_KICK_OFFSETS",
    "try_rotate",
    "LINE_CLEAR_ANIMATION_MS",
    "ScoringRules",
    "gravity_interval_ms",
    "Action",
    "BlockFallGame",
    "GameConfig",
    "GameSnapshot",
    "Phase",
    "GameDriver",
]
