from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple

import numpy as np

from blockfall.storage import HighScoreTracker

from .collision import is_valid_placement
from .grid import Cell, GameGrid
from .pieces import Piece, Shape, TetrominoType, piece_shape, random_kind
from .rotation import try_rotate
from .rules import ScoringRules


logger = logging.getLogger(__name__)


class Action(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    SOFT_DROP = 2
    ROTATE = 3
    HARD_DROP = 4
    TOGGLE_PAUSE = 5
    RESET = 6


class Phase(IntEnum):
    RUNNING = 0
    PAUSED = 1
    ANIMATING = 2
    GAME_OVER = 3


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_row: int = 0


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only copy of the engine state for presentation."""

    grid: np.ndarray
    clearing: np.ndarray
    active: Piece
    active_shape: Shape
    ghost_row: int
    next_kind: TetrominoType
    next_shape: Shape
    score: int
    high_score: int
    level: int
    lines_cleared: int
    is_game_over: bool
    is_paused: bool
    is_animating: bool
    animating_rows: Tuple[int, ...]
    phase: Phase

    def cells(self) -> List[List[Cell]]:
        view = GameGrid(self.grid.shape[1], self.grid.shape[0])
        view.cells = self.grid
        view.clearing = self.clearing
        return [[view.cell(r, c) for c in range(view.width)] for r in range(view.height)]


class BlockFallGame:
    """Rules engine: grid, active piece, line clears, scoring and top-out.

    Every command returns False instead of raising when it is illegal in
    the current phase or blocked by the grid. The line-clear animation is
    a phase of its own: placement marks full rows and enters ANIMATING,
    and the outer loop later calls :meth:`complete_line_clear` to compact
    the grid, score the clear and spawn the next piece.

    ``generation`` changes on every reset. Time-driven callers pass the
    value they saw when scheduling so a late timer cannot touch a new game.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        high_scores: Optional[HighScoreTracker] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.high_scores = high_scores or HighScoreTracker()
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.width, self.config.height)
        self.generation = 0
        self.active: Piece = Piece(TetrominoType.I)
        self.next_kind = TetrominoType.I
        self.score = 0
        self.level = 1
        self.lines_cleared = 0
        self.is_game_over = False
        self.is_paused = False
        self.is_animating = False
        self.animating_rows: Tuple[int, ...] = ()
        self.reset()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def phase(self) -> Phase:
        if self.is_game_over:
            return Phase.GAME_OVER
        if self.is_animating:
            return Phase.ANIMATING
        if self.is_paused:
            return Phase.PAUSED
        return Phase.RUNNING

    @property
    def high_score(self) -> int:
        return self.high_scores.best

    @property
    def spawn_col(self) -> int:
        return self.config.width // 2 - 2

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.generation += 1
        self.grid = GameGrid(self.config.width, self.config.height)
        self.active = self._spawn_piece(random_kind(self.rng))
        self.next_kind = random_kind(self.rng)
        self.score = 0
        self.level = 1
        self.lines_cleared = 0
        self.is_game_over = False
        self.is_paused = False
        self.is_animating = False
        self.animating_rows = ()
        logger.debug("New game (generation %d): active=%s next=%s",
                     self.generation, self.active.kind.name, self.next_kind.name)

    def is_valid_move(self, piece: Piece) -> bool:
        # Nothing moves while rows are being cleared
        if self.is_animating:
            return False
        return is_valid_placement(self.grid, piece.shape(), piece.row, piece.col)

    def _accepts_input(self) -> bool:
        return not (self.is_game_over or self.is_paused or self.is_animating)

    def _is_current(self, generation: Optional[int]) -> bool:
        return generation is None or generation == self.generation

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def move_horizontal(self, direction: int) -> bool:
        if direction not in (-1, 1):
            raise ValueError(f"direction must be -1 or +1, got {direction!r}")
        if not self._accepts_input():
            return False
        candidate = self.active.moved(0, direction)
        if not self.is_valid_move(candidate):
            return False
        self.active = candidate
        return True

    def move_left(self) -> bool:
        return self.move_horizontal(-1)

    def move_right(self) -> bool:
        return self.move_horizontal(1)

    def rotate(self) -> bool:
        if not self._accepts_input():
            return False
        rotated = try_rotate(self.grid, self.active)
        if rotated is None:
            return False
        self.active = rotated
        return True

    def soft_drop(self) -> bool:
        """Move down one row; lock the piece if it cannot move.

        Returns True only if the piece moved.
        """
        if not self._accepts_input():
            return False
        candidate = self.active.moved(1, 0)
        if self.is_valid_move(candidate):
            self.active = candidate
            return True
        self._lock_piece()
        return False

    def hard_drop(self) -> bool:
        if not self._accepts_input():
            return False
        distance = self.drop_distance()
        self.active = self.active.moved(distance, 0)
        self._award(self.rules.score_for_hard_drop(distance))
        self._lock_piece()
        return True

    def toggle_pause(self) -> bool:
        if self.is_game_over or self.is_animating:
            return False
        self.is_paused = not self.is_paused
        return True

    def tick(self, generation: Optional[int] = None) -> bool:
        """Gravity step. Ignored if scheduled for an earlier game."""
        if not self._is_current(generation):
            return False
        return self.soft_drop()

    def apply(self, action: Action) -> bool:
        if action == Action.MOVE_LEFT:
            return self.move_left()
        if action == Action.MOVE_RIGHT:
            return self.move_right()
        if action == Action.SOFT_DROP:
            return self.soft_drop()
        if action == Action.ROTATE:
            return self.rotate()
        if action == Action.HARD_DROP:
            return self.hard_drop()
        if action == Action.TOGGLE_PAUSE:
            return self.toggle_pause()
        if action == Action.RESET:
            self.reset()
            return True
        raise ValueError(f"Unknown action: {action!r}")

    # ------------------------------------------------------------------
    # Placement and line clears
    # ------------------------------------------------------------------
    def drop_distance(self) -> int:
        distance = 0
        while self.is_valid_move(self.active.moved(distance + 1, 0)):
            distance += 1
        return distance

    def _lock_piece(self) -> None:
        result = self.grid.place(self.active.cells(), int(self.active.kind))
        if result.game_over:
            self._end_game("piece locked outside the visible grid")
            return
        if result.completed_rows:
            self.grid.mark_clearing(result.completed_rows)
            self.is_animating = True
            self.animating_rows = tuple(result.completed_rows)
            logger.debug("Rows %s complete, clearing", list(self.animating_rows))
            return
        self._spawn_next()

    def complete_line_clear(self, generation: Optional[int] = None) -> bool:
        """Finish a pending line clear: compact, score, level up, spawn."""
        if not self._is_current(generation) or not self.is_animating:
            return False
        rows = self.animating_rows
        level_at_clear = self.level
        self.grid.compact(rows)
        self.lines_cleared += len(rows)
        self._award(self.rules.score_for_lines(len(rows), level_at_clear))
        self.level = self.rules.level_for_lines(self.lines_cleared)
        if self.level != level_at_clear:
            logger.debug("Level up: %d -> %d", level_at_clear, self.level)
        self.is_animating = False
        self.animating_rows = ()
        self._spawn_next()
        return True

    def _spawn_piece(self, kind: TetrominoType) -> Piece:
        return Piece(kind=kind, rotation=0, row=self.config.spawn_row, col=self.spawn_col)

    def _spawn_next(self) -> bool:
        candidate = self._spawn_piece(self.next_kind)
        if not is_valid_placement(self.grid, candidate.shape(), candidate.row, candidate.col):
            self._end_game(f"no room to spawn {candidate.kind.name}")
            return False
        self.active = candidate
        self.next_kind = random_kind(self.rng)
        return True

    def _award(self, points: int) -> None:
        if points <= 0:
            return
        self.score += points
        self.high_scores.submit(self.score)

    def _end_game(self, reason: str) -> None:
        self.is_game_over = True
        logger.info("Game over (%s). Score %d, lines %d, level %d",
                    reason, self.score, self.lines_cleared, self.level)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            grid=self.grid.cells.copy(),
            clearing=self.grid.clearing.copy(),
            active=self.active,
            active_shape=self.active.shape(),
            ghost_row=self.active.row + self.drop_distance(),
            next_kind=self.next_kind,
            next_shape=piece_shape(self.next_kind, 0),
            score=self.score,
            high_score=self.high_score,
            level=self.level,
            lines_cleared=self.lines_cleared,
            is_game_over=self.is_game_over,
            is_paused=self.is_paused,
            is_animating=self.is_animating,
            animating_rows=self.animating_rows,
            phase=self.phase,
        )

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        if not (self.is_game_over or self.is_animating):
            for row, col in self.active.cells():
                if self.grid.is_inside(row, col):
                    # Use negative to indicate falling piece overlay
                    state[row, col] = -int(self.active.kind)
        return state
