from __future__ import annotations

import numpy as np
import pytest

from blockfall.game import (
    Action,
    BlockFallGame,
    GameConfig,
    Phase,
    Piece,
    TetrominoType,
)
from blockfall.storage import HighScoreTracker, MemoryHighScoreStore

from conftest import fill_row, set_active


def _start_single_clear(game: BlockFallGame) -> None:
    """Row 19 filled except cols 6..9, flat I above the gap."""
    fill_row(game, 19, except_cols=(6, 7, 8, 9))
    set_active(game, TetrominoType.I, row=0, col=6)


def test_new_game_state(game):
    assert game.phase == Phase.RUNNING
    assert game.score == 0 and game.level == 1 and game.lines_cleared == 0
    assert game.grid.is_empty()
    assert (game.active.row, game.active.col, game.active.rotation) == (0, 3, 0)
    assert game.animating_rows == ()


def test_move_until_wall(game):
    set_active(game, TetrominoType.O, col=3)
    moves = 0
    while game.move_left():
        moves += 1
    assert moves == 3
    assert game.active.col == 0
    assert not game.move_horizontal(-1)
    assert game.active.col == 0
    while game.move_right():
        pass
    assert game.active.col == 8


def test_invalid_direction_raises(game):
    with pytest.raises(ValueError):
        game.move_horizontal(2)


@pytest.mark.parametrize("kind", list(TetrominoType))
def test_drop_onto_empty_grid_rests_on_bottom(kind):
    game = BlockFallGame(GameConfig(random_seed=1))
    piece = set_active(game, kind)
    shape = piece.shape()
    last_filled_shape_row = int(np.nonzero(shape.any(axis=1))[0].max())
    expected_row = game.config.height - 1 - last_filled_shape_row

    assert game.hard_drop()
    assert game.score == 2 * expected_row
    filled_rows = np.nonzero(game.grid.cells.any(axis=1))[0]
    assert filled_rows.max() == game.config.height - 1
    assert int((game.grid.cells == int(kind)).sum()) == 4


def test_soft_drop_moves_then_locks(game):
    set_active(game, TetrominoType.O, row=17, col=0)
    next_kind = game.next_kind
    assert game.soft_drop()
    assert game.active.row == 18
    assert not game.soft_drop()
    assert game.grid.cells[18, 0] == int(TetrominoType.O)
    assert game.grid.cells[19, 1] == int(TetrominoType.O)
    assert game.active.kind == next_kind
    assert (game.active.row, game.active.col) == (0, game.spawn_col)
    assert game.score == 0


def test_hard_drop_five_rows_awards_ten(game):
    set_active(game, TetrominoType.O, row=13, col=4)
    assert game.drop_distance() == 5
    game.hard_drop()
    assert game.score == 10
    assert game.lines_cleared == 0


def test_single_line_clear_scenario(game):
    _start_single_clear(game)
    following = game.next_kind
    game.hard_drop()

    assert game.phase == Phase.ANIMATING
    assert game.is_animating
    assert game.animating_rows == (19,)
    assert game.grid.clearing[19].all()
    assert game.score == 36  # hard drop only so far
    assert game.lines_cleared == 0

    assert game.complete_line_clear()
    assert game.score == 36 + 100
    assert game.lines_cleared == 1
    assert game.level == 1
    assert game.grid.is_empty()
    assert not game.grid.clearing.any()
    assert game.phase == Phase.RUNNING
    assert game.active.kind == following


def test_commands_are_locked_while_animating(game):
    _start_single_clear(game)
    game.hard_drop()
    active = game.active
    score = game.score
    assert not game.move_left()
    assert not game.move_right()
    assert not game.rotate()
    assert not game.soft_drop()
    assert not game.hard_drop()
    assert not game.tick()
    assert not game.toggle_pause()
    assert not game.is_valid_move(active)
    assert game.active == active
    assert game.score == score
    assert game.is_animating


def test_complete_line_clear_needs_animation(game):
    assert not game.complete_line_clear()


def test_clear_uses_level_before_level_up(game):
    game.lines_cleared = 8
    # Four-row well in column 9, vertical I above it
    for row in range(16, 20):
        fill_row(game, row, except_cols=(9,))
    set_active(game, TetrominoType.I, rotation=1, row=0, col=7)
    game.hard_drop()
    assert game.animating_rows == (16, 17, 18, 19)
    game.complete_line_clear()
    assert game.lines_cleared == 12
    assert game.level == 2
    assert game.score == 2 * 16 + 800


def test_double_clear_at_higher_level(game):
    game.lines_cleared = 25
    game.level = 3
    fill_row(game, 18, except_cols=(6, 7))
    fill_row(game, 19, except_cols=(6, 7))
    set_active(game, TetrominoType.O, row=0, col=6)
    game.hard_drop()
    game.complete_line_clear()
    assert game.score == 2 * 18 + 300 * 3
    assert game.lines_cleared == 27
    assert game.level == 3


def test_top_out_on_spawn(game):
    game.next_kind = TetrominoType.O
    game.grid.cells[1, 4] = int(TetrominoType.Z)
    set_active(game, TetrominoType.O, row=0, col=0)
    landed = game.active.moved(game.drop_distance(), 0)

    game.hard_drop()

    assert game.is_game_over
    assert game.phase == Phase.GAME_OVER
    assert game.active == landed
    assert game.next_kind == TetrominoType.O
    assert not game.move_left()
    assert not game.rotate()
    assert not game.soft_drop()
    assert not game.hard_drop()
    assert not game.toggle_pause()


def test_top_out_after_line_clear(game):
    _start_single_clear(game)
    game.next_kind = TetrominoType.T
    game.hard_drop()
    game.grid.cells[0, 4] = 1  # shifts to row 1, under the T spawn
    game.complete_line_clear()
    assert game.is_game_over
    assert game.score == 36 + 100


def test_reset_after_game_over(game):
    game.next_kind = TetrominoType.O
    game.grid.cells[1, 4] = int(TetrominoType.Z)
    set_active(game, TetrominoType.O, row=0, col=0)
    game.hard_drop()
    assert game.phase == Phase.GAME_OVER

    assert game.apply(Action.RESET)
    assert game.phase == Phase.RUNNING
    assert not game.is_game_over
    assert game.grid.is_empty()
    assert game.score == 0
    assert game.move_left()


def test_lock_above_visible_grid_is_game_over(game):
    game.grid.cells[1, 0] = 1
    set_active(game, TetrominoType.O, row=-1, col=0)
    assert not game.soft_drop()
    assert game.is_game_over
    assert game.grid.cells[0, 0] == 0


def test_pause_blocks_input_and_gravity(game):
    row = game.active.row
    assert game.toggle_pause()
    assert game.phase == Phase.PAUSED
    assert not game.move_left()
    assert not game.rotate()
    assert not game.hard_drop()
    assert not game.tick()
    assert game.active.row == row
    assert game.toggle_pause()
    assert game.phase == Phase.RUNNING
    assert game.tick()
    assert game.active.row == row + 1


def test_stale_generation_is_ignored(game):
    old = game.generation
    game.reset()
    assert game.generation == old + 1
    assert not game.tick(old)
    assert game.active.row == 0
    assert game.tick(game.generation)

    _start_single_clear(game)
    game.hard_drop()
    assert not game.complete_line_clear(old)
    assert game.is_animating
    assert game.complete_line_clear(game.generation)


def test_reset_clears_state_but_keeps_high_score():
    tracker = HighScoreTracker(MemoryHighScoreStore())
    game = BlockFallGame(GameConfig(random_seed=3), high_scores=tracker)
    _start_single_clear(game)
    game.hard_drop()
    game.toggle_pause()
    game.reset()
    assert game.phase == Phase.RUNNING
    assert game.score == 0 and game.lines_cleared == 0 and game.level == 1
    assert not game.is_animating and game.animating_rows == ()
    assert game.grid.is_empty()
    assert game.high_score == 36
    assert tracker.store.load() == 36


def test_score_never_decreases_during_play():
    game = BlockFallGame(GameConfig(random_seed=99))
    last = 0
    for i in range(400):
        game.apply((Action.MOVE_LEFT, Action.ROTATE, Action.MOVE_RIGHT, Action.HARD_DROP)[i % 4])
        game.complete_line_clear()
        assert game.score >= last
        last = game.score
        if game.is_game_over:
            break


def test_same_seed_same_game():
    def play(seed):
        g = BlockFallGame(GameConfig(random_seed=seed))
        kinds = []
        for _ in range(30):
            kinds.append(g.active.kind)
            g.hard_drop()
            g.complete_line_clear()
        return kinds, g.score, g.grid.cells.copy()

    a, b = play(7), play(7)
    assert a[0] == b[0] and a[1] == b[1]
    assert np.array_equal(a[2], b[2])


def test_apply_routes_commands(game):
    set_active(game, TetrominoType.T, row=5, col=4)
    assert game.apply(Action.MOVE_LEFT) and game.active.col == 3
    assert game.apply(Action.MOVE_RIGHT) and game.active.col == 4
    assert game.apply(Action.ROTATE) and game.active.rotation == 1
    assert game.apply(Action.SOFT_DROP) and game.active.row == 6
    assert game.apply(Action.TOGGLE_PAUSE) and game.is_paused
    assert game.apply(Action.TOGGLE_PAUSE) and not game.is_paused
    assert game.apply(Action.HARD_DROP)
    assert game.apply(Action.RESET) and game.score == 0
    with pytest.raises(ValueError):
        game.apply(42)


def test_snapshot_is_a_copy(game):
    set_active(game, TetrominoType.L, row=2, col=1)
    snap = game.snapshot()
    snap.grid[0, 0] = 7
    assert game.grid.cells[0, 0] == 0
    assert snap.active == game.active
    assert snap.ghost_row == 2 + game.drop_distance()
    assert snap.phase == Phase.RUNNING
    assert int(snap.next_shape.sum()) == 4
    with pytest.raises(AttributeError):
        snap.score = 10


def test_snapshot_cells_during_clear(game):
    _start_single_clear(game)
    game.hard_drop()
    cells = game.snapshot().cells()
    assert all(c.clearing and c.filled for c in cells[19])
    assert cells[19][7].color == "cyan"
    assert not any(c.clearing for c in cells[18])


def test_get_state_overlays_active_piece(game):
    set_active(game, TetrominoType.O, row=0, col=0)
    state = game.get_state()
    assert state[0, 0] == -int(TetrominoType.O)
    assert game.grid.cells[0, 0] == 0
