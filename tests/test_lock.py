from __future__ import annotations

import numpy as np
import pytest

from conftest import fill_row
from falling_blocks.game import (
    GameGrid,
    Piece,
    Position,
    ScoringRules,
    TetrominoType,
    clear_completed_rows,
    lock_piece,
)


def test_lock_writes_kind_and_color(empty_grid):
    piece = Piece(TetrominoType.O, color=(11, 22, 33))
    result = lock_piece(empty_grid, piece, Position(0, 18))
    assert not result.game_over
    locked = result.grid
    for x, y in [(0, 18), (1, 18), (0, 19), (1, 19)]:
        assert locked.is_occupied(x, y)
        assert locked.cells[y, x] == int(TetrominoType.O)
        assert locked.color_at(x, y) == "rgb(11, 22, 33)"
    assert locked.filled_count() == 4
    # Input grid is not modified
    assert empty_grid.filled_count() == 0


def test_lock_above_the_board_is_game_over(empty_grid):
    fill_row(empty_grid, 19, skip=[0])
    before = empty_grid.clone_state()
    result = lock_piece(empty_grid, Piece(TetrominoType.I).rotated(), Position(0, -1))
    assert result.game_over
    assert result.grid is None
    assert np.array_equal(empty_grid.cells, before)


def test_clear_without_full_rows_is_identity(empty_grid):
    fill_row(empty_grid, 19, skip=[3])
    cleared, count = clear_completed_rows(empty_grid)
    assert count == 0
    assert np.array_equal(cleared.cells, empty_grid.cells)
    assert cleared is not empty_grid


def test_clear_single_row_shifts_rows_down(empty_grid):
    fill_row(empty_grid, 19, skip=[0])
    empty_grid.fill(0, 19, 2, (5, 5, 5))
    empty_grid.fill(7, 18, 3, (7, 7, 7))
    cleared, count = clear_completed_rows(empty_grid)
    assert count == 1
    assert cleared.height == 20
    assert cleared.cells.shape == (20, 10)
    assert cleared.is_occupied(7, 19)
    assert cleared.color_at(7, 19) == "rgb(7, 7, 7)"
    assert cleared.filled_count() == 1
    assert not cleared.cells[0].any()


def test_clear_non_adjacent_rows_keeps_order(empty_grid):
    fill_row(empty_grid, 19)
    fill_row(empty_grid, 17)
    empty_grid.fill(1, 18, 4, (1, 1, 1))
    empty_grid.fill(2, 16, 5, (1, 1, 1))
    cleared, count = clear_completed_rows(empty_grid)
    assert count == 2
    assert cleared.cells[19, 1] == 4
    assert cleared.cells[18, 2] == 5
    assert cleared.filled_count() == 2


@pytest.mark.parametrize("seed", range(6))
def test_clear_preserves_row_count_and_surviving_rows(seed):
    rng = np.random.default_rng(seed)
    grid = GameGrid.empty(10, 20)
    for y in range(20):
        if rng.random() < 0.3:
            fill_row(grid, y)
        else:
            for x in range(10):
                if rng.random() < 0.5:
                    grid.fill(x, y, 1, (3, 3, 3))
    full = grid.complete_rows().tolist()
    survivors = [grid.cells[y].copy() for y in range(20) if y not in full]

    cleared, count = clear_completed_rows(grid)

    assert count == len(full)
    assert cleared.cells.shape == (20, 10)
    assert cleared.colors.shape == (20, 10, 3)
    assert not cleared.cells[:count].any()
    for expected, actual in zip(survivors, cleared.cells[count:]):
        assert np.array_equal(expected, actual)


def test_scoring_is_linear():
    rules = ScoringRules()
    assert rules.score_for_lines(0) == 0
    assert rules.score_for_lines(1) == 100
    assert rules.score_for_lines(4) == 400
    assert ScoringRules(points_per_line=10).score_for_lines(3) == 30


def test_complete_rows_lists_full_rows_top_to_bottom(empty_grid):
    fill_row(empty_grid, 19)
    fill_row(empty_grid, 18, skip=[5])
    fill_row(empty_grid, 12)
    assert empty_grid.complete_rows().tolist() == [12, 19]
    assert GameGrid.empty(10, 20).complete_rows().size == 0
